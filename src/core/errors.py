"""
MassBan - Error Types
=====================

Every failure the bot can hit maps to one of these exceptions.

DESIGN:
    None of these are retried. Whoever raises one expects the run to stop,
    and the session controller has already released the chat connection
    by the time any of them leaves it.
"""

from typing import Optional


class MassBanError(Exception):
    """Base class for all bot failures."""

    pass


class ConfigurationError(MassBanError):
    """Missing .env file, empty credentials or a missing list URL."""

    pass


class ChatConnectionError(MassBanError, ConnectionError):
    """Chat connection could not be established (includes rate limiting)."""

    pass


class RemoteFetchError(MassBanError):
    """
    Remote list could not be downloaded.

    Attributes:
        url: The list URL.
        status: HTTP status, or None when the request never completed.
    """

    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        if status is not None:
            message = f"Endpoint responded with status: {status}"
        else:
            message = f"Request to {url} failed"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class LocalReadError(MassBanError):
    """Progress file is missing or unreadable."""

    pass


class MissingProgressFileError(LocalReadError):
    """Progress file for a requested pass does not exist."""

    pass


class ProgressWriteError(LocalReadError):
    """A name could not be appended to its progress file."""

    pass


class CommandSendError(MassBanError):
    """
    Moderation command was rejected or could not be sent.

    Attributes:
        name: The user the command targeted, when known.
        actioned: How many names succeeded before this one.
    """

    def __init__(self, message: str, name: Optional[str] = None, actioned: int = 0) -> None:
        self.name = name
        self.actioned = actioned
        super().__init__(message)


__all__ = [
    "MassBanError",
    "ConfigurationError",
    "ChatConnectionError",
    "RemoteFetchError",
    "LocalReadError",
    "MissingProgressFileError",
    "ProgressWriteError",
    "CommandSendError",
]
