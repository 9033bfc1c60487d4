"""
MassBan - Error Handler
=======================

Turns a fatal error into a readable report before the process exits.

Features:
- Error categorization (config, chat, remote, local, command)
- Recovery suggestions per category
- Structured error context with traceback for critical errors
- Webhook alert through the logger when configured
"""

import traceback
from typing import Any, Dict

from src.core.errors import (
    ChatConnectionError,
    CommandSendError,
    ConfigurationError,
    LocalReadError,
    MissingProgressFileError,
    RemoteFetchError,
)
from src.core.logger import logger


class ErrorContext:
    """Captures and formats detailed error context"""

    @staticmethod
    def get_full_context(e: BaseException, location: str, **kwargs) -> Dict[str, Any]:
        """
        Get comprehensive error context.

        Args:
            e: The exception
            location: Where the error occurred
            **kwargs: Additional context (channel, pass, ...)

        Returns:
            Dictionary with full error context
        """
        context = {
            'location': location,
            'error_type': type(e).__name__,
            'error_message': str(e),
            'traceback': "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            'additional_context': kwargs,
        }

        if isinstance(e, CommandSendError):
            context['command_context'] = {
                'name': e.name,
                'actioned': e.actioned,
            }

        if isinstance(e, RemoteFetchError):
            context['remote_context'] = {
                'url': e.url,
                'status': e.status,
            }

        return context


class ErrorHandler:
    """Error categorization and reporting"""

    ERROR_CATEGORIES = {
        'config': [ConfigurationError],
        'chat': [ChatConnectionError],
        'remote': [RemoteFetchError],
        'local': [LocalReadError],
        'command': [CommandSendError],
        'network': [ConnectionError, TimeoutError, OSError],
    }

    RECOVERY_SUGGESTIONS = {
        'config': "Check the .env file: OAUTH_TOKEN, USERNAME, CHANNEL and the list URLs",
        'chat': "Check the token and channel, or wait - Twitch may be rate limiting this account",
        'remote': "List host unavailable - try again later or check the list URL",
        'local': "Check the progress file exists and is readable",
        'missing_progress': "Create the progress file (it may be empty) next to main.py",
        'command': "Likely rate limited - wait before running again; progress is saved",
        'network': "Network connection issue - check internet connection",
    }

    @classmethod
    def categorize_error(cls, e: BaseException) -> str:
        """
        Categorize the error type.

        Args:
            e: The exception

        Returns:
            Error category string
        """
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, tuple(error_types)):
                return category
        return 'general'

    @classmethod
    def get_recovery_suggestion(cls, e: BaseException, category: str) -> str:
        """
        Get recovery suggestion based on error type.

        Args:
            e: The exception
            category: Error category

        Returns:
            Recovery suggestion string
        """
        if isinstance(e, MissingProgressFileError):
            return cls.RECOVERY_SUGGESTIONS['missing_progress']
        return cls.RECOVERY_SUGGESTIONS.get(category, "Unexpected error - check logs for details")

    @classmethod
    def handle(cls, e: BaseException, location: str, critical: bool = False, **context) -> None:
        """
        Handle an error with full context.

        Args:
            e: The exception
            location: Where the error occurred
            critical: Whether this error stops execution
            **context: Additional context
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e, category)
        full_context = ErrorContext.get_full_context(e, location, **context)

        error_msg = f"[{category.upper()}] in {location}"

        if not critical:
            logger.warning(f"ERROR {error_msg}: {full_context['error_type']} - {str(e)[:100]} | Recovery: {suggestion}")
            return

        details = [
            ("Location", location),
            ("Type", full_context['error_type']),
            ("Error", full_context['error_message']),
            ("Recovery", suggestion),
        ]
        if 'command_context' in full_context:
            cc = full_context['command_context']
            details.append(("Failed User", str(cc['name'])))
            details.append(("Actioned Before Failure", str(cc['actioned'])))
        if 'remote_context' in full_context:
            rc = full_context['remote_context']
            details.append(("Status", str(rc['status'])))
        for key, value in full_context['additional_context'].items():
            details.append((key.replace("_", " ").title(), str(value)))

        logger.error(f"CRITICAL ERROR {error_msg}", details)

        # Expected failures are fully described above
        if category == 'general':
            logger.info(f"Traceback:\n{full_context['traceback']}")


__all__ = ["ErrorContext", "ErrorHandler"]
