"""
MassBan - Session Controller
============================

Runs one complete mass-ban / mass-unban session.

DESIGN:
    UNCONFIGURED -> VALIDATED -> CONNECTED -> BAN_PASS_DONE?
        -> UNBAN_PASS_DONE? -> DISCONNECTED

    Validation happens before any network traffic. Once connected, the
    whole pass sequence runs inside _connected(), whose exit always
    disconnects, so every error path (fetch failure, missing progress
    file, rejected command) leaves the chat closed before it propagates.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Dict, List, Optional

from src.core.config import Config
from src.core.constants import (
    BAN_COMMAND_TEMPLATE,
    SEPARATOR,
    SEPARATOR_UNBANNED_REMOTE,
    UNBAN_COMMAND_TEMPLATE,
)
from src.core.errors import ChatConnectionError, ConfigurationError, MissingProgressFileError
from src.core.logger import logger
from src.services.chat.client import ChatClient
from src.services.lists.fetcher import ListFetcher
from src.services.lists.progress import ProgressFile
from src.services.lists.reconciler import reconcile
from src.services.moderation.executor import CommandExecutor


# =============================================================================
# Session Types
# =============================================================================

class SessionState(Enum):
    UNCONFIGURED = "unconfigured"
    VALIDATED = "validated"
    CONNECTED = "connected"
    BAN_PASS_DONE = "ban_pass_done"
    UNBAN_PASS_DONE = "unban_pass_done"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class ModerationPass:
    """
    One reconcile-and-execute cycle.

    Attributes:
        label: Name used in logs ("ban", "unban").
        url: Remote list location.
        remote_separator: Separator used by the remote list.
        progress: Progress file of this pass.
        template: Command template applied to each name.
        done_state: State entered when the pass completes.
    """

    label: str
    url: Optional[str]
    remote_separator: str
    progress: ProgressFile
    template: str
    done_state: SessionState


@dataclass
class SessionReport:
    """Names actioned per pass label."""

    actioned: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.actioned.values())


def build_passes(config: Config) -> List[ModerationPass]:
    """
    Enabled passes for config, ban pass first.

    Args:
        config: Run configuration.

    Returns:
        Passes in execution order.
    """
    passes = []
    if config.mass_ban:
        passes.append(ModerationPass(
            label="ban",
            url=config.ban_list_url,
            remote_separator=SEPARATOR,
            progress=ProgressFile(config.banned_users_path),
            template=BAN_COMMAND_TEMPLATE,
            done_state=SessionState.BAN_PASS_DONE,
        ))
    if config.mass_unban:
        passes.append(ModerationPass(
            label="unban",
            url=config.false_positives_list_url,
            remote_separator=SEPARATOR_UNBANNED_REMOTE,
            progress=ProgressFile(config.unbanned_users_path),
            template=UNBAN_COMMAND_TEMPLATE,
            done_state=SessionState.UNBAN_PASS_DONE,
        ))
    return passes


# =============================================================================
# Controller
# =============================================================================

class SessionController:
    """
    Validates, connects, runs the enabled passes and disconnects.

    Attributes:
        config: Run configuration.
        client: Chat connection.
        fetcher: Remote list downloader.
        state: Current SessionState.
    """

    def __init__(
        self,
        config: Config,
        client: Optional[ChatClient],
        fetcher: ListFetcher,
        executor: Optional[CommandExecutor] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.fetcher = fetcher
        self.executor = executor
        self.state = SessionState.UNCONFIGURED
        self.passes = build_passes(config)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> None:
        """
        Check everything that can be checked without the network.

        Raises:
            ConfigurationError: No client, missing .env file, empty
                credentials, or an enabled pass without a list URL.
        """
        if self.client is None:
            raise ConfigurationError("Error while connecting!")

        env_file = self.config.env_file
        if not env_file.is_file():
            raise ConfigurationError(f"No .env file found in {env_file.parent}")

        missing = self.config.missing_credentials()
        if missing:
            raise ConfigurationError(
                f"Invalid credentials in .env file! Empty: {', '.join(missing)}"
            )

        for moderation_pass in self.passes:
            if not moderation_pass.url:
                raise ConfigurationError(f"No list URL configured for the {moderation_pass.label} pass")

        self.state = SessionState.VALIDATED

    # =========================================================================
    # Run
    # =========================================================================

    async def run(self) -> SessionReport:
        """
        Execute the full session.

        Returns:
            SessionReport with per-pass counts.

        Raises:
            ConfigurationError: Validation failed; nothing was connected.
            ChatConnectionError: Connecting failed.
            MissingProgressFileError, RemoteFetchError, LocalReadError,
            CommandSendError: A pass failed; the chat is already closed.
        """
        if self.state is SessionState.UNCONFIGURED:
            self.validate()

        report = SessionReport()

        async with self._connected():
            if self.executor is None:
                self.executor = CommandExecutor(
                    self.client,
                    self.config.channel,
                    delay=self.config.command_delay,
                )

            for moderation_pass in self.passes:
                report.actioned[moderation_pass.label] = await self._run_pass(moderation_pass)
                self.state = moderation_pass.done_state

        logger.tree("Session Complete", [
            ("Channel", f"#{self.config.channel}"),
            *[(label.title(), str(count)) for label, count in report.actioned.items()],
            ("Total", str(report.total)),
        ], emoji="🏁")

        return report

    @asynccontextmanager
    async def _connected(self) -> AsyncIterator[None]:
        logger.info("Connecting to Twitch...")
        logger.info(f"Connecting to #{self.config.channel} with user {self.config.username}")

        try:
            await self.client.connect()
        except ChatConnectionError:
            await self.client.disconnect()
            raise
        except Exception as e:
            await self.client.disconnect()
            raise ChatConnectionError(f"You got rate limited! ({type(e).__name__}: {e})") from e

        self.state = SessionState.CONNECTED
        logger.success("Connected!")

        try:
            yield
        finally:
            await self.client.disconnect()
            self.state = SessionState.DISCONNECTED
            logger.info("Disconnected")

    async def _run_pass(self, moderation_pass: ModerationPass) -> int:
        if not moderation_pass.progress.exists():
            raise MissingProgressFileError(
                f"Progress file for the {moderation_pass.label} pass not found: "
                f"{moderation_pass.progress.path}"
            )

        names, count = await reconcile(
            self.fetcher,
            moderation_pass.url,
            moderation_pass.progress,
            moderation_pass.remote_separator,
        )

        verb = "Banning" if moderation_pass.label == "ban" else "Unbanning"
        logger.info(f"{verb} {count} users...")

        actioned = await self.executor.execute(names, moderation_pass.template, moderation_pass.progress)

        logger.tree(f"{moderation_pass.label.title()} Pass Complete", [
            ("Actioned", str(actioned)),
            ("Progress File", moderation_pass.progress.path.name),
        ], emoji="🔨")

        return actioned


__all__ = [
    "SessionState",
    "ModerationPass",
    "SessionReport",
    "SessionController",
    "build_passes",
]
