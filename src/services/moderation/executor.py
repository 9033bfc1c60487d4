"""
MassBan - Throttled Command Executor
====================================

Sends one moderation command per name, one at a time.

DESIGN:
    For every name: sleep, send, record. The sleep comes first and is
    unconditional, so no two commands ever leave closer together than
    the configured delay. A name is written to the progress file only
    after Twitch accepted its command, and before the next name starts.

    The first failed send stops the pass. It is most likely a rate limit,
    and every further command would fail the same way. Closing the chat
    connection is left to the session controller.
"""

import asyncio
from typing import Awaitable, Callable, Sequence

from src.core.constants import BAN_COMMAND_TEMPLATE, COMMAND_DELAY_MS, MS_PER_SECOND, UNBAN_COMMAND_TEMPLATE
from src.core.errors import CommandSendError
from src.core.logger import logger
from src.services.chat.client import ChatClient
from src.services.lists.progress import ProgressFile


def format_command(template: str, name: str) -> str:
    """
    Build the chat command for one name.

    Args:
        template: Command template with a {name} placeholder.
        name: Target login.

    Returns:
        e.g. "/ban someone Known bot".
    """
    return template.format(name=name)


class CommandExecutor:
    """
    Sequential, rate-limited command sender.

    Attributes:
        client: Connected chat client.
        channel: Channel the commands are sent to.
        delay: Seconds slept before every command.
    """

    def __init__(
        self,
        client: ChatClient,
        channel: str,
        delay: float = COMMAND_DELAY_MS / MS_PER_SECOND,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.channel = channel
        self.delay = delay
        self._sleep = sleep

    async def execute(
        self,
        names: Sequence[str],
        template: str,
        progress: ProgressFile,
    ) -> int:
        """
        Send template for every name and record each success.

        Args:
            names: Work set from the reconciler.
            template: BAN_COMMAND_TEMPLATE or UNBAN_COMMAND_TEMPLATE.
            progress: File that receives every actioned name.

        Returns:
            Number of names actioned (always len(names) when it returns).

        Raises:
            CommandSendError: On the first failed send; later names are
                never attempted.
            ProgressWriteError: If a success could not be recorded.
        """
        actioned = 0
        total = len(names)

        for name in names:
            await self._sleep(self.delay)

            command = format_command(template, name)
            try:
                await self.client.say(self.channel, command)
            except Exception as e:
                logger.error("Command Failed", [
                    ("Command", command),
                    ("Actioned", f"{actioned}/{total}"),
                    ("Error", f"{type(e).__name__}: {e}"),
                ])
                raise CommandSendError(
                    f"You got rate limited! '{command}' failed after {actioned}/{total} commands: {e}",
                    name=name,
                    actioned=actioned,
                ) from e

            progress.append(name)
            actioned += 1
            logger.debug(f"[{actioned}/{total}] {command}")

        return actioned


__all__ = [
    "BAN_COMMAND_TEMPLATE",
    "UNBAN_COMMAND_TEMPLATE",
    "CommandExecutor",
    "format_command",
]
