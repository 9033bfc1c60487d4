"""
MassBan - Chat Client
=====================

Connection to Twitch chat used to send moderation commands.

DESIGN:
    Everything above this module depends on the ChatClient protocol
    (connect / say / disconnect), never on aiohttp. TwitchChatClient
    speaks IRC over Twitch's WebSocket endpoint.

    A background reader answers PINGs and forwards NOTICEs. After each
    command, say() waits up to ack_timeout for a NOTICE: a rejection
    (rate limit, missing permission) raises CommandSendError, anything
    else or silence counts as accepted. A rejection that arrives after
    the wait is raised by the next say() before it sends anything.
    There is no reconnect; a dropped socket fails the next command.
"""

import asyncio
from typing import Optional, Protocol

import aiohttp

from src.core.constants import ACK_TIMEOUT, CONNECT_TIMEOUT, TWITCH_CAPABILITIES, TWITCH_IRC_WS_URL
from src.core.errors import ChatConnectionError, CommandSendError
from src.core.logger import logger
from src.services.chat.constants import (
    HANDLED_MSG_IDS,
    LOGIN_FAILURE_NOTICES,
    REJECTED_MSG_IDS,
    TWITCH_SERVER,
)
from src.services.chat.irc import IrcMessage, parse_line, split_frame


# =============================================================================
# Protocol
# =============================================================================

class ChatClient(Protocol):
    """Capabilities the session needs from a chat connection."""

    async def connect(self) -> None:
        ...

    async def say(self, channel: str, text: str) -> None:
        ...

    async def disconnect(self) -> None:
        ...


# =============================================================================
# Twitch Implementation
# =============================================================================

class TwitchChatClient:
    """
    Twitch IRC-over-WebSocket client.

    Attributes:
        channel: Channel joined on connect, without '#'.
        username: Bot login.
    """

    def __init__(
        self,
        channel: str,
        username: str,
        oauth_token: str,
        url: str = TWITCH_IRC_WS_URL,
        connect_timeout: float = CONNECT_TIMEOUT,
        ack_timeout: float = ACK_TIMEOUT,
    ) -> None:
        self.channel = channel.lstrip("#").lower()
        self.username = username.lower()
        self._token = oauth_token if oauth_token.startswith("oauth:") else f"oauth:{oauth_token}"
        self.url = url
        self.connect_timeout = connect_timeout
        self.ack_timeout = ack_timeout

        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._reader: Optional[asyncio.Task] = None
        self._ready = asyncio.Event()
        self._joined = False
        self._closed = False
        self._connect_error: Optional[str] = None
        self._notices: "asyncio.Queue[Optional[IrcMessage]]" = asyncio.Queue()

    @property
    def connected(self) -> bool:
        return self._joined and not self._closed and self._ws is not None and not self._ws.closed

    # =========================================================================
    # Connection
    # =========================================================================

    async def connect(self) -> None:
        """
        Open the socket, log in and join the channel.

        Raises:
            ChatConnectionError: Socket failure, login refused, join not
                confirmed within connect_timeout, or socket closed early.
        """
        self._session = aiohttp.ClientSession()
        try:
            self._ws = await asyncio.wait_for(
                self._session.ws_connect(self.url),
                timeout=self.connect_timeout,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            await self.disconnect()
            raise ChatConnectionError(f"Could not reach Twitch chat: {type(e).__name__}") from e

        self._reader = asyncio.create_task(self._read_loop())

        try:
            await self._send_raw(f"CAP REQ :{TWITCH_CAPABILITIES}")
            await self._send_raw(f"PASS {self._token}", log_as="PASS oauth:****")
            await self._send_raw(f"NICK {self.username}")
            await self._send_raw(f"JOIN #{self.channel}")
            await asyncio.wait_for(self._ready.wait(), timeout=self.connect_timeout)
        except (ConnectionError, aiohttp.ClientError) as e:
            await self.disconnect()
            raise ChatConnectionError(f"Connection dropped during login: {e}") from e
        except asyncio.TimeoutError as e:
            await self.disconnect()
            raise ChatConnectionError(f"Timed out joining #{self.channel}") from e

        if not self._joined:
            reason = self._connect_error or "Connection closed by Twitch"
            await self.disconnect()
            raise ChatConnectionError(reason)

    async def disconnect(self) -> None:
        """Close the socket and session. Safe to call any number of times."""
        self._closed = True

        if self._reader is not None and not self._reader.done():
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
        self._reader = None

        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None

        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    # =========================================================================
    # Commands
    # =========================================================================

    async def say(self, channel: str, text: str) -> None:
        """
        Send a chat line and wait for Twitch's verdict.

        Args:
            channel: Target channel, with or without '#'.
            text: Message or slash command.

        Raises:
            CommandSendError: Not connected, socket write failed, connection
                dropped while waiting, or a rejecting NOTICE arrived.
        """
        if not self.connected:
            raise CommandSendError("Not connected to chat")

        # Anything queued now answers an earlier command; a late rejection
        # still stops the run before another command goes out
        self._drain_late_notices(f"Twitch rejected an earlier command before '{text}'")

        try:
            await self._send_raw(f"PRIVMSG #{channel.lstrip('#')} :{text}")
        except (ConnectionError, aiohttp.ClientError) as e:
            raise CommandSendError(f"Could not send '{text}': {e}") from e

        if self.ack_timeout <= 0:
            return

        try:
            notice = await asyncio.wait_for(self._notices.get(), timeout=self.ack_timeout)
        except asyncio.TimeoutError:
            self._drain_late_notices(f"Twitch rejected '{text}'")
            return

        self._check_notice(notice, f"Twitch rejected '{text}'")

    def _check_notice(self, notice: Optional[IrcMessage], context: str) -> None:
        if notice is None:
            raise CommandSendError("Connection closed by Twitch")
        if notice.msg_id in REJECTED_MSG_IDS:
            raise CommandSendError(f"{context}: {notice.trailing} ({notice.msg_id})")
        if notice.msg_id not in HANDLED_MSG_IDS:
            logger.debug(f"Unclassified NOTICE {notice.msg_id}: {notice.trailing}")

    def _drain_late_notices(self, context: str) -> None:
        while not self._notices.empty():
            self._check_notice(self._notices.get_nowait(), context)

    # =========================================================================
    # Socket I/O
    # =========================================================================

    async def _send_raw(self, line: str, log_as: Optional[str] = None) -> None:
        if self._ws is None or self._ws.closed:
            raise ConnectionResetError("WebSocket is closed")
        logger.debug(f"> {log_as or line}")
        await self._ws.send_str(line)

    async def _read_loop(self) -> None:
        try:
            async for msg in self._ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    for line in split_frame(msg.data):
                        await self._handle_line(line)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    logger.warning(f"Chat socket error: {self._ws.exception()}")
                    break
        except (aiohttp.ClientError, ConnectionError) as e:
            logger.warning(f"Chat connection lost: {type(e).__name__}")
        finally:
            self._closed = True
            self._ready.set()
            self._notices.put_nowait(None)

    async def _handle_line(self, line: str) -> None:
        logger.debug(f"< {line}")
        message = parse_line(line)
        if message is None:
            return

        if message.command == "PING":
            await self._send_raw(f"PONG :{message.trailing or TWITCH_SERVER}")

        elif message.command == "RECONNECT":
            logger.warning("Twitch requested a reconnect; closing connection")
            await self._ws.close()

        elif message.command in ("JOIN", "ROOMSTATE"):
            if message.command == "JOIN" and message.nick != self.username:
                return
            if not self._joined:
                self._joined = True
                self._ready.set()

        elif message.command == "NOTICE":
            self._handle_notice(message)

    def _handle_notice(self, message: IrcMessage) -> None:
        text = message.trailing or ""
        if not self._joined:
            if any(marker in text for marker in LOGIN_FAILURE_NOTICES) or message.msg_id:
                self._connect_error = text or message.msg_id
                self._ready.set()
            return
        self._notices.put_nowait(message)


__all__ = ["ChatClient", "TwitchChatClient"]
