"""
MassBan - Services Package
==========================

Everything the session controller drives.

DESIGN:
    Services depend on small protocols (ChatClient, ListFetcher) rather
    than on aiohttp directly, so tests can hand in fakes.

Available Services:
    TwitchChatClient: IRC-over-WebSocket chat connection
    HttpListFetcher: aiohttp remote list download
    CommandExecutor: Rate-limited /ban and /unban sender
    SessionController: Validate, connect, run passes, disconnect
"""

# =============================================================================
# Service Imports
# =============================================================================

from .chat import ChatClient, TwitchChatClient
from .lists import HttpListFetcher, ListFetcher, ProgressFile, reconcile
from .moderation import CommandExecutor
from .session import SessionController, SessionReport, SessionState


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "ChatClient",
    "TwitchChatClient",
    "HttpListFetcher",
    "ListFetcher",
    "ProgressFile",
    "reconcile",
    "CommandExecutor",
    "SessionController",
    "SessionReport",
    "SessionState",
]
