"""
MassBan - Chat Service Package
==============================

Twitch chat connection and IRC parsing.
"""

from .client import ChatClient, TwitchChatClient
from .irc import IrcMessage, parse_line, split_frame

__all__ = [
    "ChatClient",
    "TwitchChatClient",
    "IrcMessage",
    "parse_line",
    "split_frame",
]
