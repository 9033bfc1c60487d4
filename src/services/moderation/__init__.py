"""
MassBan - Moderation Service Package
====================================

Throttled sending of /ban and /unban commands.
"""

from .executor import BAN_COMMAND_TEMPLATE, UNBAN_COMMAND_TEMPLATE, CommandExecutor, format_command

__all__ = [
    "BAN_COMMAND_TEMPLATE",
    "UNBAN_COMMAND_TEMPLATE",
    "CommandExecutor",
    "format_command",
]
