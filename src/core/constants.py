"""
MassBan - Centralized Constants
===============================

All magic numbers and constants are defined here for maintainability.
Import from this module instead of hardcoding values.
"""

from pathlib import Path

# =============================================================================
# Paths
# =============================================================================

# Directory holding main.py, the .env file and the progress files
PROGRAM_DIR = Path(__file__).resolve().parents[2]

ENV_FILENAME = ".env"
BANNED_USERS_LIST = "banned-users.txt"
UNBANNED_USERS_LIST = "unbanned-users.txt"

# =============================================================================
# List Formats
# =============================================================================

SEPARATOR = "\r\n"                    # Ban list and every progress file
SEPARATOR_UNBANNED_REMOTE = "\n"      # False positives list

# Status codes accepted from the remote list host
OK_RESPONSE_STATUSES = frozenset({200, 201})

# =============================================================================
# Moderation Commands
# =============================================================================

BAN_COMMAND_TEMPLATE = "/ban {name} Known bot"
UNBAN_COMMAND_TEMPLATE = "/unban {name}"

# =============================================================================
# Timing Constants (in seconds)
# =============================================================================

MS_PER_SECOND = 1000

COMMAND_DELAY_MS = 500                # Pause before every moderation command
CONNECT_TIMEOUT = 15                  # Wait for the channel join to be confirmed
ACK_TIMEOUT = 1.0                     # Wait for a NOTICE after each command
HTTP_TIMEOUT = 30                     # Remote list download

# =============================================================================
# CLI
# =============================================================================

DEFAULT_ARG_FLAG = True
ARG_ENABLE_MASS_BAN = 0
ARG_ENABLE_MASS_UNBAN = 1

# =============================================================================
# Twitch Chat
# =============================================================================

TWITCH_IRC_WS_URL = "wss://irc-ws.chat.twitch.tv:443"
TWITCH_CAPABILITIES = "twitch.tv/tags twitch.tv/commands"

# =============================================================================
# Logging
# =============================================================================

LOG_RETENTION_DAYS = 7
