"""
MassBan - Chat Constants
========================

NOTICE msg-ids Twitch sends in reply to moderation commands.
"""

# Command was refused for a reason that will hit every following command
# too. The run stops on these.
REJECTED_MSG_IDS: frozenset = frozenset({
    "msg_ratelimit",
    "msg_banned",
    "msg_channel_suspended",
    "msg_suspended",
    "msg_timedout",
    "msg_requires_verified_phone_number",
    "no_permission",
    "unrecognized_cmd",
    "cmds_available",
})

# Command was processed. Per-target refusals are included: repeating the
# command would get the same answer, so the name counts as handled.
HANDLED_MSG_IDS: frozenset = frozenset({
    "ban_success",
    "unban_success",
    "already_banned",
    "bad_unban_no_ban",
    "bad_ban_admin",
    "bad_ban_anon",
    "bad_ban_broadcaster",
    "bad_ban_global_mod",
    "bad_ban_mod",
    "bad_ban_self",
    "bad_ban_staff",
})

# NOTICE texts that mean the login itself failed
LOGIN_FAILURE_NOTICES: tuple = (
    "Login authentication failed",
    "Login unsuccessful",
    "Improperly formatted auth",
    "Invalid NICK",
)

TWITCH_SERVER = "tmi.twitch.tv"


__all__ = [
    "REJECTED_MSG_IDS",
    "HANDLED_MSG_IDS",
    "LOGIN_FAILURE_NOTICES",
    "TWITCH_SERVER",
]
