"""
MassBan - Source Package
========================

Bans known bots from a Twitch channel and lifts bans for false positives,
resuming from local progress files between runs.

Package Structure:
- core/: Configuration, constants, error types and logging
- services/chat/: Twitch chat connection and IRC parsing
- services/lists/: Remote list download, progress files, reconciliation
- services/moderation/: Throttled /ban and /unban sending
- services/session.py: Session controller tying the passes together
- utils/: Error reporting

Version: v1.0.0
"""
