#!/usr/bin/env python3
"""
MassBan - Entry Point
=====================

Bans every known bot from a Twitch channel's chat, then lifts bans for
names on the false positives list.

Usage:
    python main.py [mass_ban] [mass_unban]

    Each flag is "true" to enable a pass; anything else disables it.
    A missing flag keeps the pass enabled.

Setup:
    .env next to this file with OAUTH_TOKEN, USERNAME, CHANNEL,
    BAN_LIST_URL and FALSE_POSITIVES_LIST_URL, plus the progress files
    banned-users.txt and unbanned-users.txt (they may be empty).
"""

import asyncio
import sys
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from src.core.config import default_env_file, load_config, validate_and_log_config
from src.core.errors import MassBanError
from src.core.logger import logger
from src.services.chat import TwitchChatClient
from src.services.lists import HttpListFetcher
from src.services.session import SessionController
from src.utils.error_handler import ErrorHandler


async def main(argv: Sequence[str]) -> int:
    """
    Run one session.

    Handles the complete lifecycle:
    1. Loads the .env file and sets up logging from it
    2. Resolves configuration and pass flags
    3. Validates, connects and runs the enabled passes
    4. Reports any failure after the chat connection is closed

    Args:
        argv: Positional arguments after the program name.

    Returns:
        Process exit code.
    """
    env_file = default_env_file()
    load_dotenv(env_file, override=True)
    logger.configure()

    config = load_config(argv, env_file=env_file)
    logger.set_webhook(config.error_webhook_url)

    logger.tree("MASSBAN STARTING", [
        ("Channel", f"#{config.channel}" if config.channel else "(not set)"),
        ("Mass Ban", str(config.mass_ban)),
        ("Mass Unban", str(config.mass_unban)),
    ], "🔥")
    validate_and_log_config(config)

    client = TwitchChatClient(
        config.channel,
        config.username,
        config.oauth_token,
        connect_timeout=config.connect_timeout,
        ack_timeout=config.ack_timeout,
    )

    try:
        async with HttpListFetcher(timeout=config.http_timeout) as fetcher:
            controller = SessionController(config, client, fetcher)
            await controller.run()
    except MassBanError as e:
        ErrorHandler.handle(e, location="main.main", critical=True, channel=config.channel)
        return 1
    except Exception as e:
        ErrorHandler.handle(e, location="main.main", critical=True)
        return 1
    finally:
        await logger.drain()

    return 0


def run(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    try:
        return asyncio.run(main(args))
    except KeyboardInterrupt:
        logger.info("🛑 Stopped by user (Ctrl+C)")
        return 130


if __name__ == "__main__":
    sys.exit(run())
