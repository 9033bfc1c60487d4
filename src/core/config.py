"""
MassBan - Configuration Module
==============================

Centralized configuration management with environment variable parsing.

DESIGN:
    Credentials and tuning values come from the .env file (loaded into the
    process environment by main.py), pass toggles come from positional
    CLI arguments. Everything is resolved once into a frozen Config that is
    handed to the session controller, so nothing reads os.environ after
    startup.

    Credential checks live in the session controller, which is the
    component that refuses to connect; load_config() only parses.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from src.core.constants import (
    ACK_TIMEOUT,
    ARG_ENABLE_MASS_BAN,
    ARG_ENABLE_MASS_UNBAN,
    BANNED_USERS_LIST,
    COMMAND_DELAY_MS,
    CONNECT_TIMEOUT,
    DEFAULT_ARG_FLAG,
    ENV_FILENAME,
    HTTP_TIMEOUT,
    MS_PER_SECOND,
    PROGRAM_DIR,
    UNBANNED_USERS_LIST,
)
from src.core.logger import logger


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Run configuration.

    Attributes:
        channel: Channel to moderate, without the leading '#'.
        username: Bot account login.
        oauth_token: Chat token, with or without the "oauth:" prefix.
        env_file: Path of the .env file the credentials came from.
        mass_ban: Whether the ban pass runs.
        mass_unban: Whether the false positives pass runs.
    """

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    channel: str
    username: str
    oauth_token: str = field(repr=False)
    env_file: Path

    # -------------------------------------------------------------------------
    # Passes
    # -------------------------------------------------------------------------

    mass_ban: bool = DEFAULT_ARG_FLAG
    mass_unban: bool = DEFAULT_ARG_FLAG

    ban_list_url: Optional[str] = None
    false_positives_list_url: Optional[str] = None

    banned_users_path: Path = PROGRAM_DIR / BANNED_USERS_LIST
    unbanned_users_path: Path = PROGRAM_DIR / UNBANNED_USERS_LIST

    # -------------------------------------------------------------------------
    # Timing (seconds)
    # -------------------------------------------------------------------------

    command_delay: float = COMMAND_DELAY_MS / MS_PER_SECOND
    connect_timeout: float = CONNECT_TIMEOUT
    ack_timeout: float = ACK_TIMEOUT
    http_timeout: float = HTTP_TIMEOUT

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None

    def missing_credentials(self) -> List[str]:
        """Names of the .env keys that are unset or empty."""
        missing = []
        if not self.oauth_token:
            missing.append("OAUTH_TOKEN")
        if not self.username:
            missing.append("USERNAME")
        if not self.channel:
            missing.append("CHANNEL")
        return missing


# =============================================================================
# Parsing Helpers
# =============================================================================

def parse_flag(value: Optional[str], default: bool = DEFAULT_ARG_FLAG) -> bool:
    """
    Parse a positional CLI toggle.

    Args:
        value: Raw argument, or None when it was not passed.
        default: Value used when the argument is absent.

    Returns:
        True only for "true" in any case; default when absent.
    """
    if value is None:
        return default
    return value.lower() == "true"


def _arg_at(argv: Sequence[str], index: int) -> Optional[str]:
    return argv[index] if index < len(argv) else None


def _parse_float_with_default(
    value: Optional[str],
    default: float,
    name: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
) -> float:
    """
    Parse optional number with default and range validation.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed number within valid range, or default.
    """
    if not value:
        return default
    try:
        parsed = float(value)
    except ValueError:
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default
    if min_val is not None and parsed < min_val:
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """
    Validate URL format.

    Args:
        value: URL string to validate.
        name: Variable name for warning messages.

    Returns:
        URL if valid, None if invalid or empty.
    """
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


def _resolve_path(value: Optional[str], default: str) -> Path:
    path = Path(value or default)
    if not path.is_absolute():
        path = PROGRAM_DIR / path
    return path


def default_env_file() -> Path:
    """Location of the .env file, overridable with MASSBAN_ENV_FILE."""
    override = os.getenv("MASSBAN_ENV_FILE")
    return Path(override) if override else PROGRAM_DIR / ENV_FILENAME


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(argv: Sequence[str] = (), env_file: Optional[Path] = None) -> Config:
    """
    Build the run configuration from the environment and CLI arguments.

    Args:
        argv: Positional arguments after the program name.
        env_file: The .env file the environment was loaded from.

    Returns:
        Config object. Credentials may still be empty; validation is done
        by the session controller.
    """
    command_delay_ms = _parse_float_with_default(
        os.getenv("COMMAND_DELAY_MS"), COMMAND_DELAY_MS, "COMMAND_DELAY_MS", min_val=0, max_val=60000
    )

    return Config(
        channel=os.getenv("CHANNEL", "").strip().lstrip("#").lower(),
        username=os.getenv("USERNAME", "").strip().lower(),
        oauth_token=os.getenv("OAUTH_TOKEN", "").strip(),
        env_file=env_file or default_env_file(),
        mass_ban=parse_flag(_arg_at(argv, ARG_ENABLE_MASS_BAN)),
        mass_unban=parse_flag(_arg_at(argv, ARG_ENABLE_MASS_UNBAN)),
        ban_list_url=_validate_url(os.getenv("BAN_LIST_URL"), "BAN_LIST_URL"),
        false_positives_list_url=_validate_url(
            os.getenv("FALSE_POSITIVES_LIST_URL"), "FALSE_POSITIVES_LIST_URL"
        ),
        banned_users_path=_resolve_path(os.getenv("BANNED_USERS_LIST"), BANNED_USERS_LIST),
        unbanned_users_path=_resolve_path(os.getenv("UNBANNED_USERS_LIST"), UNBANNED_USERS_LIST),
        command_delay=command_delay_ms / MS_PER_SECOND,
        connect_timeout=_parse_float_with_default(
            os.getenv("CONNECT_TIMEOUT"), CONNECT_TIMEOUT, "CONNECT_TIMEOUT", min_val=1, max_val=120
        ),
        ack_timeout=_parse_float_with_default(
            os.getenv("ACK_TIMEOUT"), ACK_TIMEOUT, "ACK_TIMEOUT", min_val=0, max_val=30
        ),
        http_timeout=_parse_float_with_default(
            os.getenv("HTTP_TIMEOUT"), HTTP_TIMEOUT, "HTTP_TIMEOUT", min_val=1, max_val=300
        ),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


def _redact(secret: str) -> str:
    if not secret:
        return "(empty)"
    return f"****{secret[-4:]}" if len(secret) > 8 else "****"


def validate_and_log_config(config: Config) -> None:
    """
    Log the configuration summary at startup.

    Args:
        config: The loaded configuration.
    """
    logger.tree_nested("Configuration Loaded", [
        ("Twitch", [
            ("Channel", f"#{config.channel}" if config.channel else "(empty)"),
            ("User", config.username or "(empty)"),
            ("Token", _redact(config.oauth_token)),
        ]),
        ("Passes", [
            ("Mass Ban", "enabled" if config.mass_ban else "disabled"),
            ("Mass Unban", "enabled" if config.mass_unban else "disabled"),
            ("Command Delay", f"{config.command_delay:.2f}s"),
        ]),
        ("Files", [
            ("Env", str(config.env_file)),
            ("Banned", str(config.banned_users_path)),
            ("Unbanned", str(config.unbanned_users_path)),
        ]),
    ], emoji="⚙️")


__all__ = [
    "Config",
    "parse_flag",
    "default_env_file",
    "load_config",
    "validate_and_log_config",
]
