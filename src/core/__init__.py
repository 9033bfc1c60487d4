"""
MassBan - Core Package
======================

Configuration, constants, error types and logging shared by every
service.
"""

# =============================================================================
# Core Imports
# =============================================================================

from .config import Config, load_config, parse_flag, validate_and_log_config

from .errors import (
    ChatConnectionError,
    CommandSendError,
    ConfigurationError,
    LocalReadError,
    MassBanError,
    MissingProgressFileError,
    ProgressWriteError,
    RemoteFetchError,
)

from .logger import logger, TreeLogger


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Config
    "Config",
    "load_config",
    "parse_flag",
    "validate_and_log_config",
    # Errors
    "MassBanError",
    "ConfigurationError",
    "ChatConnectionError",
    "RemoteFetchError",
    "LocalReadError",
    "MissingProgressFileError",
    "ProgressWriteError",
    "CommandSendError",
    # Logger
    "logger",
    "TreeLogger",
]
