"""
MassBan - Test Fixtures
=======================

Shared fixtures for all tests.
"""

import os
import sys
import tempfile
from dataclasses import replace
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "massban-test-logs"))
os.environ.pop("DEBUG", None)

from src.core.config import Config  # noqa: E402
from src.services.lists.fetcher import FetchResponse  # noqa: E402


BAN_URL = "https://lists.example.com/known-bots.txt"
UNBAN_URL = "https://lists.example.com/false-positives.txt"


# =============================================================================
# Files
# =============================================================================

@pytest.fixture
def env_file(tmp_path):
    """Create a .env file next to the progress files."""
    path = tmp_path / ".env"
    path.write_text("OAUTH_TOKEN=abc123\nUSERNAME=modbot\nCHANNEL=somechannel\n", encoding="utf-8")
    return path


@pytest.fixture
def banned_file(tmp_path):
    """Create an empty ban progress file."""
    path = tmp_path / "banned-users.txt"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def unbanned_file(tmp_path):
    """Create an empty unban progress file."""
    path = tmp_path / "unbanned-users.txt"
    path.write_text("", encoding="utf-8")
    return path


# =============================================================================
# Config
# =============================================================================

@pytest.fixture
def config(env_file, banned_file, unbanned_file):
    """Valid config with both passes enabled and no command delay."""
    return Config(
        channel="somechannel",
        username="modbot",
        oauth_token="abc123",
        env_file=env_file,
        mass_ban=True,
        mass_unban=True,
        ban_list_url=BAN_URL,
        false_positives_list_url=UNBAN_URL,
        banned_users_path=banned_file,
        unbanned_users_path=unbanned_file,
        command_delay=0,
    )


@pytest.fixture
def make_config(config):
    """Build a variant of the valid config."""
    def _make(**changes):
        return replace(config, **changes)
    return _make


# =============================================================================
# Collaborators
# =============================================================================

@pytest.fixture
def mock_chat_client():
    """Create a mock chat client that accepts every command."""
    client = MagicMock()
    client.connect = AsyncMock()
    client.say = AsyncMock()
    client.disconnect = AsyncMock()
    return client


@pytest.fixture
def make_fetcher():
    """Create a mock fetcher serving fixed bodies per URL."""
    def _make(responses):
        async def fetch(url):
            status, text = responses[url]
            return FetchResponse(status=status, text=text)

        fetcher = MagicMock()
        fetcher.fetch = AsyncMock(side_effect=fetch)
        return fetcher
    return _make


@pytest.fixture
def no_sleep():
    """Sleep replacement that returns immediately."""
    return AsyncMock()
