"""
Tests for src/core/config.py

Covers CLI flag parsing and environment loading.
"""

import pytest
from pathlib import Path

from src.core.config import Config, load_config, parse_flag
from src.core.constants import PROGRAM_DIR

ENV_KEYS = (
    "CHANNEL",
    "USERNAME",
    "OAUTH_TOKEN",
    "BAN_LIST_URL",
    "FALSE_POSITIVES_LIST_URL",
    "BANNED_USERS_LIST",
    "UNBANNED_USERS_LIST",
    "COMMAND_DELAY_MS",
    "CONNECT_TIMEOUT",
    "ACK_TIMEOUT",
    "HTTP_TIMEOUT",
    "ERROR_WEBHOOK_URL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable load_config reads."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


# =============================================================================
# parse_flag() Tests
# =============================================================================

class TestParseFlag:
    """Tests for positional CLI toggles."""

    def test_absent_uses_default(self):
        assert parse_flag(None) is True

    def test_absent_custom_default(self):
        assert parse_flag(None, default=False) is False

    def test_true_any_case(self):
        assert parse_flag("true") is True
        assert parse_flag("TRUE") is True
        assert parse_flag("True") is True

    def test_anything_else_disables(self):
        assert parse_flag("false") is False
        assert parse_flag("yes") is False
        assert parse_flag("1") is False
        assert parse_flag("") is False


# =============================================================================
# load_config() Tests
# =============================================================================

class TestLoadConfig:
    """Tests for environment and argument loading."""

    def test_credentials(self, clean_env, tmp_path):
        clean_env.setenv("CHANNEL", "#SomeChannel")
        clean_env.setenv("USERNAME", "ModBot")
        clean_env.setenv("OAUTH_TOKEN", " abc123 ")

        config = load_config([], env_file=tmp_path / ".env")

        assert config.channel == "somechannel"
        assert config.username == "modbot"
        assert config.oauth_token == "abc123"
        assert config.env_file == tmp_path / ".env"
        assert config.missing_credentials() == []

    def test_missing_credentials_listed(self, clean_env, tmp_path):
        clean_env.setenv("USERNAME", "")
        config = load_config([], env_file=tmp_path / ".env")
        assert config.missing_credentials() == ["OAUTH_TOKEN", "USERNAME", "CHANNEL"]

    def test_mass_ban_arg_absent_enables_ban(self, clean_env, tmp_path):
        config = load_config([], env_file=tmp_path / ".env")
        assert config.mass_ban is True
        assert config.mass_unban is True

    def test_flags_by_position(self, clean_env, tmp_path):
        config = load_config(["false", "TRUE"], env_file=tmp_path / ".env")
        assert config.mass_ban is False
        assert config.mass_unban is True

    def test_only_ban_flag_given(self, clean_env, tmp_path):
        config = load_config(["nope"], env_file=tmp_path / ".env")
        assert config.mass_ban is False
        assert config.mass_unban is True

    def test_default_timing(self, clean_env, tmp_path):
        config = load_config([], env_file=tmp_path / ".env")
        assert config.command_delay == 0.5

    def test_command_delay_from_env(self, clean_env, tmp_path):
        clean_env.setenv("COMMAND_DELAY_MS", "750")
        config = load_config([], env_file=tmp_path / ".env")
        assert config.command_delay == 0.75

    def test_invalid_command_delay_uses_default(self, clean_env, tmp_path):
        clean_env.setenv("COMMAND_DELAY_MS", "fast")
        config = load_config([], env_file=tmp_path / ".env")
        assert config.command_delay == 0.5

    def test_negative_command_delay_clamped(self, clean_env, tmp_path):
        clean_env.setenv("COMMAND_DELAY_MS", "-10")
        config = load_config([], env_file=tmp_path / ".env")
        assert config.command_delay == 0

    def test_list_urls(self, clean_env, tmp_path):
        clean_env.setenv("BAN_LIST_URL", "https://lists.example.com/bots.txt")
        clean_env.setenv("FALSE_POSITIVES_LIST_URL", "ftp://lists.example.com/fp.txt")

        config = load_config([], env_file=tmp_path / ".env")

        assert config.ban_list_url == "https://lists.example.com/bots.txt"
        assert config.false_positives_list_url is None

    def test_progress_paths_relative_to_program(self, clean_env, tmp_path):
        clean_env.setenv("UNBANNED_USERS_LIST", str(tmp_path / "undo.txt"))

        config = load_config([], env_file=tmp_path / ".env")

        assert config.banned_users_path == PROGRAM_DIR / "banned-users.txt"
        assert config.unbanned_users_path == tmp_path / "undo.txt"

    def test_token_not_in_repr(self, clean_env, tmp_path):
        clean_env.setenv("OAUTH_TOKEN", "supersecrettoken")
        config = load_config([], env_file=tmp_path / ".env")
        assert "supersecrettoken" not in repr(config)

    def test_config_is_frozen(self, config):
        with pytest.raises(Exception):
            config.channel = "other"

    def test_config_type(self, clean_env):
        config = load_config([], env_file=Path(".env"))
        assert isinstance(config, Config)
