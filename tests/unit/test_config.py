"""Tests for configuration loading."""

from pathlib import Path

import pytest

from silence_journal.core.config import Settings, load_settings
from silence_journal.core.errors import ConfigError


def test_defaults():
    settings = Settings()
    assert settings.storage.trades_path == Path("data") / "silence_journal_trades.json"
    assert settings.observability.log_format == "console"
    assert settings.insights.provider == "rule_based"


def test_toml_file(tmp_path):
    config = tmp_path / "journal.toml"
    config.write_text(
        '[storage]\ndata_dir = "/srv/journal"\n\n'
        '[insights]\nprovider = "anthropic"\nmax_tokens = 512\n'
    )
    settings = load_settings(config)
    assert settings.storage.settings_path == Path("/srv/journal/silence_journal_settings.json")
    assert settings.insights.provider == "anthropic"
    assert settings.insights.max_tokens == 512


def test_overrides_merge_into_file_sections(tmp_path):
    config = tmp_path / "journal.toml"
    config.write_text('[storage]\ndata_dir = "a"\ntrades_file = "t.json"\n')
    settings = load_settings(config, {"storage": {"data_dir": "b"}})
    assert settings.storage.data_dir == "b"
    assert settings.storage.trades_file == "t.json"


def test_missing_file_uses_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.toml").storage.data_dir == "data"


def test_env_override(monkeypatch):
    monkeypatch.setenv("JOURNAL_OBSERVABILITY__LOG_LEVEL", "DEBUG")
    assert load_settings().observability.log_level == "DEBUG"


def test_validate_insights():
    Settings().validate_insights()
    with pytest.raises(ConfigError):
        Settings(insights={"provider": "gemini"}).validate_insights()
