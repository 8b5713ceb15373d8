"""Journal configuration.

A TOML file supplies the storage, logging and coaching sections;
`JOURNAL_*` environment variables (nested with `__`) fill in what it omits.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .enums import InsightProviderKind


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class StorageConfig(BaseModel):
    data_dir: str = "data"
    trades_file: str = "silence_journal_trades.json"
    settings_file: str = "silence_journal_settings.json"

    @property
    def trades_path(self) -> Path:
        return Path(self.data_dir) / self.trades_file

    @property
    def settings_path(self) -> Path:
        return Path(self.data_dir) / self.settings_file


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


class InsightConfig(BaseModel):
    provider: str = InsightProviderKind.RULE_BASED.value
    api_key_env: str = "ANTHROPIC_API_KEY"  # Name of env var holding the API key
    model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 1024
    temperature: float = 0.7
    timeout_seconds: float = 30.0


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Values passed in (from TOML or overrides) win over environment variables.
    """

    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)

    model_config = {"env_prefix": "JOURNAL_", "env_nested_delimiter": "__"}

    def validate_insights(self) -> None:
        """Reject unknown coaching providers."""
        from .errors import ConfigError

        known = {k.value for k in InsightProviderKind}
        if self.insights.provider not in known:
            raise ConfigError(
                f"Unknown insights provider {self.insights.provider!r}; "
                f"expected one of {sorted(known)}."
            )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    return Settings(**data)
