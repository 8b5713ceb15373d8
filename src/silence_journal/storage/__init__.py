"""Document stores for trades and settings."""

from .json_store import JsonSettingsStore, JsonTradeStore
from .memory import InMemorySettingsStore, InMemoryTradeStore

__all__ = [
    "JsonSettingsStore",
    "JsonTradeStore",
    "InMemorySettingsStore",
    "InMemoryTradeStore",
]
