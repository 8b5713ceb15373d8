"""In-memory stores -- no persistence.  Used by tests and scratch sessions."""

from __future__ import annotations

from silence_journal.core.defaults import initial_settings
from silence_journal.core.models import Trade, UserSettings


class InMemoryTradeStore:
    def __init__(self, trades: list[Trade] | None = None) -> None:
        self._trades: list[Trade] = list(trades or [])

    def list(self) -> list[Trade]:
        return list(self._trades)

    def replace_all(self, trades: list[Trade]) -> None:
        self._trades = list(trades)


class InMemorySettingsStore:
    def __init__(self, settings: UserSettings | None = None) -> None:
        self._settings = settings or initial_settings()

    def get(self) -> UserSettings:
        return self._settings.model_copy(deep=True)

    def replace_all(self, settings: UserSettings) -> None:
        self._settings = settings.model_copy(deep=True)
