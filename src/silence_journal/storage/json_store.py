"""JSON-file document stores.

Each store owns one file holding one whole document: the trade list or the
settings object.  Reads decode, migrate and validate; writes replace the
file atomically.  Any unreadable or invalid document raises
:class:`StorageError` rather than being silently dropped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from silence_journal.core.defaults import initial_settings
from silence_journal.core.errors import StorageError
from silence_journal.core.file_io import atomic_write_text, read_text_if_exists
from silence_journal.core.models import Trade, UserSettings

from .migrations import migrate_settings, migrate_trade

logger = logging.getLogger(__name__)


def _decode(path: Path, text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StorageError(str(path), f"invalid JSON: {exc}") from exc


class JsonTradeStore:
    """Trade list persisted as a JSON array of camelCase trade documents."""

    def __init__(self, path: str | Path = "data/silence_journal_trades.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def list(self) -> list[Trade]:
        text = read_text_if_exists(self._path)
        if text is None:
            return []

        raw = _decode(self._path, text)
        if not isinstance(raw, list):
            raise StorageError(str(self._path), "expected a JSON array of trades")

        trades: list[Trade] = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                raise StorageError(str(self._path), f"trade #{index} is not an object")
            try:
                trades.append(Trade.model_validate(migrate_trade(item)))
            except ValidationError as exc:
                raise StorageError(str(self._path), f"trade #{index} is invalid: {exc}") from exc
        return trades

    def replace_all(self, trades: list[Trade]) -> None:
        payload = json.dumps([t.to_document() for t in trades], indent=2, ensure_ascii=False)
        try:
            atomic_write_text(self._path, payload)
        except OSError as exc:
            raise StorageError(str(self._path), f"write failed: {exc}") from exc
        logger.info("Saved %d trades to %s", len(trades), self._path)


class JsonSettingsStore:
    """Settings persisted as one camelCase JSON object.

    A missing file reads as the initial settings.  A document upgraded by a
    migration is written back so the upgrade happens once.
    """

    def __init__(self, path: str | Path = "data/silence_journal_settings.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> UserSettings:
        text = read_text_if_exists(self._path)
        if text is None:
            return initial_settings()

        raw = _decode(self._path, text)
        if not isinstance(raw, dict):
            raise StorageError(str(self._path), "expected a JSON object")

        raw, migrated = migrate_settings(raw)
        try:
            settings = UserSettings.model_validate(raw)
        except ValidationError as exc:
            raise StorageError(str(self._path), f"settings are invalid: {exc}") from exc

        if migrated:
            logger.info("Migrated settings at %s: added default sessions", self._path)
            self.replace_all(settings)
        return settings

    def replace_all(self, settings: UserSettings) -> None:
        payload = json.dumps(settings.to_document(), indent=2, ensure_ascii=False)
        try:
            atomic_write_text(self._path, payload)
        except OSError as exc:
            raise StorageError(str(self._path), f"write failed: {exc}") from exc
        logger.info("Saved settings to %s", self._path)
