"""Read-time upgrades for documents written by older versions.

Each migration takes the raw decoded JSON and returns the upgraded raw
document; pydantic validation happens afterwards.
"""

from __future__ import annotations

from typing import Any

from silence_journal.core.models import DEFAULT_SESSIONS

# Trades saved before psychology tracking existed.
TRADE_FIELD_DEFAULTS: dict[str, Any] = {
    "ruleRespectScore": 100,
    "rulesFollowedCount": 0,
    "totalActiveRules": 0,
}


def migrate_trade(raw: dict[str, Any]) -> dict[str, Any]:
    doc = dict(raw)
    if not doc.get("emotions"):
        doc["emotions"] = []
    for key, default in TRADE_FIELD_DEFAULTS.items():
        if doc.get(key) is None:
            doc[key] = default
    return doc


def migrate_settings(raw: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """Return ``(document, changed)``; settings without sessions get the defaults."""
    if raw.get("sessions") is not None:
        return raw, False
    doc = dict(raw)
    doc["sessions"] = list(DEFAULT_SESSIONS)
    return doc, True
