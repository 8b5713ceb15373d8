"""Seed data for a fresh journal: the starter system and settings."""

from __future__ import annotations

from .enums import CriterionType, ThemeMode
from .models import (
    DEFAULT_PAIRS,
    DEFAULT_RISK_PERCENT,
    DEFAULT_SESSIONS,
    Criterion,
    Rule,
    TradingSystemModel,
    UserSettings,
)

DEFAULT_RULES: list[Rule] = [
    Rule(id="1", text="Wait for the HTF narrative to align", active=True),
    Rule(id="2", text="Do not trade outside of Killzones", active=True),
    Rule(id="3", text="Only risk 0.5% - 1% per trade", active=True),
    Rule(id="4", text="Exit trade if bias is invalidated", active=True),
]

DEFAULT_CRITERIA: list[Criterion] = [
    Criterion(
        id="c1",
        name="What is the Daily Bias?",
        type=CriterionType.QUESTION,
        response="Determined by previous day high/low sweep or HTF order flow.",
    ),
    Criterion(
        id="c2",
        name="Entry Confluence Checklist",
        type=CriterionType.CHECKLIST,
        options=["MSS (Market Structure Shift)", "FVG Entry", "Stop Loss below low"],
    ),
]

DEFAULT_SYSTEM = TradingSystemModel(
    id="default-system",
    name="Primary ICT Model",
    rules=DEFAULT_RULES,
    custom_criteria=DEFAULT_CRITERIA,
    samples=[],
)


def initial_settings() -> UserSettings:
    """A fresh settings document (a new copy on every call)."""
    return UserSettings(
        systems=[DEFAULT_SYSTEM.model_copy(deep=True)],
        default_risk=DEFAULT_RISK_PERCENT,
        pairs=list(DEFAULT_PAIRS),
        sessions=list(DEFAULT_SESSIONS),
        theme=ThemeMode.LIGHT,
    )
