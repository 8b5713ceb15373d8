"""Shared fixtures and factories for the silence-journal test suite."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from typing import Any

import pytest

from silence_journal.core.clock import FixedClock
from silence_journal.core.enums import CriterionType
from silence_journal.core.models import Criterion, Rule, Trade, TradingSystemModel, UserSettings

# Monday, inside the London session.
BASE_TIME = datetime(2024, 6, 3, 10, 0)
NOW = datetime(2024, 6, 30, 12, 0)

_ids = itertools.count(1)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def make_trade(
    result_r: float = 1.0,
    *,
    at: datetime | None = None,
    system_id: str = "sys-1",
    rules: dict[str, bool] | None = None,
    emotions: list[str] | None = None,
    risk_percent: float | None = None,
    risk_reward: float = 2.0,
    **kwargs: Any,
) -> Trade:
    """A trade with sensible defaults; ``at`` defaults to BASE_TIME."""
    return Trade(
        id=kwargs.pop("id", f"t{next(_ids)}"),
        system_id=system_id,
        pair=kwargs.pop("pair", "EURUSD"),
        date=(at or BASE_TIME).isoformat(),
        result_r=result_r,
        risk_reward=risk_reward,
        risk_percent=risk_percent,
        rules_followed=rules or {},
        emotions=emotions or [],
        **kwargs,
    )


def make_system(
    system_id: str = "sys-1",
    *,
    rules: list[tuple[str, str, bool]] | None = None,
    criteria: list[Criterion] | None = None,
    name: str = "Test System",
) -> TradingSystemModel:
    """``rules`` is a list of ``(id, text, active)`` tuples."""
    if rules is None:
        rules = [("r1", "Wait for HTF", True), ("r2", "Killzones only", True)]
    return TradingSystemModel(
        id=system_id,
        name=name,
        rules=[Rule(id=rid, text=text, active=active) for rid, text, active in rules],
        custom_criteria=criteria or [],
    )


def spread_daily(count: int, *, start: datetime = BASE_TIME) -> list[datetime]:
    """``count`` timestamps one day apart."""
    return [start + timedelta(days=i) for i in range(count)]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def system() -> TradingSystemModel:
    return make_system()


@pytest.fixture
def criteria_system() -> TradingSystemModel:
    return make_system(
        criteria=[
            Criterion(id="c1", name="Daily Bias", type=CriterionType.QUESTION),
            Criterion(
                id="c2",
                name="Entry Checklist",
                type=CriterionType.CHECKLIST,
                options=["MSS", "FVG Entry"],
            ),
            Criterion(
                id="c3",
                name="Setup Type",
                type=CriterionType.MULTI_SELECT,
                options=["Breaker", "OB"],
            ),
        ]
    )


@pytest.fixture
def user_settings(criteria_system) -> UserSettings:
    return UserSettings(systems=[criteria_system])
