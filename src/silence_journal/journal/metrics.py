"""Dashboard metrics over a flat trade list.

Computes win rate, average planned RR of winners, the cumulative R equity
curve, pooled rule adherence, the 30-day average Rule Respect Score and a
per-emotion performance breakdown.

Usage::

    metrics = calculate_metrics(trades, clock=FixedClock(now))
    print(metrics.win_rate, metrics.equity_curve[-1].balance)
"""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import Field

from silence_journal.core.clock import IClock, window_start
from silence_journal.core.enums import Emotion
from silence_journal.core.models import JournalModel, Trade

from .stats import average_r, percentage, sort_by_date, tracked_rule_counts

logger = logging.getLogger(__name__)

RECENT_WINDOW_DAYS = 30
# A trade saved before rule-respect tracking existed counts as fully compliant.
DEFAULT_RULE_RESPECT_SCORE = 100.0

EMOTION_TAGS: list[str] = [e.value for e in Emotion]


class EquityPoint(JournalModel):
    date: str
    balance: float


class EmotionStats(JournalModel):
    wins: int
    total: int
    win_rate: float
    avg_r: float


class TradeMetrics(JournalModel):
    win_rate: float = 0.0
    avg_rr: float = Field(default=0.0, alias="avgRR")
    equity_curve: list[EquityPoint] = Field(default_factory=list)
    rules_followed_percent: float = 0.0
    avg_rrs_30_days: float = Field(default=0.0, alias="avgRRS30Days")
    emotion_performance: dict[str, EmotionStats] = Field(default_factory=dict)


def equity_curve(trades: Sequence[Trade]) -> list[EquityPoint]:
    """Running sum of ``result_r`` in ascending date order, one point per trade."""
    balance = 0.0
    points: list[EquityPoint] = []
    for trade in sort_by_date(trades):
        balance += trade.result_r
        points.append(EquityPoint(date=trade.date, balance=balance))
    return points


def average_rule_respect(
    trades: Sequence[Trade],
    *,
    days: int = RECENT_WINDOW_DAYS,
    clock: IClock | None = None,
) -> float:
    """Mean Rule Respect Score over trades dated within the trailing window."""
    cutoff = window_start(clock, days)
    recent = [t for t in trades if t.timestamp >= cutoff]
    if not recent:
        return 0.0
    scores = [
        DEFAULT_RULE_RESPECT_SCORE if t.rule_respect_score is None else t.rule_respect_score
        for t in recent
    ]
    return sum(scores) / len(scores)


def emotion_performance(trades: Sequence[Trade]) -> dict[str, EmotionStats]:
    """Stats per tracked emotion tag; tags no trade carries are omitted."""
    result: dict[str, EmotionStats] = {}
    for emotion in EMOTION_TAGS:
        tagged = [t for t in trades if emotion in t.emotions]
        if not tagged:
            continue
        wins = sum(1 for t in tagged if t.is_win)
        result[emotion] = EmotionStats(
            wins=wins,
            total=len(tagged),
            win_rate=percentage(wins, len(tagged)),
            avg_r=average_r(tagged),
        )
    return result


def calculate_metrics(
    trades: Sequence[Trade],
    *,
    clock: IClock | None = None,
) -> TradeMetrics:
    """Compute the dashboard metrics for ``trades``.

    ``avg_rr`` deliberately averages the *planned* ``risk_reward`` of the
    winning trades, divided by the winner count (or 1 with no winners).
    ``rules_followed_percent`` pools rule entries across all systems.
    """
    if not trades:
        return TradeMetrics()

    wins = [t for t in trades if t.is_win]
    win_rate = percentage(len(wins), len(trades))
    avg_rr = sum(t.risk_reward for t in wins) / (len(wins) or 1)

    followed, tracked = tracked_rule_counts(trades)

    metrics = TradeMetrics(
        win_rate=win_rate,
        avg_rr=avg_rr,
        equity_curve=equity_curve(trades),
        rules_followed_percent=percentage(followed, tracked),
        avg_rrs_30_days=average_rule_respect(trades, clock=clock),
        emotion_performance=emotion_performance(trades),
    )
    logger.debug(
        "Metrics over %d trades: win_rate=%.1f avg_rr=%.2f rules=%.1f",
        len(trades),
        metrics.win_rate,
        metrics.avg_rr,
        metrics.rules_followed_percent,
    )
    return metrics
