"""Session classifier: buckets trades by hour of day.

Sessions here are fixed time-of-day buckets derived from the trade
timestamp (local time), not the free-text session labels a trader attaches
to a trade.

    Session      Hours
    ─────────────────────
    Asian        [0, 8)
    London       [8, 13)
    New York     [13, 21)
    Off-Hours    anything else
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from silence_journal.core.enums import TradingSession
from silence_journal.core.models import JournalModel, Trade

from .stats import average_r, win_rate

logger = logging.getLogger(__name__)

# Inclusive start, exclusive end
SESSION_HOURS: dict[TradingSession, tuple[int, int]] = {
    TradingSession.ASIAN: (0, 8),
    TradingSession.LONDON: (8, 13),
    TradingSession.NEW_YORK: (13, 21),
}

SESSION_ORDER = [
    TradingSession.ASIAN,
    TradingSession.LONDON,
    TradingSession.NEW_YORK,
    TradingSession.OFF_HOURS,
]


class SessionStats(JournalModel):
    win_rate: float
    trades: int
    avg_r: float


def classify_session(hour: int) -> TradingSession:
    """Map an hour of day (0-23) to its session bucket."""
    for session, (start_h, end_h) in SESSION_HOURS.items():
        if start_h <= hour < end_h:
            return session
    return TradingSession.OFF_HOURS


def session_for(trade: Trade) -> TradingSession:
    return classify_session(trade.timestamp.hour)


def group_by_session(trades: Iterable[Trade]) -> dict[TradingSession, list[Trade]]:
    """Trades per session, in :data:`SESSION_ORDER`, empty buckets omitted."""
    buckets: dict[TradingSession, list[Trade]] = defaultdict(list)
    for trade in trades:
        buckets[session_for(trade)].append(trade)
    return {s: buckets[s] for s in SESSION_ORDER if buckets.get(s)}


def analyze_session_performance(trades: Iterable[Trade]) -> dict[str, SessionStats]:
    """Win rate, count and average R per non-empty session bucket."""
    result: dict[str, SessionStats] = {}
    for session, bucket in group_by_session(trades).items():
        result[session.value] = SessionStats(
            win_rate=win_rate(bucket),
            trades=len(bucket),
            avg_r=average_r(bucket),
        )
    logger.debug("Session performance: %s", {k: v.trades for k, v in result.items()})
    return result
