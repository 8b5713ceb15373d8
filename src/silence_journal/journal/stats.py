"""Shared statistics helpers for the journal analyzers.

Every ratio here has an explicit fallback instead of producing NaN or
infinity, so analyzers stay total over any trade list.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from silence_journal.core.models import Trade


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (``Math.round`` semantics)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def percentage(part: int | float, whole: int | float, *, default: float = 0.0) -> float:
    """``part / whole * 100`` or ``default`` when ``whole`` is zero."""
    if whole == 0:
        return default
    return part / whole * 100


def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage of trades with ``result_r > 0``; 0 for no trades."""
    return percentage(sum(1 for t in trades if t.is_win), len(trades))


def average_r(trades: Sequence[Trade]) -> float:
    if not trades:
        return 0.0
    return sum(t.result_r for t in trades) / len(trades)


def coefficient_of_variation(values: Sequence[float]) -> float | None:
    """Population stdev / mean.  ``None`` when the mean is not positive."""
    if not values:
        return None
    arr = np.asarray(values, dtype=float)
    mean = float(arr.mean())
    if mean <= 0:
        return None
    return float(arr.std()) / mean


def population_stdev(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.asarray(values, dtype=float).std())


def sort_by_date(trades: Iterable[Trade]) -> list[Trade]:
    """Ascending by timestamp; ties keep their input order."""
    return sorted(trades, key=lambda t: t.timestamp)


def longest_streak(trades: Iterable[Trade], *, wins: bool) -> int:
    """Longest run of consecutive wins (or losses) in the given order.

    Any trade that is not a win (or not a loss) breaks the run, so a
    break-even trade resets both streaks.
    """
    best = 0
    current = 0
    for trade in trades:
        hit = trade.is_win if wins else trade.is_loss
        if hit:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def tracked_rule_counts(trades: Iterable[Trade]) -> tuple[int, int]:
    """(followed, tracked) rule entries pooled across trades."""
    followed = 0
    tracked = 0
    for trade in trades:
        tracked += len(trade.rules_followed)
        followed += sum(1 for v in trade.rules_followed.values() if v is True)
    return followed, tracked


def rule_adherence_ratio(trades: Iterable[Trade], *, neutral: float) -> float:
    """Followed / tracked entries × 100, or ``neutral`` when nothing is tracked.

    Trades without any ``rules_followed`` entry do not count: missing
    tracking is not penalized as a violation.
    """
    followed, tracked = tracked_rule_counts(t for t in trades if t.rules_followed)
    return percentage(followed, tracked, default=neutral)
