"""Per-rule violation analysis for one trading system.

For every currently active rule the analyzer counts how often the rule was
tracked on a trade (its id is a key in ``rules_followed``) and how often it
was explicitly violated (value ``False``).  Untracked trades never count
toward the denominator.

Usage::

    ranked = analyze_rule_violations(system, trades)
    worst = most_violated_rule(recent_rule_violations(system, trades))
"""

from __future__ import annotations

import logging
from typing import Sequence

from silence_journal.core.clock import IClock, window_start
from silence_journal.core.enums import RuleStatus
from silence_journal.core.models import JournalModel, Rule, Trade, TradingSystemModel

from .metrics import RECENT_WINDOW_DAYS
from .stats import percentage

logger = logging.getLogger(__name__)


class RuleViolationStat(JournalModel):
    rule_id: str
    rule_text: str
    violations: int
    times_active: int
    violation_rate: float


def _rule_stat(rule: Rule, trades: Sequence[Trade]) -> RuleViolationStat:
    times_active = 0
    violations = 0
    for trade in trades:
        status = trade.rule_status(rule.id)
        if status is RuleStatus.NOT_TRACKED:
            continue
        times_active += 1
        if status is RuleStatus.VIOLATED:
            violations += 1
    return RuleViolationStat(
        rule_id=rule.id,
        rule_text=rule.text,
        violations=violations,
        times_active=times_active,
        violation_rate=percentage(violations, times_active),
    )


def analyze_rule_violations(
    system: TradingSystemModel,
    trades: Sequence[Trade],
    *,
    window_days: int | None = None,
    clock: IClock | None = None,
) -> list[RuleViolationStat]:
    """Rank the system's active rules by violation rate, highest first.

    Trades belonging to other systems are ignored.  With ``window_days``
    only trades dated inside the trailing window count, and rules that were
    never tracked in that window are dropped; the all-time ranking keeps
    them at rate 0.  Ties keep the system's rule order.
    """
    system_trades = [t for t in trades if t.system_id == system.id]
    if window_days is not None:
        cutoff = window_start(clock, window_days)
        system_trades = [t for t in system_trades if t.timestamp >= cutoff]

    stats = [_rule_stat(rule, system_trades) for rule in system.active_rules]
    if window_days is not None:
        stats = [s for s in stats if s.times_active > 0]

    ranked = sorted(stats, key=lambda s: s.violation_rate, reverse=True)
    logger.debug(
        "Rule violations for %s over %d trades: %s",
        system.id,
        len(system_trades),
        [(s.rule_id, round(s.violation_rate, 1)) for s in ranked],
    )
    return ranked


def recent_rule_violations(
    system: TradingSystemModel,
    trades: Sequence[Trade],
    *,
    days: int = RECENT_WINDOW_DAYS,
    clock: IClock | None = None,
) -> list[RuleViolationStat]:
    """Windowed ranking over the trailing ``days`` (30 by default)."""
    return analyze_rule_violations(system, trades, window_days=days, clock=clock)


def most_violated_rule(stats: Sequence[RuleViolationStat]) -> RuleViolationStat | None:
    return stats[0] if stats else None
