"""Per-system edge diagnostics.

Answers "does this system have a real edge, and where?" for one trading
system: overall win rate, an Edge Clarity Score, month-to-month
consistency, the best and worst session buckets with their confluence
detail, and plain-language diagnosis and recommendations.

Edge Clarity Score (0-100)::

    min(100, win_rate × 1.5) × 0.40
    + consistency          × 0.25
    + rule adherence       × 0.20
    + sample-size score    × 0.15

Usage::

    report = analyze_system_intelligence(trades, system)
    print(report.edge_clarity_score, report.best_setup.session)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence

from pydantic import Field

from silence_journal.core.enums import TradingSession
from silence_journal.core.models import JournalModel, Trade, TradingSystemModel

from .psychology import NEUTRAL_RULE_ADHERENCE, ScoreExplanation
from .sessions import SessionStats, analyze_session_performance, group_by_session
from .stats import (
    average_r,
    percentage,
    population_stdev,
    round_half_up,
    rule_adherence_ratio,
    win_rate,
)

logger = logging.getLogger(__name__)

MIN_SYSTEM_TRADES = 10
MIN_SETUP_TRADES = 3
MIN_VARIANCE_SESSION_TRADES = 5
MIN_MONTH_TRADES = 5
NEUTRAL_SYSTEM_CONSISTENCY = 50

EDGE_WEIGHTS = {
    "win_rate": 0.4,
    "consistency": 0.25,
    "rule_adherence": 0.2,
    "sample": 0.15,
}

# (minimum trade count, score), checked top to bottom
SAMPLE_SIZE_STEPS = [(100, 100), (50, 80), (30, 60), (10, 40)]
SAMPLE_SIZE_FLOOR = 20

# (stdev of monthly win rates below, score)
MONTHLY_STDEV_STEPS = [(0.10, 90), (0.15, 75), (0.20, 60), (0.25, 45)]
MONTHLY_STDEV_FLOOR = 30

_EDGE_FORMULA = "Win Rate (40%) + Consistency (25%) + Rule Adherence (20%) + Sample Size (15%)"
_EDGE_DESCRIPTION = "How clear and reliable your trading edge is"
_CONSISTENCY_FORMULA = "Performance Variance Score"
_CONSISTENCY_DESCRIPTION = "How consistent your trading results are over time"


class ConfluenceDetails(JournalModel):
    rules_followed: list[str] = Field(default_factory=list)
    rules_violated: list[str] = Field(default_factory=list)
    key_factors: list[str] = Field(default_factory=list)


class SetupAnalysis(JournalModel):
    session: str
    poi: str | None = None
    win_rate: float
    total_trades: int
    avg_r: float
    confluence_details: ConfluenceDetails | None = None


class SystemIntelligence(JournalModel):
    overall_win_rate: float = 0.0
    edge_clarity_score: int = 0
    consistency_rating: int = 0
    best_setup: SetupAnalysis | None = None
    worst_setup: SetupAnalysis | None = None
    session_analysis: dict[str, SessionStats] = Field(default_factory=dict)
    score_explanations: dict[str, ScoreExplanation] = Field(default_factory=dict)
    diagnosis: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# ------------------------------------------------------------------ #
# Scores                                                               #
# ------------------------------------------------------------------ #

def sample_size_score(n_trades: int) -> int:
    for minimum, score in SAMPLE_SIZE_STEPS:
        if n_trades >= minimum:
            return score
    return SAMPLE_SIZE_FLOOR


def system_consistency(trades: Sequence[Trade]) -> int:
    """Score the stability of monthly win rates (months with 5+ trades)."""
    if len(trades) < MIN_SYSTEM_TRADES:
        return NEUTRAL_SYSTEM_CONSISTENCY

    monthly: dict[str, list[Trade]] = defaultdict(list)
    for trade in trades:
        monthly[trade.timestamp.strftime("%Y-%m")].append(trade)

    rates = [
        sum(1 for t in bucket if t.is_win) / len(bucket)
        for bucket in monthly.values()
        if len(bucket) >= MIN_MONTH_TRADES
    ]
    if len(rates) < 2:
        return NEUTRAL_SYSTEM_CONSISTENCY

    stdev = population_stdev(rates)
    for ceiling, score in MONTHLY_STDEV_STEPS:
        if stdev < ceiling:
            return score
    return MONTHLY_STDEV_FLOOR


def edge_clarity_components(trades: Sequence[Trade], overall_win_rate: float) -> dict[str, float]:
    return {
        "win_rate": min(100.0, overall_win_rate * 1.5),
        "consistency": float(system_consistency(trades)),
        "rule_adherence": rule_adherence_ratio(trades, neutral=NEUTRAL_RULE_ADHERENCE),
        "sample": float(sample_size_score(len(trades))),
    }


def edge_clarity_score(components: dict[str, float]) -> int:
    weighted = sum(components[name] * weight for name, weight in EDGE_WEIGHTS.items())
    return round_half_up(weighted)


# ------------------------------------------------------------------ #
# Setups                                                               #
# ------------------------------------------------------------------ #

def _append_unique(items: list[str], value: str) -> None:
    if value not in items:
        items.append(value)


def confluence_details(
    trades: Sequence[Trade],
    system: TradingSystemModel,
) -> ConfluenceDetails:
    """Rule texts followed/violated and POI/session tags seen in ``trades``.

    Rule ids the system no longer defines are skipped.
    """
    details = ConfluenceDetails()
    for trade in trades:
        for rule_id, followed in trade.rules_followed.items():
            rule = system.find_rule(rule_id)
            if rule is None:
                continue
            target = details.rules_followed if followed else details.rules_violated
            _append_unique(target, rule.text)
        for poi in trade.pois:
            _append_unique(details.key_factors, poi)
        for label in trade.sessions:
            _append_unique(details.key_factors, label)
    return details


def _setup(
    session: str,
    stats: SessionStats,
    by_session: dict[TradingSession, list[Trade]],
    system: TradingSystemModel,
) -> SetupAnalysis:
    return SetupAnalysis(
        session=session,
        win_rate=stats.win_rate,
        total_trades=stats.trades,
        avg_r=stats.avg_r,
        confluence_details=confluence_details(by_session[TradingSession(session)], system),
    )


def best_and_worst_setups(
    trades: Sequence[Trade],
    sessions: dict[str, SessionStats],
    system: TradingSystemModel,
) -> tuple[SetupAnalysis | None, SetupAnalysis | None]:
    """Highest and lowest win-rate sessions among those with 3+ trades.

    The worst setup needs at least two qualifying sessions.
    """
    ranked = sorted(
        ((name, stats) for name, stats in sessions.items() if stats.trades >= MIN_SETUP_TRADES),
        key=lambda item: item[1].win_rate,
        reverse=True,
    )
    if not ranked:
        return None, None

    by_session = group_by_session(trades)
    best = _setup(*ranked[0], by_session, system)
    worst = _setup(*ranked[-1], by_session, system) if len(ranked) > 1 else None
    return best, worst


# ------------------------------------------------------------------ #
# Narrative                                                            #
# ------------------------------------------------------------------ #

def system_diagnosis(
    trades: Sequence[Trade],
    overall_win_rate: float,
    sessions: dict[str, SessionStats],
) -> list[str]:
    diagnosis: list[str] = []

    if overall_win_rate >= 60:
        diagnosis.append(f"Your system shows a strong edge with a {overall_win_rate:.1f}% win rate.")
    elif overall_win_rate >= 50:
        diagnosis.append(
            f"Your system is marginally profitable at {overall_win_rate:.1f}% win rate. "
            "Focus on improving setup selection."
        )
    else:
        diagnosis.append(
            f"Your system is currently underperforming at {overall_win_rate:.1f}% win rate. "
            "Review your entry criteria."
        )

    qualifying = [
        (name, stats)
        for name, stats in sessions.items()
        if stats.trades >= MIN_VARIANCE_SESSION_TRADES
    ]
    if len(qualifying) >= 2:
        best_name, best = max(qualifying, key=lambda item: item[1].win_rate)
        worst_name, worst = min(qualifying, key=lambda item: item[1].win_rate)
        if best.win_rate - worst.win_rate > 15:
            diagnosis.append(
                f"Significant session variance detected: {best_name} ({best.win_rate:.0f}%) "
                f"vs {worst_name} ({worst.win_rate:.0f}%)."
            )

    violated = [t for t in trades if t.has_violation]
    if violated:
        loss_rate = percentage(sum(1 for t in violated if t.is_loss), len(violated))
        if loss_rate > 60:
            diagnosis.append(
                f"Rule violations are costly: {loss_rate:.0f}% of trades with violations "
                "result in losses."
            )

    return diagnosis


def system_recommendations(
    trades: Sequence[Trade],
    overall_win_rate: float,
    best: SetupAnalysis | None,
    worst: SetupAnalysis | None,
) -> list[str]:
    recommendations: list[str] = []

    if best and worst and best.win_rate - worst.win_rate > 20:
        recommendations.append(
            f"Focus on {best.session} session where your win rate is {best.win_rate:.0f}%. "
            f"Consider reducing or eliminating {worst.session} trades."
        )

    if overall_win_rate < 50:
        recommendations.append(
            "Review your entry criteria. Consider adding more confluence factors before entering trades."
        )
    elif overall_win_rate >= 60:
        recommendations.append(
            "Your system has a clear edge. Focus on consistency and avoiding rule violations."
        )

    if len(trades) < 30:
        recommendations.append(
            f"Continue logging trades. You have {len(trades)} trades - aim for 30+ for reliable statistics."
        )
    elif len(trades) >= 100:
        recommendations.append(
            "You have a solid sample size. Your statistics are reliable for decision-making."
        )

    avg_r = average_r(trades)
    if avg_r < 0:
        recommendations.append(
            "Your average R is negative. Focus on cutting losses quickly and letting winners run."
        )
    elif avg_r > 1:
        recommendations.append(
            f"Excellent risk management with {avg_r:.2f}R average. Maintain your current approach."
        )

    return recommendations[:4]


# ------------------------------------------------------------------ #
# Entry point                                                          #
# ------------------------------------------------------------------ #

def analyze_system_intelligence(
    trades: Sequence[Trade],
    system: TradingSystemModel,
) -> SystemIntelligence:
    """Analyse the trades logged against ``system``.

    ``trades`` may be the full journal; only trades whose ``system_id``
    matches are used.  Fewer than 10 such trades yields a neutral report
    asking for more data.
    """
    system_trades = [t for t in trades if t.system_id == system.id]

    if len(system_trades) < MIN_SYSTEM_TRADES:
        return SystemIntelligence(
            score_explanations={
                "edgeClarity": ScoreExplanation(
                    formula=_EDGE_FORMULA,
                    calculation="Not enough data",
                    description=_EDGE_DESCRIPTION,
                ),
                "consistency": ScoreExplanation(
                    formula=_CONSISTENCY_FORMULA,
                    calculation="Not enough data",
                    description=_CONSISTENCY_DESCRIPTION,
                ),
            },
            diagnosis=[
                f"Not enough trades for analysis. Log at least {MIN_SYSTEM_TRADES} "
                "trades with this system."
            ],
            recommendations=["Continue trading and logging to build a meaningful sample size."],
        )

    overall = win_rate(system_trades)
    sessions = analyze_session_performance(system_trades)
    best, worst = best_and_worst_setups(system_trades, sessions, system)

    components = edge_clarity_components(system_trades, overall)
    edge = edge_clarity_score(components)
    consistency = int(components["consistency"])

    calculation = " + ".join(
        f"{components[name] * weight:.1f}" for name, weight in EDGE_WEIGHTS.items()
    )
    logger.debug(
        "System %s: %d trades, win_rate=%.1f edge=%d consistency=%d",
        system.id,
        len(system_trades),
        overall,
        edge,
        consistency,
    )

    return SystemIntelligence(
        overall_win_rate=overall,
        edge_clarity_score=edge,
        consistency_rating=consistency,
        best_setup=best,
        worst_setup=worst,
        session_analysis=sessions,
        score_explanations={
            "edgeClarity": ScoreExplanation(
                formula=_EDGE_FORMULA,
                calculation=f"{calculation} = {edge}",
                description=_EDGE_DESCRIPTION,
            ),
            "consistency": ScoreExplanation(
                formula=_CONSISTENCY_FORMULA,
                calculation=f"Based on monthly win rates across {len(system_trades)} trades",
                description=_CONSISTENCY_DESCRIPTION,
            ),
        },
        diagnosis=system_diagnosis(system_trades, overall, sessions),
        recommendations=system_recommendations(system_trades, overall, best, worst),
    )
