"""Trading psychology scoring.

Scores a trader's full history on four behavioural axes and combines them
into one weighted score, then derives strengths, risks, warnings and a
coaching message from the same numbers.

    Component             Weight   Measures
    ──────────────────────────────────────────────────────────────
    Rule adherence         40%     tracked rule entries marked followed
    Emotional stability    30%     same-day trading after loss streaks
    Trading discipline     20%     overtrading days, risk-size dispersion
    Consistency            10%     dispersion of weekly trade counts

All sub-scores are clamped to [0, 100].

Usage::

    insight = analyze_psychology(trades, settings.systems)
    print(insight.score.overall, insight.coaching_message)
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import Sequence

from pydantic import Field
from pydantic.alias_generators import to_camel

from silence_journal.core.models import JournalModel, Trade, TradingSystemModel

from .sessions import analyze_session_performance
from .stats import (
    clamp,
    coefficient_of_variation,
    longest_streak,
    round_half_up,
    rule_adherence_ratio,
    sort_by_date,
)

logger = logging.getLogger(__name__)

MIN_TRADES = 5
MIN_TRADES_FOR_CONSISTENCY = 10

# Neutral fallbacks: no data is not evidence of bad behaviour.
NEUTRAL_RULE_ADHERENCE = 50
NEUTRAL_CONSISTENCY = 50

BASE_EMOTIONAL_STABILITY = 70
REVENGE_PENALTY = 10
REVENGE_MIN_LOSS_STREAK = 2

BASE_DISCIPLINE = 70
OVERTRADING_DAILY_LIMIT = 5
OVERTRADING_PENALTY = 5
MIN_RISK_SAMPLES = 6

WEIGHTS = {
    "rule_adherence": 0.4,
    "emotional_stability": 0.3,
    "trading_discipline": 0.2,
    "consistency": 0.1,
}

RISK_WINDOW = 20
WARNING_WINDOW = 30
FRIDAY = 4  # datetime.weekday()
LATE_DAY_HOUR = 16


class PsychologyScore(JournalModel):
    overall: int = 0
    rule_adherence: int = 0
    emotional_stability: int = 0
    trading_discipline: int = 0
    consistency: int = 0


class ScoreExplanation(JournalModel):
    formula: str
    calculation: str
    description: str


class PsychologyInsight(JournalModel):
    score: PsychologyScore
    score_explanations: dict[str, ScoreExplanation] = Field(default_factory=dict)
    strengths: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    coaching_message: str = ""
    warnings: list[str] = Field(default_factory=list)


_FORMULAS = {
    "overall": (
        "Rule Adherence (40%) + Emotional Stability (30%) + Trading Discipline (20%) + Consistency (10%)",
        "Overall psychology score based on weighted components",
    ),
    "rule_adherence": (
        "Rules Followed / Total Rules × 100",
        "How well you follow your trading rules",
    ),
    "emotional_stability": (
        "70 − 10 × revenge-trading indicators",
        "Your emotional control during trading",
    ),
    "trading_discipline": (
        "70 − 5 per overtrading day ± risk consistency",
        "How consistently you manage risk",
    ),
    "consistency": (
        "Weekly trade-count variation",
        "How consistent your trading behavior is",
    ),
}


# ------------------------------------------------------------------ #
# Sub-scores                                                           #
# ------------------------------------------------------------------ #

def rule_adherence_score(trades: Sequence[Trade]) -> int:
    return round_half_up(rule_adherence_ratio(trades, neutral=NEUTRAL_RULE_ADHERENCE))


def revenge_indicators(trades: Sequence[Trade]) -> int:
    """Count losses that extend a loss streak and are followed the same day.

    A loss at position ``i`` counts when the running loss streak is at
    least two and the next trade (by date) falls on the same calendar date.
    """
    ordered = sort_by_date(trades)
    indicators = 0
    consecutive_losses = 0
    for i, trade in enumerate(ordered):
        if not trade.is_loss:
            consecutive_losses = 0
            continue
        consecutive_losses += 1
        if i + 1 < len(ordered):
            same_day = ordered[i + 1].calendar_date == trade.calendar_date
            if same_day and consecutive_losses >= REVENGE_MIN_LOSS_STREAK:
                indicators += 1
    return indicators


def emotional_stability_score(trades: Sequence[Trade]) -> int:
    score = BASE_EMOTIONAL_STABILITY - REVENGE_PENALTY * revenge_indicators(trades)
    return int(clamp(score))


def overtrading_days(trades: Sequence[Trade]) -> int:
    per_day = Counter(t.calendar_date for t in trades)
    return sum(1 for count in per_day.values() if count > OVERTRADING_DAILY_LIMIT)


def risk_consistency_adjustment(trades: Sequence[Trade]) -> int:
    """+15 / +5 / −10 from the CV of ``risk_percent``; 0 with too few samples."""
    risks = [t.risk_percent for t in trades if t.risk_percent]
    if len(risks) < MIN_RISK_SAMPLES:
        return 0
    cv = coefficient_of_variation(risks)
    if cv is None:
        return 0
    if cv < 0.2:
        return 15
    if cv < 0.4:
        return 5
    return -10


def trading_discipline_score(trades: Sequence[Trade]) -> int:
    score = (
        BASE_DISCIPLINE
        - OVERTRADING_PENALTY * overtrading_days(trades)
        + risk_consistency_adjustment(trades)
    )
    return int(clamp(score))


def _week_start(trade: Trade):
    day = trade.calendar_date
    # Weeks start on Sunday; weekday() is 0 for Monday.
    return day - timedelta(days=(day.weekday() + 1) % 7)


def consistency_score(trades: Sequence[Trade]) -> int:
    if len(trades) < MIN_TRADES_FOR_CONSISTENCY:
        return NEUTRAL_CONSISTENCY
    weekly = Counter(_week_start(t) for t in trades)
    if len(weekly) < 2:
        return NEUTRAL_CONSISTENCY
    cv = coefficient_of_variation(list(weekly.values()))
    if cv is None:
        return NEUTRAL_CONSISTENCY
    if cv < 0.3:
        return 90
    if cv < 0.5:
        return 70
    if cv < 0.7:
        return 50
    return 30


def overall_score(
    rule_adherence: float,
    emotional_stability: float,
    trading_discipline: float,
    consistency: float,
) -> int:
    weighted = (
        rule_adherence * WEIGHTS["rule_adherence"]
        + emotional_stability * WEIGHTS["emotional_stability"]
        + trading_discipline * WEIGHTS["trading_discipline"]
        + consistency * WEIGHTS["consistency"]
    )
    return int(clamp(round_half_up(weighted)))


# ------------------------------------------------------------------ #
# Narrative                                                            #
# ------------------------------------------------------------------ #

def identify_strengths(trades: Sequence[Trade], score: PsychologyScore) -> list[str]:
    strengths: list[str] = []
    if score.rule_adherence >= 80:
        strengths.append("Excellent rule adherence - you follow your trading plan consistently.")
    if score.emotional_stability >= 75:
        strengths.append("Strong emotional control - you handle losses well without revenge trading.")
    if score.trading_discipline >= 75:
        strengths.append("Good trading discipline - consistent position sizing and trade frequency.")
    if score.consistency >= 70:
        strengths.append("Consistent trading routine - regular journaling and trading schedule.")

    qualifying = [
        (name, stats)
        for name, stats in analyze_session_performance(trades).items()
        if stats.trades >= 5
    ]
    if qualifying:
        name, stats = max(qualifying, key=lambda item: item[1].win_rate)
        if stats.win_rate >= 60:
            strengths.append(
                f"Strong performance during {name} session ({stats.win_rate:.0f}% win rate)."
            )
    return strengths[:4]


def identify_risks(trades: Sequence[Trade], score: PsychologyScore) -> list[str]:
    risks: list[str] = []
    if score.rule_adherence < 60:
        risks.append("Rule violations are impacting your performance. Focus on following your system.")
    if score.emotional_stability < 60:
        risks.append("Signs of emotional trading detected. Consider taking breaks after losses.")
    if score.trading_discipline < 60:
        risks.append("Overtrading or inconsistent position sizing detected.")
    if score.consistency < 50:
        risks.append("Inconsistent trading routine may be affecting your edge.")

    recent = sort_by_date(trades)[-RISK_WINDOW:]
    loss_streak = longest_streak(recent, wins=False)
    if loss_streak >= 4:
        risks.append(
            f"Recent loss streak of {loss_streak} trades detected. Review your recent setups."
        )
    return risks[:4]


_COACHING_FOCUS = {
    "rule_adherence": (
        "Your biggest opportunity is improving rule adherence. Before each trade, "
        "review your checklist and ensure all criteria are met."
    ),
    "emotional_stability": (
        "Work on emotional control. Consider implementing a mandatory 30-minute "
        "break after any losing trade."
    ),
    "trading_discipline": (
        "Focus on discipline. Set a maximum number of trades per day and stick to "
        "consistent position sizing."
    ),
    "consistency": (
        "Build a consistent routine. Trade at the same times each day and journal "
        "every trade immediately."
    ),
}


def coaching_message(score: PsychologyScore) -> str:
    if score.overall >= 80:
        opening = "You're performing exceptionally well. Your discipline and consistency are paying off."
    elif score.overall >= 60:
        opening = "You're on the right track, but there's room for improvement."
    else:
        opening = "Your trading psychology needs attention. Focus on the fundamentals."

    components = {name: getattr(score, name) for name in WEIGHTS}
    weakest = min(components, key=components.__getitem__)
    return f"{opening} {_COACHING_FOCUS[weakest]}"


def generate_warnings(trades: Sequence[Trade]) -> list[str]:
    warnings: list[str] = []
    recent = sort_by_date(trades)[-WARNING_WINDOW:]

    fridays = [t for t in recent if t.timestamp.weekday() == FRIDAY]
    if len(fridays) >= 3:
        friday_wins = sum(1 for t in fridays if t.is_win) / len(fridays)
        if friday_wins < 0.4:
            warnings.append(
                "Your Friday performance is below average. Consider reducing Friday trading."
            )

    late = [t for t in recent if t.timestamp.hour >= LATE_DAY_HOUR]
    if len(late) >= 3:
        late_wins = sum(1 for t in late if t.is_win) / len(late)
        if late_wins < 0.4:
            warnings.append(
                "Your performance drops after 4 PM. Consider ending your trading day earlier."
            )

    win_streak = longest_streak(recent, wins=True)
    if win_streak >= 5:
        warnings.append(
            f"After win streaks of {win_streak}+, watch for overconfidence. Stick to your rules."
        )
    return warnings


def _explanations(trades: Sequence[Trade], score: PsychologyScore | None) -> dict[str, ScoreExplanation]:
    if score is None:
        calculations = {name: "Not enough data" for name in _FORMULAS}
    else:
        parts = [
            f"{getattr(score, name) * weight:.1f}" for name, weight in WEIGHTS.items()
        ]
        # Every trade carries a rules map, even an empty one.
        tracked = len(trades)
        with_emotions = sum(1 for t in trades if t.emotions)
        calculations = {
            "overall": f"{' + '.join(parts)} = {score.overall}",
            "rule_adherence": f"Based on {tracked} trades with rule tracking",
            "emotional_stability": f"Analyzed {with_emotions} trades with emotions",
            "trading_discipline": f"Based on risk consistency across {len(trades)} trades",
            "consistency": f"Pattern analysis of {len(trades)} trades",
        }
    return {
        to_camel(name): ScoreExplanation(
            formula=formula, calculation=calculations[name], description=desc
        )
        for name, (formula, desc) in _FORMULAS.items()
    }


# ------------------------------------------------------------------ #
# Entry point                                                          #
# ------------------------------------------------------------------ #

def analyze_psychology(
    trades: Sequence[Trade],
    systems: Sequence[TradingSystemModel],
) -> PsychologyInsight:
    """Score the full trade history.

    ``systems`` is accepted for callers that analyse per-system context;
    scoring itself pools every trade's tracked rules, so trades of deleted
    systems still count.
    """
    if len(trades) < MIN_TRADES:
        return PsychologyInsight(
            score=PsychologyScore(),
            score_explanations=_explanations(trades, None),
            strengths=[],
            risks=[f"Not enough trade data for analysis. Log at least {MIN_TRADES} trades."],
            coaching_message=(
                "Start logging your trades consistently to receive personalized coaching insights."
            ),
            warnings=[],
        )

    rule_adherence = rule_adherence_score(trades)
    emotional_stability = emotional_stability_score(trades)
    trading_discipline = trading_discipline_score(trades)
    consistency = consistency_score(trades)

    score = PsychologyScore(
        overall=overall_score(rule_adherence, emotional_stability, trading_discipline, consistency),
        rule_adherence=rule_adherence,
        emotional_stability=emotional_stability,
        trading_discipline=trading_discipline,
        consistency=consistency,
    )
    logger.debug("Psychology score over %d trades (%d systems): %s", len(trades), len(systems), score)

    return PsychologyInsight(
        score=score,
        score_explanations=_explanations(trades, score),
        strengths=identify_strengths(trades, score),
        risks=identify_risks(trades, score),
        coaching_message=coaching_message(score),
        warnings=generate_warnings(trades),
    )
