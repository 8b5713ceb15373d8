"""Deterministic coaching narrative.

The default insight provider and the fallback for every model-backed one.
Suggestions are tiered on the 30-day average Rule Respect Score, then
sharpened with the most violated rule and the weakest emotional state.
"""

from __future__ import annotations

import logging

from silence_journal.core.ids import payload_hash

from .insights import InsightContext, NarrativeResult

logger = logging.getLogger(__name__)

MOTIVATION_QUOTES = [
    "Discipline is choosing between what you want now and what you want most.",
    "The best trade is the one you don't take.",
    "Patience is not the ability to wait, but how you behave while waiting.",
    "Consistency over intensity. Process over outcome.",
    "The market rewards patience and punishes impulsivity.",
    "Silence speaks when your bias is gone.",
    "Master your emotions, master your trading.",
    "Every violation is a lesson, not a failure.",
]

LOW_RRS = 70
GOOD_RRS = 85
VIOLATION_ALERT_RATE = 30
WEAK_EMOTION_WIN_RATE = 40
MIN_EMOTION_TRADES = 3


def pick_quote(context: InsightContext) -> str:
    """Same context, same quote."""
    digest = payload_hash(context.to_document())
    return MOTIVATION_QUOTES[int(digest, 16) % len(MOTIVATION_QUOTES)]


def _discipline_tier(avg_rrs: float) -> tuple[str, str]:
    if avg_rrs < LOW_RRS:
        return (
            "Your Rule Respect Score is below 70%. Focus on one rule at a time to build "
            "discipline gradually.",
            "Before each trade, review your rules checklist and commit to following at "
            "least 80% of them.",
        )
    if avg_rrs < GOOD_RRS:
        return (
            "You're making progress on discipline. Aim to reach 85%+ Rule Respect Score "
            "for consistent results.",
            "Identify your most violated rule and create a pre-trade reminder to check it "
            "specifically.",
        )
    return (
        "Excellent discipline! Your high Rule Respect Score shows strong adherence to "
        "your trading system.",
        "Maintain this level of discipline and consider adding more nuanced rules to "
        "your system.",
    )


def _pattern_insights(context: InsightContext) -> str:
    if context.avg_rrs_30_days >= GOOD_RRS:
        discipline = "Your discipline is strong"
    elif context.avg_rrs_30_days >= LOW_RRS:
        discipline = "You're building discipline"
    else:
        discipline = "Focus on improving rule adherence"

    if context.rule_violations:
        rules = f'Your most challenging rule is "{context.rule_violations[0].rule_text}".'
    else:
        rules = "Keep tracking your rules to identify patterns."
    return f"You have {context.total_trades} trades recorded. {discipline}. {rules}"


class RuleBasedInsightProvider:
    """Coaching text computed from the context alone; never fails."""

    source = "rule_based"

    def generate_insights(self, context: InsightContext) -> NarrativeResult:
        suggestion, advice = _discipline_tier(context.avg_rrs_30_days)
        suggestions = [suggestion]
        actionable_advice = [advice]

        if context.rule_violations:
            top = context.rule_violations[0]
            if top.violation_rate > VIOLATION_ALERT_RATE:
                suggestions.append(
                    f'"{top.rule_text}" is your most violated rule ({top.violation_rate:.1f}%). '
                    "This is a key area for improvement."
                )
                actionable_advice.append(
                    f'Create a visual reminder for "{top.rule_text}" on your trading screen or journal.'
                )

        weak = sorted(
            (
                (emotion, stats)
                for emotion, stats in context.emotion_performance.items()
                if stats.win_rate < WEAK_EMOTION_WIN_RATE and stats.total >= MIN_EMOTION_TRADES
            ),
            key=lambda item: item[1].win_rate,
        )
        if weak:
            emotion, stats = weak[0]
            suggestions.append(
                f'Trades with "{emotion}" emotion show {stats.win_rate:.0f}% win rate. '
                "Consider waiting for a calmer state before entering."
            )
            actionable_advice.append(
                f"When feeling {emotion.lower()}, take a 5-minute break and reassess before "
                "entering a trade."
            )

        logger.debug(
            "Rule-based insights for %s: %d suggestions", context.system_name, len(suggestions)
        )
        return NarrativeResult(
            suggestions=suggestions,
            motivation_quote=pick_quote(context),
            actionable_advice=actionable_advice,
            pattern_insights=_pattern_insights(context),
            source=self.source,
        )
