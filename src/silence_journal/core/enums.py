"""Enumerations used across the journal."""

from enum import Enum


class TradeOutcome(str, Enum):
    WIN = "Win"
    LOSS = "Loss"
    BREAKEVEN = "BE"


class TradeGrade(str, Enum):
    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class CriterionType(str, Enum):
    QUESTION = "Question"
    CHECKLIST = "Checklist"
    MULTI_SELECT = "Multi-select"


class RuleStatus(str, Enum):
    """How a rule stands on one trade.

    Key absence in ``rules_followed`` means the rule was not tracked for
    the trade, which is different from an explicit violation.
    """

    NOT_TRACKED = "not_tracked"
    VIOLATED = "violated"
    FOLLOWED = "followed"


class TradingSession(str, Enum):
    """Session bucket derived from the hour of a trade's timestamp."""

    ASIAN = "Asian"
    LONDON = "London"
    NEW_YORK = "New York"
    OFF_HOURS = "Off-Hours"


class Emotion(str, Enum):
    """Emotion tags tracked by the performance breakdown."""

    CALM = "Calm"
    NEUTRAL = "Neutral"
    IMPATIENT = "Impatient"
    CONFIDENT = "Confident"
    FEARFUL = "Fearful"
    FOMO = "FOMO"
    OVERCONFIDENT = "Overconfident"
    HESITANT = "Hesitant"


class InsightProviderKind(str, Enum):
    RULE_BASED = "rule_based"
    ANTHROPIC = "anthropic"
