"""Core domain models used across the journal.

These are the canonical "truth models" for trades, systems and settings.
Python attributes are snake_case; persisted and exported documents use the
camelCase keys produced by the alias generator.
"""

from __future__ import annotations

from datetime import date as _date, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .enums import CriterionType, RuleStatus, ThemeMode, TradeGrade, TradeOutcome

DEFAULT_PAIRS = ["EURUSD", "GBPUSD", "NASDAQ", "ES", "GOLD", "USDJPY"]
DEFAULT_SESSIONS = ["London", "New York", "Pre-NY", "Asia"]
DEFAULT_RISK_PERCENT = 0.5


class JournalModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


def parse_trade_timestamp(value: str) -> datetime:
    """Parse a trade ``date`` into naive local wall-clock time.

    Date-only values land on local midnight.  Timezone-aware values are
    converted to the host's local zone.
    """
    ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts


# ---------------------------------------------------------------------------
# Systems, rules and criteria
# ---------------------------------------------------------------------------

class Rule(JournalModel):
    id: str
    text: str
    active: bool = True


class Criterion(JournalModel):
    id: str
    name: str
    type: CriterionType
    options: list[str] = Field(default_factory=list)  # Checklist items / multi-select choices
    response: str | None = None  # Reference answer for Question criteria


class TradingSystemModel(JournalModel):
    """A named bundle of rules and custom criteria."""

    id: str
    name: str
    rules: list[Rule] = Field(default_factory=list)
    custom_criteria: list[Criterion] = Field(default_factory=list)
    samples: list[str] = Field(default_factory=list)

    @property
    def active_rules(self) -> list[Rule]:
        return [r for r in self.rules if r.active]

    def find_rule(self, rule_id: str) -> Rule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def find_criterion(self, criterion_id: str) -> Criterion | None:
        for criterion in self.custom_criteria:
            if criterion.id == criterion_id:
                return criterion
        return None


# ---------------------------------------------------------------------------
# Criterion answers (closed tagged union)
# ---------------------------------------------------------------------------

class QuestionAnswer(JournalModel):
    kind: Literal["Question"] = "Question"
    text: str = ""

    def display(self) -> str:
        return self.text


class ChecklistAnswer(JournalModel):
    kind: Literal["Checklist"] = "Checklist"
    checked: list[str] = Field(default_factory=list)

    def display(self) -> str:
        return ", ".join(self.checked)


class MultiSelectAnswer(JournalModel):
    kind: Literal["Multi-select"] = "Multi-select"
    selected: list[str] = Field(default_factory=list)

    def display(self) -> str:
        return ", ".join(self.selected)


CriterionAnswer = Annotated[
    Union[QuestionAnswer, ChecklistAnswer, MultiSelectAnswer],
    Field(discriminator="kind"),
]


def tag_legacy_answer(
    criterion_id: str,
    raw: Any,
    criterion_type: CriterionType | None = None,
) -> Any:
    """Tag an untyped answer (string, list or boolean).

    With ``criterion_type`` the owning criterion decides the kind, so a list
    answer to a Checklist becomes its checked items.  Without it the kind is
    guessed from the shape.  Already-tagged answers pass through unchanged.
    A boolean is read as a single checklist item named after the criterion.
    """
    if isinstance(raw, (dict, BaseModel)):
        return raw
    if isinstance(raw, bool):
        return {"kind": "Checklist", "checked": [criterion_id] if raw else []}
    if isinstance(raw, str):
        return {"kind": "Question", "text": raw}
    if isinstance(raw, list):
        items = [str(v) for v in raw]
        if criterion_type is CriterionType.CHECKLIST:
            return {"kind": "Checklist", "checked": items}
        return {"kind": "Multi-select", "selected": items}
    return raw
    if isinstance(raw, bool):
        return {"kind": "Checklist", "checked": [criterion_id] if raw else []}
    if isinstance(raw, str):
        return {"kind": "Question", "text": raw}
    if isinstance(raw, list):
        return {"kind": "Multi-select", "selected": [str(v) for v in raw]}
    return raw


# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

class Reflection(JournalModel):
    liquidity_draw: str = ""
    htf_narrative: str = ""
    mistakes: str = ""
    what_went_well: str = ""
    lesson: str = ""


class Trade(JournalModel):
    """One logged trade.

    Immutable once created; edits replace the trade wholesale.  ``result_r``
    is the authoritative outcome for every analytic, ``outcome`` is kept as
    entered.  ``rule_respect_score``, ``rules_followed_count`` and
    ``total_active_rules`` are snapshots taken when the trade was saved.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    system_id: str = ""
    pair: str = ""
    date: str
    entry_time: str = ""
    exit_time: str = ""
    sessions: list[str] = Field(default_factory=list)
    pois: list[str] = Field(default_factory=list)

    risk_percent: float | None = None
    risk_reward: float = 0.0
    result_r: float
    outcome: TradeOutcome = TradeOutcome.BREAKEVEN
    rating: int | None = Field(default=None, ge=1, le=5)
    grade: TradeGrade | None = None

    screenshots: list[str] = Field(default_factory=list)
    custom_criteria: dict[str, CriterionAnswer] = Field(default_factory=dict)
    rules_followed: dict[str, bool] = Field(default_factory=dict)
    rule_violation_reflection: str | None = None

    emotions: list[str] = Field(default_factory=list)
    rule_respect_score: float | None = None
    rules_followed_count: int = 0
    total_active_rules: int = 0

    reflection: Reflection = Field(default_factory=Reflection)

    @model_validator(mode="before")
    @classmethod
    def _default_outcome(cls, data: Any) -> Any:
        if isinstance(data, dict) and "outcome" not in data:
            result = data.get("resultR", data.get("result_r"))
            if isinstance(result, (int, float)):
                data = dict(data)
                if result > 0:
                    data["outcome"] = TradeOutcome.WIN
                elif result < 0:
                    data["outcome"] = TradeOutcome.LOSS
        return data

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_trade_timestamp(value)
        return value

    @field_validator("custom_criteria", mode="before")
    @classmethod
    def _tag_answers(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {key: tag_legacy_answer(key, raw) for key, raw in value.items()}

    # ------------------------------------------------------------------ #
    # Derived views                                                        #
    # ------------------------------------------------------------------ #

    @property
    def timestamp(self) -> datetime:
        """Trade time as naive local wall-clock time."""
        return parse_trade_timestamp(self.date)

    @property
    def calendar_date(self) -> _date:
        return self.timestamp.date()

    @property
    def is_win(self) -> bool:
        return self.result_r > 0

    @property
    def is_loss(self) -> bool:
        return self.result_r < 0

    def rule_status(self, rule_id: str) -> RuleStatus:
        if rule_id not in self.rules_followed:
            return RuleStatus.NOT_TRACKED
        if self.rules_followed[rule_id] is False:
            return RuleStatus.VIOLATED
        return RuleStatus.FOLLOWED

    @property
    def has_violation(self) -> bool:
        return any(followed is False for followed in self.rules_followed.values())


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class UserSettings(JournalModel):
    """The single mutable settings document, replaced as a whole on change."""

    systems: list[TradingSystemModel] = Field(default_factory=list)
    default_risk: float = DEFAULT_RISK_PERCENT
    pairs: list[str] = Field(default_factory=lambda: list(DEFAULT_PAIRS))
    sessions: list[str] = Field(default_factory=lambda: list(DEFAULT_SESSIONS))
    theme: ThemeMode = ThemeMode.LIGHT

    def find_system(self, system_id: str) -> TradingSystemModel | None:
        for system in self.systems:
            if system.id == system_id:
                return system
        return None
