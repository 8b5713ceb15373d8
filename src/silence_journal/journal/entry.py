"""Trade-entry boundary: validation and save-time snapshots.

Everything that must happen when a trade is saved lives here, so the
analyzers can assume well-formed trades:

* criterion answers are checked against the owning system's definitions
* the Rule Respect Score snapshot is stamped from the system's active rules
* missing ids and defaults are filled in

Usage::

    trade = prepare_trade(draft, settings)
    trades = replace_trade(trades, trade)
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from pydantic import TypeAdapter

from silence_journal.core.enums import CriterionType
from silence_journal.core.errors import CriteriaValidationError
from silence_journal.core.ids import new_id
from silence_journal.core.models import (
    ChecklistAnswer,
    CriterionAnswer,
    JournalModel,
    MultiSelectAnswer,
    QuestionAnswer,
    Trade,
    TradingSystemModel,
    UserSettings,
    tag_legacy_answer,
)

from .stats import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_RATING = 3
FULL_RESPECT_SCORE = 100

_ANSWER_ADAPTER: TypeAdapter[Any] = TypeAdapter(CriterionAnswer)

_EXPECTED_KIND = {
    CriterionType.QUESTION: QuestionAnswer,
    CriterionType.CHECKLIST: ChecklistAnswer,
    CriterionType.MULTI_SELECT: MultiSelectAnswer,
}


class RuleRespectSnapshot(JournalModel):
    score: int = FULL_RESPECT_SCORE
    followed_count: int = 0
    total_active: int = 0


def rule_respect_snapshot(
    system: TradingSystemModel | None,
    rules_followed: Mapping[str, bool],
) -> RuleRespectSnapshot:
    """Share of the system's active rules marked followed, as 0-100.

    A trade without a system, or a system with no active rules, scores
    a full 100.
    """
    if system is None:
        return RuleRespectSnapshot()
    active = system.active_rules
    if not active:
        return RuleRespectSnapshot()
    followed = sum(1 for rule in active if rules_followed.get(rule.id) is True)
    return RuleRespectSnapshot(
        score=round_half_up(followed / len(active) * 100),
        followed_count=followed,
        total_active=len(active),
    )


def _selected_options(answer: Any) -> list[str]:
    if isinstance(answer, ChecklistAnswer):
        return answer.checked
    if isinstance(answer, MultiSelectAnswer):
        return answer.selected
    return []


def validate_criteria(
    system: TradingSystemModel,
    answers: Mapping[str, Any],
) -> dict[str, Any]:
    """Check criterion answers against ``system`` and return them tagged.

    Raises
    ------
    CriteriaValidationError
        When an answer refers to an unknown criterion, its kind does not
        match the criterion type, or it picks an option the criterion does
        not offer.
    """
    validated: dict[str, Any] = {}
    for criterion_id, raw in answers.items():
        criterion = system.find_criterion(criterion_id)
        if criterion is None:
            raise CriteriaValidationError(
                criterion_id, f"not defined by system {system.id!r}"
            )

        try:
            answer = _ANSWER_ADAPTER.validate_python(
                tag_legacy_answer(criterion_id, raw, criterion.type)
            )
        except ValueError as exc:
            raise CriteriaValidationError(criterion_id, f"malformed answer: {exc}") from exc

        expected = _EXPECTED_KIND[criterion.type]
        if not isinstance(answer, expected):
            raise CriteriaValidationError(
                criterion_id,
                f"expected a {criterion.type.value} answer, got {answer.kind}",
            )

        # Legacy boolean checklists name the criterion itself as the item.
        if criterion.options:
            allowed = set(criterion.options) | {criterion_id}
            unknown = [opt for opt in _selected_options(answer) if opt not in allowed]
            if unknown:
                raise CriteriaValidationError(
                    criterion_id, f"options not offered: {', '.join(unknown)}"
                )

        validated[criterion_id] = answer
    return validated


def prepare_trade(draft: Mapping[str, Any], settings: UserSettings) -> Trade:
    """Build a saveable trade from a camelCase (or snake_case) draft.

    Assigns an id when absent, validates criteria against the trade's
    system, defaults ``rating`` and ``emotions``, and stamps the rule
    respect snapshot from the system's currently active rules.
    """
    data = dict(draft)
    data.setdefault("id", new_id())

    system_id = data.get("systemId", data.get("system_id", ""))
    system = settings.find_system(system_id) if system_id else None
    if system_id and system is None:
        logger.warning("Trade %s references unknown system %s", data["id"], system_id)

    rules_followed = data.get("rulesFollowed", data.get("rules_followed")) or {}
    answers = data.pop("customCriteria", None) or {}
    answers = data.pop("custom_criteria", None) or answers
    if system is not None:
        answers = validate_criteria(system, answers)

    snapshot = rule_respect_snapshot(system, rules_followed)

    if not data.get("rating"):
        data["rating"] = DEFAULT_RATING
    if not data.get("emotions"):
        data["emotions"] = []
    data["customCriteria"] = answers
    data["ruleRespectScore"] = snapshot.score
    data["rulesFollowedCount"] = snapshot.followed_count
    data["totalActiveRules"] = snapshot.total_active

    trade = Trade.model_validate(data)
    logger.debug(
        "Prepared trade %s: rrs=%d (%d/%d)",
        trade.id,
        snapshot.score,
        snapshot.followed_count,
        snapshot.total_active,
    )
    return trade


def replace_trade(trades: Sequence[Trade], trade: Trade) -> list[Trade]:
    """Return a new list with ``trade`` replacing the one sharing its id.

    Unknown ids are appended.
    """
    result = list(trades)
    for i, existing in enumerate(result):
        if existing.id == trade.id:
            result[i] = trade
            return result
    result.append(trade)
    return result
