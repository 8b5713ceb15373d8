"""Coaching context and narrative models shared by all insight providers.

The context is assembled from already-computed analytics; providers only
turn it into text.  Nothing a provider returns feeds back into a score.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Sequence

from pydantic import Field, ValidationError

from silence_journal.core.clock import IClock, window_start
from silence_journal.core.models import JournalModel, Trade, TradingSystemModel, UserSettings
from silence_journal.journal.metrics import EmotionStats, calculate_metrics
from silence_journal.journal.psychology import PsychologyScore, analyze_psychology
from silence_journal.journal.rule_violations import RuleViolationStat, analyze_rule_violations
from silence_journal.journal.stats import average_r, win_rate

from .errors import LLMResponseValidationError

logger = logging.getLogger(__name__)

PROMPT_TOP_VIOLATIONS = 3
NO_RECENT_TRADES = "No recent trades"

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class InsightContext(JournalModel):
    """Analytics snapshot handed to a provider."""

    system_name: str
    total_trades: int
    avg_rrs_30_days: float = Field(default=0.0, alias="avgRRS30Days")
    rule_violations: list[RuleViolationStat] = Field(default_factory=list)
    emotion_performance: dict[str, EmotionStats] = Field(default_factory=dict)
    recent_performance: str = NO_RECENT_TRADES
    psychology: PsychologyScore = Field(default_factory=PsychologyScore)


class NarrativeResult(JournalModel):
    suggestions: list[str] = Field(default_factory=list)
    motivation_quote: str = ""
    actionable_advice: list[str] = Field(default_factory=list)
    pattern_insights: str = ""
    source: str = "rule_based"


def _signed(value: float, places: int) -> str:
    return f"{'+' if value >= 0 else ''}{value:.{places}f}"


def recent_performance(
    trades: Sequence[Trade],
    *,
    days: int = 30,
    clock: IClock | None = None,
) -> str:
    """One-line summary of the trailing window, e.g. ``"60% win rate, +0.8R average"``."""
    cutoff = window_start(clock, days)
    recent = [t for t in trades if t.timestamp >= cutoff]
    if not recent:
        return NO_RECENT_TRADES
    return f"{win_rate(recent):.0f}% win rate, {_signed(average_r(recent), 1)}R average"


def build_insight_context(
    trades: Sequence[Trade],
    system: TradingSystemModel,
    settings: UserSettings,
    *,
    clock: IClock | None = None,
) -> InsightContext:
    """Assemble the coaching context for ``system`` from the analyzers."""
    metrics = calculate_metrics(trades, clock=clock)
    psychology = analyze_psychology(trades, settings.systems)
    return InsightContext(
        system_name=system.name,
        total_trades=len(trades),
        avg_rrs_30_days=metrics.avg_rrs_30_days,
        rule_violations=analyze_rule_violations(system, trades),
        emotion_performance=metrics.emotion_performance,
        recent_performance=recent_performance(trades, clock=clock),
        psychology=psychology.score,
    )


def build_prompt(context: InsightContext) -> str:
    """User prompt for a model-backed provider."""
    violations = "\n".join(
        f'{i}. "{v.rule_text}" - {v.violation_rate:.1f}% violation rate '
        f"({v.violations}/{v.times_active} times)"
        for i, v in enumerate(context.rule_violations[:PROMPT_TOP_VIOLATIONS], start=1)
    )
    emotions = "\n".join(
        f"- {emotion}: {stats.win_rate:.0f}% win rate, {_signed(stats.avg_r, 1)}R avg"
        for emotion, stats in context.emotion_performance.items()
    )
    return f"""You are a trading psychology coach analyzing a trader's journal data. Provide helpful, non-judgmental insights.

Trading System: {context.system_name}
Total Trades: {context.total_trades}
Average Rule Respect Score (30 days): {context.avg_rrs_30_days:.1f}%
Psychology Score: {context.psychology.overall}/100

Most Violated Rules:
{violations or "None recorded"}

Emotion Patterns:
{emotions or "No emotions tagged"}

Recent Performance: {context.recent_performance}

Provide your response as JSON with this exact structure:
{{
  "suggestions": ["suggestion 1", "suggestion 2", "suggestion 3"],
  "motivationQuote": "an inspiring quote",
  "actionableAdvice": ["action 1", "action 2", "action 3"],
  "patternInsights": "a paragraph about patterns you notice"
}}

Be specific, actionable, and supportive. Focus on discipline, patience, and process improvement."""


def parse_narrative(raw: str, *, default_quote: str, source: str) -> NarrativeResult:
    """Extract the JSON object from a model reply.

    Handles bare JSON, JSON surrounded by prose, and fenced code blocks.
    Non-list ``suggestions``/``actionableAdvice`` become empty lists and a
    missing quote is replaced by ``default_quote``.

    Raises
    ------
    LLMResponseValidationError
        If no JSON object can be decoded or it fails validation.
    """
    # Greedy: spans from the first "{" to the last "}", fences included.
    match = _JSON_OBJECT.search(raw)
    if match is None:
        raise LLMResponseValidationError("Response contains no JSON object")
    text = match.group(0)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LLMResponseValidationError(f"Response JSON could not be decoded: {exc}") from exc
    if not isinstance(data, dict):
        raise LLMResponseValidationError("Response JSON is not an object")

    suggestions = data.get("suggestions")
    advice = data.get("actionableAdvice")
    try:
        return NarrativeResult(
            suggestions=suggestions if isinstance(suggestions, list) else [],
            motivation_quote=data.get("motivationQuote") or default_quote,
            actionable_advice=advice if isinstance(advice, list) else [],
            pattern_insights=data.get("patternInsights") or "",
            source=source,
        )
    except ValidationError as exc:
        raise LLMResponseValidationError(f"Response failed validation: {exc}") from exc
