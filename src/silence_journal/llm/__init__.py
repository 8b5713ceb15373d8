"""Coaching narrative providers.

Public API
----------
Models:
    InsightContext, NarrativeResult

Providers:
    RuleBasedInsightProvider, AnthropicInsightProvider

Factory:
    build_insight_provider

Errors:
    LLMError, LLMResponseValidationError
"""

from silence_journal.llm.anthropic_provider import AnthropicInsightProvider
from silence_journal.llm.errors import LLMError, LLMResponseValidationError
from silence_journal.llm.factory import build_insight_provider
from silence_journal.llm.insights import InsightContext, NarrativeResult, build_insight_context
from silence_journal.llm.rule_based import RuleBasedInsightProvider

__all__ = [
    # Models
    "InsightContext",
    "NarrativeResult",
    "build_insight_context",
    # Providers
    "AnthropicInsightProvider",
    "RuleBasedInsightProvider",
    "build_insight_provider",
    # Errors
    "LLMError",
    "LLMResponseValidationError",
]
