"""Select the insight provider named in the configuration."""

from __future__ import annotations

from silence_journal.core.config import Settings
from silence_journal.core.enums import InsightProviderKind
from silence_journal.core.interfaces import IInsightProvider

from .anthropic_provider import AnthropicInsightProvider
from .rule_based import RuleBasedInsightProvider


def build_insight_provider(settings: Settings) -> IInsightProvider:
    """Raises ``ConfigError`` for an unknown provider name."""
    settings.validate_insights()
    if settings.insights.provider == InsightProviderKind.ANTHROPIC.value:
        return AnthropicInsightProvider(settings.insights)
    return RuleBasedInsightProvider()
