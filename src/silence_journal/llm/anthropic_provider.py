"""Anthropic-backed coaching narrative.

Builds a prompt from the :class:`InsightContext`, calls the Messages API
and parses the JSON reply.  A missing API key or any failure along the way
degrades to the rule-based provider; the caller always gets a narrative.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable

import anthropic

from silence_journal.core.config import InsightConfig
from silence_journal.core.interfaces import IInsightProvider

from .insights import InsightContext, NarrativeResult, build_prompt, parse_narrative
from .rule_based import RuleBasedInsightProvider, pick_quote

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a supportive trading psychology coach. Respond with ONLY a JSON "
    "object, no markdown fences."
)

ClientFactory = Callable[[str, float], Any]


def _default_client(api_key: str, timeout: float) -> anthropic.Anthropic:
    return anthropic.Anthropic(api_key=api_key, timeout=timeout)


class AnthropicInsightProvider:
    """Insight provider backed by the Anthropic Messages API.

    Parameters
    ----------
    config:
        Model, token and timeout settings, and the name of the environment
        variable holding the API key.
    fallback:
        Provider used when no key is configured or the call fails.
        Defaults to :class:`RuleBasedInsightProvider`.
    client_factory:
        ``(api_key, timeout) -> client``; tests inject a fake here.
    """

    source = "anthropic"

    def __init__(
        self,
        config: InsightConfig,
        *,
        fallback: IInsightProvider | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._fallback = fallback or RuleBasedInsightProvider()
        self._client_factory = client_factory or _default_client

    def _call_api(self, api_key: str, prompt: str) -> str:
        client = self._client_factory(api_key, self._config.timeout_seconds)
        response = client.messages.create(
            model=self._config.model,
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

    def generate_insights(self, context: InsightContext) -> NarrativeResult:
        api_key = os.environ.get(self._config.api_key_env, "")
        if not api_key:
            logger.info(
                "%s not set, using rule-based insights", self._config.api_key_env
            )
            return self._fallback.generate_insights(context)

        try:
            raw = self._call_api(api_key, build_prompt(context))
            result = parse_narrative(raw, default_quote=pick_quote(context), source=self.source)
        except Exception:
            logger.exception(
                "Anthropic insight call failed for %s, using rule-based insights",
                context.system_name,
            )
            return self._fallback.generate_insights(context)

        logger.info(
            "Anthropic insights for %s: %d suggestions, %d actions",
            context.system_name,
            len(result.suggestions),
            len(result.actionable_advice),
        )
        return result
