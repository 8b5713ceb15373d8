"""Analytics facade over the trade and settings stores.

Reads one snapshot of each document per call, runs the requested analyzer
and memoizes the result on a content hash of the inputs, so repeated
dashboard refreshes over unchanged data cost one computation.

Usage::

    analytics = JournalAnalytics(JsonTradeStore(path), JsonSettingsStore(path))
    metrics = analytics.metrics()
    report = analytics.system_intelligence("default-system")
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from silence_journal.core.clock import IClock, WallClock
from silence_journal.core.errors import DataError
from silence_journal.core.ids import payload_hash
from silence_journal.core.interfaces import IInsightProvider, ISettingsStore, ITradeStore
from silence_journal.core.models import Trade, TradingSystemModel, UserSettings
from silence_journal.llm.insights import NarrativeResult, build_insight_context
from silence_journal.llm.rule_based import RuleBasedInsightProvider

from .metrics import TradeMetrics, calculate_metrics
from .psychology import PsychologyInsight, analyze_psychology
from .rule_violations import RuleViolationStat, analyze_rule_violations, recent_rule_violations
from .system_intelligence import SystemIntelligence, analyze_system_intelligence

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JournalAnalytics:
    """Read-only analytics over a journal's stores.

    Parameters
    ----------
    trades:
        Trade store to read from.
    settings:
        Settings store holding the trading systems.
    clock:
        Time source for windowed metrics.  Defaults to wall-clock time.
    insights:
        Coaching narrative provider.  Defaults to the rule-based one.
    """

    def __init__(
        self,
        trades: ITradeStore,
        settings: ISettingsStore,
        *,
        clock: IClock | None = None,
        insights: IInsightProvider | None = None,
    ) -> None:
        self._trades = trades
        self._settings = settings
        self._clock = clock or WallClock()
        self._insights = insights or RuleBasedInsightProvider()
        self._cache: dict[tuple[str, ...], tuple[tuple[str, str, str], Any]] = {}

    # ------------------------------------------------------------------ #
    # Snapshot + memo                                                      #
    # ------------------------------------------------------------------ #

    def _snapshot(self) -> tuple[list[Trade], UserSettings]:
        return self._trades.list(), self._settings.get()

    def _memo(
        self,
        scope: tuple[str, ...],
        trades: list[Trade],
        settings: UserSettings,
        compute: Callable[[], T],
        *,
        windowed: bool = False,
    ) -> T:
        # One entry per analyzer scope; a changed fingerprint replaces it.
        fingerprint = (
            payload_hash([t.to_document() for t in trades]),
            payload_hash(settings.to_document()),
            # Windowed results depend on the exact instant.
            self._clock.now().isoformat() if windowed else "",
        )
        cached = self._cache.get(scope)
        if cached is not None and cached[0] == fingerprint:
            logger.debug("Memo hit for %s", scope[0])
            return cached[1]
        result = compute()
        self._cache[scope] = (fingerprint, result)
        return result

    @staticmethod
    def _system(settings: UserSettings, system_id: str) -> TradingSystemModel:
        system = settings.find_system(system_id)
        if system is None:
            raise DataError(f"Unknown trading system {system_id!r}")
        return system

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------ #
    # Analyzers                                                            #
    # ------------------------------------------------------------------ #

    def metrics(self) -> TradeMetrics:
        trades, settings = self._snapshot()
        return self._memo(
            ("metrics",),
            trades,
            settings,
            lambda: calculate_metrics(trades, clock=self._clock),
            windowed=True,
        )

    def rule_violations(self, system_id: str, *, recent: bool = False) -> list[RuleViolationStat]:
        """All-time ranking, or the trailing 30 days with ``recent``."""
        trades, settings = self._snapshot()
        system = self._system(settings, system_id)
        if recent:
            compute = lambda: recent_rule_violations(system, trades, clock=self._clock)  # noqa: E731
        else:
            compute = lambda: analyze_rule_violations(system, trades)  # noqa: E731
        return self._memo(
            ("rule_violations", system_id, "recent" if recent else "all-time"),
            trades,
            settings,
            compute,
            windowed=recent,
        )

    def psychology(self) -> PsychologyInsight:
        trades, settings = self._snapshot()
        return self._memo(
            ("psychology",), trades, settings, lambda: analyze_psychology(trades, settings.systems)
        )

    def system_intelligence(self, system_id: str) -> SystemIntelligence:
        trades, settings = self._snapshot()
        system = self._system(settings, system_id)
        return self._memo(
            ("system_intelligence", system_id),
            trades,
            settings,
            lambda: analyze_system_intelligence(trades, system),
        )

    def coach(self, system_id: str) -> NarrativeResult:
        """Coaching narrative for one system.  Not memoized."""
        trades, settings = self._snapshot()
        system = self._system(settings, system_id)
        context = build_insight_context(trades, system, settings, clock=self._clock)
        return self._insights.generate_insights(context)
