"""Trade journal analytics: pure, deterministic scoring over trade snapshots.

Key components
--------------
calculate_metrics            Dashboard metrics, equity curve, emotion stats
analyze_rule_violations      Per-rule violation ranking for one system
analyze_psychology           Weighted psychology score with coaching text
analyze_system_intelligence  Edge clarity, consistency and best/worst setups
classify_session             Hour-of-day session buckets

**Boundary & output**

prepare_trade         Criteria validation and rule-respect snapshot at save time
TradeExporter         CSV/JSON trade export
JournalAnalytics      Memoizing facade over the stores (``journal.service``)
"""

from .entry import prepare_trade, replace_trade, rule_respect_snapshot, validate_criteria
from .export import TradeExporter, default_filename
from .metrics import TradeMetrics, calculate_metrics
from .psychology import PsychologyInsight, analyze_psychology
from .rule_violations import (
    RuleViolationStat,
    analyze_rule_violations,
    most_violated_rule,
    recent_rule_violations,
)
from .sessions import SessionStats, analyze_session_performance, classify_session, session_for
from .system_intelligence import SystemIntelligence, analyze_system_intelligence

__all__ = [
    "prepare_trade",
    "replace_trade",
    "rule_respect_snapshot",
    "validate_criteria",
    "TradeExporter",
    "default_filename",
    "TradeMetrics",
    "calculate_metrics",
    "PsychologyInsight",
    "analyze_psychology",
    "RuleViolationStat",
    "analyze_rule_violations",
    "most_violated_rule",
    "recent_rule_violations",
    "SessionStats",
    "analyze_session_performance",
    "classify_session",
    "session_for",
    "SystemIntelligence",
    "analyze_system_intelligence",
]
