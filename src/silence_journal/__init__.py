"""Silence Journal: trading journal analytics.

Pure scoring engine over logged trades: equity curve, rule adherence,
psychology scoring and per-system edge diagnostics, plus the storage,
export and coaching collaborators around it.
"""

__version__ = "0.1.0"
