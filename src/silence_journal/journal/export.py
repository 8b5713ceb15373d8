"""Trade export: CSV and JSON output for external analysis and backup.

CSV is the human-readable sheet (rule texts and criterion names resolved
against the trade's system).  JSON is the lossless backup: every stored
field in its camelCase form, plus the resolved system name and per-rule
status.

Usage::

    exporter = TradeExporter()
    csv_str = exporter.to_csv(trades, settings)
    json_str = exporter.to_json(trades, settings)
    filename = default_filename("csv", date.today())
"""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import date, datetime
from typing import Any, Sequence

from silence_journal.core.ids import utc_now
from silence_journal.core.models import Trade, TradingSystemModel, UserSettings

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
EMPTY_CSV = "No trades to export"
UNKNOWN_SYSTEM = "N/A"

_CSV_COLUMNS = [
    "Date",
    "Instrument",
    "System",
    "Sessions",
    "Outcome",
    "Risk %",
    "RR",
    "Realized R",
    "Rating",
    "Entry Time",
    "Exit Time",
    "POIs",
    "Liquidity Draw",
    "HTF Narrative",
    "What Went Well",
    "Mistakes",
    "Lesson Learned",
    "Rules Followed",
    "Rules Violated",
    "Custom Criteria",
]

_EXTENSIONS = {"csv": "csv", "json": "json"}


def default_filename(fmt: str, today: date) -> str:
    """``silence-journal-trades-YYYY-MM-DD.<ext>`` for ``fmt`` csv or json."""
    if fmt not in _EXTENSIONS:
        raise ValueError(f"Unsupported export format {fmt!r}")
    return f"silence-journal-trades-{today.isoformat()}.{_EXTENSIONS[fmt]}"


def _number(value: float | int | None) -> str:
    """Plain number text: integral floats drop the ``.0``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class TradeExporter:
    """Export trades to CSV/JSON.

    Parameters
    ----------
    indent : int
        JSON indentation level.  Default 2.
    """

    def __init__(self, *, indent: int = 2) -> None:
        self._indent = indent

    # ------------------------------------------------------------------ #
    # CSV Export                                                           #
    # ------------------------------------------------------------------ #

    def to_csv(self, trades: Sequence[Trade], settings: UserSettings) -> str:
        """Export trades as a CSV string with a header row.

        Returns ``"No trades to export"`` for an empty list.
        """
        if not trades:
            return EMPTY_CSV

        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(_CSV_COLUMNS)
        for trade in trades:
            writer.writerow(self._trade_to_row(trade, settings.find_system(trade.system_id)))

        logger.info("Exported %d trades to CSV", len(trades))
        return buf.getvalue().removesuffix("\n")

    # ------------------------------------------------------------------ #
    # JSON Export                                                          #
    # ------------------------------------------------------------------ #

    def to_json(
        self,
        trades: Sequence[Trade],
        settings: UserSettings,
        *,
        exported_at: datetime | None = None,
    ) -> str:
        """Export trades as a JSON document with an ``exportInfo`` header.

        Screenshots are kept in full so the document restores losslessly.
        """
        exported_at = exported_at or utc_now()
        enriched = [
            self._trade_to_document(trade, settings.find_system(trade.system_id))
            for trade in trades
        ]

        date_range = None
        if trades:
            dates = [t.date for t in trades]
            date_range = {"from": min(dates), "to": max(dates)}

        document = {
            "exportInfo": {
                "exportDate": exported_at.isoformat(),
                "exportVersion": EXPORT_VERSION,
                "totalTrades": len(enriched),
                "dateRange": date_range,
            },
            "trades": enriched,
        }
        logger.info("Exported %d trades to JSON", len(trades))
        return json.dumps(document, indent=self._indent, ensure_ascii=False)

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    def _trade_to_row(self, trade: Trade, system: TradingSystemModel | None) -> list[str]:
        active = system.active_rules if system else []
        followed = "; ".join(r.text for r in active if trade.rules_followed.get(r.id) is True)
        violated = "; ".join(r.text for r in active if trade.rules_followed.get(r.id) is False)

        criteria = []
        for criterion_id, answer in trade.custom_criteria.items():
            criterion = system.find_criterion(criterion_id) if system else None
            name = criterion.name if criterion else criterion_id
            criteria.append(f"{name}: {answer.display()}")

        reflection = trade.reflection
        return [
            trade.date,
            trade.pair,
            system.name if system else UNKNOWN_SYSTEM,
            ", ".join(trade.sessions),
            trade.outcome.value,
            _number(trade.risk_percent),
            _number(trade.risk_reward),
            _number(trade.result_r),
            _number(trade.rating),
            trade.entry_time,
            trade.exit_time,
            ", ".join(trade.pois),
            reflection.liquidity_draw,
            reflection.htf_narrative,
            reflection.what_went_well,
            reflection.mistakes,
            reflection.lesson,
            followed,
            violated,
            "; ".join(criteria),
        ]

    def _trade_to_document(
        self,
        trade: Trade,
        system: TradingSystemModel | None,
    ) -> dict[str, Any]:
        document = trade.to_document()
        document["systemName"] = system.name if system else UNKNOWN_SYSTEM
        document["rulesStatus"] = [
            {
                "ruleId": rule.id,
                "ruleText": rule.text,
                "followed": trade.rules_followed.get(rule.id) is True,
            }
            for rule in (system.active_rules if system else [])
        ]
        return document
