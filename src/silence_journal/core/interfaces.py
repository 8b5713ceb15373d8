"""Protocol interfaces for the journal's external collaborators.

Analytics never call these; callers read a snapshot and pass it in.
Implementations can be swapped (JSON file / in-memory) without changing callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .models import Trade, UserSettings

if TYPE_CHECKING:
    from silence_journal.llm.insights import InsightContext, NarrativeResult


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

@runtime_checkable
class ITradeStore(Protocol):
    """Whole-document trade storage."""

    def list(self) -> list[Trade]: ...

    def replace_all(self, trades: list[Trade]) -> None: ...


@runtime_checkable
class ISettingsStore(Protocol):
    """Whole-document settings storage (read-modify-write)."""

    def get(self) -> UserSettings: ...

    def replace_all(self, settings: UserSettings) -> None: ...


# ---------------------------------------------------------------------------
# Coaching narrative
# ---------------------------------------------------------------------------

@runtime_checkable
class IInsightProvider(Protocol):
    """Turns computed analytics into coaching text.

    Must never raise to the caller and never change any score.
    """

    def generate_insights(self, context: InsightContext) -> NarrativeResult: ...
