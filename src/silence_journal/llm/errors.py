"""Coaching-provider error types.

All inherit from :class:`JournalError` via :class:`LLMError`.
"""

from __future__ import annotations

from silence_journal.core.errors import JournalError


class LLMError(JournalError):
    """Base for all coaching-provider errors."""


class LLMResponseValidationError(LLMError):
    """Model output could not be parsed into a :class:`NarrativeResult`.

    Raised when the response holds no JSON object, or the object does not
    validate against the narrative schema.
    """
