"""Custom exception hierarchy for the journal."""


class JournalError(Exception):
    """Base exception for all journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Data ---
class DataError(JournalError):
    """Invalid journal data."""


class StorageError(DataError):
    """A persisted document could not be read or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Storage [{path}]: {reason}")


class CriteriaValidationError(DataError):
    """Criterion answers do not match the owning system's definitions."""

    def __init__(self, criterion_id: str, reason: str):
        self.criterion_id = criterion_id
        self.reason = reason
        super().__init__(f"Criterion [{criterion_id}]: {reason}")
