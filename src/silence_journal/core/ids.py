"""ID, timestamp and hashing helpers shared by the journal.

Trade and rule ids are UUID v4 strings.  Memo keys and quote selection use
short SHA-256 digests of canonical JSON.

Trade timestamps are naive local wall-clock values; only export metadata
carries an aware UTC time.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from datetime import datetime, timezone
from typing import Any


def new_id() -> str:
    """Fresh UUID v4 for trades and rules created in-app."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def payload_hash(payload: Any, *, length: int = 16) -> str:
    """Key-order independent digest of a JSON-serializable value.

    Non-JSON values (dates, enums) are stringified first, so two documents
    that dump identically hash identically.
    """
    canonical = json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:length]
