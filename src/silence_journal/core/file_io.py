"""Safe file I/O utilities.

Whole-document writes go to a sibling temp file which is ``fsync``-ed and
then renamed over the target, so readers never observe a half-written
document.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` atomically.

    * The temp file lives in the same directory so ``os.replace`` is a
      rename on one filesystem.
    * ``os.fsync`` ensures the data hits disk before the rename.
    * Parent directories are created on demand.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def read_text_if_exists(path: Path) -> str | None:
    """Return file contents, or ``None`` when the file does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No document at %s", path)
        return None
