"""JSONL file helpers for durable event logs.

Appends take an exclusive ``fcntl`` lock and ``fsync`` before releasing
it, so concurrent writers never interleave and a returned append is on
disk.
"""

from __future__ import annotations

import fcntl
import logging
import os
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def safe_append_line(path: Path, line: str) -> None:
    """Append a single line to *path*, creating parent directories."""
    if "\n" in line:
        raise ValueError("line must not contain a newline")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def iter_lines(path: Path) -> Iterator[tuple[int, bytes]]:
    """Yield ``(line_number, raw_line)`` for every non-blank line of *path*.

    Lines are returned undecoded so a torn or corrupt line can be skipped
    by the caller.  Missing files yield nothing.
    """
    if not path.exists():
        return
    with open(path, "rb") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)
        try:
            for lineno, raw in enumerate(f, 1):
                line = raw.strip()
                if line:
                    yield lineno, line
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
