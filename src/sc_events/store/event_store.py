"""Bounded event stores queried with ``EventFilter``.

Design invariants
-----------------
1.  ``append()`` is **idempotent** on ``event.id``: appending the same
    event twice is a silent no-op.
2.  The in-memory window holds at most ``max_events`` events; when it
    overflows, the oldest *inserted* events are dropped first.
3.  ``get_filtered()`` returns events sorted by ``(slot, index_in_slot)``,
    committed events before read-only ones on ties.
4.  Stored events are immutable values; the store never rewrites them.

This module provides:

*  ``InMemoryEventStore``: dict-backed window for nodes, tests and tools.
*  ``JsonlEventStore``: the same window backed by an append-only JSONL
   file; ``load()`` rebuilds the window after a restart.
*  ``build_event_store()``: picks one from ``EventStoreConfig``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from sc_events.core.config import EventStoreConfig
from sc_events.core.events import SCOutputEvent, SCOutputEventId
from sc_events.core.file_io import iter_lines, safe_append_line
from sc_events.core.filter import EventFilter
from sc_events.core.prehash import PreHashMap

logger = logging.getLogger(__name__)


def _sort_key(event: SCOutputEvent) -> tuple:
    ctx = event.context
    return (ctx.slot, ctx.index_in_slot, ctx.read_only, event.id)


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------

class InMemoryEventStore:
    """Insertion-ordered, size-bounded event window.  Thread-safe."""

    def __init__(self, max_events: int = 10_000) -> None:
        if max_events <= 0:
            raise ValueError("max_events must be positive")
        self._max_events = max_events
        self._events: PreHashMap[SCOutputEventId, SCOutputEvent] = PreHashMap()
        self._lock = threading.Lock()

    @property
    def max_events(self) -> int:
        return self._max_events

    def append(self, event: SCOutputEvent) -> bool:
        """Store *event*.  Returns ``False`` if its id was already stored."""
        with self._lock:
            return self._insert(event)

    def extend(self, events: Iterable[SCOutputEvent]) -> int:
        """Store several events; returns how many were new."""
        with self._lock:
            return sum(1 for event in events if self._insert(event))

    def get(self, event_id: SCOutputEventId) -> SCOutputEvent | None:
        with self._lock:
            return self._events.get(event_id)

    def get_filtered(self, event_filter: EventFilter | None = None) -> list[SCOutputEvent]:
        """Return matching events in slot order."""
        with self._lock:
            events = list(self._events.values())
        if event_filter is not None:
            events = [e for e in events if event_filter.matches(e)]
        events.sort(key=_sort_key)
        return events

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        with self._lock:
            return event_id in self._events

    def _insert(self, event: SCOutputEvent) -> bool:
        if event.id in self._events:
            return False
        self._events[event.id] = event
        self._prune()
        return True

    def _prune(self) -> None:
        overflow = len(self._events) - self._max_events
        if overflow <= 0:
            return
        for event_id in list(self._events)[:overflow]:
            del self._events[event_id]
        logger.debug("Pruned %d events (max_events=%d)", overflow, self._max_events)


# ---------------------------------------------------------------------------
# JSONL-backed implementation
# ---------------------------------------------------------------------------

class JsonlEventStore(InMemoryEventStore):
    """In-memory window plus a durable append-only JSONL log.

    The file keeps every event ever appended; only the window is bounded.
    """

    def __init__(self, path: str | Path, max_events: int = 10_000) -> None:
        super().__init__(max_events=max_events)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: SCOutputEvent) -> bool:
        """Log *event*, then add it to the window.

        A failed write raises and leaves the window untouched, so the
        append can be retried.
        """
        with self._lock:
            if event.id in self._events:
                return False
            safe_append_line(self._path, event.model_dump_json())
            return self._insert(event)

    def extend(self, events: Iterable[SCOutputEvent]) -> int:
        return sum(1 for event in events if self.append(event))

    def load(self) -> int:
        """Rebuild the window from the log.  Returns events loaded.

        Unparseable lines are skipped with a warning.
        """
        events: list[SCOutputEvent] = []
        for lineno, raw in iter_lines(self._path):
            try:
                events.append(SCOutputEvent.model_validate_json(raw.decode("utf-8")))
            except (UnicodeDecodeError, ValidationError):
                logger.warning(
                    "Skipping unreadable event at %s:%d", self._path, lineno
                )

        loaded = 0
        with self._lock:
            self._events.clear()
            for event in events:
                if self._insert(event):
                    loaded += 1
        logger.info("Loaded %d events from %s", loaded, self._path)
        return loaded


def build_event_store(config: EventStoreConfig) -> InMemoryEventStore:
    """Build the store described by *config*, loading any existing log."""
    if config.path is None:
        return InMemoryEventStore(max_events=config.max_events)
    store = JsonlEventStore(config.path, max_events=config.max_events)
    store.load()
    return store
