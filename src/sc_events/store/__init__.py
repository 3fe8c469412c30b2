"""Bounded, filterable output event stores."""

from sc_events.store.event_store import (
    InMemoryEventStore,
    JsonlEventStore,
    build_event_store,
)

__all__ = ["InMemoryEventStore", "JsonlEventStore", "build_event_store"]
