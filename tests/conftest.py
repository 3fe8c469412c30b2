"""Shared fixtures for the sc-events test suite."""

from __future__ import annotations

import pytest

from sc_events.core.events import (
    EventExecutionContext,
    SCOutputEvent,
    SCOutputEventId,
)
from sc_events.core.hashing import Hash
from sc_events.core.models import Slot


USER = "AU1userA"
ROUTER = "AS1routerC"
TOKEN = "AS1tokenB"
BLOCK = "B1qBcuYo8YANEV34W"


def derive_id(slot: Slot, read_only: bool, index_in_slot: int) -> SCOutputEventId:
    """Deterministic test-only id derivation."""
    preimage = (
        bytes([int(read_only)]) + slot.to_bytes_key() + index_in_slot.to_bytes(8, "big")
    )
    return SCOutputEventId(Hash.compute_from(preimage))


def make_event(
    period: int = 1,
    thread: int = 0,
    index_in_slot: int = 0,
    read_only: bool = False,
    block: str | None = BLOCK,
    call_stack: tuple[str, ...] = (USER, ROUTER),
    data: str = '{"kind": "transfer"}',
) -> SCOutputEvent:
    slot = Slot(period=period, thread=thread)
    return SCOutputEvent(
        id=derive_id(slot, read_only, index_in_slot),
        context=EventExecutionContext(
            slot=slot,
            block=block,
            read_only=read_only,
            index_in_slot=index_in_slot,
            call_stack=call_stack,
        ),
        data=data,
    )


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

@pytest.fixture
def hello_hash() -> Hash:
    """Digest of ``b"hello world"``."""
    return Hash.compute_from(b"hello world")


@pytest.fixture
def hello_id(hello_hash: Hash) -> SCOutputEventId:
    return SCOutputEventId(hello_hash)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_slot() -> Slot:
    return Slot(period=42, thread=3)


@pytest.fixture
def sample_event() -> SCOutputEvent:
    return make_event()
