"""Producer-side construction of output events.

The execution engine owns id derivation and decides when slots start and
calls nest.  ``EventEmitter`` is the boundary where those decisions turn
into ``SCOutputEvent`` values, and the place where their contract is
checked:

1.  ``index_in_slot`` is assigned here, zero-based and strictly
    increasing per ``(slot, read_only)`` domain.
2.  Ids returned by the id factory must be unique per domain; a repeat
    raises ``DuplicateEventError`` and no event is produced.
3.  The call stack only grows or shrinks at its tail.
4.  Per-domain bookkeeping is kept until ``finalize_slot()`` releases
    it; finalized slots can never be started again, so released
    numbering cannot be reused.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from sc_events.core.config import EventLimitsConfig
from sc_events.core.errors import DuplicateEventError, EventValidationError
from sc_events.core.events import EventExecutionContext, SCOutputEvent, SCOutputEventId
from sc_events.core.models import Address, BlockId, Slot
from sc_events.core.prehash import PreHashSet
from sc_events.observability.logger import set_current_slot

logger = logging.getLogger(__name__)

IdFactory = Callable[[Slot, bool, int], SCOutputEventId]

_ADDRESS = TypeAdapter(Address)
_BLOCK = TypeAdapter(BlockId | None)


class EventEmitter:
    """Builds events for the slot currently being executed."""

    def __init__(
        self,
        id_factory: IdFactory,
        limits: EventLimitsConfig | None = None,
    ) -> None:
        self._id_factory = id_factory
        self._limits = limits if limits is not None else EventLimitsConfig()
        self._slot: Slot | None = None
        self._block: str | None = None
        self._read_only = False
        self._call_stack: deque[str] = deque()
        self._next_index: dict[tuple[Slot, bool], int] = {}
        self._issued: dict[tuple[Slot, bool], PreHashSet[SCOutputEventId]] = {}
        self._finalized: Slot | None = None

    # ------------------------------------------------------------------
    # Slot lifecycle
    # ------------------------------------------------------------------

    def start_slot(
        self,
        slot: Slot,
        block: str | None = None,
        read_only: bool = False,
    ) -> None:
        """Make *slot* current.  Re-entering a domain keeps its numbering."""
        if slot.thread >= self._limits.thread_count:
            raise EventValidationError(
                f"thread {slot.thread} out of range "
                f"(thread_count={self._limits.thread_count})"
            )
        if self._finalized is not None and slot <= self._finalized:
            raise EventValidationError(
                f"slot {slot} is at or before finalized slot {self._finalized}"
            )
        if not isinstance(read_only, bool):
            raise EventValidationError(
                f"read_only must be bool, got {type(read_only).__name__}"
            )
        try:
            _BLOCK.validate_python(block)
        except ValidationError as exc:
            raise EventValidationError(f"invalid block id {block!r}") from exc
        self._slot = slot
        self._block = block
        self._read_only = read_only
        self._call_stack.clear()
        self._next_index.setdefault((slot, read_only), 0)
        set_current_slot(slot)
        logger.debug("Started slot %s (read_only=%s)", slot, read_only)

    def finalize_slot(self, slot: Slot) -> int:
        """Release bookkeeping for every domain at or before *slot*.

        Returns how many domains were released.  If the current slot is
        released too, a new slot must be started before emitting.
        """
        released = [d for d in self._next_index if d[0] <= slot]
        for domain in released:
            del self._next_index[domain]
            self._issued.pop(domain, None)
        if self._finalized is None or slot > self._finalized:
            self._finalized = slot
        if self._slot is not None and self._slot <= slot:
            self._slot = None
            self._call_stack.clear()
        logger.debug("Finalized up to %s, released %d domains", slot, len(released))
        return len(released)

    @property
    def slot(self) -> Slot | None:
        return self._slot

    @property
    def retained_domains(self) -> int:
        return len(self._next_index)

    def next_index(self) -> int:
        """Index the next emitted event would get in the current domain."""
        return self._next_index[self._domain()]

    # ------------------------------------------------------------------
    # Call stack
    # ------------------------------------------------------------------

    def push_call(self, address: str) -> None:
        if len(self._call_stack) >= self._limits.max_call_stack_depth:
            raise EventValidationError(
                f"call stack depth limit reached "
                f"({self._limits.max_call_stack_depth})"
            )
        try:
            _ADDRESS.validate_python(address)
        except ValidationError as exc:
            raise EventValidationError(f"invalid address {address!r}") from exc
        self._call_stack.append(address)

    def pop_call(self) -> str:
        if not self._call_stack:
            raise EventValidationError("pop from empty call stack")
        return self._call_stack.pop()

    @property
    def call_stack(self) -> tuple[str, ...]:
        return tuple(self._call_stack)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def emit(self, data: str) -> SCOutputEvent:
        """Build the next event of the current domain carrying *data*."""
        if not isinstance(data, str):
            raise EventValidationError(
                f"event data must be str, got {type(data).__name__}"
            )
        size = len(data.encode("utf-8"))
        if size > self._limits.max_event_data_size:
            raise EventValidationError(
                f"event data is {size} bytes "
                f"(max {self._limits.max_event_data_size})"
            )

        domain = self._domain()
        slot, read_only = domain
        index = self._next_index[domain]

        event_id = self._id_factory(slot, read_only, index)
        issued = self._issued.setdefault(domain, PreHashSet())
        if event_id in issued:
            logger.warning(
                "Rejected duplicate event id %s at %s index %d",
                event_id, slot, index,
            )
            raise DuplicateEventError(slot, read_only, index)

        event = SCOutputEvent(
            id=event_id,
            context=EventExecutionContext(
                slot=slot,
                block=self._block,
                read_only=read_only,
                index_in_slot=index,
                call_stack=tuple(self._call_stack),
            ),
            data=data,
        )
        issued.add(event_id)
        self._next_index[domain] = index + 1
        return event

    def _domain(self) -> tuple[Slot, bool]:
        if self._slot is None:
            raise EventValidationError("no slot started")
        return (self._slot, self._read_only)
