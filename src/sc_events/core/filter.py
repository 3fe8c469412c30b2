"""Event selection criteria used by event stores and RPC-style queries."""

from __future__ import annotations

from pydantic import BaseModel

from .events import SCOutputEvent
from .models import Address, Slot


class EventFilter(BaseModel):
    """All criteria are optional; an empty filter matches every event.

    ``start`` is inclusive, ``end`` exclusive.  ``emitter_address`` is the
    innermost call-stack entry and ``original_caller_address`` the
    outermost one.
    """

    start: Slot | None = None
    end: Slot | None = None
    emitter_address: Address | None = None
    original_caller_address: Address | None = None
    is_read_only: bool | None = None

    model_config = {"frozen": True}

    def matches(self, event: SCOutputEvent) -> bool:
        ctx = event.context
        if self.start is not None and ctx.slot < self.start:
            return False
        if self.end is not None and ctx.slot >= self.end:
            return False
        if self.is_read_only is not None and ctx.read_only != self.is_read_only:
            return False
        if (
            self.emitter_address is not None
            and ctx.emitter != self.emitter_address
        ):
            return False
        if (
            self.original_caller_address is not None
            and ctx.original_caller != self.original_caller_address
        ):
            return False
        return True
