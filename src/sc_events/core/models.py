"""Value types the event context refers to.

``Slot`` is the logical time unit of the chain; ``BlockId`` and ``Address``
are carried as their canonical text forms and only shape-checked here.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from .config import THREAD_COUNT

_B58 = "[1-9A-HJ-NP-Za-km-z]"

BlockId = Annotated[str, StringConstraints(pattern=rf"^B{_B58}+$")]

# "AU" = user account, "AS" = smart contract.
Address = Annotated[str, StringConstraints(pattern=rf"^A[US]{_B58}+$")]

_U64_MAX = 2**64 - 1


class Slot(BaseModel):
    """A (period, thread) position in the block graph.

    Ordered by period first, then thread.
    """

    period: int = Field(ge=0, le=_U64_MAX)
    thread: int = Field(ge=0, le=255)

    model_config = {"frozen": True}

    def _key(self) -> tuple[int, int]:
        return (self.period, self.thread)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Slot):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Slot):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Slot):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Slot):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        return f"(period: {self.period}, thread: {self.thread})"

    def to_bytes_key(self) -> bytes:
        """Big-endian period + thread byte; sorts like the slot itself."""
        return self.period.to_bytes(8, "big") + bytes([self.thread])

    def get_next_slot(self, thread_count: int = THREAD_COUNT) -> Slot:
        if self.thread + 1 < thread_count:
            return Slot(period=self.period, thread=self.thread + 1)
        if self.period == _U64_MAX:
            raise OverflowError("slot period overflow")
        return Slot(period=self.period + 1, thread=0)
