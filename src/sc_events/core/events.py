"""Smart-contract output events.

An ``SCOutputEvent`` is a by-product of bytecode execution: an id, the
execution context that produced it, and an opaque data string (usually
JSON, never parsed here).

All three types are immutable; any change builds a new value.  Field
declaration order is the structured encoding order and must not change:
``id, context, data`` and ``slot, block, read_only, index_in_slot,
call_stack``.
"""

from __future__ import annotations

import functools
from typing import Any

from pydantic import BaseModel, Field, GetCoreSchemaHandler
from pydantic_core import core_schema

from .errors import ModelsError
from .hashing import Hash
from .models import Address, BlockId, Slot
from .prehash import prehash_key


@functools.total_ordering
class SCOutputEventId:
    """Event id, computed by the producer from (read_only, slot, index_in_slot).

    Equality, ordering and hashing all follow the underlying digest bytes.
    """

    __slots__ = ("_hash",)

    def __init__(self, hash: Hash) -> None:
        if not isinstance(hash, Hash):
            raise TypeError(f"expected Hash, got {type(hash).__name__}")
        object.__setattr__(self, "_hash", hash)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("SCOutputEventId is immutable")

    @property
    def hash(self) -> Hash:
        return self._hash

    def to_bytes(self) -> bytes:
        return self._hash.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> SCOutputEventId:
        return cls(Hash.from_bytes(data))

    def to_bs58_check(self) -> str:
        return self._hash.to_bs58_check()

    @classmethod
    def from_bs58_check(cls, data: str) -> SCOutputEventId:
        return cls(Hash.from_bs58_check(data))

    @classmethod
    def parse(cls, data: str) -> SCOutputEventId:
        """Parse the only textual form an event id has: bs58check."""
        return cls.from_bs58_check(data)

    def prehash(self) -> bytes:
        return self._hash.to_bytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SCOutputEventId):
            return NotImplemented
        return self._hash == other._hash

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SCOutputEventId):
            return NotImplemented
        return self._hash < other._hash

    def __hash__(self) -> int:
        return prehash_key(self)

    def __str__(self) -> str:
        return self.to_bs58_check()

    def __repr__(self) -> str:
        return f'SCOutputEventId("{self.to_bs58_check()}")'

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self._hash,))

    # -- pydantic integration ------------------------------------------------

    @classmethod
    def _coerce(cls, value: Any) -> SCOutputEventId:
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, str):
                return cls.from_bs58_check(value)
            if isinstance(value, (bytes, bytearray, memoryview)):
                return cls.from_bytes(value)
            if isinstance(value, Hash):
                return cls(value)
        except ModelsError as exc:
            raise ValueError(str(exc)) from exc
        raise ValueError(f"cannot build an event id from {type(value).__name__}")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_str = core_schema.chain_schema(
            [
                core_schema.str_schema(),
                core_schema.no_info_plain_validator_function(cls._coerce),
            ]
        )
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.no_info_plain_validator_function(cls._coerce),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda v: v.to_bs58_check(), when_used="json-unless-none"
            ),
        )


class EventExecutionContext(BaseModel):
    """Context of the event (not generated by the user)."""

    slot: Slot  # when was it generated
    block: BlockId | None = None  # block id if there was a block at that slot
    # generated during a read-only execution
    read_only: bool = Field(default=False, strict=True)
    # unique per (slot, read_only)
    index_in_slot: int = Field(ge=0, le=2**64 - 1, strict=True)
    call_stack: tuple[Address, ...] = ()  # most recent at the end

    model_config = {"frozen": True}

    @property
    def emitter(self) -> str | None:
        """Innermost call, i.e. the contract that emitted the event."""
        return self.call_stack[-1] if self.call_stack else None

    @property
    def original_caller(self) -> str | None:
        return self.call_stack[0] if self.call_stack else None

    def ordering_key(self) -> tuple[Slot, int]:
        return (self.slot, self.index_in_slot)

    def with_call(self, address: str) -> EventExecutionContext:
        """Return a copy with *address* appended as the innermost call."""
        return EventExecutionContext(
            slot=self.slot,
            block=self.block,
            read_only=self.read_only,
            index_in_slot=self.index_in_slot,
            call_stack=(*self.call_stack, address),
        )

    def __str__(self) -> str:
        lines = [f"Slot: {self.slot} at index: {self.index_in_slot}"]
        if self.read_only:
            lines.append("Read only execution")
        if self.block is not None:
            lines.append(f"Block id: {self.block}")
        lines.append(f"Call stack: {','.join(self.call_stack)}")
        return "\n".join(lines)


class SCOutputEvent(BaseModel):
    """By-product of a bytecode execution."""

    id: SCOutputEventId
    context: EventExecutionContext
    data: str  # opaque, conventionally JSON

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"Id: {self.id}\nContext: {self.context}\nData: {self.data}"
