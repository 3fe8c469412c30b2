"""Fixed-size BLAKE3 digest with raw-byte and bs58check codecs.

Text form is Bitcoin-alphabet base58 over ``digest || checksum`` where the
checksum is the first 4 bytes of ``sha256(sha256(digest))``.
"""

from __future__ import annotations

import functools
from typing import Any

import base58
from blake3 import blake3

from .config import HASH_SIZE_BYTES
from .errors import HashDecodeError
from .prehash import prehash_key

_B58_ALPHABET = frozenset(base58.BITCOIN_ALPHABET.decode("ascii"))


@functools.total_ordering
class Hash:
    """Immutable 32-byte digest."""

    __slots__ = ("_digest",)

    def __init__(self, digest: bytes) -> None:
        if not isinstance(digest, bytes) or len(digest) != HASH_SIZE_BYTES:
            raise HashDecodeError(
                f"expected {HASH_SIZE_BYTES} digest bytes, got {_describe(digest)}"
            )
        object.__setattr__(self, "_digest", digest)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Hash is immutable")

    @classmethod
    def compute_from(cls, data: bytes) -> Hash:
        return cls(blake3(data).digest())

    # -- raw bytes -----------------------------------------------------------

    def to_bytes(self) -> bytes:
        return self._digest

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> Hash:
        """Rebuild a digest from exactly ``HASH_SIZE_BYTES`` bytes."""
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        return cls(data)

    # -- bs58check -----------------------------------------------------------

    def to_bs58_check(self) -> str:
        return base58.b58encode_check(self._digest).decode("ascii")

    @classmethod
    def from_bs58_check(cls, data: str) -> Hash:
        """Decode and checksum-validate a bs58check string.

        Only base58 alphabet characters are accepted, so surrounding
        whitespace is malformed too. Malformed base58, a bad checksum and a
        wrong payload length all raise ``HashDecodeError``.
        """
        if not isinstance(data, str):
            raise HashDecodeError(f"expected str, got {type(data).__name__}")
        if not data or any(c not in _B58_ALPHABET for c in data):
            raise HashDecodeError("bs58check string has non-base58 characters")
        try:
            raw = base58.b58decode_check(data)
        except (ValueError, TypeError) as exc:
            raise HashDecodeError(f"invalid bs58check string: {exc}") from exc
        return cls.from_bytes(raw)

    # -- value semantics -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hash):
            return NotImplemented
        return self._digest == other._digest

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Hash):
            return NotImplemented
        return self._digest < other._digest

    def prehash(self) -> bytes:
        return self._digest

    def __hash__(self) -> int:
        return prehash_key(self)

    def __str__(self) -> str:
        return self.to_bs58_check()

    def __repr__(self) -> str:
        return f'Hash("{self.to_bs58_check()}")'

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self._digest,))


def _describe(value: object) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"{len(value)} bytes"
    return type(value).__name__
