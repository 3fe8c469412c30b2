"""Keys that already carry a uniformly distributed digest.

A ``PreHashed`` value hands its digest bytes to hash containers instead of
having them rehash a variable-length payload. The container hash is the
first 8 digest bytes read little-endian.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, TypeVar, runtime_checkable

_PREHASH_WIDTH = 8


@runtime_checkable
class PreHashed(Protocol):
    """A key whose digest bytes double as its container hash."""

    def prehash(self) -> bytes: ...


def prehash_key(value: PreHashed) -> int:
    """Fold a pre-hashed value's digest into an ``int`` container hash."""
    digest = value.prehash()
    if len(digest) < _PREHASH_WIDTH:
        raise ValueError(
            f"pre-hashed digest must be at least {_PREHASH_WIDTH} bytes"
        )
    return int.from_bytes(digest[:_PREHASH_WIDTH], "little")


def _require_prehashed(key: Any) -> None:
    if not isinstance(key, PreHashed):
        raise TypeError(f"{type(key).__name__} is not a pre-hashed key")


K = TypeVar("K", bound=PreHashed)
V = TypeVar("V")


class PreHashMap(dict[K, V]):
    """``dict`` that only admits ``PreHashed`` keys."""

    def __init__(self, items: Iterable[tuple[K, V]] = ()) -> None:
        super().__init__()
        for key, value in items:
            self[key] = value

    def __setitem__(self, key: K, value: V) -> None:
        _require_prehashed(key)
        super().__setitem__(key, value)

    def setdefault(self, key: K, default: Any = None) -> Any:
        _require_prehashed(key)
        return super().setdefault(key, default)

    def update(self, *args: Any, **kwargs: Any) -> None:
        for key, value in dict(*args, **kwargs).items():
            self[key] = value


class PreHashSet(set[K]):
    """``set`` that only admits ``PreHashed`` members."""

    def __init__(self, items: Iterable[K] = ()) -> None:
        super().__init__()
        for item in items:
            self.add(item)

    def add(self, item: K) -> None:
        _require_prehashed(item)
        super().add(item)

    def update(self, *others: Iterable[K]) -> None:
        for other in others:
            for item in other:
                self.add(item)
