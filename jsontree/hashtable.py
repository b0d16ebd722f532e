"""Insertion-ordered hash table keyed by byte strings, hashed with lookup3."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from .lookup3 import hashlittle, hashmask, hashsize
from .seed import current_seed

INITIAL_HASHTABLE_ORDER = 3

Key = Union[str, bytes, bytearray, memoryview]


def _key_bytes(key: Key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    raise TypeError(f"hash table keys must be str or bytes, not {type(key).__name__}")


@dataclass(eq=False, repr=False)
class _Pair:
    hash: int
    raw: bytes
    key: Any
    value: Any
    prev: _Pair | None = field(default=None)
    next: _Pair | None = field(default=None)


class HashTable:
    """A hash table that keeps its entries in insertion order.

    Keys may be ``str`` (compared by their UTF-8 encoding) or bytes, so
    embedded NUL bytes and binary keys are allowed. The table doubles its
    bucket count whenever the number of entries reaches it.
    """

    def __init__(self) -> None:
        self._seed = current_seed()
        self._order = INITIAL_HASHTABLE_ORDER
        self._buckets: list[list[_Pair]] = [[] for _ in range(hashsize(self._order))]
        self._size = 0
        self._first: _Pair | None = None
        self._last: _Pair | None = None

    def _hash(self, raw: bytes) -> int:
        return hashlittle(raw, self._seed)

    def _bucket(self, hash_value: int) -> list[_Pair]:
        return self._buckets[hash_value & hashmask(self._order)]

    def _find(self, raw: bytes, hash_value: int) -> _Pair | None:
        for pair in self._bucket(hash_value):
            if pair.hash == hash_value and pair.raw == raw:
                return pair
        return None

    def _rehash(self) -> None:
        self._order += 1
        self._buckets = [[] for _ in range(hashsize(self._order))]
        pair = self._first
        while pair is not None:
            self._bucket(pair.hash).append(pair)
            pair = pair.next

    def set(self, key: Key, value: Any) -> None:
        """Add ``key`` with ``value``, or replace the value of an existing key."""
        raw = _key_bytes(key)
        if self._size >= hashsize(self._order):
            self._rehash()

        hash_value = self._hash(raw)
        pair = self._find(raw, hash_value)
        if pair is not None:
            pair.value = value
            return

        pair = _Pair(hash_value, raw, key, value, prev=self._last)
        self._bucket(hash_value).append(pair)
        if self._last is None:
            self._first = pair
        else:
            self._last.next = pair
        self._last = pair
        self._size += 1

    def get(self, key: Key, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        raw = _key_bytes(key)
        pair = self._find(raw, self._hash(raw))
        return default if pair is None else pair.value

    def delete(self, key: Key) -> None:
        """Remove ``key``; raise KeyError if it is not present."""
        raw = _key_bytes(key)
        hash_value = self._hash(raw)
        pair = self._find(raw, hash_value)
        if pair is None:
            raise KeyError(key)

        self._bucket(hash_value).remove(pair)
        if pair.prev is None:
            self._first = pair.next
        else:
            pair.prev.next = pair.next
        if pair.next is None:
            self._last = pair.prev
        else:
            pair.next.prev = pair.prev
        self._size -= 1

    def clear(self) -> None:
        """Remove every entry; the bucket count is kept."""
        for bucket in self._buckets:
            bucket.clear()
        self._first = self._last = None
        self._size = 0

    def items(self) -> Iterator[tuple[Any, Any]]:
        """Yield ``(key, value)`` pairs in insertion order.

        The entry just yielded may be deleted while iterating.
        """
        pair = self._first
        while pair is not None:
            following = pair.next
            yield pair.key, pair.value
            pair = following

    def keys(self) -> Iterator[Any]:
        """Yield the keys in insertion order."""
        for key, _ in self.items():
            yield key

    def values(self) -> Iterator[Any]:
        """Yield the values in insertion order."""
        for _, value in self.items():
            yield value

    def bucket_count(self) -> int:
        """Return the current number of buckets."""
        return hashsize(self._order)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        try:
            raw = _key_bytes(key)  # type: ignore[arg-type]
        except TypeError:
            return False
        return self._find(raw, self._hash(raw)) is not None

    def __iter__(self) -> Iterator[Any]:
        return self.keys()