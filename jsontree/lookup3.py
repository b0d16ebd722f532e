"""Jenkins' lookup3 ``hashlittle`` hash and hash-table sizing helpers."""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_INIT_CONSTANT = 0xDEADBEEF


def hashsize(order: int) -> int:
    """Return the number of buckets of a table of the given order (2**order)."""
    return 1 << order


def hashmask(order: int) -> int:
    """Return the bit mask selecting a bucket in a table of the given order."""
    return hashsize(order) - 1


def _rot(x: int, k: int) -> int:
    return ((x << k) | (x >> (32 - k))) & _MASK32


def _mix(a: int, b: int, c: int) -> tuple[int, int, int]:
    a = (a - c) & _MASK32
    a ^= _rot(c, 4)
    c = (c + b) & _MASK32
    b = (b - a) & _MASK32
    b ^= _rot(a, 6)
    a = (a + c) & _MASK32
    c = (c - b) & _MASK32
    c ^= _rot(b, 8)
    b = (b + a) & _MASK32
    a = (a - c) & _MASK32
    a ^= _rot(c, 16)
    c = (c + b) & _MASK32
    b = (b - a) & _MASK32
    b ^= _rot(a, 19)
    a = (a + c) & _MASK32
    c = (c - b) & _MASK32
    c ^= _rot(b, 4)
    b = (b + a) & _MASK32
    return a, b, c


def _final(a: int, b: int, c: int) -> int:
    c ^= b
    c = (c - _rot(b, 14)) & _MASK32
    a ^= c
    a = (a - _rot(c, 11)) & _MASK32
    b ^= a
    b = (b - _rot(a, 25)) & _MASK32
    c ^= b
    c = (c - _rot(b, 16)) & _MASK32
    a ^= c
    a = (a - _rot(c, 4)) & _MASK32
    b ^= a
    b = (b - _rot(a, 14)) & _MASK32
    c ^= b
    c = (c - _rot(b, 24)) & _MASK32
    return c


def _word(block: bytes, start: int) -> int:
    return int.from_bytes(block[start:start + 4], "little")


def hashlittle(key: bytes | bytearray | memoryview | str, initval: int = 0) -> int:
    """Hash ``key`` into a 32-bit value, seeded with ``initval``.

    Strings are hashed as their UTF-8 encoding.
    """
    data = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    length = len(data)

    a = b = c = (_INIT_CONSTANT + (length & _MASK32) + initval) & _MASK32
    if length == 0:
        return c

    offset = 0
    while length - offset > 12:
        a = (a + _word(data, offset)) & _MASK32
        b = (b + _word(data, offset + 4)) & _MASK32
        c = (c + _word(data, offset + 8)) & _MASK32
        a, b, c = _mix(a, b, c)
        offset += 12

    tail = data[offset:].ljust(12, b"\0")
    a = (a + _word(tail, 0)) & _MASK32
    b = (b + _word(tail, 4)) & _MASK32
    c = (c + _word(tail, 8)) & _MASK32

    return _final(a, b, c)