"""Process-wide seed for the object hash function."""

from __future__ import annotations

import os
import threading
import time

_MASK32 = 0xFFFFFFFF


class _SeedState:
    """Holds the active seed; zero means no seed has been chosen yet."""

    def __init__(self) -> None:
        self.value = 0
        self.lock = threading.Lock()


_state = _SeedState()


def _seed_from_urandom() -> int | None:
    try:
        data = os.urandom(4)
    except (NotImplementedError, OSError):
        return None
    if len(data) != 4:
        return None
    return int.from_bytes(data, "big")


def _seed_from_timestamp_and_pid() -> int:
    now = time.time()
    seconds = int(now)
    microseconds = int((now - seconds) * 1_000_000)
    seed = (seconds & _MASK32) ^ (microseconds & _MASK32)
    return (seed ^ (os.getpid() & _MASK32)) & _MASK32


def generate_seed() -> int:
    """Return a random, never-zero 32-bit seed.

    The operating system's random source is preferred; when it is not
    available the current time and process id are mixed instead.
    """
    seed = _seed_from_urandom()
    if seed is None:
        seed = _seed_from_timestamp_and_pid()
    return seed or 1


def object_seed(seed: int = 0) -> int:
    """Set the hash seed once, unless one is already set, and return it.

    Only the low 32 bits of ``seed`` are used. A seed of zero picks a
    random one. Calls after the first have no effect.
    """
    new_seed = seed & _MASK32
    with _state.lock:
        if _state.value == 0:
            _state.value = new_seed or generate_seed()
        return _state.value


def current_seed() -> int:
    """Return the active seed, or zero if none has been set."""
    return _state.value