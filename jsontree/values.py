"""The JSON value tree: objects, arrays, strings, numbers, booleans and null."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Any, Iterable, Iterator, Mapping, Union

from .hashtable import HashTable, Key

_INT_MIN = -(1 << 63)
_INT_MAX = (1 << 63) - 1
_MISSING = object()


class JsonType(IntEnum):
    """The kind of a JSON value."""

    OBJECT = 0
    ARRAY = 1
    STRING = 2
    INTEGER = 3
    REAL = 4
    TRUE = 5
    FALSE = 6
    NULL = 7


class JsonValue:
    """Base class of every JSON value."""

    type: JsonType

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _check_member(container: JsonValue, value: Any) -> JsonValue:
    if not isinstance(value, JsonValue):
        raise TypeError(f"expected a JSON value, not {type(value).__name__}")
    if value is container:
        raise ValueError("a container cannot hold itself")
    return value


class JsonObject(JsonValue):
    """A JSON object whose keys keep their insertion order.

    Keys are ``str`` or ``bytes``; a ``str`` key and its UTF-8 encoding
    name the same entry, and byte keys may hold NUL or arbitrary bytes.
    """

    type = JsonType.OBJECT

    def __init__(
        self,
        items: Mapping[Key, JsonValue] | Iterable[tuple[Key, JsonValue]] | None = None,
    ) -> None:
        self._table = HashTable()
        if items is None:
            return
        pairs = items.items() if hasattr(items, "items") else items
        for key, value in pairs:
            self.set(key, value)

    def get(self, key: Key, default: Any = None) -> Any:
        """Return the value under ``key``, or ``default`` if it is absent."""
        return self._table.get(key, default)

    def set(self, key: Key, value: JsonValue) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        _check_member(self, value)
        self._table.set(key, value)

    def delete(self, key: Key) -> None:
        """Remove ``key``; raise KeyError if it is absent."""
        self._table.delete(key)

    def clear(self) -> None:
        """Remove every entry."""
        self._table.clear()

    @staticmethod
    def _require_object(other: Any) -> JsonObject:
        if not isinstance(other, JsonObject):
            raise TypeError(f"expected a JSON object, not {type(other).__name__}")
        return other

    def update(self, other: JsonObject) -> None:
        """Copy every entry of ``other`` into this object."""
        for key, value in list(self._require_object(other).items()):
            self.set(key, value)

    def update_existing(self, other: JsonObject) -> None:
        """Copy the entries of ``other`` whose keys this object already has."""
        for key, value in list(self._require_object(other).items()):
            if key in self:
                self.set(key, value)

    def update_missing(self, other: JsonObject) -> None:
        """Copy the entries of ``other`` whose keys this object lacks."""
        for key, value in list(self._require_object(other).items()):
            if key not in self:
                self.set(key, value)

    def update_recursive(self, other: JsonObject) -> None:
        """Merge ``other`` into this object, descending into nested objects.

        Where both sides hold an object under the same key they are merged;
        otherwise the value from ``other`` replaces the existing one.
        Raises ValueError if ``other`` contains a circular reference.
        """
        self._update_recursive(self._require_object(other), set())

    def _update_recursive(self, other: JsonObject, parents: set[int]) -> None:
        if id(other) in parents:
            raise ValueError("circular reference in object update")
        parents.add(id(other))
        try:
            for key, value in list(other.items()):
                current = self.get(key)
                if isinstance(current, JsonObject) and isinstance(value, JsonObject):
                    current._update_recursive(value, parents)
                else:
                    self.set(key, value)
        finally:
            parents.discard(id(other))

    def items(self) -> Iterator[tuple[Key, JsonValue]]:
        """Yield ``(key, value)`` pairs in insertion order."""
        return self._table.items()

    def keys(self) -> Iterator[Key]:
        """Yield the keys in insertion order."""
        return self._table.keys()

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Key]:
        return self._table.keys()

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __getitem__(self, key: Key) -> JsonValue:
        value = self._table.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: Key, value: JsonValue) -> None:
        self.set(key, value)

    def __delitem__(self, key: Key) -> None:
        self.delete(key)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, JsonObject) or len(self) != len(other):
            return False
        for key, value in self.items():
            if other.get(key) != value:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"JsonObject({{{inner}}})"


class JsonArray(JsonValue):
    """A JSON array."""

    type = JsonType.ARRAY

    def __init__(self, items: Iterable[JsonValue] | None = None) -> None:
        self._items: list[JsonValue] = []
        if items is not None:
            for item in items:
                self.append(item)

    def append(self, value: JsonValue) -> None:
        """Add ``value`` at the end."""
        self._items.append(_check_member(self, value))

    def insert(self, index: int, value: JsonValue) -> None:
        """Insert ``value`` before ``index``; ``index`` may equal the length."""
        _check_member(self, value)
        if not 0 <= index <= len(self._items):
            raise IndexError("array index out of range")
        self._items.insert(index, value)

    def set(self, index: int, value: JsonValue) -> None:
        """Replace the item at ``index``."""
        _check_member(self, value)
        if not 0 <= index < len(self._items):
            raise IndexError("array index out of range")
        self._items[index] = value

    def remove(self, index: int) -> None:
        """Remove the item at ``index``."""
        if not 0 <= index < len(self._items):
            raise IndexError("array index out of range")
        del self._items[index]

    def clear(self) -> None:
        """Remove every item."""
        self._items.clear()

    def extend(self, other: JsonArray) -> None:
        """Append every item of ``other``."""
        if not isinstance(other, JsonArray):
            raise TypeError(f"expected a JSON array, not {type(other).__name__}")
        self._items.extend(list(other._items))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> JsonValue:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, JsonArray) or len(self) != len(other):
            return False
        return all(a == b for a, b in zip(self._items, other._items))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonArray({self._items!r})"


def _as_text(value: Union[str, bytes, bytearray]) -> str:
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError("string is not valid UTF-8") from exc
    if not isinstance(value, str):
        raise TypeError(f"expected str or bytes, not {type(value).__name__}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValueError("string is not valid UTF-8") from exc
    return value


class JsonString(JsonValue):
    """A JSON string; it may contain NUL characters."""

    type = JsonType.STRING

    def __init__(self, value: Union[str, bytes, bytearray]) -> None:
        self._value = _as_text(value)

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: Union[str, bytes, bytearray]) -> None:
        self._value = _as_text(value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, JsonString) and self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonString({self._value!r})"


def _as_integer(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected int, not {type(value).__name__}")
    if not _INT_MIN <= value <= _INT_MAX:
        raise OverflowError("integer does not fit in 64 bits")
    return value


class JsonInteger(JsonValue):
    """A JSON integer, limited to the signed 64-bit range."""

    type = JsonType.INTEGER

    def __init__(self, value: int) -> None:
        self._value = _as_integer(value)

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int) -> None:
        self._value = _as_integer(value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, JsonInteger) and self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonInteger({self._value})"


def _as_real(value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected float, not {type(value).__name__}")
    result = float(value)
    if not math.isfinite(result):
        raise ValueError("JSON reals must be finite")
    return result


class JsonReal(JsonValue):
    """A finite JSON real number."""

    type = JsonType.REAL

    def __init__(self, value: float) -> None:
        self._value = _as_real(value)

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, value: float) -> None:
        self._value = _as_real(value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, JsonReal) and self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JsonReal({self._value!r})"


_BOOLEANS: dict[bool, "JsonBoolean"] = {}


class JsonBoolean(JsonValue):
    """JSON ``true`` or ``false``; there is exactly one instance of each."""

    _value: bool

    def __new__(cls, flag: object = False) -> JsonBoolean:
        key = bool(flag)
        instance = _BOOLEANS.get(key)
        if instance is None:
            instance = super().__new__(cls)
            instance._value = key
            _BOOLEANS[key] = instance
        return instance

    @property
    def value(self) -> bool:
        return self._value

    @property
    def type(self) -> JsonType:  # type: ignore[override]
        return JsonType.TRUE if self._value else JsonType.FALSE

    def __bool__(self) -> bool:
        return self._value

    def __repr__(self) -> str:
        return f"JsonBoolean({self._value})"


_NULL: list["JsonNull"] = []


class JsonNull(JsonValue):
    """JSON ``null``; there is exactly one instance."""

    type = JsonType.NULL

    def __new__(cls) -> JsonNull:
        if not _NULL:
            _NULL.append(super().__new__(cls))
        return _NULL[0]

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "JsonNull()"


def number_value(value: Any) -> float:
    """Return a JSON integer or real as a float, or 0.0 for anything else."""
    if isinstance(value, JsonInteger):
        return float(value.value)
    if isinstance(value, JsonReal):
        return value.value
    return 0.0


def true() -> JsonBoolean:
    """Return JSON ``true``."""
    return JsonBoolean(True)


def false() -> JsonBoolean:
    """Return JSON ``false``."""
    return JsonBoolean(False)


def null() -> JsonNull:
    """Return JSON ``null``."""
    return JsonNull()


def boolean(flag: object) -> JsonBoolean:
    """Return ``true`` or ``false`` according to the truth of ``flag``."""
    return JsonBoolean(flag)