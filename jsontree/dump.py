"""Serialise a JSON value tree to text."""

from __future__ import annotations

import os
import re
from enum import IntFlag
from typing import Any, Callable, Iterator

from .error import ErrorCode, JsonError
from .values import (
    JsonArray,
    JsonBoolean,
    JsonInteger,
    JsonNull,
    JsonObject,
    JsonReal,
    JsonString,
)

MAX_INDENT = 0x1F
_PRECISION_SHIFT = 11


class DumpFlag(IntFlag):
    """Encoding options; combine with ``indent()`` and ``real_precision()``."""

    COMPACT = 0x20
    ENSURE_ASCII = 0x40
    SORT_KEYS = 0x80
    PRESERVE_ORDER = 0x100
    ENCODE_ANY = 0x200
    ESCAPE_SLASH = 0x400
    EMBED = 0x10000


class DumpError(JsonError):
    """Raised when a value cannot be encoded or the output cannot be written."""


def indent(n: int) -> int:
    """Return the flag bits asking for ``n`` spaces of indentation (0 to 31)."""
    return n & MAX_INDENT


def real_precision(n: int) -> int:
    """Return the flag bits asking for reals with ``n`` significant digits."""
    return (n & 0x1F) << _PRECISION_SHIFT


def _flags_to_indent(flags: int) -> int:
    return flags & MAX_INDENT


def _flags_to_precision(flags: int) -> int:
    return (flags >> _PRECISION_SHIFT) & 0x1F


_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "/": "\\/",
}

_PATTERNS: dict[tuple[bool, bool], re.Pattern[str]] = {}


def _escape_pattern(flags: int) -> re.Pattern[str]:
    slash = bool(flags & DumpFlag.ESCAPE_SLASH)
    ascii_only = bool(flags & DumpFlag.ENSURE_ASCII)
    pattern = _PATTERNS.get((slash, ascii_only))
    if pattern is None:
        chars = '\\\\"\x00-\x1f'
        if slash:
            chars += "/"
        if ascii_only:
            chars += "\x80-\U0010ffff"
        pattern = re.compile(f"[{chars}]")
        _PATTERNS[(slash, ascii_only)] = pattern
    return pattern


def _escape_char(match: re.Match[str]) -> str:
    char = match.group()
    simple = _SIMPLE_ESCAPES.get(char)
    if simple is not None:
        return simple
    codepoint = ord(char)
    if codepoint < 0x10000:
        return f"\\u{codepoint:04X}"
    codepoint -= 0x10000
    first = 0xD800 | ((codepoint & 0xFFC00) >> 10)
    last = 0xDC00 | (codepoint & 0x003FF)
    return f"\\u{first:04X}\\u{last:04X}"


def _quote(text: str, flags: int) -> str:
    return '"' + _escape_pattern(flags).sub(_escape_char, text) + '"'


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        try:
            key.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise DumpError("object key is not valid UTF-8", ErrorCode.INVALID_UTF8) from exc
        return key
    try:
        return bytes(key).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DumpError("object key is not valid UTF-8", ErrorCode.INVALID_UTF8) from exc


def _format_real(value: float, precision: int) -> str:
    text = repr(value) if precision == 0 else format(value, f".{precision}g")
    if "." not in text and "e" not in text:
        text += ".0"
    mantissa, separator, exponent = text.partition("e")
    if separator:
        sign = "-" if exponent.startswith("-") else ""
        digits = exponent.lstrip("+-").lstrip("0") or "0"
        text = f"{mantissa}e{sign}{digits}"
    return text


def _indent_text(flags: int, depth: int, space: bool) -> str:
    width = _flags_to_indent(flags)
    if width > 0:
        return "\n" + " " * (depth * width)
    if space and not flags & DumpFlag.COMPACT:
        return " "
    return ""


def _enter(value: Any, parents: set[int]) -> None:
    if id(value) in parents:
        raise DumpError("circular reference detected", ErrorCode.INVALID_ARGUMENT)
    parents.add(id(value))


def _encode(value: Any, flags: int, depth: int, parents: set[int]) -> Iterator[str]:
    embed = bool(flags & DumpFlag.EMBED)
    flags &= ~DumpFlag.EMBED

    if value is None:
        raise DumpError("no value to encode", ErrorCode.INVALID_ARGUMENT)
    if isinstance(value, JsonNull):
        yield "null"
    elif isinstance(value, JsonBoolean):
        yield "true" if value.value else "false"
    elif isinstance(value, JsonInteger):
        yield str(value.value)
    elif isinstance(value, JsonReal):
        yield _format_real(value.value, _flags_to_precision(flags))
    elif isinstance(value, JsonString):
        yield _quote(value.value, flags)
    elif isinstance(value, JsonArray):
        yield from _encode_array(value, flags, depth, parents, embed)
    elif isinstance(value, JsonObject):
        yield from _encode_object(value, flags, depth, parents, embed)
    else:
        raise DumpError(
            f"cannot encode {type(value).__name__}", ErrorCode.WRONG_TYPE
        )


def _encode_array(
    array: JsonArray, flags: int, depth: int, parents: set[int], embed: bool
) -> Iterator[str]:
    _enter(array, parents)
    items = list(array)
    if not embed:
        yield "["
    if items:
        opening = _indent_text(flags, depth + 1, False)
        if opening:
            yield opening
        last = len(items) - 1
        for position, item in enumerate(items):
            yield from _encode(item, flags, depth + 1, parents)
            if position < last:
                yield "," + _indent_text(flags, depth + 1, True)
            else:
                closing = _indent_text(flags, depth, False)
                if closing:
                    yield closing
    parents.discard(id(array))
    if not embed:
        yield "]"


def _encode_object(
    obj: JsonObject, flags: int, depth: int, parents: set[int], embed: bool
) -> Iterator[str]:
    separator = ":" if flags & DumpFlag.COMPACT else ": "
    _enter(obj, parents)
    entries = [(_key_text(key), value) for key, value in obj.items()]
    if flags & DumpFlag.SORT_KEYS:
        entries.sort(key=lambda entry: entry[0].encode("utf-8"))
    if not embed:
        yield "{"
    if entries:
        opening = _indent_text(flags, depth + 1, False)
        if opening:
            yield opening
        last = len(entries) - 1
        for position, (key, value) in enumerate(entries):
            yield _quote(key, flags) + separator
            yield from _encode(value, flags, depth + 1, parents)
            if position < last:
                yield "," + _indent_text(flags, depth + 1, True)
            else:
                closing = _indent_text(flags, depth, False)
                if closing:
                    yield closing
    parents.discard(id(obj))
    if not embed:
        yield "}"


def dump_callback(value: Any, callback: Callable[[str], Any], flags: int = 0) -> None:
    """Encode ``value`` and pass the text to ``callback`` piece by piece.

    Without ``DumpFlag.ENCODE_ANY`` only arrays and objects are accepted.
    Exceptions raised by ``callback`` propagate.
    """
    flags = int(flags)
    if not flags & DumpFlag.ENCODE_ANY and not isinstance(value, (JsonArray, JsonObject)):
        raise DumpError(
            "only arrays and objects can be encoded without ENCODE_ANY",
            ErrorCode.WRONG_TYPE if value is not None else ErrorCode.INVALID_ARGUMENT,
        )
    for chunk in _encode(value, flags, 0, set()):
        callback(chunk)


def dumps(value: Any, flags: int = 0) -> str:
    """Return the JSON text of ``value``."""
    chunks: list[str] = []
    dump_callback(value, chunks.append, flags)
    return "".join(chunks)


def dumpb(value: Any, flags: int = 0) -> bytes:
    """Return the JSON text of ``value`` encoded as UTF-8."""
    return dumps(value, flags).encode("utf-8")


def dumpf(value: Any, output: Any, flags: int = 0) -> None:
    """Write the JSON text of ``value`` to the text stream ``output``."""
    try:
        dump_callback(value, output.write, flags)
    except OSError as exc:
        raise DumpError(f"cannot write output: {exc}", ErrorCode.UNKNOWN) from exc


def dumpfd(value: Any, fd: int, flags: int = 0) -> None:
    """Write the JSON text of ``value`` as UTF-8 to file descriptor ``fd``."""

    def write(chunk: str) -> None:
        data = memoryview(chunk.encode("utf-8"))
        while data:
            written = os.write(fd, data)
            data = data[written:]

    try:
        dump_callback(value, write, flags)
    except OSError as exc:
        raise DumpError(f"cannot write output: {exc}", ErrorCode.UNKNOWN) from exc


def dump_file(value: Any, path: str | os.PathLike[str], flags: int = 0) -> None:
    """Write the JSON text of ``value`` to the file at ``path``."""
    text = dumps(value, flags)
    try:
        with open(path, "w", encoding="utf-8") as output:
            output.write(text)
    except OSError as exc:
        raise DumpError(
            f"unable to write {os.fspath(path)}: {exc}", ErrorCode.CANNOT_OPEN_FILE
        ) from exc