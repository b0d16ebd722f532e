"""Error codes and the exception raised for JSON failures."""

from __future__ import annotations

from enum import IntEnum

ERROR_TEXT_LENGTH = 160
ERROR_SOURCE_LENGTH = 80


class ErrorCode(IntEnum):
    """Classification of a JSON error."""

    UNKNOWN = 0
    OUT_OF_MEMORY = 1
    STACK_OVERFLOW = 2
    CANNOT_OPEN_FILE = 3
    INVALID_ARGUMENT = 4
    INVALID_UTF8 = 5
    PREMATURE_END_OF_INPUT = 6
    END_OF_INPUT_EXPECTED = 7
    INVALID_SYNTAX = 8
    INVALID_FORMAT = 9
    WRONG_TYPE = 10
    NULL_CHARACTER = 11
    NULL_VALUE = 12
    NULL_BYTE_IN_KEY = 13
    DUPLICATE_KEY = 14
    NUMERIC_OVERFLOW = 15
    ITEM_NOT_FOUND = 16
    INDEX_OUT_OF_RANGE = 17


def format_source(source: str | None) -> str:
    """Shorten an error source description to fit the fixed source length.

    Sources that are too long keep their tail, prefixed with ``...``.
    """
    if not source:
        return ""
    if len(source) < ERROR_SOURCE_LENGTH:
        return source
    extra = len(source) - ERROR_SOURCE_LENGTH + 4
    return "..." + source[extra:]


class JsonError(Exception):
    """A JSON failure with its position in the input and where it came from."""

    def __init__(
        self,
        text: str,
        code: ErrorCode | int = ErrorCode.UNKNOWN,
        line: int = -1,
        column: int = -1,
        position: int = 0,
        source: str | None = "",
    ) -> None:
        self.text = text[: ERROR_TEXT_LENGTH - 2]
        self.code = ErrorCode(code)
        self.line = line
        self.column = column
        self.position = position
        self.source = format_source(source)
        super().__init__(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(text={self.text!r}, code={self.code.name}, "
            f"line={self.line}, column={self.column}, position={self.position}, "
            f"source={self.source!r})"
        )