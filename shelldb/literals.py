"""Scalar literal grammar shared by the decoder and the row encoder."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Union

from shelldb.dialects.base import ShellDialect
from shelldb.errors import DecodeError

Value = Union[int, float, str, None]
Row = tuple[Value, ...]

_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(
    r"[+-]?(?:\d+\.\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?|\d+[eE][+-]?\d+|Infinity)|NaN",
    re.ASCII,
)

_ESCAPES = {"0": "\0", "b": "\b", "n": "\n", "r": "\r", "t": "\t", "Z": "\x1a", "\\": "\\"}
_ESCAPE_CHARS = {value: key for key, value in _ESCAPES.items() if key != "Z"}

_TOKEN_PREVIEW = 40


class LiteralScanner:
    """Scan tab/newline separated literal tokens into rows."""

    def __init__(self, dialect: ShellDialect):
        self.dialect = dialect
        self._stops = set(dialect.field_delimiters) | {"\n"}

    def scan(self, text: str) -> list[Row]:
        rows: list[Row] = []
        fields: list[Value] = []
        index = 0
        length = len(text)

        while index < length:
            value, index = self._read_field(text, index)
            fields.append(value)
            if index == length:
                break
            separator = text[index]
            index += 1
            if separator == "\n":
                rows.append(tuple(fields))
                fields = []
            elif index == length:
                # A delimiter right before the end of output opens one last empty field.
                fields.append(self.classify("", index))

        if fields:
            rows.append(tuple(fields))
        return rows

    def classify(self, token: str, position: int) -> Value:
        """Decode one unquoted token."""

        dialect = self.dialect
        if token == dialect.null_token:
            return None
        if _INTEGER_RE.fullmatch(token):
            return int(token)
        if _FLOAT_RE.fullmatch(token):
            return float(token)
        if dialect.bare_strings:
            if dialect.backslash_escapes:
                return _unescape(token, position)
            return token
        raise DecodeError("Malformed literal", token=token, position=position)

    def _read_field(self, text: str, start: int) -> tuple[Value, int]:
        if self.dialect.quoted_strings and text.startswith("'", start):
            value, end = _read_quoted(text, start)
            if end < len(text) and text[end] not in self._stops:
                raise DecodeError(
                    "Unexpected character after string literal",
                    token=text[start : end + 1],
                    position=end,
                )
            return value, end

        end = start
        length = len(text)
        while end < length and text[end] not in self._stops:
            end += 1
        return self.classify(text[start:end], start), end


def _read_quoted(text: str, start: int) -> tuple[str, int]:
    parts: list[str] = []
    index = start + 1
    length = len(text)
    while True:
        closing = text.find("'", index)
        if closing == -1:
            raise DecodeError(
                "Unterminated string literal",
                token=text[start : start + _TOKEN_PREVIEW],
                position=start,
            )
        parts.append(text[index:closing])
        if closing + 1 < length and text[closing + 1] == "'":
            parts.append("'")
            index = closing + 2
            continue
        return "".join(parts), closing + 1


def _unescape(token: str, position: int) -> str:
    if "\\" not in token:
        return token

    chars: list[str] = []
    index = 0
    while index < len(token):
        char = token[index]
        if char != "\\":
            chars.append(char)
            index += 1
            continue
        escaped = token[index + 1 : index + 2]
        if escaped not in _ESCAPES:
            raise DecodeError("Invalid escape sequence", token=token, position=position + index)
        chars.append(_ESCAPES[escaped])
        index += 2
    return "".join(chars)


def encode_literal(value: Value, dialect: ShellDialect) -> str:
    """Render ``value`` as a token that decodes back to the same value.

    Numbers and null use the dialect's own spelling, so infinities come out as
    ``9.0e+999`` for sqlite. Bare-text dialects cannot print text that would
    read back as a number or the null token; such values raise ValueError.
    """

    if value is None:
        return dialect.null_token
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return dialect.infinity_literal if value > 0 else f"-{dialect.infinity_literal}"
        return repr(value)
    if isinstance(value, str):
        if dialect.quoted_strings:
            return "'" + value.replace("'", "''") + "'"
        if dialect.backslash_escapes:
            token = "".join(f"\\{_ESCAPE_CHARS[char]}" if char in _ESCAPE_CHARS else char for char in value)
        elif any(char in dialect.field_delimiters or char == "\n" for char in value):
            raise ValueError(f"Dialect '{dialect.name}' cannot represent text containing delimiters: {value!r}")
        else:
            token = value
        if token == dialect.null_token or _INTEGER_RE.fullmatch(token) or _FLOAT_RE.fullmatch(token):
            raise ValueError(f"Dialect '{dialect.name}' would read text {value!r} back as a number or null")
        return token
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def encode_row(values: Sequence[Value], dialect: ShellDialect) -> bytes:
    """Encode one record, newline-terminated, in the dialect's output format."""

    delimiter = dialect.field_delimiters[0]
    line = delimiter.join(encode_literal(value, dialect) for value in values)
    return f"{line}\n".encode("utf-8")
