"""SQLite via the ``sqlite3`` shell in quote mode.

Quote mode prints every value as an SQL literal, so text is always
single-quoted and anything that is neither a literal nor ``NULL`` is malformed.
"""

from __future__ import annotations

import re

from .base import ShellDialect

_ERROR_PATTERN = re.compile(rb"(?:Parse error|Runtime error|Error)(?: near line \d+)?:\s*([^\r\n]*)")

SQLITE = ShellDialect(
    name="sqlite",
    executable="sqlite3",
    description="SQLite command-line shell in quote mode",
    completion_marker=".print {token}\n",
    error_pattern=_ERROR_PATTERN,
    null_token="NULL",
    type_mapping={
        "integer": "INTEGER",
        "float": "REAL",
        "text": "TEXT",
        "null": "BLOB",
    },
    # -separator must follow -quote, which resets it to a comma.
    base_args=("-batch", "-noheader", "-quote", "-separator", "\t"),
    quoted_strings=True,
    bare_strings=False,
    infinity_literal="9.0e+999",
)
