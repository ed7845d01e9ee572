"""MySQL / MariaDB via the ``mysql`` client in batch mode."""

from __future__ import annotations

import re

from .base import ShellDialect

_ERROR_PATTERN = re.compile(rb"ERROR(?: \d+)?(?: \([0-9A-Z]{5}\))?(?: at line \d+)?:\s*([^\r\n]*)")

MYSQL = ShellDialect(
    name="mysql",
    executable="mysql",
    description="MySQL command-line client in batch mode",
    # Batch mode has no echo command, so the banner is a one-column SELECT.
    completion_marker="SELECT '{token}';\n",
    error_pattern=_ERROR_PATTERN,
    null_token="NULL",
    type_mapping={
        "integer": "BIGINT",
        "float": "DOUBLE",
        "text": "LONGTEXT",
        "null": "LONGTEXT",
    },
    base_args=(
        "--batch",
        "--skip-column-names",
        "--unbuffered",
        "--force",
        "--no-auto-rehash",
    ),
    database_flag="--database",
    backslash_escapes=True,
)
