"""PostgreSQL via ``psql`` in unaligned, tuples-only mode."""

from __future__ import annotations

import re

from .base import ShellDialect

# psql prefixes errors read from a pipe with "psql:<stdin>:LINE: ".
_ERROR_PATTERN = re.compile(rb"(?:psql:[^\n]*?:\d+: )?(?:ERROR|FATAL|PANIC):\s*([^\r\n]*)")
# Server messages below ERROR, and the DETAIL/HINT/CONTEXT lines that follow them.
_NOTICE_PATTERN = re.compile(
    rb"(?:psql:[^\n]*?:\d+: )?(?:NOTICE|WARNING|INFO|LOG|DEBUG\d?|DETAIL|HINT|CONTEXT|QUERY):[^\n]*\n"
)

POSTGRES = ShellDialect(
    name="postgres",
    executable="psql",
    description="PostgreSQL interactive terminal (psql)",
    completion_marker="\\echo {token}\n",
    error_pattern=_ERROR_PATTERN,
    notice_pattern=_NOTICE_PATTERN,
    null_token="\\N",
    type_mapping={
        "integer": "BIGINT",
        "float": "DOUBLE PRECISION",
        "text": "TEXT",
        "null": "TEXT",
    },
    base_args=(
        "--no-psqlrc",
        "--quiet",
        "--no-align",
        "--tuples-only",
        "--field-separator=\t",
        "--pset=null=\\N",
        "--pset=pager=off",
        "--set=ON_ERROR_STOP=0",
    ),
    database_flag="--dbname",
    env={"PAGER": ""},
)
