"""Decode a completed statement buffer into a result outcome."""

from __future__ import annotations

import logging

from shelldb.dialects.base import ShellDialect
from shelldb.errors import DecodeError
from shelldb.framing import is_complete
from shelldb.literals import LiteralScanner
from shelldb.results import ErrorResult, ResultOutcome, RowsResult

logger = logging.getLogger("shelldb.decoder")


class ResultDecoder:
    """Turn the raw bytes of one statement into rows or an engine error."""

    def __init__(self, dialect: ShellDialect):
        self.dialect = dialect
        self._scanner = LiteralScanner(dialect)

    def decode(self, buffer: bytes, sentinel: bytes) -> ResultOutcome:
        """Decode ``buffer``; raises DecodeError when a token is malformed.

        Informational lines the shell prints ahead of the result (psql NOTICEs)
        are dropped first. The error marker is then checked before any row
        decoding, so output that starts with it is an ErrorResult even if the
        rest would parse as rows.
        """

        payload = self.dialect.strip_notices(strip_sentinel(buffer, sentinel))

        message = self.dialect.match_error(payload)
        if message is not None:
            logger.debug("%s shell reported an error: %s", self.dialect.name, message)
            return ErrorResult(message=message)

        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                "Output is not valid UTF-8",
                token=repr(payload[exc.start : exc.end]),
                position=exc.start,
            ) from exc

        rows = self._scanner.scan(text)
        return RowsResult(rows=rows)


def strip_sentinel(buffer: bytes, sentinel: bytes) -> bytes:
    if is_complete(buffer, sentinel):
        return bytes(buffer[: len(buffer) - len(sentinel)])
    return bytes(buffer)
