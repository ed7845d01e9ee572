"""Write statements and completion markers to a shell's stdin."""

from __future__ import annotations

import asyncio
import logging

from shelldb.dialects.base import ShellDialect
from shelldb.errors import TransmitError

logger = logging.getLogger("shelldb.transmitter")


class StatementTransmitter:
    """Encode a query followed by the dialect's completion marker."""

    def __init__(self, dialect: ShellDialect, token: str):
        self.dialect = dialect
        self.token = token
        self._marker = dialect.encode_completion_marker(token)

    def encode(self, query_text: str) -> bytes:
        statement = query_text.rstrip()
        terminator = self.dialect.terminator
        # An unterminated statement would swallow the marker into the query buffer.
        if statement and terminator and not statement.endswith(terminator):
            statement += terminator
        if statement:
            statement += "\n"
        return statement.encode("utf-8") + self._marker

    async def send(self, stdin: asyncio.StreamWriter | None, query_text: str) -> None:
        if stdin is None or stdin.is_closing():
            raise TransmitError("Shell stdin is closed")

        payload = self.encode(query_text)
        logger.debug("Sending %d bytes to %s shell", len(payload), self.dialect.name)
        try:
            stdin.write(payload)
            await stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as exc:
            raise TransmitError(f"Failed to write statement to {self.dialect.name} shell: {exc}") from exc
