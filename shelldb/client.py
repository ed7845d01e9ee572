"""Open connections from profiles and run statements with a timeout."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass

from shelldb.dialects import ShellDialect, get_dialect
from shelldb.errors import ClosedConnectionError, QueryTimeoutError
from shelldb.models import ResolvedConnectionProfile
from shelldb.results import ResultOutcome
from shelldb.session import ShellConnection
from utils.env import build_child_env

logger = logging.getLogger("shelldb.client")


@dataclass
class StatementOutput:
    """Outcome of one statement together with how long it took."""

    query: str
    outcome: ResultOutcome
    duration_seconds: float


class ShellClient:
    """Run statements against the shell described by a connection profile.

    The connection itself has no notion of time. The client bounds every
    statement by the profile's ``timeout_seconds`` and closes the connection
    when a statement overruns, since the shell's eventual output could no
    longer be told apart from the next statement's.
    """

    def __init__(self, profile: ResolvedConnectionProfile):
        self.profile = profile
        self.dialect: ShellDialect = get_dialect(profile.dialect)
        self._connection: ShellConnection | None = None
        self._logger = logging.getLogger(f"shelldb.client.{profile.name}")

    def build_command(self) -> list[str]:
        return self.dialect.build_command(
            self.profile.executable,
            database=self.profile.database,
            extra_args=self.profile.additional_args,
        )

    @property
    def connection(self) -> ShellConnection | None:
        return self._connection

    async def connect(self) -> ShellConnection:
        if self._connection is not None and self._connection.is_alive():
            return self._connection

        command = self.build_command()
        cwd = str(self.profile.working_dir) if self.profile.working_dir else None
        self._logger.debug("Connecting with command: %s", " ".join(command))
        self._connection = await ShellConnection.open(
            command,
            self.dialect,
            database=self.profile.database,
            env=build_child_env(self.profile.env, env_file=self.profile.env_file),
            cwd=cwd,
        )
        return self._connection

    async def execute(self, query: str, *, timeout: float | None = None) -> StatementOutput:
        connection = self._connection
        if connection is None:
            raise ClosedConnectionError(f"Client for profile '{self.profile.name}' is not connected")

        limit = timeout if timeout is not None else self.profile.timeout_seconds
        start_time = time.monotonic()
        try:
            outcome = await asyncio.wait_for(connection.execute(query), timeout=limit)
        except asyncio.TimeoutError as exc:
            self._logger.warning("Statement timed out after %s seconds; closing connection", limit)
            await connection.close()
            raise QueryTimeoutError(
                f"No result from profile '{self.profile.name}' within {limit} seconds"
            ) from exc

        duration = time.monotonic() - start_time
        self._logger.debug("Statement finished in %.3fs (ok=%s)", duration, outcome.ok)
        return StatementOutput(query=query, outcome=outcome, duration_seconds=duration)

    async def execute_many(self, queries: Iterable[str], *, timeout: float | None = None) -> list[StatementOutput]:
        return [await self.execute(query, timeout=timeout) for query in queries]

    async def close(self) -> None:
        connection, self._connection = self._connection, None
        if connection is not None:
            await connection.close()

    async def __aenter__(self) -> ShellClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
