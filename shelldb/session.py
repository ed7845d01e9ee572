"""Connection sessions backed by a long-running database shell process."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from enum import Enum

from shelldb.constants import DEFAULT_CLOSE_GRACE_SECONDS, DEFAULT_READ_CHUNK, DEFAULT_STREAM_LIMIT
from shelldb.decoder import ResultDecoder
from shelldb.dialects.base import ShellDialect
from shelldb.errors import (
    ClosedConnectionError,
    DecodeError,
    ProcessExitedError,
    ShellDBError,
    SpawnError,
    TransmitError,
)
from shelldb.framing import OutputBuffer, make_sentinel_token
from shelldb.results import ErrorResult, ResultOutcome
from shelldb.transmitter import StatementTransmitter

logger = logging.getLogger("shelldb.session")


class SessionState(str, Enum):
    IDLE = "idle"
    SENT = "sent"
    WAITING = "waiting"
    COMPLETE = "complete"
    FATAL = "fatal"
    CLOSED = "closed"


class ShellConnection:
    """One shell child process plus the buffer that collects its output.

    Statements are strictly serialized: the protocol has no way to tell apart
    the output of two interleaved statements, so ``execute`` holds a lock from
    the moment a statement is written until its sentinel has been seen.

    A background reader task appends every chunk the shell writes to the
    buffer and resolves the pending statement once the buffer ends with the
    sentinel. ``close`` fails that pending statement with
    ClosedConnectionError, so a caller waiting on a shell that never answers is
    always released.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        dialect: ShellDialect,
        *,
        database: str | None = None,
        token: str | None = None,
        read_chunk: int = DEFAULT_READ_CHUNK,
        close_grace_seconds: float = DEFAULT_CLOSE_GRACE_SECONDS,
    ):
        self.process = process
        self.dialect = dialect
        self.database = database
        self.token = token or make_sentinel_token()
        self.sentinel = dialect.sentinel(self.token)
        self.type_mapping: dict[str, str] = dict(dialect.type_mapping)
        self.buffer = OutputBuffer(self.sentinel)
        self.state = SessionState.IDLE

        self._read_chunk = read_chunk
        self._close_grace_seconds = close_grace_seconds
        self._transmitter = StatementTransmitter(dialect, self.token)
        self._decoder = ResultDecoder(dialect)
        self._lock = asyncio.Lock()
        self._pending: asyncio.Future[bytes] | None = None
        self._fatal: ShellDBError | None = None
        self._reader = asyncio.get_running_loop().create_task(self._pump_output())

    @classmethod
    async def open(
        cls,
        spawn_args: Sequence[str],
        dialect: ShellDialect,
        *,
        database: str | None = None,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        limit: int = DEFAULT_STREAM_LIMIT,
        **kwargs,
    ) -> ShellConnection:
        """Spawn the shell and wrap it in a connection.

        stderr is merged into stdout so engine errors land in the same buffer
        as rows and sentinels.
        """

        command = list(spawn_args)
        if not command:
            raise SpawnError("No shell command given")

        logger.debug("Starting %s shell: %s", dialect.name, " ".join(command))
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                limit=limit,
            )
        except FileNotFoundError as exc:
            raise SpawnError(f"Executable not found for {dialect.name} shell: {exc}", command=command) from exc
        except OSError as exc:
            raise SpawnError(f"Failed to start {dialect.name} shell: {exc}", command=command) from exc

        return cls(process, dialect, database=database, **kwargs)

    @property
    def closed(self) -> bool:
        return self.state is SessionState.CLOSED

    def is_alive(self) -> bool:
        return self.state not in (SessionState.CLOSED, SessionState.FATAL) and self.process.returncode is None

    async def execute(self, query: str) -> ResultOutcome:
        """Run one statement and return its rows or its error.

        Engine errors and malformed output come back as ErrorResult values.
        Transmit failures, a dying shell and closing the connection raise.
        """

        async with self._lock:
            self._ensure_usable()
            pending: asyncio.Future[bytes] = asyncio.get_running_loop().create_future()
            self._pending = pending
            try:
                self.state = SessionState.SENT
                try:
                    await self._transmitter.send(self.process.stdin, query)
                except TransmitError as exc:
                    self._pending = None
                    if self.state is SessionState.CLOSED:
                        # close() already failed the future; consume it before reporting the close.
                        if pending.done() and not pending.cancelled():
                            pending.exception()
                        raise ClosedConnectionError("Connection closed while a statement was being sent") from exc
                    self._mark_fatal(exc)
                    raise
                output = await pending
            except asyncio.CancelledError:
                # The shell will still answer; its output can no longer be matched to a caller.
                self._mark_fatal(ShellDBError("Statement was cancelled while waiting for the shell"))
                raise
            finally:
                self._pending = None

            self.state = SessionState.COMPLETE
            try:
                outcome = self._decoder.decode(output, self.sentinel)
            except DecodeError as exc:
                logger.warning("Could not decode %s shell output: %s", self.dialect.name, exc)
                outcome = ErrorResult(message=exc.reason, kind="decode", token=exc.token, position=exc.position)

            self.state = SessionState.IDLE
            return outcome

    async def close(self) -> None:
        """Send end-of-input to the shell, reap it and release the buffer."""

        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED

        pending = self._pending
        if pending is not None and not pending.done():
            pending.set_exception(ClosedConnectionError("Connection closed while a statement was in flight"))

        try:
            await self._shutdown_process()
        finally:
            self._reader.cancel()
            await asyncio.gather(self._reader, return_exceptions=True)
            self.buffer.clear()
            logger.debug("Closed %s shell (exit status %s)", self.dialect.name, self.process.returncode)

    async def __aenter__(self) -> ShellConnection:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_usable(self) -> None:
        if self.state is SessionState.CLOSED:
            raise ClosedConnectionError("Connection is closed")
        if self.state is SessionState.FATAL:
            raise ClosedConnectionError(f"Connection is no longer usable: {self._fatal}") from self._fatal

    def _mark_fatal(self, error: ShellDBError) -> None:
        if self.state is SessionState.CLOSED:
            return
        self._fatal = error
        self.state = SessionState.FATAL
        pending = self._pending
        if pending is not None and not pending.done():
            pending.set_exception(error)

    async def _pump_output(self) -> None:
        stdout = self.process.stdout
        if stdout is None:
            self._mark_fatal(ProcessExitedError("Shell has no stdout pipe"))
            return

        try:
            while True:
                chunk = await stdout.read(self._read_chunk)
                if not chunk:
                    break
                if self.state is SessionState.SENT:
                    self.state = SessionState.WAITING
                if self.buffer.append(chunk):
                    pending = self._pending
                    if pending is not None and not pending.done():
                        pending.set_result(self.buffer.drain())
        except OSError as exc:
            self._mark_fatal(ProcessExitedError(f"Failed reading from {self.dialect.name} shell: {exc}"))
            return

        if self.state is SessionState.CLOSED:
            return
        leftover = self.buffer.peek()
        logger.warning(
            "%s shell exited unexpectedly (exit status %s)",
            self.dialect.name,
            self.process.returncode,
        )
        self._mark_fatal(
            ProcessExitedError(
                f"{self.dialect.name} shell exited",
                returncode=self.process.returncode,
                output=leftover,
            )
        )

    async def _shutdown_process(self) -> None:
        process = self.process
        stdin = process.stdin
        if stdin is not None and not stdin.is_closing():
            stdin.close()
            try:
                await stdin.wait_closed()
            except (BrokenPipeError, ConnectionResetError):
                pass

        if process.returncode is not None:
            return

        try:
            await asyncio.wait_for(process.wait(), timeout=self._close_grace_seconds)
            return
        except asyncio.TimeoutError:
            logger.warning("%s shell did not exit after end-of-input; terminating", self.dialect.name)

        try:
            process.terminate()
            await asyncio.wait_for(process.wait(), timeout=self._close_grace_seconds)
        except ProcessLookupError:
            return
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
