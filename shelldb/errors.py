"""Exception taxonomy for shell-backed database connections."""

from __future__ import annotations


class ShellDBError(RuntimeError):
    """Base class for every error raised by shelldb."""


class SpawnError(ShellDBError):
    """Raised when the shell executable cannot be found or fails to start."""

    def __init__(self, message: str, *, command: list[str] | None = None) -> None:
        super().__init__(message)
        self.command = list(command or [])


class TransmitError(ShellDBError):
    """Raised when a statement cannot be written to the shell's stdin."""


class EngineError(ShellDBError):
    """The engine executed the statement and reported a failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodeError(ShellDBError):
    """Raised when shell output does not match the literal grammar."""

    def __init__(self, message: str, *, token: str, position: int) -> None:
        super().__init__(f"{message}: {token!r} at offset {position}")
        self.reason = message
        self.token = token
        self.position = position


class ClosedConnectionError(ShellDBError):
    """Raised when a connection is used after close(), or closed mid-statement."""


class ProcessExitedError(ShellDBError):
    """Raised when the shell process exits while a statement is pending."""

    def __init__(self, message: str, *, returncode: int | None = None, output: bytes = b"") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class QueryTimeoutError(ShellDBError):
    """Raised by the client layer when no sentinel arrives within the timeout."""


class ProfileLoadError(ShellDBError):
    """Raised when profile files are invalid or missing critical data."""
