"""Query databases through their own interactive shell clients."""

from __future__ import annotations

from .client import ShellClient, StatementOutput
from .dialects import ShellDialect, get_dialect
from .errors import (
    ClosedConnectionError,
    DecodeError,
    EngineError,
    ProcessExitedError,
    QueryTimeoutError,
    ShellDBError,
    SpawnError,
    TransmitError,
)
from .registry import ProfileRegistry, get_registry
from .results import ErrorResult, ResultOutcome, RowsResult
from .session import SessionState, ShellConnection

__all__ = [
    "ClosedConnectionError",
    "DecodeError",
    "EngineError",
    "ErrorResult",
    "ProcessExitedError",
    "ProfileRegistry",
    "QueryTimeoutError",
    "ResultOutcome",
    "RowsResult",
    "SessionState",
    "ShellClient",
    "ShellConnection",
    "ShellDBError",
    "ShellDialect",
    "SpawnError",
    "StatementOutput",
    "TransmitError",
    "get_dialect",
    "get_registry",
]
