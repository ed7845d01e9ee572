"""Statement outcomes returned by connections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

from shelldb.errors import DecodeError, EngineError
from shelldb.literals import Row


@dataclass(frozen=True)
class RowsResult:
    """The statement succeeded; ``rows`` is empty for statements without output."""

    rows: list[Row] = field(default_factory=list)

    ok = True

    def __len__(self) -> int:
        return len(self.rows)

    def raise_for_error(self) -> RowsResult:
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"status": "ok", "rows": [list(row) for row in self.rows]}


@dataclass(frozen=True)
class ErrorResult:
    """The statement failed.

    ``kind`` is ``"engine"`` when the database reported the failure and
    ``"decode"`` when its output could not be decoded, in which case ``token``
    and ``position`` locate the offending literal.
    """

    message: str
    kind: Literal["engine", "decode"] = "engine"
    token: str | None = None
    position: int | None = None

    ok = False

    def raise_for_error(self) -> RowsResult:
        if self.kind == "decode":
            raise DecodeError(self.message, token=self.token or "", position=self.position or 0)
        raise EngineError(self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"status": "error", "kind": self.kind, "message": self.message}
        if self.kind == "decode":
            payload["token"] = self.token
            payload["position"] = self.position
        return payload


ResultOutcome = Union[RowsResult, ErrorResult]
