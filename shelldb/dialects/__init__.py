"""Dialect registry for shelldb."""

from __future__ import annotations

from .base import ShellDialect
from .mysql import MYSQL
from .postgres import POSTGRES
from .sqlite import SQLITE

_DIALECTS: dict[str, ShellDialect] = {
    POSTGRES.name: POSTGRES,
    MYSQL.name: MYSQL,
    SQLITE.name: SQLITE,
}

_ALIASES = {
    "postgresql": "postgres",
    "psql": "postgres",
    "mariadb": "mysql",
    "sqlite3": "sqlite",
}


def get_dialect(name: str) -> ShellDialect:
    normalized = (name or "").lower()
    normalized = _ALIASES.get(normalized, normalized)
    if normalized not in _DIALECTS:
        available = ", ".join(sorted(_DIALECTS))
        raise KeyError(f"No dialect registered for '{name}'. Available dialects: {available}")
    return _DIALECTS[normalized]


def list_dialects() -> list[str]:
    return sorted(_DIALECTS)


__all__ = [
    "MYSQL",
    "POSTGRES",
    "SQLITE",
    "ShellDialect",
    "get_dialect",
    "list_dialects",
]
