"""Environment access for shelldb and for the shells it spawns.

shelldb's own settings (``SHELLDB_LOG_LEVEL``, ``SHELLDB_PROFILES_PATH``) come
from the process environment, falling back to a ``.env`` file in the working
directory. A connection profile may also name a dotenv file of its own
(``env_file``) whose values are handed to the spawned shell, which keeps
secrets such as ``PGPASSWORD`` or ``MYSQL_PWD`` out of the profile JSON.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger("shelldb.env")

DOTENV_FILENAME = ".env"

_SETTINGS: dict[str, str] = {}


def read_env_file(path: Path) -> dict[str, str]:
    """Parse a dotenv file, skipping keys declared without a value."""

    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def reload_env(values: Mapping[str, str] | None = None, *, base_dir: Path | None = None) -> None:
    """Re-read the settings ``.env`` file from ``base_dir`` (the working directory by default).

    Args:
        values: Optional mapping used instead of reading any file. Intended for tests.
        base_dir: Directory holding the ``.env`` file.
    """

    global _SETTINGS

    if values is not None:
        _SETTINGS = dict(values)
        return

    path = (base_dir or Path.cwd()) / DOTENV_FILENAME
    _SETTINGS = read_env_file(path) if path.is_file() else {}


reload_env()


def get_env(key: str, default: str | None = None) -> str | None:
    """Look ``key`` up in the process environment, then in the ``.env`` settings."""

    value = os.environ.get(key)
    if value is not None:
        return value
    return _SETTINGS.get(key, default)


def build_child_env(overrides: Mapping[str, str] | None = None, *, env_file: Path | None = None) -> dict[str, str]:
    """Environment for a spawned shell.

    Later layers win: the current process environment, then the values in
    ``env_file``, then ``overrides`` (the profile's inline ``env``). A missing
    ``env_file`` is logged and skipped.
    """

    env = os.environ.copy()
    if env_file is not None:
        if env_file.is_file():
            env.update(read_env_file(env_file))
        else:
            logger.warning("Profile env file %s does not exist; continuing without it", env_file)
    if overrides:
        env.update(overrides)
    return env
