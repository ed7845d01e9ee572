"""Internal defaults and constants for shelldb."""

from __future__ import annotations

from pathlib import Path

DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_READ_CHUNK = 64 * 1024
DEFAULT_STREAM_LIMIT = 10 * 1024 * 1024  # 10MB per stream
DEFAULT_CLOSE_GRACE_SECONDS = 5.0

SENTINEL_PREFIX = "__SHELLDB_"
SENTINEL_SUFFIX = "__"

PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_DIR = PROJECT_ROOT / "conf" / "shell_clients"
USER_CONFIG_DIR = Path.home() / ".shelldb" / "profiles"

PROFILES_ENV_VAR = "SHELLDB_PROFILES_PATH"
LOG_LEVEL_ENV_VAR = "SHELLDB_LOG_LEVEL"
