"""Configuration registry for shelldb connection profiles."""

from __future__ import annotations

import json
import logging
import shlex
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from shelldb.constants import (
    CONFIG_DIR,
    DEFAULT_TIMEOUT_SECONDS,
    PROFILES_ENV_VAR,
    USER_CONFIG_DIR,
)
from shelldb.dialects import ShellDialect, get_dialect
from shelldb.errors import ProfileLoadError
from shelldb.models import ConnectionProfileConfig, ResolvedConnectionProfile
from utils.env import get_env
from utils.file_utils import read_json_file

logger = logging.getLogger("shelldb.registry")


class ProfileRegistry:
    """Loads connection profiles from built-in, environment and user locations.

    Later locations override earlier ones when profile names collide.
    """

    def __init__(self, search_paths: Iterable[Path] | None = None) -> None:
        self._search_paths = list(search_paths) if search_paths is not None else None
        self._profiles: dict[str, ResolvedConnectionProfile] = {}
        self._load()

    def _load(self) -> None:
        self._profiles.clear()
        for config_path in self._iter_config_files():
            try:
                data = read_json_file(str(config_path))
            except json.JSONDecodeError as exc:
                raise ProfileLoadError(f"Invalid JSON in {config_path}: {exc}") from exc

            if not data:
                logger.debug("Skipping empty profile file: %s", config_path)
                continue

            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                try:
                    config = ConnectionProfileConfig.model_validate(entry)
                except ValidationError as exc:
                    raise ProfileLoadError(f"Invalid connection profile in {config_path}: {exc}") from exc
                resolved = self._resolve_config(config, source_path=config_path)
                key = resolved.name.lower()
                if key in self._profiles:
                    logger.info("Overriding connection profile '%s' from %s", resolved.name, config_path)
                else:
                    logger.debug("Loaded connection profile '%s' from %s", resolved.name, config_path)
                self._profiles[key] = resolved

    def reload(self) -> None:
        """Reload profiles from disk."""
        self._load()

    def list_profiles(self) -> list[str]:
        return sorted(profile.name for profile in self._profiles.values())

    def get_profile(self, name: str) -> ResolvedConnectionProfile:
        key = name.lower()
        if key not in self._profiles:
            available = ", ".join(self.list_profiles()) or "none"
            raise KeyError(f"Connection profile '{name}' is not configured. Available profiles: {available}")
        return self._profiles[key]

    def get_dialect(self, name: str) -> ShellDialect:
        return get_dialect(self.get_profile(name).dialect)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _iter_config_files(self) -> Iterable[Path]:
        if self._search_paths is not None:
            search_paths = list(self._search_paths)
        else:
            search_paths = [CONFIG_DIR]
            env_path_raw = get_env(PROFILES_ENV_VAR)
            if env_path_raw:
                search_paths.append(Path(env_path_raw).expanduser())
            search_paths.append(USER_CONFIG_DIR)

        seen: set[Path] = set()

        for base in search_paths:
            if base in seen:
                continue
            seen.add(base)

            if base.is_file() and base.suffix.lower() == ".json":
                yield base
                continue

            if base.is_dir():
                for path in sorted(base.glob("*.json")):
                    if path.is_file():
                        yield path
            else:
                logger.debug("Profile path does not exist: %s", base)

    def _resolve_config(self, raw: ConnectionProfileConfig, *, source_path: Path) -> ResolvedConnectionProfile:
        name = raw.name.strip()
        if not name:
            raise ProfileLoadError(f"Connection profile at {source_path} is missing a 'name' field")

        try:
            dialect = get_dialect(raw.dialect)
        except KeyError as exc:
            raise ProfileLoadError(f"Profile '{name}' uses an unsupported dialect: {exc.args[0]}") from exc

        executable = shlex.split(raw.command) if raw.command else [dialect.executable]
        if not executable:
            raise ProfileLoadError(f"Profile '{name}' has an empty 'command'")

        env = dict(dialect.env)
        env.update(raw.env)

        return ResolvedConnectionProfile(
            name=name,
            dialect=dialect.name,
            executable=executable,
            database=raw.database,
            working_dir=self._resolve_optional_path(raw.working_dir, source_path.parent),
            env_file=self._resolve_optional_path(raw.env_file, source_path.parent),
            additional_args=list(raw.additional_args),
            env=env,
            timeout_seconds=int(raw.timeout_seconds or DEFAULT_TIMEOUT_SECONDS),
            description=raw.description or dialect.description or None,
        )

    def _resolve_optional_path(self, candidate: str | None, base_dir: Path) -> Path | None:
        if not candidate:
            return None
        path = Path(candidate).expanduser()
        if path.is_absolute():
            return path
        return (base_dir / path).resolve()


_REGISTRY: ProfileRegistry | None = None


def get_registry() -> ProfileRegistry:
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = ProfileRegistry()
    return _REGISTRY
