import json

import pytest

from shelldb.constants import DEFAULT_TIMEOUT_SECONDS, PROFILES_ENV_VAR
from shelldb.dialects import SQLITE
from shelldb.errors import ProfileLoadError
from shelldb.registry import ProfileRegistry


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_registry_resolves_profile(tmp_path):
    _write(
        tmp_path / "local.json",
        {
            "name": "Local",
            "dialect": "postgresql",
            "command": "psql -h localhost",
            "database": "app",
            "additional_args": "-Ureport",
            "env": {"PGPORT": 5433},
            "working_dir": "work",
            "env_file": "secrets/local.env",
        },
    )

    registry = ProfileRegistry(search_paths=[tmp_path])
    profile = registry.get_profile("local")

    assert registry.list_profiles() == ["Local"]
    assert profile.dialect == "postgres"
    assert profile.executable == ["psql", "-h", "localhost"]
    assert profile.additional_args == ["-Ureport"]
    assert profile.env == {"PAGER": "", "PGPORT": "5433"}
    assert profile.working_dir == (tmp_path / "work").resolve()
    assert profile.env_file == (tmp_path / "secrets" / "local.env").resolve()
    assert profile.timeout_seconds == DEFAULT_TIMEOUT_SECONDS


def test_registry_defaults_command_to_dialect_executable(tmp_path):
    _write(tmp_path / "memory.json", [{"name": "mem", "dialect": "sqlite", "database": ":memory:"}])

    registry = ProfileRegistry(search_paths=[tmp_path])

    assert registry.get_profile("mem").executable == ["sqlite3"]
    assert registry.get_dialect("mem") is SQLITE


def test_later_files_override_earlier(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.mkdir()
    second.mkdir()
    _write(first / "db.json", {"name": "db", "dialect": "mysql", "timeout_seconds": 10})
    _write(second / "db.json", {"name": "DB", "dialect": "mysql", "timeout_seconds": 20})

    registry = ProfileRegistry(search_paths=[first, second])

    assert registry.get_profile("db").timeout_seconds == 20


def test_env_var_adds_profile_file(tmp_path, monkeypatch):
    profile_file = _write(tmp_path / "extra.json", {"name": "extra-profile", "dialect": "mysql"})
    monkeypatch.setenv(PROFILES_ENV_VAR, str(profile_file))

    registry = ProfileRegistry()

    assert "extra-profile" in registry.list_profiles()
    assert "postgres" in registry.list_profiles()


def test_empty_files_are_skipped(tmp_path):
    (tmp_path / "empty.json").write_text("", encoding="utf-8")

    assert ProfileRegistry(search_paths=[tmp_path]).list_profiles() == []


def test_invalid_json_raises(tmp_path):
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ProfileLoadError):
        ProfileRegistry(search_paths=[tmp_path])


def test_unknown_dialect_raises(tmp_path):
    _write(tmp_path / "oracle.json", {"name": "ora", "dialect": "oracle"})

    with pytest.raises(ProfileLoadError, match="unsupported dialect"):
        ProfileRegistry(search_paths=[tmp_path])


def test_invalid_timeout_raises(tmp_path):
    _write(tmp_path / "bad.json", {"name": "bad", "dialect": "mysql", "timeout_seconds": 0})

    with pytest.raises(ProfileLoadError):
        ProfileRegistry(search_paths=[tmp_path])


def test_missing_profile_lists_available(tmp_path):
    _write(tmp_path / "db.json", {"name": "db", "dialect": "mysql"})
    registry = ProfileRegistry(search_paths=[tmp_path])

    with pytest.raises(KeyError, match="Available profiles: db"):
        registry.get_profile("other")
