import pytest

from shelldb.dialects import MYSQL, POSTGRES, SQLITE, get_dialect, list_dialects


def test_registry_resolves_names_and_aliases():
    assert get_dialect("postgres") is POSTGRES
    assert get_dialect("PostgreSQL") is POSTGRES
    assert get_dialect("mariadb") is MYSQL
    assert get_dialect("sqlite3") is SQLITE
    assert list_dialects() == ["mysql", "postgres", "sqlite"]


def test_unknown_dialect_lists_available():
    with pytest.raises(KeyError) as excinfo:
        get_dialect("oracle")

    assert "postgres" in excinfo.value.args[0]


def test_completion_marker_prints_sentinel():
    token = "__SHELLDB_TEST__"

    assert POSTGRES.encode_completion_marker(token) == b"\\echo __SHELLDB_TEST__\n"
    assert MYSQL.encode_completion_marker(token) == b"SELECT '__SHELLDB_TEST__';\n"
    assert SQLITE.encode_completion_marker(token) == b".print __SHELLDB_TEST__\n"
    for dialect in (POSTGRES, MYSQL, SQLITE):
        assert dialect.sentinel(token) == b"__SHELLDB_TEST__\n"


@pytest.mark.parametrize(
    "dialect, output, message",
    [
        (POSTGRES, b"ERROR:  division by zero\n", "division by zero"),
        (POSTGRES, b'psql:<stdin>:3: ERROR:  syntax error at or near "SELEC"\n', 'syntax error at or near "SELEC"'),
        (
            MYSQL,
            b"ERROR 1146 (42S02) at line 1: Table 'test.missing' doesn't exist\n",
            "Table 'test.missing' doesn't exist",
        ),
        (SQLITE, b"Parse error near line 1: no such table: missing\n", "no such table: missing"),
        (SQLITE, b"Error: near line 2: no such column: x\n", "near line 2: no such column: x"),
    ],
)
def test_match_error(dialect, output, message):
    assert dialect.match_error(output) == message


def test_match_error_ignores_rows():
    assert POSTGRES.match_error(b"1\tERROR\n") is None
    assert MYSQL.match_error(b"ERRORS\n") is None
    assert SQLITE.match_error(b"'Error: in a string'\n") is None


def test_build_command_uses_dialect_flags():
    command = POSTGRES.build_command(["psql", "-h", "db"], database="analytics", extra_args=["-U", "report"])

    assert command[:3] == ["psql", "-h", "db"]
    assert "--tuples-only" in command
    assert command[-4:] == ["-U", "report", "--dbname", "analytics"]


def test_build_command_positional_database():
    command = SQLITE.build_command(database="/tmp/app.db")

    assert command[0] == "sqlite3"
    assert command[-1] == "/tmp/app.db"
    assert command.index("-separator") > command.index("-quote")


def test_column_type_mapping():
    assert POSTGRES.column_type("integer") == "BIGINT"
    assert SQLITE.column_type("float") == "REAL"
    with pytest.raises(KeyError):
        MYSQL.column_type("decimal")
