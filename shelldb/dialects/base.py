"""Per-engine capability record used by connections, transmitters and decoders."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ShellDialect:
    """Everything that differs between one database shell and another.

    ``completion_marker`` is a template with a ``{token}`` placeholder. Sending it
    after a statement makes the shell print ``token`` followed by a newline,
    which is the sentinel the connection waits for.

    ``error_pattern`` is matched at the very start of a statement's output; its
    first group is the error message.

    ``notice_pattern``, when set, matches one informational line (a NOTICE or
    WARNING banner) that the shell may print ahead of a statement's result.
    """

    name: str
    executable: str
    completion_marker: str
    error_pattern: re.Pattern[bytes]
    null_token: str
    type_mapping: Mapping[str, str]
    base_args: tuple[str, ...] = ()
    database_flag: str | None = None
    field_delimiters: str = "\t"
    terminator: str = ";"
    quoted_strings: bool = False
    bare_strings: bool = True
    backslash_escapes: bool = False
    notice_pattern: re.Pattern[bytes] | None = None
    infinity_literal: str = "Infinity"
    description: str = ""
    env: Mapping[str, str] = field(default_factory=dict)

    def encode_completion_marker(self, token: str) -> bytes:
        return self.completion_marker.format(token=token).encode("utf-8")

    def sentinel(self, token: str) -> bytes:
        return f"{token}\n".encode("utf-8")

    def strip_notices(self, output: bytes) -> bytes:
        """Drop informational lines printed before the statement's own output."""

        if self.notice_pattern is None:
            return output
        match = self.notice_pattern.match(output)
        while match is not None:
            output = output[match.end() :]
            match = self.notice_pattern.match(output)
        return output

    def match_error(self, output: bytes) -> str | None:
        """Return the engine's error message if ``output`` starts with an error marker."""

        match = self.error_pattern.match(output)
        if match is None:
            return None
        return match.group(1).decode("utf-8", errors="replace").strip()

    def column_type(self, kind: str) -> str:
        try:
            return self.type_mapping[kind]
        except KeyError:
            available = ", ".join(sorted(self.type_mapping))
            raise KeyError(f"Dialect '{self.name}' has no column type for '{kind}'. Known kinds: {available}") from None

    def build_command(
        self,
        executable: Sequence[str] | None = None,
        database: str | None = None,
        extra_args: Sequence[str] = (),
    ) -> list[str]:
        """Assemble the argv that starts the shell in scriptable mode."""

        command = list(executable) if executable else [self.executable]
        command.extend(self.base_args)
        command.extend(extra_args)
        if database:
            if self.database_flag:
                command.extend([self.database_flag, database])
            else:
                command.append(database)
        return command
