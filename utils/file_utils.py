"""File helpers shared by shelldb configuration loaders."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json_file(file_path: str) -> Any:
    """Read a JSON file, returning None for empty files.

    Raises json.JSONDecodeError for malformed content so callers can report
    which file was at fault.
    """

    text = Path(file_path).read_text(encoding="utf-8")
    if not text.strip():
        return None
    return json.loads(text)
