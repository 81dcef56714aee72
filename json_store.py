from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def serialize_value(value: Any) -> str:
    """
    Turn a document value into the text that is actually stored.

    Strings are stored verbatim; everything else is encoded as compact JSON
    (same shape as JSON.stringify output, so documents written by other
    clients of the same store compare equal).
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def deserialize_value(raw: str, type: str = "json") -> Any:
    """Parse stored text when type is "json"; any other type gets the raw text."""
    if type == "json":
        return json.loads(raw)
    return raw


def read_text(path: Path) -> str | None:
    """Return file contents, or None when the file does not exist."""
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def atomic_write_text(path: Path, payload: str) -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(payload)
    tmp_path.replace(path)
