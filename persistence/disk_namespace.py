from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from json_store import atomic_write_text, deserialize_value, read_text

from .interfaces import KVNamespace
from .locks import GLOBAL_PATH_LOCKS
from .models import KVListKey, KVListResult

_SUFFIX = ".val"


class DiskKVNamespace(KVNamespace):
    """
    Key-value namespace stored as one file per key under a directory:

    - data/kv/<percent-encoded key>.val

    Writes are atomic per key (temp file + replace). File I/O runs in
    asyncio.to_thread so the event loop never blocks on disk.
    """

    def __init__(self, root: Path):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Key must be a non-empty string")
        return self._root / (quote(key, safe="") + _SUFFIX)

    def _read(self, key: str) -> str | None:
        with GLOBAL_PATH_LOCKS.locked(self._path_for(key)) as path:
            return read_text(path)

    def _write(self, key: str, value: str) -> None:
        with GLOBAL_PATH_LOCKS.locked(self._path_for(key)) as path:
            atomic_write_text(path, value)

    def _remove(self, key: str) -> None:
        with GLOBAL_PATH_LOCKS.locked(self._path_for(key)) as path:
            path.unlink(missing_ok=True)

    def _names(self, prefix: str) -> list[str]:
        if not self._root.exists():
            return []
        names = (unquote(p.name[: -len(_SUFFIX)]) for p in self._root.glob(f"*{_SUFFIX}"))
        return sorted(n for n in names if n.startswith(prefix))

    async def get(self, key: str, type: str = "text") -> Any | None:
        raw = await asyncio.to_thread(self._read, key)
        if raw is None:
            return None
        return deserialize_value(raw, type)

    async def put(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"KV values must be strings, got {value.__class__.__name__}")
        await asyncio.to_thread(self._write, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    async def list(self, prefix: str = "") -> KVListResult:
        names = await asyncio.to_thread(self._names, prefix)
        return KVListResult(keys=[KVListKey(name=n) for n in names])
