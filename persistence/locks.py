from __future__ import annotations

import contextlib
import threading
from pathlib import Path
from typing import Iterator


class PathLockRegistry:
    """
    One stable lock per resolved file path. Writers to the same key file
    serialize; different keys proceed in parallel.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Path, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        resolved = path.resolve()
        with self._guard:
            return self._locks.setdefault(resolved, threading.Lock())

    @contextlib.contextmanager
    def locked(self, path: Path) -> Iterator[Path]:
        with self.lock_for(path):
            yield path


GLOBAL_PATH_LOCKS = PathLockRegistry()
