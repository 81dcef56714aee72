from __future__ import annotations

import asyncio
from pathlib import Path
import sys
from typing import Any, Callable


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


from persistence import (  # noqa: E402
    D1StorageAdapter,
    DiskKVNamespace,
    KVStorageAdapter,
    SqliteD1Database,
    StorageAdapter,
)
from persistence.models import KVListResult  # noqa: E402


class FlakyKVNamespace:
    """
    Wraps a namespace and raises for chosen (operation, key) pairs.

    fail_on={"put": {"misub_profiles_v1"}} makes only that put fail;
    a value of None fails every call to that operation.
    """

    def __init__(self, inner: Any, fail_on: dict[str, set[str] | None]):
        self._inner = inner
        self._fail_on = fail_on
        self.calls: list[tuple[str, str]] = []

    def _maybe_fail(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        if op not in self._fail_on:
            return
        keys = self._fail_on[op]
        if keys is None or key in keys:
            raise RuntimeError(f"{op} unavailable for {key}")

    async def get(self, key: str, type: str = "text") -> Any:
        self._maybe_fail("get", key)
        return await self._inner.get(key, type)

    async def put(self, key: str, value: str) -> None:
        self._maybe_fail("put", key)
        await self._inner.put(key, value)

    async def delete(self, key: str) -> None:
        self._maybe_fail("delete", key)
        await self._inner.delete(key)

    async def list(self, prefix: str = "") -> KVListResult:
        self._maybe_fail("list", prefix)
        return await self._inner.list(prefix=prefix)


@pytest.fixture
def kv_namespace(tmp_path: Path) -> DiskKVNamespace:
    return DiskKVNamespace(tmp_path / "kv")


@pytest.fixture
def d1_database(tmp_path: Path):
    db = SqliteD1Database(tmp_path / "misub.db")
    yield db
    db.close()


@pytest.fixture
def initialized_d1_database(d1_database: SqliteD1Database) -> SqliteD1Database:
    asyncio.run(D1StorageAdapter(d1_database).init_tables())
    return d1_database


@pytest.fixture(params=["kv", "d1"])
def make_adapter(request, kv_namespace, initialized_d1_database) -> Callable[[], StorageAdapter]:
    """Builds an adapter per backend; both share the same contract tests."""

    def _make() -> StorageAdapter:
        if request.param == "kv":
            return KVStorageAdapter(kv_namespace)
        return D1StorageAdapter(initialized_d1_database)

    return _make


@pytest.fixture
def sandbox_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point both bindings at a temp directory so tests never touch real ./data.
    """
    monkeypatch.setenv("MISUB_KV_DIR", str(tmp_path / "kv"))
    monkeypatch.setenv("MISUB_DB_PATH", str(tmp_path / "misub.db"))
    monkeypatch.setenv("STORAGE_TYPE", "kv")
    monkeypatch.delenv("ENABLE_MIGRATION_ENDPOINT", raising=False)
    return tmp_path


@pytest.fixture
def make_flaky() -> Callable[..., FlakyKVNamespace]:
    def _make(inner: Any, **fail_on: set[str] | None) -> FlakyKVNamespace:
        return FlakyKVNamespace(inner, fail_on)

    return _make
