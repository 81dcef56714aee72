from __future__ import annotations

from typing import Any, Protocol

from .models import D1Result, KVListResult, StorageType


class StorageAdapter(Protocol):
    """
    Uniform document storage contract implemented by every backend.

    Reads favor availability: `get` returns None and `list` returns [] on any
    backend error (logged only), so "missing" and "backend down" look the same.
    Writes favor correctness: `put` and `delete` re-raise backend errors.
    """

    async def get(self, key: str, type: str = "json") -> Any | None:
        """
        Return the stored value, or None. Parsed as JSON when type == "json";
        any other type returns the raw stored text.
        """
        ...

    async def put(self, key: str, value: Any) -> bool:
        """Store value (non-strings serialized as JSON). Raises on failure."""
        ...

    async def delete(self, key: str) -> bool:
        """Remove key. Raises on failure."""
        ...

    async def list(self, prefix: str = "") -> list[str]:
        """Key names starting with prefix, or [] on failure."""
        ...

    def get_type(self) -> StorageType:
        ...


class KVNamespace(Protocol):
    """Key-value namespace handle consumed by KVStorageAdapter."""

    async def get(self, key: str, type: str = "text") -> Any | None: ...
    async def put(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> None: ...
    async def list(self, prefix: str = "") -> KVListResult: ...


class D1PreparedStatement(Protocol):
    def bind(self, *params: Any) -> "D1PreparedStatement": ...
    async def first(self) -> dict[str, Any] | None: ...
    async def all(self) -> D1Result: ...
    async def run(self) -> D1Result: ...


class D1Database(Protocol):
    """Relational handle consumed by D1StorageAdapter: prepare -> bind -> execute."""

    def prepare(self, sql: str) -> D1PreparedStatement: ...
