from __future__ import annotations

import asyncio
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any

from .interfaces import D1Database, D1PreparedStatement
from .models import D1Meta, D1Result


class SqlitePreparedStatement(D1PreparedStatement):
    """
    Immutable prepared statement. `bind` returns a new statement carrying the
    positional parameters; `first` / `all` / `run` execute it.
    """

    def __init__(self, db: "SqliteD1Database", sql: str, params: tuple[Any, ...] = ()):
        self._db = db
        self._sql = sql
        self._params = params

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def params(self) -> tuple[Any, ...]:
        return self._params

    def bind(self, *params: Any) -> "SqlitePreparedStatement":
        return SqlitePreparedStatement(self._db, self._sql, tuple(params))

    async def first(self) -> dict[str, Any] | None:
        rows, _ = await self._db._execute(self._sql, self._params, limit=1)
        return rows[0] if rows else None

    async def all(self) -> D1Result:
        rows, meta = await self._db._execute(self._sql, self._params)
        return D1Result(results=rows, meta=meta)

    async def run(self) -> D1Result:
        _, meta = await self._db._execute(self._sql, self._params, fetch=False)
        return D1Result(meta=meta)


class SqliteD1Database(D1Database):
    """
    Relational database handle over sqlite3.

    One connection per handle, shared across worker threads and serialized by
    a lock; blocking work runs in asyncio.to_thread.
    """

    def __init__(self, path: str | Path):
        self._path = str(path)
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    def prepare(self, sql: str) -> SqlitePreparedStatement:
        return SqlitePreparedStatement(self, sql)

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            if self._path != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            self._conn = conn
        return self._conn

    def _execute_sync(
        self, sql: str, params: tuple[Any, ...], fetch: bool, limit: int | None
    ) -> tuple[list[dict[str, Any]], D1Meta]:
        started = time.perf_counter()
        with self._lock:
            conn = self._connection()
            try:
                cur = conn.execute(sql, params)
                if not fetch:
                    rows = []
                elif limit is None:
                    rows = cur.fetchall()
                else:
                    rows = cur.fetchmany(limit)
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            meta = D1Meta(
                changes=max(cur.rowcount, 0),
                last_row_id=cur.lastrowid,
                duration=(time.perf_counter() - started) * 1000.0,
            )
        return [dict(r) for r in rows], meta

    async def _execute(
        self,
        sql: str,
        params: tuple[Any, ...],
        *,
        fetch: bool = True,
        limit: int | None = None,
    ) -> tuple[list[dict[str, Any]], D1Meta]:
        return await asyncio.to_thread(self._execute_sync, sql, params, fetch, limit)
