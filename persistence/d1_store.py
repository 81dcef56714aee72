from __future__ import annotations

import logging
from typing import Any

from json_store import deserialize_value, serialize_value

from .interfaces import D1Database, StorageAdapter
from .models import StorageType

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS subscriptions (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_subscriptions_updated_at ON subscriptions(updated_at)",
    "CREATE INDEX IF NOT EXISTS idx_profiles_updated_at ON profiles(updated_at)",
    "CREATE INDEX IF NOT EXISTS idx_settings_updated_at ON settings(updated_at)",
)


class D1StorageAdapter(StorageAdapter):
    """
    Key-value semantics emulated on the relational `settings` table:

      settings(key PRIMARY KEY, value, created_at, updated_at)

    `list` matches with `LIKE prefix || '%'` and does not escape the prefix,
    so `%` and `_` inside a prefix act as wildcards (broader than a literal
    prefix match).

    The `subscriptions` and `profiles` tables are created by `init_tables`
    but not read or written here.
    """

    def __init__(self, d1_database: D1Database):
        self._db = d1_database

    async def get(self, key: str, type: str = "json") -> Any | None:
        try:
            row = await self._db.prepare("SELECT value FROM settings WHERE key = ?").bind(key).first()
            if row is None:
                return None
            return deserialize_value(row["value"], type)
        except Exception as e:
            logger.error("D1 GET: failed for key %s: %r", key, e)
            return None

    async def put(self, key: str, value: Any) -> bool:
        try:
            data = serialize_value(value)
            await self._db.prepare(
                "INSERT OR REPLACE INTO settings (key, value, updated_at) VALUES (?, ?, datetime('now'))"
            ).bind(key, data).run()
            return True
        except Exception as e:
            logger.error("D1 PUT: failed for key %s: %r", key, e)
            raise

    async def delete(self, key: str) -> bool:
        try:
            await self._db.prepare("DELETE FROM settings WHERE key = ?").bind(key).run()
            return True
        except Exception as e:
            logger.error("D1 DELETE: failed for key %s: %r", key, e)
            raise

    async def list(self, prefix: str = "") -> list[str]:
        try:
            result = await self._db.prepare("SELECT key FROM settings WHERE key LIKE ?").bind(f"{prefix}%").all()
            return [row["key"] for row in result.results]
        except Exception as e:
            logger.error("D1 LIST: failed for prefix %r: %r", prefix, e)
            return []

    def get_type(self) -> StorageType:
        return StorageType.D1

    async def init_tables(self) -> bool:
        """Create the three tables and their updated_at indexes. Safe to repeat."""
        try:
            for sql in SCHEMA_STATEMENTS:
                await self._db.prepare(sql).run()
        except Exception as e:
            logger.error("D1 INIT: failed to initialize tables: %r", e)
            raise
        logger.info("D1 INIT: database tables initialized")
        return True
