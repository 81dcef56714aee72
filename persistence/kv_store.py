from __future__ import annotations

import logging
from typing import Any

from json_store import serialize_value

from .interfaces import KVNamespace, StorageAdapter
from .models import StorageType

logger = logging.getLogger(__name__)


class KVStorageAdapter(StorageAdapter):
    """Pass-through adapter onto a key-value namespace handle."""

    def __init__(self, kv_namespace: KVNamespace):
        self._kv = kv_namespace

    async def get(self, key: str, type: str = "json") -> Any | None:
        try:
            return await self._kv.get(key, type)
        except Exception as e:
            logger.error("KV GET: failed for key %s: %r", key, e)
            return None

    async def put(self, key: str, value: Any) -> bool:
        try:
            await self._kv.put(key, serialize_value(value))
            return True
        except Exception as e:
            logger.error("KV PUT: failed for key %s: %r", key, e)
            raise

    async def delete(self, key: str) -> bool:
        try:
            await self._kv.delete(key)
            return True
        except Exception as e:
            logger.error("KV DELETE: failed for key %s: %r", key, e)
            raise

    async def list(self, prefix: str = "") -> list[str]:
        try:
            result = await self._kv.list(prefix=prefix)
            return [k.name for k in result.keys]
        except Exception as e:
            logger.error("KV LIST: failed for prefix %r: %r", prefix, e)
            return []

    def get_type(self) -> StorageType:
        return StorageType.KV
