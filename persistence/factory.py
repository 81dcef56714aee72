from __future__ import annotations

import asyncio
import logging
from typing import Any

from .d1_store import D1StorageAdapter
from .errors import StorageConfigurationError, UnsupportedStorageTypeError
from .interfaces import StorageAdapter
from .kv_store import KVStorageAdapter
from .models import StorageType

logger = logging.getLogger(__name__)

# Strong references to in-flight schema init tasks; the event loop only keeps weak ones.
_BACKGROUND_TASKS: set[asyncio.Task[Any]] = set()


def _log_init_outcome(task: asyncio.Task[Any]) -> None:
    _BACKGROUND_TASKS.discard(task)
    if task.cancelled():
        logger.warning("D1 INIT: auto-initialization cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("D1 INIT: failed to auto-initialize tables: %r", exc)


def _schedule_init(adapter: D1StorageAdapter) -> None:
    """Fire-and-forget `init_tables`; the adapter is returned before it completes."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.warning("D1 INIT: no running event loop; call init_tables() before first use")
        return
    task = loop.create_task(adapter.init_tables())
    _BACKGROUND_TASKS.add(task)
    task.add_done_callback(_log_init_outcome)


def _coerce_kind(kind: StorageType | str) -> StorageType:
    try:
        return StorageType(kind)
    except ValueError:
        raise UnsupportedStorageTypeError(kind) from None


class StorageFactory:
    @staticmethod
    def create(kind: StorageType | str, resource: Any) -> StorageAdapter:
        """
        Build the adapter for `kind` bound to `resource`.

        Raises StorageConfigurationError before any I/O when the resource is
        missing, UnsupportedStorageTypeError for an unknown kind.
        """
        storage_type = _coerce_kind(kind)

        if storage_type is StorageType.KV:
            if resource is None:
                raise StorageConfigurationError("KV namespace is required for KV storage")
            return KVStorageAdapter(resource)

        if storage_type is StorageType.D1:
            if resource is None:
                raise StorageConfigurationError("D1 database is required for D1 storage")
            adapter = D1StorageAdapter(resource)
            _schedule_init(adapter)
            return adapter

        raise UnsupportedStorageTypeError(kind)
