from __future__ import annotations

from typing import Any, Mapping

from settings import Settings

from .disk_namespace import DiskKVNamespace
from .errors import UnsupportedStorageTypeError
from .models import BINDING_NAMES, D1_BINDING, KV_BINDING, StorageType
from .sqlite_database import SqliteD1Database


def open_bindings(settings: Settings) -> dict[str, Any]:
    """
    Resolve the well-known binding names to resource handles:

      { "MISUB_KV": DiskKVNamespace, "MISUB_DB": SqliteD1Database }
    """
    return {
        KV_BINDING: DiskKVNamespace(settings.kv_dir),
        D1_BINDING: SqliteD1Database(settings.db_path),
    }


def close_bindings(bindings: dict[str, Any]) -> None:
    db = bindings.get(D1_BINDING)
    if isinstance(db, SqliteD1Database):
        db.close()


def resolve_resource(bindings: Mapping[str, Any], kind: StorageType | str) -> Any:
    """Handle bound for `kind`, or None when the binding is absent."""
    try:
        binding = BINDING_NAMES[StorageType(kind)]
    except ValueError:
        raise UnsupportedStorageTypeError(kind) from None
    return bindings.get(binding)
