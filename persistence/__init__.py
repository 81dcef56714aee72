from __future__ import annotations

from .d1_store import D1StorageAdapter
from .disk_namespace import DiskKVNamespace
from .errors import StorageConfigurationError, UnsupportedStorageTypeError
from .factory import StorageFactory
from .health import HealthReport, StorageHealthChecker
from .interfaces import D1Database, KVNamespace, StorageAdapter
from .kv_store import KVStorageAdapter
from .migrator import DataMigrator, MigrationResult
from .models import D1_BINDING, KV_BINDING, DataKeys, StorageType
from .sqlite_database import SqliteD1Database

__all__ = [
    "StorageAdapter",
    "KVNamespace",
    "D1Database",
    "KVStorageAdapter",
    "D1StorageAdapter",
    "DiskKVNamespace",
    "SqliteD1Database",
    "StorageFactory",
    "StorageType",
    "DataKeys",
    "KV_BINDING",
    "D1_BINDING",
    "DataMigrator",
    "MigrationResult",
    "StorageHealthChecker",
    "HealthReport",
    "StorageConfigurationError",
    "UnsupportedStorageTypeError",
]
