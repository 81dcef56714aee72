from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class StorageType(str, Enum):
    KV = "kv"
    D1 = "d1"


class DataKeys:
    """Well-known document keys shared by every backend."""

    SUBSCRIPTIONS = "misub_subscriptions_v1"
    PROFILES = "misub_profiles_v1"
    SETTINGS = "worker_settings_v1"


# Environment binding name per backend kind.
KV_BINDING = "MISUB_KV"
D1_BINDING = "MISUB_DB"

BINDING_NAMES: dict[StorageType, str] = {
    StorageType.KV: KV_BINDING,
    StorageType.D1: D1_BINDING,
}


class KVListKey(BaseModel):
    name: str
    expiration: int | None = None
    metadata: dict[str, Any] | None = None


class KVListResult(BaseModel):
    """
    Mirrors a key-value namespace listing:
      { "keys": [ { "name": "..." } ], "list_complete": true, "cursor": null }
    """

    keys: list[KVListKey] = Field(default_factory=list)
    list_complete: bool = True
    cursor: str | None = None


class D1Meta(BaseModel):
    changes: int = 0
    last_row_id: int | None = None
    duration: float = 0.0


class D1Result(BaseModel):
    results: list[dict[str, Any]] = Field(default_factory=list)
    success: bool = True
    meta: D1Meta = Field(default_factory=D1Meta)
