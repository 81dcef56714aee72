from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import BaseModel, Field

from .bindings import resolve_resource
from .factory import StorageFactory
from .interfaces import StorageAdapter
from .models import DataKeys, StorageType

logger = logging.getLogger(__name__)

# (result field, document key, label used in error messages)
MIGRATED_DOCUMENTS: tuple[tuple[str, str, str], ...] = (
    ("subscriptions", DataKeys.SUBSCRIPTIONS, "Subscriptions"),
    ("profiles", DataKeys.PROFILES, "Profiles"),
    ("settings", DataKeys.SETTINGS, "Settings"),
)


class MigrationResult(BaseModel):
    subscriptions: bool = False
    profiles: bool = False
    settings: bool = False
    errors: list[str] = Field(default_factory=list)


class DataMigrator:
    """
    Copies the well-known documents from one backend to another.

    Each document is copied independently: a failure is recorded in
    `MigrationResult.errors` and the remaining documents are still attempted.
    A document absent from the source stays False with no error entry.
    The copy is not atomic across documents.
    """

    def __init__(self, env: Mapping[str, Any]):
        self._env = env

    def get_resource(self, kind: StorageType | str) -> Any:
        return resolve_resource(self._env, kind)

    async def migrate(self, from_kind: StorageType | str, to_kind: StorageType | str) -> MigrationResult:
        logger.info("MIGRATION: starting %s -> %s", _kind_label(from_kind), _kind_label(to_kind))

        # Adapter construction errors abort the whole migration.
        try:
            source = StorageFactory.create(from_kind, self.get_resource(from_kind))
            dest = StorageFactory.create(to_kind, self.get_resource(to_kind))
        except Exception as e:
            logger.error(
                "MIGRATION: failed to open storages %s -> %s: %r", _kind_label(from_kind), _kind_label(to_kind), e
            )
            raise

        result = MigrationResult()
        for field, key, label in MIGRATED_DOCUMENTS:
            try:
                migrated = await self._copy(source, dest, key)
            except Exception as e:
                result.errors.append(f"{label}: {e}")
                logger.error("MIGRATION: failed to migrate %s: %r", field, e)
                continue
            setattr(result, field, migrated)
            if migrated:
                logger.info("MIGRATION: %s migrated", field)
            else:
                logger.info("MIGRATION: %s absent in source, skipped", field)

        logger.info("MIGRATION: completed %s", result.model_dump())
        return result

    @staticmethod
    async def _copy(source: StorageAdapter, dest: StorageAdapter, key: str) -> bool:
        # Raw text keeps the destination byte-identical to the source.
        raw = await source.get(key, "text")
        if raw is None:
            return False
        await dest.put(key, raw)
        return True


def _kind_label(kind: StorageType | str) -> str:
    return kind.value if isinstance(kind, StorageType) else str(kind)
