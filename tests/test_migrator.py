from __future__ import annotations

import asyncio
import logging

import pytest

from persistence import (
    D1_BINDING,
    KV_BINDING,
    D1StorageAdapter,
    DataKeys,
    DataMigrator,
    KVStorageAdapter,
    StorageConfigurationError,
    StorageType,
    UnsupportedStorageTypeError,
)

SUBSCRIPTIONS = [{"id": "s1", "name": "Home", "url": "https://example.com/a", "enabled": True}]
SETTINGS = {"subConverter": "api.example.com", "prefixConfig": {"enableManualNodes": True}}


def test_migrates_present_documents_kv_to_d1(kv_namespace, initialized_d1_database):
    async def _run():
        source = KVStorageAdapter(kv_namespace)
        await source.put(DataKeys.SUBSCRIPTIONS, SUBSCRIPTIONS)
        # stored with non-compact spacing to check the copy is byte-identical
        await kv_namespace.put(DataKeys.SETTINGS, '{ "subConverter": "api.example.com" }')

        migrator = DataMigrator({KV_BINDING: kv_namespace, D1_BINDING: initialized_d1_database})
        result = await migrator.migrate("kv", "d1")

        assert result.model_dump() == {
            "subscriptions": True,
            "profiles": False,
            "settings": True,
            "errors": [],
        }

        dest = D1StorageAdapter(initialized_d1_database)
        for key in (DataKeys.SUBSCRIPTIONS, DataKeys.SETTINGS):
            assert await dest.get(key, "text") == await source.get(key, "text")
        assert await dest.get(DataKeys.PROFILES) is None

    asyncio.run(_run())


def test_migrates_d1_to_kv(kv_namespace, initialized_d1_database):
    async def _run():
        source = D1StorageAdapter(initialized_d1_database)
        await source.put(DataKeys.PROFILES, [{"id": "p1", "subscriptions": ["s1"]}])
        await source.put(DataKeys.SETTINGS, SETTINGS)

        migrator = DataMigrator({KV_BINDING: kv_namespace, D1_BINDING: initialized_d1_database})
        result = await migrator.migrate("d1", "kv")

        assert result.subscriptions is False
        assert result.profiles is True
        assert result.settings is True
        assert result.errors == []
        assert await KVStorageAdapter(kv_namespace).get(DataKeys.SETTINGS) == SETTINGS

    asyncio.run(_run())


def test_per_document_failure_does_not_stop_the_others(kv_namespace, initialized_d1_database, make_flaky):
    async def _run():
        source = D1StorageAdapter(initialized_d1_database)
        await source.put(DataKeys.SUBSCRIPTIONS, SUBSCRIPTIONS)
        await source.put(DataKeys.PROFILES, [{"id": "p1"}])
        await source.put(DataKeys.SETTINGS, SETTINGS)

        flaky = make_flaky(kv_namespace, put={DataKeys.PROFILES})
        migrator = DataMigrator({KV_BINDING: flaky, D1_BINDING: initialized_d1_database})
        result = await migrator.migrate("d1", "kv")

        assert result.subscriptions is True
        assert result.profiles is False
        assert result.settings is True
        assert len(result.errors) == 1
        assert result.errors[0] == f"Profiles: put unavailable for {DataKeys.PROFILES}"

        dest = KVStorageAdapter(kv_namespace)
        assert await dest.get(DataKeys.SUBSCRIPTIONS) == SUBSCRIPTIONS
        assert await dest.get(DataKeys.PROFILES) is None
        assert await dest.get(DataKeys.SETTINGS) == SETTINGS

    asyncio.run(_run())


def test_missing_resource_aborts_migration(kv_namespace):
    migrator = DataMigrator({KV_BINDING: kv_namespace})

    with pytest.raises(StorageConfigurationError, match="D1 database is required"):
        asyncio.run(migrator.migrate("kv", "d1"))


def test_unknown_kind_aborts_migration(kv_namespace):
    migrator = DataMigrator({KV_BINDING: kv_namespace})

    with pytest.raises(UnsupportedStorageTypeError):
        asyncio.run(migrator.migrate("kv", "s3"))


def test_get_resource_uses_binding_names(kv_namespace, d1_database):
    migrator = DataMigrator({KV_BINDING: kv_namespace, D1_BINDING: d1_database})
    assert migrator.get_resource("kv") is kv_namespace
    assert migrator.get_resource("d1") is d1_database
    assert DataMigrator({}).get_resource("kv") is None


def test_log_lines_name_backends_by_value(kv_namespace, caplog):
    migrator = DataMigrator({KV_BINDING: kv_namespace})

    with caplog.at_level(logging.INFO, logger="persistence.migrator"):
        with pytest.raises(StorageConfigurationError):
            asyncio.run(migrator.migrate(StorageType.KV, StorageType.D1))

    messages = [r.getMessage() for r in caplog.records]
    assert "MIGRATION: starting kv -> d1" in messages
    assert any(m.startswith("MIGRATION: failed to open storages kv -> d1") for m in messages)
    assert not any("StorageType." in m for m in messages)
