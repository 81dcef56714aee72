# storage_endpoints.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from persistence import (
    DataMigrator,
    HealthReport,
    MigrationResult,
    StorageAdapter,
    StorageConfigurationError,
    StorageHealthChecker,
    StorageType,
)
from settings import Settings

router = APIRouter(prefix="/storage", tags=["storage"])
logger = logging.getLogger(__name__)


class MigrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_type: StorageType = Field(alias="from")
    to_type: StorageType = Field(alias="to")


def _storage(request: Request) -> StorageAdapter:
    return request.app.state.storage


def _bindings(request: Request) -> dict[str, Any]:
    return request.app.state.bindings


def _settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/info")
async def storage_info(request: Request):
    return {"type": _storage(request).get_type().value}


@router.get("/health", response_model=HealthReport)
async def storage_health(request: Request) -> HealthReport:
    return await StorageHealthChecker.check(_storage(request))


@router.post("/migrate", response_model=MigrationResult)
async def storage_migrate(body: MigrationRequest, request: Request) -> MigrationResult:
    if not _settings(request).enable_migration_endpoint:
        raise HTTPException(status_code=404, detail="Not Found")
    if body.from_type == body.to_type:
        raise HTTPException(status_code=400, detail="Source and destination storage must differ")

    migrator = DataMigrator(_bindings(request))
    try:
        return await migrator.migrate(body.from_type, body.to_type)
    except StorageConfigurationError as e:
        logger.info("MIGRATE REQUEST: rejected %s -> %s: %s", body.from_type.value, body.to_type.value, e)
        raise HTTPException(status_code=400, detail=str(e))
