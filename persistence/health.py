from __future__ import annotations

import logging
import time

from pydantic import BaseModel

from .interfaces import StorageAdapter
from .models import StorageType

logger = logging.getLogger(__name__)

PROBE_KEY = "health_check_test"


class HealthReport(BaseModel):
    type: StorageType | None = None
    available: bool = False
    readable: bool = False
    writable: bool = False
    error: str | None = None


class StorageHealthChecker:
    @staticmethod
    async def check(storage: StorageAdapter) -> HealthReport:
        """
        Write, read back and delete a probe key. Never raises: failures are
        reported in `error` with the flags reflecting the steps that completed.
        """
        health = HealthReport()

        try:
            health.type = StorageType(storage.get_type())
            probe = {"timestamp": int(time.time() * 1000), "test": True}

            await storage.put(PROBE_KEY, probe)
            health.writable = True

            retrieved = await storage.get(PROBE_KEY)
            health.readable = retrieved is not None

            health.available = health.readable and health.writable
        except Exception as e:
            health.error = str(e)
            logger.error("HEALTH CHECK: storage check failed for %s: %r", _label(health), e)
        finally:
            # Cleanup does not affect the report.
            if health.writable:
                try:
                    await storage.delete(PROBE_KEY)
                except Exception as e:
                    logger.warning("HEALTH CHECK: failed to remove probe key for %s: %r", _label(health), e)

        return health


def _label(health: HealthReport) -> str:
    return health.type.value if health.type is not None else "unknown"
