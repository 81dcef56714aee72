from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Backend the app serves from ("kv" or "d1")
    storage_type: str

    # Resources behind the two well-known bindings
    kv_dir: Path
    db_path: str

    # Logging
    log_level: str

    # Admin surface
    enable_migration_endpoint: bool


def get_settings() -> Settings:
    project_root = Path(__file__).resolve().parent

    storage_type = os.getenv("STORAGE_TYPE", "kv").strip().lower()

    kv_dir = Path(os.getenv("MISUB_KV_DIR", str(project_root / "data" / "kv")))
    # ":memory:" is accepted for throwaway databases.
    db_path = os.getenv("MISUB_DB_PATH", str(project_root / "data" / "misub.db"))

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    enable_migration_endpoint = _env_bool("ENABLE_MIGRATION_ENDPOINT", True)

    return Settings(
        storage_type=storage_type,
        kv_dir=kv_dir,
        db_path=db_path,
        log_level=log_level,
        enable_migration_endpoint=enable_migration_endpoint,
    )
