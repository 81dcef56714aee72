from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv

from persistence import D1StorageAdapter, StorageFactory
from persistence.bindings import close_bindings, open_bindings, resolve_resource
from persistence.models import D1_BINDING
from settings import get_settings

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    bindings = open_bindings(settings)

    # Schema must exist before any request, including migrations into D1
    # while another backend is served.
    try:
        await D1StorageAdapter(bindings[D1_BINDING]).init_tables()
    except Exception as e:
        logger.warning("STORAGE: failed to initialize D1 tables at startup: %r", e)

    storage = StorageFactory.create(settings.storage_type, resolve_resource(bindings, settings.storage_type))
    logger.info("STORAGE: using %s backend", storage.get_type().value)

    app.state.bindings = bindings
    app.state.storage = storage
    try:
        yield
    finally:
        close_bindings(bindings)


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.storage_endpoints import router as storage_router

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(storage_router)

    return app


app = create_app()
