"""FastAPI application factory and process composition root."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.config import configure_logging, get_settings
from marketplace.infrastructure.database import (
    dispose_engine,
    get_session_factory,
    initialize_database,
)
from marketplace.infrastructure.events.bootstrap import build_event_runtime
from marketplace.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, wire the event runtime and run the job worker."""

    settings = get_settings()
    initialize_database()
    runtime = build_event_runtime(get_session_factory(), settings)
    app.state.events = runtime

    try:
        if settings.job_worker_enabled:
            async with anyio.create_task_group() as task_group:
                task_group.start_soon(runtime.worker.run)
                try:
                    yield
                finally:
                    runtime.worker.stop()
        else:
            yield
    finally:
        app.state.events = None
        dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    configure_logging()
    app = FastAPI(title="Marketplace API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)
    return app
