"""FastAPI application bootstrap."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .dependencies import (
    close_session_store,
    config,
    get_chat_relay,
    get_session_store,
    get_workflow_client,
)
from .routes import register_chat_routes, register_health_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_session_store()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Workflow Chat Relay", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_chat_routes(app)
    register_health_routes(app)

    # Mounted last so the /api routes take precedence.
    static_dir = Path(config.server.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()

__all__ = [
    "app",
    "create_app",
    "get_chat_relay",
    "get_session_store",
    "get_workflow_client",
]
