"""FastAPI application: HTTP ingress for job notifications."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from framecue.api.routes import health, notifications
from framecue.context import AppContext


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``context`` is built from settings at startup when not supplied.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.context = context or AppContext.from_settings()
        yield

    app = FastAPI(
        title="framecue notification ingress",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(notifications.router, prefix="/notifications")
    return app
