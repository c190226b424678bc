# src/chainview/main.py
"""Main entry point for the Chainview read API and projection worker."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from chainview.api.v1 import content_router, forum_router, system_router
from chainview.core.logging import configure_logging
from chainview.core.settings import settings
from chainview.db.session import create_tables
from chainview.services.event_source import JsonlEventSource
from chainview.services.projector import ProjectionWorker

app = FastAPI(
    title=f"{settings.app_name} API",
    description="Read-only view of the projected forum, content and storage state",
    version=settings.app_version,
)

app.add_middleware(GZipMiddleware)

app.include_router(forum_router, prefix="/api/v1")
app.include_router(content_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    create_tables()
    if settings.projector_enabled and settings.projector_events_file:
        worker = ProjectionWorker(JsonlEventSource(settings.projector_events_file))
        await worker.start()
        app.state.projection_worker = worker
    else:
        app.state.projection_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: ProjectionWorker | None = getattr(app.state, "projection_worker", None)
    if worker:
        await worker.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "network": settings.network,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chainview.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
