# src/chainview/api/v1/endpoints/system.py
"""Projector status endpoint."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from chainview.core.settings import settings
from chainview.db.session import get_db
from chainview.models import Block, Event, ProcessorState
from chainview.services.projector import ProjectionWorker

router = APIRouter(tags=["system"])
SessionDep = Annotated[Session, Depends(get_db)]


@router.get("/status")
async def get_status(request: Request, db: SessionDep) -> dict[str, Any]:
    """Return the projection cursor and the background worker's progress.

    Returns:
        Dictionary with the network, the last committed block, row counts of
        the block and event logs, and the worker state (``None`` when the
        worker is disabled).
    """
    state = db.get(ProcessorState, 1)
    worker: ProjectionWorker | None = getattr(request.app.state, "projection_worker", None)

    return {
        "app": settings.app_name,
        "network": settings.network,
        "last_processed_block": state.last_processed_block if state else None,
        "blocks": db.scalar(select(func.count()).select_from(Block)) or 0,
        "events": db.scalar(select(func.count()).select_from(Event)) or 0,
        "worker": (
            {
                "running": worker.state.running,
                "last_block": worker.state.last_block,
                "blocks_applied": worker.state.blocks_applied,
                "failure": worker.state.failure,
            }
            if worker
            else None
        ),
    }
