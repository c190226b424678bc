# src/chainview/api/v1/endpoints/forum.py
"""Read endpoints for the projected forum."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from chainview.db.session import get_db
from chainview.models import ForumCategory, ForumPost, ForumThread
from chainview.models.variants import StatusKind
from chainview.schemas.forum import ForumCategoryResponse, ForumPostResponse, ForumThreadResponse

router = APIRouter(prefix="/forum", tags=["forum"])
SessionDep = Annotated[Session, Depends(get_db)]


def _get_or_404(db: Session, model: type, entity_id: str, label: str):
    entity = db.get(model, entity_id)
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} not found",
        )
    return entity


@router.get("/categories", response_model=list[ForumCategoryResponse])
async def list_categories(
    db: SessionDep,
    parent_id: str | None = None,
    include_removed: bool = False,
) -> list[ForumCategory]:
    """List forum categories, optionally only the children of ``parent_id``."""
    stmt = select(ForumCategory).order_by(ForumCategory.created_at, ForumCategory.id)
    if parent_id is not None:
        stmt = stmt.where(ForumCategory.parent_id == parent_id)
    if not include_removed:
        stmt = stmt.where(ForumCategory.status_kind != StatusKind.REMOVED)
    return list(db.scalars(stmt))


@router.get("/categories/{category_id}", response_model=ForumCategoryResponse)
async def get_category(category_id: str, db: SessionDep) -> ForumCategory:
    return _get_or_404(db, ForumCategory, category_id, "Forum category")


@router.get("/categories/{category_id}/threads", response_model=list[ForumThreadResponse])
async def list_category_threads(category_id: str, db: SessionDep) -> list[ForumThread]:
    """List the threads of a category, sticky threads first."""
    _get_or_404(db, ForumCategory, category_id, "Forum category")
    stmt = (
        select(ForumThread)
        .where(ForumThread.category_id == category_id)
        .order_by(ForumThread.is_sticky.desc(), ForumThread.created_at, ForumThread.id)
    )
    return list(db.scalars(stmt))


@router.get("/threads/{thread_id}", response_model=ForumThreadResponse)
async def get_thread(thread_id: str, db: SessionDep) -> ForumThread:
    return _get_or_404(db, ForumThread, thread_id, "Forum thread")


@router.get("/threads/{thread_id}/posts", response_model=list[ForumPostResponse])
async def list_thread_posts(thread_id: str, db: SessionDep) -> list[ForumPost]:
    """List the posts of a thread in creation order."""
    _get_or_404(db, ForumThread, thread_id, "Forum thread")
    stmt = (
        select(ForumPost)
        .where(ForumPost.thread_id == thread_id)
        .order_by(ForumPost.created_at, ForumPost.id)
    )
    return list(db.scalars(stmt))
