# src/chainview/api/v1/endpoints/content.py
"""Read endpoints for channels and videos."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from chainview.db.session import get_db
from chainview.models import Channel, Video
from chainview.schemas.content import ChannelResponse, VideoResponse

router = APIRouter(tags=["content"])
SessionDep = Annotated[Session, Depends(get_db)]


@router.get("/channels/{channel_id}", response_model=ChannelResponse)
async def get_channel(channel_id: str, db: SessionDep) -> ChannelResponse:
    channel = db.get(Channel, channel_id)
    if channel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")
    return ChannelResponse.from_entity(channel)


@router.get("/channels/{channel_id}/videos", response_model=list[VideoResponse])
async def list_channel_videos(channel_id: str, db: SessionDep) -> list[VideoResponse]:
    if db.get(Channel, channel_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")
    stmt = select(Video).where(Video.channel_id == channel_id).order_by(Video.created_in_block, Video.id)
    return [VideoResponse.from_entity(video) for video in db.scalars(stmt)]


@router.get("/videos", response_model=list[VideoResponse])
async def list_videos(
    db: SessionDep,
    featured: bool | None = None,
    include_censored: bool = True,
) -> list[VideoResponse]:
    """List videos, optionally only the featured (or non-featured) ones."""
    stmt = select(Video).order_by(Video.created_in_block, Video.id)
    if featured is not None:
        stmt = stmt.where(Video.is_featured == featured)
    if not include_censored:
        stmt = stmt.where(Video.is_censored.is_not(True))
    return [VideoResponse.from_entity(video) for video in db.scalars(stmt)]


@router.get("/videos/{video_id}", response_model=VideoResponse)
async def get_video(video_id: str, db: SessionDep) -> VideoResponse:
    video = db.get(Video, video_id)
    if video is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
    return VideoResponse.from_entity(video)
