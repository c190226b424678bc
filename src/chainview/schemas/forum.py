# src/chainview/schemas/forum.py
"""Forum read-model schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from chainview.models.variants import PostOriginKind, StatusKind


class StatusResponse(BaseModel):
    """Status variant with the event that caused it, if any."""

    model_config = ConfigDict(from_attributes=True)

    kind: StatusKind
    event_id: str | None


class OriginResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: PostOriginKind
    event_id: str | None


class ModeratorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    runtime_id: int
    membership_id: str | None


class ForumCategoryResponse(BaseModel):
    """Schema for forum category information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    parent_id: str | None
    title: str
    description: str
    status: StatusResponse
    moderators: list[ModeratorResponse]
    created_at: datetime
    updated_at: datetime


class PollAlternativeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    index: int
    text: str


class PollResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    end_time: datetime
    alternatives: list[PollAlternativeResponse]


class ForumThreadResponse(BaseModel):
    """Schema for forum thread information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    category_id: str
    author_id: str
    title: str
    is_sticky: bool
    status: StatusResponse
    poll: PollResponse | None
    created_at: datetime
    updated_at: datetime


class ForumPostResponse(BaseModel):
    """Schema for forum post information returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    thread_id: str
    author_id: str
    text: str
    replies_to_id: str | None
    status: StatusResponse
    origin: OriginResponse
    created_at: datetime
    updated_at: datetime
