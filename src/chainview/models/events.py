"""Immutable event records, one row per handled chain event.

All events share the ``event`` table (single-table inheritance keyed on
``type``). Entity status variants point back at these rows through their
``status_event_id``.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from chainview.db.session import Base

ID_LIST = JSON(none_as_null=True)


class Event(Base):
    """Common fields of every recorded event."""

    __tablename__ = "event"

    # "<block>-<index in block>", unique across the chain.
    id: Mapped[str] = mapped_column(Text, primary_key=True)
    type: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    in_block: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    in_extrinsic: Mapped[str | None] = mapped_column(Text, nullable=True)
    index_in_block: Mapped[int] = mapped_column(Integer, nullable=False)
    network: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Entity references; no foreign keys so that physical deletions never
    # rewrite history.
    category_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    thread_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    post_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    actor_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    member_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    channel_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Content actor as "lead", "curator:<group>:<curator>" or "member:<id>".
    content_actor: Mapped[str | None] = mapped_column(Text, nullable=True)

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)
    rationale: Mapped[str | None] = mapped_column(Text, nullable=True)
    hide: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __mapper_args__ = {
        "polymorphic_on": "type",
        "polymorphic_identity": "Event",
    }


# Forum


class CategoryCreatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "CategoryCreated"}


class CategoryUpdatedEvent(Event):
    new_archival_status: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "CategoryUpdated"}


class CategoryDeletedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "CategoryDeleted"}


class ThreadCreatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "ThreadCreated"}


class ThreadModeratedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "ThreadModerated"}


class ThreadTitleUpdatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "ThreadTitleUpdated"}


class ThreadDeletedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "ThreadDeleted"}


class ThreadMovedEvent(Event):
    old_category_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_category_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "ThreadMoved"}


class VoteOnPollEvent(Event):
    poll_alternative_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "VoteOnPoll"}


class PostAddedEvent(Event):
    is_editable: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "PostAdded"}


class PostModeratedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "PostModerated"}


class PostTextUpdatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "PostTextUpdated"}


class PostDeletedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "PostDeleted"}


class CategoryStickyThreadUpdateEvent(Event):
    new_sticky_thread_ids: Mapped[list[str] | None] = mapped_column(ID_LIST, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "CategoryStickyThreadUpdate"}


class CategoryMembershipOfModeratorUpdatedEvent(Event):
    moderator_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_can_moderate_value: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "CategoryMembershipOfModeratorUpdated"}


# Content


class ChannelCreatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "ChannelCreated"}


class ChannelUpdatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "ChannelUpdated"}


class ChannelCensorshipUpdatedEvent(Event):
    is_censored: Mapped[bool | None] = mapped_column(Boolean, nullable=True, use_existing_column=True)

    __mapper_args__ = {"polymorphic_identity": "ChannelCensorshipUpdated"}


class ChannelCategoryChangedEvent(Event):
    """Creation, update or deletion of a channel category (see ``action``)."""

    channel_category_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    action: Mapped[str | None] = mapped_column(Text, nullable=True, use_existing_column=True)

    __mapper_args__ = {"polymorphic_identity": "ChannelCategoryChanged"}


class VideoCategoryChangedEvent(Event):
    """Creation, update or deletion of a video category (see ``action``)."""

    video_category_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    action: Mapped[str | None] = mapped_column(Text, nullable=True, use_existing_column=True)

    __mapper_args__ = {"polymorphic_identity": "VideoCategoryChanged"}


class VideoCreatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "VideoCreated"}


class VideoUpdatedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "VideoUpdated"}


class VideoDeletedEvent(Event):
    __mapper_args__ = {"polymorphic_identity": "VideoDeleted"}


class VideoCensorshipUpdatedEvent(Event):
    is_censored: Mapped[bool | None] = mapped_column(Boolean, nullable=True, use_existing_column=True)

    __mapper_args__ = {"polymorphic_identity": "VideoCensorshipUpdated"}


class FeaturedVideosSetEvent(Event):
    new_featured_video_ids: Mapped[list[str] | None] = mapped_column(ID_LIST, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "FeaturedVideosSet"}


# Storage


class ContentAcceptedEvent(Event):
    content_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    storage_provider_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    __mapper_args__ = {"polymorphic_identity": "ContentAccepted"}
