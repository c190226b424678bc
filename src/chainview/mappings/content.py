"""Content directory event handlers: channels, videos and their categories."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from chainview.mappings import handles
from chainview.metadata.decode import (
    AssetContext,
    apply_changeset,
    read_category_metadata,
    read_channel_metadata,
    read_video_metadata,
)
from chainview.metadata.proto import ChannelCategoryMetadata, VideoCategoryMetadata
from chainview.models import (
    Channel,
    ChannelCategory,
    ChannelCategoryChangedEvent,
    ChannelCensorshipUpdatedEvent,
    ChannelCreatedEvent,
    ChannelUpdatedEvent,
    FeaturedVideosSetEvent,
    Membership,
    Video,
    VideoCategory,
    VideoCategoryChangedEvent,
    VideoCensorshipUpdatedEvent,
    VideoCreatedEvent,
    VideoDeletedEvent,
    VideoUpdatedEvent,
)
from chainview.models.variants import DataObjectOwner
from chainview.schemas.chain import (
    ChainEvent,
    MemberChannelOwner,
    as_id,
    bytes_to_string,
    parse_channel_owner,
    parse_content_actor,
    parse_new_assets,
    to_bytes,
)
from chainview.services.assets import owner_for_content_actor
from chainview.services.collections import replace_flagged_set
from chainview.services.event_log import record_event
from chainview.services.resolver import ensure_absent, get_entity, upsert_stub

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
DELETED = "deleted"


def _params(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise TypeError(f"Expected a parameter struct, got {raw!r}")
    return raw


# Channels


@handles("content", "ChannelCreated")
def channel_created(db: Session, event: ChainEvent) -> None:
    channel_id = as_id(event.param(0))
    owner = parse_channel_owner(event.param(1))
    assets = parse_new_assets(event.param(2))
    params = _params(event.param(3))

    ensure_absent(db, Channel, channel_id)

    context = AssetContext(assets, event.block_number, DataObjectOwner.channel(channel_id))
    changes = read_channel_metadata(db, to_bytes(params.get("meta")), context)

    channel = Channel(
        id=channel_id,
        is_censored=False,
        created_in_block=event.block_number,
    )
    member_id = None
    if isinstance(owner, MemberChannelOwner):
        member_id = upsert_stub(db, Membership, owner.member_id).id
        channel.owner_member_id = member_id
    else:
        channel.owner_curator_group_id = owner.group_id
    apply_changeset(channel, changes)
    db.add(channel)

    record_event(db, ChannelCreatedEvent, event, channel_id=channel_id, member_id=member_id)


@handles("content", "ChannelUpdated")
def channel_updated(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    channel = get_entity(db, Channel, as_id(event.param(1)))
    params = _params(event.param(3))

    new_meta = params.get("new_meta")
    if new_meta is not None:
        context = AssetContext(
            parse_new_assets(params.get("assets")),
            event.block_number,
            owner_for_content_actor(actor, channel.id),
        )
        apply_changeset(channel, read_channel_metadata(db, to_bytes(new_meta), context))

    record_event(
        db,
        ChannelUpdatedEvent,
        event,
        channel_id=channel.id,
        content_actor=actor.label(),
    )


def _set_channel_censorship(db: Session, event: ChainEvent, is_censored: bool) -> None:
    actor = parse_content_actor(event.param(0))
    channel = get_entity(db, Channel, as_id(event.param(1)))
    rationale = bytes_to_string(event.param(2))

    channel.is_censored = is_censored
    record_event(
        db,
        ChannelCensorshipUpdatedEvent,
        event,
        channel_id=channel.id,
        content_actor=actor.label(),
        rationale=rationale,
        is_censored=is_censored,
    )


@handles("content", "ChannelCensored")
def channel_censored(db: Session, event: ChainEvent) -> None:
    _set_channel_censorship(db, event, True)


@handles("content", "ChannelUncensored")
def channel_uncensored(db: Session, event: ChainEvent) -> None:
    _set_channel_censorship(db, event, False)


# Channel categories


@handles("content", "ChannelCategoryCreated")
def channel_category_created(db: Session, event: ChainEvent) -> None:
    category_id = as_id(event.param(0))
    params = _params(event.param(2))

    ensure_absent(db, ChannelCategory, category_id)
    category = ChannelCategory(id=category_id, created_in_block=event.block_number)
    apply_changeset(
        category,
        read_category_metadata(ChannelCategoryMetadata, to_bytes(params.get("meta"))),
    )
    db.add(category)

    record_event(
        db,
        ChannelCategoryChangedEvent,
        event,
        channel_category_id=category_id,
        action=CREATED,
    )


@handles("content", "ChannelCategoryUpdated")
def channel_category_updated(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    category = get_entity(db, ChannelCategory, as_id(event.param(1)))
    params = _params(event.param(2))

    apply_changeset(
        category,
        read_category_metadata(ChannelCategoryMetadata, to_bytes(params.get("new_meta"))),
    )
    record_event(
        db,
        ChannelCategoryChangedEvent,
        event,
        channel_category_id=category.id,
        content_actor=actor.label(),
        action=UPDATED,
    )


@handles("content", "ChannelCategoryDeleted")
def channel_category_deleted(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    category = get_entity(db, ChannelCategory, as_id(event.param(1)))

    db.execute(
        update(Channel).where(Channel.category_id == category.id).values(category_id=None)
    )
    db.delete(category)
    record_event(
        db,
        ChannelCategoryChangedEvent,
        event,
        channel_category_id=category.id,
        content_actor=actor.label(),
        action=DELETED,
    )


# Video categories


@handles("content", "VideoCategoryCreated")
def video_category_created(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    category_id = as_id(event.param(1))
    params = _params(event.param(2))

    ensure_absent(db, VideoCategory, category_id)
    category = VideoCategory(id=category_id, created_in_block=event.block_number)
    apply_changeset(
        category,
        read_category_metadata(VideoCategoryMetadata, to_bytes(params.get("meta"))),
    )
    db.add(category)

    record_event(
        db,
        VideoCategoryChangedEvent,
        event,
        video_category_id=category_id,
        content_actor=actor.label(),
        action=CREATED,
    )


@handles("content", "VideoCategoryUpdated")
def video_category_updated(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    category = get_entity(db, VideoCategory, as_id(event.param(1)))
    params = _params(event.param(2))

    apply_changeset(
        category,
        read_category_metadata(VideoCategoryMetadata, to_bytes(params.get("new_meta"))),
    )
    record_event(
        db,
        VideoCategoryChangedEvent,
        event,
        video_category_id=category.id,
        content_actor=actor.label(),
        action=UPDATED,
    )


@handles("content", "VideoCategoryDeleted")
def video_category_deleted(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    category = get_entity(db, VideoCategory, as_id(event.param(1)))

    db.execute(update(Video).where(Video.category_id == category.id).values(category_id=None))
    db.delete(category)
    record_event(
        db,
        VideoCategoryChangedEvent,
        event,
        video_category_id=category.id,
        content_actor=actor.label(),
        action=DELETED,
    )


# Videos


@handles("content", "VideoCreated")
def video_created(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    channel = get_entity(db, Channel, as_id(event.param(1)))
    video_id = as_id(event.param(2))
    params = _params(event.param(3))

    ensure_absent(db, Video, video_id)

    context = AssetContext(
        parse_new_assets(params.get("assets")),
        event.block_number,
        owner_for_content_actor(actor, channel.id),
    )
    changes = read_video_metadata(db, to_bytes(params.get("meta")), context)

    video = Video(
        id=video_id,
        channel=channel,
        is_censored=False,
        is_featured=False,
        created_in_block=event.block_number,
    )
    apply_changeset(video, changes)
    db.add(video)

    record_event(
        db,
        VideoCreatedEvent,
        event,
        channel_id=channel.id,
        video_id=video_id,
        content_actor=actor.label(),
    )


@handles("content", "VideoUpdated")
def video_updated(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    video = get_entity(db, Video, as_id(event.param(1)))
    params = _params(event.param(2))

    new_meta = params.get("new_meta")
    if new_meta is not None:
        context = AssetContext(
            parse_new_assets(params.get("assets")),
            event.block_number,
            owner_for_content_actor(actor, video.channel_id),
        )
        apply_changeset(video, read_video_metadata(db, to_bytes(new_meta), context))

    record_event(
        db,
        VideoUpdatedEvent,
        event,
        channel_id=video.channel_id,
        video_id=video.id,
        content_actor=actor.label(),
    )


@handles("content", "VideoDeleted")
def video_deleted(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    video = get_entity(db, Video, as_id(event.param(1)))

    channel_id, video_id = video.channel_id, video.id
    db.delete(video)
    record_event(
        db,
        VideoDeletedEvent,
        event,
        channel_id=channel_id,
        video_id=video_id,
        content_actor=actor.label(),
    )


def _set_video_censorship(db: Session, event: ChainEvent, is_censored: bool) -> None:
    actor = parse_content_actor(event.param(0))
    video = get_entity(db, Video, as_id(event.param(1)))
    rationale = bytes_to_string(event.param(2))

    video.is_censored = is_censored
    record_event(
        db,
        VideoCensorshipUpdatedEvent,
        event,
        video_id=video.id,
        channel_id=video.channel_id,
        content_actor=actor.label(),
        rationale=rationale,
        is_censored=is_censored,
    )


@handles("content", "VideoCensored")
def video_censored(db: Session, event: ChainEvent) -> None:
    _set_video_censorship(db, event, True)


@handles("content", "VideoUncensored")
def video_uncensored(db: Session, event: ChainEvent) -> None:
    _set_video_censorship(db, event, False)


@handles("content", "FeaturedVideosSet")
def featured_videos_set(db: Session, event: ChainEvent) -> None:
    actor = parse_content_actor(event.param(0))
    video_ids = [as_id(video_id) for video_id in event.param(1)]

    diff = replace_flagged_set(db, Video, "is_featured", video_ids)
    if diff.changed:
        logger.info(
            "Featured videos replaced: %d added, %d removed",
            len(diff.added),
            len(diff.removed),
        )
    record_event(
        db,
        FeaturedVideosSetEvent,
        event,
        content_actor=actor.label(),
        new_featured_video_ids=video_ids,
    )
