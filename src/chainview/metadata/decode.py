"""Decoding of metadata payloads into sparse changesets.

Each ```read_*`` function returns a dict of entity attribute -> new value that
contains only what the payload actually carries; :func:`apply_changeset`
merges it onto the entity. Nested references (language, license, categories,
media encoding, assets) are resolved to ORM objects on the way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, TypeVar

import pycountry
from google.protobuf.message import DecodeError, Message
from sqlalchemy.orm import Session

from chainview.metadata.proto import (
    ChannelMetadata,
    ForumPostMetadata,
    VideoMetadata,
)
from chainview.models import (
    ChannelCategory,
    Language,
    License,
    VideoCategory,
    VideoMediaEncoding,
    VideoMediaMetadata,
)
from chainview.models.variants import DataObjectOwner
from chainview.schemas.chain import NewAsset
from chainview.services.assets import extract_asset, extract_video_size, integrate_asset
from chainview.services.consistency import inconsistent_state, omitted
from chainview.services.resolver import get_entity, get_or_create

logger = logging.getLogger(__name__)

MessageT = TypeVar("MessageT", bound=Message)

CHANNEL_SCALARS = ("title", "description", "is_public")
VIDEO_SCALARS = ("title", "description", "duration", "has_marketing", "is_public", "is_explicit")


@dataclass(frozen=True)
class AssetContext:
    """What asset extraction needs to know about the event being applied."""

    assets: list[NewAsset]
    block_number: int
    owner: DataObjectOwner


def deserialize(message_class: type[MessageT], payload: bytes) -> MessageT | None:
    """Parse ```payload``; an undecodable payload is reported and yields ``None``."""
    message = message_class()
    try:
        message.ParseFromString(payload)
    except DecodeError as exc:
        omitted(
            f"Undecodable {message_class.DESCRIPTOR.name} payload",
            error=str(exc),
            size=len(payload),
        )
        return None
    return message


def field_value(message: Message, name: str) -> Any:
    """Return field ``name`` of ``message``, decoding invalid UTF-8 lossily.

    proto2 string fields are not UTF-8 checked on parse and come back as
    ``bytes`` when the payload carries malformed text.
    """
    value = getattr(message, name)
    if isinstance(value, bytes):
        omitted(
            f"Invalid UTF-8 in {message.DESCRIPTOR.name}.{name}",
            size=len(value),
        )
        return value.decode("utf-8", errors="replace")
    return value


def present_fields(message: Message, names: tuple[str, ...]) -> dict[str, Any]:
    return {name: field_value(message, name) for name in names if message.HasField(name)}


def apply_changeset(entity: object, changes: dict[str, Any]) -> None:
    for key, value in changes.items():
        setattr(entity, key, value)


def is_valid_language(iso: str) -> bool:
    if len(iso) != 2 or not iso.isalpha() or not iso.islower():
        return False
    try:
        return pycountry.languages.get(alpha_2=iso) is not None
    except KeyError:
        return False


def prepare_language(db: Session, iso: str, block_number: int) -> Language:
    if not is_valid_language(iso):
        inconsistent_state("Invalid language ISO-639-1 provided", iso=iso)
    return get_or_create(
        db,
        Language,
        {"iso": iso},
        lambda: Language(iso=iso, created_in_block=block_number),
    )


def prepare_license(message: Message) -> License:
    # Always a new row; licenses are never shared or reused.
    return License(**present_fields(message, ("code", "attribution", "custom_text")))


def prepare_video_metadata(
    message: Message,
    size: int | None,
    block_number: int,
) -> VideoMediaMetadata:
    encoding = VideoMediaEncoding(
        **present_fields(message.media_type, ("codec_name", "container", "mime_media_type"))
    )
    media_metadata = VideoMediaMetadata(
        encoding=encoding,
        created_in_block=block_number,
    )
    if message.HasField("media_pixel_width"):
        media_metadata.pixel_width = message.media_pixel_width
    if message.HasField("media_pixel_height"):
        media_metadata.pixel_height = message.media_pixel_height
    if size is not None:
        media_metadata.size = size
    return media_metadata


def prepare_video_category(db: Session, category_id: int) -> VideoCategory:
    return get_entity(db, VideoCategory, str(category_id))


def prepare_channel_category(db: Session, category_id: int) -> ChannelCategory:
    return get_entity(db, ChannelCategory, str(category_id))


def parse_published_date(value: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        omitted("Invalid published-before date", date=value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def read_channel_metadata(db: Session, payload: bytes, context: AssetContext) -> dict[str, Any]:
    message = deserialize(ChannelMetadata, payload)
    if message is None:
        return {}

    changes = present_fields(message, CHANNEL_SCALARS)

    if message.HasField("cover_photo"):
        asset = extract_asset(
            db, context.assets, message.cover_photo, context.block_number, context.owner
        )
        integrate_asset(changes, "cover_photo", asset)

    if message.HasField("avatar_photo"):
        asset = extract_asset(
            db, context.assets, message.avatar_photo, context.block_number, context.owner
        )
        integrate_asset(changes, "avatar_photo", asset)

    if message.HasField("language"):
        language = field_value(message, "language")
        changes["language"] = prepare_language(db, language, context.block_number)

    if message.HasField("category"):
        changes["category"] = prepare_channel_category(db, message.category)

    return changes


def read_video_metadata(db: Session, payload: bytes, context: AssetContext) -> dict[str, Any]:
    """Decode a video payload.

    The published-before date is cleared on every call and set again only when
    the payload carries a parseable date, so an update that omits it clears
    the stored value.
    """
    changes: dict[str, Any] = {"published_before_platform": None}

    message = deserialize(VideoMetadata, payload)
    if message is None:
        return changes

    changes.update(present_fields(message, VIDEO_SCALARS))

    if message.HasField("category"):
        changes["category"] = prepare_video_category(db, message.category)

    if message.HasField("media_type"):
        video_index = message.video if message.HasField("video") else None
        size = extract_video_size(context.assets, video_index)
        changes["media_metadata"] = prepare_video_metadata(message, size, context.block_number)

    if message.HasField("license"):
        changes["license"] = prepare_license(message.license)

    if message.HasField("thumbnail_photo"):
        asset = extract_asset(
            db, context.assets, message.thumbnail_photo, context.block_number, context.owner
        )
        integrate_asset(changes, "thumbnail_photo", asset)

    if message.HasField("video"):
        asset = extract_asset(
            db, context.assets, message.video, context.block_number, context.owner
        )
        integrate_asset(changes, "media", asset)

    if message.HasField("language"):
        language = field_value(message, "language")
        changes["language"] = prepare_language(db, language, context.block_number)

    if message.HasField("published_before_platform"):
        published = message.published_before_platform
        if published.HasField("date"):
            date = field_value(published, "date")
            changes["published_before_platform"] = parse_published_date(date)

    return changes


def read_category_metadata(message_class: type[Message], payload: bytes) -> dict[str, Any]:
    """Decode a channel or video category payload."""
    message = deserialize(message_class, payload)
    if message is None:
        return {}
    return present_fields(message, ("name",))


def read_forum_post_metadata(payload: bytes) -> tuple[str, str | None]:
    """Return the post text and the id of the post it replies to.

    Payloads that are not valid post metadata are taken as raw UTF-8 text.
    """
    message = deserialize(ForumPostMetadata, payload)
    if message is None:
        return payload.decode("utf-8", errors="replace"), None
    text = field_value(message, "text") if message.HasField("text") else ""
    replies_to = str(message.replies_to) if message.HasField("replies_to") else None
    return text, replies_to
