"""SQLAlchemy models for channels, videos and their categories.

Every asset slot (cover photo, avatar photo, thumbnail, media) is stored as
three columns: the referenced data object, a JSON list of URLs and the derived
availability. Exactly one of the first two may be populated; the check
constraints below enforce it and ``chainview.services.assets`` is the only
writer.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chainview.db.session import Base
from chainview.models.storage import DataObject
from chainview.models.variants import AssetAvailability

AVAILABILITY_ENUM = Enum(AssetAvailability, name="asset_availability", native_enum=False, length=16)
# None must land as SQL NULL for the single-source check constraints.
URL_LIST = JSON(none_as_null=True)

CHANNEL_ASSET_SLOTS = ("cover_photo", "avatar_photo")
VIDEO_ASSET_SLOTS = ("thumbnail_photo", "media")


def _exclusive_slot(slot: str) -> CheckConstraint:
    return CheckConstraint(
        f"{slot}_urls IS NULL OR {slot}_data_object_id IS NULL",
        name=f"ck_{slot}_single_source",
    )


class Language(Base):
    """ISO-639-1 language, created on first use."""

    __tablename__ = "language"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    iso: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    created_in_block: Mapped[int] = mapped_column(BigInteger, nullable=False)


class License(Base):
    """License attached to a video; never shared between videos."""

    __tablename__ = "license"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    attribution: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_text: Mapped[str | None] = mapped_column(Text, nullable=True)


class VideoMediaEncoding(Base):
    """Codec and container information copied from video metadata."""

    __tablename__ = "video_media_encoding"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    codec_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    container: Mapped[str | None] = mapped_column(Text, nullable=True)
    mime_media_type: Mapped[str | None] = mapped_column(Text, nullable=True)


class VideoMediaMetadata(Base):
    """Media dimensions and size of a video."""

    __tablename__ = "video_media_metadata"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    encoding_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("video_media_encoding.id"),
        nullable=True,
    )
    pixel_width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pixel_height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Only known when the media asset is an upload.
    size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    created_in_block: Mapped[int] = mapped_column(BigInteger, nullable=False)

    encoding: Mapped[VideoMediaEncoding | None] = relationship(cascade="all")


class ChannelCategory(Base):
    """Category a channel can be filed under."""

    __tablename__ = "channel_category"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_in_block: Mapped[int] = mapped_column(BigInteger, nullable=False)


class VideoCategory(Base):
    """Category a video can be filed under."""

    __tablename__ = "video_category"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_in_block: Mapped[int] = mapped_column(BigInteger, nullable=False)


class Channel(Base):
    """Content channel owned by a member or a curator group."""

    __tablename__ = "channel"
    __table_args__ = tuple(_exclusive_slot(slot) for slot in CHANNEL_ASSET_SLOTS)

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    owner_member_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("membership.id"),
        nullable=True,
    )
    owner_curator_group_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("channel_category.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_censored: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    language_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("language.id"),
        nullable=True,
    )

    cover_photo_data_object_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("data_object.content_id"),
        nullable=True,
    )
    cover_photo_urls: Mapped[list[str] | None] = mapped_column(URL_LIST, nullable=True)
    cover_photo_availability: Mapped[AssetAvailability | None] = mapped_column(
        AVAILABILITY_ENUM,
        nullable=True,
    )

    avatar_photo_data_object_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("data_object.content_id"),
        nullable=True,
    )
    avatar_photo_urls: Mapped[list[str] | None] = mapped_column(URL_LIST, nullable=True)
    avatar_photo_availability: Mapped[AssetAvailability | None] = mapped_column(
        AVAILABILITY_ENUM,
        nullable=True,
    )

    created_in_block: Mapped[int] = mapped_column(BigInteger, nullable=False)

    category: Mapped[ChannelCategory | None] = relationship()
    language: Mapped[Language | None] = relationship()
    cover_photo_data_object: Mapped[DataObject | None] = relationship(
        foreign_keys=[cover_photo_data_object_id],
    )
    avatar_photo_data_object: Mapped[DataObject | None] = relationship(
        foreign_keys=[avatar_photo_data_object_id],
    )
    videos: Mapped[list[Video]] = relationship(back_populates="channel")


class Video(Base):
    """Video published in a channel."""

    __tablename__ = "video"
    __table_args__ = tuple(_exclusive_slot(slot) for slot in VIDEO_ASSET_SLOTS)

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    channel_id: Mapped[str] = mapped_column(Text, ForeignKey("channel.id"), nullable=False)
    category_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("video_category.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    language_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("language.id"),
        nullable=True,
    )
    license_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("license.id"),
        nullable=True,
    )
    media_metadata_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("video_media_metadata.id"),
        nullable=True,
    )
    has_marketing: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    published_before_platform: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    is_public: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_explicit: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_censored: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    thumbnail_photo_data_object_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("data_object.content_id"),
        nullable=True,
    )
    thumbnail_photo_urls: Mapped[list[str] | None] = mapped_column(URL_LIST, nullable=True)
    thumbnail_photo_availability: Mapped[AssetAvailability | None] = mapped_column(
        AVAILABILITY_ENUM,
        nullable=True,
    )

    media_data_object_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("data_object.content_id"),
        nullable=True,
    )
    media_urls: Mapped[list[str] | None] = mapped_column(URL_LIST, nullable=True)
    media_availability: Mapped[AssetAvailability | None] = mapped_column(
        AVAILABILITY_ENUM,
        nullable=True,
    )

    created_in_block: Mapped[int] = mapped_column(BigInteger, nullable=False)

    channel: Mapped[Channel] = relationship(back_populates="videos")
    category: Mapped[VideoCategory | None] = relationship()
    language: Mapped[Language | None] = relationship()
    license: Mapped[License | None] = relationship(cascade="all")
    media_metadata: Mapped[VideoMediaMetadata | None] = relationship(cascade="all")
    thumbnail_photo_data_object: Mapped[DataObject | None] = relationship(
        foreign_keys=[thumbnail_photo_data_object_id],
    )
    media_data_object: Mapped[DataObject | None] = relationship(
        foreign_keys=[media_data_object_id],
    )
