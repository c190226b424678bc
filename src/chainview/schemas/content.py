# src/chainview/schemas/content.py
"""Content directory read-model schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from chainview.models import Channel, Video
from chainview.models.variants import AssetAvailability
from chainview.services.assets import StoredAsset, read_slot


class AssetResponse(BaseModel):
    """One asset slot: either a stored data object or a list of URLs."""

    kind: Literal["stored", "urls"]
    availability: AssetAvailability | None
    data_object_id: str | None = None
    urls: list[str] | None = None

    @classmethod
    def from_slot(cls, entity: Channel | Video, slot: str) -> AssetResponse | None:
        asset = read_slot(entity, slot)
        if asset is None:
            return None
        if isinstance(asset, StoredAsset):
            return cls(
                kind="stored",
                availability=asset.availability,
                data_object_id=asset.data_object_id,
            )
        return cls(kind="urls", availability=asset.availability, urls=asset.urls)


class LicenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: int | None
    attribution: str | None
    custom_text: str | None


class MediaMetadataResponse(BaseModel):
    pixel_width: int | None
    pixel_height: int | None
    size: int | None
    codec_name: str | None
    container: str | None
    mime_media_type: str | None


class ChannelResponse(BaseModel):
    """Schema for channel information returned by the API."""

    id: str
    owner_member_id: str | None
    owner_curator_group_id: str | None
    category_id: str | None
    title: str | None
    description: str | None
    is_public: bool | None
    is_censored: bool
    language: str | None
    cover_photo: AssetResponse | None
    avatar_photo: AssetResponse | None
    created_in_block: int

    @classmethod
    def from_entity(cls, channel: Channel) -> ChannelResponse:
        return cls(
            id=channel.id,
            owner_member_id=channel.owner_member_id,
            owner_curator_group_id=channel.owner_curator_group_id,
            category_id=channel.category_id,
            title=channel.title,
            description=channel.description,
            is_public=channel.is_public,
            is_censored=channel.is_censored,
            language=channel.language.iso if channel.language else None,
            cover_photo=AssetResponse.from_slot(channel, "cover_photo"),
            avatar_photo=AssetResponse.from_slot(channel, "avatar_photo"),
            created_in_block=channel.created_in_block,
        )


class VideoResponse(BaseModel):
    """Schema for video information returned by the API."""

    id: str
    channel_id: str
    category_id: str | None
    title: str | None
    description: str | None
    duration: int | None
    language: str | None
    license: LicenseResponse | None
    media_metadata: MediaMetadataResponse | None
    has_marketing: bool | None
    published_before_platform: datetime | None
    is_public: bool | None
    is_explicit: bool | None
    is_censored: bool
    is_featured: bool
    thumbnail_photo: AssetResponse | None
    media: AssetResponse | None
    created_in_block: int

    @classmethod
    def from_entity(cls, video: Video) -> VideoResponse:
        media_metadata = None
        if video.media_metadata is not None:
            encoding = video.media_metadata.encoding
            media_metadata = MediaMetadataResponse(
                pixel_width=video.media_metadata.pixel_width,
                pixel_height=video.media_metadata.pixel_height,
                size=video.media_metadata.size,
                codec_name=encoding.codec_name if encoding else None,
                container=encoding.container if encoding else None,
                mime_media_type=encoding.mime_media_type if encoding else None,
            )

        return cls(
            id=video.id,
            channel_id=video.channel_id,
            category_id=video.category_id,
            title=video.title,
            description=video.description,
            duration=video.duration,
            language=video.language.iso if video.language else None,
            license=LicenseResponse.model_validate(video.license) if video.license else None,
            media_metadata=media_metadata,
            has_marketing=video.has_marketing,
            published_before_platform=video.published_before_platform,
            is_public=video.is_public,
            is_explicit=video.is_explicit,
            is_censored=video.is_censored,
            is_featured=video.is_featured,
            thumbnail_photo=AssetResponse.from_slot(video, "thumbnail_photo"),
            media=AssetResponse.from_slot(video, "media"),
            created_in_block=video.created_in_block,
        )
