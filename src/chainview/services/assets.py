"""Resolution of positional asset references into asset slots.

Content events carry a vector of raw assets and metadata that points into it
by index. Each referenced asset becomes either a stored data object or a
plain URL list on the entity's slot, never both.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from chainview.models import Channel, DataObject, Video
from chainview.models.content import CHANNEL_ASSET_SLOTS, VIDEO_ASSET_SLOTS
from chainview.models.variants import (
    AVAILABILITY_BY_JUDGEMENT,
    AssetAvailability,
    DataObjectOwner,
    LiaisonJudgement,
)
from chainview.schemas.chain import ContentActor, NewAsset, UploadAsset, UrlsAsset
from chainview.services.consistency import inconsistent_state
from chainview.services.resolver import ensure_absent

logger = logging.getLogger(__name__)

# An asset as it lands on a slot: a stored object or the list of its URLs.
ResolvedAsset = DataObject | list[str]


@dataclass(frozen=True)
class StoredAsset:
    data_object_id: str
    availability: AssetAvailability


@dataclass(frozen=True)
class UrlAsset:
    urls: list[str]
    availability: AssetAvailability


AssetSlot = StoredAsset | UrlAsset


def owner_for_content_actor(actor: ContentActor, channel_id: str) -> DataObjectOwner:
    """Owner of objects uploaded through a channel or video event.

    Content always belongs to the channel, whoever the acting party is.
    """
    return DataObjectOwner.channel(channel_id)


def check_asset_index(index: int, assets: list[NewAsset]) -> None:
    if not 0 <= index < len(assets):
        inconsistent_state(
            "Non-existing asset extraction requested",
            assets_provided=len(assets),
            asset_index=index,
        )


def prepare_data_object(
    db: Session,
    upload: UploadAsset,
    block_number: int,
    owner: DataObjectOwner,
) -> DataObject:
    ensure_absent(db, DataObject, upload.content_id)

    data_object = DataObject(
        content_id=upload.content_id,
        ipfs_content_id=upload.ipfs_content_id,
        type_id=upload.type_id,
        size=upload.size,
        created_in_block=block_number,
        owner=owner,
        liaison_judgement=LiaisonJudgement.PENDING,
    )
    db.add(data_object)
    db.flush()
    return data_object


def convert_asset(
    db: Session,
    raw_asset: NewAsset,
    block_number: int,
    owner: DataObjectOwner,
) -> ResolvedAsset:
    if isinstance(raw_asset, UrlsAsset):
        return list(raw_asset.urls)
    return prepare_data_object(db, raw_asset, block_number, owner)


def extract_asset(
    db: Session,
    assets: list[NewAsset],
    index: int,
    block_number: int,
    owner: DataObjectOwner,
) -> ResolvedAsset:
    """Select the asset at ``index`` and turn it into its stored form."""
    check_asset_index(index, assets)
    return convert_asset(db, assets[index], block_number, owner)


def integrate_asset(changes: dict[str, Any], slot: str, asset: ResolvedAsset) -> None:
    """Write the three slot fields for ``asset`` into ``changes``."""
    if isinstance(asset, list):
        changes[f"{slot}_urls"] = asset
        changes[f"{slot}_data_object"] = None
        changes[f"{slot}_availability"] = AssetAvailability.ACCEPTED
        return

    changes[f"{slot}_urls"] = None
    changes[f"{slot}_data_object"] = asset
    changes[f"{slot}_availability"] = AVAILABILITY_BY_JUDGEMENT.get(
        asset.liaison_judgement,
        AssetAvailability.INVALID,
    )


def extract_video_size(assets: list[NewAsset], index: int | None) -> int | None:
    """Byte size of the media asset when it is an upload; URLs carry no size."""
    if index is None:
        return None
    check_asset_index(index, assets)
    raw_asset = assets[index]
    if isinstance(raw_asset, UrlsAsset):
        return None
    return raw_asset.size


def read_slot(entity: Channel | Video, slot: str) -> AssetSlot | None:
    """Read one slot back as a single tagged value."""
    availability = getattr(entity, f"{slot}_availability")
    data_object_id = getattr(entity, f"{slot}_data_object_id")
    urls = getattr(entity, f"{slot}_urls")
    if data_object_id is not None:
        return StoredAsset(data_object_id, availability)
    if urls is not None:
        return UrlAsset(list(urls), availability)
    return None


def refresh_availability(db: Session, data_object: DataObject) -> int:
    """Re-derive availability on every slot that references ``data_object``.

    Returns the number of slots updated.
    """
    availability = AVAILABILITY_BY_JUDGEMENT.get(
        data_object.liaison_judgement,
        AssetAvailability.INVALID,
    )
    updated = 0
    for model, slots in ((Channel, CHANNEL_ASSET_SLOTS), (Video, VIDEO_ASSET_SLOTS)):
        columns = [getattr(model, f"{slot}_data_object_id") for slot in slots]
        stmt = select(model).where(or_(*(column == data_object.content_id for column in columns)))
        for entity in db.scalars(stmt):
            for slot in slots:
                if getattr(entity, f"{slot}_data_object_id") == data_object.content_id:
                    setattr(entity, f"{slot}_availability", availability)
                    updated += 1
    logger.debug(
        "Refreshed availability of %d slot(s) for data object %s",
        updated,
        data_object.content_id,
    )
    return updated
