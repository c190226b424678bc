# tests/test_channels.py
"""Channel projection: metadata, asset slots, categories and censorship."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from chainview.models import (
    Channel,
    ChannelCategory,
    ChannelCensorshipUpdatedEvent,
    DataObject,
    Event,
    Language,
    Membership,
)
from chainview.models.variants import AssetAvailability, DataObjectOwner, LiaisonJudgement
from chainview.services.consistency import FatalInconsistency
from tests.builders import (
    channel_category_created,
    channel_category_deleted,
    channel_censorship,
    channel_created,
    channel_metadata,
    channel_updated,
    upload,
    urls,
)


def test_channel_created_with_metadata(db_session, project) -> None:
    meta = channel_metadata(title="Cats", description="All cats", is_public=True, language="en")
    project(channel_created(1, meta))

    channel = db_session.get(Channel, "1")
    assert channel.title == "Cats"
    assert channel.description == "All cats"
    assert channel.is_public is True
    assert channel.is_censored is False
    assert channel.owner_member_id == "1"
    assert channel.language.iso == "en"
    assert db_session.get(Membership, "1") is not None


def test_curator_group_owned_channel(db_session, project) -> None:
    project(channel_created(1, owner={"CuratorGroup": 3}))

    channel = db_session.get(Channel, "1")
    assert channel.owner_member_id is None
    assert channel.owner_curator_group_id == "3"


def test_language_rows_are_shared(db_session, project) -> None:
    project(channel_created(1, channel_metadata(language="de")))
    project(channel_created(2, channel_metadata(language="de")))

    languages = list(db_session.scalars(select(Language)))
    assert [language.iso for language in languages] == ["de"]
    assert languages[0].created_in_block == 1


@pytest.mark.parametrize("iso", ["xx", "EN", "eng"])
def test_invalid_language_is_fatal(db_session, project, iso) -> None:
    with pytest.raises(FatalInconsistency, match="Invalid language"):
        project(channel_created(1, channel_metadata(title="Bad", language=iso)))

    assert db_session.get(Channel, "1") is None


def test_upload_asset_becomes_pending_data_object(db_session, project) -> None:
    meta = channel_metadata(cover_photo=0, avatar_photo=1)
    project(channel_created(1, meta, assets=[upload("0xc0", size=10), urls("https://a/x.png")]))

    data_object = db_session.get(DataObject, "0xc0")
    assert data_object.size == 10
    assert data_object.ipfs_content_id == "QmHash"
    assert data_object.liaison_judgement is LiaisonJudgement.PENDING
    assert data_object.owner == DataObjectOwner.channel("1")
    assert data_object.created_in_block == 1

    channel = db_session.get(Channel, "1")
    assert channel.cover_photo_data_object_id == "0xc0"
    assert channel.cover_photo_urls is None
    assert channel.cover_photo_availability is AssetAvailability.PENDING
    assert channel.avatar_photo_data_object_id is None
    assert channel.avatar_photo_urls == ["https://a/x.png"]
    assert channel.avatar_photo_availability is AssetAvailability.ACCEPTED


def test_asset_index_out_of_range_is_fatal(db_session, project) -> None:
    meta = channel_metadata(cover_photo=1)

    with pytest.raises(FatalInconsistency, match="Non-existing asset"):
        project(channel_created(1, meta, assets=[upload("0xc0")]))

    assert db_session.get(Channel, "1") is None
    assert db_session.get(DataObject, "0xc0") is None
    assert db_session.scalars(select(Event)).all() == []


def test_unreferenced_assets_are_ignored(db_session, project) -> None:
    project(channel_created(1, channel_metadata(title="No art"), assets=[upload("0xc0")]))

    assert db_session.get(DataObject, "0xc0") is None


def test_update_replaces_slot_source(db_session, project) -> None:
    project(channel_created(1, channel_metadata(cover_photo=0), assets=[upload("0xc0")]))
    project(channel_updated(1, channel_metadata(cover_photo=0), assets=[urls("https://b/y.png")]))

    channel = db_session.get(Channel, "1")
    assert channel.cover_photo_data_object_id is None
    assert channel.cover_photo_urls == ["https://b/y.png"]
    assert channel.cover_photo_availability is AssetAvailability.ACCEPTED


def test_update_only_touches_present_fields(db_session, project) -> None:
    project(channel_created(1, channel_metadata(title="Cats", description="All cats")))
    project(channel_updated(1, channel_metadata(description="")))

    channel = db_session.get(Channel, "1")
    assert channel.title == "Cats"
    assert channel.description == ""


def test_update_without_metadata_changes_nothing(db_session, project) -> None:
    project(channel_created(1, channel_metadata(title="Cats")))
    project(channel_updated(1, None))

    assert db_session.get(Channel, "1").title == "Cats"


def test_undecodable_metadata_yields_empty_channel(db_session, project) -> None:
    project(channel_created(1, b"\x0a\x10short"))

    channel = db_session.get(Channel, "1")
    assert channel is not None
    assert channel.title is None


def test_channel_category_assignment_and_deletion(db_session, project) -> None:
    project(channel_category_created(5, "Pets"))
    project(channel_created(1, channel_metadata(category=5)))

    assert db_session.get(ChannelCategory, "5").name == "Pets"
    assert db_session.get(Channel, "1").category_id == "5"

    project(channel_category_deleted(5))

    db_session.expire_all()
    assert db_session.get(ChannelCategory, "5") is None
    assert db_session.get(Channel, "1").category_id is None


def test_missing_channel_category_is_fatal(project) -> None:
    with pytest.raises(FatalInconsistency, match="ChannelCategory not found"):
        project(channel_created(1, channel_metadata(category=5)))


def test_channel_censorship(db_session, project) -> None:
    project(channel_created(1))
    censored = project(channel_censorship(1, True))

    assert db_session.get(Channel, "1").is_censored is True
    record = db_session.get(ChannelCensorshipUpdatedEvent, censored.events[0].event_id)
    assert record.is_censored is True
    assert record.content_actor == "lead"

    project(channel_censorship(1, False))
    assert db_session.get(Channel, "1").is_censored is False
