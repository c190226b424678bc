# tests/test_chain_schemas.py
"""Parsing of chain-JSON parameters."""

from __future__ import annotations

import pytest

from chainview.schemas.chain import (
    ChainEvent,
    CuratorContentActor,
    LeadActor,
    LeadContentActor,
    MemberContentActor,
    ModeratorActor,
    PollInput,
    UploadAsset,
    UrlsAsset,
    as_id,
    bytes_to_string,
    parse_content_actor,
    parse_new_assets,
    parse_privileged_actor,
    to_bytes,
)


def test_to_bytes_accepts_chain_encodings() -> None:
    assert to_bytes("0x6869") == b"hi"
    assert to_bytes("hi") == b"hi"
    assert to_bytes([104, 105]) == b"hi"
    assert to_bytes(None) == b""
    assert bytes_to_string("0xff") == "\ufffd"


@pytest.mark.parametrize("value", [True, -1, "1a", 1.5])
def test_as_id_rejects_non_ids(value) -> None:
    with pytest.raises((TypeError, ValueError)):
        as_id(value)


def test_privileged_actor_variants() -> None:
    assert parse_privileged_actor("Lead") == LeadActor()
    assert parse_privileged_actor({"Moderator": 4}) == ModeratorActor(runtime_id=4)
    with pytest.raises(ValueError):
        parse_privileged_actor({"Council": 1})


def test_content_actor_labels() -> None:
    assert parse_content_actor("Lead") == LeadContentActor()
    assert parse_content_actor({"Curator": [2, 3]}) == CuratorContentActor(group_id="2", curator_id="3")
    assert parse_content_actor({"Member": 9}).label() == "member:9"
    assert MemberContentActor(member_id="9") == parse_content_actor({"Member": "9"})
    assert CuratorContentActor(group_id="2", curator_id="3").label() == "curator:2:3"


def test_new_assets() -> None:
    assets = parse_new_assets(
        [
            {"Urls": ["0x687474703a2f2f61"]},
            {"Upload": {"content_id": "0x01", "ipfs_content_id": "0x516d", "type_id": 1, "size": 3}},
        ]
    )

    assert assets == [
        UrlsAsset(urls=["http://a"]),
        UploadAsset(content_id="0x01", ipfs_content_id="Qm", type_id=1, size=3),
    ]
    assert parse_new_assets(None) == []


def test_poll_input_decodes_hashes() -> None:
    parsed = PollInput.model_validate(
        {
            "description_hash": "0x51",
            "end_time": 1_000,
            "poll_alternatives": [{"alternative_text_hash": "0x41"}, "0x42"],
        }
    )

    assert parsed.description == "Q"
    assert parsed.alternatives == ["A", "B"]
    assert parsed.end_at.year == 1970


def test_missing_parameter_raises_index_error() -> None:
    event = ChainEvent(domain="forum", name="X", params=[1], block_number=1, block_timestamp=0, index_in_block=0)

    assert event.param(0) == 1
    with pytest.raises(IndexError):
        event.param(1)
