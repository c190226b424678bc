# tests/builders.py
"""Builders for chain-JSON events and metadata payloads used across tests."""

from __future__ import annotations

from typing import Any

from chainview.metadata.proto import (
    ChannelCategoryMetadata,
    ChannelMetadata,
    ForumPostMetadata,
    VideoCategoryMetadata,
    VideoMetadata,
)

# 2021-06-01T00:00:00Z in milliseconds.
GENESIS_TIMESTAMP = 1_622_505_600_000
BLOCK_TIME_MS = 6_000

LEAD = "Lead"
MEMBER_ACTOR = {"Member": 1}


def moderator(runtime_id: int) -> dict[str, int]:
    return {"Moderator": runtime_id}


def hexed(value: str | bytes) -> str:
    if isinstance(value, str):
        value = value.encode("utf-8")
    return "0x" + value.hex()


# Forum


def category_created(category_id: int, title: str = "General", parent_id: int | None = None):
    return ("forum", "CategoryCreated", [category_id, parent_id, hexed(title), hexed(f"{title} talk")])


def category_updated(category_id: int, archived: bool, actor: Any = LEAD):
    return ("forum", "CategoryUpdated", [category_id, archived, actor])


def category_deleted(category_id: int, actor: Any = LEAD):
    return ("forum", "CategoryDeleted", [category_id, actor])


def thread_created(
    category_id: int,
    thread_id: int,
    post_id: int,
    author_id: int = 1,
    title: str = "Hello",
    text: str = "First!",
    poll: dict[str, Any] | None = None,
):
    return (
        "forum",
        "ThreadCreated",
        [category_id, thread_id, post_id, author_id, hexed(title), hexed(text), poll],
    )


def poll(description: str, end_time: int, *alternatives: str) -> dict[str, Any]:
    return {
        "description_hash": hexed(description),
        "end_time": end_time,
        "poll_alternatives": [{"alternative_text_hash": hexed(text)} for text in alternatives],
    }


def thread_moderated(thread_id: int, actor: Any = LEAD, rationale: str = "spam"):
    return ("forum", "ThreadModerated", [thread_id, hexed(rationale), actor, 1])


def thread_title_updated(thread_id: int, title: str, member_id: int = 1, category_id: int = 1):
    return ("forum", "ThreadTitleUpdated", [thread_id, member_id, category_id, hexed(title)])


def thread_deleted(thread_id: int, hide: bool, member_id: int = 1, category_id: int = 1):
    return ("forum", "ThreadDeleted", [thread_id, member_id, category_id, hide])


def thread_moved(thread_id: int, new_category_id: int, old_category_id: int, actor: Any = LEAD):
    return ("forum", "ThreadMoved", [thread_id, new_category_id, actor, old_category_id])


def vote_on_poll(thread_id: int, index: int, member_id: int = 2, category_id: int = 1):
    return ("forum", "VoteOnPoll", [thread_id, index, member_id, category_id])


def post_metadata(text: str | None = None, replies_to: int | None = None) -> bytes:
    message = ForumPostMetadata()
    if text is not None:
        message.text = text
    if replies_to is not None:
        message.replies_to = replies_to
    return message.SerializeToString()


def post_added(
    post_id: int,
    thread_id: int,
    payload: bytes,
    is_editable: bool = True,
    author_id: int = 2,
    category_id: int = 1,
):
    return (
        "forum",
        "PostAdded",
        [post_id, author_id, category_id, thread_id, hexed(payload), is_editable],
    )


def post_moderated(post_id: int, actor: Any = LEAD, rationale: str = "off-topic"):
    return ("forum", "PostModerated", [post_id, hexed(rationale), actor, 1, 1])


def post_text_updated(post_id: int, text: str, member_id: int = 2):
    return ("forum", "PostTextUpdated", [post_id, member_id, 1, 1, hexed(text)])


def post_deleted(post_id: int, hide: bool, member_id: int = 2, rationale: str = "oops"):
    return ("forum", "PostDeleted", [post_id, member_id, hexed(rationale), hide])


def sticky_threads(category_id: int, thread_ids: list[int], actor: Any = LEAD):
    return ("forum", "CategoryStickyThreadUpdate", [category_id, thread_ids, actor])


def moderator_membership(runtime_id: int, category_id: int, can_moderate: bool):
    return ("forum", "CategoryMembershipOfModeratorUpdated", [runtime_id, category_id, can_moderate])


# Content


def upload(content_id: str, size: int = 1024, ipfs: str = "QmHash", type_id: int = 1):
    return {
        "Upload": {
            "content_id": content_id,
            "ipfs_content_id": hexed(ipfs),
            "type_id": type_id,
            "size": size,
        }
    }


def urls(*values: str):
    return {"Urls": [hexed(value) for value in values]}


def channel_metadata(**fields: Any) -> bytes:
    return ChannelMetadata(**fields).SerializeToString()


def video_metadata(**fields: Any) -> bytes:
    return VideoMetadata(**fields).SerializeToString()


def channel_created(
    channel_id: int,
    meta: bytes = b"",
    assets: list[Any] | None = None,
    owner: Any = None,
):
    return (
        "content",
        "ChannelCreated",
        [
            channel_id,
            owner if owner is not None else {"Member": 1},
            assets or [],
            {"meta": hexed(meta), "reward_account": None},
        ],
    )


def channel_updated(channel_id: int, meta: bytes | None, assets: list[Any] | None = None):
    return (
        "content",
        "ChannelUpdated",
        [
            MEMBER_ACTOR,
            channel_id,
            {},
            {"new_meta": hexed(meta) if meta is not None else None, "assets": assets},
        ],
    )


def channel_censorship(channel_id: int, censored: bool):
    name = "ChannelCensored" if censored else "ChannelUncensored"
    return ("content", name, [LEAD, channel_id, hexed("rules")])


def channel_category_created(category_id: int, name: str):
    meta = ChannelCategoryMetadata(name=name).SerializeToString()
    return ("content", "ChannelCategoryCreated", [category_id, {}, {"meta": hexed(meta)}])


def channel_category_deleted(category_id: int):
    return ("content", "ChannelCategoryDeleted", [LEAD, category_id])


def video_category_created(category_id: int, name: str):
    meta = VideoCategoryMetadata(name=name).SerializeToString()
    return ("content", "VideoCategoryCreated", [LEAD, category_id, {"meta": hexed(meta)}])


def video_category_updated(category_id: int, name: str):
    meta = VideoCategoryMetadata(name=name).SerializeToString()
    return ("content", "VideoCategoryUpdated", [LEAD, category_id, {"new_meta": hexed(meta)}])


def video_category_deleted(category_id: int):
    return ("content", "VideoCategoryDeleted", [LEAD, category_id])


def video_created(
    channel_id: int,
    video_id: int,
    meta: bytes = b"",
    assets: list[Any] | None = None,
    actor: Any = MEMBER_ACTOR,
):
    return (
        "content",
        "VideoCreated",
        [actor, channel_id, video_id, {"assets": assets or [], "meta": hexed(meta)}],
    )


def video_updated(video_id: int, meta: bytes | None, assets: list[Any] | None = None):
    return (
        "content",
        "VideoUpdated",
        [
            MEMBER_ACTOR,
            video_id,
            {"assets": assets, "new_meta": hexed(meta) if meta is not None else None},
        ],
    )


def video_deleted(video_id: int):
    return ("content", "VideoDeleted", [MEMBER_ACTOR, video_id])


def video_censorship(video_id: int, censored: bool):
    name = "VideoCensored" if censored else "VideoUncensored"
    return ("content", name, [LEAD, video_id, hexed("rules")])


def featured_videos(*video_ids: int):
    return ("content", "FeaturedVideosSet", [LEAD, list(video_ids)])


# Storage


def content_accepted(content_id: str, provider_id: int = 7):
    return ("storage", "ContentAccepted", [content_id, provider_id])
