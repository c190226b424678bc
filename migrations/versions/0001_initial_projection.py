"""initial projection schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Non-native enums are stored as their member names.
TAG = sa.String(length=16)


def _asset_slot(slot: str) -> list[sa.Column]:
    return [
        sa.Column(f"{slot}_data_object_id", sa.Text(), nullable=True),
        sa.Column(f"{slot}_urls", sa.JSON(), nullable=True),
        sa.Column(f"{slot}_availability", TAG, nullable=True),
    ]


def _asset_constraints(slot: str) -> list[sa.Constraint]:
    return [
        sa.ForeignKeyConstraint([f"{slot}_data_object_id"], ["data_object.content_id"]),
        sa.CheckConstraint(
            f"{slot}_urls IS NULL OR {slot}_data_object_id IS NULL",
            name=f"ck_{slot}_single_source",
        ),
    ]


def upgrade() -> None:
    """Create the projected chain state tables."""
    op.create_table(
        "block",
        sa.Column("number", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("executed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("network", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("number"),
    )
    op.create_table(
        "processor_state",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("last_processed_block", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "membership",
        sa.Column("id", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "working_group",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "worker",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("group_id", sa.Text(), nullable=False),
        sa.Column("runtime_id", sa.Integer(), nullable=False),
        sa.Column("is_lead", sa.Boolean(), nullable=False),
        sa.Column("membership_id", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["group_id"], ["working_group.id"]),
        sa.ForeignKeyConstraint(["membership_id"], ["membership.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("group_id", "runtime_id"),
    )

    op.create_table(
        "forum_category",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("parent_id", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", TAG, nullable=False),
        sa.Column("status_event_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["parent_id"], ["forum_category.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "forum_category_moderator",
        sa.Column("category_id", sa.Text(), nullable=False),
        sa.Column("worker_id", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["forum_category.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["worker_id"], ["worker.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("category_id", "worker_id"),
    )
    op.create_table(
        "forum_thread",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("category_id", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("is_sticky", sa.Boolean(), nullable=False),
        sa.Column("status", TAG, nullable=False),
        sa.Column("status_event_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["forum_category.id"]),
        sa.ForeignKeyConstraint(["author_id"], ["membership.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "forum_poll",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("thread_id", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["thread_id"], ["forum_thread.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("thread_id"),
    )
    op.create_table(
        "forum_poll_alternative",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("poll_id", sa.Integer(), nullable=False),
        sa.Column("index", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["poll_id"], ["forum_poll.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("poll_id", "index"),
    )
    op.create_table(
        "forum_post",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("thread_id", sa.Text(), nullable=False),
        sa.Column("author_id", sa.Text(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("replies_to_id", sa.Text(), nullable=True),
        sa.Column("status", TAG, nullable=False),
        sa.Column("status_event_id", sa.Text(), nullable=True),
        sa.Column("origin", TAG, nullable=False),
        sa.Column("origin_event_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["thread_id"], ["forum_thread.id"]),
        sa.ForeignKeyConstraint(["author_id"], ["membership.id"]),
        sa.ForeignKeyConstraint(["replies_to_id"], ["forum_post.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "data_object",
        sa.Column("content_id", sa.Text(), nullable=False),
        sa.Column("ipfs_content_id", sa.Text(), nullable=False),
        sa.Column("type_id", sa.Integer(), nullable=False),
        sa.Column("size", sa.BigInteger(), nullable=False),
        sa.Column("created_in_block", sa.BigInteger(), nullable=False),
        sa.Column("owner", TAG, nullable=False),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("liaison_judgement", TAG, nullable=False),
        sa.PrimaryKeyConstraint("content_id"),
    )
    op.create_table(
        "language",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("iso", sa.Text(), nullable=False),
        sa.Column("created_in_block", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("iso"),
    )
    op.create_table(
        "license",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.Integer(), nullable=True),
        sa.Column("attribution", sa.Text(), nullable=True),
        sa.Column("custom_text", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "video_media_encoding",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("codec_name", sa.Text(), nullable=True),
        sa.Column("container", sa.Text(), nullable=True),
        sa.Column("mime_media_type", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "video_media_metadata",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("encoding_id", sa.Integer(), nullable=True),
        sa.Column("pixel_width", sa.Integer(), nullable=True),
        sa.Column("pixel_height", sa.Integer(), nullable=True),
        sa.Column("size", sa.BigInteger(), nullable=True),
        sa.Column("created_in_block", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["encoding_id"], ["video_media_encoding.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    for table in ("channel_category", "video_category"):
        op.create_table(
            table,
            sa.Column("id", sa.Text(), nullable=False),
            sa.Column("name", sa.Text(), nullable=True),
            sa.Column("created_in_block", sa.BigInteger(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )

    op.create_table(
        "channel",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("owner_member_id", sa.Text(), nullable=True),
        sa.Column("owner_curator_group_id", sa.Text(), nullable=True),
        sa.Column("category_id", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=True),
        sa.Column("is_censored", sa.Boolean(), nullable=False),
        sa.Column("language_id", sa.Integer(), nullable=True),
        *_asset_slot("cover_photo"),
        *_asset_slot("avatar_photo"),
        sa.Column("created_in_block", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["owner_member_id"], ["membership.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["channel_category.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["language_id"], ["language.id"]),
        *_asset_constraints("cover_photo"),
        *_asset_constraints("avatar_photo"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "video",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("channel_id", sa.Text(), nullable=False),
        sa.Column("category_id", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("language_id", sa.Integer(), nullable=True),
        sa.Column("license_id", sa.Integer(), nullable=True),
        sa.Column("media_metadata_id", sa.Integer(), nullable=True),
        sa.Column("has_marketing", sa.Boolean(), nullable=True),
        sa.Column("published_before_platform", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=True),
        sa.Column("is_explicit", sa.Boolean(), nullable=True),
        sa.Column("is_censored", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        *_asset_slot("thumbnail_photo"),
        *_asset_slot("media"),
        sa.Column("created_in_block", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["channel_id"], ["channel.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["video_category.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["language_id"], ["language.id"]),
        sa.ForeignKeyConstraint(["license_id"], ["license.id"]),
        sa.ForeignKeyConstraint(["media_metadata_id"], ["video_media_metadata.id"]),
        *_asset_constraints("thumbnail_photo"),
        *_asset_constraints("media"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "event",
        sa.Column("id", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("in_block", sa.BigInteger(), nullable=False),
        sa.Column("in_extrinsic", sa.Text(), nullable=True),
        sa.Column("index_in_block", sa.Integer(), nullable=False),
        sa.Column("network", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("category_id", sa.Text(), nullable=True),
        sa.Column("thread_id", sa.Text(), nullable=True),
        sa.Column("post_id", sa.Text(), nullable=True),
        sa.Column("actor_id", sa.Text(), nullable=True),
        sa.Column("member_id", sa.Text(), nullable=True),
        sa.Column("channel_id", sa.Text(), nullable=True),
        sa.Column("video_id", sa.Text(), nullable=True),
        sa.Column("content_actor", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("text", sa.Text(), nullable=True),
        sa.Column("rationale", sa.Text(), nullable=True),
        sa.Column("hide", sa.Boolean(), nullable=True),
        sa.Column("new_archival_status", sa.Boolean(), nullable=True),
        sa.Column("old_category_id", sa.Text(), nullable=True),
        sa.Column("new_category_id", sa.Text(), nullable=True),
        sa.Column("poll_alternative_id", sa.Integer(), nullable=True),
        sa.Column("is_editable", sa.Boolean(), nullable=True),
        sa.Column("new_sticky_thread_ids", sa.JSON(), nullable=True),
        sa.Column("moderator_id", sa.Text(), nullable=True),
        sa.Column("new_can_moderate_value", sa.Boolean(), nullable=True),
        sa.Column("is_censored", sa.Boolean(), nullable=True),
        sa.Column("channel_category_id", sa.Text(), nullable=True),
        sa.Column("video_category_id", sa.Text(), nullable=True),
        sa.Column("action", sa.Text(), nullable=True),
        sa.Column("new_featured_video_ids", sa.JSON(), nullable=True),
        sa.Column("content_id", sa.Text(), nullable=True),
        sa.Column("storage_provider_id", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_event_type", "event", ["type"])
    op.create_index("ix_event_in_block", "event", ["in_block"])


def downgrade() -> None:
    """Drop the projected chain state tables."""
    op.drop_index("ix_event_in_block", table_name="event")
    op.drop_index("ix_event_type", table_name="event")
    for table in (
        "event",
        "video",
        "channel",
        "video_category",
        "channel_category",
        "video_media_metadata",
        "video_media_encoding",
        "license",
        "language",
        "data_object",
        "forum_post",
        "forum_poll_alternative",
        "forum_poll",
        "forum_thread",
        "forum_category_moderator",
        "forum_category",
        "worker",
        "working_group",
        "membership",
        "processor_state",
        "block",
    ):
        op.drop_table(table)
