"""SQLAlchemy models for the projected forum."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, composite, mapped_column, relationship

from chainview.db.session import Base
from chainview.models.membership import Membership, Worker
from chainview.models.variants import PostOrigin, PostOriginKind, Status, StatusKind

STATUS_ENUM = Enum(StatusKind, name="status_kind", native_enum=False, length=16)

forum_category_moderator = Table(
    "forum_category_moderator",
    Base.metadata,
    Column("category_id", Text, ForeignKey("forum_category.id", ondelete="CASCADE"), primary_key=True),
    Column("worker_id", Text, ForeignKey("worker.id", ondelete="CASCADE"), primary_key=True),
)


class ForumCategory(Base):
    """Forum category; categories nest through an optional parent link."""

    __tablename__ = "forum_category"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    # Not cycle-checked; the runtime guarantees a tree.
    parent_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("forum_category.id"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status_kind: Mapped[StatusKind] = mapped_column("status", STATUS_ENUM, nullable=False)
    status_event_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[Status] = composite("status_kind", "status_event_id")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    parent: Mapped[ForumCategory | None] = relationship(remote_side=[id])
    moderators: Mapped[list[Worker]] = relationship(secondary=forum_category_moderator)
    threads: Mapped[list[ForumThread]] = relationship(back_populates="category")


class ForumThread(Base):
    """Forum thread with its lifecycle status and optional poll."""

    __tablename__ = "forum_thread"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    category_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("forum_category.id"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(Text, ForeignKey("membership.id"), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    is_sticky: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    status_kind: Mapped[StatusKind] = mapped_column("status", STATUS_ENUM, nullable=False)
    status_event_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[Status] = composite("status_kind", "status_event_id")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    category: Mapped[ForumCategory] = relationship(back_populates="threads")
    author: Mapped[Membership] = relationship()
    poll: Mapped[ForumPoll | None] = relationship(
        back_populates="thread",
        cascade="all, delete-orphan",
        uselist=False,
    )
    posts: Mapped[list[ForumPost]] = relationship(back_populates="thread")


class ForumPoll(Base):
    """Poll attached to a thread at creation time."""

    __tablename__ = "forum_poll"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    thread_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("forum_thread.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    thread: Mapped[ForumThread] = relationship(back_populates="poll")
    alternatives: Mapped[list[ForumPollAlternative]] = relationship(
        back_populates="poll",
        cascade="all, delete-orphan",
        order_by="ForumPollAlternative.index",
    )


class ForumPollAlternative(Base):
    """One answer of a poll, addressed by its position."""

    __tablename__ = "forum_poll_alternative"
    __table_args__ = (UniqueConstraint("poll_id", "index"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    poll_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_poll.id", ondelete="CASCADE"),
        nullable=False,
    )
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    poll: Mapped[ForumPoll] = relationship(back_populates="alternatives")


class ForumPost(Base):
    """Forum post with lifecycle status and origin variants."""

    __tablename__ = "forum_post"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    thread_id: Mapped[str] = mapped_column(Text, ForeignKey("forum_thread.id"), nullable=False)
    author_id: Mapped[str] = mapped_column(Text, ForeignKey("membership.id"), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    replies_to_id: Mapped[str | None] = mapped_column(
        Text,
        ForeignKey("forum_post.id"),
        nullable=True,
    )

    status_kind: Mapped[StatusKind] = mapped_column("status", STATUS_ENUM, nullable=False)
    status_event_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[Status] = composite("status_kind", "status_event_id")

    origin_kind: Mapped[PostOriginKind] = mapped_column(
        "origin",
        Enum(PostOriginKind, name="post_origin_kind", native_enum=False, length=16),
        nullable=False,
    )
    origin_event_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    origin: Mapped[PostOrigin] = composite("origin_kind", "origin_event_id")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    thread: Mapped[ForumThread] = relationship(back_populates="posts")
    author: Mapped[Membership] = relationship()
    replies_to: Mapped[ForumPost | None] = relationship(remote_side=[id])
