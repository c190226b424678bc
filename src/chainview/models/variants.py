"""Tagged variants stored on projected entities.

Each variant is an enum tag plus the data that only some tags carry. They are
mapped onto plain columns through SQLAlchemy composites, so a variant is always
read and replaced as a whole.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class StatusKind(str, enum.Enum):
    """Lifecycle tags shared by forum categories, threads and posts."""

    ACTIVE = "active"
    LOCKED = "locked"
    ARCHIVED = "archived"
    REMOVED = "removed"
    MODERATED = "moderated"


@dataclass(frozen=True)
class Status:
    """Lifecycle variant with an optional back-reference to its causing event."""

    kind: StatusKind
    event_id: str | None = None


class PostOriginKind(str, enum.Enum):
    """How a forum post came to exist."""

    THREAD_INITIAL = "thread_initial"
    THREAD_REPLY = "thread_reply"


@dataclass(frozen=True)
class PostOrigin:
    """Origin variant of a post.

    ``event_id`` is the thread-created event for initial posts and the
    post-added event for replies.
    """

    kind: PostOriginKind
    event_id: str | None = None


class DataObjectOwnerKind(str, enum.Enum):
    """Possible owners of a stored data object."""

    MEMBER = "member"
    CHANNEL = "channel"
    CURATOR_GROUP = "curator_group"


@dataclass(frozen=True)
class DataObjectOwner:
    """Owner variant of a data object: the owner kind plus the owner's id."""

    kind: DataObjectOwnerKind
    owner_id: str

    @classmethod
    def channel(cls, channel_id: str) -> DataObjectOwner:
        return cls(DataObjectOwnerKind.CHANNEL, channel_id)


class LiaisonJudgement(str, enum.Enum):
    """Storage provider decision on an uploaded data object."""

    PENDING = "pending"
    ACCEPTED = "accepted"


class AssetAvailability(str, enum.Enum):
    """Read-path availability of an asset slot."""

    ACCEPTED = "accepted"
    PENDING = "pending"
    INVALID = "invalid"


AVAILABILITY_BY_JUDGEMENT: dict[LiaisonJudgement, AssetAvailability] = {
    LiaisonJudgement.ACCEPTED: AssetAvailability.ACCEPTED,
    LiaisonJudgement.PENDING: AssetAvailability.PENDING,
}
