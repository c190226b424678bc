# src/chainview/models/__init__.py
"""SQLAlchemy models for the projected chain state."""

from .block import Block, ProcessorState
from .content import (
    Channel,
    ChannelCategory,
    Language,
    License,
    Video,
    VideoCategory,
    VideoMediaEncoding,
    VideoMediaMetadata,
)
from .events import (
    CategoryCreatedEvent,
    CategoryDeletedEvent,
    CategoryMembershipOfModeratorUpdatedEvent,
    CategoryStickyThreadUpdateEvent,
    CategoryUpdatedEvent,
    ChannelCategoryChangedEvent,
    ChannelCensorshipUpdatedEvent,
    ChannelCreatedEvent,
    ChannelUpdatedEvent,
    ContentAcceptedEvent,
    Event,
    FeaturedVideosSetEvent,
    PostAddedEvent,
    PostDeletedEvent,
    PostModeratedEvent,
    PostTextUpdatedEvent,
    ThreadCreatedEvent,
    ThreadDeletedEvent,
    ThreadModeratedEvent,
    ThreadMovedEvent,
    ThreadTitleUpdatedEvent,
    VideoCategoryChangedEvent,
    VideoCensorshipUpdatedEvent,
    VideoCreatedEvent,
    VideoDeletedEvent,
    VideoUpdatedEvent,
    VoteOnPollEvent,
)
from .forum import ForumCategory, ForumPoll, ForumPollAlternative, ForumPost, ForumThread
from .membership import Membership, Worker, WorkingGroup
from .storage import DataObject

__all__ = [
    "Block", "ProcessorState",
    "Channel", "ChannelCategory", "Language", "License", "Video", "VideoCategory",
    "VideoMediaEncoding", "VideoMediaMetadata",
    "DataObject",
    "ForumCategory", "ForumPoll", "ForumPollAlternative", "ForumPost", "ForumThread",
    "Membership", "Worker", "WorkingGroup",
    "Event",
    "CategoryCreatedEvent", "CategoryDeletedEvent", "CategoryMembershipOfModeratorUpdatedEvent",
    "CategoryStickyThreadUpdateEvent", "CategoryUpdatedEvent",
    "ThreadCreatedEvent", "ThreadDeletedEvent", "ThreadModeratedEvent", "ThreadMovedEvent",
    "ThreadTitleUpdatedEvent", "VoteOnPollEvent",
    "PostAddedEvent", "PostDeletedEvent", "PostModeratedEvent", "PostTextUpdatedEvent",
    "ChannelCategoryChangedEvent", "ChannelCensorshipUpdatedEvent", "ChannelCreatedEvent",
    "ChannelUpdatedEvent",
    "VideoCategoryChangedEvent", "VideoCensorshipUpdatedEvent", "VideoCreatedEvent",
    "VideoDeletedEvent", "VideoUpdatedEvent", "FeaturedVideosSetEvent",
    "ContentAcceptedEvent",
]
