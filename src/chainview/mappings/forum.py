"""Forum event handlers."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from chainview.core.settings import settings
from chainview.metadata.decode import read_forum_post_metadata
from chainview.models import (
    CategoryCreatedEvent,
    CategoryDeletedEvent,
    CategoryMembershipOfModeratorUpdatedEvent,
    CategoryStickyThreadUpdateEvent,
    CategoryUpdatedEvent,
    ForumCategory,
    ForumPoll,
    ForumPollAlternative,
    ForumPost,
    ForumThread,
    Membership,
    PostAddedEvent,
    PostDeletedEvent,
    PostModeratedEvent,
    PostTextUpdatedEvent,
    ThreadCreatedEvent,
    ThreadDeletedEvent,
    ThreadModeratedEvent,
    ThreadMovedEvent,
    ThreadTitleUpdatedEvent,
    VoteOnPollEvent,
)
from chainview.models.variants import PostOrigin, PostOriginKind
from chainview.mappings import handles
from chainview.schemas.chain import (
    ChainEvent,
    PollInput,
    as_bool,
    as_id,
    as_int,
    bytes_to_string,
    parse_privileged_actor,
    to_bytes,
)
from chainview.services import status
from chainview.services.collections import replace_flagged_set
from chainview.services.consistency import omitted
from chainview.services.event_log import record_event
from chainview.services.resolver import (
    ensure_absent,
    get_actor_worker,
    get_entity,
    get_optional,
    get_poll_alternative,
    get_worker,
    upsert_stub,
)

logger = logging.getLogger(__name__)


@handles("forum", "CategoryCreated")
def category_created(db: Session, event: ChainEvent) -> None:
    category_id = as_id(event.param(0))
    parent_id = event.param(1)
    title = bytes_to_string(event.param(2))
    description = bytes_to_string(event.param(3))

    ensure_absent(db, ForumCategory, category_id)
    # Parent links are not checked for cycles; the runtime only builds trees.
    parent = get_entity(db, ForumCategory, as_id(parent_id)) if parent_id is not None else None

    category = ForumCategory(
        id=category_id,
        parent=parent,
        title=title,
        description=description,
        status=status.initial_status(),
        created_at=event.created_at,
        updated_at=event.created_at,
    )
    db.add(category)
    record_event(db, CategoryCreatedEvent, event, category_id=category_id)


@handles("forum", "CategoryUpdated")
def category_updated(db: Session, event: ChainEvent) -> None:
    category = get_entity(db, ForumCategory, as_id(event.param(0)))
    archived = as_bool(event.param(1))
    actor = get_actor_worker(db, parse_privileged_actor(event.param(2)))

    record = record_event(
        db,
        CategoryUpdatedEvent,
        event,
        category_id=category.id,
        actor_id=actor.id,
        new_archival_status=archived,
    )
    status.archive_category(category, archived, record.id, event.created_at)


@handles("forum", "CategoryDeleted")
def category_deleted(db: Session, event: ChainEvent) -> None:
    category = get_entity(db, ForumCategory, as_id(event.param(0)))
    actor = get_actor_worker(db, parse_privileged_actor(event.param(1)))

    record = record_event(
        db,
        CategoryDeletedEvent,
        event,
        category_id=category.id,
        actor_id=actor.id,
    )
    status.remove_category(category, record.id, event.created_at)


@handles("forum", "ThreadCreated")
def thread_created(db: Session, event: ChainEvent) -> None:
    """Create the thread, its optional poll and its initial post."""
    category = get_entity(db, ForumCategory, as_id(event.param(0)))
    thread_id = as_id(event.param(1))
    post_id = as_id(event.param(2))
    author = upsert_stub(db, Membership, as_id(event.param(3)))
    title = bytes_to_string(event.param(4))
    text = bytes_to_string(event.param(5))
    raw_poll = event.param(6)

    ensure_absent(db, ForumThread, thread_id)
    ensure_absent(db, ForumPost, post_id)
    at = event.created_at

    thread = ForumThread(
        id=thread_id,
        category=category,
        author=author,
        title=title,
        is_sticky=False,
        status=status.initial_status(),
        created_at=at,
        updated_at=at,
    )
    db.add(thread)

    if raw_poll is not None:
        poll_input = PollInput.model_validate(raw_poll)
        thread.poll = ForumPoll(
            description=poll_input.description,
            end_time=poll_input.end_at,
            created_at=at,
            alternatives=[
                ForumPollAlternative(index=index, text=alternative)
                for index, alternative in enumerate(poll_input.alternatives)
            ],
        )

    record = record_event(
        db,
        ThreadCreatedEvent,
        event,
        category_id=category.id,
        thread_id=thread_id,
        post_id=post_id,
        member_id=author.id,
        title=title,
        text=text,
    )

    db.add(
        ForumPost(
            id=post_id,
            thread=thread,
            author=author,
            text=text,
            status=status.initial_status(),
            origin=PostOrigin(PostOriginKind.THREAD_INITIAL, record.id),
            created_at=at,
            updated_at=at,
        )
    )


@handles("forum", "ThreadModerated")
def thread_moderated(db: Session, event: ChainEvent) -> None:
    thread = get_entity(db, ForumThread, as_id(event.param(0)))
    rationale = bytes_to_string(event.param(1))
    actor = get_actor_worker(db, parse_privileged_actor(event.param(2)))

    record = record_event(
        db,
        ThreadModeratedEvent,
        event,
        thread_id=thread.id,
        actor_id=actor.id,
        rationale=rationale,
    )
    status.moderate_thread(thread, record.id, event.created_at)


@handles("forum", "ThreadTitleUpdated")
def thread_title_updated(db: Session, event: ChainEvent) -> None:
    thread = get_entity(db, ForumThread, as_id(event.param(0)))
    member_id = as_id(event.param(1))
    new_title = bytes_to_string(event.param(3))

    record_event(
        db,
        ThreadTitleUpdatedEvent,
        event,
        thread_id=thread.id,
        category_id=thread.category_id,
        member_id=member_id,
        title=new_title,
    )
    thread.title = new_title
    thread.updated_at = event.created_at


@handles("forum", "ThreadDeleted")
def thread_deleted(db: Session, event: ChainEvent) -> None:
    thread = get_entity(db, ForumThread, as_id(event.param(0)))
    member_id = as_id(event.param(1))
    hide = as_bool(event.param(3))

    record = record_event(
        db,
        ThreadDeletedEvent,
        event,
        thread_id=thread.id,
        category_id=thread.category_id,
        member_id=member_id,
        hide=hide,
    )
    status.delete_thread(thread, hide, record.id, event.created_at)


@handles("forum", "ThreadMoved")
def thread_moved(db: Session, event: ChainEvent) -> None:
    thread = get_entity(db, ForumThread, as_id(event.param(0)))
    new_category = get_entity(db, ForumCategory, as_id(event.param(1)))
    actor = get_actor_worker(db, parse_privileged_actor(event.param(2)))
    old_category_id = as_id(event.param(3))

    record_event(
        db,
        ThreadMovedEvent,
        event,
        thread_id=thread.id,
        actor_id=actor.id,
        old_category_id=old_category_id,
        new_category_id=new_category.id,
    )
    thread.category = new_category
    thread.updated_at = event.created_at


@handles("forum", "VoteOnPoll")
def vote_on_poll(db: Session, event: ChainEvent) -> None:
    thread_id = as_id(event.param(0))
    alternative = get_poll_alternative(db, thread_id, as_int(event.param(1)))
    voter = upsert_stub(db, Membership, as_id(event.param(2)))

    record_event(
        db,
        VoteOnPollEvent,
        event,
        thread_id=thread_id,
        member_id=voter.id,
        poll_alternative_id=alternative.id,
    )


@handles("forum", "PostAdded")
def post_added(db: Session, event: ChainEvent) -> None:
    post_id = as_id(event.param(0))
    author = upsert_stub(db, Membership, as_id(event.param(1)))
    thread = get_entity(db, ForumThread, as_id(event.param(3)))
    text, replies_to_id = read_forum_post_metadata(to_bytes(event.param(4)))
    is_editable = as_bool(event.param(5))

    ensure_absent(db, ForumPost, post_id)

    replies_to = None
    if replies_to_id is not None:
        replies_to = get_optional(db, ForumPost, replies_to_id)
        if replies_to is None:
            omitted("Reply target post not found", post_id=post_id, replies_to=replies_to_id)

    record = record_event(
        db,
        PostAddedEvent,
        event,
        post_id=post_id,
        thread_id=thread.id,
        category_id=thread.category_id,
        member_id=author.id,
        text=text,
        is_editable=is_editable,
    )

    db.add(
        ForumPost(
            id=post_id,
            thread=thread,
            author=author,
            text=text,
            replies_to=replies_to,
            status=status.initial_post_status(is_editable),
            origin=PostOrigin(PostOriginKind.THREAD_REPLY, record.id),
            created_at=event.created_at,
            updated_at=event.created_at,
        )
    )


@handles("forum", "CategoryStickyThreadUpdate")
def category_sticky_thread_update(db: Session, event: ChainEvent) -> None:
    """Make exactly the listed threads sticky within the category."""
    category = get_entity(db, ForumCategory, as_id(event.param(0)))
    thread_ids = [as_id(thread_id) for thread_id in event.param(1)]
    actor = get_actor_worker(db, parse_privileged_actor(event.param(2)))

    replace_flagged_set(
        db,
        ForumThread,
        "is_sticky",
        thread_ids,
        scope={"category_id": category.id},
        updated_at=event.created_at,
    )
    record_event(
        db,
        CategoryStickyThreadUpdateEvent,
        event,
        category_id=category.id,
        actor_id=actor.id,
        new_sticky_thread_ids=thread_ids,
    )


@handles("forum", "CategoryMembershipOfModeratorUpdated")
def category_membership_of_moderator_updated(db: Session, event: ChainEvent) -> None:
    moderator = get_worker(db, settings.forum_working_group, as_int(event.param(0)))
    category = get_entity(db, ForumCategory, as_id(event.param(1)), relations=("moderators",))
    can_moderate = as_bool(event.param(2))

    if can_moderate:
        if moderator not in category.moderators:
            category.moderators.append(moderator)
    elif moderator in category.moderators:
        category.moderators.remove(moderator)
    else:
        omitted(
            "Moderator to remove is not assigned to the category",
            moderator=moderator.id,
            category=category.id,
        )
    category.updated_at = event.created_at

    record_event(
        db,
        CategoryMembershipOfModeratorUpdatedEvent,
        event,
        category_id=category.id,
        moderator_id=moderator.id,
        new_can_moderate_value=can_moderate,
    )


@handles("forum", "PostModerated")
def post_moderated(db: Session, event: ChainEvent) -> None:
    post = get_entity(db, ForumPost, as_id(event.param(0)))
    rationale = bytes_to_string(event.param(1))
    actor = get_actor_worker(db, parse_privileged_actor(event.param(2)))

    record = record_event(
        db,
        PostModeratedEvent,
        event,
        post_id=post.id,
        thread_id=post.thread_id,
        actor_id=actor.id,
        rationale=rationale,
    )
    status.moderate_post(post, record.id, event.created_at)


@handles("forum", "PostTextUpdated")
def post_text_updated(db: Session, event: ChainEvent) -> None:
    post = get_entity(db, ForumPost, as_id(event.param(0)))
    member_id = as_id(event.param(1))
    new_text = bytes_to_string(event.param(4))

    record_event(
        db,
        PostTextUpdatedEvent,
        event,
        post_id=post.id,
        thread_id=post.thread_id,
        member_id=member_id,
        text=new_text,
    )
    post.text = new_text
    post.updated_at = event.created_at


@handles("forum", "PostDeleted")
def post_deleted(db: Session, event: ChainEvent) -> None:
    post = get_entity(db, ForumPost, as_id(event.param(0)))
    member_id = as_id(event.param(1))
    rationale = bytes_to_string(event.param(2))
    hide = as_bool(event.param(3))

    record = record_event(
        db,
        PostDeletedEvent,
        event,
        post_id=post.id,
        thread_id=post.thread_id,
        member_id=member_id,
        rationale=rationale,
        hide=hide,
    )
    status.delete_post(post, hide, record.id, event.created_at)
