# tests/test_forum_threads.py
"""Thread creation, moderation, deletion, moves and poll votes."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import select

from chainview.models import (
    ForumPost,
    ForumThread,
    Membership,
    ThreadCreatedEvent,
    VoteOnPollEvent,
)
from chainview.models.variants import PostOriginKind, StatusKind
from chainview.services.consistency import FatalInconsistency
from tests.builders import (
    GENESIS_TIMESTAMP,
    category_created,
    poll,
    thread_created,
    thread_deleted,
    thread_moderated,
    thread_moved,
    thread_title_updated,
    vote_on_poll,
)


@pytest.fixture()
def category(project):
    project(category_created(1, "General"), category_created(2, "Archive"))


def test_thread_created_with_initial_post(db_session, project, category) -> None:
    block = project(thread_created(1, 10, 100, author_id=5, title="Hi", text="Body"))
    event_id = block.events[0].event_id

    thread = db_session.get(ForumThread, "10")
    assert thread.title == "Hi"
    assert thread.category_id == "1"
    assert thread.author_id == "5"
    assert thread.is_sticky is False
    assert thread.status.kind is StatusKind.ACTIVE
    assert thread.poll is None

    post = db_session.get(ForumPost, "100")
    assert post.thread_id == "10"
    assert post.text == "Body"
    assert post.status.kind is StatusKind.ACTIVE
    assert post.origin.kind is PostOriginKind.THREAD_INITIAL
    assert post.origin.event_id == event_id

    assert db_session.get(Membership, "5") is not None
    record = db_session.get(ThreadCreatedEvent, event_id)
    assert record.post_id == "100"
    assert record.title == "Hi"


def test_thread_created_with_poll(db_session, project, category) -> None:
    end_time = GENESIS_TIMESTAMP + 86_400_000
    project(thread_created(1, 10, 100, poll=poll("Pick one", end_time, "Yes", "No")))

    thread = db_session.get(ForumThread, "10")
    assert thread.poll is not None
    assert thread.poll.description == "Pick one"
    assert [(alt.index, alt.text) for alt in thread.poll.alternatives] == [(0, "Yes"), (1, "No")]
    assert thread.poll.end_time.replace(tzinfo=None) == datetime(2021, 6, 2)


def test_thread_in_unknown_category_is_fatal(db_session, project) -> None:
    with pytest.raises(FatalInconsistency, match="ForumCategory not found"):
        project(thread_created(7, 10, 100))

    assert db_session.get(ForumThread, "10") is None
    assert db_session.get(ForumPost, "100") is None


@pytest.mark.parametrize(
    ("hide", "expected"),
    [(True, StatusKind.REMOVED), (False, StatusKind.LOCKED)],
)
def test_thread_deleted_hide_flag(db_session, project, category, hide, expected) -> None:
    project(thread_created(1, 10, 100))
    deleted = project(thread_deleted(10, hide))

    thread = db_session.get(ForumThread, "10")
    assert thread.status.kind is expected
    assert thread.status.event_id == deleted.events[0].event_id


def test_thread_moderated(db_session, project, category, forum_workers) -> None:
    project(thread_created(1, 10, 100))
    moderated = project(thread_moderated(10))

    thread = db_session.get(ForumThread, "10")
    assert thread.status.kind is StatusKind.MODERATED
    assert thread.status.event_id == moderated.events[0].event_id


def test_moderated_thread_cannot_be_deleted(db_session, project, category, forum_workers) -> None:
    project(thread_created(1, 10, 100))
    project(thread_moderated(10))

    with pytest.raises(FatalInconsistency, match="Illegal ForumThread status transition"):
        project(thread_deleted(10, True))


def test_thread_title_updated(db_session, project, category) -> None:
    project(thread_created(1, 10, 100, title="Old"))
    project(thread_title_updated(10, "New"))

    assert db_session.get(ForumThread, "10").title == "New"


def test_thread_moved(db_session, project, category, forum_workers) -> None:
    project(thread_created(1, 10, 100))
    project(thread_moved(10, new_category_id=2, old_category_id=1))

    assert db_session.get(ForumThread, "10").category_id == "2"


def test_thread_moved_to_unknown_category_is_fatal(db_session, project, category, forum_workers) -> None:
    project(thread_created(1, 10, 100))

    with pytest.raises(FatalInconsistency):
        project(thread_moved(10, new_category_id=9, old_category_id=1))

    assert db_session.get(ForumThread, "10").category_id == "1"


def test_vote_on_poll_records_alternative(db_session, project, category) -> None:
    project(thread_created(1, 10, 100, poll=poll("Pick", GENESIS_TIMESTAMP, "A", "B", "C")))
    voted = project(vote_on_poll(10, 2, member_id=8))

    record = db_session.get(VoteOnPollEvent, voted.events[0].event_id)
    alternative = next(alt for alt in db_session.get(ForumThread, "10").poll.alternatives if alt.index == 2)
    assert record.poll_alternative_id == alternative.id
    assert record.member_id == "8"
    assert db_session.get(Membership, "8") is not None


def test_vote_on_missing_alternative_is_fatal(db_session, project, category) -> None:
    project(thread_created(1, 10, 100, poll=poll("Pick", GENESIS_TIMESTAMP, "A")))

    with pytest.raises(FatalInconsistency, match="alternative not found"):
        project(vote_on_poll(10, 5))

    assert list(db_session.scalars(select(VoteOnPollEvent))) == []


def test_vote_on_thread_without_poll_is_fatal(project, category) -> None:
    project(thread_created(1, 10, 100))

    with pytest.raises(FatalInconsistency, match="Forum poll not found"):
        project(vote_on_poll(10, 0))
