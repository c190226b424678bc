"""Lifecycle transitions of forum categories, threads and posts.

A transition replaces the whole status variant and records the id of the
event that caused it. History is kept only in the event log.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from chainview.models.variants import Status, StatusKind
from chainview.services.consistency import inconsistent_state

Transitions = dict[StatusKind, frozenset[StatusKind]]

CATEGORY_TRANSITIONS: Transitions = {
    StatusKind.ACTIVE: frozenset({StatusKind.ACTIVE, StatusKind.ARCHIVED, StatusKind.REMOVED}),
    StatusKind.ARCHIVED: frozenset({StatusKind.ACTIVE, StatusKind.ARCHIVED, StatusKind.REMOVED}),
}

THREAD_TRANSITIONS: Transitions = {
    StatusKind.ACTIVE: frozenset({StatusKind.MODERATED, StatusKind.LOCKED, StatusKind.REMOVED}),
}

_POST_TARGETS = frozenset(
    {StatusKind.ACTIVE, StatusKind.LOCKED, StatusKind.MODERATED, StatusKind.REMOVED}
)
POST_TRANSITIONS: Transitions = {
    StatusKind.ACTIVE: _POST_TARGETS,
    StatusKind.LOCKED: _POST_TARGETS,
}


class HasStatus(Protocol):
    id: str
    status: Status
    updated_at: datetime


def initial_status(kind: StatusKind = StatusKind.ACTIVE) -> Status:
    """Status of a freshly created entity; it carries no event reference."""
    return Status(kind)


def transition(
    entity: HasStatus,
    target: StatusKind,
    event_id: str,
    transitions: Transitions,
    updated_at: datetime,
) -> Status:
    """Move ``entity`` to ``target`` caused by ``event_id``.

    Raises :class:`~chainview.services.consistency.FatalInconsistency` when the
    move is not allowed from the entity's current status.
    """
    if not event_id:
        inconsistent_state("Status transition without a causing event", entity=entity.id)

    current = entity.status.kind
    if target not in transitions.get(current, frozenset()):
        inconsistent_state(
            f"Illegal {type(entity).__name__} status transition",
            entity=entity.id,
            current=current.value,
            target=target.value,
        )

    status = Status(target, event_id)
    entity.status = status
    entity.updated_at = updated_at
    return status


def archive_category(category: HasStatus, archived: bool, event_id: str, at: datetime) -> Status:
    target = StatusKind.ARCHIVED if archived else StatusKind.ACTIVE
    return transition(category, target, event_id, CATEGORY_TRANSITIONS, at)


def remove_category(category: HasStatus, event_id: str, at: datetime) -> Status:
    return transition(category, StatusKind.REMOVED, event_id, CATEGORY_TRANSITIONS, at)


def moderate_thread(thread: HasStatus, event_id: str, at: datetime) -> Status:
    return transition(thread, StatusKind.MODERATED, event_id, THREAD_TRANSITIONS, at)


def delete_thread(thread: HasStatus, hide: bool, event_id: str, at: datetime) -> Status:
    target = StatusKind.REMOVED if hide else StatusKind.LOCKED
    return transition(thread, target, event_id, THREAD_TRANSITIONS, at)


def initial_post_status(is_editable: bool) -> Status:
    return initial_status(StatusKind.ACTIVE if is_editable else StatusKind.LOCKED)


def moderate_post(post: HasStatus, event_id: str, at: datetime) -> Status:
    return transition(post, StatusKind.MODERATED, event_id, POST_TRANSITIONS, at)


def delete_post(post: HasStatus, hide: bool, event_id: str, at: datetime) -> Status:
    target = StatusKind.REMOVED if hide else StatusKind.LOCKED
    return transition(post, target, event_id, POST_TRANSITIONS, at)
