"""Lookups of entities referenced by events.

The chain guarantees that referenced entities exist, so a miss in
:func:`get_entity` is reported as a fatal inconsistency. Members are never
created by the modules projected here and are upserted as bare-id rows.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from chainview.core.settings import settings
from chainview.models import ForumPoll, ForumPollAlternative, Worker
from chainview.schemas.chain import LeadActor, ModeratorActor, PrivilegedActor
from chainview.services.consistency import inconsistent_state

ModelT = TypeVar("ModelT")


def get_entity(
    db: Session,
    model: type[ModelT],
    entity_id: Any,
    relations: Sequence[str] = (),
) -> ModelT:
    """Return the entity with ``entity_id`` or fail the block."""
    options = [selectinload(getattr(model, name)) for name in relations]
    entity = db.get(model, entity_id, options=options)
    if entity is None:
        inconsistent_state(f"{model.__name__} not found", id=entity_id)
    return entity


def get_optional(db: Session, model: type[ModelT], entity_id: Any) -> ModelT | None:
    return db.get(model, entity_id)


def ensure_absent(db: Session, model: type[Any], entity_id: Any) -> None:
    """Fail the block when an entity the event creates already exists."""
    if db.get(model, entity_id) is not None:
        inconsistent_state(f"{model.__name__} already exists", id=entity_id)


def get_or_create(
    db: Session,
    model: type[ModelT],
    filters: Mapping[str, Any],
    factory: Callable[[], ModelT],
) -> ModelT:
    """Return the entity matching ``filters``, creating it with ``factory`` when absent."""
    stmt = select(model).filter_by(**filters)
    entity = db.scalars(stmt).first()
    if entity is None:
        entity = factory()
        db.add(entity)
        db.flush()
    return entity


def upsert_stub(db: Session, model: type[ModelT], entity_id: str) -> ModelT:
    """Return the row keyed by ``entity_id``, inserting a bare-id row if needed."""
    entity = db.get(model, entity_id)
    if entity is None:
        entity = model(id=entity_id)
        db.add(entity)
        db.flush()
    return entity


def get_worker(db: Session, group_id: str, runtime_id: int) -> Worker:
    worker = db.scalars(
        select(Worker).where(Worker.group_id == group_id, Worker.runtime_id == runtime_id)
    ).first()
    if worker is None:
        inconsistent_state("Worker not found", group=group_id, runtime_id=runtime_id)
    return worker


def get_actor_worker(db: Session, actor: PrivilegedActor) -> Worker:
    """Resolve a privileged forum actor to its worker row."""
    group_id = settings.forum_working_group
    if isinstance(actor, LeadActor):
        worker = db.scalars(
            select(Worker).where(Worker.group_id == group_id, Worker.is_lead.is_(True))
        ).first()
        if worker is None:
            inconsistent_state("Forum lead worker not found", group=group_id)
        return worker
    if isinstance(actor, ModeratorActor):
        return get_worker(db, group_id, actor.runtime_id)
    inconsistent_state("Unsupported privileged actor", actor=repr(actor))


def get_poll_alternative(db: Session, thread_id: str, index: int) -> ForumPollAlternative:
    poll = db.scalars(select(ForumPoll).where(ForumPoll.thread_id == thread_id)).first()
    if poll is None:
        inconsistent_state("Forum poll not found", thread_id=thread_id)
    for alternative in poll.alternatives:
        if alternative.index == index:
            return alternative
    inconsistent_state("Forum poll alternative not found", thread_id=thread_id, index=index)
