"""Append-only event records and block bookkeeping."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy.orm import Session

from chainview.core.settings import settings
from chainview.db.time import from_block_timestamp
from chainview.models import Block, Event
from chainview.schemas.chain import ChainEvent

EventT = TypeVar("EventT", bound=Event)


def generic_event_fields(event: ChainEvent) -> dict[str, Any]:
    return {
        "id": event.event_id,
        "in_block": event.block_number,
        "in_extrinsic": event.extrinsic,
        "index_in_block": event.index_in_block,
        "network": settings.network,
        "created_at": event.created_at,
    }


def record_event(db: Session, event_class: type[EventT], event: ChainEvent, **fields: Any) -> EventT:
    """Persist the immutable record of ``event`` and return it."""
    record = event_class(**generic_event_fields(event), **fields)
    db.add(record)
    db.flush()
    return record


def prepare_block(db: Session, number: int, timestamp: int) -> Block:
    block = db.get(Block, number)
    if block is None:
        block = Block(
            number=number,
            executed_at=from_block_timestamp(timestamp),
            network=settings.network,
        )
        db.add(block)
    return block
