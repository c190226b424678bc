"""Storage event handlers."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from chainview.mappings import handles
from chainview.models import ContentAcceptedEvent, DataObject
from chainview.models.variants import LiaisonJudgement
from chainview.schemas.chain import ChainEvent
from chainview.services.assets import refresh_availability
from chainview.services.event_log import record_event
from chainview.services.resolver import get_entity

logger = logging.getLogger(__name__)


@handles("storage", "ContentAccepted")
def content_accepted(db: Session, event: ChainEvent) -> None:
    """A storage provider accepted an upload; slots using it become available."""
    content_id = str(event.param(0))
    storage_provider_id = str(event.param(1))
    data_object = get_entity(db, DataObject, content_id)

    data_object.liaison_judgement = LiaisonJudgement.ACCEPTED
    slots = refresh_availability(db, data_object)
    logger.info("Content %s accepted by provider %s (%d slot(s))", content_id, storage_provider_id, slots)

    record_event(
        db,
        ContentAcceptedEvent,
        event,
        content_id=content_id,
        storage_provider_id=storage_provider_id,
    )
