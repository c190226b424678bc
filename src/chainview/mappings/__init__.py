"""Event handlers keyed by ``(domain, event name)``.

A handler takes the block's session and the event and writes its effect
through the ORM; the projector owns the transaction around it.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session

from chainview.schemas.chain import ChainEvent

Handler = Callable[[Session, ChainEvent], None]

HANDLERS: dict[tuple[str, str], Handler] = {}


def handles(domain: str, name: str) -> Callable[[Handler], Handler]:
    """Register the decorated function as the handler of ``domain.name``."""

    def register(handler: Handler) -> Handler:
        key = (domain, name)
        if key in HANDLERS:
            raise ValueError(f"Duplicate handler for {domain}.{name}")
        HANDLERS[key] = handler
        return handler

    return register


def get_handler(domain: str, name: str) -> Handler | None:
    return HANDLERS.get((domain, name))


# Handler modules register themselves on import.
from chainview.mappings import content, forum, storage  # noqa: E402,F401
