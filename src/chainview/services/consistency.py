"""Classification of projection failures.

Every lookup and bounds check reports through :func:`report`. A fatal
inconsistency means the projection and the chain disagree (a referenced
entity, category or asset index is missing where the chain guarantees it
exists) and aborts the whole block. A recoverable omission only leaves an
optional field empty.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, NoReturn

from chainview.schemas.chain import ChainEvent

logger = logging.getLogger(__name__)

current_event: ContextVar[ChainEvent | None] = ContextVar("current_event", default=None)


class ProjectionError(Exception):
    """Base class for errors raised while projecting events."""


class FatalInconsistency(ProjectionError):
    """The projected state diverged from the chain."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class Severity(enum.Enum):
    FATAL = "fatal"
    RECOVERABLE = "recoverable"


def _event_context() -> dict[str, Any]:
    event = current_event.get()
    if event is None:
        return {}
    return {
        "event_id": event.event_id,
        "event": event.qualified_name,
        "block": event.block_number,
        "extrinsic": event.extrinsic,
        "params": event.params,
    }


def report(severity: Severity, message: str, **context: Any) -> None:
    """Log a projection problem and raise when it is fatal.

    Fatal reports are logged at ERROR together with the full event being
    applied and then raised as :class:`FatalInconsistency`. Recoverable ones
    are logged at WARNING and return ``None``.
    """
    if severity is Severity.FATAL:
        logger.error(
            "Inconsistent state: %s",
            message,
            extra={"context": context, "event": _event_context()},
        )
        raise FatalInconsistency(message, {**context, **_event_context()})

    logger.warning(
        "Omitted optional data: %s %s",
        message,
        context,
        extra={"event": _event_context()},
    )


def inconsistent_state(message: str, **context: Any) -> NoReturn:
    report(Severity.FATAL, message, **context)
    raise AssertionError("unreachable")  # pragma: no cover


def omitted(message: str, **context: Any) -> None:
    report(Severity.RECOVERABLE, message, **context)


@contextmanager
def bound_event(event: ChainEvent) -> Iterator[None]:
    """Bind ``event`` as the event being applied for the duration of the block."""
    token = current_event.set(event)
    try:
        yield
    finally:
        current_event.reset(token)
