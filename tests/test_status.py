# tests/test_status.py
"""Lifecycle transition rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from chainview.models.variants import Status, StatusKind
from chainview.services import status
from chainview.services.consistency import FatalInconsistency

AT = datetime(2022, 1, 1, tzinfo=UTC)


@dataclass
class Entity:
    id: str = "1"
    status: Status = field(default_factory=status.initial_status)
    updated_at: datetime = datetime(2021, 1, 1, tzinfo=UTC)


def test_initial_status_has_no_event() -> None:
    assert status.initial_status() == Status(StatusKind.ACTIVE, None)
    assert status.initial_post_status(False) == Status(StatusKind.LOCKED, None)


def test_transition_records_event_and_time() -> None:
    entity = Entity()

    result = status.archive_category(entity, True, "5-1", AT)

    assert result == Status(StatusKind.ARCHIVED, "5-1")
    assert entity.status == result
    assert entity.updated_at == AT


def test_transition_without_event_is_fatal() -> None:
    with pytest.raises(FatalInconsistency, match="without a causing event"):
        status.remove_category(Entity(), "", AT)


@pytest.mark.parametrize("kind", [StatusKind.MODERATED, StatusKind.LOCKED, StatusKind.REMOVED])
def test_thread_leaves_terminal_state_never(kind) -> None:
    entity = Entity(status=Status(kind, "1-0"))

    with pytest.raises(FatalInconsistency):
        status.moderate_thread(entity, "2-0", AT)


def test_locked_post_can_still_be_moderated() -> None:
    entity = Entity(status=Status(StatusKind.LOCKED))

    status.moderate_post(entity, "3-0", AT)

    assert entity.status.kind is StatusKind.MODERATED


def test_removed_post_is_terminal() -> None:
    entity = Entity(status=Status(StatusKind.REMOVED, "1-0"))

    with pytest.raises(FatalInconsistency, match="Illegal Entity status transition"):
        status.delete_post(entity, False, "2-0", AT)
