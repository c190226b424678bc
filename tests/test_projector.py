# tests/test_projector.py
"""Block application, cursor tracking and the background worker."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError
from sqlalchemy import func, select

from chainview.models import Block, Event, ForumCategory, ProcessorState
from chainview.schemas.chain import ChainBlock
from chainview.services.consistency import FatalInconsistency
from chainview.services.event_source import InMemoryEventSource, JsonlEventSource
from chainview.services.projector import EventProjector, ProjectionWorker
from tests.builders import GENESIS_TIMESTAMP, category_created, category_updated


def _block(number: int, *events) -> ChainBlock:
    return ChainBlock.model_validate(
        {
            "number": number,
            "timestamp": GENESIS_TIMESTAMP + number,
            "events": [{"domain": d, "name": n, "params": p} for d, n, p in events],
        }
    )


def _count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


def test_block_is_atomic(db_session) -> None:
    projector = EventProjector()
    block = _block(3, category_created(1), category_created(2), category_updated(9, True))

    with pytest.raises(FatalInconsistency):
        projector.apply_block(db_session, block)

    assert _count(db_session, ForumCategory) == 0
    assert _count(db_session, Event) == 0
    assert _count(db_session, Block) == 0
    assert db_session.get(ProcessorState, 1) is None


def test_fatal_error_carries_event_context(db_session) -> None:
    block = _block(4, category_created(1), category_created(1))

    with pytest.raises(FatalInconsistency) as excinfo:
        EventProjector().apply_block(db_session, block)

    assert excinfo.value.context["event_id"] == "4-1"
    assert excinfo.value.context["event"] == "forum.CategoryCreated"


def test_unknown_events_are_skipped(db_session) -> None:
    block = _block(2, ("forum", "SomethingNew", [1]), category_created(1))

    handled = EventProjector().apply_block(db_session, block)

    assert handled == 1
    assert _count(db_session, Event) == 1
    assert db_session.get(Event, "2-1").type == "CategoryCreated"


def test_malformed_parameters_are_fatal(db_session) -> None:
    block = _block(2, ("forum", "CategoryCreated", ["not-an-id", None, "0x", "0x"]))

    with pytest.raises(FatalInconsistency, match="Undecodable event parameters"):
        EventProjector().apply_block(db_session, block)


def test_block_row_and_cursor(db_session) -> None:
    EventProjector().apply_block(db_session, _block(5, category_created(1)))
    EventProjector().apply_block(db_session, _block(6))

    assert db_session.get(ProcessorState, 1).last_processed_block == 6
    block = db_session.get(Block, 5)
    assert block.network == "babylon"
    assert db_session.get(Event, "5-0").network == "babylon"


def test_block_rejects_foreign_events() -> None:
    with pytest.raises(ValidationError):
        ChainBlock.model_validate(
            {
                "number": 1,
                "timestamp": 0,
                "events": [{"domain": "forum", "name": "X", "block_number": 2}],
            }
        )


def test_in_memory_source_rejects_unordered_blocks() -> None:
    with pytest.raises(ValueError, match="out of order"):
        InMemoryEventSource([_block(2), _block(1)])


async def test_worker_run_once_resumes_after_cursor(db_session, session_factory) -> None:
    source = InMemoryEventSource([_block(1, category_created(1)), _block(2, category_created(2))])
    worker = ProjectionWorker(source, session_factory=session_factory)

    assert await worker.run_once() == 2
    assert worker.state.last_block == 2
    assert worker.state.blocks_applied == 2

    source.append(_block(3, category_created(3)))
    assert await worker.run_once() == 1

    db_session.expire_all()
    assert _count(db_session, ForumCategory) == 3
    assert db_session.get(ProcessorState, 1).last_processed_block == 3


async def test_worker_halts_on_failing_block(db_session, session_factory) -> None:
    source = InMemoryEventSource(
        [
            _block(1, category_created(1)),
            _block(2, category_updated(5, True)),
            _block(3, category_created(3)),
        ]
    )
    worker = ProjectionWorker(source, session_factory=session_factory)

    await worker.start()
    await worker._task

    assert worker.state.running is False
    assert "ForumCategory not found" in worker.state.failure
    assert worker.state.last_block == 1

    db_session.expire_all()
    assert db_session.get(ProcessorState, 1).last_processed_block == 1
    assert db_session.get(ForumCategory, "3") is None


async def test_worker_records_unexpected_errors(db_session, session_factory, mocker) -> None:
    source = InMemoryEventSource([_block(1, category_created(1))])
    worker = ProjectionWorker(source, session_factory=session_factory)
    mocker.patch.object(worker.projector, "apply_block", side_effect=RuntimeError("disk gone"))

    await worker.start()
    await worker._task

    assert worker.state.running is False
    assert worker.state.failure == "disk gone"
    assert worker.state.blocks_applied == 0

    await worker.stop()


async def test_jsonl_source_reads_blocks(tmp_path) -> None:
    path = tmp_path / "events.jsonl"
    lines = [
        {"number": 1, "timestamp": 0, "events": []},
        {"number": 2, "timestamp": 6000, "events": [{"domain": "forum", "name": "X", "params": []}]},
    ]
    path.write_text("\n".join(json.dumps(line) for line in lines) + "\n\n", encoding="utf-8")

    blocks = [block async for block in JsonlEventSource(path).blocks(2)]

    assert [block.number for block in blocks] == [2]
    assert blocks[0].events[0].event_id == "2-0"


async def test_jsonl_source_missing_file_is_empty(tmp_path) -> None:
    source = JsonlEventSource(tmp_path / "missing.jsonl")

    assert [block async for block in source.blocks(0)] == []
