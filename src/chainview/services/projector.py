"""Block-by-block application of chain events to the projected store.

This module provides :class:`EventProjector`, which routes each event to its
registered handler inside one transaction per block, and
:class:`ProjectionWorker`, which pulls blocks from an event source in the
background and feeds them to the projector one at a time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from chainview.core.settings import settings
from chainview.db.session import SessionLocal
from chainview.mappings import get_handler
from chainview.models import ProcessorState
from chainview.schemas.chain import ChainBlock, ChainEvent
from chainview.services.consistency import ProjectionError, bound_event, inconsistent_state
from chainview.services.event_log import prepare_block
from chainview.services.event_source import EventSource

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def get_processor_state(db: Session) -> ProcessorState:
    state = db.get(ProcessorState, 1)
    if state is None:
        state = ProcessorState(id=1, last_processed_block=0)
        db.add(state)
    return state


class EventProjector:
    """Applies blocks of chain events through the handler registry."""

    def apply_event(self, db: Session, event: ChainEvent) -> bool:
        """Apply one event; returns ``False`` when no handler is registered."""
        handler = get_handler(event.domain, event.name)
        if handler is None:
            logger.debug("Skipping unhandled event %s (%s)", event.qualified_name, event.event_id)
            return False

        with bound_event(event):
            try:
                handler(db, event)
            except ProjectionError:
                raise
            except (ValueError, TypeError, KeyError, IndexError) as e:
                inconsistent_state("Undecodable event parameters", error=str(e))
            db.flush()

        logger.debug("Applied %s (%s)", event.qualified_name, event.event_id)
        return True

    def apply_block(self, db: Session, block: ChainBlock) -> int:
        """Apply every event of ``block`` and commit them as one transaction.

        On any failure the whole block is rolled back and the error re-raised;
        replaying the block is the only recovery.

        Returns:
            Number of events that had a handler.
        """
        try:
            prepare_block(db, block.number, block.timestamp)
            handled = 0
            for event in block.events:
                if self.apply_event(db, event):
                    handled += 1
            get_processor_state(db).last_processed_block = block.number
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error("Error applying block %d: %s", block.number, e, exc_info=True)
            raise

        logger.info(
            "Block %d applied: %d of %d event(s) handled",
            block.number,
            handled,
            len(block.events),
        )
        return handled


@dataclass
class ProjectionState:
    """Progress of the projection worker, exposed through the status endpoint."""

    running: bool = False
    last_block: int | None = None
    blocks_applied: int = 0
    failure: str | None = None


class ProjectionWorker:
    """Pulls blocks from an event source and projects them in the background.

    Blocks are applied strictly one after another in a worker thread. The
    first failing block halts the worker; the failure is kept in
    :attr:`state` and the cursor stays on the last committed block.
    """

    def __init__(
        self,
        source: EventSource,
        projector: EventProjector | None = None,
        session_factory: SessionFactory = SessionLocal,
    ) -> None:
        self.source = source
        self.projector = projector or EventProjector()
        self.state = ProjectionState()
        self._session_factory = session_factory
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the background projection loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self.state.failure = None
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background projection loop after the current block."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def run_once(self) -> int:
        """Apply every block the source currently has; returns how many were applied."""
        from_block = await asyncio.to_thread(self._resume_block)
        applied = 0
        async for block in self.source.blocks(from_block):
            if self._stopping.is_set():
                break
            await asyncio.to_thread(self._apply_block, block)
            applied += 1
        return applied

    async def _run(self) -> None:
        interval = max(0.1, float(settings.projector_idle_interval_seconds))
        self.state.running = True
        try:
            while not self._stopping.is_set():
                try:
                    applied = await self.run_once()
                except OSError as e:
                    logger.warning("Event source unavailable: %s", e)
                    applied = 0
                except Exception as e:
                    self.state.failure = str(e) or type(e).__name__
                    logger.error("Projection halted: %s", e, exc_info=True)
                    return

                if applied == 0:
                    try:
                        await asyncio.wait_for(self._stopping.wait(), timeout=interval)
                    except TimeoutError:
                        pass
        finally:
            self.state.running = False

    def _resume_block(self) -> int:
        with self._session_factory() as db:
            state = db.get(ProcessorState, 1)
            last = state.last_processed_block if state is not None else None
        if last is None:
            return settings.projector_start_block
        return max(settings.projector_start_block, last + 1)

    def _apply_block(self, block: ChainBlock) -> None:
        with self._session_factory() as db:
            self.projector.apply_block(db, block)
        self.state.last_block = block.number
        self.state.blocks_applied += 1
