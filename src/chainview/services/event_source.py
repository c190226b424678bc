"""Sources of ordered chain blocks for the projection worker."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable
from pathlib import Path
from typing import Protocol

from chainview.schemas.chain import ChainBlock

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """Delivers blocks in chain order, starting at ``from_block``."""

    def blocks(self, from_block: int) -> AsyncIterator[ChainBlock]: ...


def _check_order(blocks: list[ChainBlock]) -> list[ChainBlock]:
    for previous, current in zip(blocks, blocks[1:], strict=False):
        if current.number <= previous.number:
            raise ValueError(
                f"Blocks out of order: {current.number} follows {previous.number}"
            )
    return blocks


class InMemoryEventSource:
    """Serves a fixed list of blocks."""

    def __init__(self, blocks: Iterable[ChainBlock] = ()) -> None:
        self._blocks = _check_order(list(blocks))

    def append(self, block: ChainBlock) -> None:
        self._blocks = _check_order([*self._blocks, block])

    async def blocks(self, from_block: int) -> AsyncIterator[ChainBlock]:
        for block in self._blocks:
            if block.number >= from_block:
                yield block


class JsonlEventSource:
    """Reads blocks from a JSON-lines file, one :class:`ChainBlock` per line.

    The file is re-read on every call so that a process appending blocks to it
    is picked up by the next polling round.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> list[ChainBlock]:
        if not self.path.exists():
            logger.warning("Events file %s does not exist yet", self.path)
            return []
        blocks = []
        with self.path.open(encoding="utf-8") as handle:
            for line_number, line in enumerate(handle, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    blocks.append(ChainBlock.model_validate_json(line))
                except ValueError as exc:
                    raise ValueError(f"{self.path}:{line_number}: {exc}") from exc
        return _check_order(blocks)

    async def blocks(self, from_block: int) -> AsyncIterator[ChainBlock]:
        for block in await asyncio.to_thread(self._load):
            if block.number >= from_block:
                yield block
