# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PROJECTOR_ENABLED", "false")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from chainview.core.settings import settings
from chainview.db.session import Base
from chainview.db.session import get_db as app_get_session
from chainview.main import app as fastapi_app
from chainview.models import Worker, WorkingGroup
from chainview.schemas.chain import ChainBlock
from chainview.services.projector import EventProjector
from tests.builders import GENESIS_TIMESTAMP, BLOCK_TIME_MS

TEST_DB_URL = "sqlite://"

EventSpec = tuple[str, str, list[Any]]


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Plain session on the shared engine; the projector commits, so tables are wiped after."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def forum_workers(db_session: Session) -> dict[str, Worker]:
    """Seed the forum working group with a lead (runtime id 0) and two moderators."""
    group = WorkingGroup(id=settings.forum_working_group, name="Forum")
    workers = {
        "lead": Worker(id="forum-0", group=group, runtime_id=0, is_lead=True),
        "moderator": Worker(id="forum-1", group=group, runtime_id=1),
        "other_moderator": Worker(id="forum-2", group=group, runtime_id=2),
    }
    db_session.add_all(workers.values())
    db_session.commit()
    return workers


@pytest.fixture()
def project(db_session: Session) -> Callable[..., ChainBlock]:
    """Apply the given events as the next block and return that block.

    Each call uses a fresh block number, so event ids never collide.
    """
    numbers = count(1)
    projector = EventProjector()

    def _project(*events: EventSpec) -> ChainBlock:
        number = next(numbers)
        block = ChainBlock.model_validate(
            {
                "number": number,
                "timestamp": GENESIS_TIMESTAMP + number * BLOCK_TIME_MS,
                "events": [
                    {"domain": domain, "name": name, "params": params}
                    for domain, name, params in events
                ],
            }
        )
        projector.apply_block(db_session, block)
        return block

    return _project
