"""
Pytest configuration and shared fixtures for trackboard tests.
"""
import json
import os

# The application engine is built at import time; point it at a private
# in-memory database before anything from trackboard is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CREATE_SCHEMA"] = "true"

from datetime import date

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from starlette.websockets import WebSocketState

from trackboard.core.common import new_id, utcnow
from trackboard.core.realtime import Broadcaster, ChannelRegistry
from trackboard.db.base import Base
from trackboard.db.models import Board, Epic, Sprint, User


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    # SQLite only checks foreign keys when asked to, per connection
    @event.listens_for(engine.sync_engine, "connect")
    def enforce_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def break_store(db, monkeypatch):
    """
    Call to make every later commit on `db` fail the way a lost connection
    or a locked database does: the pending writes reach the store first.
    """
    def breaker():
        flush = db.flush

        async def failing_commit():
            await flush()
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "commit", failing_commit)

    return breaker


# ============================================================================
# Realtime Fixtures
# ============================================================================

class FakeConnection:
    """Stands in for a starlette WebSocket: records every frame sent to it."""

    def __init__(self, fail_with=None):
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.sent = []
        self.fail_with = fail_with

    async def send_text(self, data):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(data)

    def close(self):
        self.client_state = WebSocketState.DISCONNECTED

    @property
    def events(self):
        return [json.loads(frame) for frame in self.sent]


@pytest.fixture
def registry():
    return ChannelRegistry()


@pytest.fixture
def broadcaster(registry):
    return Broadcaster(registry)


@pytest.fixture
def make_connection():
    def _make(fail_with=None):
        return FakeConnection(fail_with=fail_with)

    return _make


# ============================================================================
# Seed Data
# ============================================================================

@pytest.fixture
async def board(db):
    now = utcnow()
    board = Board(id=new_id(), name="Platform", key="PLT", created_at=now, updated_at=now)
    db.add(board)
    await db.commit()
    return board


@pytest.fixture
async def users(db):
    rows = [
        User(id=new_id(), name="Ana", email="ana@example.com"),
        User(id=new_id(), name="Bruno", email="bruno@example.com"),
    ]
    db.add_all(rows)
    await db.commit()
    return rows


@pytest.fixture
async def epic(db, board):
    now = utcnow()
    epic = Epic(id=new_id(), board_id=board.id, name="Checkout", created_at=now, updated_at=now)
    db.add(epic)
    await db.commit()
    return epic


@pytest.fixture
async def sprint(db, board):
    now = utcnow()
    today = date.today()
    sprint = Sprint(
        id=new_id(),
        board_id=board.id,
        name="Sprint 1",
        start_date=today,
        end_date=today,
        created_at=now,
        updated_at=now,
    )
    db.add(sprint)
    await db.commit()
    return sprint


@pytest.fixture
def listener(registry, board, make_connection):
    """An open connection subscribed to the seeded board."""
    conn = make_connection()
    registry.subscribe(board.id, conn)
    return conn
