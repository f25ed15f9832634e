"""
Shared fixtures: in-memory SQLite archive and grant store.

Environment must be set before any project module is imported,
because config reads it at import time.
"""

import os

os.environ["TG_BOT_TOKEN"] = "123456:TEST-TOKEN"
os.environ["ADMIN_ID"] = "1000"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DISPLAY_TIMEZONE"] = "Asia/Shanghai"

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from auth.access_control import AuthorizationService  # noqa: E402
from core.database import init_db  # noqa: E402
from storage.archive import MessageArchive, MessageRecord  # noqa: E402
from storage.sessions import SessionStore  # noqa: E402

ADMIN_ID = 1000


class FakeClock:
    """Controllable naive-UTC clock"""

    def __init__(self, now=datetime(2026, 1, 1, 12, 0, 0)):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    return SessionStore(session_factory)


@pytest.fixture
def archive(session_factory):
    return MessageArchive(session_factory)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth(store, clock):
    return AuthorizationService(ADMIN_ID, store, clock=clock)


def make_record(msg_id, chat_id=-100, user_id=1, username="alice", first_name="Alice",
                content="hello", event="send", original_content=None,
                chat_type="supergroup", chat_title="Test group"):
    return MessageRecord(
        msg_id=msg_id,
        chat_id=chat_id,
        chat_type=chat_type,
        chat_title=chat_title,
        user_id=user_id,
        username=username,
        first_name=first_name,
        content=content,
        event=event,
        original_content=original_content,
    )
