from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from database import Base
from main import app
from routers import rate_limit
from services.collaborators.memory import InMemoryAnalyticsBackend
from services.collaborators.types import (
    CLICK_EVENTS,
    EDIT_ACTION_OPEN,
    EDIT_ACTION_SAVE,
    EDIT_EVENTS,
    SHARE_EVENTS,
    VIEW_EVENTS,
)


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory rate-limit state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_counters.clear()
    yield
    rate_limit._local_counters.clear()
    app.state.disable_rate_limits = previous


@pytest.fixture
def memory_backend():
    return InMemoryAnalyticsBackend()


@pytest_asyncio.fixture
async def sqlite_session_maker(tmp_path):
    db_path = tmp_path / "content_analytics.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield session_maker
    await engine.dispose()


def seed_link_events(
    backend: InMemoryAnalyticsBackend,
    link_id: str,
    *,
    clicks: int = 0,
    views: int = 0,
    edits: int = 0,
    saves: int = 0,
    shares: int = 0,
    engagement_seconds=None,
    age_days: float = 1,
) -> None:
    """Record events for a link, all `age_days` in the past."""
    timestamp = datetime.now(timezone.utc) - timedelta(days=age_days)
    for _ in range(clicks):
        backend.add_event(CLICK_EVENTS, link_id, timestamp)
    for index in range(views):
        seconds = None
        if engagement_seconds:
            seconds = engagement_seconds[index % len(engagement_seconds)]
        backend.add_event(VIEW_EVENTS, link_id, timestamp, engagement_seconds=seconds)
    for _ in range(edits):
        backend.add_event(EDIT_EVENTS, link_id, timestamp, action=EDIT_ACTION_OPEN)
    for _ in range(saves):
        backend.add_event(EDIT_EVENTS, link_id, timestamp, action=EDIT_ACTION_SAVE)
    for _ in range(shares):
        backend.add_event(SHARE_EVENTS, link_id, timestamp)
