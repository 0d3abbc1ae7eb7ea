import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from pageviews.core.config import Settings
from pageviews.main import create_app
from pageviews.services.event_store import EventStore


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "events.db"


@pytest.fixture
def test_settings(db_path):
    """Settings pointing at a throwaway database with a fast live interval"""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{db_path}",
        live_interval_seconds=0.05,
    )


@pytest_asyncio.fixture
async def store(test_settings):
    event_store = EventStore(test_settings)
    await event_store.initialize()
    yield event_store
    await event_store.dispose()


@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    # ASGITransport does not run lifespan events
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
