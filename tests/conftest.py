"""
Test configuration and fixtures for Job Board API tests.
"""
import os

# Must be set before jobboard.core.settings is imported
os.environ["ENVIRONMENT"] = "testing"

from datetime import date, timedelta
from types import SimpleNamespace
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from httpx import AsyncClient

from jobboard.cache.client import RedisCache
from jobboard.core.database import create_engine, create_session_factory, create_tables
from jobboard.core.supabase_client import SupabaseAuthClient
from jobboard.crud.job_post import CRUDJobPost
from jobboard.main import create_app
from jobboard.schemas.job_post import JobPostCreate
from jobboard.services.description_service import DescriptionGenerator
from jobboard.services.job_post_service import JobPostService

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_OWNER_ID = "22222222-2222-2222-2222-222222222222"

# Bearer token -> Supabase user id
TOKENS = {
    "owner-token": OWNER_ID,
    "other-token": OTHER_OWNER_ID,
}


@pytest.fixture
def api_v1_prefix() -> str:
    return "/api/v1"


# ===============================
# CACHE
# ===============================


@pytest.fixture
def redis_server() -> FakeServer:
    """In-memory Redis server; set ``connected = False`` to simulate an outage."""
    return FakeServer()


@pytest.fixture
def redis_client(redis_server) -> FakeRedis:
    """Direct handle on the fake server for inspecting keys."""
    return FakeRedis(server=redis_server, decode_responses=True)


@pytest_asyncio.fixture
async def cache(redis_server):
    cache = RedisCache(
        url="redis://fake:6379/0",
        connect_timeout=0.2,
        operation_timeout=0.5,
        client_factory=lambda url: FakeRedis(
            server=redis_server, decode_responses=True
        ),
    )
    yield cache
    await cache.close()


# ===============================
# DATABASE
# ===============================


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite database file per test."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def crud(session_factory) -> CRUDJobPost:
    return CRUDJobPost(session_factory)


@pytest.fixture
def service(crud, cache) -> JobPostService:
    return JobPostService(crud, cache)


# ===============================
# TEST DATA
# ===============================


@pytest.fixture
def test_job_post_data() -> Dict[str, Any]:
    """Valid job posting payload."""
    return {
        "title": "Senior Backend Engineer",
        "company": "Acme Corp",
        "description": (
            "Build and operate the services behind our job board. "
            "You will own APIs, caching and data pipelines."
        ),
        "location": "Berlin, Germany",
        "type": "Full-Time",
        "start_date": (date.today() + timedelta(days=7)).isoformat(),
        "end_date": (date.today() + timedelta(days=90)).isoformat(),
    }


def make_job_post(index: int = 0, **overrides) -> JobPostCreate:
    data = {
        "title": f"Software Engineer {index}",
        "company": f"Company {index}",
        "description": (
            f"Posting number {index}. Work on distributed systems with a "
            "friendly team of engineers."
        ),
        "location": "Remote",
        "type": "Full-Time",
        "start_date": date.today() + timedelta(days=1),
    }
    data.update(overrides)
    return JobPostCreate(**data)


@pytest_asyncio.fixture
async def five_job_posts(service) -> List:
    """Five postings owned by OWNER_ID, all with the default status."""
    posts = []
    for i in range(5):
        posts.append(await service.create_job_post(OWNER_ID, make_job_post(i)))
    return posts


# ===============================
# AUTH
# ===============================


def _supabase_user(token: str):
    user_id = TOKENS.get(token)
    if user_id is None:
        raise Exception("invalid JWT: unable to parse or verify signature")
    return SimpleNamespace(user=SimpleNamespace(id=user_id, email=f"{user_id[:4]}@example.com"))


@pytest.fixture
def supabase_mock() -> MagicMock:
    """Stand-in for the Supabase async client; only ``auth`` is used."""
    client = MagicMock()
    client.auth.get_user = AsyncMock(side_effect=_supabase_user)
    client.auth.sign_up = AsyncMock(return_value=SimpleNamespace(user=None, session=None))
    client.auth.sign_in_with_password = AsyncMock()
    client.auth.admin.sign_out = AsyncMock(return_value=None)
    return client


@pytest.fixture
def auth_client(supabase_mock) -> SupabaseAuthClient:
    async def factory():
        return supabase_mock

    return SupabaseAuthClient(
        "http://supabase.test", "anon-key", client_factory=factory
    )


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer owner-token"}


@pytest.fixture
def other_auth_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer other-token"}


# ===============================
# LLM
# ===============================


@pytest.fixture
def llm_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def llm_transport(llm_requests) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        llm_requests.append(request)
        return httpx.Response(
            200,
            json={
                "choices": [
                    {"message": {"role": "assistant", "content": "  A great role.  "}}
                ]
            },
        )

    return httpx.MockTransport(handler)


@pytest_asyncio.fixture
async def description_generator(llm_transport):
    async with httpx.AsyncClient(transport=llm_transport) as http_client:
        yield DescriptionGenerator(
            "test-groq-key",
            api_base="https://llm.test/v1",
            model="test-model",
            http_client=http_client,
        )


# ===============================
# APP
# ===============================


@pytest.fixture
def app(engine, session_factory, cache, service, auth_client, description_generator):
    """Application wired to the test database, fake Redis and mocked providers."""
    app = create_app()
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.cache = cache
    app.state.job_post_service = service
    app.state.auth_client = auth_client
    app.state.description_generator = description_generator
    return app


@pytest_asyncio.fixture
async def async_client(app) -> AsyncClient:
    async with AsyncClient(
        base_url="http://test", transport=httpx.ASGITransport(app=app)
    ) as ac:
        yield ac
