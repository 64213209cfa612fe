import os
import tempfile

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-for-trendhaven-suite-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="trendhaven-uploads-"))
os.environ.setdefault("LLM_PROVIDER", "local")
os.environ.setdefault("CACHE_ENABLED", "true")

import httpx
import pytest
from asgi_lifespan import LifespanManager

from trendhaven.core import cache as cache_module
from trendhaven.core import db as db_module
from trendhaven.core.config import settings
from trendhaven.llm import get_analyzer
from trendhaven.main import app
from trendhaven.storage import LocalImageStore, get_image_store

from fixtures import FakeAnalyzer, FakeRedis


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    r = FakeRedis()
    monkeypatch.setattr(cache_module, "_redis", r)
    return r


@pytest.fixture
async def database(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'trendhaven.db'}")
    await db_module.dispose_engine()
    await db_module.create_all()
    yield
    await db_module.dispose_engine()


@pytest.fixture
def store(tmp_path):
    return LocalImageStore(tmp_path / "uploads", "/uploads")


@pytest.fixture
def analyzer():
    return FakeAnalyzer()


@pytest.fixture
def api(database, store, analyzer):
    app.dependency_overrides[get_image_store] = lambda: store
    app.dependency_overrides[get_analyzer] = lambda: analyzer
    yield app
    app.dependency_overrides.pop(get_image_store, None)
    app.dependency_overrides.pop(get_analyzer, None)


@pytest.fixture
async def client(api):
    async with LifespanManager(api):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=api), base_url="http://test") as ac:
            yield ac


async def _anonymous_headers(client: httpx.AsyncClient) -> dict:
    resp = await client.post("/api/auth/signin-anonymous", json={})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
async def auth_headers(client):
    return await _anonymous_headers(client)


@pytest.fixture
async def other_headers(client):
    return await _anonymous_headers(client)
