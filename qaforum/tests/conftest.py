import os
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Cheap hashes for tests; must be set before qaforum.auth is imported
os.environ.setdefault('BCRYPT_ROUNDS', '4')

from qaforum.core import Database, get_database  # noqa: E402
from qaforum.main import app  # noqa: E402
from qaforum.models import Base  # noqa: E402


@pytest_asyncio.fixture
async def database(tmp_path):
    """Fresh SQLite file per test; a file rather than :memory: so concurrent lookups get their own connections."""
    db = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'forum.db'}")
    assert await db.acquire() is not None
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def sessions(database):
    return await database.acquire()


@pytest_asyncio.fixture
async def client(database):
    app.dependency_overrides[get_database] = lambda: database
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register a user through the API and return its id."""
    async def _make(username, password='secret1', role='user'):
        r = await client.post('/api/register', json={'username': username, 'password': password, 'role': role})
        assert r.status_code == 200, r.text
        login = await client.post('/api/login', json={'username': username, 'password': password, 'role': role})
        assert login.status_code == 200, login.text
        return login.json()['user']['user_id']
    return _make
