"""
GymCMS Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test runs against a real, freshly seeded in-memory SQLite
       store, so visibility rules, cascades and upserts are exercised for
       real instead of being mocked.
How:   Environment variables are set before the package is imported; the
       settings singleton reads them once.

Fixture Hierarchy (all function-scoped):
    db            opened in-memory Database, schema created and seeded
    ├── session   one unit of work on `db` (committed on exit)
    │   ├── admin_user / admin_caller / anonymous
    │   └── admin_token → auth_headers
    storage       StorageService rooted in a temporary directory
    client        HTTPX AsyncClient bound to create_app(database=db, storage=storage)
"""

import os
import tempfile

# Override settings for testing BEFORE any gymcms imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_EMAIL"] = "Admin@PowerHouseGym.com"
os.environ["ADMIN_PASSWORD"] = "admin-test-password"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="gymcms_test_")
os.environ["LOG_LEVEL"] = "WARNING"

import io  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy import func, select  # noqa: E402

from gymcms.database import Database  # noqa: E402
from gymcms.main import create_app  # noqa: E402
from gymcms.models import ActivityLog, User  # noqa: E402
from gymcms.services.auth_service import create_access_token  # noqa: E402
from gymcms.services.caller import Caller, Identity  # noqa: E402
from gymcms.services.schema_manager import SchemaManager  # noqa: E402
from gymcms.services.storage_service import StorageService  # noqa: E402

ADMIN_EMAIL = "admin@powerhousegym.com"
ADMIN_PASSWORD = "admin-test-password"


# ══════════════════════════════════════════════════════════════════════════
# Store & Session
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db():
    """
    Provides an opened, seeded in-memory database.

    The in-memory store lives on a single static connection, so every
    session opened on this handle sees the same data.
    """
    database = Database("sqlite+aiosqlite:///:memory:")
    await database.open()
    await SchemaManager(database).initialize()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def session(db):
    async with db.session() as s:
        yield s


@pytest_asyncio.fixture
async def admin_user(session) -> User:
    result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
    return result.scalar_one()


@pytest.fixture
def admin_caller(admin_user) -> Caller:
    identity = Identity(
        id=admin_user.id,
        email=admin_user.email,
        name=admin_user.name,
        role=admin_user.role,
    )
    return Caller(identity=identity, ip_address="127.0.0.1")


@pytest.fixture
def anonymous() -> Caller:
    return Caller.anonymous("203.0.113.9")


@pytest.fixture
def journal_count(session):
    """Returns a coroutine counting activity rows, optionally by action/entity."""

    async def count(action=None, entity_type=None) -> int:
        query = select(func.count()).select_from(ActivityLog)
        if action is not None:
            query = query.where(ActivityLog.action == action)
        if entity_type is not None:
            query = query.where(ActivityLog.entity_type == entity_type)
        return (await session.execute(query)).scalar_one()

    return count


# ══════════════════════════════════════════════════════════════════════════
# Files
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def storage(tmp_path) -> StorageService:
    return StorageService(str(tmp_path / "uploads"))


@pytest.fixture
def png_bytes() -> bytes:
    """A real 640x480 PNG, wide enough to be scaled down for the thumbnail."""
    buffer = io.BytesIO()
    Image.new("RGB", (640, 480), color=(255, 77, 77)).save(buffer, format="PNG")
    return buffer.getvalue()


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def admin_token(db) -> str:
    # Own unit of work: HTTP tests should not hold the shared `session` open
    async with db.session() as s:
        user = (await s.execute(select(User).where(User.email == ADMIN_EMAIL))).scalar_one()
    return create_access_token(user)


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest_asyncio.fixture
async def client(db, storage):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan; the `db` fixture has already
    opened and seeded the store the app is given.

    Usage:
        async def test_health(client):
            response = await client.get("/api/health")
            assert response.status_code == 200
    """
    app = create_app(database=db, storage=storage)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
