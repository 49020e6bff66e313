"""
PrisonSphere - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

# Configure before the package reads its settings
_tmpdir = tempfile.mkdtemp(prefix="prisonsphere-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["PRISONSPHERE_LOGFILE"] = os.path.join(_tmpdir, "test.log")
os.environ["JWT_SECRET"] = "test-jwt-secret-for-testing-only"
os.environ["PRISONSPHERE_SWEEPS"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

# pylint: disable=wrong-import-position
from prisonsphere import accounts, db, enrollment, models, registry, security
from prisonsphere.api import app

from factories import inmate_fields


@pytest.fixture(autouse=True)
async def database() -> AsyncGenerator[None, None]:
    """Create a fresh schema for each test"""
    async with db.engine.begin() as conn:
        await conn.run_sync(db.Base.metadata.create_all)

    yield

    async with db.engine.begin() as conn:
        await conn.run_sync(db.Base.metadata.drop_all)
    await db.engine.dispose()


@pytest.fixture
async def session() -> AsyncGenerator:
    """Session for setting up and inspecting state directly"""
    async with db.async_session() as db_session:
        yield db_session


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the application"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def warden(session) -> models.User:
    """A warden account"""
    return await accounts.create_user(session, "warden", "wardenpass", "warden")


@pytest.fixture
async def admin(session) -> models.User:
    """An admin account"""
    return await accounts.create_user(session, "admin", "adminpass", "admin")


@pytest.fixture
def warden_headers(warden: models.User) -> dict:
    """Bearer headers of the warden account"""
    return {"Authorization": f"Bearer {security.create_access_token(warden)}"}


@pytest.fixture
def admin_headers(admin: models.User) -> dict:
    """Bearer headers of the admin account"""
    return {"Authorization": f"Bearer {security.create_access_token(admin)}"}


@pytest.fixture
async def inmate(session) -> models.Inmate:
    """A registered, incarcerated inmate"""
    return await registry.register_inmate(session, inmate_fields())


@pytest.fixture
async def programs(session) -> list[models.WorkProgram]:
    """The seeded work program catalog"""
    await enrollment.seed_programs(session)
    return await enrollment.list_programs(session)
