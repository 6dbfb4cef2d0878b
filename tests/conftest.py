# tests/conftest.py
import os

# main.py validates the environment at import time
os.environ.update(
    {
        "APP_TITLE": "Appointment Reminders API",
        "APP_VERSION": "1.0.0",
        "ENVIRONMENT": "development",
        "LOG_LEVEL": "CRITICAL",
        "LOG_FORMAT": "console",
        "DB_DRIVER": "aiosqlite",
        "DB_NAME": "unused-by-tests.db",
        "SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
    }
)

from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from main import app  # noqa: E402
from app.core import Role  # noqa: E402
from app.db import DbManager  # noqa: E402
from app.db.models import DbBaseModel  # noqa: E402
from app.services.v1 import IdentityService, SessionContext, log_session_change  # noqa: E402
from common.config import get_config  # noqa: E402


@pytest.fixture
async def db_manager(tmp_path):
    manager = DbManager(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with manager.engine.begin() as conn:
        await conn.run_sync(DbBaseModel.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
async def session(db_manager):
    async with db_manager.session_maker() as db_session:
        yield db_session


@pytest.fixture
def session_context():
    context = SessionContext()
    yield context
    context.close()


@pytest.fixture
def identity(session, session_context):
    return IdentityService(session, session_context, get_config().auth)


@pytest.fixture
async def client(db_manager, session_context):
    # Same wiring as the lifespan
    unsubscribe = session_context.subscribe(log_session_change)
    app.state.db_manager = db_manager
    app.state.session_context = session_context
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    del app.state.db_manager
    del app.state.session_context
    unsubscribe()


@pytest.fixture
def make_user(identity):
    """Register an account and return its identity."""

    async def _make(
        email: str,
        role: Role,
        name: Optional[str] = None,
        password: str = "secret123",
    ):
        result = await identity.register(
            email, password, role=role, name=name or email.split("@")[0].title()
        )
        assert result.success, result.error
        return result.user

    return _make


@pytest.fixture
def sign_in(client):
    """Register over HTTP, log in and return the Authorization header."""

    async def _sign_in(email: str, role: Role, name: str) -> dict[str, str]:
        response = await client.post(
            "/auth/register",
            json={"email": email, "password": "secret123", "name": name, "role": role.value},
        )
        assert response.status_code == 201, response.text
        response = await client.post("/auth/login", json={"email": email, "password": "secret123"})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _sign_in
