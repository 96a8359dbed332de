"""Фикстуры для тестов API."""
import asyncio
import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Использовать тестовую БД, если задана (чтобы не трогать прод); иначе — SQLite во временной папке
_TMP_DIR = tempfile.mkdtemp(prefix="stitchbook-tests-")
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{_TMP_DIR}/test.db")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

from stitchbook import models  # noqa: E402
from stitchbook.core.database import Base, async_session_maker, engine  # noqa: E402
from stitchbook.models import Staff, StaffRole  # noqa: E402
from stitchbook.services.auth_service import hash_password, issue_token  # noqa: E402


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


def run_in_session(fn):
    """Выполнить async fn(session) в отдельной сессии и закоммитить."""
    async def _go():
        async with async_session_maker() as session:
            result = await fn(session)
            await session.commit()
            return result
    return asyncio.run(_go())


def make_staff(name: str, role: StaffRole, login: str, password: str = "secret") -> Staff:
    async def _create(db):
        s = Staff(
            name=name,
            phone_number="9000000000",
            role=role,
            login=login,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(s)
        await db.flush()
        return s
    return run_in_session(_create)


def auth_headers(staff: Staff) -> dict:
    token = issue_token(staff.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def clean_db():
    asyncio.run(_reset_schema())


@pytest.fixture
def client(clean_db):
    """Тестовый клиент приложения на чистой схеме."""
    from stitchbook.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin(clean_db) -> Staff:
    return make_staff("Admin", StaffRole.ROLE_ADMIN, "admin")


@pytest.fixture
def staff_member(clean_db) -> Staff:
    return make_staff("Meena", StaffRole.ROLE_STAFF, "meena")


@pytest.fixture
def admin_headers(admin) -> dict:
    return auth_headers(admin)


@pytest.fixture
def staff_headers(staff_member) -> dict:
    return auth_headers(staff_member)
