import os

# Configure settings before the app modules read them
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("SHIFTS_PER_DAY", "1")
os.environ.setdefault("AUTO_END_SHIFT", "true")

import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.database import get_async_session
from app.models.auth.user import User
from app.models.base import Base
from app.models.organization.company import Company
from app.models.shared.enums import UserRole
from main import app

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite://"

@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session

@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture
async def company(session: AsyncSession) -> Company:
    company = Company(name="Nile Travel", subdomain="nile", settings={})
    session.add(company)
    await session.commit()
    return company

async def _add_user(session: AsyncSession, name: str, email: str, role: UserRole, company_id=None) -> User:
    user = User(name=name, email=email, role=role, company_id=company_id)
    session.add(user)
    await session.commit()
    return user

@pytest.fixture
async def employee(session: AsyncSession) -> User:
    """Employee outside any company; environment defaults apply"""
    return await _add_user(session, "Sara Agent", "sara@example.com", UserRole.EMPLOYEE)

@pytest.fixture
async def company_employee(session: AsyncSession, company: Company) -> User:
    return await _add_user(session, "Omar Agent", "omar@example.com", UserRole.EMPLOYEE, company.id)

@pytest.fixture
async def company_manager(session: AsyncSession, company: Company) -> User:
    return await _add_user(session, "Mona Manager", "mona@example.com", UserRole.MANAGER, company.id)

@pytest.fixture
async def company_admin(session: AsyncSession, company: Company) -> User:
    return await _add_user(session, "Adel Admin", "adel@example.com", UserRole.ADMIN, company.id)
