import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-bytes")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.security import get_password_hash
from crm_backend.database import build_engine, get_session
from crm_backend.main import app
from crm_backend.models import User
from crm_backend.schemas.customer import CustomerCreate
from crm_backend.schemas.customer_list import CustomerListCreate
from crm_backend.services.customer_list_service import CustomerListService
from crm_backend.services.customer_service import CustomerService


@pytest.fixture
async def engine(tmp_path):
    db_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'crm.db'}")
    async with db_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as db_session:
        yield db_session


async def _create_user(session_factory, name: str, email: str, password: str = "password123"):
    async with session_factory() as db_session:
        user = User(name=name, email=email, password_hash=get_password_hash(password))
        db_session.add(user)
        await db_session.commit()
        return user.id


@pytest.fixture
async def owner_id(session_factory):
    return await _create_user(session_factory, "Owner", "owner@example.com")


@pytest.fixture
async def other_owner_id(session_factory):
    return await _create_user(session_factory, "Intruder", "intruder@example.com")


@pytest.fixture
def make_list(session):
    async def _make(user_id, name: str, description: str = None):
        customer_list = await CustomerListService(session).create(
            user_id, CustomerListCreate(name=name, description=description)
        )
        return customer_list.id

    return _make


@pytest.fixture
def make_customer(session):
    async def _make(user_id, customer_list_id, name: str, email: str = None, status: str = "active"):
        customer = await CustomerService(session).create(
            user_id,
            CustomerCreate(
                name=name,
                email=email or f"{name.lower()}@example.com",
                status=status,
                customer_list_id=customer_list_id
            )
        )
        return customer.id

    return _make


@pytest.fixture
async def client(session_factory):
    async def _get_test_session():
        async with session_factory() as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _get_test_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    async def _register(name: str = "Jane Doe", email: str = "jane@example.com", password: str = "secret123"):
        response = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register
