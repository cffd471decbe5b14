"""
Shared fixtures: in-memory SQLite, fake Redis, ASGI client with a fixed clock
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import fakeredis.aioredis
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from temple_billing.core import clock
from temple_billing.core.database import Base, get_db, get_redis
from temple_billing.core.security import get_password_hash
from temple_billing.main import app
from temple_billing.models import Billing, Pooja, User
from temple_billing.models.enums import UserRole

# a Sunday in fiscal year 25-26
FIXED_NOW = datetime(2025, 6, 15, 10, 30, 0)

STAFF_PASSWORD = "staff-pass"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis():
    return fakeredis.aioredis.FakeRedis()


@pytest.fixture
def fixed_clock(monkeypatch):
    monkeypatch.setattr(clock, "now", lambda: FIXED_NOW)
    monkeypatch.setattr(clock, "today", lambda: FIXED_NOW.date())
    return FIXED_NOW


@pytest.fixture
async def client(session_factory, fake_redis, fixed_clock):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_redis():
        yield fake_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Data helpers
# =============================================================================

async def add_user(session_factory, username: str, password: str, role: UserRole = UserRole.STAFF) -> None:
    async with session_factory() as session:
        session.add(User(
            username=username,
            password_hash=get_password_hash(password),
            name=username.title(),
            role=role,
        ))
        await session.commit()


async def add_pooja(session_factory, name: str, price: str, visible: bool = True) -> None:
    async with session_factory() as session:
        session.add(Pooja(name=name, price=Decimal(price), visible=visible))
        await session.commit()


def make_bill(
    receipt_no: str,
    total: str,
    username: str = "ravi",
    pooja_name: str = "Archana",
    payment_mode: str = "Cash",
    bill_date: date = FIXED_NOW.date(),
    qty: int = 1,
    reference_id: Optional[str] = None,
) -> Billing:
    amount = Decimal(total)
    return Billing(
        devotee_name="Devotee",
        pooja_name=pooja_name,
        qty=qty,
        price=amount / qty,
        total=amount,
        receipt_no=receipt_no,
        fiscal_year=receipt_no.split("/")[1],
        bill_date=bill_date,
        bill_datetime=datetime.combine(bill_date, FIXED_NOW.time()),
        username=username,
        payment_mode=payment_mode,
        reference_id=reference_id,
        withdrawn=False,
    )


async def login(client: AsyncClient, username: str, password: str) -> dict[str, str]:
    response = await client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["data"]["token"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def staff_headers(client, session_factory):
    await add_user(session_factory, "ravi", STAFF_PASSWORD)
    return await login(client, "ravi", STAFF_PASSWORD)


@pytest.fixture
async def admin_headers(client, session_factory):
    await add_user(session_factory, "admin", ADMIN_PASSWORD, UserRole.ADMIN)
    return await login(client, "admin", ADMIN_PASSWORD)
