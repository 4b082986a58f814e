"""Test configuration and fixtures"""

import os

# Keep the application engine off Postgres during tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.config import Settings, get_settings
from app.database import Base, get_db
from app.models.reservation import PaymentStatus, ProductType, Reservation
from app.models.sms import ScheduleType
from app.models.template import MessageTemplate


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "admin-pass-123"
CRON_SECRET = "cron-secret-456"


class FakeNotifier:
    """Collects operator messages instead of calling Telegram"""

    def __init__(self):
        self.messages = []

    async def send(self, text: str) -> bool:
        self.messages.append(text)
        return True


@pytest.fixture
def test_settings():
    """Settings with no gateway or Telegram credentials"""
    return Settings(
        _env_file=None,
        database_url=TEST_DATABASE_URL,
        admin_password=ADMIN_PASSWORD,
        cron_secret=CRON_SECRET,
        jwt_secret_key="test-jwt-secret",
        ncloud_access_key="",
        ncloud_secret_key="",
        ncloud_service_id="",
        ncloud_calling_number="",
        telegram_bot_token="",
        telegram_chat_id="",
    )


@pytest.fixture
def gateway_settings(test_settings):
    """Settings with SENS credentials filled in"""
    return test_settings.model_copy(update={
        "ncloud_access_key": "access-key",
        "ncloud_secret_key": "secret-key",
        "ncloud_service_id": "svc-123",
        "ncloud_calling_number": "0212345678",
        "sens_base_url": "https://sens.test",
    })


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def make_reservation(test_db):
    """Factory for persisted reservations"""
    async def _make(**overrides):
        fields = {
            "use_date": date(2025, 6, 10),
            "product_type": ProductType.OVERNIGHT,
            "people_count": 30,
            "company_name": "Acme Corp",
            "manager_name": "Kim",
            "phone": "010-1234-5678",
            "deposit_amount": 100000,
            "payment_status": PaymentStatus.COMPLETED,
        }
        fields.update(overrides)
        reservation = Reservation(**fields)
        test_db.add(reservation)
        await test_db.commit()
        await test_db.refresh(reservation)
        return reservation

    return _make


@pytest.fixture
def make_template(test_db):
    """Factory for persisted message templates"""
    async def _make(product_type=ProductType.OVERNIGHT, schedule_type=ScheduleType.D_MINUS_1,
                    message_content="[Venue] {company_name}, see you on {use_date} ({people_count})"):
        template = MessageTemplate(
            product_type=product_type,
            schedule_type=schedule_type,
            message_content=message_content,
        )
        test_db.add(template)
        await test_db.commit()
        return template

    return _make


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
async def client(test_db, test_settings):
    """Create test client with overridden database and settings"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client):
    """Create authenticated test client"""
    response = await client.post("/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200

    return client
