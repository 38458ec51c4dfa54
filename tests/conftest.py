"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Generator, List, Tuple
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from shortlet_settlement.api.dependencies import get_notification_client
from shortlet_settlement.api.main import create_app
from shortlet_settlement.domain.models import FeeComponents, PaymentStatus
from shortlet_settlement.domain.money import Money
from shortlet_settlement.infrastructure.database.models import Base, Payment
from shortlet_settlement.infrastructure.database.repositories import PaymentRepository
from shortlet_settlement.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FIXED_NOW = datetime(2026, 3, 14, 12, 0, 0, tzinfo=timezone.utc)


class RecordingTasks:
    """Stands in for BackgroundTasks: records scheduled tasks instead of running them"""

    def __init__(self) -> None:
        self.scheduled: List[Tuple[Callable[..., Any], tuple, dict]] = []

    def add_task(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self.scheduled.append((func, args, kwargs))


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier() -> AsyncMock:
    """Email client double; send_realtor_payout succeeds unless a test says otherwise"""
    mock = AsyncMock()
    mock.send_realtor_payout.return_value = None
    return mock


@pytest.fixture
def client(db: Session, notifier: AsyncMock) -> TestClient:
    """Create FastAPI test client with test database and a mocked email client"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_client] = lambda: notifier
    return TestClient(app)


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def tasks() -> RecordingTasks:
    return RecordingTasks()


@pytest.fixture
def make_payment(db: Session) -> Callable[..., Payment]:
    """Factory for payment rows; defaults to the 100000/10000/20000 NGN booking"""
    repo = PaymentRepository(db)

    def _make(
        room_fee: str = "100000",
        cleaning_fee: str = "10000",
        security_deposit: str = "20000",
        status: PaymentStatus = PaymentStatus.INITIATED,
        realtor_id: str = "realtor_1",
        realtor_email: str | None = "host@example.com",
        booking_id: str = "booking_1",
        created_at: datetime | None = None,
        currency: str = "NGN",
        **fields: Any,
    ) -> Payment:
        fees = FeeComponents(
            room_fee=Money(room_fee, currency),
            cleaning_fee=Money(cleaning_fee, currency),
            security_deposit=Money(security_deposit, currency),
        )
        payment = repo.create_payment(
            booking_id=booking_id,
            realtor_id=realtor_id,
            fees=fees,
            status=status,
            realtor_email=realtor_email,
            realtor_business_name="Lekki Stays",
            created_at=created_at or FIXED_NOW,
        )
        if fields:
            repo.update_payment(payment, **fields)
        return payment

    return _make


@pytest.fixture
def settled_payment(make_payment: Callable[..., Payment]) -> Payment:
    """SETTLED payment with flat-rate commission already attached (7% of 130000)"""
    return make_payment(
        status=PaymentStatus.SETTLED,
        platform_commission=Decimal("9100"),
        commission_rate=Decimal("0.07"),
        realtor_earnings=Decimal("120900"),
    )
