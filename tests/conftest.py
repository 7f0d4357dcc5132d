"""Shared fixtures.

Each test gets its own SQLite database file, a mocked Redis client whose
claims always succeed, and a Stripe gateway whose network calls are mocked.
"""

import hashlib
import hmac
import json
import os
import time
from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dorehami")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_dorehami")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from dorehami.models import Base, Booking, BookingStatus, Event, EventStatus, User
from dorehami.payments.stripe_gateway import StripeGateway

WEBHOOK_SECRET = "whsec_test_dorehami"


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'dorehami.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def redis_client():
    """Redis mock where every claim is free."""
    client = MagicMock()
    client.set = AsyncMock(return_value=True)
    client.ping = AsyncMock(return_value=True)
    client.register_script.return_value = AsyncMock(return_value=1)
    return client


@pytest.fixture
def gateway():
    gateway = StripeGateway("sk_test_dorehami", webhook_secret=WEBHOOK_SECRET)
    gateway.create_checkout_session = AsyncMock(
        return_value=SimpleNamespace(
            id="cs_test_123",
            url="https://checkout.stripe.com/c/pay/cs_test_123",
        )
    )
    gateway.create_connect_account = AsyncMock(return_value=SimpleNamespace(id="acct_test_1"))
    gateway.create_account_link = AsyncMock(
        return_value=SimpleNamespace(url="https://connect.stripe.com/setup/e/acct_test_1")
    )
    gateway.retrieve_account = AsyncMock(
        return_value=SimpleNamespace(
            id="acct_test_1",
            details_submitted=True,
            charges_enabled=True,
            payouts_enabled=True,
        )
    )
    gateway.refund_payment_intent = AsyncMock(return_value=SimpleNamespace(id="re_test_1"))
    gateway.retrieve_balance = AsyncMock(
        return_value=SimpleNamespace(available=[SimpleNamespace(amount=1250, currency="usd")])
    )
    return gateway


@pytest.fixture
def make_user(db):
    counter = iter(range(1, 1000))

    async def _make_user(**overrides) -> User:
        n = next(counter)
        fields = {
            "auth_user_id": f"auth-{n}",
            "email": f"user{n}@example.com",
            "first_name": "Test",
            "last_name": f"User{n}",
            "is_organizer": True,
        }
        fields.update(overrides)
        user = User(**fields)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def organizer(make_user):
    return await make_user(stripe_account_id="acct_test_1", stripe_onboarding_completed=True)


@pytest.fixture
async def purchaser(make_user):
    return await make_user(phone="+15550100")


@pytest.fixture
def make_event(db):
    async def _make_event(organizer: User, **overrides) -> Event:
        start = overrides.pop("start", datetime(2030, 6, 1, 18, 0))
        end = overrides.pop("end", start + timedelta(hours=3))
        fields = {
            "title": "Summer Concert",
            "description": "An evening of live music",
            "start_datetime": start,
            "end_datetime": end,
            "timezone": "UTC",
            "venue_id": 1,
            "capacity": 100,
            "current_attendance": 0,
            "ticket_price": Decimal("20.00"),
            "status": EventStatus.PUBLISHED,
            "organizer_id": organizer.user_id,
        }
        fields.update(overrides)
        event = Event(**fields)
        db.add(event)
        await db.commit()
        await db.refresh(event)
        return event

    return _make_event


@pytest.fixture
def make_booking(db):
    counter = iter(range(1, 1000))

    async def _make_booking(user: User, event: Event, **overrides) -> Booking:
        n = next(counter)
        fields = {
            "booking_reference": f"DH-TEST{n:06d}",
            "event_id": event.event_id,
            "user_id": user.user_id,
            "quantity": 1,
            "total_amount": event.ticket_price,
            "currency": "usd",
            "platform_fee": Decimal("0.16"),
            "status": BookingStatus.COMPLETED,
            "payment_method": "stripe",
            "stripe_session_id": f"cs_test_booking_{n}",
            "contact_email": user.email,
        }
        fields.update(overrides)
        booking = Booking(**fields)
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
        return booking

    return _make_booking


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header for a payload."""
    timestamp = timestamp or int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{payload}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def checkout_completed_payload(
    session_id: str = "cs_test_123",
    metadata: dict | None = None,
    amount_total: int = 6000,
    payment_intent: str | None = "pi_test_123",
) -> str:
    return json.dumps(
        {
            "id": "evt_test_1",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {
                "object": {
                    "id": session_id,
                    "object": "checkout.session",
                    "amount_total": amount_total,
                    "currency": "usd",
                    "payment_intent": payment_intent,
                    "payment_status": "paid",
                    "metadata": metadata if metadata is not None else {},
                }
            },
        }
    )
