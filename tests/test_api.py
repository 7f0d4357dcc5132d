"""HTTP API tests."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from dorehami.api.v1.dependencies import get_optional_gateway
from dorehami.database import get_db, get_session_factory
from dorehami.exceptions import PaymentProcessorError
from dorehami.main import app
from dorehami.models import EventStatus
from dorehami.payments.stripe_gateway import get_stripe_gateway
from dorehami.redis_client import get_redis
from tests.conftest import checkout_completed_payload, sign_payload


@pytest.fixture
async def client(session_factory, redis_client, gateway):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_redis] = lambda: redis_client
    app.dependency_overrides[get_stripe_gateway] = lambda: gateway
    app.dependency_overrides[get_optional_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def user_header(user) -> dict[str, str]:
    return {"X-User-ID": str(user.user_id)}


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["redis"] == "ok"


async def test_health_reports_redis_down(client, redis_client):
    redis_client.ping = AsyncMock(side_effect=RedisConnectionError("refused"))

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["redis"] == "unavailable"


class TestVenues:
    async def test_list(self, client):
        response = await client.get("/api/v1/venues")

        assert response.status_code == 200
        venues = response.json()
        assert [v["name"] for v in venues] == ["Grand Ballroom", "Garden Terrace", "Conference Hall"]
        assert venues[0]["venueId"] == 1
        assert venues[0]["capacity"] == 500
        assert venues[1]["type"] == "Outdoor"

    async def test_menu(self, client):
        response = await client.get("/api/v1/venues/1/menu")

        assert response.status_code == 200
        assert response.json()["menuLink"] == "/menus/grand-ballroom.pdf"

    async def test_menu_without_catering(self, client):
        response = await client.get("/api/v1/venues/3/menu")

        assert response.status_code == 404
        assert response.json() == {"error": "Venue does not offer catering"}

    async def test_unknown_venue(self, client):
        response = await client.get("/api/v1/venues/42")
        assert response.status_code == 404


class TestAvailability:
    async def test_conflict(self, client, organizer, make_event):
        event = await make_event(organizer, title="Evening Gala", venue_id=1)

        response = await client.post(
            "/api/v1/availability",
            json={
                "venueId": 1,
                "startDateTime": "2030-06-01T20:00:00Z",
                "endDateTime": "2030-06-01T22:00:00Z",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["venueId"] == 1
        assert body["isAvailable"] is False
        conflict = body["conflictingEvents"][0]
        assert conflict["id"] == event.event_id
        assert conflict["title"] == "Evening Gala"
        assert datetime.fromisoformat(conflict["start"].replace("Z", "+00:00")).hour == 18

    async def test_exclude_event(self, client, organizer, make_event):
        event = await make_event(organizer, venue_id=1)

        response = await client.post(
            "/api/v1/availability",
            json={
                "venueId": 1,
                "startDateTime": "2030-06-01T18:00:00Z",
                "endDateTime": "2030-06-01T21:00:00Z",
                "excludeEventId": event.event_id,
            },
        )

        assert response.json()["isAvailable"] is True

    async def test_invalid_range(self, client):
        response = await client.post(
            "/api/v1/availability",
            json={
                "venueId": 1,
                "startDateTime": "2030-06-01T22:00:00Z",
                "endDateTime": "2030-06-01T20:00:00Z",
            },
        )

        assert response.status_code == 400
        assert response.json() == {"error": "End date and time must be after start date and time"}

    async def test_missing_fields(self, client):
        response = await client.post("/api/v1/availability", json={"venueId": 1})

        assert response.status_code == 400
        assert "error" in response.json()

    async def test_batch(self, client, organizer, make_event):
        await make_event(organizer, venue_id=2)

        response = await client.post(
            "/api/v1/availability/batch",
            json={
                "startDateTime": "2030-06-01T19:00:00Z",
                "endDateTime": "2030-06-01T20:00:00Z",
            },
        )

        assert response.status_code == 200
        results = {r["venueId"]: r["isAvailable"] for r in response.json()}
        assert results == {1: True, 2: False, 3: True}


class TestEvents:
    async def test_requires_user_header(self, client):
        response = await client.post("/api/v1/events", json={"title": "Idea"})

        assert response.status_code == 401
        assert response.json() == {"error": "X-User-ID header is required"}

    async def test_create_publish_cancel(self, client, organizer):
        response = await client.post(
            "/api/v1/events",
            json={
                "title": "Jazz Night",
                "description": "Live jazz",
                "startDatetime": "2030-07-01T19:00:00",
                "endDatetime": "2030-07-01T22:00:00",
                "timezone": "UTC",
                "venueId": 1,
                "capacity": 100,
                "ticketPrice": "15.00",
            },
            headers=user_header(organizer),
        )
        assert response.status_code == 201
        event = response.json()
        assert event["status"] == "DRAFT"
        assert event["remainingCapacity"] == 100

        response = await client.post(
            f"/api/v1/events/{event['eventId']}/publish", headers=user_header(organizer)
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PUBLISHED"

        response = await client.get("/api/v1/events")
        assert response.json()["total"] == 1

        response = await client.post(
            f"/api/v1/events/{event['eventId']}/cancel", headers=user_header(organizer)
        )
        assert response.json()["status"] == "CANCELLED"

        response = await client.post(
            f"/api/v1/events/{event['eventId']}/publish", headers=user_header(organizer)
        )
        assert response.status_code == 409

    async def test_other_user_cannot_edit(self, client, organizer, make_user, make_event):
        other = await make_user()
        event = await make_event(organizer, status=EventStatus.DRAFT)

        response = await client.patch(
            f"/api/v1/events/{event.event_id}",
            json={"title": "Hijacked"},
            headers=user_header(other),
        )

        assert response.status_code == 403

    async def test_get_unknown(self, client):
        response = await client.get("/api/v1/events/999")

        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    async def test_draft_hidden_from_everyone_but_organizer(
        self, client, organizer, make_user, make_event
    ):
        draft = await make_event(organizer, status=EventStatus.DRAFT)
        stranger = await make_user()
        url = f"/api/v1/events/{draft.event_id}"

        response = await client.get(url)
        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

        response = await client.get(url, headers=user_header(stranger))
        assert response.status_code == 404

        response = await client.get(url, headers=user_header(organizer))
        assert response.status_code == 200
        assert response.json()["status"] == "DRAFT"

    async def test_published_event_is_public(self, client, organizer, make_event):
        event = await make_event(organizer)

        response = await client.get(f"/api/v1/events/{event.event_id}")

        assert response.status_code == 200


class TestCheckoutAndWebhook:
    async def test_checkout_session(self, client, gateway, organizer, purchaser, make_event):
        event = await make_event(organizer)

        response = await client.post(
            "/api/v1/checkout/sessions",
            json={"eventId": event.event_id, "quantity": 2, "userId": purchaser.user_id},
            headers={"Origin": "https://dorehami.test"},
        )

        assert response.status_code == 201
        assert response.json() == {
            "sessionId": "cs_test_123",
            "url": "https://checkout.stripe.com/c/pay/cs_test_123",
            "success": True,
        }
        kwargs = gateway.create_checkout_session.await_args.kwargs
        assert kwargs["cancel_url"].startswith("https://dorehami.test/")

    async def test_checkout_over_capacity(self, client, organizer, purchaser, make_event):
        event = await make_event(organizer, capacity=10, current_attendance=9)

        response = await client.post(
            "/api/v1/checkout/sessions",
            json={"eventId": event.event_id, "quantity": 2, "userId": purchaser.user_id},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Only 1 tickets available", "remaining": 1}

    async def test_checkout_organizer_not_onboarded(self, client, make_user, purchaser, make_event):
        organizer = await make_user()
        event = await make_event(organizer)

        response = await client.post(
            "/api/v1/checkout/sessions",
            json={"eventId": event.event_id, "userId": purchaser.user_id},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Event organizer has not completed Stripe setup"}

    async def test_webhook_books_tickets(self, client, organizer, purchaser, make_event, make_user):
        event = await make_event(organizer)
        payload = checkout_completed_payload(
            metadata={
                "eventId": str(event.event_id),
                "userId": str(purchaser.user_id),
                "quantity": "3",
            }
        )

        response = await client.post(
            "/api/v1/webhooks/stripe",
            content=payload,
            headers={"Stripe-Signature": sign_payload(payload), "Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert response.json() == {"received": True}

        response = await client.get(
            "/api/v1/bookings/session/cs_test_123", headers=user_header(purchaser)
        )
        assert response.status_code == 200
        booking = response.json()
        assert booking["quantity"] == 3
        assert booking["status"] == "COMPLETED"
        assert booking["bookingReference"].startswith("DH-")

        response = await client.get("/api/v1/bookings", headers=user_header(purchaser))
        assert len(response.json()) == 1

        stranger = await make_user()
        response = await client.get(
            "/api/v1/bookings/session/cs_test_123", headers=user_header(stranger)
        )
        assert response.status_code == 403

        response = await client.get(f"/api/v1/events/{event.event_id}")
        assert response.json()["currentAttendance"] == 3

    async def test_webhook_bad_signature(self, client):
        payload = checkout_completed_payload()

        response = await client.post(
            "/api/v1/webhooks/stripe",
            content=payload,
            headers={"Stripe-Signature": sign_payload(payload, secret="whsec_wrong")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid signature"}

    async def test_webhook_without_signature(self, client):
        response = await client.post("/api/v1/webhooks/stripe", content=checkout_completed_payload())

        assert response.status_code == 400
        assert response.json() == {"error": "No Stripe signature found"}

    async def test_webhook_body_not_utf8(self, client):
        response = await client.post(
            "/api/v1/webhooks/stripe",
            content=b"\xff\xfe{}",
            headers={"Stripe-Signature": "t=1,v1=abc"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payload"}

    async def test_booking_not_yet_recorded(self, client, purchaser):
        response = await client.get(
            "/api/v1/bookings/session/cs_unknown", headers=user_header(purchaser)
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Booking not found"}


class TestBookings:
    async def test_requires_user_header(self, client):
        response = await client.get("/api/v1/bookings")

        assert response.status_code == 401
        assert response.json() == {"error": "X-User-ID header is required"}

    async def test_other_users_booking_is_forbidden(
        self, client, organizer, purchaser, make_user, make_event, make_booking
    ):
        booking = await make_booking(purchaser, await make_event(organizer))
        stranger = await make_user()

        response = await client.get(
            f"/api/v1/bookings/{booking.booking_id}", headers=user_header(stranger)
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Not authorized to view this booking"}

    async def test_unknown_reference(self, client, purchaser):
        response = await client.get(
            "/api/v1/bookings/reference/DH-NOPE", headers=user_header(purchaser)
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Booking not found"}

    async def test_upcoming_and_past(
        self, client, organizer, purchaser, make_event, make_booking
    ):
        past = await make_booking(
            purchaser, await make_event(organizer, start=datetime(2020, 3, 1, 18, 0))
        )
        upcoming = await make_booking(
            purchaser, await make_event(organizer, start=datetime(2099, 3, 1, 18, 0))
        )

        response = await client.get(
            "/api/v1/bookings", params={"when": "upcoming"}, headers=user_header(purchaser)
        )
        assert [b["bookingId"] for b in response.json()] == [upcoming.booking_id]

        response = await client.get(
            "/api/v1/bookings", params={"when": "past"}, headers=user_header(purchaser)
        )
        assert [b["bookingId"] for b in response.json()] == [past.booking_id]

        response = await client.get("/api/v1/bookings", headers=user_header(purchaser))
        assert len(response.json()) == 2

    async def test_unknown_timeframe(self, client, purchaser):
        response = await client.get(
            "/api/v1/bookings", params={"when": "tomorrow"}, headers=user_header(purchaser)
        )

        assert response.status_code == 400


class TestPayoutsAndUsers:
    async def test_onboarding_flow(self, client, make_user):
        user = await make_user()

        response = await client.post(
            "/api/v1/payouts/accounts",
            json={"userId": user.user_id, "email": user.email},
        )
        assert response.status_code == 201
        account_id = response.json()["accountId"]

        response = await client.post(
            "/api/v1/payouts/onboarding-links",
            json={"accountId": account_id},
            headers={"Origin": "https://dorehami.test"},
        )
        assert response.json()["url"].startswith("https://connect.stripe.com/")

        response = await client.post(
            "/api/v1/payouts/account-status",
            json={"accountId": account_id, "userId": user.user_id},
        )
        assert response.json()["onboardingComplete"] is True

        response = await client.get("/api/v1/users/me", headers=user_header(user))
        assert response.json()["stripeOnboardingCompleted"] is True

    async def test_profile(self, client):
        response = await client.post(
            "/api/v1/users/profile",
            json={"authUserId": "auth-xyz", "email": "nima@example.com", "displayName": "Nima Rad"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["firstName"] == "Nima"
        assert body["lastName"] == "Rad"

    async def test_payment_config_hides_secrets(self, client):
        response = await client.get("/api/v1/payments/config")

        body = response.json()
        assert body["hasStripeKey"] is True
        assert body["hasWebhookSecret"] is True
        assert body["stripeKeyPrefix"] == "sk_test"
        assert "sk_test_dorehami" not in response.text
        assert "whsec_test_dorehami" not in response.text
        assert body["stripeReachable"] is True
        assert body["balanceAvailable"] == 1250

    async def test_payment_config_reports_processor_error(self, client, gateway):
        gateway.retrieve_balance.side_effect = PaymentProcessorError("Invalid API Key provided")

        response = await client.get("/api/v1/payments/config")

        body = response.json()
        assert response.status_code == 200
        assert body["stripeReachable"] is False
        assert body["stripeError"] == "Invalid API Key provided"
