"""Stripe payment processor gateway.

All SDK calls are blocking HTTP round trips, so each one runs in a worker
thread. Every ``stripe.StripeError`` is re-raised as
``PaymentProcessorError`` carrying the processor's user-facing message.
"""

import asyncio
import json
import logging
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from typing import Any

import stripe

from dorehami.config import Settings, get_settings
from dorehami.exceptions import (
    PaymentConfigurationError,
    PaymentProcessorError,
    WebhookSignatureError,
)

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to the nearest whole minor unit."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / Decimal(100)).quantize(Decimal("0.01"))


def calculate_platform_fee(amount_minor: int, fee_percent: Decimal | None = None) -> int:
    """Platform fee in minor units, rounded to the nearest integer."""
    if fee_percent is None:
        fee_percent = get_settings().PLATFORM_FEE_PERCENT
    fee = Decimal(amount_minor) * Decimal(fee_percent) / Decimal(100)
    return int(fee.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeGateway:
    """Async facade over the Stripe SDK for one configured account."""

    def __init__(
        self,
        secret_key: str | None,
        webhook_secret: str | None = None,
        webhook_tolerance: int = 300,
    ):
        if not secret_key:
            raise PaymentConfigurationError(
                "STRIPE_SECRET_KEY is not set in environment variables"
            )
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.webhook_tolerance = webhook_tolerance

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeGateway":
        return cls(
            secret_key=settings.STRIPE_SECRET_KEY,
            webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
            webhook_tolerance=settings.STRIPE_WEBHOOK_TOLERANCE_SECONDS,
        )

    async def _call(self, func, **params) -> Any:
        try:
            return await asyncio.to_thread(func, api_key=self.secret_key, **params)
        except stripe.StripeError as exc:
            message = getattr(exc, "user_message", None) or str(exc)
            logger.error(f"Stripe call {func.__qualname__} failed: {message}")
            raise PaymentProcessorError(message) from exc

    async def create_checkout_session(
        self,
        *,
        title: str,
        description: str | None,
        images: list[str],
        unit_amount: int,
        quantity: int,
        currency: str,
        application_fee_amount: int,
        destination_account: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> stripe.checkout.Session:
        """Create a hosted checkout session paying out to a connected account."""
        product_data: dict[str, Any] = {"name": f"{title} - Event Ticket", "images": images}
        if description:
            product_data["description"] = description
        return await self._call(
            stripe.checkout.Session.create,
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": currency,
                        "product_data": product_data,
                        "unit_amount": unit_amount,
                    },
                    "quantity": quantity,
                }
            ],
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            payment_intent_data={
                "application_fee_amount": application_fee_amount,
                "transfer_data": {"destination": destination_account},
            },
            metadata=metadata,
        )

    async def create_connect_account(
        self,
        *,
        email: str,
        first_name: str | None,
        last_name: str | None,
        country: str,
    ) -> stripe.Account:
        """Create an express payout account for an organizer."""
        individual = {"email": email}
        if first_name:
            individual["first_name"] = first_name
        if last_name:
            individual["last_name"] = last_name
        return await self._call(
            stripe.Account.create,
            type="express",
            country=country,
            email=email,
            capabilities={
                "card_payments": {"requested": True},
                "transfers": {"requested": True},
            },
            business_type="individual",
            individual=individual,
        )

    async def create_account_link(
        self,
        *,
        account_id: str,
        refresh_url: str,
        return_url: str,
    ) -> stripe.AccountLink:
        return await self._call(
            stripe.AccountLink.create,
            account=account_id,
            refresh_url=refresh_url,
            return_url=return_url,
            type="account_onboarding",
        )

    async def retrieve_account(self, account_id: str) -> stripe.Account:
        return await self._call(stripe.Account.retrieve, id=account_id)

    async def refund_payment_intent(self, payment_intent_id: str) -> stripe.Refund:
        return await self._call(stripe.Refund.create, payment_intent=payment_intent_id)

    async def retrieve_balance(self) -> stripe.Balance:
        return await self._call(stripe.Balance.retrieve)

    def verify_webhook(self, payload: bytes | str, signature: str | None) -> dict[str, Any]:
        """
        Verify a callback signature and decode its JSON body.

        The signature is checked against the raw body before anything is
        parsed.

        Raises:
            PaymentConfigurationError: If no webhook secret is configured
            WebhookSignatureError: If the header is missing or does not match
        """
        if not self.webhook_secret:
            raise PaymentConfigurationError("Webhook secret not configured")
        if not signature:
            raise WebhookSignatureError("No Stripe signature found")

        if isinstance(payload, bytes):
            try:
                payload = payload.decode("utf-8")
            except UnicodeDecodeError as exc:
                logger.warning("Webhook payload is not valid UTF-8")
                raise WebhookSignatureError("Invalid payload") from exc

        try:
            stripe.WebhookSignature.verify_header(
                payload,
                signature,
                self.webhook_secret,
                self.webhook_tolerance,
            )
        except stripe.SignatureVerificationError as exc:
            logger.warning(f"Webhook signature verification failed: {exc}")
            raise WebhookSignatureError("Invalid signature") from exc

        try:
            return json.loads(payload)
        except ValueError as exc:
            logger.warning("Webhook payload is not valid JSON")
            raise WebhookSignatureError("Invalid payload") from exc


@lru_cache
def get_stripe_gateway() -> StripeGateway:
    """Get the gateway for the configured Stripe account."""
    return StripeGateway.from_settings(get_settings())
