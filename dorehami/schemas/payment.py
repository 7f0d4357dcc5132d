"""Checkout and payout schemas."""

from pydantic import Field

from dorehami.schemas.common import BaseSchema


class CheckoutSessionCreate(BaseSchema):
    """Schema for a ticket purchase request."""

    event_id: int
    quantity: int = Field(1, ge=1)
    user_id: int


class CheckoutSessionResponse(BaseSchema):
    """Where to send the purchaser to pay."""

    session_id: str
    url: str
    success: bool = True


class PayoutAccountCreate(BaseSchema):
    user_id: int
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class PayoutAccountResponse(BaseSchema):
    account_id: str
    success: bool = True


class OnboardingLinkCreate(BaseSchema):
    account_id: str = Field(..., min_length=1)


class OnboardingLinkResponse(BaseSchema):
    url: str
    success: bool = True


class AccountStatusRequest(BaseSchema):
    account_id: str = Field(..., min_length=1)
    user_id: int


class AccountStatusResponse(BaseSchema):
    account_id: str
    onboarding_complete: bool
    charges_enabled: bool
    payouts_enabled: bool
    details_submitted: bool
    success: bool = True


class PaymentConfigResponse(BaseSchema):
    """Which Stripe keys are configured, without exposing them."""

    has_stripe_key: bool
    has_publishable_key: bool
    has_webhook_secret: bool
    stripe_key_prefix: str | None = None
    publishable_key: str | None = None
    stripe_reachable: bool | None = None
    stripe_error: str | None = None
    balance_available: int | None = None
    balance_currency: str | None = None
