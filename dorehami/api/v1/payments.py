"""Payment configuration diagnostics."""

import logging

from fastapi import APIRouter

from dorehami.api.v1.dependencies import OptionalGateway
from dorehami.config import get_settings
from dorehami.exceptions import PaymentProcessorError
from dorehami.schemas.payment import PaymentConfigResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/config",
    response_model=PaymentConfigResponse,
    summary="Payment configuration",
)
async def payment_config(gateway: OptionalGateway) -> PaymentConfigResponse:
    """
    Report which Stripe keys are set and whether Stripe accepts the secret key.

    Secret values are never returned.
    """
    settings = get_settings()
    secret_key = settings.STRIPE_SECRET_KEY

    response = PaymentConfigResponse(
        has_stripe_key=bool(secret_key),
        has_publishable_key=bool(settings.STRIPE_PUBLISHABLE_KEY),
        has_webhook_secret=bool(settings.STRIPE_WEBHOOK_SECRET),
        stripe_key_prefix=secret_key[:7] if secret_key else None,
        publishable_key=settings.STRIPE_PUBLISHABLE_KEY or None,
    )
    if gateway is None:
        return response

    try:
        balance = await gateway.retrieve_balance()
    except PaymentProcessorError as exc:
        response.stripe_reachable = False
        response.stripe_error = exc.message
        return response

    response.stripe_reachable = True
    if balance.available:
        response.balance_available = balance.available[0].amount
        response.balance_currency = balance.available[0].currency
    return response
