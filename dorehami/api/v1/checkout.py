"""Checkout API endpoints."""

from fastapi import APIRouter, status

from dorehami.api.v1.dependencies import CheckoutServiceDep, RequestOrigin
from dorehami.schemas.payment import CheckoutSessionCreate, CheckoutSessionResponse

router = APIRouter()


@router.post(
    "/sessions",
    response_model=CheckoutSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start ticket checkout",
)
async def create_checkout_session(
    request: CheckoutSessionCreate,
    origin: RequestOrigin,
    checkout_service: CheckoutServiceDep,
) -> CheckoutSessionResponse:
    """
    Create a hosted checkout session for tickets to a published paid event.

    No booking exists until the payment callback arrives.
    """
    return await checkout_service.create_checkout_session(
        event_id=request.event_id,
        user_id=request.user_id,
        quantity=request.quantity,
        origin=origin,
    )
