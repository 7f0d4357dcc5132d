"""Payment processor callback endpoint."""

from typing import Annotated

from fastapi import APIRouter, Header, Request

from dorehami.api.v1.dependencies import WebhookServiceDep

router = APIRouter()


@router.post(
    "/stripe",
    summary="Stripe webhook",
)
async def stripe_webhook(
    request: Request,
    webhook_service: WebhookServiceDep,
    stripe_signature: Annotated[str | None, Header()] = None,
) -> dict:
    """
    Receive a Stripe callback.

    The raw body is verified against the `Stripe-Signature` header before
    anything is parsed. Verified callbacks are always acknowledged.
    """
    payload = await request.body()
    await webhook_service.handle(payload, stripe_signature)
    return {"received": True}
