"""Payment processor callback payloads.

Callbacks are parsed into one model per handled event type, keyed on the
``type`` field. Any other type becomes an ``UnhandledWebhookEvent`` so new
processor event types are acknowledged instead of rejected.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class WebhookModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CheckoutSessionObject(WebhookModel):
    id: str
    amount_total: int | None = None
    currency: str | None = None
    payment_intent: str | None = None
    payment_status: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)


class PaymentIntentObject(WebhookModel):
    id: str
    amount: int | None = None
    currency: str | None = None
    status: str | None = None


class CheckoutSessionData(WebhookModel):
    object: CheckoutSessionObject


class PaymentIntentData(WebhookModel):
    object: PaymentIntentObject


class CheckoutSessionCompletedEvent(WebhookModel):
    id: str
    type: Literal["checkout.session.completed"]
    data: CheckoutSessionData


class PaymentIntentSucceededEvent(WebhookModel):
    id: str
    type: Literal["payment_intent.succeeded"]
    data: PaymentIntentData


class UnhandledWebhookEvent(WebhookModel):
    id: str | None = None
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


WebhookEvent = CheckoutSessionCompletedEvent | PaymentIntentSucceededEvent | UnhandledWebhookEvent

HANDLED_EVENT_TYPES: dict[str, type[WebhookModel]] = {
    "checkout.session.completed": CheckoutSessionCompletedEvent,
    "payment_intent.succeeded": PaymentIntentSucceededEvent,
}


def parse_webhook_event(payload: dict[str, Any]) -> WebhookEvent:
    """Build the typed event for a verified callback payload."""
    model = HANDLED_EVENT_TYPES.get(payload.get("type", ""), UnhandledWebhookEvent)
    return model.model_validate(payload)
