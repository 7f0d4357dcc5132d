"""Application error hierarchy.

Every error raised by the service layer derives from ``DoreHamiError`` and
carries the HTTP status the API should answer with. Handlers registered in
``dorehami.api.errors`` turn them into ``{"error": message}`` responses.
"""


class DoreHamiError(Exception):
    """Base error with a user-safe message and an HTTP status code."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidRequestError(DoreHamiError):
    """Missing or malformed request fields."""

    status_code = 400


class NotFoundError(DoreHamiError):
    """Unknown event, user, venue or payout account."""

    status_code = 404


class AuthenticationRequiredError(DoreHamiError):
    """No acting user on a user-scoped request."""

    status_code = 401


class ForbiddenError(DoreHamiError):
    """Acting user may not touch the resource."""

    status_code = 403


class BusinessRuleError(DoreHamiError):
    """Request is well-formed but breaks a business rule."""

    status_code = 400


class CapacityExceededError(BusinessRuleError):
    """Not enough tickets left for the requested quantity."""

    def __init__(self, remaining: int):
        super().__init__(f"Only {remaining} tickets available")
        self.remaining = remaining


class FreeEventError(BusinessRuleError):
    """Free events are not sold through checkout."""

    def __init__(self):
        super().__init__("This is a free event")


class EventNotOnSaleError(BusinessRuleError):
    """Event is not published."""

    def __init__(self, event_id: int):
        super().__init__(f"Event {event_id} is not on sale")
        self.event_id = event_id


class PayoutSetupRequiredError(BusinessRuleError):
    """Organizer has not finished payout onboarding."""

    def __init__(self):
        super().__init__("Event organizer has not completed Stripe setup")


class InvalidStatusTransitionError(BusinessRuleError):
    """Event lifecycle transition not allowed from the current status."""

    status_code = 409


class PaymentProcessorError(DoreHamiError):
    """The payment processor failed or rejected the call."""

    status_code = 502


class PaymentConfigurationError(DoreHamiError):
    """Payment processor keys are missing."""

    status_code = 500


class WebhookSignatureError(DoreHamiError):
    """Callback payload failed signature verification."""

    status_code = 400
