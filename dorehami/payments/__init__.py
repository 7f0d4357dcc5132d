"""Payment processor integration."""

from dorehami.payments.stripe_gateway import (
    StripeGateway,
    calculate_platform_fee,
    from_minor_units,
    get_stripe_gateway,
    to_minor_units,
)

__all__ = [
    "StripeGateway",
    "calculate_platform_fee",
    "from_minor_units",
    "get_stripe_gateway",
    "to_minor_units",
]
