"""Organizer payout account provisioning."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from dorehami.config import get_settings
from dorehami.exceptions import ForbiddenError
from dorehami.payments.stripe_gateway import StripeGateway
from dorehami.schemas.payment import AccountStatusResponse
from dorehami.services.user_service import UserService

logger = logging.getLogger(__name__)

settings = get_settings()


class PayoutService:
    """Service for organizer payout accounts and their onboarding."""

    def __init__(self, db: AsyncSession, gateway: StripeGateway):
        self.db = db
        self.gateway = gateway
        self.user_service = UserService(db)

    async def create_account(
        self,
        user_id: int,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> str:
        """
        Create a payout account for an organizer and store its id.

        A user who already has an account gets it back without a new one
        being created.

        Returns:
            The payout account id
        """
        user = await self.user_service.require_user(user_id)
        if user.stripe_account_id:
            logger.info(f"User {user_id} already has payout account {user.stripe_account_id}")
            return user.stripe_account_id

        account = await self.gateway.create_connect_account(
            email=email,
            first_name=first_name or user.first_name,
            last_name=last_name or user.last_name,
            country=settings.STRIPE_CONNECT_COUNTRY,
        )

        user.stripe_account_id = account.id
        user.stripe_onboarding_completed = False
        user.is_organizer = True
        await self.db.commit()

        logger.info(f"Payout account {account.id} created for user {user_id}")
        return account.id

    async def create_onboarding_link(self, account_id: str, origin: str | None = None) -> str:
        """Get the processor-hosted onboarding URL for an account."""
        base_url = (origin or settings.APP_BASE_URL).rstrip("/")
        link = await self.gateway.create_account_link(
            account_id=account_id,
            refresh_url=f"{base_url}/plan?refresh={account_id}",
            return_url=f"{base_url}/plan?onboarding=complete",
        )
        return link.url

    async def account_status(self, account_id: str, user_id: int) -> AccountStatusResponse:
        """
        Ask the processor whether onboarding is finished and remember it.

        Onboarding is complete once details are submitted and both charges
        and payouts are enabled.
        """
        user = await self.user_service.require_user(user_id)
        if user.stripe_account_id != account_id:
            raise ForbiddenError("Payout account does not belong to this user")

        account = await self.gateway.retrieve_account(account_id)
        details_submitted = bool(account.details_submitted)
        charges_enabled = bool(account.charges_enabled)
        payouts_enabled = bool(account.payouts_enabled)
        onboarding_complete = details_submitted and charges_enabled and payouts_enabled

        if onboarding_complete and not user.stripe_onboarding_completed:
            user.stripe_onboarding_completed = True
            await self.db.commit()
            logger.info(f"Payout onboarding completed for user {user_id}")

        return AccountStatusResponse(
            account_id=account.id,
            onboarding_complete=onboarding_complete,
            charges_enabled=charges_enabled,
            payouts_enabled=payouts_enabled,
            details_submitted=details_submitted,
        )
