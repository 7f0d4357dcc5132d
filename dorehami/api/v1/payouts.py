"""Organizer payout account API endpoints."""

from fastapi import APIRouter, status

from dorehami.api.v1.dependencies import PayoutServiceDep, RequestOrigin
from dorehami.schemas.payment import (
    AccountStatusRequest,
    AccountStatusResponse,
    OnboardingLinkCreate,
    OnboardingLinkResponse,
    PayoutAccountCreate,
    PayoutAccountResponse,
)

router = APIRouter()


@router.post(
    "/accounts",
    response_model=PayoutAccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create payout account",
)
async def create_account(
    request: PayoutAccountCreate,
    payout_service: PayoutServiceDep,
) -> PayoutAccountResponse:
    account_id = await payout_service.create_account(
        user_id=request.user_id,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return PayoutAccountResponse(account_id=account_id)


@router.post(
    "/onboarding-links",
    response_model=OnboardingLinkResponse,
    summary="Create onboarding link",
)
async def create_onboarding_link(
    request: OnboardingLinkCreate,
    origin: RequestOrigin,
    payout_service: PayoutServiceDep,
) -> OnboardingLinkResponse:
    url = await payout_service.create_onboarding_link(request.account_id, origin)
    return OnboardingLinkResponse(url=url)


@router.post(
    "/account-status",
    response_model=AccountStatusResponse,
    summary="Check onboarding status",
)
async def account_status(
    request: AccountStatusRequest,
    payout_service: PayoutServiceDep,
) -> AccountStatusResponse:
    """Check whether onboarding finished and record it on the organizer."""
    return await payout_service.account_status(request.account_id, request.user_id)
