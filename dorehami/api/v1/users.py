"""Users API endpoints."""

from fastapi import APIRouter

from dorehami.api.v1.dependencies import CurrentUser, UserServiceDep
from dorehami.exceptions import NotFoundError
from dorehami.schemas.user import UserProfileRequest, UserResponse

router = APIRouter()


@router.post(
    "/profile",
    response_model=UserResponse,
    summary="Get or create profile",
)
async def get_or_create_profile(
    request: UserProfileRequest,
    user_service: UserServiceDep,
) -> UserResponse:
    """Resolve a signed-in identity to an application user, creating it on first sign-in."""
    user = await user_service.get_or_create_profile(
        auth_user_id=request.auth_user_id,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        display_name=request.display_name,
    )
    return UserResponse.model_validate(user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    current_user: CurrentUser,
    user_service: UserServiceDep,
) -> UserResponse:
    user = await user_service.get_user(current_user)
    if not user:
        raise NotFoundError("User not found")
    return UserResponse.model_validate(user)
