"""User schemas."""

from datetime import datetime

from pydantic import Field

from dorehami.schemas.common import BaseSchema


class UserProfileRequest(BaseSchema):
    """Identity handed over by the auth provider after sign-in."""

    auth_user_id: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    display_name: str | None = Field(None, max_length=200)


class UserResponse(BaseSchema):
    user_id: int
    auth_user_id: str
    email: str
    first_name: str | None
    last_name: str | None
    is_organizer: bool
    stripe_account_id: str | None
    stripe_onboarding_completed: bool
    created_at: datetime | None = None
