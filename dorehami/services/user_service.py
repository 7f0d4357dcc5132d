"""User service."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dorehami.exceptions import NotFoundError
from dorehami.models.user import User

logger = logging.getLogger(__name__)


def split_display_name(display_name: str | None, email: str) -> tuple[str, str]:
    """Split a display name into first and last name, with fallbacks."""
    name = (display_name or "").strip() or email.split("@")[0] or "User"
    parts = name.split(" ")
    first_name = parts[0] or "User"
    last_name = " ".join(parts[1:]) or "User"
    return first_name, last_name


class UserService:
    """Service for application user profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: int) -> User | None:
        """Get user by ID."""
        result = await self.db.execute(select(User).where(User.user_id == user_id))
        return result.scalar_one_or_none()

    async def require_user(self, user_id: int) -> User:
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_by_auth_user_id(self, auth_user_id: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.auth_user_id == auth_user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create_profile(
        self,
        auth_user_id: str,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        display_name: str | None = None,
    ) -> User:
        """
        Get the application user linked to an auth identity, creating it if absent.

        New profiles are marked as organizers, since profiles are created the
        first time someone plans an event or buys a ticket.
        """
        user = await self.get_by_auth_user_id(auth_user_id)
        if user:
            return user

        if not first_name or not last_name:
            fallback_first, fallback_last = split_display_name(display_name, email)
            first_name = first_name or fallback_first
            last_name = last_name or fallback_last

        user = User(
            auth_user_id=auth_user_id,
            email=email.lower(),
            first_name=first_name,
            last_name=last_name,
            is_organizer=True,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"Created profile {user.user_id} for auth user {auth_user_id}")
        return user
