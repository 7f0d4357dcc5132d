"""User model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dorehami.models.base import Base, BigIntPK

if TYPE_CHECKING:
    from dorehami.models.event import Event


class User(Base):
    """Application user, linked one-to-one to an auth provider identity."""

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    auth_user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    phone: Mapped[str | None] = mapped_column(String(32))
    is_organizer: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Set by the payment processor's onboarding flow
    stripe_account_id: Mapped[str | None] = mapped_column(String(64))
    stripe_onboarding_completed: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )

    events: Mapped[list["Event"]] = relationship("Event", back_populates="organizer")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def payout_ready(self) -> bool:
        return bool(self.stripe_account_id) and self.stripe_onboarding_completed
