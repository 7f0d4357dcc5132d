"""Application configuration settings."""

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Dore Hami API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    APP_BASE_URL: str = "http://localhost:3000"

    # Database
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "dorehami"

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None
    REDIS_DB: int = 0
    REDIS_CONNECT_TIMEOUT_SECONDS: float = 2.0

    # Webhook processing
    WEBHOOK_CLAIM_TTL_SECONDS: int = 60

    # Stripe
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_WEBHOOK_SECRET: str | None = None
    STRIPE_PUBLISHABLE_KEY: str | None = None  # client-side only
    STRIPE_WEBHOOK_TOLERANCE_SECONDS: int = 300
    STRIPE_CURRENCY: str = "usd"
    STRIPE_CONNECT_COUNTRY: str = "US"

    # Ticket sales
    PLATFORM_FEE_PERCENT: Decimal = Decimal("0.8")
    MAX_TICKETS_PER_PURCHASE: int = 10

    @property
    def database_url(self) -> str:
        """Get async database URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def redis_url(self) -> str:
        """Get Redis URL."""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
