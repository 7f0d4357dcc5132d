"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dorehami.api.errors import register_exception_handlers
from dorehami.api.v1.dependencies import RedisClient
from dorehami.api.v1.router import router as v1_router
from dorehami.config import get_settings
from dorehami.database import close_db, init_models
from dorehami.redis_client import close_redis, get_redis, redis_reachable


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting Dore Hami API...")

    await init_models()
    logger.info("Database ready")

    if await redis_reachable(await get_redis()):
        logger.info("Redis connection established")
    else:
        logger.warning("Redis is unreachable; duplicate webhook deliveries rely on the database alone")

    if not settings.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY is not set; checkout and payouts are disabled")
    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.warning("STRIPE_WEBHOOK_SECRET is not set; webhooks will be rejected")

    yield

    # Shutdown
    logger.info("Shutting down Dore Hami API...")

    await close_redis()
    logger.info("Redis connection closed")

    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
## Dore Hami API

Event planning and ticketing.

- **Venues**: Fixed venue directory with capacity, type and catering menus
- **Availability**: Conflict checks against non-cancelled events, one venue or all at once
- **Events**: Draft, publish and cancel events
- **Checkout**: Stripe hosted checkout with a 0.8% platform fee routed to the organizer
- **Bookings**: Recorded from verified Stripe callbacks, exactly once per session
- **Payouts**: Stripe Connect onboarding for organizers

### Authentication
User-scoped endpoints require the `X-User-ID` header.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(v1_router, prefix="/api")

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check(redis_client: RedisClient):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "redis": "ok" if await redis_reachable(redis_client) else "unavailable",
            "version": settings.APP_VERSION,
            "api_versions": ["v1"],
        }

    register_exception_handlers(app)

    return app


# Create application instance
app = create_app()


def run():
    """Run the application with uvicorn."""
    uvicorn.run(
        "dorehami.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
