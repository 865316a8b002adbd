from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from fasttrack.config import settings
from fasttrack.database import Base, engine, get_pool_status
from fasttrack.logging_config import configure_logging
from fasttrack.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from fasttrack.middleware.request_id import RequestIDMiddleware
from fasttrack import models  # noqa: F401  registers tables on Base.metadata
from fasttrack.routers import (
    auth, fasts, weights, profile, stats, sync, friends, social_profile,
    leaderboard, challenges, weekly_challenges, feed, notifications, circles
)
from fasttrack.utils.logger import get_logger

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Initialize database tables
Base.metadata.create_all(bind=engine)

# Conditional docs configuration
if settings.DEBUG:
    docs_config = {
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "openapi_url": "/openapi.json"
    }
    logger.info("DEBUG mode: Swagger docs enabled at /docs")
else:
    docs_config = {
        "docs_url": None,
        "redoc_url": None,
        "openapi_url": None
    }
    logger.info("Production mode: Swagger docs disabled")

app = FastAPI(
    title="FastTrack API",
    description="Backend API for the FastTrack fasting tracker",
    version="1.0.0",
    **docs_config
)

# Set up rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Request ID middleware first for request tracing
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(fasts.router)
app.include_router(weights.router)
app.include_router(profile.router)
app.include_router(stats.router)
app.include_router(sync.router)
app.include_router(friends.router)
app.include_router(social_profile.router)
app.include_router(leaderboard.router)
app.include_router(challenges.router)
app.include_router(weekly_challenges.router)
app.include_router(feed.router)
app.include_router(notifications.router)
app.include_router(circles.router)


@app.on_event("startup")
async def startup_event():
    """Log application startup information."""
    # Build the engine in this worker process (Gunicorn)
    from fasttrack.database import get_engine
    get_engine()
    mode = "DEBUG" if settings.DEBUG else "PRODUCTION"
    logger.info(f"FastTrack API started in {mode} mode")


@app.get("/")
async def root():
    return {"message": "FastTrack API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "fasttrack-api", "database_pool": get_pool_status()}
