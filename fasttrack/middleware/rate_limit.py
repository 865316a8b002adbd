from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, Response
import redis
from fasttrack.auth import decode_access_token
from fasttrack.config import settings
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)


def _connect_redis():
    if not settings.RATE_LIMIT_ENABLED:
        return None
    try:
        client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            decode_responses=True,
            retry_on_timeout=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
        client.ping()
        logger.info(f"Rate limiting Redis connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        return client
    except redis.RedisError as e:
        logger.warning(f"Rate limiting Redis connection failed: {e}. Using in-memory fallback.")
        return None


redis_client = _connect_redis()


def get_user_id_or_ip(request: Request) -> str:
    """Key requests by the token's user id when there is one, else by client IP."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        payload = decode_access_token(auth_header[7:])
        if payload and payload.get("sub"):
            return f"user:{payload['sub']}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_id_or_ip,
    storage_uri=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}" if redis_client else "memory://",
    default_limits=["1000/hour"],
    enabled=settings.RATE_LIMIT_ENABLED,
)

RATE_LIMITS = {
    # Register / login
    "auth": "10/minute",
    # Bulk upload from offline clients
    "sync": "30/minute",
}


def get_rate_limit_for_endpoint(endpoint: str) -> str:
    return RATE_LIMITS.get(endpoint, "100/hour")


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {get_user_id_or_ip(request)} on {request.url.path}")
    return Response(
        content=f"Rate limit exceeded: {exc.detail}. Please try again later.",
        status_code=429,
        headers={"Retry-After": "60"},
    )


def rate_limit_auth(func):
    """Rate limit for authentication endpoints."""
    return limiter.limit(get_rate_limit_for_endpoint("auth"))(func)


def rate_limit_sync(func):
    """Rate limit for the bulk sync endpoint."""
    return limiter.limit(get_rate_limit_for_endpoint("sync"))(func)
