from .request_id import RequestIDMiddleware, get_request_id
from .rate_limit import limiter, rate_limit_auth, rate_limit_sync, rate_limit_exceeded_handler

__all__ = [
    "RequestIDMiddleware",
    "get_request_id",
    "limiter",
    "rate_limit_auth",
    "rate_limit_sync",
    "rate_limit_exceeded_handler",
]
