import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from fasttrack.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an ID for log correlation.

    The ID comes from X-Correlation-ID, then X-Request-ID, else a fresh
    uuid4. It is bound to the logging context and echoed back as
    X-Request-ID.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = (
            request.headers.get("X-Correlation-ID") or
            request.headers.get("X-Request-ID") or
            str(uuid.uuid4())
        )
        request.state.request_id = request_id
        set_request_context(request_id)

        logger.info(f"Request started: {request.method} {request.url.path}")
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.info(f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}")
            return response
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - Error: {str(e)}")
            raise
        finally:
            clear_request_context()


def get_request_id(request: Request) -> str:
    if not hasattr(request.state, 'request_id'):
        raise RuntimeError("Request ID not available. Ensure RequestIDMiddleware is configured.")
    return request.state.request_id
