import logging
import contextvars
from typing import Optional

# Request ID for the request currently being served; None outside a request
request_id_context = contextvars.ContextVar('fasttrack_request_id', default=None)


class RequestAwareLogger:
    """
    Thin wrapper around a stdlib logger that tags every record with the
    current request ID.

    Callers may pass ``request_id=...`` explicitly; otherwise the value set by
    RequestIDMiddleware for the running request is used.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _log(self, level: int, msg: str, *args, **kwargs):
        request_id = kwargs.pop('request_id', None) or request_id_context.get()
        if request_id:
            extra = kwargs.get('extra') or {}
            extra['request_id'] = request_id
            kwargs['extra'] = extra
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)


def get_logger(name: str) -> RequestAwareLogger:
    """Get a request-aware logger for the given module name."""
    return RequestAwareLogger(name)


def set_request_context(request_id: str):
    """Bind a request ID to the current context."""
    request_id_context.set(request_id)


def get_request_context() -> Optional[str]:
    return request_id_context.get()


def clear_request_context():
    request_id_context.set(None)
