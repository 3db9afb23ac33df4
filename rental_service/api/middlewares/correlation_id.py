"""
Correlation ID middleware
Tags every request, its log lines and its response with one request ID
"""
import uuid
import logging
from contextvars import ContextVar
from flask import Response, g, request, current_app, has_request_context

CORRELATION_HEADER = 'X-Correlation-ID'

correlation_id_context: ContextVar[str] = ContextVar('correlation_id', default='')


class CorrelationIdMiddleware:
    """
    Flask middleware for handling correlation IDs
    """

    def __init__(self, app=None):
        self.app = app
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.before_request(self.before_request)
        app.after_request(self.after_request)

    def before_request(self):
        """Reuse the caller's correlation ID or generate one"""
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())

        g.correlation_id = correlation_id
        correlation_id_context.set(correlation_id)

        current_app.logger.debug(f"{request.method} {request.path} - Processing request")

    def after_request(self, response: Response) -> Response:
        correlation_id = getattr(g, 'correlation_id', 'unknown')
        response.headers[CORRELATION_HEADER] = correlation_id

        current_app.logger.info(f"{request.method} {request.path} - Response: {response.status_code}")
        return response


def get_correlation_id() -> str:
    """Current correlation ID, or '-' outside a request"""
    if has_request_context() and hasattr(g, 'correlation_id'):
        return g.correlation_id
    return correlation_id_context.get() or '-'


class CorrelationIdFilter(logging.Filter):
    """Adds correlation_id to every record so format strings can use it"""

    def filter(self, record):
        record.correlation_id = get_correlation_id()
        return True


def init_correlation_id_logging(app):
    """Prefix the app logger's output with the correlation ID"""
    formatter = logging.Formatter(
        '[%(correlation_id)s] %(levelname)s in %(module)s: %(message)s'
    )
    for handler in app.logger.handlers:
        handler.addFilter(CorrelationIdFilter())
        handler.setFormatter(formatter)
