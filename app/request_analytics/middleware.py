"""
Request Tracking Middleware

Flask hooks that record every inbound request in the analytics store and
write one access log line per response.
"""

import logging
from datetime import datetime

from flask import Flask, Request, Response, request

from traffic_analytics.logging_config import ACCESS_LOGGER_NAME
from traffic_analytics.models import UNKNOWN
from traffic_analytics.store import AggregationStore

logger = logging.getLogger(__name__)
access_logger = logging.getLogger(ACCESS_LOGGER_NAME)


def format_access_line(req: Request, response: Response) -> str:
    """Render a request in Apache combined log format."""
    length = response.calculate_content_length()
    timestamp = datetime.now().astimezone().strftime("%d/%b/%Y:%H:%M:%S %z")
    target = req.full_path if req.query_string else req.path
    return (
        f'{req.remote_addr or "-"} - - [{timestamp}] '
        f'"{req.method} {target} {req.environ.get("SERVER_PROTOCOL", "HTTP/1.1")}" '
        f'{response.status_code} {length if length is not None else "-"} '
        f'"{req.headers.get("Referer", "-")}" "{req.headers.get("User-Agent", "-")}"'
    )


class RequestTrackingMiddleware:
    """Counts each request before it reaches its view."""

    def __init__(self, store: AggregationStore):
        """Initialize the middleware.

        Args:
            store: The analytics store requests are recorded into
        """
        self.store = store

    def init_app(self, app: Flask) -> None:
        """Register the tracking and access log hooks on a Flask application."""
        app.before_request(self._before_request)
        app.after_request(self._after_request)

    def track(self, req: Request) -> None:
        """Record one request.

        Args:
            req: The Flask request being handled
        """
        self.store.record(
            client_address=req.remote_addr or UNKNOWN,
            user_agent=req.headers.get("User-Agent"),
            referer=req.headers.get("Referer"),
            path=req.path,
        )

    def _before_request(self):
        # Tracking must never block or reject a request.
        try:
            self.track(request)
        except Exception:
            logger.exception(f"Failed to track request {request.method} {request.path}")
        return None

    def _after_request(self, response: Response) -> Response:
        access_logger.info(format_access_line(request, response))
        return response
