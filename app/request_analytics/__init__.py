"""
Request Analytics Module

Tracks every request served by the site and exposes the aggregated report.
"""

from .factory import create_request_analytics_module
from .middleware import RequestTrackingMiddleware

__all__ = ["create_request_analytics_module", "RequestTrackingMiddleware"]
