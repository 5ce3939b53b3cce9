"""
Request analytics core.

Classifies, aggregates and persists per-request traffic data and builds the
aggregated report.
"""

from .persistence import PersistenceManager
from .referrer import categorize_referrers, parse_referrer
from .report_generator import ReportGenerationError, ReportGenerator
from .store import AggregationStore
from .user_agent import classify_user_agent

__all__ = [
    "AggregationStore",
    "PersistenceManager",
    "ReportGenerationError",
    "ReportGenerator",
    "categorize_referrers",
    "classify_user_agent",
    "parse_referrer",
]
