"""
Report generation for request analytics.

Turns a snapshot of the lifetime counters into the ranked, percentage
annotated report served by the analytics endpoint.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .formatting import format_percentage, rank_counts
from .models import AggregateCounters, ReportFormat, ReportOptions
from .referrer import categorize_referrers, parse_referrer
from .store import AggregationStore

logger = logging.getLogger(__name__)


REPORT_VERSION = "1.0.0"
DAILY_WINDOW = 30
MINIMAL_TOP = 5
SUMMARY_TOP = 3
MINIMAL_REFERRER_CATEGORIES = ("direct", "search", "social")


class ReportGenerationError(Exception):
    """Raised when a report cannot be produced."""


def format_hour(hour: int) -> str:
    """Format an hour of day as a 12-hour clock label, e.g. ``1:00 PM``."""
    period = "PM" if hour >= 12 else "AM"
    display_hour = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    return f"{display_hour}:00 {period}"


def format_date(day: str) -> str:
    """Format ``YYYY-MM-DD`` as ``Monday, January 1, 2024``.

    Unparseable keys are returned unchanged.
    """
    try:
        parsed = datetime.strptime(day, "%Y-%m-%d")
    except ValueError:
        return day
    return f"{parsed:%A}, {parsed:%B} {parsed.day}, {parsed.year}"


def average_requests_per_visitor(total_requests: int, unique_visitors: int) -> str:
    """Requests per unique visitor with two decimals; ``0.00`` with no visitors."""
    if unique_visitors == 0:
        return "0.00"
    return f"{total_requests / unique_visitors:.2f}"


class ReportGenerator:
    """Builds analytics reports from an AggregationStore."""

    def __init__(self, store: AggregationStore):
        self.store = store

    def generate(self, options: Optional[ReportOptions] = None) -> Dict[str, Any]:
        """Save the store, then build a report from a fresh snapshot.

        Args:
            options: Report options; defaults to a detailed report of 10 entries

        Returns:
            Report dictionary ready for JSON serialization

        Raises:
            ReportGenerationError: If the report could not be built
        """
        self.store.save()
        return self.build(self.store.snapshot(), options or ReportOptions())

    def build(self, snapshot: AggregateCounters, options: ReportOptions) -> Dict[str, Any]:
        """Build a report from a counters snapshot without touching the store."""
        try:
            report = self._build_detailed(snapshot, options)
        except Exception as e:
            logger.error(f"Error generating analytics report: {e}", exc_info=True)
            raise ReportGenerationError(str(e)) from e

        if options.format == ReportFormat.MINIMAL:
            return {
                "metadata": report["metadata"],
                "summary": report["summary"],
                "topBrowsers": report["topBrowsers"][:MINIMAL_TOP],
                "topPages": report["topPages"][:MINIMAL_TOP],
                "referrerCategories": {
                    name: report["referrerCategories"][name]
                    for name in MINIMAL_REFERRER_CATEGORIES
                },
            }

        if options.format == ReportFormat.SUMMARY:
            return {
                "metadata": report["metadata"],
                "summary": report["summary"],
                "topBrowsers": report["topBrowsers"][:SUMMARY_TOP],
                "topOperatingSystems": report["topOperatingSystems"][:SUMMARY_TOP],
                "topPages": report["topPages"][:SUMMARY_TOP],
                "referrerCategories": report["referrerCategories"],
            }

        return report

    def _build_detailed(self, snapshot: AggregateCounters, options: ReportOptions) -> Dict[str, Any]:
        total = snapshot.total_requests
        limit = options.limit

        top_referrers = []
        for entry in rank_counts(snapshot.referrers, "referrer", total, limit):
            parsed = parse_referrer(entry["referrer"])
            top_referrers.append({
                "referrer": entry["referrer"],
                "domain": parsed.domain,
                "category": parsed.category,
                "count": entry["count"],
                "percentage": entry["percentage"],
            })

        hourly_distribution = [
            {
                "hour": hour,
                "time": format_hour(hour),
                "count": count,
                "percentage": format_percentage(count, total),
            }
            for hour, count in sorted(snapshot.hourly_stats.items(), key=lambda item: int(item[0]))
            if count > 0
        ]

        daily_stats = [
            {
                "date": day,
                "formattedDate": format_date(day),
                "count": count,
                "percentage": format_percentage(count, total),
            }
            for day, count in sorted(snapshot.daily_stats.items())[-DAILY_WINDOW:]
        ]

        return {
            "metadata": {
                "generatedAt": datetime.now().astimezone().isoformat(),
                "format": options.format.value,
                "version": REPORT_VERSION,
            },
            "summary": {
                "totalRequests": total,
                "uniqueVisitors": snapshot.unique_visitors,
                "lastUpdated": snapshot.last_updated,
                "averageRequestsPerVisitor": average_requests_per_visitor(
                    total, snapshot.unique_visitors
                ),
            },
            "topBrowsers": rank_counts(snapshot.browsers, "browser", total, limit),
            "topOperatingSystems": rank_counts(snapshot.operating_systems, "os", total, limit),
            "topPages": rank_counts(snapshot.pages, "page", total, limit),
            "topReferrers": top_referrers,
            "referrerCategories": categorize_referrers(snapshot.referrers),
            "hourlyDistribution": hourly_distribution,
            "dailyStats": daily_stats,
        }
