"""
Report option models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50


class ReportFormat(Enum):
    """Output shapes for the analytics report."""

    DETAILED = "detailed"
    SUMMARY = "summary"
    MINIMAL = "minimal"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a format string is valid."""
        try:
            cls(value)
            return True
        except ValueError:
            return False

    @classmethod
    def parse(cls, value: Optional[str]) -> "ReportFormat":
        """Resolve a format string, falling back to ``DETAILED``."""
        if isinstance(value, str) and cls.is_valid(value.strip().lower()):
            return cls(value.strip().lower())
        return cls.DETAILED


@dataclass(frozen=True)
class ReportOptions:
    """Normalized report options."""

    format: ReportFormat = ReportFormat.DETAILED
    limit: int = DEFAULT_LIMIT

    @classmethod
    def create(cls, format: Optional[Any] = None, limit: Optional[Any] = None,
               default_limit: int = DEFAULT_LIMIT) -> "ReportOptions":
        """Build options from loosely typed input such as query parameters.

        Args:
            format: Format name or ``ReportFormat``; unknown values mean detailed
            limit: Entry limit per ranked dimension; clamped to [1, 50]
            default_limit: Limit used when ``limit`` is missing or not an integer

        Returns:
            ReportOptions instance
        """
        if isinstance(format, ReportFormat):
            report_format = format
        else:
            report_format = ReportFormat.parse(format)

        try:
            resolved_limit = int(limit) if limit is not None else default_limit
        except (TypeError, ValueError):
            resolved_limit = default_limit

        return cls(format=report_format, limit=clamp_limit(resolved_limit))


def clamp_limit(limit: int) -> int:
    """Clamp a ranked-entry limit to the supported range."""
    return max(MIN_LIMIT, min(limit, MAX_LIMIT))
