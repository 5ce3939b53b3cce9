"""
Counter data models.

In-memory aggregate counters for the request analytics store. A lifetime
``AggregateCounters`` instance spans the whole history of the site, and one
``DayBucket`` is kept per calendar day.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Set


@dataclass
class DayBucket:
    """Counters for a single calendar day."""

    total_requests: int = 0
    unique_clients: Set[str] = field(default_factory=set)
    browsers: Dict[str, int] = field(default_factory=dict)
    operating_systems: Dict[str, int] = field(default_factory=dict)
    pages: Dict[str, int] = field(default_factory=dict)
    hourly_stats: Dict[int, int] = field(default_factory=dict)

    @property
    def unique_visitors(self) -> int:
        """Number of distinct client addresses seen."""
        return len(self.unique_clients)

    def copy(self) -> "DayBucket":
        """Return a copy that shares no mutable state with this bucket."""
        return DayBucket(
            total_requests=self.total_requests,
            unique_clients=set(self.unique_clients),
            browsers=dict(self.browsers),
            operating_systems=dict(self.operating_systems),
            pages=dict(self.pages),
            hourly_stats=dict(self.hourly_stats),
        )


@dataclass
class AggregateCounters(DayBucket):
    """Lifetime counters.

    Carries the referrer breakdown and the per-date totals on top of the day
    dimensions. A day bucket has neither: it is itself one entry of
    ``daily_stats``.
    """

    referrers: Dict[str, int] = field(default_factory=dict)
    daily_stats: Dict[str, int] = field(default_factory=dict)
    last_updated: Optional[str] = field(default_factory=lambda: datetime.now().isoformat())

    def copy(self) -> "AggregateCounters":
        return AggregateCounters(
            total_requests=self.total_requests,
            unique_clients=set(self.unique_clients),
            browsers=dict(self.browsers),
            operating_systems=dict(self.operating_systems),
            pages=dict(self.pages),
            hourly_stats=dict(self.hourly_stats),
            referrers=dict(self.referrers),
            daily_stats=dict(self.daily_stats),
            last_updated=self.last_updated,
        )
