"""
Aggregation store for request analytics.

Holds the lifetime counters and the per-day buckets for the process. One
instance is built at startup and handed to the request hook and the report
generator.
"""

import logging
from datetime import datetime
from threading import RLock
from typing import Dict, Optional

from .models import DIRECT, AggregateCounters, DayBucket
from .persistence import PersistenceManager
from .user_agent import classify_user_agent

logger = logging.getLogger(__name__)


DEFAULT_SAVE_INTERVAL = 10


def _bump(counts: Dict, key) -> None:
    counts[key] = counts.get(key, 0) + 1


class AggregationStore:
    """
    In-memory request counters with throttled persistence.

    Every ``save_interval``-th recorded request triggers a save, so an unclean
    shutdown loses at most ``save_interval - 1`` requests.
    """

    def __init__(
        self,
        persistence: Optional[PersistenceManager] = None,
        save_interval: int = DEFAULT_SAVE_INTERVAL,
    ):
        """
        Initialize AggregationStore.

        Args:
            persistence: PersistenceManager used by load/save; None keeps
                the store purely in memory
            save_interval: Number of recorded requests between throttled saves
        """
        if save_interval < 1:
            raise ValueError("save_interval must be at least 1")

        self.persistence = persistence
        self.save_interval = save_interval
        self._lock = RLock()
        self._counters = AggregateCounters()
        self._days: Dict[str, DayBucket] = {}

    def load(self) -> None:
        """Replace the in-memory state with what is on disk."""
        if self.persistence is None:
            return
        with self._lock:
            self._counters, self._days = self.persistence.load()
            logger.info(
                f"Analytics store hydrated: {self._counters.total_requests} requests, "
                f"{self._counters.unique_visitors} unique visitors, {len(self._days)} days"
            )

    def save(self) -> bool:
        """Persist the current state. Returns False if nothing was written."""
        if self.persistence is None:
            return False
        with self._lock:
            return self.persistence.save(self._counters, self._days)

    def record(
        self,
        client_address: str,
        user_agent: Optional[str],
        referer: Optional[str],
        path: str,
        timestamp: Optional[datetime] = None,
    ) -> None:
        """
        Count one request.

        Args:
            client_address: Client IP address
            user_agent: Raw User-Agent header, if any
            referer: Raw Referer header, if any; counted as "Direct" when absent
            path: Request path
            timestamp: Time of the request in server-local time; defaults to now
        """
        now = timestamp or datetime.now()
        hour = now.hour
        day = now.strftime("%Y-%m-%d")

        parsed = classify_user_agent(user_agent)
        browser_key = parsed.browser.label
        os_key = parsed.os.label

        with self._lock:
            counters = self._counters
            counters.total_requests += 1
            counters.unique_clients.add(client_address)
            counters.last_updated = now.isoformat()
            _bump(counters.browsers, browser_key)
            _bump(counters.operating_systems, os_key)
            _bump(counters.referrers, referer or DIRECT)
            _bump(counters.pages, path)
            _bump(counters.hourly_stats, hour)
            _bump(counters.daily_stats, day)

            bucket = self._days.get(day)
            if bucket is None:
                bucket = self._days[day] = DayBucket()
            bucket.total_requests += 1
            bucket.unique_clients.add(client_address)
            _bump(bucket.browsers, browser_key)
            _bump(bucket.operating_systems, os_key)
            _bump(bucket.pages, path)
            _bump(bucket.hourly_stats, hour)

            if counters.total_requests % self.save_interval == 0:
                self.save()

    def snapshot(self) -> AggregateCounters:
        """Copy of the lifetime counters for readers."""
        with self._lock:
            return self._counters.copy()

    def day(self, day: str) -> Optional[DayBucket]:
        """Copy of one day bucket (``YYYY-MM-DD``), or None if unseen."""
        with self._lock:
            bucket = self._days.get(day)
            return bucket.copy() if bucket else None

    def days(self) -> Dict[str, DayBucket]:
        """Copies of all day buckets keyed by date."""
        with self._lock:
            return {key: bucket.copy() for key, bucket in self._days.items()}
