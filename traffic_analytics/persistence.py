"""
Persistence for the analytics store.

Reads and writes the cumulative document and the per-day document. Both
operations are best effort: failures are logged and the in-memory state stays
authoritative.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .models import (
    SNAPSHOT_VERSION,
    AggregateCounters,
    DayBucket,
    DayBucketDocument,
    CountersDocument,
    SnapshotDocument,
    SnapshotMetadata,
)

logger = logging.getLogger(__name__)


class PersistenceManager:
    """Serializes analytics counters to two JSON files."""

    def __init__(self, summary_file: Path, daily_file: Path):
        """Initialize the persistence manager.

        Args:
            summary_file: Path of the cumulative document
            daily_file: Path of the per-day document
        """
        self.summary_file = Path(summary_file)
        self.daily_file = Path(daily_file)

    @classmethod
    def in_directory(cls, data_dir: Path, summary_name: str = "data.json",
                     daily_name: str = "daily-data.json") -> "PersistenceManager":
        """Create a manager whose files live side by side in ``data_dir``."""
        data_dir = Path(data_dir)
        return cls(data_dir / summary_name, data_dir / daily_name)

    def load(self) -> Tuple[AggregateCounters, Dict[str, DayBucket]]:
        """Load lifetime counters and day buckets.

        Each document is read independently. A missing, unreadable or invalid
        document yields empty state for that document.

        Returns:
            Tuple of (lifetime counters, mapping of date to day bucket)
        """
        counters = self._load_counters()
        days = self._load_days()
        return counters, days

    def save(self, counters: AggregateCounters, days: Dict[str, DayBucket]) -> bool:
        """Write both documents.

        Args:
            counters: Lifetime counters
            days: Mapping of date string to day bucket

        Returns:
            True if both documents were written, False otherwise
        """
        snapshot = SnapshotDocument(
            metadata=SnapshotMetadata(
                version=SNAPSHOT_VERSION,
                last_updated=datetime.now().astimezone().isoformat(),
                total_records=counters.total_requests,
                unique_visitors=counters.unique_visitors,
            ),
            data=CountersDocument.from_counters(counters),
        )
        daily = {
            day: DayBucketDocument.from_bucket(bucket).model_dump(mode="json", by_alias=True)
            for day, bucket in days.items()
        }

        try:
            self._write_json(self.summary_file, snapshot.model_dump(mode="json", by_alias=True))
            self._write_json(self.daily_file, daily)
        except Exception as e:
            logger.error(f"Error saving analytics data: {e}")
            return False

        logger.debug(
            f"Analytics data saved: {counters.total_requests} requests, {len(days)} days"
        )
        return True

    # =====================
    # Private helper methods
    # =====================

    def _read_json(self, path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write_json(self, path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def _load_counters(self) -> AggregateCounters:
        # pydantic's ValidationError and JSONDecodeError are both ValueErrors.
        try:
            raw = self._read_json(self.summary_file)
            if raw is None:
                return AggregateCounters()
            counters = SnapshotDocument.from_raw(raw).data.to_counters()
        except (OSError, ValueError) as e:
            logger.error(f"Error loading analytics data from {self.summary_file}: {e}")
            return AggregateCounters()

        logger.info(f"Analytics data loaded from {self.summary_file}")
        return counters

    def _load_days(self) -> Dict[str, DayBucket]:
        try:
            raw = self._read_json(self.daily_file)
            if raw is None:
                return {}
            if not isinstance(raw, dict):
                raise ValueError("per-day document must be an object keyed by date")
            days = {
                day: DayBucketDocument.model_validate(bucket).to_bucket()
                for day, bucket in raw.items()
            }
        except (OSError, ValueError) as e:
            logger.error(f"Error loading daily analytics data from {self.daily_file}: {e}")
            return {}

        logger.info(f"Daily analytics data loaded from {self.daily_file}")
        return days
