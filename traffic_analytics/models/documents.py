"""
Persisted document models.

This module contains Pydantic models matching the two JSON documents written
to disk: the cumulative snapshot and the per-day map. Field aliases keep the
camelCase keys used by the files.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .counters import AggregateCounters, DayBucket


SNAPSHOT_VERSION = "1.0.0"


class DayBucketDocument(BaseModel):
    """One day of counters as stored in the per-day document."""

    model_config = ConfigDict(populate_by_name=True)

    total_requests: int = Field(default=0, alias="totalRequests")
    unique_ips: List[str] = Field(default_factory=list, alias="uniqueIPs",
                                  description="Client addresses; duplicates collapse on load")
    browsers: Dict[str, int] = Field(default_factory=dict)
    operating_systems: Dict[str, int] = Field(default_factory=dict, alias="operatingSystems")
    pages: Dict[str, int] = Field(default_factory=dict)
    hourly_stats: Dict[int, int] = Field(default_factory=dict, alias="hourlyStats")

    @field_validator("unique_ips", mode="before")
    @classmethod
    def _coerce_unique_ips(cls, value: Any) -> Any:
        # Older files serialized the client set as an object.
        if value is None:
            return []
        if isinstance(value, dict):
            return list(value.keys())
        return value

    @classmethod
    def from_bucket(cls, bucket: DayBucket) -> "DayBucketDocument":
        return cls(
            total_requests=bucket.total_requests,
            unique_ips=sorted(bucket.unique_clients),
            browsers=dict(bucket.browsers),
            operating_systems=dict(bucket.operating_systems),
            pages=dict(bucket.pages),
            hourly_stats=dict(bucket.hourly_stats),
        )

    def to_bucket(self) -> DayBucket:
        return DayBucket(
            total_requests=self.total_requests,
            unique_clients=set(self.unique_ips),
            browsers=dict(self.browsers),
            operating_systems=dict(self.operating_systems),
            pages=dict(self.pages),
            hourly_stats=dict(self.hourly_stats),
        )


class CountersDocument(DayBucketDocument):
    """Lifetime counters as stored under ``data`` in the cumulative document."""

    referrers: Dict[str, int] = Field(default_factory=dict)
    daily_stats: Dict[str, int] = Field(default_factory=dict, alias="dailyStats")
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")

    @classmethod
    def from_counters(cls, counters: AggregateCounters) -> "CountersDocument":
        return cls(
            total_requests=counters.total_requests,
            unique_ips=sorted(counters.unique_clients),
            browsers=dict(counters.browsers),
            operating_systems=dict(counters.operating_systems),
            referrers=dict(counters.referrers),
            pages=dict(counters.pages),
            hourly_stats=dict(counters.hourly_stats),
            daily_stats=dict(counters.daily_stats),
            last_updated=counters.last_updated,
        )

    def to_counters(self) -> AggregateCounters:
        counters = AggregateCounters(
            total_requests=self.total_requests,
            unique_clients=set(self.unique_ips),
            browsers=dict(self.browsers),
            operating_systems=dict(self.operating_systems),
            pages=dict(self.pages),
            hourly_stats=dict(self.hourly_stats),
            referrers=dict(self.referrers),
            daily_stats=dict(self.daily_stats),
        )
        # Documents without a timestamp keep the load time.
        if self.last_updated:
            counters.last_updated = self.last_updated
        return counters


class SnapshotMetadata(BaseModel):
    """Metadata block written alongside the cumulative counters."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(default=SNAPSHOT_VERSION)
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated",
                                        description="Write time (ISO format)")
    total_records: int = Field(default=0, alias="totalRecords")
    unique_visitors: int = Field(default=0, alias="uniqueVisitors")


class SnapshotDocument(BaseModel):
    """Complete cumulative document matching the saved JSON format."""

    metadata: Optional[SnapshotMetadata] = None
    data: CountersDocument

    @classmethod
    def from_raw(cls, raw: Any) -> "SnapshotDocument":
        """Validate either the wrapped layout or the bare legacy layout.

        Only the counters are read back; the metadata block is rebuilt from
        them on every save. A missing or empty ``data`` value means the bare layout.
        """
        if isinstance(raw, dict) and raw.get("data"):
            return cls(data=CountersDocument.model_validate(raw["data"]))
        return cls(data=CountersDocument.model_validate(raw))
