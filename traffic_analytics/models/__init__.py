"""
Models package for request analytics.

This package contains the in-memory counters, classifier results, persisted
document schemas and report options.
"""

from .counters import AggregateCounters, DayBucket

from .classification import (
    DIRECT,
    UNKNOWN,
    ParsedReferrer,
    ParsedUserAgent,
    ReferrerType,
    SoftwareInfo,
)

from .documents import (
    SNAPSHOT_VERSION,
    CountersDocument,
    DayBucketDocument,
    SnapshotDocument,
    SnapshotMetadata,
)

from .report import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    MIN_LIMIT,
    ReportFormat,
    ReportOptions,
    clamp_limit,
)

__all__ = [
    # Counters
    "AggregateCounters",
    "DayBucket",

    # Classification
    "DIRECT",
    "UNKNOWN",
    "ParsedReferrer",
    "ParsedUserAgent",
    "ReferrerType",
    "SoftwareInfo",

    # Documents
    "SNAPSHOT_VERSION",
    "CountersDocument",
    "DayBucketDocument",
    "SnapshotDocument",
    "SnapshotMetadata",

    # Report options
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "MIN_LIMIT",
    "ReportFormat",
    "ReportOptions",
    "clamp_limit",
]
