"""
Classification result models.

Value objects returned by the user-agent and referrer classifiers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


UNKNOWN = "Unknown"
DIRECT = "Direct"


@dataclass(frozen=True)
class SoftwareInfo:
    """Name and version of a browser or operating system."""

    name: str = UNKNOWN
    version: str = UNKNOWN

    @property
    def label(self) -> str:
        """Composite label used as the counter key, e.g. ``Chrome 115.0``."""
        return f"{self.name} {self.version}"

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class ParsedUserAgent:
    """Browser and OS detected in a User-Agent string."""

    browser: SoftwareInfo = field(default_factory=SoftwareInfo)
    os: SoftwareInfo = field(default_factory=SoftwareInfo)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {"browser": self.browser.to_dict(), "os": self.os.to_dict()}


class ReferrerType(Enum):
    """Top-level traffic source buckets."""

    DIRECT = "direct"
    SEARCH = "search"
    SOCIAL = "social"
    CONTENT = "content"
    EMAIL = "email"
    EXTERNAL = "external"

    @property
    def category(self) -> str:
        """Human readable label for the bucket."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ReferrerType.DIRECT: "Direct",
    ReferrerType.SEARCH: "Search Engine",
    ReferrerType.SOCIAL: "Social Media",
    ReferrerType.CONTENT: "Content Platform",
    ReferrerType.EMAIL: "Email",
    ReferrerType.EXTERNAL: "External Website",
}


@dataclass(frozen=True)
class ParsedReferrer:
    """Classified referrer."""

    type: ReferrerType
    domain: str
    platform: str
    search_query: Optional[str] = None
    original_domain: Optional[str] = None

    @property
    def category(self) -> str:
        return self.type.category

    @classmethod
    def direct(cls) -> "ParsedReferrer":
        """Result for missing, placeholder or unparseable referrers."""
        return cls(type=ReferrerType.DIRECT, domain=DIRECT, platform=DIRECT)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type.value,
            "category": self.category,
            "domain": self.domain,
            "searchQuery": self.search_query,
            "platform": self.platform,
            "originalDomain": self.original_domain,
        }
