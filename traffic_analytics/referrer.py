"""
Referrer classification.

Classifies a raw ``Referer`` header into one of the traffic source buckets
(direct, search, social, content, email, external) and aggregates a referrer
count map into a per-bucket breakdown.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlsplit, SplitResult

from .formatting import format_percentage
from .models import DIRECT, ParsedReferrer, ReferrerType


@dataclass(frozen=True)
class SearchEngine:
    """Display name and query parameter of a known search engine."""

    name: str
    query_param: str


SEARCH_ENGINES: Dict[str, SearchEngine] = {
    "google.com": SearchEngine("Google", "q"),
    "google.co.uk": SearchEngine("Google UK", "q"),
    "google.de": SearchEngine("Google DE", "q"),
    "bing.com": SearchEngine("Bing", "q"),
    "yahoo.com": SearchEngine("Yahoo", "p"),
    "duckduckgo.com": SearchEngine("DuckDuckGo", "q"),
    "baidu.com": SearchEngine("Baidu", "wd"),
    "yandex.com": SearchEngine("Yandex", "text"),
}

SOCIAL_PLATFORMS: Dict[str, str] = {
    "facebook.com": "Facebook",
    "twitter.com": "Twitter",
    "x.com": "X (Twitter)",
    "linkedin.com": "LinkedIn",
    "instagram.com": "Instagram",
    "youtube.com": "YouTube",
    "tiktok.com": "TikTok",
    "reddit.com": "Reddit",
    "pinterest.com": "Pinterest",
    "snapchat.com": "Snapchat",
}

CONTENT_PLATFORMS: Dict[str, str] = {
    "medium.com": "Medium",
    "substack.com": "Substack",
    "dev.to": "Dev.to",
    "hackernews.ycombinator.com": "Hacker News",
    "github.com": "GitHub",
    "stackoverflow.com": "Stack Overflow",
}

# Substrings of webmail hostnames, checked only after the tables above.
EMAIL_HOST_MARKERS = ("mail.", "outlook.", "gmail.", "yahoo.", "hotmail.")

DIRECT_PLACEHOLDERS = {"", DIRECT, "-"}

EMAIL_DOMAIN = "Email Client"
EMAIL_PLATFORM = "Email"


def _matches_domain(hostname: str, domain: str) -> bool:
    return hostname == domain or hostname.endswith("." + domain)


def _split_url(referrer: str) -> Optional[SplitResult]:
    """Parse an absolute URL, or return None when it cannot be classified."""
    try:
        parts = urlsplit(referrer.strip())
        hostname = parts.hostname
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    return parts


def _query_value(params: Dict[str, List[str]], name: str) -> Optional[str]:
    values = params.get(name)
    return values[0] if values else None


def _lookup(table: Dict[str, Any], hostname: str) -> Optional[Tuple[str, Any]]:
    for domain, entry in table.items():
        if _matches_domain(hostname, domain):
            return domain, entry
    return None


def parse_referrer(referrer: Optional[str]) -> ParsedReferrer:
    """Classify a single referrer.

    Args:
        referrer: Raw ``Referer`` value, ``"Direct"``, ``"-"`` or None

    Returns:
        ParsedReferrer; anything that is not an absolute URL is direct
    """
    if referrer is None or referrer in DIRECT_PLACEHOLDERS:
        return ParsedReferrer.direct()

    parts = _split_url(referrer)
    if parts is None:
        return ParsedReferrer.direct()

    hostname = parts.hostname.lower()

    search_match = _lookup(SEARCH_ENGINES, hostname)
    if search_match:
        engine = search_match[1]
        params = parse_qs(parts.query)
        query = _query_value(params, engine.query_param) or _query_value(params, "q")
        return ParsedReferrer(
            type=ReferrerType.SEARCH,
            domain=engine.name,
            platform=engine.name,
            search_query=query,
            original_domain=hostname,
        )

    for referrer_type, table in ((ReferrerType.SOCIAL, SOCIAL_PLATFORMS),
                                 (ReferrerType.CONTENT, CONTENT_PLATFORMS)):
        match = _lookup(table, hostname)
        if match:
            platform = match[1]
            return ParsedReferrer(
                type=referrer_type,
                domain=platform,
                platform=platform,
                original_domain=hostname,
            )

    if any(marker in hostname for marker in EMAIL_HOST_MARKERS):
        return ParsedReferrer(
            type=ReferrerType.EMAIL,
            domain=EMAIL_DOMAIN,
            platform=EMAIL_PLATFORM,
            original_domain=hostname,
        )

    return ParsedReferrer(
        type=ReferrerType.EXTERNAL,
        domain=hostname,
        platform=hostname,
        original_domain=hostname,
    )


def categorize_referrers(referrer_stats: Dict[str, int]) -> Dict[str, Dict[str, Any]]:
    """Bucket a referrer count map by traffic source.

    Args:
        referrer_stats: Mapping of raw referrer string to request count

    Returns:
        Dictionary keyed by bucket name (``direct``, ``search``, ...). Each
        bucket has ``count``, ``percentage`` and ``referrers`` sorted by count
        descending; ``search`` also has ``queries``.
    """
    categories: Dict[str, Dict[str, Any]] = {}
    for referrer_type in ReferrerType:
        categories[referrer_type.value] = {"count": 0, "percentage": "0.0%", "referrers": []}
    categories[ReferrerType.SEARCH.value]["queries"] = []

    total = sum(referrer_stats.values())

    for referrer, count in referrer_stats.items():
        parsed = parse_referrer(referrer)
        percentage = format_percentage(count, total)
        bucket = categories[parsed.type.value]

        bucket["count"] += count
        bucket["referrers"].append({
            "referrer": referrer,
            "domain": parsed.domain,
            "platform": parsed.platform,
            "count": count,
            "percentage": percentage,
        })

        if parsed.search_query:
            categories[ReferrerType.SEARCH.value]["queries"].append({
                "query": parsed.search_query,
                "engine": parsed.platform,
                "count": count,
                "percentage": percentage,
            })

    for bucket in categories.values():
        bucket["percentage"] = format_percentage(bucket["count"], total)
        bucket["referrers"].sort(key=lambda item: item["count"], reverse=True)

    categories[ReferrerType.SEARCH.value]["queries"].sort(key=lambda item: item["count"], reverse=True)

    return categories
