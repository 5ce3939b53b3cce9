"""
User-Agent classification.

Detects the browser and operating system from a raw User-Agent header using
ordered rule tables. The first matching rule wins and the tables must not be
reordered: Chrome user agents also mention Safari, Edge ones mention Chrome,
Android ones mention Linux and iOS ones mention Mac OS X.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from .models import UNKNOWN, ParsedUserAgent, SoftwareInfo


@dataclass(frozen=True)
class ClassificationRule:
    """A named (predicate, version extractor) pair."""

    name: str
    matches: Callable[[str], bool]
    version: Callable[[str], Optional[str]]


def _pattern_version(pattern: str, dotted: bool = False) -> Callable[[str], Optional[str]]:
    """Build a version extractor from a regex with one capture group.

    Args:
        pattern: Regular expression capturing the version
        dotted: Replace the first underscore with a dot (Apple style versions)
    """
    compiled = re.compile(pattern)

    def extract(user_agent: str) -> Optional[str]:
        match = compiled.search(user_agent)
        if not match:
            return None
        version = match.group(1)
        return version.replace("_", ".", 1) if dotted else version

    return extract


def _windows_version(user_agent: str) -> Optional[str]:
    for marker, version in WINDOWS_NT_VERSIONS:
        if marker in user_agent:
            return version
    return None


def _no_version(user_agent: str) -> Optional[str]:
    return None


WINDOWS_NT_VERSIONS = [
    ("Windows NT 10.0", "10"),
    ("Windows NT 6.3", "8.1"),
    ("Windows NT 6.1", "7"),
]

BROWSER_RULES: List[ClassificationRule] = [
    ClassificationRule("Chrome", lambda ua: "Chrome" in ua, _pattern_version(r"Chrome/(\d+\.\d+)")),
    ClassificationRule("Firefox", lambda ua: "Firefox" in ua, _pattern_version(r"Firefox/(\d+\.\d+)")),
    ClassificationRule(
        "Safari",
        lambda ua: "Safari" in ua and "Chrome" not in ua,
        _pattern_version(r"Version/(\d+\.\d+)"),
    ),
    ClassificationRule("Edge", lambda ua: "Edge" in ua, _pattern_version(r"Edge/(\d+\.\d+)")),
]

OS_RULES: List[ClassificationRule] = [
    ClassificationRule("Windows", lambda ua: "Windows" in ua, _windows_version),
    ClassificationRule("macOS", lambda ua: "Mac OS X" in ua, _pattern_version(r"Mac OS X (\d+[._]\d+)", dotted=True)),
    ClassificationRule("Linux", lambda ua: "Linux" in ua, _no_version),
    ClassificationRule("Android", lambda ua: "Android" in ua, _pattern_version(r"Android (\d+\.\d+)")),
    ClassificationRule("iOS", lambda ua: "iOS" in ua, _pattern_version(r"OS (\d+[._]\d+)", dotted=True)),
]


def _apply_rules(rules: List[ClassificationRule], user_agent: str) -> SoftwareInfo:
    for rule in rules:
        if rule.matches(user_agent):
            return SoftwareInfo(name=rule.name, version=rule.version(user_agent) or UNKNOWN)
    return SoftwareInfo()


def classify_user_agent(user_agent: Optional[str]) -> ParsedUserAgent:
    """Classify a User-Agent header into browser and OS.

    Args:
        user_agent: Raw header value; ``None`` or empty is treated as "Unknown"

    Returns:
        ParsedUserAgent with ``Unknown`` fields where nothing matched
    """
    user_agent = user_agent or UNKNOWN
    return ParsedUserAgent(
        browser=_apply_rules(BROWSER_RULES, user_agent),
        os=_apply_rules(OS_RULES, user_agent),
    )
