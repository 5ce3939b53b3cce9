"""
Formatting helpers shared by the referrer breakdown and the report.
"""

from typing import Any, Dict, List


def format_percentage(count: int, total: int) -> str:
    """Format ``count / total`` as a percentage with one decimal, e.g. ``12.5%``."""
    if not total:
        return "0.0%"
    return f"{count / total * 100:.1f}%"


def rank_counts(counts: Dict[str, int], label: str, total: int, limit: int) -> List[Dict[str, Any]]:
    """Sort a count map by count descending and keep the first ``limit`` entries.

    The sort is stable, so equal counts keep insertion order.
    """
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [
        {label: key, "count": count, "percentage": format_percentage(count, total)}
        for key, count in ranked
    ]
