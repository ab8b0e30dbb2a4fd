"""
Performance scoring for content metrics snapshots.
"""

import math
from typing import Any

from .models import PerformanceTier


HIGH_CONVERSION_THRESHOLD = 20.0
MEDIUM_CONVERSION_THRESHOLD = 10.0

# Weights for the relative funnel rates; saves dominate.
VIEW_WEIGHT = 0.1
EDIT_WEIGHT = 0.2
SAVE_WEIGHT = 0.4
SHARE_WEIGHT = 0.3


def safe_rate(numerator: float, denominator: float, scale: float = 100.0) -> float:
    """Return numerator/denominator * scale, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    value = (float(numerator) / float(denominator)) * scale
    if not math.isfinite(value):
        return 0.0
    return value


def _clip(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def determine_performance(conversion_rate: float) -> PerformanceTier:
    """Bucket a conversion rate (percent) into a performance tier."""
    if conversion_rate >= HIGH_CONVERSION_THRESHOLD:
        return PerformanceTier.HIGH
    if conversion_rate >= MEDIUM_CONVERSION_THRESHOLD:
        return PerformanceTier.MEDIUM
    return PerformanceTier.LOW


def performance_score(metrics: Any) -> int:
    """
    Score a metrics snapshot on a 0-100 scale.

    Uses the relative funnel rates views/clicks, edits/views, saves/edits and
    shares/views. A zero denominator contributes 0 to its term.
    """
    clicks = getattr(metrics, "clicks", 0) or 0
    views = getattr(metrics, "views", 0) or 0
    edits = getattr(metrics, "edits", 0) or 0
    saves = getattr(metrics, "saves", 0) or 0
    shares = getattr(metrics, "shares", 0) or 0

    weighted = (
        safe_rate(views, clicks) * VIEW_WEIGHT
        + safe_rate(edits, views) * EDIT_WEIGHT
        + safe_rate(saves, edits) * SAVE_WEIGHT
        + safe_rate(shares, views) * SHARE_WEIGHT
    )
    # Halves round up.
    return int(math.floor(_clip(weighted) + 0.5))
