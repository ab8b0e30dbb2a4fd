"""
Expert vs automated content comparison logic.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .models import (
    ComparisonMetrics,
    ComparisonReport,
    ContentMetrics,
    MetricComparison,
    TopPerformer,
    TopPerformers,
)
from .periods import normalize_period
from .scoring import performance_score, safe_rate


CONVERSION_INSIGHT_THRESHOLD = 5.0
EDIT_INSIGHT_THRESHOLD = 5.0
SAVE_INSIGHT_THRESHOLD = 5.0
SHARE_INSIGHT_THRESHOLD = 3.0
ENGAGEMENT_INSIGHT_THRESHOLD = 10.0  # seconds

DEFAULT_TOP_PERFORMERS = 5

_SIDE_LABELS = {
    "expert": "Expert-created",
    "automated": "Automated",
}


def aggregate_rates(records: Sequence[ContentMetrics]) -> Dict[str, float]:
    """Aggregate rates from summed counters, not from per-record rates."""
    clicks = sum(r.clicks for r in records)
    views = sum(r.views for r in records)
    edits = sum(r.edits for r in records)
    saves = sum(r.saves for r in records)
    shares = sum(r.shares for r in records)

    engagement = [r.avg_engagement_time for r in records if r.avg_engagement_time is not None]
    avg_engagement = sum(engagement) / len(engagement) if engagement else 0.0

    return {
        "click_rate": safe_rate(views, clicks),
        "view_to_edit_rate": safe_rate(edits, views),
        "edit_to_save_rate": safe_rate(saves, edits),
        "conversion_rate": safe_rate(saves, clicks),
        "share_rate": safe_rate(shares, views),
        "avg_engagement_time": avg_engagement,
    }


def top_performers(records: Sequence[ContentMetrics], limit: int = DEFAULT_TOP_PERFORMERS) -> List[TopPerformer]:
    scored = [(performance_score(r), r) for r in records]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [
        TopPerformer(template_id=r.template_id, score=score, campaign=r.campaign)
        for score, r in scored[: max(int(limit), 0)]
    ]


class ComparisonAggregator:
    """Folds metrics snapshots into one expert vs automated report."""

    def __init__(
        self,
        expert: Sequence[ContentMetrics],
        automated: Sequence[ContentMetrics],
        top_limit: int = DEFAULT_TOP_PERFORMERS,
    ):
        self.expert = list(expert)
        self.automated = list(automated)
        self.top_limit = top_limit

    def aggregate(self, period: str, now: Optional[datetime] = None) -> Optional[ComparisonReport]:
        """Build the report, or None when neither side has data."""
        if not self.expert and not self.automated:
            return None

        expert_rates = aggregate_rates(self.expert)
        automated_rates = aggregate_rates(self.automated)
        deltas = {key: expert_rates[key] - automated_rates[key] for key in expert_rates}

        metrics = ComparisonMetrics(
            **{
                key: MetricComparison(
                    expert=round(expert_rates[key], 2),
                    automated=round(automated_rates[key], 2),
                    delta=round(deltas[key], 2),
                )
                for key in expert_rates
            }
        )

        return ComparisonReport(
            period=normalize_period(period),
            expert_count=len(self.expert),
            automated_count=len(self.automated),
            metrics=metrics,
            top_performers=TopPerformers(
                expert=top_performers(self.expert, self.top_limit),
                automated=top_performers(self.automated, self.top_limit),
            ),
            insight_summary=self._generate_insights(deltas),
            last_updated=now or datetime.now(timezone.utc),
        )

    def _generate_insights(self, deltas: Dict[str, float]) -> List[str]:
        """Generate statements in a fixed category order."""
        insights = [
            f"Comparison based on {len(self.expert)} expert-created and "
            f"{len(self.automated)} automated templates."
        ]

        conversion = deltas["conversion_rate"]
        if abs(conversion) > CONVERSION_INSIGHT_THRESHOLD:
            higher, lower = _ordered_sides(conversion)
            insights.append(
                f"{_SIDE_LABELS[higher]} content has a {abs(conversion):.1f}% higher "
                f"conversion rate than {_SIDE_LABELS[lower].lower()} content."
            )
        else:
            insights.append(
                "Expert-created and automated content have similar conversion rates "
                f"(difference of {abs(conversion):.1f}%)."
            )

        view_to_edit = deltas["view_to_edit_rate"]
        if abs(view_to_edit) > EDIT_INSIGHT_THRESHOLD:
            higher, _ = _ordered_sides(view_to_edit)
            insights.append(
                f"Users are more likely to edit templates after viewing "
                f"{_SIDE_LABELS[higher].lower()} content ({abs(view_to_edit):.1f}% higher view-to-edit rate)."
            )

        edit_to_save = deltas["edit_to_save_rate"]
        if abs(edit_to_save) > SAVE_INSIGHT_THRESHOLD:
            higher, _ = _ordered_sides(edit_to_save)
            insights.append(
                f"Users are more likely to save templates after editing "
                f"{_SIDE_LABELS[higher].lower()} content ({abs(edit_to_save):.1f}% higher edit-to-save rate)."
            )

        share = deltas["share_rate"]
        if abs(share) > SHARE_INSIGHT_THRESHOLD:
            higher, _ = _ordered_sides(share)
            insights.append(
                f"{_SIDE_LABELS[higher]} content is shared more often "
                f"({abs(share):.1f}% higher share rate)."
            )

        engagement = deltas["avg_engagement_time"]
        if abs(engagement) > ENGAGEMENT_INSIGHT_THRESHOLD:
            higher, _ = _ordered_sides(engagement)
            insights.append(
                f"{_SIDE_LABELS[higher]} content holds attention longer "
                f"({abs(engagement):.1f} seconds more average engagement time)."
            )

        return insights


def _ordered_sides(delta: float):
    if delta > 0:
        return "expert", "automated"
    return "automated", "expert"


def aggregate_comparison(
    period: str,
    expert: Sequence[ContentMetrics],
    automated: Sequence[ContentMetrics],
    now: Optional[datetime] = None,
    top_limit: int = DEFAULT_TOP_PERFORMERS,
) -> Optional[ComparisonReport]:
    return ComparisonAggregator(expert, automated, top_limit=top_limit).aggregate(period, now=now)
