"""Expert vs automated content comparison service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from analytics.comparison import DEFAULT_TOP_PERFORMERS, ComparisonAggregator
from analytics.models import ComparisonReport, ContentMetrics, SourceType
from analytics.periods import normalize_period, period_start
from services.collaborators.types import AuditStore

logger = logging.getLogger(__name__)


class ContentComparisonService:
    """Aggregates recorded metrics snapshots into a comparison report."""

    def __init__(self, *, audit: AuditStore, top_limit: int = DEFAULT_TOP_PERFORMERS) -> None:
        self.audit = audit
        self.top_limit = top_limit

    async def compare(self, period: str = "30d") -> Optional[ComparisonReport]:
        """
        Compare snapshots calculated within the period.

        Returns None when there is no data for either side or when the
        snapshot store cannot be read.
        """
        window = normalize_period(period)
        now = datetime.now(timezone.utc)
        since = period_start(window, now=now)

        try:
            rows = await self.audit.list_metrics_since(since)
        except Exception:
            logger.exception("content_comparison period=%s: failed to load metrics snapshots", window.value)
            return None

        expert: List[ContentMetrics] = [row for row in rows if row.source_type == SourceType.EXPERT.value]
        automated: List[ContentMetrics] = [row for row in rows if row.source_type == SourceType.AUTOMATED.value]

        report = ComparisonAggregator(expert, automated, top_limit=self.top_limit).aggregate(window, now=now)
        if report is None:
            logger.info("content_comparison period=%s: no data available", window.value)
            return None

        try:
            await self.audit.append_comparison(report)
        except Exception:
            logger.exception("content_comparison period=%s: failed to append report", window.value)

        logger.info(
            "content_comparison period=%s expert=%s automated=%s",
            window.value,
            report.expert_count,
            report.automated_count,
        )
        return report
