"""Per-link content metrics collection for expert and automated templates."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from analytics.models import ContentMetrics, SourceType
from analytics.periods import normalize_period, period_start
from analytics.scoring import determine_performance, safe_rate
from services.collaborators.types import (
    CLICK_EVENTS,
    EDIT_ACTION_OPEN,
    EDIT_ACTION_SAVE,
    EDIT_EVENTS,
    SHARE_EVENTS,
    VIEW_EVENTS,
    AuditStore,
    CreatorRegistry,
    EventFilter,
    EventStore,
    LinkNotFoundError,
    LinkRegistry,
)

logger = logging.getLogger(__name__)

UNKNOWN_NAMES = {
    SourceType.EXPERT: "Unknown Expert",
    SourceType.AUTOMATED: "Unknown Generator",
}


class MetricsCollector:
    """Builds immutable ContentMetrics snapshots from raw link events."""

    def __init__(
        self,
        *,
        links: LinkRegistry,
        events: EventStore,
        registry: CreatorRegistry,
        audit: AuditStore,
    ) -> None:
        self.links = links
        self.events = events
        self.registry = registry
        self.audit = audit

    async def calculate(
        self,
        link_id: str,
        source_id: str,
        source_type: SourceType,
        period: str = "30d",
    ) -> Optional[ContentMetrics]:
        """
        Calculate and record metrics for one link over a period.

        Returns None when the link does not resolve or an event query fails;
        callers must treat None as "metrics unavailable", never as zeros.
        """
        source = SourceType(source_type)
        window = normalize_period(period)

        try:
            link = await self.links.get_link(link_id)
        except LinkNotFoundError:
            logger.warning("content_metrics link=%s period=%s: link not found", link_id, window.value)
            return None
        except Exception:
            logger.exception("content_metrics link=%s period=%s: link lookup failed", link_id, window.value)
            return None

        event_filter = EventFilter(link_id=link_id, timestamp_gte=period_start(window))
        try:
            clicks, views, edits, saves, shares, avg_engagement = await asyncio.gather(
                self.events.count_events(CLICK_EVENTS, event_filter),
                self.events.count_events(VIEW_EVENTS, event_filter),
                self.events.count_events(EDIT_EVENTS, event_filter, action=EDIT_ACTION_OPEN),
                self.events.count_events(EDIT_EVENTS, event_filter, action=EDIT_ACTION_SAVE),
                self.events.count_events(SHARE_EVENTS, event_filter),
                self.events.average_engagement(event_filter),
            )
        except Exception:
            logger.exception(
                "content_metrics link=%s source=%s period=%s: event query failed",
                link_id,
                source.value,
                window.value,
            )
            return None

        conversion_rate = safe_rate(saves, clicks)
        origin = await self._resolve_origin(source_id, source)

        metrics = ContentMetrics(
            template_id=link.template_id,
            link_id=link_id,
            source_type=source,
            creator_id=source_id if source == SourceType.EXPERT else None,
            generator_id=source_id if source == SourceType.AUTOMATED else None,
            created_at=link.created_at,
            # Newsletter links have no separate impression tracking; impressions == clicks for now.
            impressions=clicks,
            clicks=clicks,
            views=views,
            edits=edits,
            saves=saves,
            shares=shares,
            avg_engagement_time=avg_engagement,
            conversion_rate=conversion_rate,
            click_to_edit_rate=safe_rate(edits, clicks),
            edit_to_save_rate=safe_rate(saves, edits),
            campaign=link.utm_campaign,
            performance=determine_performance(conversion_rate),
            period=window,
            calculated_at=datetime.now(timezone.utc),
            **origin,
        )

        try:
            await self.audit.append_metrics(metrics)
        except Exception:
            logger.exception(
                "content_metrics link=%s period=%s: failed to append metrics snapshot",
                link_id,
                window.value,
            )

        logger.info(
            "content_metrics link=%s template=%s source=%s period=%s performance=%s",
            link_id,
            metrics.template_id,
            source.value,
            window.value,
            metrics.performance,
        )
        return metrics

    async def calculate_expert(self, link_id: str, expert_id: str, period: str = "30d") -> Optional[ContentMetrics]:
        return await self.calculate(link_id, expert_id, SourceType.EXPERT, period)

    async def calculate_automated(
        self, link_id: str, generator_id: str, period: str = "30d"
    ) -> Optional[ContentMetrics]:
        return await self.calculate(link_id, generator_id, SourceType.AUTOMATED, period)

    async def _resolve_origin(self, source_id: str, source: SourceType) -> Dict[str, Any]:
        """Best-effort creator/generator details; never fails the snapshot."""
        placeholder = {"creator_name": UNKNOWN_NAMES[source]}
        try:
            creator = await self.registry.get_creator(source_id, source)
        except Exception as exc:
            logger.warning("Creator lookup failed for %s %s: %s", source.value, source_id, exc)
            return placeholder
        if creator is None:
            logger.warning("No %s registered with id %s", source.value, source_id)
            return placeholder

        origin: Dict[str, Any] = {"creator_name": creator.name or UNKNOWN_NAMES[source]}
        if source == SourceType.AUTOMATED:
            origin.update(
                generator_version=creator.version,
                prompt_template=creator.prompt_template,
                model_params=creator.model_params,
            )
        return origin
