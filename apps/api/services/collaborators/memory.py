"""In-memory collaborators for local runs and tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from analytics.models import ComparisonReport, ContentMetrics, SourceType
from analytics.periods import as_utc
from services.collaborators.types import (
    CLICK_EVENTS,
    EDIT_EVENTS,
    SHARE_EVENTS,
    VIEW_EVENTS,
    AuditStore,
    CreatorRecord,
    CreatorRegistry,
    EventFilter,
    EventStore,
    LinkNotFoundError,
    LinkRecord,
    LinkRegistry,
    TemplateNotFoundError,
    TemplateSourceStore,
)


@dataclass
class _Event:
    link_id: str
    timestamp: datetime
    action: Optional[str] = None
    engagement_seconds: Optional[float] = None


class InMemoryAnalyticsBackend(LinkRegistry, EventStore, CreatorRegistry, AuditStore, TemplateSourceStore):
    """Dictionary-backed stand-in for the database collaborators."""

    def __init__(self) -> None:
        self.links: Dict[str, LinkRecord] = {}
        self.events: Dict[str, List[_Event]] = {
            CLICK_EVENTS: [],
            VIEW_EVENTS: [],
            EDIT_EVENTS: [],
            SHARE_EVENTS: [],
        }
        self.experts: Dict[str, CreatorRecord] = {}
        self.generators: Dict[str, CreatorRecord] = {}
        self.templates: Dict[str, Dict[str, Any]] = {}
        self.metrics_log: List[ContentMetrics] = []
        self.comparison_log: List[ComparisonReport] = []
        self.source_index: List[Dict[str, Any]] = []

    # Seeding helpers

    def add_link(
        self,
        link_id: str,
        template_id: str,
        created_at: Optional[datetime] = None,
        utm_campaign: Optional[str] = None,
    ) -> LinkRecord:
        record = LinkRecord(
            link_id=link_id,
            template_id=template_id,
            created_at=created_at or datetime.now(timezone.utc),
            utm_campaign=utm_campaign,
        )
        self.links[link_id] = record
        return record

    def add_event(
        self,
        collection: str,
        link_id: str,
        timestamp: Optional[datetime] = None,
        action: Optional[str] = None,
        engagement_seconds: Optional[float] = None,
    ) -> None:
        if collection not in self.events:
            raise ValueError(f"Unknown event collection: {collection}")
        self.events[collection].append(
            _Event(
                link_id=link_id,
                timestamp=as_utc(timestamp) or datetime.now(timezone.utc),
                action=action,
                engagement_seconds=engagement_seconds,
            )
        )

    def add_expert(self, expert_id: str, name: str) -> None:
        self.experts[expert_id] = CreatorRecord(creator_id=expert_id, name=name)

    def add_generator(
        self,
        generator_id: str,
        name: str,
        version: Optional[str] = None,
        prompt_template: Optional[str] = None,
        model_params: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.generators[generator_id] = CreatorRecord(
            creator_id=generator_id,
            name=name,
            version=version,
            prompt_template=prompt_template,
            model_params=model_params,
        )

    def add_template(self, template_id: str, title: Optional[str] = None) -> None:
        self.templates[template_id] = {"id": template_id, "title": title}

    # Collaborator contracts

    async def get_link(self, link_id: str) -> LinkRecord:
        link = self.links.get(link_id)
        if link is None:
            raise LinkNotFoundError(f"Link {link_id} not found")
        return link

    def _matching(self, collection: str, event_filter: EventFilter) -> List[_Event]:
        if collection not in self.events:
            raise ValueError(f"Unknown event collection: {collection}")
        since = as_utc(event_filter.timestamp_gte)
        return [
            event
            for event in self.events[collection]
            if event.link_id == event_filter.link_id and event.timestamp >= since
        ]

    async def count_events(
        self,
        collection: str,
        event_filter: EventFilter,
        action: Optional[str] = None,
    ) -> int:
        events = self._matching(collection, event_filter)
        if action is not None:
            events = [event for event in events if event.action == action]
        return len(events)

    async def average_engagement(self, event_filter: EventFilter) -> Optional[float]:
        values = [
            event.engagement_seconds
            for event in self._matching(VIEW_EVENTS, event_filter)
            if event.engagement_seconds is not None
        ]
        if not values:
            return None
        return sum(values) / len(values)

    async def get_creator(self, creator_id: str, source_type: SourceType) -> Optional[CreatorRecord]:
        if SourceType(source_type) == SourceType.EXPERT:
            return self.experts.get(creator_id)
        return self.generators.get(creator_id)

    async def append_metrics(self, metrics: ContentMetrics) -> None:
        self.metrics_log.append(metrics)

    async def append_comparison(self, report: ComparisonReport) -> None:
        self.comparison_log.append(report)

    async def list_metrics_since(
        self,
        since: datetime,
        source_type: Optional[SourceType] = None,
        limit: Optional[int] = None,
    ) -> List[ContentMetrics]:
        since_utc = as_utc(since)
        rows = [
            row
            for row in self.metrics_log
            if row.calculated_at is not None and as_utc(row.calculated_at) >= since_utc
        ]
        if source_type is not None:
            wanted = SourceType(source_type).value
            rows = [row for row in rows if row.source_type == wanted]
        rows.sort(key=lambda row: row.calculated_at, reverse=True)
        if limit is not None:
            rows = rows[: max(int(limit), 1)]
        return rows

    async def tag(
        self,
        template_id: str,
        source_type: SourceType,
        creator_id: str,
        notes: Optional[str] = None,
    ) -> None:
        template = self.templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template {template_id} not found")
        now = datetime.now(timezone.utc)
        source_value = SourceType(source_type).value
        template.update(
            {
                "source_type": source_value,
                "source_creator_id": creator_id,
                "source_notes": notes,
                "source_tagged_at": now,
            }
        )
        self.source_index.append(
            {
                "template_id": template_id,
                "source_type": source_value,
                "creator_id": creator_id,
                "notes": notes,
                "tagged_at": now,
            }
        )
