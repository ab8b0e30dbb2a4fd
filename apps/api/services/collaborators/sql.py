"""SQLAlchemy-backed collaborators for the content analytics pipeline."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.future import select

from analytics.models import ComparisonReport, ContentMetrics, SourceType
from analytics.periods import as_utc
from models.content_comparison import ContentComparisonRecord
from models.content_events import NewsletterClick, TemplateEdit, TemplateShare, TemplateView
from models.content_generator import ContentGenerator
from models.content_metrics import ContentMetricsRecord
from models.content_source_index import ContentSourceIndex
from models.expert import Expert
from models.newsletter_link import NewsletterLink
from models.template import Template
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


_EVENT_MODELS: Dict[str, type] = {
    CLICK_EVENTS: NewsletterClick,
    VIEW_EVENTS: TemplateView,
    EDIT_EVENTS: TemplateEdit,
    SHARE_EVENTS: TemplateShare,
}


def metrics_to_record(metrics: ContentMetrics) -> ContentMetricsRecord:
    return ContentMetricsRecord(
        id=str(uuid.uuid4()),
        template_id=metrics.template_id,
        link_id=metrics.link_id,
        source_type=metrics.source_type,
        creator_id=metrics.creator_id,
        generator_id=metrics.generator_id,
        creator_name=metrics.creator_name,
        generator_version=metrics.generator_version,
        prompt_template=metrics.prompt_template,
        model_params_json=metrics.model_params,
        link_created_at=metrics.created_at,
        impressions=metrics.impressions,
        clicks=metrics.clicks,
        views=metrics.views,
        edits=metrics.edits,
        saves=metrics.saves,
        shares=metrics.shares,
        avg_engagement_time=metrics.avg_engagement_time,
        conversion_rate=metrics.conversion_rate,
        click_to_edit_rate=metrics.click_to_edit_rate,
        edit_to_save_rate=metrics.edit_to_save_rate,
        campaign=metrics.campaign,
        performance=metrics.performance,
        period=metrics.period,
        calculated_at=metrics.calculated_at or datetime.now(timezone.utc),
    )


def record_to_metrics(row: ContentMetricsRecord) -> ContentMetrics:
    return ContentMetrics(
        template_id=row.template_id,
        link_id=row.link_id,
        source_type=row.source_type,
        creator_id=row.creator_id,
        generator_id=row.generator_id,
        creator_name=row.creator_name,
        generator_version=row.generator_version,
        prompt_template=row.prompt_template,
        model_params=row.model_params_json if isinstance(row.model_params_json, dict) else None,
        created_at=as_utc(row.link_created_at),
        impressions=int(row.impressions or 0),
        clicks=int(row.clicks or 0),
        views=int(row.views or 0),
        edits=int(row.edits or 0),
        saves=int(row.saves or 0),
        shares=int(row.shares or 0),
        avg_engagement_time=row.avg_engagement_time,
        conversion_rate=float(row.conversion_rate or 0.0),
        click_to_edit_rate=float(row.click_to_edit_rate or 0.0),
        edit_to_save_rate=float(row.edit_to_save_rate or 0.0),
        campaign=row.campaign,
        performance=row.performance,
        period=row.period,
        calculated_at=as_utc(row.calculated_at),
    )


class SqlAnalyticsBackend(LinkRegistry, EventStore, CreatorRegistry, AuditStore, TemplateSourceStore):
    """
    Collaborators over the application database.

    Every call opens its own short-lived session so independent reads can be
    awaited concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker):
        self.session_maker = session_maker

    async def get_link(self, link_id: str) -> LinkRecord:
        async with self.session_maker() as db:
            result = await db.execute(select(NewsletterLink).where(NewsletterLink.id == link_id))
            link = result.scalar_one_or_none()
        if link is None:
            raise LinkNotFoundError(f"Link {link_id} not found")
        return LinkRecord(
            link_id=link.id,
            template_id=link.template_id,
            created_at=as_utc(link.created_at),
            utm_campaign=link.utm_campaign,
        )

    async def count_events(
        self,
        collection: str,
        event_filter: EventFilter,
        action: Optional[str] = None,
    ) -> int:
        model = _EVENT_MODELS.get(collection)
        if model is None:
            raise ValueError(f"Unknown event collection: {collection}")
        if action is not None and not hasattr(model, "action"):
            raise ValueError(f"Collection {collection} has no action field")

        query = (
            select(func.count())
            .select_from(model)
            .where(
                model.link_id == event_filter.link_id,
                model.timestamp >= event_filter.timestamp_gte,
            )
        )
        if action is not None:
            query = query.where(model.action == action)

        async with self.session_maker() as db:
            result = await db.execute(query)
            return int(result.scalar_one() or 0)

    async def average_engagement(self, event_filter: EventFilter) -> Optional[float]:
        query = select(func.avg(TemplateView.engagement_seconds)).where(
            TemplateView.link_id == event_filter.link_id,
            TemplateView.timestamp >= event_filter.timestamp_gte,
            TemplateView.engagement_seconds.is_not(None),
        )
        async with self.session_maker() as db:
            result = await db.execute(query)
            value = result.scalar_one_or_none()
        return float(value) if value is not None else None

    async def get_creator(self, creator_id: str, source_type: SourceType) -> Optional[CreatorRecord]:
        async with self.session_maker() as db:
            if SourceType(source_type) == SourceType.EXPERT:
                result = await db.execute(select(Expert).where(Expert.id == creator_id))
                expert = result.scalar_one_or_none()
                if expert is None:
                    return None
                return CreatorRecord(creator_id=expert.id, name=expert.name)

            result = await db.execute(select(ContentGenerator).where(ContentGenerator.id == creator_id))
            generator = result.scalar_one_or_none()
        if generator is None:
            return None
        return CreatorRecord(
            creator_id=generator.id,
            name=generator.name,
            version=generator.version,
            prompt_template=generator.prompt_template,
            model_params=generator.model_params_json if isinstance(generator.model_params_json, dict) else None,
        )

    async def append_metrics(self, metrics: ContentMetrics) -> None:
        async with self.session_maker() as db:
            db.add(metrics_to_record(metrics))
            await db.commit()

    async def append_comparison(self, report: ComparisonReport) -> None:
        async with self.session_maker() as db:
            db.add(
                ContentComparisonRecord(
                    id=str(uuid.uuid4()),
                    period=report.period,
                    expert_count=report.expert_count,
                    automated_count=report.automated_count,
                    report_json=report.model_dump(mode="json", by_alias=True),
                    created_at=report.last_updated,
                )
            )
            await db.commit()

    async def list_metrics_since(
        self,
        since: datetime,
        source_type: Optional[SourceType] = None,
        limit: Optional[int] = None,
    ) -> List[ContentMetrics]:
        query = select(ContentMetricsRecord).where(ContentMetricsRecord.calculated_at >= since)
        if source_type is not None:
            query = query.where(ContentMetricsRecord.source_type == SourceType(source_type).value)
        query = query.order_by(ContentMetricsRecord.calculated_at.desc())
        if limit is not None:
            query = query.limit(max(int(limit), 1))

        async with self.session_maker() as db:
            result = await db.execute(query)
            rows = result.scalars().all()
        return [record_to_metrics(row) for row in rows]

    async def tag(
        self,
        template_id: str,
        source_type: SourceType,
        creator_id: str,
        notes: Optional[str] = None,
    ) -> None:
        now = datetime.now(timezone.utc)
        source_value = SourceType(source_type).value
        async with self.session_maker() as db:
            result = await db.execute(select(Template).where(Template.id == template_id))
            template = result.scalar_one_or_none()
            if template is None:
                raise TemplateNotFoundError(f"Template {template_id} not found")

            template.source_type = source_value
            template.source_creator_id = creator_id
            template.source_notes = notes
            template.source_tagged_at = now
            db.add(
                ContentSourceIndex(
                    id=str(uuid.uuid4()),
                    template_id=template_id,
                    source_type=source_value,
                    creator_id=creator_id,
                    notes=notes,
                    tagged_at=now,
                )
            )
            await db.commit()
