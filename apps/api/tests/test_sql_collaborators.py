from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.future import select

from analytics.models import SourceType
from models.content_comparison import ContentComparisonRecord
from models.content_events import NewsletterClick, TemplateEdit, TemplateShare, TemplateView
from models.content_generator import ContentGenerator
from models.content_metrics import ContentMetricsRecord
from models.content_source_index import ContentSourceIndex
from models.expert import Expert
from models.newsletter_link import NewsletterLink
from models.template import Template
from services.collaborators.sql import SqlAnalyticsBackend
from services.pipeline import build_pipeline


async def _seed(session_maker):
    now = datetime.now(timezone.utc)
    recent = now - timedelta(days=1)
    old = now - timedelta(days=60)
    async with session_maker() as db:
        db.add_all(
            [
                Template(id="tpl-expert", title="Expert hook"),
                Template(id="tpl-auto", title="Generated hook"),
                NewsletterLink(id="link-expert", template_id="tpl-expert", utm_campaign="weekly-07", created_at=old),
                NewsletterLink(id="link-auto", template_id="tpl-auto", created_at=old),
                Expert(id="expert-1", name="Dana Ruiz"),
                ContentGenerator(id="gen-1", name="Hook Writer", version="3", model_params_json={"temperature": 0.4}),
            ]
        )
        for _ in range(10):
            db.add(NewsletterClick(link_id="link-expert", timestamp=recent))
        for _ in range(4):
            db.add(NewsletterClick(link_id="link-expert", timestamp=old))
        for seconds in (20.0, 40.0, None, 60.0):
            db.add(TemplateView(link_id="link-expert", timestamp=recent, engagement_seconds=seconds))
        for _ in range(3):
            db.add(TemplateEdit(link_id="link-expert", action="open_editor", timestamp=recent))
        for _ in range(2):
            db.add(TemplateEdit(link_id="link-expert", action="save_template", timestamp=recent))
        db.add(TemplateShare(link_id="link-expert", timestamp=recent))

        for _ in range(10):
            db.add(NewsletterClick(link_id="link-auto", timestamp=recent))
        db.add(TemplateView(link_id="link-auto", timestamp=recent))
        await db.commit()


@pytest.mark.asyncio
async def test_sql_pipeline_collects_and_persists_metrics(sqlite_session_maker):
    await _seed(sqlite_session_maker)
    pipeline = build_pipeline(SqlAnalyticsBackend(sqlite_session_maker))

    metrics = await pipeline.collector.calculate("link-expert", "expert-1", SourceType.EXPERT, "30d")

    assert metrics.template_id == "tpl-expert"
    assert metrics.clicks == 10
    assert metrics.views == 4
    assert metrics.edits == 3
    assert metrics.saves == 2
    assert metrics.shares == 1
    assert metrics.avg_engagement_time == pytest.approx(40.0)
    assert metrics.conversion_rate == pytest.approx(20.0)
    assert metrics.performance == "high"
    assert metrics.creator_name == "Dana Ruiz"
    assert metrics.campaign == "weekly-07"

    async with sqlite_session_maker() as db:
        rows = (await db.execute(select(ContentMetricsRecord))).scalars().all()
    assert len(rows) == 1
    assert rows[0].link_id == "link-expert"
    assert rows[0].period == "30d"
    assert rows[0].calculated_at is not None


@pytest.mark.asyncio
async def test_sql_all_period_includes_older_events(sqlite_session_maker):
    await _seed(sqlite_session_maker)
    backend = SqlAnalyticsBackend(sqlite_session_maker)

    metrics = await build_pipeline(backend).collector.calculate("link-expert", "expert-1", SourceType.EXPERT, "all")

    assert metrics.clicks == 14


@pytest.mark.asyncio
async def test_sql_unknown_link_returns_none(sqlite_session_maker):
    pipeline = build_pipeline(SqlAnalyticsBackend(sqlite_session_maker))

    assert await pipeline.collector.calculate("nope", "expert-1", SourceType.EXPERT) is None

    async with sqlite_session_maker() as db:
        rows = (await db.execute(select(ContentMetricsRecord))).scalars().all()
    assert rows == []


@pytest.mark.asyncio
async def test_sql_comparison_round_trip(sqlite_session_maker):
    await _seed(sqlite_session_maker)
    pipeline = build_pipeline(SqlAnalyticsBackend(sqlite_session_maker))

    await pipeline.collector.calculate("link-expert", "expert-1", SourceType.EXPERT, "30d")
    automated = await pipeline.collector.calculate("link-auto", "gen-1", SourceType.AUTOMATED, "30d")
    report = await pipeline.comparison.compare("30d")

    assert automated.generator_version == "3"
    assert automated.model_params == {"temperature": 0.4}
    assert report.expert_count == 1
    assert report.automated_count == 1
    assert report.metrics.conversion_rate.expert == pytest.approx(20.0)
    assert report.metrics.conversion_rate.automated == 0.0
    assert report.metrics.avg_engagement_time.expert == pytest.approx(40.0)
    assert report.metrics.avg_engagement_time.automated == 0.0

    async with sqlite_session_maker() as db:
        stored = (await db.execute(select(ContentComparisonRecord))).scalar_one()
    assert stored.period == "30d"
    assert stored.report_json["expertCount"] == 1
    assert stored.report_json["insightSummary"] == report.insight_summary


@pytest.mark.asyncio
async def test_sql_tag_source(sqlite_session_maker):
    await _seed(sqlite_session_maker)
    pipeline = build_pipeline(SqlAnalyticsBackend(sqlite_session_maker))

    assert await pipeline.sources.tag_source("tpl-auto", False, "gen-1", notes="batch 12") is True
    assert await pipeline.sources.tag_source("missing", True, "expert-1") is False

    async with sqlite_session_maker() as db:
        template = (await db.execute(select(Template).where(Template.id == "tpl-auto"))).scalar_one()
        index_rows = (await db.execute(select(ContentSourceIndex))).scalars().all()
    assert template.source_type == "automated"
    assert template.source_creator_id == "gen-1"
    assert template.source_notes == "batch 12"
    assert len(index_rows) == 1
    assert index_rows[0].template_id == "tpl-auto"


@pytest.mark.asyncio
async def test_sql_count_rejects_unknown_collection(sqlite_session_maker):
    backend = SqlAnalyticsBackend(sqlite_session_maker)
    from services.collaborators.types import EventFilter

    with pytest.raises(ValueError):
        await backend.count_events("page_views", EventFilter("link", datetime.now(timezone.utc)))
