from datetime import datetime, timedelta, timezone

import pytest

from analytics.models import ContentMetrics, SourceType
from services.content_comparison import ContentComparisonService
from services.pipeline import build_pipeline

from conftest import seed_link_events


def _snapshot(source_type, template_id, calculated_at, **counters):
    origin = {"creator_id": "expert-1"} if source_type == "expert" else {"generator_id": "gen-1"}
    return ContentMetrics(
        template_id=template_id,
        link_id=f"link-{template_id}",
        source_type=source_type,
        performance="low",
        period="30d",
        calculated_at=calculated_at,
        **origin,
        **counters,
    )


@pytest.mark.asyncio
async def test_compare_without_data_returns_none(memory_backend):
    report = await ContentComparisonService(audit=memory_backend).compare("30d")

    assert report is None
    assert memory_backend.comparison_log == []


@pytest.mark.asyncio
async def test_compare_end_to_end_from_collected_metrics(memory_backend):
    pipeline = build_pipeline(memory_backend)
    memory_backend.add_link("expert-link", "tpl-expert", utm_campaign="newsletter-42")
    memory_backend.add_link("auto-link", "tpl-auto")
    seed_link_events(memory_backend, "expert-link", clicks=100, views=80, edits=40, saves=30, shares=10)
    seed_link_events(memory_backend, "auto-link", clicks=100, views=50, edits=10, saves=2, shares=1)

    await pipeline.collector.calculate("expert-link", "expert-1", SourceType.EXPERT)
    await pipeline.collector.calculate("auto-link", "gen-1", SourceType.AUTOMATED)
    report = await pipeline.comparison.compare("30d")

    assert report.expert_count == 1
    assert report.automated_count == 1
    assert report.metrics.conversion_rate.delta == pytest.approx(28.0)
    assert report.metrics.share_rate.delta == pytest.approx(10.5)
    assert report.insight_summary[0].startswith("Comparison based on 1 expert-created")
    assert "28.0% higher conversion rate" in report.insight_summary[1]
    assert report.top_performers.expert[0].template_id == "tpl-expert"
    assert report.top_performers.expert[0].campaign == "newsletter-42"
    assert memory_backend.comparison_log == [report]


@pytest.mark.asyncio
async def test_compare_only_uses_snapshots_inside_window(memory_backend):
    now = datetime.now(timezone.utc)
    memory_backend.metrics_log.extend(
        [
            _snapshot("expert", "recent", now - timedelta(days=2), clicks=10, saves=5),
            _snapshot("expert", "stale", now - timedelta(days=45), clicks=10, saves=0),
            _snapshot("automated", "auto-recent", now - timedelta(days=3), clicks=10, saves=1),
        ]
    )
    service = ContentComparisonService(audit=memory_backend)

    week = await service.compare("7d")
    quarter = await service.compare("90d")

    assert (week.expert_count, week.automated_count) == (1, 1)
    assert (quarter.expert_count, quarter.automated_count) == (2, 1)
    assert len(memory_backend.comparison_log) == 2


@pytest.mark.asyncio
async def test_compare_returns_none_when_store_unreadable(memory_backend, monkeypatch):
    async def _unreadable(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(memory_backend, "list_metrics_since", _unreadable)

    assert await ContentComparisonService(audit=memory_backend).compare("30d") is None


@pytest.mark.asyncio
async def test_compare_survives_append_failure(memory_backend, monkeypatch):
    memory_backend.metrics_log.append(
        _snapshot("expert", "tpl", datetime.now(timezone.utc), clicks=4, views=2, saves=1)
    )

    async def _append_fails(report):
        raise ConnectionError("audit store unavailable")

    monkeypatch.setattr(memory_backend, "append_comparison", _append_fails)
    report = await ContentComparisonService(audit=memory_backend).compare("30d")

    assert report is not None
    assert report.expert_count == 1


@pytest.mark.asyncio
async def test_top_performers_limited_per_side(memory_backend):
    now = datetime.now(timezone.utc)
    for index in range(8):
        memory_backend.metrics_log.append(
            _snapshot("automated", f"auto-{index}", now, clicks=50, views=10 + index, edits=index, saves=1)
        )

    report = await ContentComparisonService(audit=memory_backend, top_limit=5).compare("30d")

    assert len(report.top_performers.automated) == 5
    assert report.top_performers.expert == []
    scores = [item.score for item in report.top_performers.automated]
    assert scores == sorted(scores, reverse=True)
