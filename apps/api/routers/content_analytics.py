"""Content analytics router: link metrics, expert vs automated comparison, source tagging."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import async_sessionmaker

from analytics.models import SourceType
from analytics.periods import normalize_period, period_start
from analytics.scoring import performance_score
from config import settings
from database import get_session_maker
from routers.auth_scope import AuthContext, get_auth_context, require_role
from routers.rate_limit import rate_limit
from services.pipeline import AnalyticsPipeline, build_pipeline, create_backend
from services.session_token import ROLE_ADMIN, ROLE_EDITOR

router = APIRouter()
logger = logging.getLogger(__name__)


class CalculateMetricsRequest(BaseModel):
    link_id: str = Field(min_length=1)
    source_id: str = Field(min_length=1)
    source_type: SourceType
    period: str = "30d"


class TagSourceRequest(BaseModel):
    is_expert: bool
    creator_id: str = Field(min_length=1)
    notes: Optional[str] = None


def _assert_analytics_enabled() -> None:
    if not settings.ANALYTICS_ENABLED:
        raise HTTPException(status_code=503, detail="Content analytics disabled by feature flag.")


async def get_pipeline(
    request: Request,
    session_maker: async_sessionmaker = Depends(get_session_maker),
) -> AnalyticsPipeline:
    _assert_analytics_enabled()
    backend = getattr(request.app.state, "analytics_backend", None)
    if backend is None:
        backend = create_backend("sql", session_maker)
    return build_pipeline(backend)


@router.post("/metrics/calculate")
async def calculate_content_metrics(
    request: CalculateMetricsRequest,
    _rate_limit: None = Depends(rate_limit("metrics_calculate", limit=240, window_seconds=3600)),
    auth: AuthContext = Depends(get_auth_context),
    pipeline: AnalyticsPipeline = Depends(get_pipeline),
):
    metrics = await pipeline.collector.calculate(
        request.link_id,
        request.source_id,
        request.source_type,
        request.period,
    )
    if metrics is None:
        raise HTTPException(status_code=404, detail="Metrics unavailable for this link.")

    payload = metrics.model_dump(mode="json", by_alias=True)
    payload["score"] = performance_score(metrics)
    return payload


@router.get("/metrics")
async def list_content_metrics(
    period: str = Query(default=settings.ANALYTICS_DEFAULT_PERIOD),
    source_type: Optional[SourceType] = Query(default=None),
    limit: int = Query(default=settings.METRICS_HISTORY_LIMIT, ge=1, le=500),
    _rate_limit: None = Depends(rate_limit("metrics_history", limit=240, window_seconds=3600)),
    auth: AuthContext = Depends(get_auth_context),
    pipeline: AnalyticsPipeline = Depends(get_pipeline),
):
    """Recorded metrics snapshots for the period, newest first."""
    window = normalize_period(period)
    try:
        rows = await pipeline.backend.list_metrics_since(
            period_start(window),
            source_type=source_type,
            limit=limit,
        )
    except Exception:
        logger.exception("Failed to list content metrics period=%s", window.value)
        raise HTTPException(status_code=500, detail="Failed to fetch content metrics.")

    items = []
    for row in rows:
        item = row.model_dump(mode="json", by_alias=True)
        item["score"] = performance_score(row)
        items.append(item)
    return {"period": window.value, "count": len(items), "items": items}


@router.get("/comparison")
async def get_content_comparison(
    period: str = Query(default=settings.ANALYTICS_DEFAULT_PERIOD),
    _rate_limit: None = Depends(rate_limit("content_comparison", limit=120, window_seconds=3600)),
    auth: AuthContext = Depends(get_auth_context),
    pipeline: AnalyticsPipeline = Depends(get_pipeline),
):
    report = await pipeline.comparison.compare(period)
    if report is None:
        return {
            "period": normalize_period(period).value,
            "report": None,
            "message": "No data available for comparison.",
        }
    return {
        "period": report.period,
        "report": report.model_dump(mode="json", by_alias=True),
    }


@router.post("/templates/{template_id}/source")
async def tag_template_source(
    template_id: str,
    request: TagSourceRequest,
    auth: AuthContext = Depends(require_role(ROLE_EDITOR, ROLE_ADMIN)),
    pipeline: AnalyticsPipeline = Depends(get_pipeline),
):
    tagged = await pipeline.sources.tag_source(
        template_id,
        request.is_expert,
        request.creator_id,
        request.notes,
    )
    logger.info("Template %s source tag by %s (%s): tagged=%s", template_id, auth.user_id, auth.role, tagged)
    return {"template_id": template_id, "tagged": tagged}
