"""Explicit construction of the content analytics pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.ext.asyncio import async_sessionmaker

from config import settings
from services.collaborators.memory import InMemoryAnalyticsBackend
from services.collaborators.sql import SqlAnalyticsBackend
from services.content_comparison import ContentComparisonService
from services.content_metrics import MetricsCollector
from services.template_source import TemplateSourceService

AnalyticsBackend = Union[SqlAnalyticsBackend, InMemoryAnalyticsBackend]


@dataclass(frozen=True)
class AnalyticsPipeline:
    backend: AnalyticsBackend
    collector: MetricsCollector
    comparison: ContentComparisonService
    sources: TemplateSourceService


def create_backend(kind: str, session_maker: Optional[async_sessionmaker] = None) -> AnalyticsBackend:
    """Select collaborator implementations once, at construction time."""
    key = str(kind or "sql").strip().lower()
    if key == "memory":
        return InMemoryAnalyticsBackend()
    if key == "sql":
        if session_maker is None:
            raise ValueError("sql analytics backend requires a session maker")
        return SqlAnalyticsBackend(session_maker)
    raise ValueError(f"Unknown analytics backend: {kind}")


def build_pipeline(backend: AnalyticsBackend, top_limit: Optional[int] = None) -> AnalyticsPipeline:
    limit = int(top_limit if top_limit is not None else settings.TOP_PERFORMERS_LIMIT)
    return AnalyticsPipeline(
        backend=backend,
        collector=MetricsCollector(links=backend, events=backend, registry=backend, audit=backend),
        comparison=ContentComparisonService(audit=backend, top_limit=limit),
        sources=TemplateSourceService(sources=backend),
    )
