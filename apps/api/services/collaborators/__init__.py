"""Pluggable collaborators for the content analytics pipeline."""

from services.collaborators.memory import InMemoryAnalyticsBackend
from services.collaborators.sql import SqlAnalyticsBackend
from services.collaborators.types import (
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

__all__ = [
    "AuditStore",
    "CreatorRecord",
    "CreatorRegistry",
    "EventFilter",
    "EventStore",
    "InMemoryAnalyticsBackend",
    "LinkNotFoundError",
    "LinkRecord",
    "LinkRegistry",
    "SqlAnalyticsBackend",
    "TemplateNotFoundError",
    "TemplateSourceStore",
]
