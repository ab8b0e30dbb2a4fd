"""Collaborator contracts for the content analytics pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from analytics.models import ComparisonReport, ContentMetrics, SourceType


CLICK_EVENTS = "newsletter_clicks"
VIEW_EVENTS = "template_views"
EDIT_EVENTS = "template_edits"
SHARE_EVENTS = "template_shares"

EDIT_ACTION_OPEN = "open_editor"
EDIT_ACTION_SAVE = "save_template"


class LinkNotFoundError(LookupError):
    """Raised when a newsletter link id does not resolve."""


class TemplateNotFoundError(LookupError):
    """Raised when a template id does not resolve."""


@dataclass(frozen=True)
class LinkRecord:
    link_id: str
    template_id: str
    created_at: Optional[datetime] = None
    utm_campaign: Optional[str] = None


@dataclass(frozen=True)
class CreatorRecord:
    creator_id: str
    name: str
    version: Optional[str] = None
    prompt_template: Optional[str] = None
    model_params: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class EventFilter:
    link_id: str
    timestamp_gte: datetime


class LinkRegistry(ABC):
    @abstractmethod
    async def get_link(self, link_id: str) -> LinkRecord:
        """Resolve a link or raise LinkNotFoundError."""
        raise NotImplementedError


class EventStore(ABC):
    @abstractmethod
    async def count_events(
        self,
        collection: str,
        event_filter: EventFilter,
        action: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    async def average_engagement(self, event_filter: EventFilter) -> Optional[float]:
        """Mean engagement seconds across view events that recorded one."""
        raise NotImplementedError


class CreatorRegistry(ABC):
    @abstractmethod
    async def get_creator(self, creator_id: str, source_type: SourceType) -> Optional[CreatorRecord]:
        raise NotImplementedError


class AuditStore(ABC):
    @abstractmethod
    async def append_metrics(self, metrics: ContentMetrics) -> None:
        raise NotImplementedError

    @abstractmethod
    async def append_comparison(self, report: ComparisonReport) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_metrics_since(
        self,
        since: datetime,
        source_type: Optional[SourceType] = None,
        limit: Optional[int] = None,
    ) -> List[ContentMetrics]:
        """Snapshots with calculated_at >= since, newest first."""
        raise NotImplementedError


class TemplateSourceStore(ABC):
    @abstractmethod
    async def tag(
        self,
        template_id: str,
        source_type: SourceType,
        creator_id: str,
        notes: Optional[str] = None,
    ) -> None:
        """Update template provenance and append to the source index."""
        raise NotImplementedError
