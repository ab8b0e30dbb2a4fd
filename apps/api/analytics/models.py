"""
Content analytics models and schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class SourceType(str, Enum):
    EXPERT = "expert"          # Authored by a human expert
    AUTOMATED = "automated"    # Produced by a content generator


class PerformanceTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Period(str, Enum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    ALL = "all"


class _AnalyticsModel(BaseModel):
    """Frozen snapshot; serialized with camelCase keys for the dashboard."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
        protected_namespaces=(),
    )


class ContentMetrics(_AnalyticsModel):
    """Metrics snapshot for one newsletter link over one period."""

    template_id: str
    link_id: str
    source_type: SourceType
    creator_id: Optional[str] = None      # set for expert content
    generator_id: Optional[str] = None    # set for automated content
    creator_name: Optional[str] = None
    generator_version: Optional[str] = None
    prompt_template: Optional[str] = None
    model_params: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    # Newsletter links have no separate impression tracking; impressions == clicks for now.
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    views: int = Field(default=0, ge=0)
    edits: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    avg_engagement_time: Optional[float] = None

    conversion_rate: float = 0.0
    click_to_edit_rate: float = 0.0
    edit_to_save_rate: float = 0.0

    campaign: Optional[str] = None
    performance: PerformanceTier
    period: Period
    calculated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_origin(self) -> "ContentMetrics":
        # Exactly one origin id, matching the source type.
        if self.source_type == SourceType.EXPERT.value:
            if not self.creator_id or self.generator_id:
                raise ValueError("expert metrics require creator_id and no generator_id")
        elif not self.generator_id or self.creator_id:
            raise ValueError("automated metrics require generator_id and no creator_id")
        return self

    @property
    def origin_id(self) -> Optional[str]:
        if self.source_type == SourceType.EXPERT.value:
            return self.creator_id
        return self.generator_id


class MetricComparison(_AnalyticsModel):
    expert: float
    automated: float
    delta: float


class ComparisonMetrics(_AnalyticsModel):
    click_rate: MetricComparison
    view_to_edit_rate: MetricComparison
    edit_to_save_rate: MetricComparison
    conversion_rate: MetricComparison
    share_rate: MetricComparison
    avg_engagement_time: MetricComparison


class TopPerformer(_AnalyticsModel):
    template_id: str
    score: int
    campaign: Optional[str] = None


class TopPerformers(_AnalyticsModel):
    expert: List[TopPerformer] = []
    automated: List[TopPerformer] = []


class ComparisonReport(_AnalyticsModel):
    """Expert vs automated comparison for a single period."""

    period: Period
    expert_count: int
    automated_count: int
    metrics: ComparisonMetrics
    top_performers: TopPerformers
    insight_summary: List[str]
    last_updated: datetime
