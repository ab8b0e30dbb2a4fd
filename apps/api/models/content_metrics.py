"""ContentMetricsRecord model: append-only metrics snapshots per link."""

import uuid

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.sql import func

from database import Base


class ContentMetricsRecord(Base):
    """Immutable metrics snapshot for one link over one period."""

    __tablename__ = "content_metrics"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id = Column(String, nullable=False, index=True)
    link_id = Column(String, nullable=False, index=True)
    source_type = Column(String, nullable=False, index=True)  # expert, automated
    creator_id = Column(String, nullable=True, index=True)
    generator_id = Column(String, nullable=True, index=True)
    creator_name = Column(String, nullable=True)
    generator_version = Column(String, nullable=True)
    prompt_template = Column(Text, nullable=True)
    model_params_json = Column(JSON, nullable=True)
    link_created_at = Column(DateTime(timezone=True), nullable=True)
    impressions = Column(Integer, nullable=False, default=0)
    clicks = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    edits = Column(Integer, nullable=False, default=0)
    saves = Column(Integer, nullable=False, default=0)
    shares = Column(Integer, nullable=False, default=0)
    avg_engagement_time = Column(Float, nullable=True)
    conversion_rate = Column(Float, nullable=False, default=0.0)
    click_to_edit_rate = Column(Float, nullable=False, default=0.0)
    edit_to_save_rate = Column(Float, nullable=False, default=0.0)
    campaign = Column(String, nullable=True)
    performance = Column(String, nullable=False)  # high, medium, low
    period = Column(String, nullable=False, index=True)
    calculated_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
