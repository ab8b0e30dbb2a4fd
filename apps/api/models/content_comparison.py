"""ContentComparisonRecord model: append-only expert vs automated reports."""

import uuid

from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.sql import func

from database import Base


class ContentComparisonRecord(Base):
    __tablename__ = "content_comparisons"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    period = Column(String, nullable=False, index=True)
    expert_count = Column(Integer, nullable=False, default=0)
    automated_count = Column(Integer, nullable=False, default=0)
    report_json = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
