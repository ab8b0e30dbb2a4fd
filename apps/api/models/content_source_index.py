"""ContentSourceIndex model: append-only provenance tagging history."""

import uuid

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from database import Base


class ContentSourceIndex(Base):
    """One row per tagging action for expert or automated templates."""

    __tablename__ = "content_source_index"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id = Column(String, nullable=False, index=True)
    source_type = Column(String, nullable=False, index=True)
    creator_id = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    tagged_at = Column(DateTime(timezone=True), server_default=func.now())
