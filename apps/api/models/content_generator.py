"""ContentGenerator model for automated template generators."""

import uuid

from sqlalchemy import Column, DateTime, JSON, String, Text
from sqlalchemy.sql import func

from database import Base


class ContentGenerator(Base):
    """An AI generator configuration that produces templates."""

    __tablename__ = "content_generators"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    version = Column(String, nullable=True)
    prompt_template = Column(Text, nullable=True)
    model_params_json = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
