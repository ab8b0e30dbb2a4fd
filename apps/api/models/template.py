"""Template model with provenance fields."""

from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
import uuid

from database import Base


class Template(Base):
    """A video template that can be expert-authored or generated."""

    __tablename__ = "templates"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=True)
    source_type = Column(String, nullable=True)  # expert, automated
    source_creator_id = Column(String, nullable=True, index=True)
    source_notes = Column(Text, nullable=True)
    source_tagged_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
