"""Expert model for human template authors."""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
import uuid

from database import Base


class Expert(Base):
    __tablename__ = "experts"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
