"""NewsletterLink model for template distribution links."""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
import uuid

from database import Base


class NewsletterLink(Base):
    """A tracked link that distributes a single template."""

    __tablename__ = "newsletter_links"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    template_id = Column(String, ForeignKey("templates.id"), nullable=False, index=True)
    utm_campaign = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
