"""Raw engagement events recorded against newsletter links."""

import uuid

from sqlalchemy import Column, DateTime, Float, String
from sqlalchemy.sql import func

from database import Base


class NewsletterClick(Base):
    __tablename__ = "newsletter_clicks"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    link_id = Column(String, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)


class TemplateView(Base):
    __tablename__ = "template_views"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    link_id = Column(String, nullable=False, index=True)
    engagement_seconds = Column(Float, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)


class TemplateEdit(Base):
    """Editor activity; `action` is open_editor or save_template."""

    __tablename__ = "template_edits"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    link_id = Column(String, nullable=False, index=True)
    action = Column(String, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)


class TemplateShare(Base):
    __tablename__ = "template_shares"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    link_id = Column(String, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)
