"""Routers package."""

from . import (
    health,
    content_analytics,
)
