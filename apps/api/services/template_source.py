"""Template provenance tagging (expert vs automated)."""

from __future__ import annotations

import logging
from typing import Optional

from analytics.models import SourceType
from services.collaborators.types import TemplateNotFoundError, TemplateSourceStore

logger = logging.getLogger(__name__)


class TemplateSourceService:
    def __init__(self, *, sources: TemplateSourceStore) -> None:
        self.sources = sources

    async def tag_source(
        self,
        template_id: str,
        is_expert: bool,
        creator_id: str,
        notes: Optional[str] = None,
    ) -> bool:
        """Tag a template as expert-created or generated. Returns success."""
        source = SourceType.EXPERT if is_expert else SourceType.AUTOMATED
        try:
            await self.sources.tag(template_id, source, creator_id, notes)
        except TemplateNotFoundError:
            logger.warning("tag_source template=%s: template not found", template_id)
            return False
        except Exception:
            logger.exception("tag_source template=%s: failed to tag template source", template_id)
            return False

        logger.info("tag_source template=%s source=%s creator=%s", template_id, source.value, creator_id)
        return True
