"""Models package."""

from .newsletter_link import NewsletterLink
from .template import Template
from .content_events import NewsletterClick, TemplateView, TemplateEdit, TemplateShare
from .expert import Expert
from .content_generator import ContentGenerator
from .content_metrics import ContentMetricsRecord
from .content_comparison import ContentComparisonRecord
from .content_source_index import ContentSourceIndex
