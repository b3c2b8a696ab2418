"""Repository protocols."""

from inkpipe.domain.repositories.context_summary_cache import ContextSummaryCache
from inkpipe.domain.repositories.file_summary_cache import FileSummaryCache

__all__ = ["ContextSummaryCache", "FileSummaryCache"]
