"""Persistence infrastructure."""

from inkpipe.infrastructure.persistence.context_summary_cache import (
    InMemoryContextSummaryCache,
)
from inkpipe.infrastructure.persistence.database import DatabaseManager
from inkpipe.infrastructure.persistence.exceptions import (
    DatabaseError,
    PersistenceError,
)
from inkpipe.infrastructure.persistence.file_summary_cache import (
    SQLiteFileSummaryCache,
)
from inkpipe.infrastructure.persistence.models import FileSummaryModel

__all__ = [
    "DatabaseError",
    "DatabaseManager",
    "FileSummaryModel",
    "InMemoryContextSummaryCache",
    "PersistenceError",
    "SQLiteFileSummaryCache",
]
