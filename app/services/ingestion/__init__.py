"""
Ingestion pipeline: coordinator, manual single-URL processing and the
headline store it writes to.
"""
from .coordinator import IngestionCoordinator, IngestionSummary, build_draft
from .manual import ManualArticleProcessor, ManualProcessError, extract_metadata
from .store import Draft, HeadlineStore, SqlHeadlineStore, StoreReadError, StoreWriteError

__all__ = [
    "IngestionCoordinator",
    "IngestionSummary",
    "build_draft",
    "ManualArticleProcessor",
    "ManualProcessError",
    "extract_metadata",
    "Draft",
    "HeadlineStore",
    "SqlHeadlineStore",
    "StoreReadError",
    "StoreWriteError",
]
