"""SyncBrain domain models -- re-exports all public model classes.

The models are organized by concern:
    - content.py -- source kinds, extraction output, durable content records
    - search.py  -- vector metadata, index matches, ranked search results
    - share.py   -- share links and the resolved shared view
"""

from __future__ import annotations

from syncbrain.models.content import (
    ContentDraft,
    ContentRecord,
    ExtractedContent,
    SourceInput,
    SourceKind,
)
from syncbrain.models.search import (
    ReconciliationReport,
    ScoredRecord,
    SearchResult,
    VectorMatch,
    VectorMetadata,
)
from syncbrain.models.share import SharedBrain, ShareLink

__all__ = [
    "ContentDraft",
    "ContentRecord",
    "ExtractedContent",
    "ReconciliationReport",
    "ScoredRecord",
    "SearchResult",
    "ShareLink",
    "SharedBrain",
    "SourceInput",
    "SourceKind",
    "VectorMatch",
    "VectorMetadata",
]
