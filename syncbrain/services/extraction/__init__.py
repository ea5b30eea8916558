"""Source extraction for the SyncBrain ingestion pipeline.

:class:`SourceExtractor` turns a raw save action (note text or a URL) into
normalized ``{title, body, thumbnail}`` content, one handler per source kind.
"""

from syncbrain.services.extraction.source_extractor import SourceExtractor
from syncbrain.services.extraction.thumbnails import (
    find_page_thumbnail,
    is_valid_thumbnail,
    resolve_thumbnail,
)

__all__ = [
    "SourceExtractor",
    "find_page_thumbnail",
    "is_valid_thumbnail",
    "resolve_thumbnail",
]
