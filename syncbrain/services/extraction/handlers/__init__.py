"""Per-source extraction handlers.

One handler per :class:`~syncbrain.models.content.SourceKind`:

- **NoteHandler**       -- freeform notes, passthrough
- **WebPageHandler**    -- generic URLs, rendered with a browser
- **VideoHandler**      -- hosted videos, via the metadata API
- **SocialPostHandler** -- short-form posts, rendered with a browser
"""

from syncbrain.services.extraction.handlers.base import SourceHandler
from syncbrain.services.extraction.handlers.note_handler import NoteHandler
from syncbrain.services.extraction.handlers.social_post_handler import SocialPostHandler
from syncbrain.services.extraction.handlers.video_handler import VideoHandler
from syncbrain.services.extraction.handlers.web_page_handler import WebPageHandler

__all__ = [
    "NoteHandler",
    "SocialPostHandler",
    "SourceHandler",
    "VideoHandler",
    "WebPageHandler",
]
