"""Freeform notes: passthrough, nothing is fetched."""

from __future__ import annotations

from syncbrain.models.content import ExtractedContent, SourceInput
from syncbrain.services.extraction.handlers.base import SourceHandler

DEFAULT_NOTE_TITLE = "Untitled Note"


class NoteHandler(SourceHandler):
    async def extract(self, source: SourceInput) -> ExtractedContent:
        return ExtractedContent(
            title=(source.title or "").strip() or DEFAULT_NOTE_TITLE,
            body=source.body or "",
            thumbnail=None,
        )
