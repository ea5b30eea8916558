"""Text helpers shared by the extraction, embedding, and retrieval layers.

Three small concerns live here:

1. **Whitespace cleanup** -- scraped DOM text carries layout whitespace
   (indentation, non-breaking spaces, runs of newlines) that would waste
   embedding budget without adding meaning.
2. **Length bounding** -- a hard cut used as the embedding fallback and
   an ellipsis-marked cut used for grounding excerpts.
3. **Timestamps** -- the human-readable creation stamp composed into the
   embedding input text.
"""

import re
from datetime import datetime

ELLIPSIS_MARKER = "..."

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (including NBSP and newlines) to one space."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def hard_truncate(text: str, limit: int) -> str:
    """Cut *text* to at most *limit* characters.

    Deterministic: the same input and limit always produce the same
    output, which keeps repeated embeddings of a document stable.
    """
    if limit <= 0:
        return ""
    return text[:limit]


def truncate_with_ellipsis(text: str, limit: int) -> str:
    """Bound *text* to *limit* characters, marking the cut with ``...``.

    Text already within the limit is returned unchanged.  The marker is
    counted inside the limit, so the result never exceeds *limit*.
    """
    if len(text) <= limit:
        return text
    if limit <= len(ELLIPSIS_MARKER):
        return text[:limit]
    return text[: limit - len(ELLIPSIS_MARKER)].rstrip() + ELLIPSIS_MARKER


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as e.g. ``"March 05, 2025 at 14:30 UTC"``."""
    zone = moment.tzname() or "UTC"
    return f"{moment.strftime('%B %d, %Y at %H:%M')} {zone}"
