"""Utility modules for SyncBrain.

- **errors** -- Exception hierarchy rooted at SyncBrainError; each failure
  kind (extraction, embedding, validation, storage) has its own subclass so
  callers can map it to a status code without inspecting messages.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text** -- Whitespace cleanup, truncation and timestamp formatting shared
  by the extraction, embedding and retrieval layers.
"""

from syncbrain.utils.errors import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    ExtractionTimeoutError,
    LLMError,
    NotFoundError,
    StoreError,
    SyncBrainError,
    ValidationError,
)
from syncbrain.utils.logging import configure_logging, get_logger
from syncbrain.utils.text import (
    collapse_whitespace,
    format_timestamp,
    hard_truncate,
    truncate_with_ellipsis,
)

__all__ = [
    "ConfigurationError",
    "EmbeddingError",
    "ExtractionError",
    "ExtractionTimeoutError",
    "LLMError",
    "NotFoundError",
    "StoreError",
    "SyncBrainError",
    "ValidationError",
    "collapse_whitespace",
    "configure_logging",
    "format_timestamp",
    "get_logger",
    "hard_truncate",
    "truncate_with_ellipsis",
]
