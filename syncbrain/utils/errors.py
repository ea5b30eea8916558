"""Custom exception hierarchy for SyncBrain.

All application exceptions inherit from :class:`SyncBrainError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai", "chromadb", "playwright") caused the failure.

The hierarchy is organized by failure kind:

    SyncBrainError  (base -- catch-all for any SyncBrain error)
    +-- ExtractionError          (network / timeout / parse during source fetch)
    |   +-- ExtractionTimeoutError  (page navigation exceeded its deadline)
    +-- EmbeddingError           (no usable vector could be produced)
    +-- ValidationError          (malformed caller input, no side effects)
    +-- StoreError               (record store or vector index failure)
    +-- NotFoundError            (unknown share hash / record not owned)
    +-- LLMError                 (generative model call failed)
    +-- ConfigurationError       (startup / missing config)

The HTTP layer maps the kind to a status code; the message and provider
name stay in server-side logs and are never echoed to end users.
"""


class SyncBrainError(Exception):
    """Base exception for all SyncBrain errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[openai] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Source extraction
# ---------------------------------------------------------------------------

class ExtractionError(SyncBrainError):
    """Raised when fetching or parsing a content source fails."""

    def __init__(
        self,
        message: str = "Source extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ExtractionTimeoutError(ExtractionError):
    """Raised when a page navigation exceeds its timeout."""

    def __init__(
        self,
        message: str = "Page navigation timed out",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Embedding / generative model
# ---------------------------------------------------------------------------

class EmbeddingError(SyncBrainError):
    """Raised when no usable embedding vector can be produced."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(SyncBrainError):
    """Raised when an LLM API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Caller input
# ---------------------------------------------------------------------------

class ValidationError(SyncBrainError):
    """Raised when caller input is malformed.  No side effects are attempted."""

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(SyncBrainError):
    """Raised when a share hash or owned record does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

class StoreError(SyncBrainError):
    """Raised when the record store or the vector index fails."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(SyncBrainError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
