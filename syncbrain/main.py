"""SyncBrain application entry point.

Builds every provider and coordinator exactly once, stores them on
``app.state``, and serves the HTTP API with uvicorn.

Startup order:
    1. Settings are read from the environment / ``.env``.
    2. ``build_components`` constructs providers and coordinators.
    3. The lifespan hook creates the SQLite schema before the first request.
    4. Requests resolve coordinators from ``app.state``; nothing mutates them.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from syncbrain.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from syncbrain.api.routes import router as api_router
from syncbrain.config.settings import Settings
from syncbrain.interfaces.embedding_provider import IEmbeddingProvider
from syncbrain.interfaces.llm_provider import ILLMProvider
from syncbrain.providers.browser import PlaywrightBrowserProvider
from syncbrain.providers.embedding import NomicEmbeddingProvider, OpenAIEmbeddingProvider
from syncbrain.providers.llm import AnthropicLLMProvider, OllamaLLMProvider, OpenAILLMProvider
from syncbrain.providers.record_store import SQLiteRecordStore
from syncbrain.providers.share import SQLiteShareLinkProvider
from syncbrain.providers.vector_store import ChromaDBProvider
from syncbrain.providers.video import YouTubeMetadataProvider
from syncbrain.services.embedding_service import EmbeddingService
from syncbrain.services.extraction import SourceExtractor
from syncbrain.services.ingestion_service import IngestionService
from syncbrain.services.retrieval_service import RetrievalService
from syncbrain.services.share_service import ShareService
from syncbrain.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first configured LLM provider.

    Priority order: Anthropic -> OpenAI -> Ollama (always configured).
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    return OllamaLLMProvider(settings=app_settings)


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    """OpenAI/OpenAI-compatible when an API key is set, else Nomic via Ollama."""
    if app_settings.openai_api_key:
        return OpenAIEmbeddingProvider(settings=app_settings)
    return NomicEmbeddingProvider(settings=app_settings)


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_components(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and coordinator for the application.

    Returns a flat dict of named components to be stored on ``app.state``
    (or used directly by the CLI).  Call :func:`initialize_components`
    before serving.
    """
    llm = _build_llm_provider(app_settings)
    embedding_provider = _build_embedding_provider(app_settings)
    embedding_available = embedding_provider.is_available()
    if not embedding_available:
        _logger.warning(
            "embedding_provider_unreachable",
            provider=embedding_provider.get_provider_name(),
        )

    vector_store = ChromaDBProvider(
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
        expected_dimension=embedding_provider.get_dimension(),
    )
    record_store = SQLiteRecordStore(db_path=app_settings.sqlite_db_path)
    share_links = SQLiteShareLinkProvider(db_path=app_settings.sqlite_db_path)
    video_metadata = YouTubeMetadataProvider(settings=app_settings)
    browser = PlaywrightBrowserProvider(settings=app_settings)

    extractor = SourceExtractor(browser, video_metadata, settings=app_settings)
    embedding_service = EmbeddingService(embedding_provider, llm, settings=app_settings)

    ingestion_service = IngestionService(
        extractor=extractor,
        record_store=record_store,
        vector_store=vector_store,
        embedding_service=embedding_service,
        settings=app_settings,
    )
    retrieval_service = RetrievalService(
        embedding_service=embedding_service,
        vector_store=vector_store,
        record_store=record_store,
        llm_provider=llm,
        settings=app_settings,
    )
    share_service = ShareService(share_links=share_links, record_store=record_store)

    provider_registry = {
        "llm": llm.is_available(),
        "llm_name": llm.get_provider_name(),
        "embedding": embedding_available,
        "embedding_name": embedding_provider.get_provider_name(),
        "video_metadata": video_metadata.is_available(),
    }

    return {
        "llm": llm,
        "embedding_provider": embedding_provider,
        "vector_store": vector_store,
        "record_store": record_store,
        "share_links": share_links,
        "video_metadata": video_metadata,
        "browser": browser,
        "extractor": extractor,
        "embedding_service": embedding_service,
        "ingestion_service": ingestion_service,
        "retrieval_service": retrieval_service,
        "share_service": share_service,
        "provider_registry": provider_registry,
    }


async def initialize_components(components: dict[str, Any]) -> None:
    """Create the SQLite schema.  Must complete before the first request."""
    await components["record_store"].initialize()
    await components["share_links"].initialize()


async def close_components(components: dict[str, Any]) -> None:
    await components["video_metadata"].aclose()


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = build_components(settings)
    await initialize_components(components)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version="0.1.0",
        environment=settings.app_env,
        llm=components["provider_registry"]["llm_name"],
        embedding=components["provider_registry"]["embedding_name"],
    )

    yield

    await close_components(components)
    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="SyncBrain API",
        version="0.1.0",
        description=(
            "Save notes, web pages, videos, and social posts, then ask "
            "questions answered from your own saved content."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.cors_origins)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "syncbrain.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
