"""FastAPI routes for SyncBrain.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                        Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/content                 POST    Save a note or link
# /api/v1/content                 GET     List the caller's saved content
# /api/v1/content/{content_id}    DELETE  Delete from both stores
# /api/v1/search                  POST    Semantic search + grounded answer
# /api/v1/share                   POST    Turn the public share link on/off
# /api/v1/share/{share_hash}      GET     Resolve a share link (no owner needed)
# /api/v1/health                  GET     Health check + provider status
#
# The caller's identity arrives in the ``X-Owner-Id`` header, set by the
# authentication layer in front of this service.  Services are resolved
# from ``app.state`` (populated by main.py) through Annotated Depends.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Header, Request

from syncbrain.api.schemas import (
    AddContentRequest,
    ContentListResponse,
    ContentResponse,
    HealthResponse,
    MessageResponse,
    SearchHitResponse,
    SearchRequest,
    SearchResponse,
    SharedBrainResponse,
    ShareRequest,
    ShareResponse,
)
from syncbrain.models.content import SourceInput
from syncbrain.services.ingestion_service import IngestionService
from syncbrain.services.retrieval_service import RetrievalService
from syncbrain.services.share_service import ShareService
from syncbrain.utils.errors import ValidationError
from syncbrain.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_ingestion(request: Request) -> IngestionService:
    return request.app.state.ingestion_service


def _get_retrieval(request: Request) -> RetrievalService:
    return request.app.state.retrieval_service


def _get_share(request: Request) -> ShareService:
    return request.app.state.share_service


def _get_owner(x_owner_id: Annotated[str, Header()] = "") -> str:
    """The authenticated user id, forwarded by the auth layer."""
    owner = x_owner_id.strip()
    if not owner:
        raise ValidationError(message="Missing X-Owner-Id header")
    return owner


IngestionDep = Annotated[IngestionService, Depends(_get_ingestion)]
RetrievalDep = Annotated[RetrievalService, Depends(_get_retrieval)]
ShareDep = Annotated[ShareService, Depends(_get_share)]
OwnerDep = Annotated[str, Depends(_get_owner)]


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


@router.post(
    "/content",
    response_model=ContentResponse,
    status_code=201,
    summary="Save a note or link",
)
async def add_content(
    body: AddContentRequest,
    owner: OwnerDep,
    ingestion: IngestionDep,
) -> ContentResponse:
    record = await ingestion.ingest(
        owner,
        body.type,
        SourceInput(url=body.link, title=body.title, body=body.content),
    )
    return ContentResponse.from_record(record)


@router.get("/content", response_model=ContentListResponse, summary="List saved content")
async def list_content(owner: OwnerDep, ingestion: IngestionDep) -> ContentListResponse:
    records = await ingestion.list_content(owner)
    return ContentListResponse(content=[ContentResponse.from_record(r) for r in records])


@router.delete(
    "/content/{content_id}",
    response_model=MessageResponse,
    summary="Delete saved content",
)
async def delete_content(
    content_id: str,
    owner: OwnerDep,
    ingestion: IngestionDep,
) -> MessageResponse:
    await ingestion.delete_content(owner, content_id)
    return MessageResponse(message="Content deleted")


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.post("/search", response_model=SearchResponse, summary="Search saved content")
async def search(
    body: SearchRequest,
    owner: OwnerDep,
    retrieval: RetrievalDep,
) -> SearchResponse:
    result = await retrieval.search(owner, body.query)
    return SearchResponse(
        message=result.message,
        answer=result.answer,
        results=[SearchHitResponse.from_scored(item) for item in result.results],
    )


# ---------------------------------------------------------------------------
# Sharing
# ---------------------------------------------------------------------------


@router.post("/share", response_model=ShareResponse, summary="Toggle the share link")
async def toggle_share(body: ShareRequest, owner: OwnerDep, share: ShareDep) -> ShareResponse:
    return ShareResponse(hash=await share.toggle_share(owner, body.share))


@router.get(
    "/share/{share_hash}",
    response_model=SharedBrainResponse,
    summary="View shared content",
)
async def resolve_share(share_hash: str, share: ShareDep) -> SharedBrainResponse:
    shared = await share.resolve_share(share_hash)
    return SharedBrainResponse(
        owner=shared.owner,
        content=[ContentResponse.from_record(r) for r in shared.records],
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check(request: Request) -> HealthResponse:
    """Return application health and provider availability."""
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))
    vector_store = getattr(request.app.state, "vector_store", None)
    if vector_store is not None:
        providers["vector_store"] = vector_store.is_available()

    required = ("llm", "embedding", "vector_store")
    status = "healthy" if all(providers.get(name, False) for name in required) else "degraded"
    return HealthResponse(status=status, version=_VERSION, providers=providers)
