"""ChromaDB vector store provider adapter.

Wraps `chromadb.PersistentClient` to implement :class:`IVectorStoreProvider`.
Uses cosine distance for similarity search.  Fully local, free, and
Python-native -- no external service required.
"""

from __future__ import annotations

import asyncio
import os
from typing import Any

# Disable ChromaDB telemetry completely before importing chromadb.
# ChromaDB uses PostHog for anonymous telemetry, but a version mismatch
# between ChromaDB's bundled PostHog client and the installed version
# causes "capture() takes 1 positional argument but 3 were given" errors.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import posthog

posthog.disabled = True

import chromadb
import structlog

from syncbrain.interfaces.vector_store_provider import IVectorStoreProvider
from syncbrain.models.search import VectorMatch, VectorMetadata
from syncbrain.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_PAGE_SIZE = 5000


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """No-op embedding function that prevents ChromaDB from loading a model.

    SyncBrain always passes pre-computed embeddings, so ChromaDB's built-in
    embedding is never invoked.  Without this, ChromaDB downloads its default
    ONNX model on collection creation.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError(
            "SyncBrain uses pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        """Return function name (required by ChromaDB's EmbeddingFunction protocol)."""
        return "noop_precomputed"


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by ChromaDB with local persistence.

    One vector per content record, keyed by the record id.  The record's
    owner, title, kind, creation time, and a short snippet ride along as
    metadata so queries can be filtered by owner inside the index.
    """

    def __init__(
        self,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "syncbrain_content",
        expected_dimension: int | None = None,
    ) -> None:
        self._persist_directory = persist_directory
        self._collection_name = collection_name
        self._client = chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        # Collections created by older ChromaDB versions persist the default
        # embedding function and reject a different one with ValueError.
        try:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )

        if expected_dimension is not None:
            self._validate_embedding_dimensions(expected_dimension)

    # ------------------------------------------------------------------
    # Startup validation
    # ------------------------------------------------------------------

    def _validate_embedding_dimensions(self, expected_dim: int) -> None:
        """Verify the configured embedding dimension matches stored vectors.

        Peeks at a single stored vector and compares its length.  A mismatch
        means every query would compare incomparable vectors, so fail fast.
        """
        try:
            collection_count = self._collection.count()
            if collection_count == 0:
                return

            sample = self._collection.peek(limit=1)
            embeddings = sample.get("embeddings") if sample else None
            if embeddings is None or len(embeddings) == 0:
                return

            stored_dim = len(embeddings[0])
            if stored_dim != expected_dim:
                logger.error(
                    "embedding_dimension_mismatch",
                    stored_dim=stored_dim,
                    expected_dim=expected_dim,
                )
                raise StoreError(
                    message=(
                        f"Embedding dimension mismatch: index has {stored_dim}-dim vectors "
                        f"but the embedding provider produces {expected_dim}-dim vectors. "
                        "Run `python -m syncbrain.cli reconcile` after clearing the index, "
                        "or switch back to the original embedding model."
                    ),
                    provider_name="chromadb",
                )

            logger.info(
                "embedding_dimension_validated",
                dimension=stored_dim,
                stored_vectors=collection_count,
            )
        except StoreError:
            raise
        except Exception as exc:
            logger.warning("embedding_dimension_check_skipped", error=str(exc))

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def upsert(
        self,
        record_id: str,
        vector: list[float],
        metadata: VectorMetadata,
    ) -> None:
        try:
            await asyncio.to_thread(
                self._collection.upsert,
                ids=[record_id],
                embeddings=[list(vector)],
                metadatas=[metadata.to_index_metadata()],
                documents=[metadata.snippet],
            )
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.debug("chromadb_upsert", record_id=record_id, owner=metadata.owner)

    async def query(
        self,
        vector: list[float],
        top_k: int = 5,
        filters: dict[str, Any] | None = None,
    ) -> list[VectorMatch]:
        """Cosine nearest-neighbour search.

        ChromaDB reports cosine *distance*; it is converted to a similarity
        score as ``1 - distance`` and clamped to ``[0, 1]``.
        """
        try:
            where_clause = self._translate_filters(filters) if filters else None
            results = await asyncio.to_thread(self._query_sync, vector, top_k, where_clause)
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        if results is None:
            return []

        ids = (results.get("ids") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]
        metadatas = (results.get("metadatas") or [[]])[0]

        matches: list[VectorMatch] = []
        for idx, record_id in enumerate(ids):
            distance = distances[idx] if idx < len(distances) else 1.0
            score = max(0.0, min(1.0, 1.0 - float(distance)))
            meta = metadatas[idx] if idx < len(metadatas) and metadatas[idx] else {}
            matches.append(VectorMatch(id=record_id, score=score, metadata=dict(meta)))

        matches.sort(key=lambda m: m.score, reverse=True)
        logger.debug("chromadb_query", top_k=top_k, returned=len(matches))
        return matches

    async def delete(self, record_id: str) -> None:
        try:
            await asyncio.to_thread(self._collection.delete, ids=[record_id])
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB delete failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.debug("chromadb_delete", record_id=record_id)

    async def list_ids(self, owner: str) -> set[str]:
        """Return every vector id stored for *owner*."""
        try:
            return await asyncio.to_thread(self._list_ids_sync, owner)
        except Exception as exc:
            raise StoreError(
                message=f"ChromaDB list_ids failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        """Return ``True`` if the ChromaDB collection is accessible."""
        try:
            self._collection.count()
            return True
        except Exception:
            return False

    # -- Sync helpers (executed via asyncio.to_thread) -------------------------

    def _query_sync(
        self,
        vector: list[float],
        top_k: int,
        where_clause: dict[str, Any] | None,
    ) -> dict[str, Any] | None:
        # n_results larger than the collection raises in some versions.
        count = self._collection.count()
        if count == 0:
            return None
        kwargs: dict[str, Any] = {
            "query_embeddings": [list(vector)],
            "n_results": min(top_k, count),
            "include": ["metadatas", "distances"],
        }
        if where_clause:
            kwargs["where"] = where_clause
        return self._collection.query(**kwargs)

    def _list_ids_sync(self, owner: str) -> set[str]:
        # 5K-row pages stay under SQLite's bind-parameter limit.
        ids: set[str] = set()
        offset = 0
        while True:
            page = self._collection.get(
                where={"owner": owner},
                include=["metadatas"],
                limit=_PAGE_SIZE,
                offset=offset,
            )
            page_ids = page.get("ids") or []
            ids.update(page_ids)
            if len(page_ids) < _PAGE_SIZE:
                return ids
            offset += _PAGE_SIZE

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _translate_filters(filters: dict[str, Any]) -> dict[str, Any] | None:
        """Translate the common filter syntax to ChromaDB ``where`` clauses.

        Scalar values become equality clauses; ``{"$in": [...]}`` is passed
        through.  Multiple keys are combined with ``$and``.
        """
        clauses: list[dict[str, Any]] = []
        for key, value in filters.items():
            if isinstance(value, dict):
                in_val = value.get("$in")
                if in_val and isinstance(in_val, list):
                    clauses.append({key: {"$in": [str(v) for v in in_val]}})
            elif value is not None:
                clauses.append({key: str(value)})

        if not clauses:
            return None
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}
