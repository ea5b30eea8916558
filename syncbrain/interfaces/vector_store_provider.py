"""Abstract base class for vector-index service providers.

Defines the narrow contract the coordinators need from a similarity-search
service: upsert a vector under a record id, query nearest neighbours with
a metadata filter, and delete by id.  Implementations may wrap ChromaDB
(local/free), Pinecone, Qdrant, or any other vector database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from syncbrain.models.search import VectorMatch, VectorMetadata


# Concrete implementation: ChromaDBProvider (syncbrain/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for the vector index holding one embedding per content record.

    Vectors are keyed by :attr:`ContentRecord.id`.  An upsert replaces the
    stored vector and metadata wholesale; there is no partial update.

    **Supported filter syntax** (the *filters* dict of :meth:`query`):

    * ``{"owner": "user-1"}`` -- equality on a metadata field.
    * ``{"source_kind": {"$in": ["note", "url-video"]}}`` -- membership.

    Multiple keys are combined with AND.
    """

    @abstractmethod
    async def upsert(
        self,
        record_id: str,
        vector: list[float],
        metadata: VectorMetadata,
    ) -> None:
        """Insert or replace the vector stored under *record_id*.

        Raises
        ------
        syncbrain.utils.errors.StoreError
            If the index rejects the write.
        """

    @abstractmethod
    async def query(
        self,
        vector: list[float],
        top_k: int = 5,
        filters: dict[str, Any] | None = None,
    ) -> list[VectorMatch]:
        """Return up to *top_k* nearest neighbours of *vector*.

        Results are ordered by similarity score, descending.  Higher
        scores mean closer matches.

        Raises
        ------
        syncbrain.utils.errors.StoreError
            If the query fails.
        """

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Delete the vector stored under *record_id*.

        Deleting an id that has no vector is not an error.
        """

    @abstractmethod
    async def list_ids(self, owner: str) -> set[str]:
        """Return the ids of every vector whose metadata names *owner*."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"chromadb"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the index is reachable."""
