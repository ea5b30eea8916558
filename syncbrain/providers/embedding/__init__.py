"""Embedding provider implementations.

Two implementations of IEmbeddingProvider (listed in selection order):
    1. OpenAIEmbeddingProvider -- text-embedding-3-small (1536 dims), or any
       model on an OpenAI-compatible endpoint.  Requires an API key.
    2. NomicEmbeddingProvider  -- nomic-embed-text via Ollama (768 dims).
       Free and local, but requires a running Ollama server.

The vector index must be rebuilt when switching between them: vectors of
different dimensionality cannot be compared.
"""

from syncbrain.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from syncbrain.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["NomicEmbeddingProvider", "OpenAIEmbeddingProvider"]
