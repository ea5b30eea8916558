"""Public interface definitions for all external capability providers.

Every external service SyncBrain depends on is accessed exclusively through
the abstract base classes defined in this package.  Concrete adapters live in
``syncbrain/providers/``, are constructed once in ``syncbrain/main.py`` and
injected into the coordinators; tests inject fakes instead.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations (in syncbrain/providers/)
    ─────────────────────────────────────────────────────────────────────
    ILLMProvider               →  AnthropicLLMProvider, OpenAILLMProvider,
                                  OllamaLLMProvider
    IEmbeddingProvider         →  OpenAIEmbeddingProvider, NomicEmbeddingProvider
    IVectorStoreProvider       →  ChromaDBProvider
    IRecordStoreProvider       →  SQLiteRecordStore
    IShareLinkProvider         →  SQLiteShareLinkProvider
    IBrowserProvider           →  PlaywrightBrowserProvider
    IVideoMetadataProvider     →  YouTubeMetadataProvider
"""

from syncbrain.interfaces.browser_provider import IBrowserProvider, IBrowserSession
from syncbrain.interfaces.embedding_provider import IEmbeddingProvider
from syncbrain.interfaces.llm_provider import ILLMProvider
from syncbrain.interfaces.record_store_provider import IRecordStoreProvider
from syncbrain.interfaces.share_link_provider import IShareLinkProvider
from syncbrain.interfaces.vector_store_provider import IVectorStoreProvider
from syncbrain.interfaces.video_metadata_provider import (
    IVideoMetadataProvider,
    VideoMetadata,
)

__all__ = [
    "IBrowserProvider",
    "IBrowserSession",
    "IEmbeddingProvider",
    "ILLMProvider",
    "IRecordStoreProvider",
    "IShareLinkProvider",
    "IVectorStoreProvider",
    "IVideoMetadataProvider",
    "VideoMetadata",
]
