import logging
from typing import Any, Optional, Union

from pinecone import Pinecone
from qdrant_client import QdrantClient

from movie_backend.config import Settings, get_settings
from movie_backend.database.chroma_client import ChromaClient, ChromaVectorStore
from movie_backend.database.pinecone_client import PineconeVectorStore
from movie_backend.database.qdrant_client import QdrantVectorStore
from movie_backend.database.vector_store_base import (
    UnsupportedProviderError,
    VectorProvider,
    VectorStore,
    VectorStoreConfigurationError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "UnsupportedProviderError",
    "VectorProvider",
    "VectorStore",
    "VectorStoreConfigurationError",
    "create_vector_store",
    "get_vector_store",
    "initialize_vector_db",
    "provider_for_client",
    "resolve_provider",
    "set_vector_store",
    "vector_store_from_client",
]


def resolve_provider(value: Union[str, VectorProvider, None]) -> VectorProvider:
    """Map a configured provider name to its backend tag"""
    if isinstance(value, VectorProvider):
        return value
    try:
        return VectorProvider(str(value).strip().lower())
    except ValueError:
        raise UnsupportedProviderError(value)


def provider_for_client(client: Any) -> Optional[VectorProvider]:
    """
    Classify an already constructed client by its client library class
    Returns None when the client belongs to none of the supported backends
    """
    if isinstance(client, QdrantClient):
        return VectorProvider.QDRANT
    if isinstance(client, Pinecone):
        return VectorProvider.PINECONE
    if isinstance(client, ChromaClient):
        return VectorProvider.CHROMA
    return None


def vector_store_from_client(client: Any, collection_name: Optional[str] = None) -> VectorStore:
    """Wrap a ready-made client handle in the matching adapter"""
    provider = provider_for_client(client)
    if provider is None:
        raise UnsupportedProviderError(type(client).__name__)

    settings = get_settings()
    if provider is VectorProvider.QDRANT:
        return QdrantVectorStore(client, collection_name or settings.vector_collection)
    if provider is VectorProvider.PINECONE:
        return PineconeVectorStore(client, collection_name or settings.pinecone_index_name)
    return ChromaVectorStore(client)


def create_vector_store(settings: Optional[Settings] = None) -> VectorStore:
    """Build the adapter for the provider selected in configuration"""
    settings = settings or get_settings()
    provider = resolve_provider(settings.vector_db_provider)

    if provider is VectorProvider.QDRANT:
        return QdrantVectorStore.from_settings(settings)
    if provider is VectorProvider.PINECONE:
        return PineconeVectorStore.from_settings(settings)
    if provider is VectorProvider.CHROMA:
        return ChromaVectorStore.from_settings(settings)
    raise UnsupportedProviderError(provider)


# Process-wide vector store, built on first use
_vector_store: Optional[VectorStore] = None


def get_vector_store() -> VectorStore:
    global _vector_store
    if _vector_store is None:
        _vector_store = create_vector_store()
        logger.info(f"Vector store initialized for provider {_vector_store.provider.label}")
    return _vector_store


def set_vector_store(store: Optional[VectorStore]) -> None:
    """Replace the process-wide vector store (None resets to configuration)"""
    global _vector_store
    _vector_store = store


def initialize_vector_db(settings: Optional[Settings] = None) -> VectorStore:
    """
    Make sure the configured collection/index exists

    Explicit settings build a fresh store that replaces the process-wide one
    """
    if settings is None:
        settings = get_settings()
        store = get_vector_store()
    else:
        store = create_vector_store(settings)

    if settings.vector_dimension < 1:
        raise VectorStoreConfigurationError("VECTOR_DIMENSION must be a positive integer")
    store.ensure_collection(settings.vector_dimension)
    set_vector_store(store)
    logger.info(f"Vector database ready: {store.provider.label} / {store.collection_name}")
    return store
