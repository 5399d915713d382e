import logging
from typing import Dict, List, Optional

from movie_backend.database.qdrant_client import string_to_numeric_id
from movie_backend.database.vector_client import (
    UnsupportedProviderError,
    VectorProvider,
    VectorStore,
    VectorStoreConfigurationError,
    get_vector_store,
)
from movie_backend.models.vector_models import CollectionStats, EmbeddingRecord, VectorMatch

logger = logging.getLogger(__name__)

__all__ = ["VectorSearchService", "vector_search_service", "string_to_numeric_id"]


class VectorSearchService:
    """
    Backend-neutral upsert/search over the configured vector database

    Error policy differs by operation: upserts and stats propagate backend
    failures, searches log them and return no results.
    """

    def __init__(self, store: Optional[VectorStore] = None):
        self._store = store

    def _active_store(self) -> VectorStore:
        store = self._store if self._store is not None else get_vector_store()
        if not isinstance(getattr(store, "provider", None), VectorProvider):
            raise UnsupportedProviderError(type(store).__name__)
        return store

    def upsert_movie_embeddings(self, movie_id: str, embeddings: EmbeddingRecord) -> Dict[str, str]:
        """
        Write one point per named embedding for a movie

        Args:
            movie_id: Owning movie id, stored in every point's payload
            embeddings: Named vectors, e.g. {"title": [...], "plot": [...]}

        Returns:
            Mapping of embedding name to the vector id used by the backend
        """
        if not embeddings:
            raise VectorStoreConfigurationError("No embeddings provided for upsert")

        store = self._active_store()
        return store.upsert(movie_id, embeddings)

    def semantic_search(self, embedding: List[float], limit: int = 10) -> List[VectorMatch]:
        """
        Nearest-neighbour search, best match first
        A failing backend yields an empty list, same as a search with no hits
        """
        store = self._active_store()
        if limit < 1:
            return []

        try:
            matches = store.search(embedding, limit)
        except Exception as e:
            logger.error(f"{store.provider.label} search error: {str(e)}")
            logger.warning("Returning empty results due to search error")
            return []

        logger.info(f"{store.provider.label} search returned {len(matches)} matches")
        return matches

    def check_collection_stats(self) -> CollectionStats:
        return self._active_store().collection_stats()


# Global service instance
vector_search_service = VectorSearchService()
