from typing import TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from movie_backend.models.pipeline_models import EmbeddingPipelineState
    from movie_backend.services.vector_search_service import VectorSearchService

logger = logging.getLogger(__name__)


def upsert_embeddings_node(state: 'EmbeddingPipelineState',
                           vector_search: 'VectorSearchService') -> 'EmbeddingPipelineState':
    """
    Write the movie's embeddings to the vector database
    Re-running for the same movie overwrites the same points
    """
    if state.get("error"):
        return state

    try:
        embedding_keys = vector_search.upsert_movie_embeddings(
            state["movie_id"],
            state.get("embeddings") or {},
        )

        state["embedding_keys"] = embedding_keys
        state["pipeline_step"] = "embeddings_upserted"
        return state

    except Exception as e:
        logger.error(f"Error in upsert_embeddings_node for movie {state.get('movie_id')}: {str(e)}")
        state["error"] = f"Vector upsert failed: {str(e)}"
        state["pipeline_step"] = "error"
        return state
