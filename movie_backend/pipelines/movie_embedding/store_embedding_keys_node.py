from typing import TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from movie_backend.database.mongodb_client import MongoDBClient
    from movie_backend.models.pipeline_models import EmbeddingPipelineState

logger = logging.getLogger(__name__)


def store_embedding_keys_node(state: 'EmbeddingPipelineState',
                              mongo: 'MongoDBClient') -> 'EmbeddingPipelineState':
    """
    Record which vector ids belong to which named embedding on the movie document
    """
    if state.get("error"):
        return state

    try:
        movie_id = state["movie_id"]
        embedding_keys = state.get("embedding_keys") or {}

        if not mongo.is_valid_id(movie_id):
            # Vectors written for ids that are not stored movies (smoke tests, imports)
            logger.warning(f"Skipping embedding key storage for non-document id {movie_id}")
            state["pipeline_step"] = "completed"
            return state

        updated = mongo.update_movie(movie_id, {"embedding_keys": embedding_keys})
        if updated is None:
            logger.warning(f"Movie {movie_id} disappeared before embedding keys could be stored")
        else:
            logger.info(f"Stored {len(embedding_keys)} embedding keys for movie {movie_id}")

        state["pipeline_step"] = "completed"
        return state

    except Exception as e:
        logger.error(f"Error in store_embedding_keys_node: {str(e)}")
        state["error"] = f"Embedding key storage failed: {str(e)}"
        state["pipeline_step"] = "error"
        return state
