from typing import TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from movie_backend.models.pipeline_models import EmbeddingPipelineState
    from movie_backend.services.embedding_service import EmbeddingService

logger = logging.getLogger(__name__)


def generate_embeddings_node(state: 'EmbeddingPipelineState',
                             embedding_service: 'EmbeddingService') -> 'EmbeddingPipelineState':
    """
    Embed every built text with the configured sentence-transformers model
    """
    if state.get("error"):
        return state

    try:
        embeddings = embedding_service.embed_texts(state.get("embedding_texts") or {})

        # All vectors of one movie must share a dimension
        dimensions = {len(vector) for vector in embeddings.values()}
        if len(dimensions) > 1:
            raise ValueError(f"Embeddings have mixed dimensions: {sorted(dimensions)}")

        state["embeddings"] = embeddings
        state["pipeline_step"] = "embeddings_generated"

        logger.info(f"Generated {len(embeddings)} embeddings for movie {state.get('movie_id')}")
        return state

    except Exception as e:
        logger.error(f"Error in generate_embeddings_node: {str(e)}")
        state["error"] = str(e)
        state["pipeline_step"] = "error"
        return state
