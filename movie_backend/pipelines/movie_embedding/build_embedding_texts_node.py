from typing import Dict, Any, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from movie_backend.models.pipeline_models import EmbeddingPipelineState

logger = logging.getLogger(__name__)


def build_embedding_texts(payload: Dict[str, Any]) -> Dict[str, str]:
    """
    Source text for each named embedding of a movie
    title -> title, plot -> plot, genre -> comma-joined genres
    """
    texts = {}

    title = (payload.get("title") or "").strip()
    if title:
        texts["title"] = title

    plot = (payload.get("plot") or "").strip()
    if plot:
        texts["plot"] = plot

    genres = [str(genre).strip() for genre in (payload.get("genres") or []) if str(genre).strip()]
    if genres:
        texts["genre"] = ", ".join(genres)

    return texts


def build_embedding_texts_node(state: 'EmbeddingPipelineState') -> 'EmbeddingPipelineState':
    """
    Pick the movie fields that get their own embedding
    """
    try:
        movie_id = state.get("movie_id")
        texts = build_embedding_texts(state.get("movie_payload") or {})

        if not texts:
            logger.warning(f"No embeddable fields for movie {movie_id}")
            state["error"] = f"No embeddable fields for movie {movie_id}"
            state["pipeline_step"] = "error"
            return state

        state["embedding_texts"] = texts
        state["pipeline_step"] = "texts_built"

        logger.info(f"Built embedding texts for movie {movie_id}: {list(texts.keys())}")
        return state

    except Exception as e:
        logger.error(f"Error in build_embedding_texts_node: {str(e)}")
        state["error"] = str(e)
        state["pipeline_step"] = "error"
        return state
