"""
Ingestion service that turns movies into searchable embeddings
"""
import logging
from typing import Any, Dict, Optional

from movie_backend.models.movie_models import Movie, MovieCreate
from movie_backend.pipelines.movie_embedding_orchestrator import MovieEmbeddingOrchestrator
from movie_backend.services.movie_service import MovieService, movie_service

logger = logging.getLogger(__name__)


class EmbeddingPipelineError(RuntimeError):
    """Raised when the embedding pipeline reports a failure for a movie"""


class MovieIngestionError(RuntimeError):
    """Raised when a movie was stored but its embeddings could not be generated"""

    def __init__(self, movie_id: str, reason: str):
        super().__init__(f"Movie {movie_id} was stored but embedding generation failed: {reason}")
        self.movie_id = movie_id
        self.reason = reason


class IngestionService:

    def __init__(self, orchestrator: Optional[MovieEmbeddingOrchestrator] = None,
                 movies: Optional[MovieService] = None):
        self._orchestrator = orchestrator
        self.movies = movies or movie_service

    @property
    def orchestrator(self) -> MovieEmbeddingOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = MovieEmbeddingOrchestrator()
        return self._orchestrator

    def regenerate_movie_embeddings(self, movie_id: str, payload: Dict[str, Any]) -> Dict[str, str]:
        """
        Rebuild and store all embeddings of a movie

        Args:
            movie_id: Movie whose embeddings are regenerated
            payload: Movie fields used as embedding sources (title, plot, genres)

        Returns:
            Embedding name -> vector id used by the vector database
        """
        result = self.orchestrator.run(movie_id, payload)
        if result.get("error"):
            raise EmbeddingPipelineError(
                f"Embedding regeneration failed for movie {movie_id}: {result['error']}"
            )
        return result["embedding_keys"]

    def ingest_movie(self, payload: MovieCreate) -> Movie:
        """
        Create a movie and index its embeddings before returning it

        The movie stays stored when indexing fails, MovieIngestionError carries its id
        """
        movie = self.movies.create_movie(payload)
        logger.info(f"Ingesting movie {movie.id} ({movie.title})")

        try:
            self.regenerate_movie_embeddings(movie.id, payload.model_dump())
        except Exception as e:
            logger.error(f"Movie {movie.id} stored without embeddings: {str(e)}")
            raise MovieIngestionError(movie.id, str(e)) from e

        return self.movies.get_movie_by_id(movie.id) or movie


# Global service instance
ingestion_service = IngestionService()
