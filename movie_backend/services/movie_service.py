import logging
import math
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, List, Optional

from movie_backend.config import get_settings
from movie_backend.database.mongodb_client import MongoDBClient, mongodb_client
from movie_backend.models.movie_models import (
    Movie,
    MovieCreate,
    MovieSearchResult,
    MovieUpdate,
    MovieUpdateResult,
    PaginatedMovies,
)
from movie_backend.services.reembedding_worker import ReembeddingWorker
from movie_backend.services.vector_search_service import VectorSearchService, vector_search_service

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = ("title", "genres", "cast")


class MovieService:
    """
    Movie CRUD against MongoDB plus semantic movie search

    Malformed ids are treated as "not found" everywhere, never as input errors.
    """

    def __init__(self, mongo: Optional[MongoDBClient] = None,
                 vector_search: Optional[VectorSearchService] = None,
                 reembedding_worker: Optional[ReembeddingWorker] = None,
                 embedding=None):
        self.mongo = mongo or mongodb_client
        self.vector_search = vector_search or vector_search_service
        self.reembedding_worker = reembedding_worker or ReembeddingWorker(
            max_workers=get_settings().reembedding_workers
        )
        self._embedding = embedding

    @property
    def embedding(self):
        if self._embedding is None:
            from movie_backend.services.embedding_service import embedding_service
            self._embedding = embedding_service
        return self._embedding

    def create_movie(self, payload: MovieCreate) -> Movie:
        document = payload.model_dump()
        document["genres"] = payload.genres or []
        document["cast"] = payload.cast or []
        document["embedding_keys"] = {}
        return self.mongo.insert_movie(document)

    def update_movie_embedding_keys(self, movie_id: str, embedding_keys: Dict[str, str]) -> Optional[Movie]:
        if not self.mongo.is_valid_id(movie_id):
            return None
        return self.mongo.update_movie(movie_id, {"embedding_keys": embedding_keys})

    def get_movie_by_id(self, movie_id: str) -> Optional[Movie]:
        if not self.mongo.is_valid_id(movie_id):
            return None
        return self.mongo.find_movie(movie_id)

    def get_movies_by_ids(self, movie_ids: List[str]) -> List[Movie]:
        """
        Bulk lookup that keeps the order of movie_ids
        Invalid or unknown ids are left out of the result
        """
        valid_ids = [movie_id for movie_id in movie_ids if self.mongo.is_valid_id(movie_id)]
        if not valid_ids:
            return []

        movies = self.mongo.find_movies_by_ids(valid_ids)
        movie_map = {movie.id: movie for movie in movies}
        return [movie_map[movie_id] for movie_id in movie_ids if movie_id in movie_map]

    def search_movies_by_embedding(self, embedding: List[float], limit: int = 10) -> List[MovieSearchResult]:
        """
        Semantic movie search

        A movie owns one embedding per field, so twice the requested number of
        vector matches are fetched and collapsed to the best score per movie.
        """
        matches = self.vector_search.semantic_search(embedding, limit * 2)
        if not matches:
            return []

        movie_ids = [str(match.payload["movie_id"]) for match in matches if match.payload.get("movie_id")]
        if not movie_ids:
            return []

        movies = self.get_movies_by_ids(movie_ids)
        movie_map = {movie.id: movie for movie in movies}

        best_matches: Dict[str, MovieSearchResult] = {}
        for match in matches:
            movie_id = str(match.payload.get("movie_id"))
            movie = movie_map.get(movie_id)
            if movie is None:
                logger.warning(f"Movie not found for ID: {movie_id}")
                continue

            existing = best_matches.get(movie_id)
            if existing is None or match.score > existing.score:
                best_matches[movie_id] = MovieSearchResult(movie=movie, score=match.score)

        results = sorted(best_matches.values(), key=lambda result: result.score, reverse=True)
        return results[:limit]

    def search_movies_by_text(self, query: str, limit: int = 10) -> List[MovieSearchResult]:
        embedding = self.embedding.embed_text(query)
        return self.search_movies_by_embedding(embedding, limit)

    def get_all_movies(self, page: int = 1, limit: int = 20,
                       sort_by: str = "created_at", sort_order: str = "desc") -> PaginatedMovies:
        skip = (page - 1) * limit

        # List and count run side by side
        with ThreadPoolExecutor(max_workers=2) as executor:
            movies_future = executor.submit(self.mongo.find_movies, sort_by, sort_order, skip, limit)
            total_future = executor.submit(self.mongo.count_movies)
            movies = movies_future.result()
            total = total_future.result()

        return PaginatedMovies(
            movies=movies,
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
        )

    def update_movie(self, movie_id: str, payload: MovieUpdate) -> Optional[MovieUpdateResult]:
        if not self.mongo.is_valid_id(movie_id):
            return None

        fields = payload.model_dump(exclude_unset=True)
        # Stored movies always keep a title and list-valued genres/cast
        for field in NON_NULLABLE_FIELDS:
            if field in fields and fields[field] is None:
                logger.warning(f"Ignoring null {field} in update for movie {movie_id}")
                del fields[field]

        updated_movie = self.mongo.update_movie(movie_id, fields)
        if updated_movie is None:
            return None

        # Regenerate from the final movie state, explicitly updated fields win
        embedding_payload = {
            "title": updated_movie.title,
            "plot": updated_movie.plot,
            "genres": updated_movie.genres,
            "metadata": updated_movie.metadata,
            **fields,
        }
        embedding_job = self._schedule_reembedding(movie_id, embedding_payload)

        return MovieUpdateResult(movie=updated_movie, embedding_job=embedding_job)

    def _schedule_reembedding(self, movie_id: str, payload: Dict) -> Optional[Future]:
        try:
            return self.reembedding_worker.submit(movie_id, payload)
        except Exception as e:
            logger.error(f"Could not schedule embedding regeneration for movie {movie_id}: {str(e)}")
            return None

    def delete_movie(self, movie_id: str) -> bool:
        if not self.mongo.is_valid_id(movie_id):
            return False
        return self.mongo.delete_movie(movie_id)


# Global service instance
movie_service = MovieService()
