from fastapi import APIRouter, HTTPException, Query
from typing import List
import logging

from movie_backend.models.movie_models import (
    Movie,
    MovieCreate,
    MovieIdsRequest,
    MovieSearchRequest,
    MovieSearchResult,
    MovieUpdate,
    PaginatedMovies,
)
from movie_backend.services.movie_service import movie_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=Movie, status_code=201)
def create_movie(payload: MovieCreate):
    return movie_service.create_movie(payload)


@router.post("/ingest", response_model=Movie, status_code=201)
def ingest_movie(payload: MovieCreate):
    """
    Create a movie and generate its embeddings before responding
    A 500 carrying movie_id means the movie was stored without embeddings
    """
    from movie_backend.services.ingestion_service import MovieIngestionError, ingestion_service

    try:
        return ingestion_service.ingest_movie(payload)
    except MovieIngestionError as e:
        raise HTTPException(status_code=500, detail={
            "message": "Movie was stored but embedding generation failed",
            "movie_id": e.movie_id,
            "error": e.reason,
        })
    except Exception as e:
        logger.error(f"Error ingesting movie '{payload.title}': {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to ingest movie: {str(e)}")


@router.get("/", response_model=PaginatedMovies)
def list_movies(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(20, ge=1, le=100, description="Movies per page"),
    sort_by: str = Query("created_at", description="Field to sort on"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
):
    return movie_service.get_all_movies(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


@router.post("/batch", response_model=List[Movie])
def get_movies_batch(request: MovieIdsRequest):
    """
    Fetch several movies in the order requested, unknown ids are skipped
    """
    return movie_service.get_movies_by_ids(request.ids)


@router.post("/search", response_model=List[MovieSearchResult])
def search_movies(request: MovieSearchRequest):
    """
    Semantic movie search by free-text query or by a ready-made embedding
    """
    if request.embedding:
        return movie_service.search_movies_by_embedding(request.embedding, request.limit)
    if request.query and request.query.strip():
        return movie_service.search_movies_by_text(request.query.strip(), request.limit)
    raise HTTPException(status_code=422, detail="Either query or embedding must be provided")


@router.get("/{movie_id}", response_model=Movie)
def get_movie(movie_id: str):
    movie = movie_service.get_movie_by_id(movie_id)
    if movie is None:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie


@router.patch("/{movie_id}", response_model=Movie)
def update_movie(movie_id: str, payload: MovieUpdate):
    """
    Partial update, embeddings are regenerated in the background
    """
    result = movie_service.update_movie(movie_id, payload)
    if result is None:
        raise HTTPException(status_code=404, detail="Movie not found")
    return result.movie


@router.delete("/{movie_id}")
def delete_movie(movie_id: str):
    if not movie_service.delete_movie(movie_id):
        raise HTTPException(status_code=404, detail="Movie not found")
    return {"deleted": True, "id": movie_id}
