# Models for movie documents and movie API payloads
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class MovieCreate(BaseModel):
    title: str
    genres: Optional[List[str]] = None
    cast: Optional[List[str]] = None
    director: Optional[str] = None
    release_year: Optional[int] = None
    plot: Optional[str] = None
    trailer_url: Optional[str] = None
    poster_url: Optional[str] = None
    rating: Optional[float] = None
    metadata: Optional[Dict[str, Any]] = None


class MovieUpdate(BaseModel):
    """Partial update, only fields explicitly provided are written"""
    title: Optional[str] = None
    genres: Optional[List[str]] = None
    cast: Optional[List[str]] = None
    director: Optional[str] = None
    release_year: Optional[int] = None
    plot: Optional[str] = None
    trailer_url: Optional[str] = None
    poster_url: Optional[str] = None
    rating: Optional[float] = None
    metadata: Optional[Dict[str, Any]] = None


class Movie(BaseModel):
    id: str
    title: str
    genres: List[str] = []
    cast: List[str] = []
    director: Optional[str] = None
    release_year: Optional[int] = None
    plot: Optional[str] = None
    trailer_url: Optional[str] = None
    poster_url: Optional[str] = None
    rating: Optional[float] = None
    metadata: Optional[Dict[str, Any]] = None
    embedding_keys: Dict[str, str] = {}  # embedding name -> vector id in the vector store
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MovieSearchResult(BaseModel):
    movie: Movie
    score: float


class PaginatedMovies(BaseModel):
    movies: List[Movie]
    total: int
    page: int
    total_pages: int


class MovieIdsRequest(BaseModel):
    ids: List[str]


class MovieSearchRequest(BaseModel):
    """Search by free text (embedded server-side) or by a ready-made embedding"""
    query: Optional[str] = None
    embedding: Optional[List[float]] = None
    limit: int = Field(10, ge=1, le=100)


@dataclass
class MovieUpdateResult:
    """
    Outcome of a movie update

    embedding_job is the handle of the background re-embedding, None when nothing
    was updated. Callers may wait on it or ignore it; search results are not
    guaranteed to reflect the update until it completes.
    """
    movie: Movie
    embedding_job: Optional[Future] = None
