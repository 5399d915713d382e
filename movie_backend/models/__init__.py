# Pipeline models
from .pipeline_models import EmbeddingPipelineState

# Movie models
from .movie_models import (
    Movie,
    MovieCreate,
    MovieUpdate,
    MovieSearchResult,
    MovieUpdateResult,
    PaginatedMovies,
)

# Vector models
from .vector_models import *

__all__ = [
    "EmbeddingPipelineState",
    "Movie",
    "MovieCreate",
    "MovieUpdate",
    "MovieSearchResult",
    "MovieUpdateResult",
    "PaginatedMovies",
    "EmbeddingRecord",
    "VectorMatch",
    "CollectionStats",
]
