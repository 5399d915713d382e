# Data classes for vector embeddings and search results
from pydantic import BaseModel, Field
from typing import Any, Dict, List

# Named embedding field ("title", "plot", "genre") -> vector
EmbeddingRecord = Dict[str, List[float]]


class VectorMatch(BaseModel):
    """A single normalized search hit, higher score means more similar"""
    id: str
    score: float
    payload: Dict[str, Any] = {}


class CollectionStats(BaseModel):
    provider: str
    collection: str
    count: int = 0


class VectorUpsertRequest(BaseModel):
    movie_id: str
    embeddings: EmbeddingRecord


class VectorUpsertResponse(BaseModel):
    movie_id: str
    ids: Dict[str, str]


class VectorSearchRequest(BaseModel):
    embedding: List[float]
    limit: int = Field(10, ge=1, le=100)
