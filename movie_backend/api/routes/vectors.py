from fastapi import APIRouter, HTTPException
from typing import List
import logging

from movie_backend.database.vector_client import (
    UnsupportedProviderError,
    VectorStoreConfigurationError,
    initialize_vector_db,
)
from movie_backend.models.vector_models import (
    CollectionStats,
    VectorMatch,
    VectorSearchRequest,
    VectorUpsertRequest,
    VectorUpsertResponse,
)
from movie_backend.services.vector_search_service import vector_search_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/upsert", response_model=VectorUpsertResponse)
def upsert_embeddings(request: VectorUpsertRequest):
    try:
        ids = vector_search_service.upsert_movie_embeddings(request.movie_id, request.embeddings)
        return VectorUpsertResponse(movie_id=request.movie_id, ids=ids)
    except VectorStoreConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UnsupportedProviderError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/search", response_model=List[VectorMatch])
def search_embeddings(request: VectorSearchRequest):
    try:
        return vector_search_service.semantic_search(request.embedding, request.limit)
    except UnsupportedProviderError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats", response_model=CollectionStats)
def collection_stats():
    try:
        return vector_search_service.check_collection_stats()
    except Exception as e:
        logger.error(f"Error reading vector collection stats: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to read collection stats: {str(e)}")


@router.post("/initialize")
def initialize():
    """
    Create the configured collection/index if it does not exist yet
    """
    try:
        store = initialize_vector_db()
        return {
            "status": "ready",
            "provider": store.provider.label,
            "collection": store.collection_name,
        }
    except Exception as e:
        logger.error(f"Error initializing vector database: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to initialize vector database: {str(e)}")
