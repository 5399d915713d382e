# Movie Embedding Orchestrator
from typing import Dict, Any, Optional
from datetime import datetime
import logging
from langgraph.graph import StateGraph, END

# LangSmith tracing
from langsmith import traceable

from movie_backend.database.mongodb_client import MongoDBClient, mongodb_client
from movie_backend.models.pipeline_models import EmbeddingPipelineState
from movie_backend.pipelines.movie_embedding import (
    build_embedding_texts_node,
    generate_embeddings_node,
    upsert_embeddings_node,
    store_embedding_keys_node,
)
from movie_backend.services.embedding_service import EmbeddingService, embedding_service
from movie_backend.services.vector_search_service import VectorSearchService, vector_search_service

logger = logging.getLogger(__name__)


class MovieEmbeddingOrchestrator:
    """
    Orchestrator for the movie embedding pipeline

    Pipeline Flow:
    1. Build one source text per embeddable field (title, plot, genre)
    2. Generate embeddings with the sentence-transformers model
    3. Upsert embeddings into the configured vector database
    4. Store the resulting vector ids on the movie document
    """

    def __init__(self, embedding: Optional[EmbeddingService] = None,
                 vector_search: Optional[VectorSearchService] = None,
                 mongo: Optional[MongoDBClient] = None):
        self.embedding = embedding or embedding_service
        self.vector_search = vector_search or vector_search_service
        self.mongo = mongo or mongodb_client
        self.graph = None
        self._build_graph()

    def _build_graph(self):
        """Build the movie embedding LangGraph workflow"""
        try:
            workflow = StateGraph(EmbeddingPipelineState)

            workflow.add_node("build_texts", build_embedding_texts_node)
            workflow.add_node("generate_embeddings",
                              lambda state: generate_embeddings_node(state, self.embedding))
            workflow.add_node("upsert_embeddings",
                              lambda state: upsert_embeddings_node(state, self.vector_search))
            workflow.add_node("store_keys",
                              lambda state: store_embedding_keys_node(state, self.mongo))

            workflow.set_entry_point("build_texts")
            workflow.add_edge("build_texts", "generate_embeddings")
            workflow.add_edge("generate_embeddings", "upsert_embeddings")
            workflow.add_edge("upsert_embeddings", "store_keys")
            workflow.add_edge("store_keys", END)

            self.graph = workflow.compile()
            logger.info("Movie embedding LangGraph workflow compiled successfully")

        except Exception as e:
            logger.error(f"Error building movie embedding LangGraph workflow: {str(e)}")
            self.graph = None

    def _run_sequential(self, state: EmbeddingPipelineState) -> EmbeddingPipelineState:
        state = build_embedding_texts_node(state)
        state = generate_embeddings_node(state, self.embedding)
        state = upsert_embeddings_node(state, self.vector_search)
        return store_embedding_keys_node(state, self.mongo)

    @traceable(name="movie_embedding_pipeline")
    def run(self, movie_id: str, movie_payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Generate and store embeddings for one movie

        Returns:
            Dict with movie_id, embedding_keys, pipeline_step, error and execution_time
        """
        start_time = datetime.utcnow()

        initial_state: EmbeddingPipelineState = {
            "movie_id": movie_id,
            "movie_payload": dict(movie_payload),
            "embedding_texts": None,
            "embeddings": None,
            "embedding_keys": None,
            "pipeline_step": "initialized",
            "error": None,
            "execution_time": None,
        }

        try:
            if self.graph:
                result = self.graph.invoke(initial_state)
            else:
                # Sequential execution when the graph could not be compiled
                result = self._run_sequential(initial_state)
        except Exception as e:
            logger.error(f"Error in movie embedding pipeline for movie {movie_id}: {str(e)}")
            result = {**initial_state, "error": str(e), "pipeline_step": "error"}

        execution_time = (datetime.utcnow() - start_time).total_seconds()
        logger.info(f"Embedding pipeline finished for movie {movie_id} in {execution_time:.2f}s "
                    f"(step: {result.get('pipeline_step')})")

        return {
            "movie_id": movie_id,
            "embedding_keys": result.get("embedding_keys") or {},
            "pipeline_step": result.get("pipeline_step", "completed"),
            "error": result.get("error"),
            "execution_time": execution_time,
        }
