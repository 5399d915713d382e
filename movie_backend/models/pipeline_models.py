from typing import Dict, Any, List, Optional
from typing_extensions import TypedDict

class EmbeddingPipelineState(TypedDict, total=False):
    """
    State object for the movie embedding pipeline
    Compatible with LangGraph's state handling
    """
    # Input
    movie_id: str
    movie_payload: Dict[str, Any]

    # Pipeline data
    embedding_texts: Optional[Dict[str, str]]  # embedding name -> source text
    embeddings: Optional[Dict[str, List[float]]]
    embedding_keys: Optional[Dict[str, str]]  # embedding name -> vector id

    # Pipeline metadata
    pipeline_step: str
    error: Optional[str]
    execution_time: Optional[float]
