from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from movie_backend.models.vector_models import CollectionStats, EmbeddingRecord, VectorMatch


class VectorProvider(str, Enum):
    """Vector database backends, selected explicitly through configuration"""
    QDRANT = "qdrant"
    PINECONE = "pinecone"
    CHROMA = "chroma"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class VectorStoreConfigurationError(ValueError):
    """Raised when a vector store call is made with unusable input"""


class UnsupportedProviderError(RuntimeError):
    """Raised when no known vector database backend matches"""

    def __init__(self, provider=None):
        message = "Unsupported vector database provider"
        if provider is not None:
            message = f"{message}: {provider}"
        super().__init__(message)
        self.provider = provider


class VectorStore(ABC):
    """
    Common {upsert, search} contract implemented by every vector database adapter
    """
    provider: VectorProvider
    collection_name: str

    @abstractmethod
    def ensure_collection(self, dimension: int) -> None:
        """Create the collection/index with the given dimension when missing"""

    @abstractmethod
    def upsert(self, movie_id: str, embeddings: EmbeddingRecord) -> dict:
        """Write one point per named vector, return name -> id used"""

    @abstractmethod
    def search(self, embedding: List[float], limit: int) -> List[VectorMatch]:
        """Return at most limit matches in the backend's ranking order"""

    @abstractmethod
    def collection_stats(self) -> CollectionStats:
        """Return the number of stored vectors"""
