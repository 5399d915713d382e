import logging
from typing import List, Dict

from pinecone import Pinecone, ServerlessSpec

from movie_backend.config import Settings
from movie_backend.database.vector_store_base import VectorProvider, VectorStore
from movie_backend.models.vector_models import CollectionStats, EmbeddingRecord, VectorMatch

logger = logging.getLogger(__name__)


class PineconeVectorStore(VectorStore):
    """
    Pinecone adapter for movie embeddings
    Composite keys ("<movie_id>:<source>") are used directly as vector ids
    """
    provider = VectorProvider.PINECONE

    def __init__(self, client: Pinecone, index_name: str,
                 cloud: str = "aws", region: str = "us-east-1"):
        self.client = client
        self.collection_name = index_name
        self.cloud = cloud
        self.region = region
        self._index = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PineconeVectorStore":
        client = Pinecone(api_key=settings.pinecone_api_key)
        logger.info(f"Pinecone client configured for index '{settings.pinecone_index_name}'")
        return cls(
            client,
            settings.pinecone_index_name,
            cloud=settings.pinecone_cloud,
            region=settings.pinecone_region,
        )

    @property
    def index(self):
        if self._index is None:
            self._index = self.client.Index(self.collection_name)
        return self._index

    def ensure_collection(self, dimension: int) -> None:
        if self.collection_name in self.client.list_indexes().names():
            logger.info(f"Pinecone index '{self.collection_name}' already exists")
            return

        self.client.create_index(
            name=self.collection_name,
            dimension=dimension,
            metric="cosine",
            spec=ServerlessSpec(cloud=self.cloud, region=self.region),
        )
        logger.info(f"Created Pinecone index '{self.collection_name}' with dimension {dimension}")

    def upsert(self, movie_id: str, embeddings: EmbeddingRecord) -> Dict[str, str]:
        vectors = [
            {
                "id": f"{movie_id}:{source}",
                "values": [float(x) for x in vector],
                "metadata": {"movie_id": movie_id, "source": source},
            }
            for source, vector in embeddings.items()
        ]

        self.index.upsert(vectors=vectors)

        logger.info(f"Upserted {len(vectors)} embeddings for movie {movie_id} to Pinecone")
        return {vector["metadata"]["source"]: vector["id"] for vector in vectors}

    def search(self, embedding: List[float], limit: int) -> List[VectorMatch]:
        response = self.index.query(
            vector=[float(x) for x in embedding],
            top_k=limit,
            include_metadata=True,
        )

        return [
            VectorMatch(
                id=match.id,
                score=match.score if match.score is not None else 0.0,
                payload=dict(match.metadata or {}),
            )
            for match in (response.matches or [])
        ]

    def collection_stats(self) -> CollectionStats:
        try:
            stats = self.index.describe_index_stats()
        except Exception as e:
            logger.error(f"Failed to get Pinecone index stats: {str(e)}")
            raise

        return CollectionStats(
            provider=self.provider.label,
            collection=self.collection_name,
            count=stats.total_vector_count or 0,
        )
