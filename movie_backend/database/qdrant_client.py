import hashlib
import logging
from typing import List, Dict, Optional

from qdrant_client import QdrantClient
from qdrant_client.http import models

from movie_backend.config import Settings
from movie_backend.database.vector_store_base import VectorProvider, VectorStore
from movie_backend.models.vector_models import CollectionStats, EmbeddingRecord, VectorMatch

logger = logging.getLogger(__name__)

# Largest integer that survives a round trip through a float64 JSON number
MAX_SAFE_INTEGER = 2 ** 53 - 1


def string_to_numeric_id(value: str) -> int:
    """
    Convert a string ID to a numeric point ID for Qdrant

    First 8 bytes of the SHA-256 digest read as an unsigned big-endian integer,
    reduced into the safe integer range so the id is never rounded by JSON clients.
    """
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False) % MAX_SAFE_INTEGER


class QdrantVectorStore(VectorStore):
    """
    Qdrant adapter for movie embeddings
    Qdrant only accepts unsigned integers or UUIDs as point ids, so composite
    keys are hashed and the original key is kept in the payload
    """
    provider = VectorProvider.QDRANT

    def __init__(self, client: QdrantClient, collection_name: str):
        self.client = client
        self.collection_name = collection_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "QdrantVectorStore":
        # Check if host contains protocol (http:// or https://)
        if settings.qdrant_host.startswith(("http://", "https://")):
            client = QdrantClient(url=settings.qdrant_host, api_key=settings.qdrant_api_key)
        else:
            client = QdrantClient(
                host=settings.qdrant_host,
                port=settings.qdrant_port,
                api_key=settings.qdrant_api_key,
            )
        logger.info(f"Qdrant client configured for collection '{settings.vector_collection}'")
        return cls(client, settings.vector_collection)

    def ensure_collection(self, dimension: int) -> None:
        if self.client.collection_exists(self.collection_name):
            logger.info(f"Qdrant collection '{self.collection_name}' already exists")
            return

        self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config=models.VectorParams(size=dimension, distance=models.Distance.COSINE),
        )
        logger.info(f"Created Qdrant collection '{self.collection_name}' with dimension {dimension}")

    def upsert(self, movie_id: str, embeddings: EmbeddingRecord) -> Dict[str, str]:
        points = []
        for source, vector in embeddings.items():
            string_id = f"{movie_id}:{source}"
            points.append(
                models.PointStruct(
                    id=string_to_numeric_id(string_id),
                    vector=[float(x) for x in vector],
                    payload={
                        "movie_id": movie_id,
                        "source": source,
                        "original_id": string_id,
                    },
                )
            )

        self.client.upsert(
            collection_name=self.collection_name,
            points=points,
            wait=True,
        )

        logger.info(f"Upserted {len(points)} embeddings for movie {movie_id} to Qdrant")
        # Numeric ids are returned as strings so every backend reports the same type
        return {point.payload["source"]: str(point.id) for point in points}

    def search(self, embedding: List[float], limit: int) -> List[VectorMatch]:
        # Not-yet-indexed collections read as "no results"
        if not self.client.collection_exists(self.collection_name):
            logger.warning(f"Vector collection '{self.collection_name}' does not exist. Returning empty results.")
            return []

        collection_info = self.client.get_collection(self.collection_name)
        if collection_info.points_count == 0:
            logger.info(f"Vector collection '{self.collection_name}' is empty. Returning empty results.")
            return []

        response = self.client.query_points(
            collection_name=self.collection_name,
            query=[float(x) for x in embedding],
            limit=limit,
            with_payload=True,
        )

        return [
            VectorMatch(
                id=str(point.id),
                score=point.score if point.score is not None else 0.0,
                payload=point.payload or {},
            )
            for point in response.points
        ]

    def collection_stats(self) -> CollectionStats:
        try:
            collection_info = self.client.get_collection(self.collection_name)
        except Exception as e:
            logger.error(f"Failed to get Qdrant collection info: {str(e)}")
            raise

        return CollectionStats(
            provider=self.provider.label,
            collection=self.collection_name,
            count=collection_info.points_count or 0,
        )
