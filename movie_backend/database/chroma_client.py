import logging
from typing import Any, Dict, List, Optional

import httpx

from movie_backend.config import Settings
from movie_backend.database.vector_store_base import VectorProvider, VectorStore
from movie_backend.models.vector_models import CollectionStats, EmbeddingRecord, VectorMatch

logger = logging.getLogger(__name__)


class ChromaClient:
    """
    Minimal REST client for a Chroma server
    Identified by the server base URL and the collection it targets
    """

    def __init__(self, base_url: str, collection: str,
                 headers: Optional[Dict[str, str]] = None,
                 timeout: float = 30.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.collection = collection
        self.http = httpx.Client(
            base_url=self.base_url,
            headers=headers or {},
            timeout=timeout,
            transport=transport,
        )

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> httpx.Response:
        response = self.http.request(method=method, url=path, json=body)
        response.raise_for_status()
        return response

    def close(self):
        self.http.close()


class ChromaVectorStore(VectorStore):
    """
    Chroma adapter for movie embeddings
    Chroma reports distances, which are converted to similarities (1 - distance)
    """
    provider = VectorProvider.CHROMA

    def __init__(self, client: ChromaClient):
        self.client = client
        self.collection_name = client.collection
        # Set once the collection has been resolved on the server
        self.collection_id: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChromaVectorStore":
        client = ChromaClient(settings.chroma_url, settings.chroma_collection_name)
        logger.info(f"Chroma client configured for {client.base_url}, collection '{client.collection}'")
        return cls(client)

    @property
    def _collection_path(self) -> str:
        return f"/collections/{self.collection_id or self.collection_name}"

    def ensure_collection(self, dimension: int) -> None:
        response = self.client.request(
            "POST",
            "/collections",
            {
                "name": self.collection_name,
                "get_or_create": True,
                "metadata": {"hnsw:space": "cosine", "dimension": dimension},
            },
        )
        data = response.json() or {}
        self.collection_id = data.get("id")
        logger.info(f"Chroma collection '{self.collection_name}' ready (id={self.collection_id})")

    def upsert(self, movie_id: str, embeddings: EmbeddingRecord) -> Dict[str, str]:
        vectors = [
            {
                "id": f"{movie_id}:{source}",
                "embedding": [float(x) for x in vector],
                "metadata": {"movie_id": movie_id, "source": source},
            }
            for source, vector in embeddings.items()
        ]

        self.client.request(
            "POST",
            f"{self._collection_path}/upsert",
            {
                "ids": [v["id"] for v in vectors],
                "embeddings": [v["embedding"] for v in vectors],
                "metadatas": [v["metadata"] for v in vectors],
            },
        )

        logger.info(f"Upserted {len(vectors)} embeddings for movie {movie_id} to Chroma")
        return {v["metadata"]["source"]: v["id"] for v in vectors}

    def search(self, embedding: List[float], limit: int) -> List[VectorMatch]:
        response = self.client.request(
            "POST",
            f"{self._collection_path}/query",
            {
                "query_embeddings": [[float(x) for x in embedding]],
                "n_results": limit,
                "include": ["metadatas", "distances"],
            },
        )
        results = response.json() or {}

        # Results are nested one level per query embedding
        ids = (results.get("ids") or [[]])[0] or []
        distances = (results.get("distances") or [[]])[0] or []
        metadatas = (results.get("metadatas") or [[]])[0] or []

        matches = []
        for idx, point_id in enumerate(ids):
            distance = distances[idx] if idx < len(distances) and distances[idx] is not None else 0.0
            metadata = metadatas[idx] if idx < len(metadatas) and metadatas[idx] else {}
            matches.append(
                VectorMatch(
                    id=str(point_id),
                    score=1 - distance,
                    payload=metadata,
                )
            )
        return matches

    def collection_stats(self) -> CollectionStats:
        try:
            response = self.client.request("GET", f"{self._collection_path}/count")
            count = response.json() or 0
        except Exception as e:
            logger.error(f"Failed to get Chroma collection info: {str(e)}")
            raise

        return CollectionStats(
            provider=self.provider.label,
            collection=self.collection_name,
            count=int(count),
        )
