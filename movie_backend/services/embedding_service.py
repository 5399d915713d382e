import logging
import threading
from typing import Dict, List, Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from movie_backend.config import get_settings

logger = logging.getLogger(__name__)


class EmbeddingService:
    """
    Text embedding with a sentence-transformers model
    The model is loaded on first use so importing the service stays cheap
    """

    def __init__(self, model_name: Optional[str] = None):
        self.model_name = model_name or get_settings().embedding_model
        self._model = None
        self._lock = threading.Lock()

    @property
    def model(self) -> SentenceTransformer:
        with self._lock:
            if self._model is None:
                self._model = SentenceTransformer(self.model_name)
                logger.info(f"Embedding model loaded: {self.model_name}")
        return self._model

    def embed_text(self, text: str) -> List[float]:
        return self.embed_texts({"text": text})["text"]

    def embed_texts(self, texts: Dict[str, str]) -> Dict[str, List[float]]:
        """
        Embed several named texts in one batch

        Args:
            texts: Embedding name -> text, e.g. {"title": "Heat", "plot": "..."}

        Returns:
            Embedding name -> normalized vector as a list of floats
        """
        if not texts:
            return {}

        names = list(texts.keys())
        vectors = self.model.encode(
            [texts[name] for name in names],
            normalize_embeddings=True,
        )
        vectors = np.asarray(vectors, dtype=np.float32)

        logger.info(f"Generated {len(names)} embeddings (dimension {vectors.shape[1]})")
        return {name: vectors[i].tolist() for i, name in enumerate(names)}


# Global service instance
embedding_service = EmbeddingService()
