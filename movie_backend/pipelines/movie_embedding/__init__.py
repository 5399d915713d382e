# Movie Embedding Pipeline
# Nodes that turn a movie payload into stored, searchable embeddings

from .build_embedding_texts_node import build_embedding_texts, build_embedding_texts_node
from .generate_embeddings_node import generate_embeddings_node
from .upsert_embeddings_node import upsert_embeddings_node
from .store_embedding_keys_node import store_embedding_keys_node

__all__ = [
    "build_embedding_texts",
    "build_embedding_texts_node",
    "generate_embeddings_node",
    "upsert_embeddings_node",
    "store_embedding_keys_node"
]
