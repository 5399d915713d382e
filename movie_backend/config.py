import os
from typing import Optional
from pydantic import BaseModel


class Settings(BaseModel):
    """
    Runtime configuration for the movie service
    Values come from environment variables (a .env file is loaded by the API entrypoint)
    """
    # Vector database
    vector_db_provider: str = "qdrant"
    vector_collection: str = "movies"
    vector_dimension: int = 768

    qdrant_host: str = "localhost"
    qdrant_port: int = 6333
    qdrant_api_key: Optional[str] = None

    pinecone_api_key: Optional[str] = None
    pinecone_index: Optional[str] = None
    pinecone_cloud: str = "aws"
    pinecone_region: str = "us-east-1"

    chroma_url: str = "http://localhost:8000/api/v1"
    chroma_collection: Optional[str] = None

    # Document store
    mongodb_connection_string: Optional[str] = None
    mongodb_database: str = "moviedb"

    # Embeddings
    embedding_model: str = "BAAI/bge-base-en"
    reembedding_workers: int = 2

    log_level: str = "INFO"
    port: int = 8000

    @property
    def pinecone_index_name(self) -> str:
        return self.pinecone_index or self.vector_collection

    @property
    def chroma_collection_name(self) -> str:
        return self.chroma_collection or self.vector_collection


def get_settings() -> Settings:
    """Build settings from the current environment"""
    return Settings(
        vector_db_provider=os.getenv("VECTOR_DB_PROVIDER", "qdrant").lower(),
        vector_collection=os.getenv("VECTOR_COLLECTION", "movies"),
        vector_dimension=int(os.getenv("VECTOR_DIMENSION", "768")),
        qdrant_host=os.getenv("QDRANT_HOST", "localhost"),
        qdrant_port=int(os.getenv("QDRANT_PORT", "6333")),
        qdrant_api_key=os.getenv("QDRANT_API_KEY"),
        pinecone_api_key=os.getenv("PINECONE_API_KEY"),
        pinecone_index=os.getenv("PINECONE_INDEX"),
        pinecone_cloud=os.getenv("PINECONE_CLOUD", "aws"),
        pinecone_region=os.getenv("PINECONE_REGION", "us-east-1"),
        chroma_url=os.getenv("CHROMA_URL", "http://localhost:8000/api/v1"),
        chroma_collection=os.getenv("CHROMA_COLLECTION"),
        mongodb_connection_string=os.getenv("MONGODB_CONNECTION_STRING"),
        mongodb_database=os.getenv("MONGODB_DATABASE", "moviedb"),
        embedding_model=os.getenv("EMBEDDING_MODEL", "BAAI/bge-base-en"),
        reembedding_workers=int(os.getenv("REEMBEDDING_WORKERS", "2")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=int(os.getenv("PORT", "8000")),
    )
