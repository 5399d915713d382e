import pytest
import mongomock
from unittest.mock import MagicMock
from qdrant_client import QdrantClient

from movie_backend.database.mongodb_client import MongoDBClient
from movie_backend.database.qdrant_client import QdrantVectorStore
from movie_backend.services.movie_service import MovieService


@pytest.fixture
def mongo():
    """MongoDB movie repository backed by an in-process mongomock collection."""
    collection = mongomock.MongoClient().moviedb.movies
    return MongoDBClient(collection=collection)


@pytest.fixture
def qdrant_store():
    """Qdrant adapter over qdrant-client's in-memory local mode."""
    return QdrantVectorStore(QdrantClient(":memory:"), "movies_test")


@pytest.fixture
def mock_vector_search():
    vector_search = MagicMock()
    vector_search.semantic_search.return_value = []
    return vector_search


@pytest.fixture
def mock_worker():
    return MagicMock()


@pytest.fixture
def movie_service(mongo, mock_vector_search, mock_worker):
    return MovieService(
        mongo=mongo,
        vector_search=mock_vector_search,
        reembedding_worker=mock_worker,
    )
