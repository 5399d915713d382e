import json

import httpx
import pytest

from movie_backend.database.chroma_client import ChromaClient, ChromaVectorStore


class RecordingHandler:
    """httpx MockTransport handler that records requests and replays canned responses."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body))
        status, payload = self.responses.get((request.method, request.url.path), (404, {"error": "not found"}))
        return httpx.Response(status, json=payload)


def make_store(responses):
    handler = RecordingHandler(responses)
    client = ChromaClient("http://chroma.test/api/v1", "movies", transport=httpx.MockTransport(handler))
    return ChromaVectorStore(client), handler


def test_upsert_posts_parallel_arrays():
    store, handler = make_store({("POST", "/api/v1/collections/movies/upsert"): (200, True)})

    ids = store.upsert("movie-1", {"title": [0.1, 0.2], "genre": [0.3, 0.4]})

    assert ids == {"title": "movie-1:title", "genre": "movie-1:genre"}
    method, path, body = handler.requests[0]
    assert (method, path) == ("POST", "/api/v1/collections/movies/upsert")
    assert body == {
        "ids": ["movie-1:title", "movie-1:genre"],
        "embeddings": [[0.1, 0.2], [0.3, 0.4]],
        "metadatas": [
            {"movie_id": "movie-1", "source": "title"},
            {"movie_id": "movie-1", "source": "genre"},
        ],
    }


def test_upsert_propagates_http_errors():
    store, _ = make_store({("POST", "/api/v1/collections/movies/upsert"): (500, {"error": "boom"})})

    with pytest.raises(httpx.HTTPStatusError):
        store.upsert("movie-1", {"title": [0.1, 0.2]})


def test_search_converts_distance_to_similarity():
    store, handler = make_store({
        ("POST", "/api/v1/collections/movies/query"): (200, {
            "ids": [["movie-1:title", "movie-2:plot"]],
            "distances": [[0.0, 1.0]],
            "metadatas": [[{"movie_id": "movie-1", "source": "title"}, None]],
        }),
    })

    matches = store.search([0.1, 0.2], 2)

    assert [m.id for m in matches] == ["movie-1:title", "movie-2:plot"]
    assert matches[0].score == pytest.approx(1.0)
    assert matches[1].score == pytest.approx(0.0)
    assert matches[0].payload == {"movie_id": "movie-1", "source": "title"}
    assert matches[1].payload == {}

    _, _, body = handler.requests[0]
    assert body["query_embeddings"] == [[0.1, 0.2]]
    assert body["n_results"] == 2


def test_search_missing_distance_counts_as_exact_match():
    store, _ = make_store({
        ("POST", "/api/v1/collections/movies/query"): (200, {
            "ids": [["movie-1:title"]],
            "distances": None,
            "metadatas": [[{"movie_id": "movie-1"}]],
        }),
    })

    matches = store.search([0.1, 0.2], 1)

    assert matches[0].score == pytest.approx(1.0)


def test_search_with_no_ids_returns_empty():
    store, _ = make_store({("POST", "/api/v1/collections/movies/query"): (200, {"ids": [[]]})})

    assert store.search([0.1, 0.2], 3) == []


def test_ensure_collection_resolves_collection_id():
    store, handler = make_store({
        ("POST", "/api/v1/collections"): (200, {"id": "c0ffee", "name": "movies"}),
        ("GET", "/api/v1/collections/c0ffee/count"): (200, 4),
    })

    store.ensure_collection(384)
    stats = store.collection_stats()

    _, _, body = handler.requests[0]
    assert body["name"] == "movies"
    assert body["get_or_create"] is True
    assert store.collection_id == "c0ffee"
    assert stats.count == 4
    assert stats.provider == "Chroma"


def test_collection_stats_propagates_errors():
    store, _ = make_store({})

    with pytest.raises(httpx.HTTPStatusError):
        store.collection_stats()
