import pytest
from bson import ObjectId
from unittest.mock import MagicMock

from movie_backend.models.movie_models import MovieCreate, MovieUpdate, MovieUpdateResult
from movie_backend.models.vector_models import VectorMatch


def create(movie_service, title, **fields):
    return movie_service.create_movie(MovieCreate(title=title, **fields))


class TestMovieCrud:

    def test_create_defaults_lists(self, movie_service):
        movie = create(movie_service, "Heat", director="Michael Mann")

        assert ObjectId.is_valid(movie.id)
        assert movie.genres == []
        assert movie.cast == []
        assert movie.embedding_keys == {}
        assert movie.created_at is not None

    def test_get_movie_by_id(self, movie_service):
        movie = create(movie_service, "Heat", release_year=1995)

        found = movie_service.get_movie_by_id(movie.id)

        assert found.id == movie.id
        assert found.title == "Heat"
        assert found.release_year == 1995

    @pytest.mark.parametrize("movie_id", ["not-an-id", "", "123", "zzzzzzzzzzzzzzzzzzzzzzzz"])
    def test_invalid_id_reads_as_not_found(self, movie_service, movie_id):
        assert movie_service.get_movie_by_id(movie_id) is None
        assert movie_service.update_movie(movie_id, MovieUpdate(title="x")) is None
        assert movie_service.delete_movie(movie_id) is False

    def test_unknown_valid_id_reads_as_not_found(self, movie_service, mock_worker):
        missing = str(ObjectId())

        assert movie_service.get_movie_by_id(missing) is None
        assert movie_service.update_movie(missing, MovieUpdate(title="x")) is None
        assert movie_service.delete_movie(missing) is False
        mock_worker.submit.assert_not_called()

    def test_get_movies_by_ids_preserves_order_and_skips_missing(self, movie_service):
        first = create(movie_service, "Alien")
        second = create(movie_service, "Aliens")
        third = create(movie_service, "Alien 3")

        movies = movie_service.get_movies_by_ids(
            [third.id, "bogus", first.id, str(ObjectId()), second.id]
        )

        assert [m.title for m in movies] == ["Alien 3", "Alien", "Aliens"]

    def test_get_movies_by_ids_without_valid_ids(self, movie_service):
        movie_service.mongo = MagicMock(wraps=movie_service.mongo)

        assert movie_service.get_movies_by_ids(["bogus", ""]) == []
        movie_service.mongo.find_movies_by_ids.assert_not_called()

    def test_delete_movie(self, movie_service):
        movie = create(movie_service, "Heat")

        assert movie_service.delete_movie(movie.id) is True
        assert movie_service.get_movie_by_id(movie.id) is None
        assert movie_service.delete_movie(movie.id) is False

    def test_update_embedding_keys(self, movie_service):
        movie = create(movie_service, "Heat")

        updated = movie_service.update_movie_embedding_keys(movie.id, {"title": "123"})

        assert updated.embedding_keys == {"title": "123"}
        assert movie_service.update_movie_embedding_keys("bogus", {"title": "1"}) is None


class TestPagination:

    def test_first_page_of_45(self, movie_service):
        for i in range(45):
            create(movie_service, f"Movie {i}")

        page = movie_service.get_all_movies(page=1, limit=20)

        assert len(page.movies) == 20
        assert page.total == 45
        assert page.page == 1
        assert page.total_pages == 3

    def test_last_page_is_partial(self, movie_service):
        for i in range(45):
            create(movie_service, f"Movie {i}")

        page = movie_service.get_all_movies(page=3, limit=20)

        assert len(page.movies) == 5
        assert page.total_pages == 3

    def test_empty_collection(self, movie_service):
        page = movie_service.get_all_movies()

        assert page.movies == []
        assert page.total == 0
        assert page.total_pages == 0

    def test_sort_order(self, movie_service):
        for year in (1999, 1979, 1986):
            create(movie_service, f"Movie {year}", release_year=year)

        ascending = movie_service.get_all_movies(sort_by="release_year", sort_order="asc")
        descending = movie_service.get_all_movies(sort_by="release_year", sort_order="desc")

        assert [m.release_year for m in ascending.movies] == [1979, 1986, 1999]
        assert [m.release_year for m in descending.movies] == [1999, 1986, 1979]


class TestUpdate:

    def test_update_sets_only_provided_fields(self, movie_service):
        movie = create(movie_service, "Heat", plot="A heist", genres=["crime"])

        result = movie_service.update_movie(movie.id, MovieUpdate(plot="A bank heist in LA"))

        assert isinstance(result, MovieUpdateResult)
        assert result.movie.plot == "A bank heist in LA"
        assert result.movie.title == "Heat"
        assert result.movie.genres == ["crime"]

    def test_null_title_keeps_movie_readable(self, movie_service, caplog):
        movie = create(movie_service, "Heat", genres=["crime"], cast=["Al Pacino"])

        result = movie_service.update_movie(movie.id, MovieUpdate(title=None, genres=None, cast=None, plot="A heist"))

        assert result.movie.title == "Heat"
        assert result.movie.genres == ["crime"]
        assert result.movie.cast == ["Al Pacino"]
        assert result.movie.plot == "A heist"
        assert movie_service.get_movie_by_id(movie.id).title == "Heat"
        assert [m.title for m in movie_service.get_all_movies().movies] == ["Heat"]
        assert "Ignoring null title" in caplog.text

    def test_null_optional_field_is_cleared(self, movie_service):
        movie = create(movie_service, "Heat", director="Michael Mann")

        result = movie_service.update_movie(movie.id, MovieUpdate(director=None))

        assert result.movie.director is None

    def test_update_schedules_reembedding(self, movie_service, mock_worker):
        movie = create(movie_service, "Heat", plot="A heist", genres=["crime"], metadata={"studio": "WB"})

        result = movie_service.update_movie(movie.id, MovieUpdate(title="Heat (1995)"))

        mock_worker.submit.assert_called_once_with(movie.id, {
            "title": "Heat (1995)",
            "plot": "A heist",
            "genres": ["crime"],
            "metadata": {"studio": "WB"},
        })
        assert result.embedding_job is mock_worker.submit.return_value

    def test_update_survives_scheduling_failure(self, movie_service, mock_worker, caplog):
        mock_worker.submit.side_effect = RuntimeError("cannot schedule new futures after shutdown")
        movie = create(movie_service, "Heat")

        result = movie_service.update_movie(movie.id, MovieUpdate(title="Heat (1995)"))

        assert result.movie.title == "Heat (1995)"
        assert result.embedding_job is None
        assert "Could not schedule embedding regeneration" in caplog.text


class TestMovieSearch:

    def test_keeps_best_score_per_movie(self, movie_service, mock_vector_search):
        movie = create(movie_service, "Heat")
        mock_vector_search.semantic_search.return_value = [
            VectorMatch(id="1", score=0.9, payload={"movie_id": movie.id, "source": "title"}),
            VectorMatch(id="2", score=0.7, payload={"movie_id": movie.id, "source": "plot"}),
            VectorMatch(id="3", score=0.95, payload={"movie_id": movie.id, "source": "genre"}),
        ]

        results = movie_service.search_movies_by_embedding([0.1, 0.2], limit=5)

        assert len(results) == 1
        assert results[0].movie.id == movie.id
        assert results[0].score == pytest.approx(0.95)

    def test_over_fetches_twice_the_limit(self, movie_service, mock_vector_search):
        movie_service.search_movies_by_embedding([0.1, 0.2], limit=10)

        mock_vector_search.semantic_search.assert_called_once_with([0.1, 0.2], 20)

    def test_sorts_truncates_and_drops_unknown_movies(self, movie_service, mock_vector_search, caplog):
        heat = create(movie_service, "Heat")
        alien = create(movie_service, "Alien")
        ronin = create(movie_service, "Ronin")
        orphan = str(ObjectId())
        mock_vector_search.semantic_search.return_value = [
            VectorMatch(id="1", score=0.99, payload={"movie_id": orphan}),
            VectorMatch(id="2", score=0.6, payload={"movie_id": heat.id}),
            VectorMatch(id="3", score=0.8, payload={"movie_id": alien.id}),
            VectorMatch(id="4", score=0.7, payload={"movie_id": ronin.id}),
            VectorMatch(id="5", score=0.5, payload={}),
        ]

        results = movie_service.search_movies_by_embedding([0.1], limit=2)

        assert [r.movie.title for r in results] == ["Alien", "Ronin"]
        assert f"Movie not found for ID: {orphan}" in caplog.text

    def test_no_matches(self, movie_service, mock_vector_search):
        mock_vector_search.semantic_search.return_value = []

        assert movie_service.search_movies_by_embedding([0.1]) == []

    def test_search_by_text_embeds_query(self, movie_service, mock_vector_search):
        embedding = MagicMock()
        embedding.embed_text.return_value = [0.3, 0.4]
        movie_service._embedding = embedding

        movie_service.search_movies_by_text("bank heist", limit=3)

        embedding.embed_text.assert_called_once_with("bank heist")
        mock_vector_search.semantic_search.assert_called_once_with([0.3, 0.4], 6)
