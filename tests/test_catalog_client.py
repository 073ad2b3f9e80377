import asyncio

import httpx
import pytest

from moviegrid.catalog.client import CatalogClient
from moviegrid.errors import MovieNotFoundError, UpstreamError

BASE_URL = "https://catalog.test/3"

MOVIE = {
    "id": 438631,
    "title": "Dune",
    "release_date": "2021-09-15",
    "vote_average": 7.8,
    "backdrop_path": "/dune.jpg",
    "overview": "ignored",
}


def _call(handler, method: str, *args):
    async def _main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = CatalogClient(http, BASE_URL, "secret", region="CA")
            return await getattr(client, method)(*args)

    return asyncio.run(_main())


def test_get_movie_by_id_sends_key_and_maps_fields() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=MOVIE)

    movie = _call(handler, "get_movie_by_id", 438631)
    assert movie.id == 438631
    assert movie.title == "Dune"
    assert movie.release_date == "2021-09-15"
    assert movie.vote_average == 7.8
    assert movie.backdrop_path == "/dune.jpg"
    assert seen[0].url.path == "/3/movie/438631"
    assert seen[0].url.params["api_key"] == "secret"
    assert seen[0].url.params["language"] == "en-US"


def test_get_movie_by_id_404_is_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"status_message": "not found"})

    with pytest.raises(MovieNotFoundError):
        _call(handler, "get_movie_by_id", 1)


def test_get_movie_by_title_takes_first_hit() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/3/search/movie"
        assert request.url.params["query"] == "Dune"
        return httpx.Response(200, json={"results": [MOVIE, {**MOVIE, "id": 1}]})

    assert _call(handler, "get_movie_by_title", "Dune").id == 438631


def test_get_movie_by_title_without_results_is_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": []})

    with pytest.raises(MovieNotFoundError):
        _call(handler, "get_movie_by_title", "No Such Film")


def test_trending_and_top_rated_paths() -> None:
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"results": [MOVIE, {"title": "no id"}]})

    assert [m.id for m in _call(handler, "get_trending_movies")] == [438631]
    assert [m.id for m in _call(handler, "get_top_rated_movies")] == [438631]
    assert paths == ["/3/trending/movie/week", "/3/movie/top_rated"]


def test_streaming_provider_uses_configured_region() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/3/movie/438631/watch/providers"
        return httpx.Response(
            200,
            json={
                "results": {
                    "CA": {"flatrate": [{"provider_id": 8, "provider_name": "Netflix"}]},
                    "US": {"flatrate": [{"provider_id": 15, "provider_name": "Hulu"}]},
                }
            },
        )

    picked = _call(handler, "get_streaming_provider", 438631)
    assert picked.name == "Netflix"


def test_server_error_is_upstream_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    with pytest.raises(UpstreamError):
        _call(handler, "get_trending_movies")


def test_transport_error_is_upstream_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamError):
        _call(handler, "get_streaming_provider", 5)
