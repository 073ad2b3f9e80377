import asyncio
import sqlite3

import pytest

from fakes import FakeCatalog, FakeVideos, record
from moviegrid.db import repo
from moviegrid.db.conn import ensure_db, open_store
from moviegrid.errors import EnrichmentError, StoreError
from moviegrid.movies.enrich import MovieEnricher
from moviegrid.movies.popular import random_popular_movies
from moviegrid.util.sampling import Sampler


def _seed_store(db_path: str, count: int) -> None:
    ensure_db(db_path)
    with open_store(db_path) as conn:
        repo.upsert_movies(
            conn,
            (
                {
                    "id": i,
                    "title": f"Movie {i}",
                    "release_date": "2001-01-01",
                    "vote_average": 6.0,
                    "backdrop_path": f"/b{i}.jpg",
                    "popularity": float(i),
                }
                for i in range(1, count + 1)
            ),
        )
        conn.commit()


@pytest.fixture
def track_connections(monkeypatch):
    opened: list[sqlite3.Connection] = []
    real_connect = repo.connect

    def tracking_connect(path: str) -> sqlite3.Connection:
        conn = real_connect(path)
        opened.append(conn)
        return conn

    monkeypatch.setattr(repo, "connect", tracking_connect)
    return opened


def _is_closed(conn: sqlite3.Connection) -> bool:
    try:
        conn.execute("SELECT 1")
    except sqlite3.ProgrammingError:
        return True
    return False


def test_upsert_and_select_top_popular(tmp_path) -> None:
    db_path = str(tmp_path / "movies.db")
    _seed_store(db_path, 5)

    with open_store(db_path) as conn:
        repo.upsert_movie(conn, {"id": 1, "title": None, "popularity": 99.0})
        conn.commit()
        rows = repo.select_top_popular(conn, 3)
        total = repo.count_movies(conn)

    assert [row["id"] for row in rows] == [1, 5, 4]
    assert rows[0]["title"] == "Movie 1"
    assert total == 5


def test_random_popular_drawn_from_top_rows(tmp_path) -> None:
    db_path = str(tmp_path / "movies.db")
    _seed_store(db_path, 1200)
    catalog = FakeCatalog(movies=[record(i) for i in range(1, 1201)])
    enricher = MovieEnricher(catalog, FakeVideos())

    for seed in range(5):
        movies = asyncio.run(random_popular_movies(db_path, enricher, Sampler(seed)))
        ids = [m.id for m in movies]
        assert len(ids) == 10
        assert len(set(ids)) == 10
        # popularity == id, so the top 1000 are ids 201..1200
        assert all(201 <= movie_id <= 1200 for movie_id in ids)


def test_random_popular_small_store(tmp_path) -> None:
    db_path = str(tmp_path / "movies.db")
    _seed_store(db_path, 4)
    catalog = FakeCatalog(movies=[record(i) for i in range(1, 5)])
    movies = asyncio.run(
        random_popular_movies(db_path, MovieEnricher(catalog, FakeVideos()), Sampler(1))
    )
    assert sorted(m.id for m in movies) == [1, 2, 3, 4]


def test_reuse_cached_rows_skips_catalog_refetch(tmp_path) -> None:
    db_path = str(tmp_path / "movies.db")
    _seed_store(db_path, 30)
    catalog = FakeCatalog()
    movies = asyncio.run(
        random_popular_movies(
            db_path,
            MovieEnricher(catalog, FakeVideos()),
            Sampler(2),
            reuse_cached_rows=True,
        )
    )
    assert len(movies) == 10
    assert catalog.by_id_calls == []
    assert all(m.title == f"Movie {m.id}" for m in movies)
    assert sorted(catalog.provider_calls) == sorted(m.id for m in movies)


def test_query_failure_releases_connection(tmp_path, monkeypatch, track_connections) -> None:
    db_path = str(tmp_path / "movies.db")
    _seed_store(db_path, 3)
    track_connections.clear()

    def broken_select(conn, limit):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(repo, "select_top_popular", broken_select)
    enricher = MovieEnricher(FakeCatalog(), FakeVideos())

    with pytest.raises(StoreError):
        asyncio.run(random_popular_movies(db_path, enricher, Sampler(0)))
    assert len(track_connections) == 1
    assert _is_closed(track_connections[0])


def test_enrichment_failure_releases_connection(tmp_path, track_connections) -> None:
    db_path = str(tmp_path / "movies.db")
    _seed_store(db_path, 3)
    track_connections.clear()
    catalog = FakeCatalog(movies=[record(i) for i in range(1, 4)], fail_provider_ids={2})

    with pytest.raises(EnrichmentError):
        asyncio.run(random_popular_movies(db_path, MovieEnricher(catalog, FakeVideos()), Sampler(0)))
    assert all(_is_closed(conn) for conn in track_connections)


def test_missing_table_is_store_error(tmp_path, track_connections) -> None:
    db_path = str(tmp_path / "empty.db")
    with pytest.raises(StoreError):
        asyncio.run(
            random_popular_movies(db_path, MovieEnricher(FakeCatalog(), FakeVideos()), Sampler(0))
        )
    assert all(_is_closed(conn) for conn in track_connections)
