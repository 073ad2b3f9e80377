from __future__ import annotations

import sqlite3
from typing import Any, Iterable, Mapping

from moviegrid.catalog.models import CatalogRecord


def connect(path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA busy_timeout = 5000")
    return conn


def upsert_movie(conn: sqlite3.Connection, movie: Mapping[str, Any]) -> None:
    conn.execute(
        """
        INSERT INTO movies (id, title, release_date, vote_average, backdrop_path, popularity, fetched_at)
        VALUES (?, ?, ?, ?, ?, ?, datetime('now'))
        ON CONFLICT(id) DO UPDATE SET
            title = COALESCE(NULLIF(excluded.title, ''), movies.title),
            release_date = COALESCE(excluded.release_date, movies.release_date),
            vote_average = COALESCE(excluded.vote_average, movies.vote_average),
            backdrop_path = COALESCE(excluded.backdrop_path, movies.backdrop_path),
            popularity = excluded.popularity,
            fetched_at = datetime('now')
        """,
        (
            int(movie["id"]),
            movie.get("title") or movie.get("original_title") or "",
            movie.get("release_date") or None,
            movie.get("vote_average"),
            movie.get("backdrop_path") or None,
            float(movie.get("popularity") or 0.0),
        ),
    )


def upsert_movies(conn: sqlite3.Connection, movies: Iterable[Mapping[str, Any]]) -> int:
    count = 0
    for movie in movies:
        if movie.get("id") is None:
            continue
        upsert_movie(conn, movie)
        count += 1
    return count


def select_top_popular(conn: sqlite3.Connection, limit: int = 1000) -> list[sqlite3.Row]:
    return conn.execute(
        """
        SELECT id, title, release_date, vote_average, backdrop_path, popularity
        FROM movies
        ORDER BY popularity DESC, id
        LIMIT ?
        """,
        (limit,),
    ).fetchall()


def count_movies(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) FROM movies").fetchone()
    return int(row[0])


def record_from_row(row: sqlite3.Row) -> CatalogRecord:
    return CatalogRecord(
        id=int(row["id"]),
        title=row["title"],
        release_date=row["release_date"],
        vote_average=row["vote_average"],
        backdrop_path=row["backdrop_path"],
    )
