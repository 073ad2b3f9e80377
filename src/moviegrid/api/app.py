from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from moviegrid.catalog.models import EnrichedMovie
from moviegrid.config import Config
from moviegrid.errors import MovieGridError, MovieNotFoundError
from moviegrid.service import MovieService, open_service
from moviegrid.util.logging import get_logger

LOG = get_logger(__name__)


class SearchRequest(BaseModel):
    query: str


def create_app(cfg: Config, service: MovieService | None = None) -> FastAPI:
    """Build the HTTP app. Pass ``service`` to skip opening real upstream clients."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if service is not None:
            app.state.service = service
            yield
            return
        async with open_service(cfg) as opened:
            app.state.service = opened
            yield

    app = FastAPI(title="moviegrid", lifespan=lifespan)
    request_timeout = cfg.http.request_timeout_seconds

    def _service(request: Request) -> MovieService:
        return request.app.state.service

    async def _movie_list(
        name: str, op: Callable[[], Awaitable[list[EnrichedMovie]]]
    ) -> list[dict]:
        try:
            async with asyncio.timeout(request_timeout):
                movies = await op()
        except (MovieGridError, TimeoutError):
            LOG.exception("%s failed", name)
            return []
        return [movie.to_dict() for movie in movies]

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok"}

    @app.get("/api/trending")
    async def trending(request: Request) -> list[dict]:
        return await _movie_list("trending", _service(request).landing_page)

    @app.get("/api/recommended")
    async def recommended(request: Request) -> list[dict]:
        return await _movie_list("recommended", _service(request).popular)

    @app.post("/api/gpt")
    async def gpt_search(body: SearchRequest, request: Request) -> list[dict]:
        svc = _service(request)
        if not body.query.strip():
            raise HTTPException(status_code=400, detail="query must not be empty")
        if svc.router is None:
            raise HTTPException(status_code=503, detail="LLM search is not configured")
        return await _movie_list("gpt search", lambda: svc.search(body.query))

    @app.get("/api/movies/{tmdb_id}")
    async def movie(tmdb_id: int, request: Request) -> dict:
        try:
            async with asyncio.timeout(request_timeout):
                found = await _service(request).movie(tmdb_id)
        except MovieNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except (MovieGridError, TimeoutError) as exc:
            LOG.exception("movie %s failed", tmdb_id)
            raise HTTPException(status_code=502, detail="upstream failure") from exc
        return found.to_dict()

    return app
