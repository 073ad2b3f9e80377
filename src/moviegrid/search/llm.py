from __future__ import annotations

import json
import re

import httpx

from moviegrid.catalog.models import EnrichedMovie
from moviegrid.errors import MovieNotFoundError, UpstreamError
from moviegrid.movies.enrich import MovieEnricher
from moviegrid.util.concurrency import gather_all
from moviegrid.util.logging import get_logger

LOG = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a movie recommendation assistant. Reply with a JSON array of at most "
    "{max_titles} movie titles that match the user's request, most relevant first. "
    "Use the original release title. Reply with the JSON array only."
)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")
_LIST_PREFIX_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")
_YEAR_SUFFIX_RE = re.compile(r"\s*\((?:19|20)\d{2}\)\s*$")


def parse_titles(content: str, max_titles: int = 10) -> list[str]:
    """Pull movie titles out of a model reply.

    Accepts a JSON array (of strings or ``{"title": ...}`` objects), optionally
    inside a code fence, or one title per line.
    """
    text = _FENCE_RE.sub("", content.strip()).strip()
    raw: list[str] = []
    try:
        decoded = json.loads(text)
    except ValueError:
        decoded = None

    if isinstance(decoded, dict):
        decoded = decoded.get("titles") or decoded.get("movies")
    if isinstance(decoded, list):
        for item in decoded:
            if isinstance(item, dict):
                item = item.get("title")
            if isinstance(item, str):
                raw.append(item)
    else:
        raw = [_LIST_PREFIX_RE.sub("", line) for line in text.splitlines()]

    titles: list[str] = []
    seen: set[str] = set()
    for item in raw:
        title = _YEAR_SUFFIX_RE.sub("", item.strip().strip('"').strip())
        key = title.lower()
        if not title or key in seen:
            continue
        seen.add(key)
        titles.append(title)
        if len(titles) >= max_titles:
            break
    return titles


class QueryRouter:
    """Forwards free-text queries to an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        model: str,
        max_titles: int = 10,
    ) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.max_titles = max_titles

    async def suggest_titles(self, query: str) -> list[str]:
        query = query.strip()
        if not query:
            raise ValueError("query must not be empty")
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT.format(max_titles=self.max_titles)},
                {"role": "user", "content": query},
            ],
        }
        try:
            resp = await self.http.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=body,
            )
            resp.raise_for_status()
            content = resp.json()["choices"][0]["message"]["content"]
        except httpx.HTTPError as exc:
            raise UpstreamError(f"LLM request failed: {exc}") from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise UpstreamError(f"Unexpected LLM response: {exc}") from exc

        titles = parse_titles(content or "", self.max_titles)
        LOG.info("LLM suggested %s titles for %r", len(titles), query)
        return titles

    async def search(self, query: str, enricher: MovieEnricher) -> list[EnrichedMovie]:
        titles = await self.suggest_titles(query)
        found = await gather_all(self._lookup(title, enricher) for title in titles)
        return [movie for movie in found if movie is not None]

    async def _lookup(self, title: str, enricher: MovieEnricher) -> EnrichedMovie | None:
        try:
            return await enricher.from_title(title)
        except MovieNotFoundError:
            LOG.info("Catalog has no match for suggested title %r", title)
            return None
