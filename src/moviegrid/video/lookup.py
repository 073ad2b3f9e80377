from __future__ import annotations

import re
from typing import Protocol
from urllib.parse import quote

import httpx

from moviegrid.errors import UpstreamError
from moviegrid.util.logging import get_logger

LOG = get_logger(__name__)

DEFAULT_SEARCH_URL = "https://www.youtube.com/results?search_query="
VIDEO_ID_PATTERN = re.compile(r'"videoId":"([A-Za-z0-9_-]{11})"')


class VideoLookup(Protocol):
    async def resolve(self, query: str) -> str | None: ...


def extract_video_id(html: str) -> str | None:
    match = VIDEO_ID_PATTERN.search(html)
    if not match:
        return None
    return match.group(1)


class ScrapeVideoLookup:
    """Reads the first video id out of an unauthenticated search results page.

    The page format is unversioned; when it changes every lookup silently
    resolves to ``None``.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        search_url: str = DEFAULT_SEARCH_URL,
        user_agent: str | None = None,
    ) -> None:
        self.http = http
        self.search_url = search_url
        self.headers = {"User-Agent": user_agent} if user_agent else {}

    def url_for(self, query: str) -> str:
        return f"{self.search_url}{quote(query, safe='')}"

    async def resolve(self, query: str) -> str | None:
        url = self.url_for(query)
        LOG.debug("Video search: %s", url)
        try:
            resp = await self.http.get(url, headers=self.headers)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Video search failed for {query!r}: {exc}") from exc
        video_id = extract_video_id(resp.text)
        if video_id is None:
            LOG.info("No videoId found for %r", query)
        return video_id
