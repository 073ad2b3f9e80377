from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class CatalogRecord:
    id: int
    title: str
    release_date: str | None
    vote_average: float | None
    backdrop_path: str | None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CatalogRecord:
        return cls(
            id=int(payload["id"]),
            title=str(payload.get("title") or payload.get("original_title") or ""),
            release_date=payload.get("release_date") or None,
            vote_average=_to_float(payload.get("vote_average")),
            backdrop_path=payload.get("backdrop_path") or None,
        )


@dataclass(frozen=True)
class StreamingProvider:
    provider_id: int
    name: str
    logo_path: str | None
    kind: str
    link: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_id": self.provider_id,
            "provider_name": self.name,
            "logo_path": self.logo_path,
            "type": self.kind,
            "link": self.link,
        }


@dataclass(frozen=True)
class EnrichedMovie:
    id: int
    title: str
    release_date: str | None
    vote_average: float | None
    backdrop_path: str | None
    video_id: str | None
    streaming_provider: StreamingProvider | None

    @classmethod
    def from_record(
        cls,
        record: CatalogRecord,
        video_id: str | None,
        streaming_provider: StreamingProvider | None,
    ) -> EnrichedMovie:
        return cls(
            id=record.id,
            title=record.title,
            release_date=record.release_date,
            vote_average=record.vote_average,
            backdrop_path=record.backdrop_path,
            video_id=video_id,
            streaming_provider=streaming_provider,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "release_date": self.release_date,
            "vote_average": self.vote_average,
            "backdrop_path": self.backdrop_path,
            "youtubeId": self.video_id,
            "streamingProvider": (
                self.streaming_provider.to_dict() if self.streaming_provider else None
            ),
        }


def _to_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
