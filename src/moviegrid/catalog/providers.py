from __future__ import annotations

from typing import Any, Mapping

from moviegrid.catalog.models import StreamingProvider

# Offer kinds in TMDB watch/providers payloads, most preferred first.
PROVIDER_KINDS: tuple[str, ...] = ("flatrate", "free", "ads", "rent", "buy")


def region_offers(payload: Mapping[str, Any], region: str) -> Mapping[str, Any]:
    results = payload.get("results") or {}
    return results.get(region.upper()) or {}


def pick_streaming_provider(offers: Mapping[str, Any]) -> StreamingProvider | None:
    """Choose one provider from a single region's offers.

    Subscription beats free, free beats ad-supported, then rent and buy.
    Within a kind the lowest ``display_priority`` wins.
    """
    link = offers.get("link") or None
    for kind in PROVIDER_KINDS:
        entries = [e for e in offers.get(kind) or [] if e.get("provider_id") is not None]
        if not entries:
            continue
        best = min(entries, key=lambda e: e.get("display_priority", 1_000_000))
        return StreamingProvider(
            provider_id=int(best["provider_id"]),
            name=str(best.get("provider_name") or "").strip() or "unknown",
            logo_path=best.get("logo_path") or None,
            kind=kind,
            link=link,
        )
    return None
