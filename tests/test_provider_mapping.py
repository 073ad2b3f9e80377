from moviegrid.catalog.providers import pick_streaming_provider, region_offers

PAYLOAD = {
    "id": 550,
    "results": {
        "CA": {
            "link": "https://www.themoviedb.org/movie/550/watch?locale=CA",
            "rent": [{"provider_id": 2, "provider_name": "Apple TV", "display_priority": 1}],
            "flatrate": [
                {"provider_id": 337, "provider_name": "Disney Plus", "display_priority": 4},
                {"provider_id": 8, "provider_name": "Netflix", "display_priority": 0, "logo_path": "/n.jpg"},
            ],
        },
        "US": {"buy": [{"provider_id": 3, "provider_name": "Google Play Movies", "display_priority": 2}]},
    },
}


def test_subscription_preferred_over_rent() -> None:
    picked = pick_streaming_provider(region_offers(PAYLOAD, "ca"))
    assert picked is not None
    assert picked.name == "Netflix"
    assert picked.kind == "flatrate"
    assert picked.logo_path == "/n.jpg"
    assert picked.link == "https://www.themoviedb.org/movie/550/watch?locale=CA"


def test_falls_back_to_buy() -> None:
    picked = pick_streaming_provider(region_offers(PAYLOAD, "US"))
    assert picked is not None
    assert picked.provider_id == 3
    assert picked.kind == "buy"


def test_no_offers_in_region() -> None:
    assert pick_streaming_provider(region_offers(PAYLOAD, "FR")) is None
    assert pick_streaming_provider(region_offers({}, "CA")) is None
