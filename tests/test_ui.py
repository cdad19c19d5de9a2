from __future__ import annotations

from fastapi.testclient import TestClient

from cityweather.core.errors import UpstreamError
from tests.fakes import FakeCityDirectory, FakeWeatherProvider


def test_root_redirects_to_listing(client: TestClient) -> None:
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/ui/"


def test_listing_renders_first_page(client: TestClient) -> None:
    resp = client.get("/ui/")
    assert resp.status_code == 200
    assert "City 0000" in resp.text
    assert "City 0005" not in resp.text
    assert 'id="load-more"' in resp.text


def test_listing_pages_accumulate(client: TestClient, directory: FakeCityDirectory) -> None:
    resp = client.get("/ui/", params={"pages": 2})
    assert resp.status_code == 200
    assert "City 0009" in resp.text
    assert [c.offset for c in directory.calls] == [0, 5]


def test_listing_links_to_detail_view(client: TestClient) -> None:
    resp = client.get("/ui/", params={"q": "London"})
    assert "/ui/weather?lat=" in resp.text
    assert "name=London" in resp.text
    assert "No more cities to load" in resp.text


def test_listing_shows_weather_after_detail_visit(client: TestClient) -> None:
    detail = client.get("/ui/weather", params={"lat": "48.85", "lon": "2.35", "name": "London"})
    assert detail.status_code == 200

    listing = client.get("/ui/", params={"q": "London"})
    assert "10.2° - 14.8°" in listing.text


def test_listing_empty_result_offers_clear(client: TestClient) -> None:
    resp = client.get("/ui/", params={"q": "Atlantis"})
    assert "No cities found" in resp.text
    assert "Clear search" in resp.text


def test_listing_failure_shows_notification(
    client: TestClient, directory: FakeCityDirectory
) -> None:
    directory.error = UpstreamError(500, "boom")
    resp = client.get("/ui/")
    assert resp.status_code == 200
    assert "Failed to load cities" in resp.text


def test_detail_invalid_location_renders_error_view(
    client: TestClient, provider: FakeWeatherProvider
) -> None:
    resp = client.get("/ui/weather", params={"lat": "200", "lon": "10", "name": "Nowhere"})
    assert resp.status_code == 400
    assert "Invalid location coordinates" in resp.text
    assert "Back to Cities" in resp.text
    assert provider.current_calls == []


def test_detail_upstream_failure_offers_retry(
    client: TestClient, provider: FakeWeatherProvider
) -> None:
    provider.error = UpstreamError(500, "boom")
    resp = client.get("/ui/weather", params={"lat": "48.85", "lon": "2.35", "name": "Paris"})
    assert resp.status_code == 502
    assert "Try Again" in resp.text


def test_detail_renders_forecast(client: TestClient) -> None:
    resp = client.get("/ui/weather", params={"lat": "48.85", "lon": "2.35", "name": "Paris"})
    assert resp.status_code == 200
    assert "5-day forecast" in resp.text
    assert "Broken clouds" in resp.text


def test_picked_suggestion_is_pinned_as_only_row(
    client: TestClient, directory: FakeCityDirectory
) -> None:
    resp = client.get("/ui/", params={"q": "Par", "pin": "rec-0101"})

    assert resp.status_code == 200
    assert "United States" in resp.text
    assert "France" not in resp.text
    assert "Parma" not in resp.text
    assert 'id="load-more"' not in resp.text
    assert "No more cities to load" in resp.text
    assert 'value="Paris"' in resp.text
    assert directory.suggest_calls == ["Par"]
    assert directory.calls == []


def test_unknown_pin_falls_back_to_search(
    client: TestClient, directory: FakeCityDirectory
) -> None:
    resp = client.get("/ui/", params={"q": "Par", "pin": "rec-9999"})

    assert resp.status_code == 200
    assert "Parma" in resp.text
    assert [c.query for c in directory.calls] == ["Par"]


def test_listing_suggestion_links_carry_pin(client: TestClient) -> None:
    resp = client.get("/ui/")
    assert "pin: c.id" in resp.text
