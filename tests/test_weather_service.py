from __future__ import annotations

import pytest

from cityweather.core.errors import InvalidLocationError, UpstreamError
from cityweather.models.weather import Location, WeatherSummary
from cityweather.services.summary_cache import SummaryCache
from cityweather.services.weather import WeatherDetailService, parse_location
from tests.fakes import FakeKeyValueStore, FakeWeatherProvider


@pytest.mark.parametrize(
    ("lat", "lon"),
    [
        (None, "2.35"),
        ("48.85", None),
        ("", "2.35"),
        ("north", "2.35"),
        ("nan", "2.35"),
        ("200", "2.35"),
        ("-90.5", "2.35"),
        ("48.85", "180.01"),
        ("48.85", "-200"),
    ],
)
def test_parse_location_rejects_invalid(lat: str | None, lon: str | None) -> None:
    with pytest.raises(InvalidLocationError):
        parse_location(lat, lon)


def test_parse_location_accepts_bounds_and_zero() -> None:
    assert parse_location("90", "-180") == Location(lat=90.0, lon=-180.0)
    assert parse_location("0", "0") == Location(lat=0.0, lon=0.0)
    assert parse_location(48.85, 2.35) == Location(lat=48.85, lon=2.35)


@pytest.mark.asyncio
async def test_invalid_location_never_reaches_the_network() -> None:
    provider = FakeWeatherProvider()
    cache = SummaryCache(FakeKeyValueStore())
    service = WeatherDetailService(provider=provider, cache=cache)

    with pytest.raises(InvalidLocationError):
        await service.load("200", "2.35", "Nowhere")

    assert provider.current_calls == []
    assert provider.forecast_calls == []
    assert cache.get("Nowhere") is None


@pytest.mark.asyncio
async def test_load_builds_detail_and_writes_summary() -> None:
    provider = FakeWeatherProvider()
    cache = SummaryCache(FakeKeyValueStore())
    service = WeatherDetailService(provider=provider, cache=cache, hourly_samples=8)

    detail = await service.load("48.85", "2.35", "Paris")

    assert provider.current_calls == [(48.85, 2.35)]
    assert provider.forecast_calls == [(48.85, 2.35)]
    assert detail.name == "Paris"
    assert detail.location == Location(lat=48.85, lon=2.35)
    assert len(detail.daily) == 5
    assert len(detail.hourly) == 8
    assert cache.get("Paris") == WeatherSummary(
        temp_max_c=14.75, temp_min_c=10.25, condition_icon="04d"
    )


@pytest.mark.asyncio
async def test_repeated_visits_store_same_celsius_values() -> None:
    provider = FakeWeatherProvider()
    cache = SummaryCache(FakeKeyValueStore())
    service = WeatherDetailService(provider=provider, cache=cache)

    await service.load("48.85", "2.35", "Paris")
    first = cache.get("Paris")
    await service.load("48.85", "2.35", "Paris")

    assert cache.get("Paris") == first
    assert first is not None and first.temp_max_c == provider.snapshot.temp_max_c


@pytest.mark.asyncio
async def test_upstream_failure_leaves_cache_untouched() -> None:
    provider = FakeWeatherProvider(error=UpstreamError(502, "bad gateway"))
    store = FakeKeyValueStore()
    service = WeatherDetailService(provider=provider, cache=SummaryCache(store))

    with pytest.raises(UpstreamError):
        await service.load("48.85", "2.35", "Paris")

    assert store.writes == 0
