from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cityweather.api.deps import get_summary_cache, get_weather_service
from cityweather.api.errors import http_error_for
from cityweather.core.errors import CityWeatherError
from cityweather.schemas.weather import (
    DailyForecastOut,
    ForecastSampleOut,
    WeatherCurrent,
    WeatherDetailResponse,
    WeatherSummaryOut,
)
from cityweather.services.summary_cache import SummaryCache
from cityweather.services.weather import WeatherDetailService

router = APIRouter(prefix="/weather")

UNKNOWN_CITY = "Unknown City"


@router.get("", response_model=WeatherDetailResponse)
async def weather_detail(
    service: Annotated[WeatherDetailService, Depends(get_weather_service)],
    lat: Annotated[str | None, Query(max_length=32)] = None,
    lon: Annotated[str | None, Query(max_length=32)] = None,
    name: Annotated[str, Query(min_length=1, max_length=200)] = UNKNOWN_CITY,
) -> WeatherDetailResponse:
    try:
        detail = await service.load(lat, lon, name)
    except CityWeatherError as e:
        raise http_error_for(e, provider="Weather provider") from e
    return WeatherDetailResponse(
        name=detail.name,
        lat=detail.location.lat,
        lon=detail.location.lon,
        current=WeatherCurrent.model_validate(detail.current),
        daily=[DailyForecastOut.model_validate(d) for d in detail.daily],
        hourly=[ForecastSampleOut.model_validate(s) for s in detail.hourly],
    )


@router.get("/summaries", response_model=dict[str, WeatherSummaryOut])
def weather_summaries(
    cache: Annotated[SummaryCache, Depends(get_summary_cache)],
) -> dict[str, WeatherSummaryOut]:
    return {
        name: WeatherSummaryOut.from_summary(summary)
        for name, summary in sorted(cache.snapshot().items())
    }
