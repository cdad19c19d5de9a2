from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from cityweather.clients.base import CityDirectory, WeatherProvider
from cityweather.core.config import Settings
from cityweather.services.summary_cache import SummaryCache
from cityweather.services.weather import WeatherDetailService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_city_directory(request: Request) -> CityDirectory:
    return request.app.state.city_directory


def get_weather_provider(request: Request) -> WeatherProvider:
    return request.app.state.weather_provider


def get_summary_cache(request: Request) -> SummaryCache:
    return request.app.state.summary_cache


def get_weather_service(
    provider: Annotated[WeatherProvider, Depends(get_weather_provider)],
    cache: Annotated[SummaryCache, Depends(get_summary_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WeatherDetailService:
    return WeatherDetailService(
        provider=provider, cache=cache, hourly_samples=settings.hourly_samples
    )
