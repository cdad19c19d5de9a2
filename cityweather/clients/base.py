from __future__ import annotations

from typing import Protocol

from cityweather.models.city import CityPage, CityRecord, SortColumn, SortDirection
from cityweather.models.weather import ForecastSample, WeatherSnapshot


class CityDirectory(Protocol):
    async def search_cities(
        self,
        query: str = "",
        *,
        offset: int = 0,
        page_size: int = 20,
        sort_column: SortColumn = SortColumn.NAME,
        sort_direction: SortDirection = SortDirection.ASC,
    ) -> CityPage: ...

    async def suggest_cities(self, prefix: str, *, limit: int = 5) -> list[CityRecord]: ...


class WeatherProvider(Protocol):
    async def fetch_current_weather(self, lat: float, lon: float) -> WeatherSnapshot: ...

    async def fetch_forecast(self, lat: float, lon: float) -> list[ForecastSample]: ...
