from __future__ import annotations

import asyncio
import logging
import math

from cityweather.clients.base import WeatherProvider
from cityweather.core.errors import InvalidLocationError
from cityweather.models.weather import Location, WeatherDetail, WeatherSummary
from cityweather.services.forecast import first_n_hours, group_by_day
from cityweather.services.summary_cache import SummaryCache

logger = logging.getLogger(__name__)

DEFAULT_HOURLY_SAMPLES = 8


def parse_location(lat: str | float | None, lon: str | float | None) -> Location:
    """Validate the ``lat``/``lon`` pair carried by a detail-view link."""
    if lat is None or lon is None or lat == "" or lon == "":
        raise InvalidLocationError("Missing location coordinates")
    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError) as e:
        raise InvalidLocationError("Location coordinates are not numbers") from e
    if math.isnan(lat_f) or math.isnan(lon_f):
        raise InvalidLocationError("Location coordinates are not numbers")
    if not -90.0 <= lat_f <= 90.0:
        raise InvalidLocationError(f"Latitude {lat_f} is outside [-90, 90]")
    if not -180.0 <= lon_f <= 180.0:
        raise InvalidLocationError(f"Longitude {lon_f} is outside [-180, 180]")
    return Location(lat=lat_f, lon=lon_f)


class WeatherDetailService:
    def __init__(
        self,
        *,
        provider: WeatherProvider,
        cache: SummaryCache | None = None,
        hourly_samples: int = DEFAULT_HOURLY_SAMPLES,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._hourly_samples = hourly_samples

    async def load(
        self, lat: str | float | None, lon: str | float | None, name: str
    ) -> WeatherDetail:
        location = parse_location(lat, lon)

        current, forecast = await asyncio.gather(
            self._provider.fetch_current_weather(location.lat, location.lon),
            self._provider.fetch_forecast(location.lat, location.lon),
        )

        if self._cache is not None:
            self._cache.set(
                name,
                WeatherSummary(
                    temp_max_c=current.temp_max_c,
                    temp_min_c=current.temp_min_c,
                    condition_icon=current.condition_icon,
                ),
            )
        logger.debug("Loaded weather for %s at %s,%s", name, location.lat, location.lon)

        return WeatherDetail(
            location=location,
            name=name,
            current=current,
            daily=group_by_day(forecast),
            hourly=first_n_hours(forecast, self._hourly_samples),
        )
