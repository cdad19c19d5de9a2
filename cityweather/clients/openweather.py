from __future__ import annotations

from typing import Any

import httpx

from cityweather.clients.http import get_json
from cityweather.core.config import OPENWEATHER_API_URL
from cityweather.core.errors import MalformedResponseError
from cityweather.models.weather import ForecastSample, WeatherSnapshot

KELVIN_OFFSET = 273.15
MAX_FORECAST_SAMPLES = 40


def kelvin_to_celsius(kelvin: float) -> float:
    return round(float(kelvin) - KELVIN_OFFSET, 2)


class OpenWeatherClient:
    """OpenWeatherMap 2.5 client.

    No ``units`` parameter is sent, so the API answers in Kelvin; every
    temperature is converted to Celsius here, once, before it leaves the
    client.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float | None = None,
        base_url: str = OPENWEATHER_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> OpenWeatherClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _params(self, lat: float, lon: float) -> dict[str, Any]:
        return {"lat": lat, "lon": lon, "appid": self._api_key}

    async def fetch_current_weather(self, lat: float, lon: float) -> WeatherSnapshot:
        payload = await get_json(
            self._client, f"{self._base_url}/weather", params=self._params(lat, lon)
        )
        try:
            main: dict[str, Any] = payload["main"]
            condition = _first_condition(payload)
            wind: dict[str, Any] = payload.get("wind") or {}
            sys: dict[str, Any] = payload.get("sys") or {}
            return WeatherSnapshot(
                city_name=str(payload.get("name") or ""),
                country_code=sys.get("country"),
                observed_at=int(payload["dt"]),
                temperature_c=kelvin_to_celsius(main["temp"]),
                feels_like_c=kelvin_to_celsius(main.get("feels_like", main["temp"])),
                temp_min_c=kelvin_to_celsius(main.get("temp_min", main["temp"])),
                temp_max_c=kelvin_to_celsius(main.get("temp_max", main["temp"])),
                pressure_hpa=int(main.get("pressure", 0)),
                humidity_pct=int(main.get("humidity", 0)),
                wind_speed_ms=float(wind.get("speed", 0.0)),
                condition_icon=str(condition.get("icon", "")),
                condition_main=str(condition.get("main", "")),
                description=str(condition.get("description", "")),
                sunrise=_int_or_none(sys.get("sunrise")),
                sunset=_int_or_none(sys.get("sunset")),
                wind_deg=_float_or_none(wind.get("deg")),
                visibility_m=_int_or_none(payload.get("visibility")),
                timezone_offset_s=int(payload.get("timezone") or 0),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedResponseError(f"Unexpected current weather shape: {e}") from e

    async def fetch_forecast(self, lat: float, lon: float) -> list[ForecastSample]:
        payload = await get_json(
            self._client, f"{self._base_url}/forecast", params=self._params(lat, lon)
        )
        try:
            items = payload["list"]
            if not isinstance(items, list):
                raise TypeError("forecast list is not a list")
            return [_parse_sample(item) for item in items[:MAX_FORECAST_SAMPLES]]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedResponseError(f"Unexpected forecast shape: {e}") from e


def _parse_sample(item: dict[str, Any]) -> ForecastSample:
    main: dict[str, Any] = item["main"]
    condition = _first_condition(item)
    wind: dict[str, Any] = item.get("wind") or {}
    return ForecastSample(
        timestamp=int(item["dt"]),
        temp_c=kelvin_to_celsius(main["temp"]),
        temp_min_c=kelvin_to_celsius(main.get("temp_min", main["temp"])),
        temp_max_c=kelvin_to_celsius(main.get("temp_max", main["temp"])),
        condition_icon=str(condition.get("icon", "")),
        description=str(condition.get("description", "")),
        humidity_pct=_int_or_none(main.get("humidity")),
        wind_speed_ms=_float_or_none(wind.get("speed")),
        pop=_float_or_none(item.get("pop")),
    )


def _first_condition(payload: dict[str, Any]) -> dict[str, Any]:
    conditions = payload.get("weather")
    if not isinstance(conditions, list) or not conditions:
        raise KeyError("weather")
    first = conditions[0]
    if not isinstance(first, dict):
        raise TypeError("weather entry is not an object")
    return first


def _float_or_none(v: Any) -> float | None:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None


def _int_or_none(v: Any) -> int | None:
    try:
        if v is None:
            return None
        return int(v)
    except (TypeError, ValueError):
        return None
