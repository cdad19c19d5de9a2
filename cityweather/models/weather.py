from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float


@dataclass(frozen=True)
class WeatherSnapshot:
    city_name: str
    country_code: str | None
    observed_at: int

    temperature_c: float
    feels_like_c: float
    temp_min_c: float
    temp_max_c: float
    pressure_hpa: int
    humidity_pct: int
    wind_speed_ms: float

    condition_icon: str
    condition_main: str
    description: str

    sunrise: int | None = None
    sunset: int | None = None
    wind_deg: float | None = None
    visibility_m: int | None = None
    timezone_offset_s: int = 0


@dataclass(frozen=True)
class ForecastSample:
    timestamp: int
    temp_c: float
    temp_min_c: float
    temp_max_c: float
    condition_icon: str

    description: str = ""
    humidity_pct: int | None = None
    wind_speed_ms: float | None = None
    pop: float | None = None


@dataclass(frozen=True)
class DailyForecastSummary:
    date: date
    min_temp_c: float
    max_temp_c: float
    representative_icon: str
    representative_timestamp: int
    description: str = ""


@dataclass(frozen=True)
class WeatherSummary:
    temp_max_c: float
    temp_min_c: float
    condition_icon: str


@dataclass(frozen=True)
class WeatherDetail:
    location: Location
    name: str
    current: WeatherSnapshot
    daily: list[DailyForecastSummary]
    hourly: list[ForecastSample]
