from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from cityweather.models.weather import WeatherSummary
from cityweather.services.icons import icon_for


class WeatherSummaryOut(BaseModel):
    temp_max: float
    temp_min: float
    weather: str
    symbol: str

    @classmethod
    def from_summary(cls, summary: WeatherSummary) -> WeatherSummaryOut:
        return cls(
            temp_max=summary.temp_max_c,
            temp_min=summary.temp_min_c,
            weather=summary.condition_icon,
            symbol=icon_for(summary.condition_icon).symbol,
        )


class WeatherCurrent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    city_name: str
    country_code: str | None = None
    observed_at: int

    temperature_c: float
    feels_like_c: float
    temp_min_c: float
    temp_max_c: float
    pressure_hpa: int
    humidity_pct: int = Field(ge=0)
    wind_speed_ms: float

    condition_icon: str
    condition_main: str
    description: str

    sunrise: int | None = None
    sunset: int | None = None
    wind_deg: float | None = None
    visibility_m: int | None = None
    timezone_offset_s: int = 0


class ForecastSampleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: int
    temp_c: float
    temp_min_c: float
    temp_max_c: float
    condition_icon: str
    description: str = ""
    humidity_pct: int | None = None
    wind_speed_ms: float | None = None
    pop: float | None = None


class DailyForecastOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    min_temp_c: float
    max_temp_c: float
    representative_icon: str
    representative_timestamp: int
    description: str = ""


class WeatherDetailResponse(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    current: WeatherCurrent
    daily: list[DailyForecastOut] = Field(default_factory=list)
    hourly: list[ForecastSampleOut] = Field(default_factory=list)
