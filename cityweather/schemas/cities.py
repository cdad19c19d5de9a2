from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cityweather.models.city import CityRecord
from cityweather.models.weather import WeatherSummary
from cityweather.schemas.weather import WeatherSummaryOut


class CityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    country_name: str
    timezone: str
    longitude: float
    latitude: float
    population: int = Field(ge=0)

    elevation: int | None = None
    feature_code: str | None = None
    geoname_id: int | None = None
    modification_date: str | None = None


class CityRow(BaseModel):
    city: CityOut
    weather: WeatherSummaryOut | None = None

    @classmethod
    def build(cls, city: CityRecord, summary: WeatherSummary | None) -> CityRow:
        return cls(
            city=CityOut.model_validate(city),
            weather=WeatherSummaryOut.from_summary(summary) if summary is not None else None,
        )


class CityPageResponse(BaseModel):
    rows: list[CityRow] = Field(default_factory=list)
    total_count: int = Field(ge=0)
    next_offset: int = Field(ge=0)
    has_more: bool
