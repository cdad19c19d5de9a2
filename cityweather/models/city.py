from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SortColumn(str, Enum):
    NAME = "name"
    COUNTRY = "country"
    TIMEZONE = "timezone"
    POPULATION = "population"

    @property
    def wire_field(self) -> str:
        # The directory names the country column after its English label field.
        if self is SortColumn.COUNTRY:
            return "cou_name_en"
        return self.value


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class CityRecord:
    id: str
    name: str
    country_name: str
    timezone: str
    # (longitude, latitude), the order the directory returns them in.
    coordinates: tuple[float, float]
    population: int

    elevation: int | None = None
    feature_code: str | None = None
    geoname_id: int | None = None
    modification_date: str | None = None

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


@dataclass(frozen=True)
class CityPage:
    records: list[CityRecord]
    total_count: int


@dataclass(frozen=True)
class SearchQueryState:
    text: str = ""
    sort_column: SortColumn = SortColumn.NAME
    sort_direction: SortDirection = SortDirection.ASC


@dataclass
class PageState:
    items: list[CityRecord] = field(default_factory=list)
    next_offset: int = 0
    has_more: bool = True
    is_loading: bool = False
