from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cityweather.api.deps import get_city_directory, get_settings, get_summary_cache
from cityweather.api.errors import http_error_for
from cityweather.clients.base import CityDirectory
from cityweather.core.config import Settings
from cityweather.core.errors import CityWeatherError
from cityweather.models.city import SortColumn, SortDirection
from cityweather.schemas.cities import CityOut, CityPageResponse, CityRow
from cityweather.services.summary_cache import SummaryCache

router = APIRouter(prefix="/cities")


@router.get("", response_model=CityPageResponse)
async def search_cities(
    directory: Annotated[CityDirectory, Depends(get_city_directory)],
    cache: Annotated[SummaryCache, Depends(get_summary_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
    q: Annotated[str, Query(max_length=200)] = "",
    start: Annotated[int, Query(ge=0)] = 0,
    rows: Annotated[int | None, Query(ge=1, le=100)] = None,
    sort: SortColumn = SortColumn.NAME,
    direction: SortDirection = SortDirection.ASC,
) -> CityPageResponse:
    page_size = rows or settings.page_size
    try:
        page = await directory.search_cities(
            q.strip(),
            offset=start,
            page_size=page_size,
            sort_column=sort,
            sort_direction=direction,
        )
    except CityWeatherError as e:
        raise http_error_for(e, provider="City directory") from e
    return CityPageResponse(
        rows=[CityRow.build(city, cache.get(city.name)) for city in page.records],
        total_count=max(page.total_count, 0),
        next_offset=start + page_size,
        has_more=len(page.records) == page_size,
    )


@router.get("/suggest", response_model=list[CityOut])
async def suggest_cities(
    directory: Annotated[CityDirectory, Depends(get_city_directory)],
    settings: Annotated[Settings, Depends(get_settings)],
    q: Annotated[str, Query(max_length=200)] = "",
    limit: Annotated[int | None, Query(ge=1, le=20)] = None,
) -> list[CityOut]:
    try:
        found = await directory.suggest_cities(q, limit=limit or settings.suggestion_limit)
    except CityWeatherError as e:
        raise http_error_for(e, provider="City directory") from e
    return [CityOut.model_validate(city) for city in found]
