from __future__ import annotations

import logging
from dataclasses import replace
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status

from cityweather.api.deps import (
    get_city_directory,
    get_settings,
    get_summary_cache,
    get_weather_service,
)
from cityweather.clients.base import CityDirectory
from cityweather.core.config import Settings
from cityweather.core.errors import CityWeatherError, InvalidLocationError
from cityweather.models.city import CityRecord, SearchQueryState, SortColumn, SortDirection
from cityweather.services.notifications import CollectingNotifier, Notifier
from cityweather.services.search import PagedSearchController
from cityweather.services.suggestions import SuggestionController
from cityweather.services.summary_cache import SummaryCache
from cityweather.services.weather import WeatherDetailService
from cityweather.web.templates import templates

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PAGES = 50
UNKNOWN_CITY = "Unknown City"

SORT_LABELS: dict[SortColumn, str] = {
    SortColumn.NAME: "City Name",
    SortColumn.COUNTRY: "Country",
    SortColumn.TIMEZONE: "Timezone",
    SortColumn.POPULATION: "Population",
}


def _listing_url(query: SearchQueryState, pages: int = 1) -> str:
    params: dict[str, str | int] = {
        "sort": query.sort_column.value,
        "direction": query.sort_direction.value,
    }
    if query.text:
        params["q"] = query.text
    if pages > 1:
        params["pages"] = pages
    return f"/ui/?{urlencode(params)}"


def _sort_links(query: SearchQueryState) -> list[dict[str, object]]:
    links = []
    for column, label in SORT_LABELS.items():
        active = column == query.sort_column
        direction = query.sort_direction.flipped() if active else SortDirection.ASC
        links.append(
            {
                "label": label,
                "active": active,
                "direction": query.sort_direction.value if active else None,
                "url": _listing_url(
                    SearchQueryState(
                        text=query.text, sort_column=column, sort_direction=direction
                    )
                ),
            }
        )
    return links


def weather_url(city: CityRecord) -> str:
    return "/ui/weather?" + urlencode(
        {"lat": city.latitude, "lon": city.longitude, "name": city.name}
    )


async def _select_suggestion(
    search: PagedSearchController,
    directory: CityDirectory,
    settings: Settings,
    notifier: Notifier,
    text: str,
    record_id: str,
) -> CityRecord | None:
    """Replay typing ``text`` and picking suggestion ``record_id``.

    On a match the record is pinned as the only listing row. Returns ``None``
    when the record is no longer among the suggestions for ``text``.
    """
    box = SuggestionController(
        directory=directory,
        search=search,
        notifier=notifier,
        delay=settings.search_debounce_seconds,
        limit=settings.suggestion_limit,
    )
    box.on_input(text)
    try:
        for record in await box.suggestions_ready():
            if record.id == record_id:
                box.select(record)
                return record
    finally:
        box.close()
    logger.info("Suggestion %s not offered for %r", record_id, text)
    return None


@router.get("/")
async def cities_page(
    request: Request,
    directory: Annotated[CityDirectory, Depends(get_city_directory)],
    cache: Annotated[SummaryCache, Depends(get_summary_cache)],
    settings: Annotated[Settings, Depends(get_settings)],
    q: Annotated[str, Query(max_length=200)] = "",
    sort: SortColumn = SortColumn.NAME,
    direction: SortDirection = SortDirection.ASC,
    pages: Annotated[int, Query(ge=1, le=MAX_PAGES)] = 1,
    pin: Annotated[str | None, Query(min_length=1, max_length=200)] = None,
):
    notifier = CollectingNotifier()
    controller = PagedSearchController(
        directory=directory, cache=cache, notifier=notifier, page_size=settings.page_size
    )
    query = SearchQueryState(text=q.strip(), sort_column=sort, sort_direction=direction)
    pinned = None
    if pin is not None:
        pinned = await _select_suggestion(
            controller, directory, settings, notifier, query.text, pin
        )
    if pinned is not None:
        query = replace(query, text=pinned.name)
    else:
        await controller.set_state(query)
        # Each extra page stands in for one "last row became visible" signal.
        for _ in range(pages - 1):
            row_id = controller.observed_row_id
            if row_id is None or not await controller.on_row_visible(row_id):
                break

    more_url = None
    if controller.page.has_more and controller.last_error is None and pages < MAX_PAGES:
        more_url = _listing_url(query, pages=pages + 1)

    return templates.TemplateResponse(
        request,
        "cities.html",
        {
            "request": request,
            "title": "Weather App",
            "query": query,
            "rows": controller.rows(),
            "status": controller.status.value,
            "has_more": controller.page.has_more,
            "more_url": more_url,
            "sort_links": _sort_links(query),
            "weather_url": weather_url,
            "notifications": notifier.messages,
            "clear_url": _listing_url(SearchQueryState(sort_column=sort, sort_direction=direction)),
        },
    )


@router.get("/weather")
async def weather_page(
    request: Request,
    service: Annotated[WeatherDetailService, Depends(get_weather_service)],
    lat: Annotated[str | None, Query(max_length=32)] = None,
    lon: Annotated[str | None, Query(max_length=32)] = None,
    name: Annotated[str, Query(min_length=1, max_length=200)] = UNKNOWN_CITY,
):
    context: dict[str, object] = {
        "request": request,
        "title": name,
        "name": name,
        "detail": None,
        "error": None,
        "retry_url": None,
    }
    status_code = status.HTTP_200_OK
    try:
        context["detail"] = await service.load(lat, lon, name)
    except InvalidLocationError:
        context["error"] = "Invalid location coordinates"
        status_code = status.HTTP_400_BAD_REQUEST
    except CityWeatherError:
        context["error"] = "Failed to load weather data. Please try again."
        context["retry_url"] = str(request.url)
        status_code = status.HTTP_502_BAD_GATEWAY

    return templates.TemplateResponse(
        request, "weather.html", context, status_code=status_code
    )

