from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from cityweather.clients.base import CityDirectory
from cityweather.core.errors import CityWeatherError
from cityweather.models.city import (
    CityRecord,
    PageState,
    SearchQueryState,
    SortColumn,
    SortDirection,
)
from cityweather.models.weather import WeatherSummary
from cityweather.services.notifications import LoggingNotifier, Notifier
from cityweather.services.summary_cache import SummaryCache

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
LOAD_FAILED_MESSAGE = "Failed to load cities. Please try again."


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EXHAUSTED = "exhausted"
    ERROR = "error"


@dataclass(frozen=True)
class ListingRow:
    city: CityRecord
    summary: WeatherSummary | None


class PagedSearchController:
    """Query, sort and infinite-scroll state for the city listing.

    Every change to the query or sort bumps ``generation``. A fetch remembers
    the generation it was issued under and its result is dropped if the
    generation has moved on by the time it completes.
    """

    def __init__(
        self,
        *,
        directory: CityDirectory,
        cache: SummaryCache | None = None,
        notifier: Notifier | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._directory = directory
        self._cache = cache
        self._notifier = notifier or LoggingNotifier()
        self._page_size = page_size

        self.query = SearchQueryState()
        self.page = PageState()
        self.status = SearchStatus.IDLE
        self.generation = 0
        self.last_error: CityWeatherError | None = None
        self._observed_row_id: str | None = None

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def observed_row_id(self) -> str | None:
        return self._observed_row_id

    async def set_query(self, text: str) -> None:
        self.query = replace(self.query, text=text)
        await self._restart()

    async def clear_search(self) -> None:
        await self.set_query("")

    async def set_sort(self, column: SortColumn) -> None:
        # Clicking the active column flips direction; a new column starts ascending.
        if column == self.query.sort_column:
            direction = self.query.sort_direction.flipped()
        else:
            direction = SortDirection.ASC
        await self.set_sort_direction(column, direction)

    async def set_sort_direction(self, column: SortColumn, direction: SortDirection) -> None:
        self.query = replace(self.query, sort_column=column, sort_direction=direction)
        await self._restart()

    async def set_state(self, query: SearchQueryState) -> None:
        self.query = query
        await self._restart()

    async def load_next_page(self) -> bool:
        """Fetch the next page unless one is in flight or the listing is exhausted.

        Returns whether a fetch was issued.
        """
        if not self.page.has_more or self.page.is_loading:
            return False
        await self._load(reset=False)
        return True

    async def on_row_visible(self, row_id: str) -> bool:
        if row_id != self._observed_row_id:
            return False
        return await self.load_next_page()

    def pin(self, record: CityRecord) -> None:
        self.generation += 1
        self.page = PageState(
            items=[record],
            next_offset=0,
            has_more=False,
            is_loading=False,
        )
        self.status = SearchStatus.EXHAUSTED
        self._rearm()

    def rows(self) -> list[ListingRow]:
        return [
            ListingRow(
                city=city,
                summary=self._cache.get(city.name) if self._cache is not None else None,
            )
            for city in self.page.items
        ]

    async def _restart(self) -> None:
        self.generation += 1
        self.page = PageState()
        self._rearm()
        await self._load(reset=True)

    async def _load(self, *, reset: bool) -> None:
        generation = self.generation
        query = self.query
        offset = 0 if reset else self.page.next_offset

        self.page.is_loading = True
        self.status = SearchStatus.LOADING
        try:
            result = await self._directory.search_cities(
                query.text,
                offset=offset,
                page_size=self._page_size,
                sort_column=query.sort_column,
                sort_direction=query.sort_direction,
            )
        except CityWeatherError as e:
            if generation != self.generation:
                logger.debug("Dropping failure of superseded search %r: %s", query.text, e)
                return
            logger.warning("City search %r at offset %d failed: %s", query.text, offset, e)
            self.page.is_loading = False
            self.status = SearchStatus.ERROR
            self.last_error = e
            self._notifier.notify(LOAD_FAILED_MESSAGE)
            return

        if generation != self.generation:
            logger.debug(
                "Dropping stale results for %r (generation %d, current %d)",
                query.text,
                generation,
                self.generation,
            )
            return

        records = result.records
        if reset:
            items = list(records)
        else:
            seen = {c.id for c in self.page.items}
            items = self.page.items + [r for r in records if r.id not in seen]

        has_more = len(records) == self._page_size
        self.page = PageState(
            items=items,
            next_offset=offset + self._page_size,
            has_more=has_more,
            is_loading=False,
        )
        self.last_error = None
        self.status = SearchStatus.LOADED if has_more else SearchStatus.EXHAUSTED
        self._rearm()

    def _rearm(self) -> None:
        self._observed_row_id = self.page.items[-1].id if self.page.items else None
