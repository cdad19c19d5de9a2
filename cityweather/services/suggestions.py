from __future__ import annotations

import asyncio
import logging

from cityweather.clients.base import CityDirectory
from cityweather.clients.opendatasoft import MIN_SUGGESTION_PREFIX
from cityweather.core.errors import CityWeatherError
from cityweather.models.city import CityRecord
from cityweather.services.debounce import Debouncer
from cityweather.services.notifications import LoggingNotifier, Notifier
from cityweather.services.search import PagedSearchController

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3
DEFAULT_SUGGESTION_LIMIT = 5
SUGGEST_FAILED_MESSAGE = "Failed to load suggestions."


class SuggestionController:
    """Search box state: raw text, debounced listing refresh, autocomplete panel.

    The listing refresh waits for the debounce timer; suggestions are fetched
    on every keystroke once the text is long enough, and each response
    replaces the previous set.
    """

    def __init__(
        self,
        *,
        directory: CityDirectory,
        search: PagedSearchController,
        notifier: Notifier | None = None,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> None:
        self._directory = directory
        self._search = search
        self._notifier = notifier or LoggingNotifier()
        self._limit = limit
        self._debouncer = Debouncer(delay)
        self._suggest_task: asyncio.Task[None] | None = None
        # Strong references; the event loop only keeps weak ones.
        self._suggest_tasks: set[asyncio.Task[None]] = set()
        self._generation = 0

        self.text = ""
        self.suggestions: list[CityRecord] = []
        self.is_open = False

    def on_input(self, text: str) -> None:
        """Handle one keystroke. Must be called from inside the event loop."""
        self.text = text
        self.is_open = True
        self._debouncer.trigger(self._search.set_query, text)

        self._generation += 1
        if len(text.strip()) < MIN_SUGGESTION_PREFIX:
            self.suggestions = []
            return
        task = asyncio.get_running_loop().create_task(
            self._fetch_suggestions(text, self._generation)
        )
        self._suggest_tasks.add(task)
        task.add_done_callback(self._suggest_tasks.discard)
        self._suggest_task = task

    async def _fetch_suggestions(self, text: str, generation: int) -> None:
        try:
            found = await self._directory.suggest_cities(text, limit=self._limit)
        except CityWeatherError as e:
            logger.warning("Suggestions for %r failed: %s", text, e)
            if generation == self._generation:
                self._notifier.notify(SUGGEST_FAILED_MESSAGE)
            return
        if generation != self._generation:
            logger.debug("Dropping stale suggestions for %r", text)
            return
        self.suggestions = found

    def select(self, record: CityRecord) -> None:
        self._debouncer.cancel()
        self._generation += 1
        self.text = record.name
        self.suggestions = []
        self.is_open = False
        self._search.pin(record)

    def dismiss(self) -> None:
        self.is_open = False

    async def suggestions_ready(self) -> list[CityRecord]:
        """Wait for the latest suggestion fetch and return the current set."""
        task = self._suggest_task
        if task is not None and not task.done():
            await asyncio.wait({task})
        return list(self.suggestions)

    async def settle(self) -> None:
        """Wait for the pending listing refresh and the latest suggestion fetch."""
        await self._debouncer.wait()
        await self.suggestions_ready()

    def close(self) -> None:
        """Drop the pending listing refresh and any in-flight suggestion fetches."""
        self._debouncer.cancel()
        for task in list(self._suggest_tasks):
            task.cancel()
        self.is_open = False
