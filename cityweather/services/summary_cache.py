from __future__ import annotations

import json
import logging
import threading
from typing import Any

from cityweather.core.errors import ParsePersistedStateError
from cityweather.models.weather import WeatherSummary
from cityweather.repositories.base import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "weatherSummaries"


def encode_summaries(mapping: dict[str, WeatherSummary]) -> str:
    return json.dumps(
        {
            name: {
                "temp_max": s.temp_max_c,
                "temp_min": s.temp_min_c,
                "weather": s.condition_icon,
            }
            for name, s in mapping.items()
        },
        ensure_ascii=False,
    )


def decode_summaries(raw: str) -> dict[str, WeatherSummary]:
    try:
        data: Any = json.loads(raw)
    except ValueError as e:
        raise ParsePersistedStateError("Persisted summaries are not valid JSON") from e
    if not isinstance(data, dict):
        raise ParsePersistedStateError("Persisted summaries are not a mapping")

    result: dict[str, WeatherSummary] = {}
    for name, entry in data.items():
        try:
            result[str(name)] = WeatherSummary(
                temp_max_c=float(entry["temp_max"]),
                temp_min_c=float(entry["temp_min"]),
                condition_icon=str(entry["weather"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ParsePersistedStateError(f"Malformed summary for {name!r}") from e
    return result


class SummaryCache:
    """City name -> latest :class:`WeatherSummary`, persisted on every write.

    Call :meth:`load_all` once at startup. There is no eviction.
    """

    def __init__(self, store: KeyValueStore, *, key: str = STORAGE_KEY) -> None:
        self._store = store
        self._key = key
        self._lock = threading.Lock()
        self._by_name: dict[str, WeatherSummary] = {}

    def load_all(self) -> dict[str, WeatherSummary]:
        raw = self._store.get_item(self._key)
        loaded: dict[str, WeatherSummary] = {}
        if raw is not None:
            try:
                loaded = decode_summaries(raw)
            except ParsePersistedStateError as e:
                logger.warning("Discarding persisted weather summaries: %s", e)
        with self._lock:
            self._by_name = loaded
            return dict(self._by_name)

    def get(self, name: str) -> WeatherSummary | None:
        with self._lock:
            return self._by_name.get(name)

    def set(self, name: str, summary: WeatherSummary) -> None:
        # Held across persist: disk writes happen in update order.
        with self._lock:
            self._by_name[name] = summary
            self.persist(self._by_name)

    def persist(self, mapping: dict[str, WeatherSummary]) -> None:
        self._store.set_item(self._key, encode_summaries(mapping))

    def snapshot(self) -> dict[str, WeatherSummary]:
        with self._lock:
            return dict(self._by_name)
