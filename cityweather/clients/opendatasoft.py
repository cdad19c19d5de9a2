from __future__ import annotations

from typing import Any

import httpx

from cityweather.clients.http import get_json
from cityweather.core.config import GEONAMES_DATASET, OPENDATASOFT_SEARCH_URL
from cityweather.core.errors import MalformedResponseError
from cityweather.models.city import CityPage, CityRecord, SortColumn, SortDirection

MIN_SUGGESTION_PREFIX = 2
# Full-text matches on other fields (country, alternate names) crowd out name
# prefix matches, so ask for more rows than are shown.
SUGGESTION_ROWS_FACTOR = 10
MAX_SUGGESTION_ROWS = 100


def encode_sort(column: SortColumn, direction: SortDirection) -> str:
    # Wire contract: "-" prefix sorts descending, no prefix sorts ascending.
    if direction is SortDirection.DESC:
        return f"-{column.wire_field}"
    return column.wire_field


class OpenDataSoftCityDirectory:
    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        base_url: str = OPENDATASOFT_SEARCH_URL,
        dataset: str = GEONAMES_DATASET,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._dataset = dataset
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> OpenDataSoftCityDirectory:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def search_cities(
        self,
        query: str = "",
        *,
        offset: int = 0,
        page_size: int = 20,
        sort_column: SortColumn = SortColumn.NAME,
        sort_direction: SortDirection = SortDirection.ASC,
    ) -> CityPage:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if offset < 0:
            raise ValueError("offset must not be negative")

        params: dict[str, Any] = {
            "dataset": self._dataset,
            "rows": page_size,
            "start": offset,
            "sort": encode_sort(sort_column, sort_direction),
        }
        if query:
            params["q"] = query

        payload = await get_json(self._client, self._base_url, params=params)
        records = _parse_records(payload)
        total = payload.get("total_count", len(records))
        if not isinstance(total, int):
            raise MalformedResponseError("total_count is not an integer")
        return CityPage(records=records, total_count=total)

    async def suggest_cities(self, prefix: str, *, limit: int = 5) -> list[CityRecord]:
        prefix = prefix.strip()
        if len(prefix) < MIN_SUGGESTION_PREFIX:
            return []
        if limit <= 0:
            raise ValueError("limit must be positive")

        params: dict[str, Any] = {
            "dataset": self._dataset,
            "rows": max(min(limit * SUGGESTION_ROWS_FACTOR, MAX_SUGGESTION_ROWS), limit),
            "q": prefix,
            "sort": "population",
        }
        payload = await get_json(self._client, self._base_url, params=params)
        needle = prefix.casefold()
        found = [r for r in _parse_records(payload) if r.name.casefold().startswith(needle)]
        return found[:limit]


def _parse_records(payload: Any) -> list[CityRecord]:
    if not isinstance(payload, dict):
        raise MalformedResponseError("City search response is not an object")
    raw = payload.get("records")
    if not isinstance(raw, list):
        raise MalformedResponseError("City search response has no records list")
    return [_parse_city(r) for r in raw]


def _parse_city(record: Any) -> CityRecord:
    try:
        fields: dict[str, Any] = record["fields"]
        lon, lat = fields["coordinates"]
        return CityRecord(
            id=str(record["recordid"]),
            name=str(fields["name"]),
            country_name=str(fields.get("cou_name_en") or ""),
            timezone=str(fields.get("timezone") or ""),
            coordinates=(float(lon), float(lat)),
            population=max(int(fields.get("population") or 0), 0),
            elevation=_int_or_none(fields.get("dem")),
            feature_code=fields.get("feature_code"),
            geoname_id=_int_or_none(fields.get("geoname_id")),
            modification_date=fields.get("modification_date"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponseError(f"Unexpected city record shape: {e}") from e


def _int_or_none(v: Any) -> int | None:
    try:
        if v is None:
            return None
        return int(v)
    except (TypeError, ValueError):
        return None
