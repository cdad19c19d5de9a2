"""Bucketing of three-hour forecast samples into daily summaries.

Days are UTC calendar dates, not the city's local dates.
"""
from __future__ import annotations

from datetime import date, datetime, timezone

from cityweather.models.weather import DailyForecastSummary, ForecastSample

MAX_FORECAST_DAYS = 5
NOON_WINDOW_START_HOUR = 12
NOON_WINDOW_END_HOUR = 14


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def group_by_day(
    samples: list[ForecastSample], *, max_days: int = MAX_FORECAST_DAYS
) -> list[DailyForecastSummary]:
    groups: dict[date, list[ForecastSample]] = {}
    for sample in samples:
        # dict keeps first-insertion order, which is the order days first appear.
        groups.setdefault(_utc(sample.timestamp).date(), []).append(sample)

    summaries: list[DailyForecastSummary] = []
    for day, items in list(groups.items())[:max_days]:
        temps = [s.temp_c for s in items]
        representative = next(
            (
                s
                for s in items
                if NOON_WINDOW_START_HOUR <= _utc(s.timestamp).hour <= NOON_WINDOW_END_HOUR
            ),
            items[0],
        )
        summaries.append(
            DailyForecastSummary(
                date=day,
                min_temp_c=min(temps),
                max_temp_c=max(temps),
                representative_icon=representative.condition_icon,
                representative_timestamp=representative.timestamp,
                description=representative.description,
            )
        )
    return summaries


def first_n_hours(samples: list[ForecastSample], n: int) -> list[ForecastSample]:
    if n < 0:
        raise ValueError("n must not be negative")
    return list(samples[:n])
