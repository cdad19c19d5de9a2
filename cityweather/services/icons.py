from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConditionIcon:
    symbol: str
    label: str


DEFAULT_ICON = ConditionIcon(symbol="cloud", label="Unknown")

# OpenWeatherMap icon codes: two digits for the condition, "d"/"n" for day/night.
_BY_CONDITION: dict[str, ConditionIcon] = {
    "01": ConditionIcon(symbol="sun", label="Clear sky"),
    "02": ConditionIcon(symbol="cloud-sun", label="Few clouds"),
    "03": ConditionIcon(symbol="cloud-sun", label="Scattered clouds"),
    "04": ConditionIcon(symbol="cloud-sun", label="Broken clouds"),
    "09": ConditionIcon(symbol="cloud-drizzle", label="Shower rain"),
    "10": ConditionIcon(symbol="cloud-rain", label="Rain"),
    "11": ConditionIcon(symbol="cloud-lightning", label="Thunderstorm"),
    "13": ConditionIcon(symbol="cloud-snow", label="Snow"),
    "50": ConditionIcon(symbol="cloud", label="Mist"),
}

CONDITION_ICONS: dict[str, ConditionIcon] = {
    f"{condition}{period}": icon
    for condition, icon in _BY_CONDITION.items()
    for period in ("d", "n")
}

# Glyphs used by the HTML views.
SYMBOL_GLYPHS: dict[str, str] = {
    "sun": "☀",
    "cloud-sun": "⛅",
    "cloud-drizzle": "\U0001f326",
    "cloud-rain": "\U0001f327",
    "cloud-lightning": "⛈",
    "cloud-snow": "\U0001f328",
    "cloud": "☁",
}


def icon_for(code: str | None) -> ConditionIcon:
    if not code:
        return DEFAULT_ICON
    return CONDITION_ICONS.get(code, DEFAULT_ICON)


def glyph_for(code: str | None) -> str:
    return SYMBOL_GLYPHS[icon_for(code).symbol]
