"""Error taxonomy shared by the gateway, the controllers and the HTTP surface."""
from __future__ import annotations


class CityWeatherError(Exception):
    """Base class for every recoverable failure in the viewer."""


class NetworkError(CityWeatherError):
    """The request was rejected before any response arrived."""


class UpstreamError(CityWeatherError):
    """The upstream API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Upstream responded with HTTP {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body


class MalformedResponseError(CityWeatherError):
    """The upstream payload did not have the expected shape."""


class InvalidLocationError(CityWeatherError):
    """Coordinates are missing or outside the valid latitude/longitude range."""


class ParsePersistedStateError(CityWeatherError):
    """The locally persisted summary blob could not be decoded."""
