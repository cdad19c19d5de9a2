from __future__ import annotations

from fastapi import HTTPException, status

from cityweather.core.errors import (
    CityWeatherError,
    InvalidLocationError,
    NetworkError,
    UpstreamError,
)


def http_error_for(error: CityWeatherError, *, provider: str) -> HTTPException:
    if isinstance(error, InvalidLocationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid location coordinates: {error}",
        )
    if isinstance(error, UpstreamError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{provider} responded with HTTP {error.status_code}",
        )
    if isinstance(error, NetworkError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{provider} unavailable",
        )
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"{provider} returned an unexpected response",
    )
