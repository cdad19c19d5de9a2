from __future__ import annotations

import logging
from typing import Any

import httpx

from cityweather.core.errors import MalformedResponseError, NetworkError, UpstreamError

logger = logging.getLogger(__name__)

# Query parameters that must never reach the logs.
_REDACTED_PARAMS = frozenset({"appid"})


def _loggable(params: dict[str, Any]) -> dict[str, Any]:
    return {k: ("***" if k in _REDACTED_PARAMS else v) for k, v in params.items()}


async def get_json(client: httpx.AsyncClient, url: str, *, params: dict[str, Any]) -> Any:
    """GET ``url`` and decode the JSON body.

    Transport failures become :class:`NetworkError`, non-2xx answers become
    :class:`UpstreamError` and undecodable bodies become
    :class:`MalformedResponseError`. Nothing is retried.
    """
    logger.debug("GET %s params=%s", url, _loggable(params))
    try:
        resp = await client.get(url, params=params)
    except httpx.RequestError as e:
        logger.warning("Request to %s failed: %s", url, e)
        raise NetworkError(f"Request to {url} failed: {e}") from e

    if not resp.is_success:
        logger.warning("Request to %s returned HTTP %s", url, resp.status_code)
        raise UpstreamError(resp.status_code, resp.text)

    try:
        return resp.json()
    except ValueError as e:
        raise MalformedResponseError(f"Response from {url} is not valid JSON") from e
