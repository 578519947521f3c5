"""Shared HTTP client utilities for Plex API calls."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, TYPE_CHECKING

import aiohttp
from yarl import URL

from ..const import API_TIMEOUT

if TYPE_CHECKING:
    from aiohttp import ClientSession

_LOGGER = logging.getLogger(__name__)

# Status codes reported when no HTTP response was received
STATUS_TIMEOUT = 408
STATUS_UNREACHABLE = 503


async def _request(
    session: "ClientSession",
    method: str,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = API_TIMEOUT,
) -> tuple[dict[str, Any] | None, int]:
    """Send a request and decode a JSON body when there is one.

    The URL is sent exactly as given: query values are percent-encoded by
    the caller and must not be re-quoted.

    Returns:
        Tuple of (json_data or None, status_code). Successful responses
        without a JSON body yield an empty dict; a JSON body that fails to
        decode yields None with the response status.
    """
    try:
        async with asyncio.timeout(timeout):
            async with session.request(method, URL(url, encoded=True), headers=headers) as response:
                if 200 <= response.status < 300:
                    if response.content_type != "application/json":
                        return {}, response.status
                    try:
                        return await response.json(), response.status
                    except ValueError as err:
                        _LOGGER.error("Undecodable body from %s %s: %s", method, url, err)
                        return None, response.status
                _LOGGER.debug("%s %s returned status %d", method, url, response.status)
                return None, response.status
    except asyncio.TimeoutError:
        _LOGGER.warning("Request timed out: %s %s", method, url)
        return None, STATUS_TIMEOUT
    except aiohttp.ClientError as err:
        _LOGGER.error("Request failed for %s %s: %s", method, url, err)
        return None, STATUS_UNREACHABLE


async def fetch_json(
    session: "ClientSession",
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = API_TIMEOUT,
) -> tuple[dict[str, Any] | None, int]:
    """GET a URL with standardized timeout and error handling.

    Args:
        session: aiohttp session
        url: URL to fetch
        headers: Optional request headers
        timeout: Request timeout in seconds

    Returns:
        Tuple of (json_data or None, status_code)
    """
    return await _request(session, "GET", url, headers=headers, timeout=timeout)


async def post_json(
    session: "ClientSession",
    url: str,
    *,
    headers: dict[str, str] | None = None,
    timeout: float = API_TIMEOUT,
) -> tuple[dict[str, Any] | None, int]:
    """POST to a URL with standardized timeout and error handling.

    Plex takes every command argument in the query string, so no body is
    sent.

    Returns:
        Tuple of (json_data or None, status_code)
    """
    return await _request(session, "POST", url, headers=headers, timeout=timeout)
