"""Plex Media Server API client.

Thin async wrapper over the Plex HTTP API: the catalog queries and
playback commands the rest of the integration needs, nothing more.
Responses are requested as JSON; every failure surfaces as PlexApiError.
"""
from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from .const import (
    API_TIMEOUT,
    PLEX_DEVICE,
    PLEX_DEVICE_NAME,
    PLEX_PRODUCT,
    get_version,
)
from .models import Episode, OnDeckItem, Show
from .utils.helpers import get_nested
from .utils.http_client import fetch_json, post_json

if TYPE_CHECKING:
    from aiohttp import ClientSession

_LOGGER = logging.getLogger(__name__)


class PlexApiError(Exception):
    """Base error for failed Plex API calls."""


class PlexConnectionError(PlexApiError):
    """The server could not be reached or did not answer in time."""


class PlexResponseError(PlexApiError):
    """The server answered with an error status or an unusable body."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class PlexApiClient:
    """Async client for one Plex Media Server."""

    def __init__(
        self,
        session: "ClientSession",
        host: str,
        port: int,
        token: str,
        client_identifier: str,
        *,
        ssl: bool = False,
        library_section: str = "1",
        timeout: float = API_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            session: aiohttp session shared with Home Assistant
            host: Server hostname or IP
            port: Server port
            token: X-Plex-Token
            client_identifier: Stable X-Plex-Client-Identifier for this install
            ssl: Use https
            library_section: Section id of the TV library
            timeout: Per-request timeout in seconds
        """
        self._session = session
        self._base_url = f"{'https' if ssl else 'http'}://{host}:{port}"
        self._token = token
        self._library_section = library_section
        self._timeout = timeout
        self.identifier = client_identifier

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        """Headers identifying this app to the server."""
        return {
            "Accept": "application/json",
            "X-Plex-Token": self._token,
            "X-Plex-Client-Identifier": self.identifier,
            "X-Plex-Product": PLEX_PRODUCT,
            "X-Plex-Version": get_version(),
            "X-Plex-Device": PLEX_DEVICE,
            "X-Plex-Device-Name": PLEX_DEVICE_NAME,
        }

    async def _get(self, path: str) -> dict[str, Any]:
        data, status = await fetch_json(
            self._session, f"{self._base_url}{path}", headers=self.headers, timeout=self._timeout
        )
        return self._check(path, data, status)

    async def _post(self, path: str) -> dict[str, Any]:
        data, status = await post_json(
            self._session, f"{self._base_url}{path}", headers=self.headers, timeout=self._timeout
        )
        return self._check(path, data, status)

    @staticmethod
    def _check(path: str, data: dict[str, Any] | None, status: int) -> dict[str, Any]:
        """Raise for failed requests, otherwise return the body."""
        if data is not None:
            return data
        if status in (401, 403):
            raise PlexResponseError(f"Not authorized for {path}", status)
        if status >= 500 or status == 408:
            raise PlexConnectionError(f"Plex server unavailable for {path} (status {status})")
        raise PlexResponseError(f"Plex returned status {status} for {path}", status)

    async def fetch_server_identity(self) -> str:
        """Machine identifier of the server."""
        data = await self._get("/")
        identifier = get_nested(data, "MediaContainer", "machineIdentifier")
        if not identifier:
            raise PlexResponseError("Server root did not include a machineIdentifier")
        return identifier

    async def fetch_show_list(self) -> list[Show]:
        """Every show in the configured TV library section."""
        data = await self._get(f"/library/sections/{self._library_section}/all")
        items = get_nested(data, "MediaContainer", "Metadata", default=[])
        return [Show.from_metadata(item) for item in items]

    async def fetch_episodes(self, show_id: str) -> list[Episode]:
        """All episodes of a show, across seasons."""
        data = await self._get(f"/library/metadata/{show_id}/allLeaves")
        items = get_nested(data, "MediaContainer", "Metadata", default=[])
        return [Episode.from_metadata(item) for item in items]

    async def fetch_on_deck(self) -> list[OnDeckItem]:
        """Items the server considers in progress or up next."""
        data = await self._get("/library/onDeck")
        items = get_nested(data, "MediaContainer", "Metadata", default=[])
        return [OnDeckItem.from_metadata(item) for item in items]

    async def find_clients_by_name(self, name: str) -> list[dict[str, Any]]:
        """Clients known to the server whose name matches (case-insensitive)."""
        data = await self._get("/clients")
        clients = get_nested(data, "MediaContainer", "Server", default=[])
        wanted = name.strip().lower()
        return [c for c in clients if c.get("name", "").strip().lower() == wanted]

    async def create_play_queue(self, path: str) -> str:
        """Create a play queue from a prepared /playQueues path, return its id."""
        data = await self._post(path)
        queue_id = get_nested(data, "MediaContainer", "playQueueID")
        if queue_id is None:
            raise PlexResponseError("Play queue response did not include a playQueueID")
        return str(queue_id)

    async def send_playback_command(self, path: str) -> None:
        """Send a prepared /system/players/... command."""
        await self._get(path)
