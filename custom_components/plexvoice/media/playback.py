"""Playback orchestration.

Starting an episode on a Plex client takes four dependent calls, each
consuming what the previous one produced:

1. server machine identifier (cached for the lifetime of the entry)
2. client address (static override or /clients discovery)
3. a new play queue holding the episode
4. the playMedia command sent through the server to the client

Any failure stops the pipeline. Nothing is retried.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol, TYPE_CHECKING
from urllib.parse import quote

from ..api import PlexApiError
from ..const import PLAY_QUEUE_WINDOW, PLAYBACK_COMMAND_ID, PLAYBACK_PROTOCOL
from ..models import Failure, FailureKind, PlaybackStep, PlaybackTarget, Success

if TYPE_CHECKING:
    from ..models import Result

_LOGGER = logging.getLogger(__name__)


class PlaybackApi(Protocol):
    """The API calls the pipeline depends on."""

    identifier: str

    async def fetch_server_identity(self) -> str: ...

    async def find_clients_by_name(self, name: str) -> list[dict[str, Any]]: ...

    async def create_play_queue(self, path: str) -> str: ...

    async def send_playback_command(self, path: str) -> None: ...


class IdentityCache:
    """Single-slot holder for the server machine identifier.

    Shared by every request of a config entry. Writes always carry the same
    value for a given server, so last writer wins without locking.
    """

    def __init__(self, value: str | None = None) -> None:
        self._value = value or None

    @property
    def value(self) -> str | None:
        return self._value

    def set(self, value: str) -> None:
        self._value = value


class ClientNotFoundError(Exception):
    """No client with the requested name is known to the server."""


@dataclass
class PlaybackContext:
    """Request-scoped state threaded through the pipeline."""

    episode_key: str
    client_name: str
    server_identifier: str | None = None
    client_address: str | None = None
    play_queue_id: str | None = None


def encode_key(episode_key: str) -> str:
    """Percent-encode a metadata key, slashes included."""
    return quote(episode_key, safe="")


def build_play_queue_path(episode_key: str, client_identifier: str) -> str:
    """Path that creates a video play queue holding one item.

    The item URI embeds the already-encoded key and is then encoded again
    as a whole; Plex expects both layers.
    """
    library_uri = quote(f"library://{client_identifier}/item/{encode_key(episode_key)}", safe="")
    return f"/playQueues?type=video&uri={library_uri}&shuffle=0"


def build_play_media_path(
    client_address: str,
    episode_key: str,
    server_identifier: str,
    play_queue_id: str,
) -> str:
    """Path of the playMedia command for a client."""
    container_key = quote(f"/playQueues/{play_queue_id}?own=1&window={PLAY_QUEUE_WINDOW}", safe="")
    return (
        f"/system/players/{client_address}/playback/playMedia"
        f"?key={encode_key(episode_key)}"
        f"&offset=0"
        f"&machineIdentifier={server_identifier}"
        f"&protocol={PLAYBACK_PROTOCOL}"
        f"&containerKey={container_key}"
        f"&commandID={PLAYBACK_COMMAND_ID}"
    )


class PlaybackOrchestrator:
    """Starts media on a named Plex client."""

    def __init__(
        self,
        api: PlaybackApi,
        identity_cache: IdentityCache,
        client_address_override: str | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            api: Plex API client
            identity_cache: Shared server identity slot
            client_address_override: Static client address, skips discovery
        """
        self._api = api
        self._identity_cache = identity_cache
        self._client_address_override = client_address_override or None

        self._pipeline: list[tuple[PlaybackStep, Callable[[PlaybackContext], Awaitable[None]]]] = [
            (PlaybackStep.SERVER_IDENTITY, self._resolve_server_identity),
            (PlaybackStep.CLIENT_ADDRESS, self._resolve_client_address),
            (PlaybackStep.PLAY_QUEUE, self._create_play_queue),
            (PlaybackStep.PLAY_COMMAND, self._send_play_command),
        ]

    async def start_playback(self, episode_key: str, client_name: str) -> Result[PlaybackTarget]:
        """Run the pipeline for one episode.

        Returns:
            Success with the resolved PlaybackTarget, or a Failure naming the
            step that failed
        """
        ctx = PlaybackContext(episode_key=episode_key, client_name=client_name)
        _LOGGER.info("Starting playback of %s on '%s'", episode_key, client_name)

        for step, run_step in self._pipeline:
            try:
                await run_step(ctx)
            except ClientNotFoundError as err:
                _LOGGER.warning("Playback aborted at %s: %s", step, err)
                return Failure(FailureKind.CLIENT_NOT_FOUND, str(err), step=step)
            except PlexApiError as err:
                _LOGGER.error("Playback aborted at %s: %s", step, err)
                return Failure(FailureKind.TRANSPORT_ERROR, str(err), step=step)

        return Success(PlaybackTarget(
            client_name=client_name,
            client_address=ctx.client_address,
            server_machine_identifier=ctx.server_identifier,
        ))

    async def _resolve_server_identity(self, ctx: PlaybackContext) -> None:
        identifier = self._identity_cache.value
        if identifier is None:
            identifier = await self._api.fetch_server_identity()
            self._identity_cache.set(identifier)
            _LOGGER.debug("Fetched server identifier %s", identifier)
        ctx.server_identifier = identifier

    async def _resolve_client_address(self, ctx: PlaybackContext) -> None:
        if self._client_address_override:
            ctx.client_address = self._client_address_override
            return

        clients = await self._api.find_clients_by_name(ctx.client_name)
        if not clients or not clients[0].get("address"):
            raise ClientNotFoundError(f"No Plex client named '{ctx.client_name}'")
        ctx.client_address = clients[0]["address"]
        _LOGGER.debug("Client '%s' is at %s", ctx.client_name, ctx.client_address)

    async def _create_play_queue(self, ctx: PlaybackContext) -> None:
        path = build_play_queue_path(ctx.episode_key, self._api.identifier)
        ctx.play_queue_id = await self._api.create_play_queue(path)
        _LOGGER.debug("Created play queue %s", ctx.play_queue_id)

    async def _send_play_command(self, ctx: PlaybackContext) -> None:
        path = build_play_media_path(
            ctx.client_address, ctx.episode_key, ctx.server_identifier, ctx.play_queue_id
        )
        await self._api.send_playback_command(path)
