"""Show controller: the entry points behind the voice intents."""
from __future__ import annotations

import logging
from typing import Any, Protocol, TYPE_CHECKING

from ..api import PlexApiError
from ..const import ON_DECK_LIMIT
from ..models import (
    Failure,
    FailureKind,
    PlaybackSummary,
    SelectionRequest,
    Success,
)
from ..utils.fuzzy_matching import find_show_by_spoken_name
from .selector import select_episode

if TYPE_CHECKING:
    from ..models import Episode, OnDeckItem, Result, Show
    from .playback import PlaybackOrchestrator

_LOGGER = logging.getLogger(__name__)


class CatalogApi(Protocol):
    """Catalog queries the controller depends on."""

    async def fetch_show_list(self) -> list[Show]: ...

    async def fetch_episodes(self, show_id: str) -> list[Episode]: ...

    async def fetch_on_deck(self) -> list[OnDeckItem]: ...


class ShowController:
    """Resolves a spoken show, picks an episode and starts it.

    Holds no per-request state; one instance serves every intent of a
    config entry.
    """

    def __init__(
        self,
        api: CatalogApi,
        orchestrator: PlaybackOrchestrator,
        player_name: str,
        rng: Any = None,
    ) -> None:
        """Initialize the controller.

        Args:
            api: Plex API client
            orchestrator: Playback pipeline
            player_name: Name of the Plex client to play on
            rng: Random source for the selector (None = random module)
        """
        self._api = api
        self._orchestrator = orchestrator
        self._player_name = player_name
        self._rng = rng

    async def start_show(self, request: SelectionRequest) -> Result[PlaybackSummary]:
        """Start an episode of the show the user named."""
        spoken_name = (request.spoken_show_name or "").strip()
        if not spoken_name:
            return Failure(FailureKind.INVALID_REQUEST, "No show name given")

        _LOGGER.info("=== START SHOW: '%s' ===", spoken_name)

        try:
            shows = await self._api.fetch_show_list()
        except PlexApiError as err:
            _LOGGER.error("Failed to fetch show list: %s", err)
            return Failure(FailureKind.TRANSPORT_ERROR, str(err))

        show = find_show_by_spoken_name(spoken_name, shows)
        if show is None:
            return Failure(
                FailureKind.SHOW_NOT_FOUND,
                f"No show matching '{spoken_name}'",
                details={"spoken_show_name": spoken_name},
            )

        try:
            episodes = await self._api.fetch_episodes(show.rating_key)
        except PlexApiError as err:
            _LOGGER.error("Failed to fetch episodes of %s: %s", show.title, err)
            return Failure(FailureKind.TRANSPORT_ERROR, str(err), details={"show_title": show.title})

        selected = select_episode(episodes, request, self._rng)
        if isinstance(selected, Failure):
            _LOGGER.warning("No episode selected for %s: %s", show.title, selected.reason)
            return Failure(
                selected.kind,
                selected.reason,
                details={**selected.details, "show_title": show.title},
            )

        selection = selected.value
        _LOGGER.info(
            "Selected %s s%de%d '%s' (%s)",
            show.title, selection.season_number, selection.episode_number,
            selection.episode.title, selection.mode,
        )

        played = await self._orchestrator.start_playback(selection.episode.key, self._player_name)
        if isinstance(played, Failure):
            return Failure(
                played.kind,
                played.reason,
                step=played.step,
                details={"show_title": show.title},
            )

        return Success(PlaybackSummary(show=show, selection=selection, target=played.value))

    async def on_deck(self, limit: int = ON_DECK_LIMIT) -> Result[list[OnDeckItem]]:
        """Shows currently on deck, at most limit of them."""
        try:
            items = await self._api.fetch_on_deck()
        except PlexApiError as err:
            _LOGGER.error("Failed to fetch on deck: %s", err)
            return Failure(FailureKind.TRANSPORT_ERROR, str(err))
        return Success(items[:limit])
