"""Intent handlers for Plex Voice.

Each handler maps one voice intent and its slots to a ShowController call,
then turns the result into speech and a card. All user-facing wording
lives here; the controller only reports what happened.
"""
from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

import voluptuous as vol

from homeassistant.helpers import config_validation as cv, intent

from .const import (
    INTENT_ON_DECK,
    INTENT_START_HIGH_RATED_EPISODE,
    INTENT_START_RANDOM_SHOW,
    INTENT_START_SHOW,
    INTENT_START_SPECIFIC_EPISODE,
    SLOT_EPISODE_NUMBER,
    SLOT_SEASON_NUMBER,
    SLOT_SHOW_NAME,
)
from .models import Failure, FailureKind, SelectionMode, SelectionRequest
from .utils.helpers import build_natural_lang_list

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .media.shows import ShowController
    from .models import PlaybackSummary

_LOGGER = logging.getLogger(__name__)

CARD_TITLE_PLAYING = "Playing Episode"
CARD_TITLE_ON_DECK = "On Deck"

SPEECH_NO_SHOW = "No show specified"
SPEECH_SHOW_NOT_FOUND = "Sorry, I couldn't find that show in your library"
SPEECH_GENERIC_ERROR = "I'm sorry, Plex and I don't seem to be getting along right now"
SPEECH_ON_DECK_EMPTY = "You do not have any shows On Deck!"

ALL_INTENTS = (
    INTENT_START_SHOW,
    INTENT_START_RANDOM_SHOW,
    INTENT_START_SPECIFIC_EPISODE,
    INTENT_START_HIGH_RATED_EPISODE,
    INTENT_ON_DECK,
)


def confirmation_speech(summary: PlaybackSummary) -> str:
    """What to say once playback started."""
    show_title = summary.show.title
    selection = summary.selection
    episode = selection.episode

    if selection.mode == SelectionMode.SPECIFIC:
        return (
            f"Alright, here is s{selection.season_number}e{selection.episode_number}"
            f" of {show_title}: {episode.title}"
        )
    if selection.mode == SelectionMode.NEXT_UNWATCHED:
        return f"Enjoy the next episode of {show_title}: {episode.title}"
    return f"Enjoy this episode from Season {selection.season_number}: {episode.title}"


def failure_speech(failure: Failure) -> str:
    """Spoken apology for a failed request."""
    details = failure.details
    show_title = details.get("show_title", "that show")

    if failure.kind == FailureKind.INVALID_REQUEST:
        return SPEECH_NO_SHOW
    if failure.kind == FailureKind.SHOW_NOT_FOUND:
        return SPEECH_SHOW_NOT_FOUND
    if failure.kind == FailureKind.SEASON_NOT_FOUND:
        return f"I'm sorry, there does not appear to be a season {details.get('season')} of {show_title}"
    if failure.kind == FailureKind.EPISODE_NOT_FOUND:
        return (
            f"I'm sorry, there does not appear to be an episode {details.get('episode')},"
            f" season {details.get('season')} of {show_title}"
        )
    return SPEECH_GENERIC_ERROR


def _error_code(failure: Failure) -> intent.IntentResponseErrorCode:
    if failure.kind in (FailureKind.TRANSPORT_ERROR, FailureKind.CLIENT_NOT_FOUND):
        return intent.IntentResponseErrorCode.FAILED_TO_HANDLE
    return intent.IntentResponseErrorCode.NO_VALID_TARGETS


def _slot_value(slots: dict[str, Any], name: str) -> Any:
    return slots.get(name, {}).get("value")


class _StartShowIntentHandler(intent.IntentHandler):
    """Base handler: build a SelectionRequest, start the show, speak the result."""

    slot_schema = {vol.Optional(SLOT_SHOW_NAME): cv.string}

    def __init__(self, controller: ShowController) -> None:
        self._controller = controller

    def _build_request(self, slots: dict[str, Any]) -> SelectionRequest:
        return SelectionRequest(spoken_show_name=_slot_value(slots, SLOT_SHOW_NAME) or "")

    async def async_handle(self, intent_obj: intent.Intent) -> intent.IntentResponse:
        """Handle the intent."""
        slots = self.async_validate_slots(intent_obj.slots)
        request = self._build_request(slots)
        _LOGGER.debug("%s: %s", self.intent_type, request)

        result = await self._controller.start_show(request)
        response = intent_obj.create_response()

        if isinstance(result, Failure):
            _LOGGER.info("%s failed: %s (%s)", self.intent_type, result.kind, result.reason)
            response.async_set_error(_error_code(result), failure_speech(result))
            return response

        summary = result.value
        response.async_set_speech(confirmation_speech(summary))
        response.async_set_card(
            CARD_TITLE_PLAYING,
            f"Playing {summary.show.title}: {summary.selection.episode.title}",
        )
        return response


class StartShowIntentHandler(_StartShowIntentHandler):
    """Play the next unwatched episode of a show."""

    intent_type = INTENT_START_SHOW
    description = "Plays the next unwatched episode of a TV show on Plex"


class StartRandomShowIntentHandler(_StartShowIntentHandler):
    """Play a random episode of a show."""

    intent_type = INTENT_START_RANDOM_SHOW
    description = "Plays a random episode of a TV show on Plex"

    def _build_request(self, slots: dict[str, Any]) -> SelectionRequest:
        request = super()._build_request(slots)
        request.force_random = True
        return request


class StartSpecificEpisodeIntentHandler(_StartShowIntentHandler):
    """Play a given season/episode of a show."""

    intent_type = INTENT_START_SPECIFIC_EPISODE
    description = "Plays a specific season and episode of a TV show on Plex"
    slot_schema = {
        vol.Optional(SLOT_SHOW_NAME): cv.string,
        vol.Optional(SLOT_SEASON_NUMBER): vol.Coerce(int),
        vol.Optional(SLOT_EPISODE_NUMBER): vol.Coerce(int),
    }

    def _build_request(self, slots: dict[str, Any]) -> SelectionRequest:
        request = super()._build_request(slots)
        request.season_number = _slot_value(slots, SLOT_SEASON_NUMBER)
        request.episode_number = _slot_value(slots, SLOT_EPISODE_NUMBER)
        return request


class StartHighRatedEpisodeIntentHandler(_StartShowIntentHandler):
    """Play a random episode from the best-rated part of a show."""

    intent_type = INTENT_START_HIGH_RATED_EPISODE
    description = "Plays a random highly rated episode of a TV show on Plex"

    def __init__(self, controller: ShowController, top_rated_fraction: float) -> None:
        super().__init__(controller)
        self._top_rated_fraction = top_rated_fraction

    def _build_request(self, slots: dict[str, Any]) -> SelectionRequest:
        request = super()._build_request(slots)
        request.force_random = True
        request.only_top_rated = self._top_rated_fraction
        return request


class OnDeckIntentHandler(intent.IntentHandler):
    """List the shows on deck."""

    intent_type = INTENT_ON_DECK
    description = "Lists the TV shows on deck in Plex"

    def __init__(self, controller: ShowController) -> None:
        self._controller = controller

    async def async_handle(self, intent_obj: intent.Intent) -> intent.IntentResponse:
        """Handle the intent."""
        result = await self._controller.on_deck()
        response = intent_obj.create_response()

        if isinstance(result, Failure):
            response.async_set_error(_error_code(result), SPEECH_GENERIC_ERROR)
            return response

        shows = [item.show_title for item in result.value]
        if not shows:
            response.async_set_speech(SPEECH_ON_DECK_EMPTY)
            return response

        response.async_set_speech(f"On deck you've got {build_natural_lang_list(shows, 'and', True)}.")
        response.async_set_card(CARD_TITLE_ON_DECK, f"{build_natural_lang_list(shows, 'and')}.")
        return response


def async_register_intents(
    hass: HomeAssistant,
    controller: ShowController,
    top_rated_fraction: float,
) -> None:
    """Register every Plex Voice intent handler."""
    intent.async_register(hass, StartShowIntentHandler(controller))
    intent.async_register(hass, StartRandomShowIntentHandler(controller))
    intent.async_register(hass, StartSpecificEpisodeIntentHandler(controller))
    intent.async_register(hass, StartHighRatedEpisodeIntentHandler(controller, top_rated_fraction))
    intent.async_register(hass, OnDeckIntentHandler(controller))
    _LOGGER.debug("Registered intents: %s", ", ".join(ALL_INTENTS))


def async_remove_intents(hass: HomeAssistant) -> None:
    """Unregister every Plex Voice intent handler."""
    for intent_type in ALL_INTENTS:
        intent.async_remove(hass, intent_type)
