"""The Plex Voice integration."""
from __future__ import annotations

import logging
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import PlexApiClient
from .const import (
    CONF_CLIENT_IDENTIFIER,
    CONF_HOST,
    CONF_LIBRARY_SECTION,
    CONF_PLAYER_ADDRESS,
    CONF_PLAYER_NAME,
    CONF_PORT,
    CONF_SERVER_IDENTIFIER,
    CONF_SSL,
    CONF_TOKEN,
    CONF_TOP_RATED_FRACTION,
    CONF_VERIFY_SSL,
    DEFAULT_LIBRARY_SECTION,
    DEFAULT_PLAYER_ADDRESS,
    DEFAULT_PLAYER_NAME,
    DEFAULT_PORT,
    DEFAULT_SERVER_IDENTIFIER,
    DEFAULT_SSL,
    DEFAULT_TOP_RATED_FRACTION,
    DEFAULT_VERIFY_SSL,
    DOMAIN,
)
from .intents import async_register_intents, async_remove_intents
from .media import IdentityCache, PlaybackOrchestrator, ShowController

_LOGGER = logging.getLogger(__name__)


async def async_setup(hass: HomeAssistant, config: dict[str, Any]) -> bool:
    """Set up the Plex Voice component."""
    hass.data.setdefault(DOMAIN, {})
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Plex Voice from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    config = {**entry.data, **entry.options}

    session = async_get_clientsession(hass, verify_ssl=config.get(CONF_VERIFY_SSL, DEFAULT_VERIFY_SSL))
    api = PlexApiClient(
        session,
        config[CONF_HOST],
        config.get(CONF_PORT, DEFAULT_PORT),
        config[CONF_TOKEN],
        config[CONF_CLIENT_IDENTIFIER],
        ssl=config.get(CONF_SSL, DEFAULT_SSL),
        library_section=str(config.get(CONF_LIBRARY_SECTION, DEFAULT_LIBRARY_SECTION)),
    )

    identity_cache = IdentityCache(config.get(CONF_SERVER_IDENTIFIER, DEFAULT_SERVER_IDENTIFIER))
    orchestrator = PlaybackOrchestrator(
        api,
        identity_cache,
        client_address_override=config.get(CONF_PLAYER_ADDRESS, DEFAULT_PLAYER_ADDRESS),
    )
    controller = ShowController(
        api,
        orchestrator,
        config.get(CONF_PLAYER_NAME, DEFAULT_PLAYER_NAME),
    )

    hass.data[DOMAIN][entry.entry_id] = api

    async_register_intents(
        hass,
        controller,
        config.get(CONF_TOP_RATED_FRACTION, DEFAULT_TOP_RATED_FRACTION),
    )

    entry.async_on_unload(
        entry.add_update_listener(_async_update_listener)
    )

    _LOGGER.info("Plex Voice setup complete for %s", api.base_url)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle config entry updates - reload the integration."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    api = hass.data[DOMAIN].pop(entry.entry_id)
    async_remove_intents(hass)
    _LOGGER.debug("Unregistered Plex Voice intents for %s", api.base_url)
    return True
