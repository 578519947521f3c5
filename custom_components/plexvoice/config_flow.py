"""Config flow for Plex Voice integration."""
from __future__ import annotations

import logging
import uuid
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers.aiohttp_client import async_get_clientsession
import homeassistant.helpers.config_validation as cv

from .api import PlexApiClient, PlexApiError, PlexResponseError
from .const import (
    DOMAIN,
    # Server connection
    CONF_HOST,
    CONF_PORT,
    CONF_TOKEN,
    CONF_SSL,
    CONF_VERIFY_SSL,
    CONF_LIBRARY_SECTION,
    CONF_CLIENT_IDENTIFIER,
    DEFAULT_PORT,
    DEFAULT_SSL,
    DEFAULT_VERIFY_SSL,
    DEFAULT_LIBRARY_SECTION,
    # Player settings
    CONF_PLAYER_NAME,
    CONF_PLAYER_ADDRESS,
    CONF_SERVER_IDENTIFIER,
    CONF_TOP_RATED_FRACTION,
    DEFAULT_PLAYER_NAME,
    DEFAULT_PLAYER_ADDRESS,
    DEFAULT_SERVER_IDENTIFIER,
    DEFAULT_TOP_RATED_FRACTION,
)

_LOGGER = logging.getLogger(__name__)


def user_schema(current: dict[str, Any]) -> vol.Schema:
    """Server connection form, plus the player every intent plays on."""
    return vol.Schema(
        {
            vol.Required(CONF_HOST, default=current.get(CONF_HOST, "")): str,
            vol.Required(CONF_PORT, default=current.get(CONF_PORT, DEFAULT_PORT)): cv.port,
            vol.Required(CONF_TOKEN, default=current.get(CONF_TOKEN, "")): str,
            vol.Optional(CONF_SSL, default=current.get(CONF_SSL, DEFAULT_SSL)): bool,
            vol.Optional(
                CONF_VERIFY_SSL,
                default=current.get(CONF_VERIFY_SSL, DEFAULT_VERIFY_SSL),
            ): bool,
            vol.Optional(
                CONF_LIBRARY_SECTION,
                default=current.get(CONF_LIBRARY_SECTION, DEFAULT_LIBRARY_SECTION),
            ): str,
            vol.Required(
                CONF_PLAYER_NAME,
                description={"suggested_value": current.get(CONF_PLAYER_NAME)},
            ): vol.All(cv.string, vol.Length(min=1)),
        }
    )


class PlexVoiceConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Plex Voice."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize config flow."""
        self._data: dict[str, Any] = {}

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle the initial step - server connection."""
        errors = {}

        if user_input is not None:
            self._data.update(user_input)
            self._data[CONF_CLIENT_IDENTIFIER] = str(uuid.uuid4())

            try:
                machine_identifier = await self._test_connection()
            except PlexResponseError as err:
                _LOGGER.error("Plex rejected the connection test: %s", err)
                errors["base"] = "invalid_auth" if err.status in (401, 403) else "cannot_connect"
            except PlexApiError as err:
                _LOGGER.error("Connection test failed: %s", err)
                errors["base"] = "cannot_connect"

            if not errors:
                await self.async_set_unique_id(machine_identifier)
                self._abort_if_unique_id_configured()
                return self.async_create_entry(
                    title=f"Plex Voice ({self._data[CONF_HOST]})",
                    data=self._data,
                )

        current = user_input or {}

        return self.async_show_form(
            step_id="user",
            data_schema=user_schema(current),
            errors=errors,
        )

    async def _test_connection(self) -> str:
        """Fetch the server identity with the entered settings."""
        session = async_get_clientsession(
            self.hass, verify_ssl=self._data.get(CONF_VERIFY_SSL, DEFAULT_VERIFY_SSL)
        )
        api = PlexApiClient(
            session,
            self._data[CONF_HOST],
            self._data.get(CONF_PORT, DEFAULT_PORT),
            self._data[CONF_TOKEN],
            self._data[CONF_CLIENT_IDENTIFIER],
            ssl=self._data.get(CONF_SSL, DEFAULT_SSL),
            timeout=10,
        )
        return await api.fetch_server_identity()

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Create the options flow."""
        return PlexVoiceOptionsFlowHandler(config_entry)


class PlexVoiceOptionsFlowHandler(config_entries.OptionsFlow):
    """Handle options flow for Plex Voice."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        """Initialize options flow."""
        self._entry = config_entry

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> FlowResult:
        """Handle player settings.

        The player address and server identifier are optional overrides;
        left empty they are discovered from the server on each request
        (the identifier once per entry).
        """
        if user_input is not None:
            new_options = {**self._entry.options, **user_input}
            return self.async_create_entry(title="", data=new_options)

        current = {**self._entry.data, **self._entry.options}

        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_PLAYER_NAME,
                        default=current.get(CONF_PLAYER_NAME, DEFAULT_PLAYER_NAME),
                    ): str,
                    vol.Optional(
                        CONF_PLAYER_ADDRESS,
                        default=current.get(CONF_PLAYER_ADDRESS, DEFAULT_PLAYER_ADDRESS),
                    ): str,
                    vol.Optional(
                        CONF_SERVER_IDENTIFIER,
                        default=current.get(CONF_SERVER_IDENTIFIER, DEFAULT_SERVER_IDENTIFIER),
                    ): str,
                    vol.Optional(
                        CONF_TOP_RATED_FRACTION,
                        default=current.get(CONF_TOP_RATED_FRACTION, DEFAULT_TOP_RATED_FRACTION),
                    ): vol.All(vol.Coerce(float), vol.Range(min=0.01, max=1.0)),
                }
            ),
        )
