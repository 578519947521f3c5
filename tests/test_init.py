"""Tests for config entry unload."""
from unittest.mock import MagicMock, patch

import pytest

from custom_components.plexvoice import async_unload_entry
from custom_components.plexvoice.const import DOMAIN


@pytest.mark.asyncio
async def test_unload_drops_entry_client_and_intents():
    hass = MagicMock()
    hass.data = {DOMAIN: {"entry-1": MagicMock(base_url="http://plex.local:32400")}}
    entry = MagicMock(entry_id="entry-1")

    with patch("custom_components.plexvoice.async_remove_intents") as remove_intents:
        assert await async_unload_entry(hass, entry) is True

    assert hass.data[DOMAIN] == {}
    remove_intents.assert_called_once_with(hass)
