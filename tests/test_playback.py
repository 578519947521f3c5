"""Tests for the playback pipeline."""
from urllib.parse import unquote

import pytest

from custom_components.plexvoice.media.playback import (
    IdentityCache,
    PlaybackOrchestrator,
    build_play_media_path,
    build_play_queue_path,
)
from custom_components.plexvoice.models import (
    Failure,
    FailureKind,
    PlaybackStep,
    PlaybackTarget,
    Success,
)

EPISODE_KEY = "/library/metadata/1002"


class TestPaths:
    def test_play_queue_uri_is_double_encoded(self):
        path = build_play_queue_path(EPISODE_KEY, "client-id-123")
        assert path == (
            "/playQueues?type=video"
            "&uri=library%3A%2F%2Fclient-id-123%2Fitem%2F%252Flibrary%252Fmetadata%252F1002"
            "&shuffle=0"
        )

    def test_play_queue_uri_decodes_back(self):
        path = build_play_queue_path(EPISODE_KEY, "abc")
        uri = path.split("uri=")[1].split("&")[0]
        once = unquote(uri)
        assert once == "library://abc/item/%2Flibrary%2Fmetadata%2F1002"
        assert unquote(once.split("/item/")[1]) == EPISODE_KEY

    def test_play_media_path(self):
        path = build_play_media_path("192.168.1.50", EPISODE_KEY, "server-id", "4242")
        assert path.startswith("/system/players/192.168.1.50/playback/playMedia?")
        query = dict(part.split("=", 1) for part in path.split("?", 1)[1].split("&"))
        assert query == {
            "key": "%2Flibrary%2Fmetadata%2F1002",
            "offset": "0",
            "machineIdentifier": "server-id",
            "protocol": "http",
            "containerKey": "%2FplayQueues%2F4242%3Fown%3D1%26window%3D200",
            "commandID": "1",
        }


class TestIdentityCache:
    def test_empty_override_is_a_miss(self):
        assert IdentityCache("").value is None

    def test_set_and_overwrite(self):
        cache = IdentityCache("old")
        cache.set("abc")
        assert cache.value == "abc"


class TestStartPlayback:
    @pytest.mark.asyncio
    async def test_runs_all_steps_in_order(self, fake_api):
        orchestrator = PlaybackOrchestrator(fake_api, IdentityCache())

        result = await orchestrator.start_playback(EPISODE_KEY, "Living Room TV")

        assert isinstance(result, Success)
        assert result.value == PlaybackTarget(
            client_name="Living Room TV",
            client_address="192.168.1.50",
            server_machine_identifier="server-machine-id",
        )
        assert fake_api.call_names() == [
            "fetch_server_identity",
            "find_clients_by_name",
            "create_play_queue",
            "send_playback_command",
        ]
        command = fake_api.calls[-1][1]
        assert "containerKey=%2FplayQueues%2F4242%3F" in command
        assert "machineIdentifier=server-machine-id" in command

    @pytest.mark.asyncio
    async def test_identity_fetched_once_and_cached(self, fake_api):
        cache = IdentityCache()
        orchestrator = PlaybackOrchestrator(fake_api, cache)

        await orchestrator.start_playback(EPISODE_KEY, "Living Room TV")
        await orchestrator.start_playback(EPISODE_KEY, "Living Room TV")

        assert fake_api.call_names().count("fetch_server_identity") == 1
        assert cache.value == "server-machine-id"

    @pytest.mark.asyncio
    async def test_configured_identity_skips_fetch(self, fake_api):
        orchestrator = PlaybackOrchestrator(fake_api, IdentityCache("configured-id"))

        result = await orchestrator.start_playback(EPISODE_KEY, "Living Room TV")

        assert "fetch_server_identity" not in fake_api.call_names()
        assert result.value.server_machine_identifier == "configured-id"

    @pytest.mark.asyncio
    async def test_address_override_skips_discovery(self, fake_api):
        orchestrator = PlaybackOrchestrator(
            fake_api, IdentityCache(), client_address_override="10.0.0.7"
        )

        result = await orchestrator.start_playback(EPISODE_KEY, "Anything")

        assert "find_clients_by_name" not in fake_api.call_names()
        assert result.value.client_address == "10.0.0.7"
        assert fake_api.calls[-1][1].startswith("/system/players/10.0.0.7/")

    @pytest.mark.asyncio
    async def test_unknown_client_stops_before_queue(self, fake_api):
        orchestrator = PlaybackOrchestrator(fake_api, IdentityCache())

        result = await orchestrator.start_playback(EPISODE_KEY, "Bedroom Roku")

        assert isinstance(result, Failure)
        assert result.kind == FailureKind.CLIENT_NOT_FOUND
        assert result.step == PlaybackStep.CLIENT_ADDRESS
        assert "create_play_queue" not in fake_api.call_names()
        assert "send_playback_command" not in fake_api.call_names()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("failing_call", "step", "calls_made"),
        [
            ("fetch_server_identity", PlaybackStep.SERVER_IDENTITY, 1),
            ("find_clients_by_name", PlaybackStep.CLIENT_ADDRESS, 2),
            ("create_play_queue", PlaybackStep.PLAY_QUEUE, 3),
            ("send_playback_command", PlaybackStep.PLAY_COMMAND, 4),
        ],
    )
    async def test_transport_error_aborts_at_step(
        self, fake_api, connection_error, failing_call, step, calls_made
    ):
        fake_api.errors[failing_call] = connection_error
        orchestrator = PlaybackOrchestrator(fake_api, IdentityCache())

        result = await orchestrator.start_playback(EPISODE_KEY, "Living Room TV")

        assert isinstance(result, Failure)
        assert result.kind == FailureKind.TRANSPORT_ERROR
        assert result.step == step
        assert len(fake_api.calls) == calls_made

    @pytest.mark.asyncio
    async def test_failed_identity_fetch_leaves_cache_empty(self, fake_api, connection_error):
        fake_api.errors["fetch_server_identity"] = connection_error
        cache = IdentityCache()

        await PlaybackOrchestrator(fake_api, cache).start_playback(EPISODE_KEY, "Living Room TV")

        assert cache.value is None
