"""Shared fixtures: an in-memory Plex API and episode builders."""
from __future__ import annotations

from typing import Any

import pytest

from custom_components.plexvoice.api import PlexConnectionError
from custom_components.plexvoice.models import Episode, OnDeckItem, Show


def make_episode(
    season: int,
    number: int,
    *,
    watched: bool = False,
    rating: float | None = None,
    title: str | None = None,
    show_title: str = "Archer",
) -> Episode:
    rating_key = str(season * 1000 + number)
    return Episode(
        title=title or f"Episode {season}x{number}",
        key=f"/library/metadata/{rating_key}",
        season_index=season,
        episode_index=number,
        rating=rating,
        watched=watched,
        rating_key=rating_key,
        show_title=show_title,
    )


class FakePlexApi:
    """Records every call; set *_error attributes to make a call fail."""

    def __init__(self) -> None:
        self.identifier = "client-id-123"
        self.shows: list[Show] = []
        self.episodes: dict[str, list[Episode]] = {}
        self.on_deck_items: list[OnDeckItem] = []
        self.clients: list[dict[str, Any]] = []
        self.server_identity = "server-machine-id"
        self.play_queue_id = "4242"
        self.calls: list[tuple[str, Any]] = []
        self.errors: dict[str, Exception] = {}

    def _record(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        if name in self.errors:
            raise self.errors[name]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def fetch_show_list(self) -> list[Show]:
        self._record("fetch_show_list")
        return list(self.shows)

    async def fetch_episodes(self, show_id: str) -> list[Episode]:
        self._record("fetch_episodes", show_id)
        return list(self.episodes.get(show_id, []))

    async def fetch_on_deck(self) -> list[OnDeckItem]:
        self._record("fetch_on_deck")
        return list(self.on_deck_items)

    async def fetch_server_identity(self) -> str:
        self._record("fetch_server_identity")
        return self.server_identity

    async def find_clients_by_name(self, name: str) -> list[dict[str, Any]]:
        self._record("find_clients_by_name", name)
        return [c for c in self.clients if c.get("name", "").lower() == name.lower()]

    async def create_play_queue(self, path: str) -> str:
        self._record("create_play_queue", path)
        return self.play_queue_id

    async def send_playback_command(self, path: str) -> None:
        self._record("send_playback_command", path)


class FirstChoice:
    """Deterministic stand-in for the random module."""

    def __init__(self) -> None:
        self.pools: list[list[Any]] = []

    def choice(self, seq):
        self.pools.append(list(seq))
        return seq[0]


@pytest.fixture
def fake_api() -> FakePlexApi:
    api = FakePlexApi()
    api.shows = [
        Show(title="Archer", rating_key="100"),
        Show(title="Doctor Who", rating_key="200"),
        Show(title="The Office (US)", rating_key="300"),
    ]
    api.episodes["100"] = [
        make_episode(1, 1, watched=True, rating=7.5),
        make_episode(1, 2, rating=8.1, title="Training Day"),
        make_episode(2, 1, rating=9.0, title="Swiss Miss"),
    ]
    api.clients = [{"name": "Living Room TV", "address": "192.168.1.50", "port": "32500"}]
    return api


@pytest.fixture
def first_choice() -> FirstChoice:
    return FirstChoice()


@pytest.fixture
def connection_error() -> PlexConnectionError:
    return PlexConnectionError("Plex server unavailable")
