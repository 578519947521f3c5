"""Data model shared by the matcher, selector and playback pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Show:
    """A TV show in the Plex library."""

    title: str
    rating_key: str

    @classmethod
    def from_metadata(cls, item: dict[str, Any]) -> Show:
        """Build a show from a Plex Metadata entry."""
        return cls(title=item.get("title", ""), rating_key=str(item.get("ratingKey", "")))


@dataclass(frozen=True)
class Episode:
    """A single episode snapshot, fetched fresh per request."""

    title: str
    key: str
    season_index: int
    episode_index: int
    rating: float | None = None
    watched: bool = False
    rating_key: str = ""
    show_title: str = ""

    @classmethod
    def from_metadata(cls, item: dict[str, Any]) -> Episode:
        """Build an episode from a Plex Metadata entry.

        An episode counts as watched when Plex reports a viewCount for it,
        whatever the value.
        """
        rating = item.get("rating")
        return cls(
            title=item.get("title", ""),
            key=item.get("key", ""),
            season_index=int(item.get("parentIndex", 0)),
            episode_index=int(item.get("index", 0)),
            rating=float(rating) if rating is not None else None,
            watched="viewCount" in item,
            rating_key=str(item.get("ratingKey", "")),
            show_title=item.get("grandparentTitle", ""),
        )


@dataclass
class SelectionRequest:
    """What the user asked for, built once per intent."""

    spoken_show_name: str
    force_random: bool = False
    only_top_rated: float | None = None
    episode_number: int | None = None
    season_number: int | None = None


@dataclass(frozen=True)
class PlaybackTarget:
    """Where playback was started."""

    client_name: str
    client_address: str
    server_machine_identifier: str


class SelectionMode(StrEnum):
    """How the selector arrived at an episode."""

    SPECIFIC = "specific"
    NEXT_UNWATCHED = "next_unwatched"
    RANDOM = "random"
    TOP_RATED_RANDOM = "top_rated_random"


@dataclass(frozen=True)
class Selection:
    """The chosen episode and the policy that chose it."""

    episode: Episode
    mode: SelectionMode

    @property
    def season_number(self) -> int:
        return self.episode.season_index

    @property
    def episode_number(self) -> int:
        return self.episode.episode_index


@dataclass(frozen=True)
class PlaybackSummary:
    """Result of starting a show: enough to build a confirmation."""

    show: Show
    selection: Selection
    target: PlaybackTarget


@dataclass(frozen=True)
class OnDeckItem:
    """An entry of the on-deck list."""

    show_title: str
    episode_title: str

    @classmethod
    def from_metadata(cls, item: dict[str, Any]) -> OnDeckItem:
        return cls(
            show_title=item.get("grandparentTitle") or item.get("title", ""),
            episode_title=item.get("title", ""),
        )


class FailureKind(StrEnum):
    """Why an operation could not complete."""

    INVALID_REQUEST = "invalid_request"
    SHOW_NOT_FOUND = "show_not_found"
    SEASON_NOT_FOUND = "season_not_found"
    EPISODE_NOT_FOUND = "episode_not_found"
    NO_EPISODES = "no_episodes"
    CLIENT_NOT_FOUND = "client_not_found"
    TRANSPORT_ERROR = "transport_error"


class PlaybackStep(StrEnum):
    """Steps of the playback pipeline, in execution order."""

    SERVER_IDENTITY = "server_identity"
    CLIENT_ADDRESS = "client_address"
    PLAY_QUEUE = "play_queue"
    PLAY_COMMAND = "play_command"


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed outcome.

    Args:
        kind: Failure category the caller branches on
        reason: Raw reason string, for logs
        step: Playback step that failed, if the failure came from playback
        details: Extra context for the caller's message (season, episode, ...)
    """

    kind: FailureKind
    reason: str
    step: PlaybackStep | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]
