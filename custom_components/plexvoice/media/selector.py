"""Episode selection policies.

Pure decision logic: given every episode of a show and what the user asked
for, pick one. Precedence is explicit locator, then next unwatched, then
random (optionally restricted to the top-rated fraction).
"""
from __future__ import annotations

import logging
import math
import random
from typing import Any, TYPE_CHECKING

from ..const import COMBINED_EPISODE_THRESHOLD
from ..models import (
    Episode,
    Failure,
    FailureKind,
    Selection,
    SelectionMode,
    SelectionRequest,
    Success,
)

if TYPE_CHECKING:
    from ..models import Result

_LOGGER = logging.getLogger(__name__)


def decode_locator(episode_number: int | None, season_number: int | None) -> tuple[int, int]:
    """Resolve spoken season/episode numbers into a (season, episode) pair.

    "episode 203" with no season means season 2, episode 3. An episode
    without a season defaults to season 1, a season without an episode
    defaults to its first episode.
    """
    if season_number is None:
        if episode_number is not None and episode_number > COMBINED_EPISODE_THRESHOLD:
            return episode_number // 100, episode_number % 100
        season_number = 1
    if episode_number is None:
        episode_number = 1
    return season_number, episode_number


def find_first_unwatched(episodes: list[Episode]) -> Episode | None:
    """Unwatched episode with the smallest (season, episode) pair."""
    unwatched = [ep for ep in episodes if not ep.watched]
    if not unwatched:
        return None
    return min(unwatched, key=lambda ep: (ep.season_index, ep.episode_index))


def top_rated_pool(episodes: list[Episode], fraction: float) -> list[Episode]:
    """Leading ceil(fraction * N) episodes by rating, highest first.

    Unrated episodes sort after every rated one. The cut is positional, so
    equal ratings straddling the boundary are decided by the stable sort
    rather than by value.
    """
    ranked = sorted(
        episodes,
        key=lambda ep: (ep.rating is None, -(ep.rating or 0.0)),
    )
    # round() keeps 0.1 * 30 from becoming 4 through float error
    size = max(1, math.ceil(round(fraction * len(ranked), 9)))
    return ranked[:size]


def select_episode(
    episodes: list[Episode],
    request: SelectionRequest,
    rng: Any = None,
) -> Result[Selection]:
    """Choose the episode to play.

    Args:
        episodes: All episodes of the show
        request: The user's selection request
        rng: Object with a choice() method, defaults to the random module

    Returns:
        Success with the Selection, or a Failure distinguishing a missing
        season from a missing episode
    """
    rng = rng or random

    if request.episode_number is not None or request.season_number is not None:
        return _select_specific(episodes, request)

    if not episodes:
        return Failure(FailureKind.NO_EPISODES, "Show has no episodes")

    if not request.force_random:
        episode = find_first_unwatched(episodes)
        if episode is not None:
            _LOGGER.debug("Next unwatched: s%de%d", episode.season_index, episode.episode_index)
            return Success(Selection(episode, SelectionMode.NEXT_UNWATCHED))
        _LOGGER.debug("Every episode watched, falling back to random")

    if request.only_top_rated:
        pool = top_rated_pool(episodes, request.only_top_rated)
        _LOGGER.debug(
            "Top %.0f%% pool: %d of %d episodes",
            request.only_top_rated * 100, len(pool), len(episodes),
        )
        return Success(Selection(rng.choice(pool), SelectionMode.TOP_RATED_RANDOM))

    return Success(Selection(rng.choice(episodes), SelectionMode.RANDOM))


def _select_specific(episodes: list[Episode], request: SelectionRequest) -> Result[Selection]:
    """Explicit season/episode lookup."""
    season, number = decode_locator(request.episode_number, request.season_number)
    details = {"season": season, "episode": number}

    season_episodes = [ep for ep in episodes if ep.season_index == season]
    if not season_episodes:
        return Failure(FailureKind.SEASON_NOT_FOUND, f"No season {season}", details=details)

    for episode in season_episodes:
        if episode.episode_index == number:
            return Success(Selection(episode, SelectionMode.SPECIFIC))

    return Failure(
        FailureKind.EPISODE_NOT_FOUND,
        f"No episode {number} in season {season}",
        details=details,
    )
