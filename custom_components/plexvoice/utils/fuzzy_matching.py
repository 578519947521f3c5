"""Fuzzy matching utilities for Plex Voice.

Spoken show names rarely match library titles exactly ("the office" vs
"The Office (US)"), so titles are scored with the Dice coefficient over
character bigrams and the best candidate above a floor wins.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar, TYPE_CHECKING

from ..const import MIN_MATCH_SCORE

if TYPE_CHECKING:
    from ..models import Show

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _normalize(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(text.lower().split())


def _bigrams(text: str) -> set[str]:
    """Character bigrams of a string."""
    return {text[i:i + 2] for i in range(len(text) - 1)}


def dice_coefficient(first: str, second: str) -> float:
    """Dice similarity of two strings, in [0, 1].

    Examples:
        dice_coefficient("night", "nacht")  # -> 0.25
        dice_coefficient("Archer", "archer")  # -> 1.0
    """
    first = _normalize(first)
    second = _normalize(second)

    if first == second:
        return 1.0

    first_pairs = _bigrams(first)
    second_pairs = _bigrams(second)
    if not first_pairs or not second_pairs:
        return 0.0

    overlap = len(first_pairs & second_pairs)
    return 2.0 * overlap / (len(first_pairs) + len(second_pairs))


def find_best_match(
    phrase: str,
    candidates: Iterable[T],
    key: Callable[[T], str] | None = None,
    minimum: float = MIN_MATCH_SCORE,
) -> T | None:
    """Return the candidate whose label best matches phrase.

    Ties keep the first candidate seen. Returns None when no candidate
    reaches the minimum score.
    """
    best: T | None = None
    best_score = -1.0

    for candidate in candidates:
        label = key(candidate) if key else candidate
        score = dice_coefficient(phrase, label)
        _LOGGER.debug("Match score %.3f: '%s' vs '%s'", score, phrase, label)

        if score >= minimum and score > best_score:
            best = candidate
            best_score = score

    return best


def find_show_by_spoken_name(spoken_name: str, shows: Iterable[Show]) -> Show | None:
    """Resolve a spoken show name against the library's shows."""
    show = find_best_match(spoken_name, shows, key=lambda s: s.title)
    if show is None:
        _LOGGER.warning("No show found for spoken name: '%s'", spoken_name)
    else:
        _LOGGER.info("Matched spoken name '%s' -> '%s'", spoken_name, show.title)
    return show
