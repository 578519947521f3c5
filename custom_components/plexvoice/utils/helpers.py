"""General helper utilities for Plex Voice."""
from __future__ import annotations

from typing import Any


def get_nested(obj: Any, *keys: str, default: Any = None) -> Any:
    """Safely get nested dict values.

    Example:
        data = {"MediaContainer": {"machineIdentifier": "abc123"}}
        get_nested(data, "MediaContainer", "machineIdentifier")  # -> "abc123"
        get_nested(data, "missing", "path", default="N/A")       # -> "N/A"
    """
    for key in keys:
        if isinstance(obj, dict):
            obj = obj.get(key, {})
        else:
            return default
    return obj if obj != {} else default


def build_natural_lang_list(items: list[str], final_word: str, hyphenize: bool = False) -> str:
    """Join items the way they would be spoken.

    With hyphenize, spaces inside each item become hyphens so a speech
    engine reads multi-word titles as a single unit.

    Examples:
        build_natural_lang_list(["A", "B", "C"], "and")  # -> "A, B and C"
        build_natural_lang_list(["A", "B"], "or")        # -> "A or B"
        build_natural_lang_list(["Doctor Who"], "and", hyphenize=True)  # -> "Doctor-Who"
    """
    if hyphenize:
        items = [item.replace(" ", "-") for item in items]

    if len(items) < 2:
        return "".join(items)

    return f"{', '.join(items[:-1])} {final_word} {items[-1]}"
