"""Name normalisation shared by the statistics, validation, and parsing layers."""

from __future__ import annotations

import re

STAT_NAMES: tuple[str, ...] = ("HP", "Atk", "Def", "SpA", "SpD", "Spe")

MAX_HAPPINESS = 255


def to_id(text: object) -> str:
    """Reduce a display name to Showdown's lowercase alphanumeric id."""

    if text is None:
        return ""
    return re.sub(r"[^a-z0-9]", "", str(text).lower())


def generation_of(format_id: str, default: int = 9) -> int:
    """Return the generation encoded in a format id such as ``gen4ou``."""

    match = re.match(r"gen(\d+)", to_id(format_id))
    if not match:
        return default
    return int(match.group(1))
