"""Shared fixtures: a small usage snapshot and deterministic random sources."""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

from poke_predict.statistics import UsageStatistics


def _species(usage: float, lead: float, moves: Dict[str, float], **extra: Any) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "usage": {"raw": usage * 1000, "real": usage * 1000, "weighted": usage},
        "lead": {"raw": lead * 1000, "real": lead * 1000, "weighted": lead},
        "count": int(usage * 1000),
        "abilities": {"Keen Eye": 0.7, "Big Pecks": 0.3},
        "items": {"Leftovers": 0.6, "Choice Band": 0.4},
        "stats": {"Jolly:0/252/0/0/4/252": 0.8, "Adamant:252/252/0/0/4/0": 0.2},
        "moves": moves,
        "teammates": {},
    }
    entry.update(extra)
    return entry


SNAPSHOT: Dict[str, Any] = {
    "battles": 1000,
    "pokemon": {
        "Rattata": _species(1.0, 0.2, {"Tackle": 0.9, "Quick Attack": 0.8, "Bite": 0.5, "Crunch": 0.4}),
        "Pidgey": _species(
            0.5,
            0.4,
            {"Return": 0.8, "Frustration": 0.5, "Quick Attack": 0.4, "Roost": 0.3, "U-turn": 0.2},
        ),
        "Spearow": _species(0.45, 0.1, {"Drill Peck": 0.9, "Return": 0.6, "Roost": 0.5, "Pursuit": 0.2}),
        "Zubat": _species(0.4, 0.05, {"Bite": 0.7, "Roost": 0.6, "Toxic": 0.5, "Haze": 0.4}),
        "Geodude": _species(0.35, 0.05, {"Stealth Rock": 0.9, "Earthquake": 0.8, "Rock Slide": 0.7}),
        "Machop": _species(0.3, 0.05, {"Cross Chop": 0.9, "Knock Off": 0.6, "Bullet Punch": 0.5, "Ice Punch": 0.3}),
        "Onix": _species(0.25, 0.01, {"Stealth Rock": 0.9, "Explosion": 0.5, "Rock Slide": 0.4, "Roar": 0.2}),
    },
}


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def snapshot() -> Dict[str, Any]:
    return copy.deepcopy(SNAPSHOT)


@pytest.fixture
def statistics(snapshot: Dict[str, Any]) -> UsageStatistics:
    return UsageStatistics.from_dict(snapshot)


@pytest.fixture
def first_choice() -> FixedRandom:
    return FixedRandom(0.0)


@pytest.fixture
def last_choice() -> FixedRandom:
    return FixedRandom(0.999999)
