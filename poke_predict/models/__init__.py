"""Shared dataclasses for team prediction."""

from .team import PokemonSet, Spread, Team
from .possibilities import SetPossibilities

__all__ = [
    "PokemonSet",
    "SetPossibilities",
    "Spread",
    "Team",
]
