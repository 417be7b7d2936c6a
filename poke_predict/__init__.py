"""Usage-statistics driven team prediction for competitive Pokemon."""

from .models import PokemonSet, SetPossibilities, Spread, Team
from .parsers.smogon import format_team, parse_team
from .predictor import Predictor
from .sampling import WeightedPool, combine

__all__ = [
    "PokemonSet",
    "Predictor",
    "SetPossibilities",
    "Spread",
    "Team",
    "WeightedPool",
    "combine",
    "format_team",
    "parse_team",
]
