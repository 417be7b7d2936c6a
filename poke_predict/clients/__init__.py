"""External data clients used by the team predictor."""

from .pokeapi import PokeAPIClient, PokeAPIClientError
from .smogon import SmogonStatsClient, SmogonStatsClientError

__all__ = [
    "PokeAPIClient",
    "PokeAPIClientError",
    "SmogonStatsClient",
    "SmogonStatsClientError",
]
