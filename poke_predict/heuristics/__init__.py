"""Heuristic strategies that bias team and set construction."""

from .base import AmbivalentHeuristics, CompositeHeuristics, Heuristics, veto
from .coverage import TypeCoverageHeuristics
from .teammates import TeammateHeuristics

__all__ = [
    "AmbivalentHeuristics",
    "CompositeHeuristics",
    "Heuristics",
    "TeammateHeuristics",
    "TypeCoverageHeuristics",
    "veto",
]
