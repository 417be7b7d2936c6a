"""Synergy heuristic driven by teammate co-usage statistics."""

from __future__ import annotations

from typing import Dict, Iterable

from ..data.names import to_id
from ..statistics import UsageStatistics
from ..sampling import Transform, combine
from .base import AmbivalentHeuristics, veto


class TeammateHeuristics(AmbivalentHeuristics):
    """Bias species draws toward Pokemon commonly paired with the anchors.

    Teammate scores are normalised per anchor by its largest absolute score,
    so a candidate's weight is scaled by ``1 + strength * share`` (never below
    ``floor``). Candidates the statistics pair negatively are damped.
    """

    def __init__(
        self,
        statistics: UsageStatistics,
        *,
        strength: float = 1.0,
        floor: float = 0.1,
    ) -> None:
        self.statistics = statistics
        self.strength = strength
        self.floor = floor
        self._shares: Dict[str, Dict[str, float]] = {}

    def species(self, *species: str) -> Transform:
        shares = [self._teammate_shares(anchor) for anchor in species]
        shares = [table for table in shares if table]
        if not shares:
            return veto(*species)

        def bias(key: str, weight: float) -> float:
            factor = 1.0
            candidate = to_id(key)
            for table in shares:
                factor *= max(self.floor, 1.0 + self.strength * table.get(candidate, 0.0))
            return weight * factor

        return combine(veto(*species), bias)

    def _teammate_shares(self, anchor: str) -> Dict[str, float]:
        key = to_id(anchor)
        cached = self._shares.get(key)
        if cached is not None:
            return cached
        stats = self.statistics.get(anchor)
        shares = _normalise(stats.teammates.items()) if stats else {}
        self._shares[key] = shares
        return shares


def _normalise(entries: Iterable[tuple[str, float]]) -> Dict[str, float]:
    table = {to_id(name): value for name, value in entries}
    scale = max((abs(value) for value in table.values()), default=0.0)
    if scale <= 0:
        return {}
    return {name: value / scale for name, value in table.items()}
