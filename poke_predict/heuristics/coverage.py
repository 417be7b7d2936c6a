"""Stateful heuristic that steers species draws away from stacked weaknesses."""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Union

from ..data.names import to_id
from ..data.type_chart import resistances, weaknesses
from ..models import PokemonSet
from ..sampling import Transform, combine
from .base import AmbivalentHeuristics, veto

TypeLookup = Union[Mapping[str, List[str]], Callable[[str], List[str]]]


class TypeCoverageHeuristics(AmbivalentHeuristics):
    """Track the typing of finalized members and score candidates against it.

    An attack type is *stacked* once two or more members are weak to it. A
    candidate sharing a stacked weakness is divided by ``1 + strength`` per
    shared type; one resisting a stacked type is multiplied by the same.
    Species whose typing cannot be resolved keep their weight.
    """

    def __init__(self, types: TypeLookup, *, strength: float = 0.5) -> None:
        self._lookup = types
        self.strength = strength
        self._cache: Dict[str, List[str]] = {}
        self.weak_counts: Dict[str, int] = {}

    def update(self, pokemon: PokemonSet) -> None:
        for attack in weaknesses(self.types_of(pokemon.species)):
            self.weak_counts[attack] = self.weak_counts.get(attack, 0) + 1

    def species(self, *species: str) -> Transform:
        stacked = {attack for attack, count in self.weak_counts.items() if count >= 2}
        if not stacked:
            return veto(*species)

        def bias(key: str, weight: float) -> float:
            types = self.types_of(key)
            if not types:
                return weight
            shared = len(stacked.intersection(weaknesses(types)))
            patched = len(stacked.intersection(resistances(types)))
            return weight * (1 + self.strength) ** (patched - shared)

        return combine(veto(*species), bias)

    def types_of(self, species: str) -> List[str]:
        key = to_id(species)
        if key in self._cache:
            return self._cache[key]
        if callable(self._lookup):
            types = list(self._lookup(species))
        else:
            types = list(self._lookup.get(species) or self._lookup.get(key) or [])
        types = [t.lower() for t in types]
        self._cache[key] = types
        return types
