"""Heuristic capability set used to bias every draw the predictor makes."""

from __future__ import annotations

from functools import reduce
from typing import Protocol, Sequence

from ..data.names import to_id
from ..models import PokemonSet
from ..sampling import EXCLUDED, Transform, combine, neutral


def veto(*names: str) -> Transform:
    """Exclude candidates whose id matches any of ``names``."""

    banned = {to_id(name) for name in names}
    return lambda key, weight: EXCLUDED if to_id(key) in banned else weight


class Heuristics(Protocol):
    """One scoring-transform factory per facet of set construction.

    Each factory returns ``(key, weight) -> weight``; a result ``<= 0`` vetoes
    the candidate. ``update`` is called once a member has been finalized.
    """

    def update(self, pokemon: PokemonSet) -> None:
        ...

    def species(self, *species: str) -> Transform:
        ...

    def spread(self, pokemon: PokemonSet) -> Transform:
        ...

    def ability(self, pokemon: PokemonSet) -> Transform:
        ...

    def item(self, pokemon: PokemonSet) -> Transform:
        ...

    def moves(self, pokemon: PokemonSet) -> Transform:
        ...

    def move(self, *moves: str) -> Transform:
        ...


class AmbivalentHeuristics:
    """Neutral strategy: only refuses to repeat a species or a move."""

    def update(self, pokemon: PokemonSet) -> None:
        return None

    def species(self, *species: str) -> Transform:
        return veto(*species)

    def spread(self, pokemon: PokemonSet) -> Transform:
        return neutral

    def ability(self, pokemon: PokemonSet) -> Transform:
        return neutral

    def item(self, pokemon: PokemonSet) -> Transform:
        return neutral

    def moves(self, pokemon: PokemonSet) -> Transform:
        return neutral

    def move(self, *moves: str) -> Transform:
        return veto(*moves)


class CompositeHeuristics:
    """Chains several strategies; any part's veto wins over the others' preferences."""

    def __init__(self, *parts: Heuristics) -> None:
        self.parts: Sequence[Heuristics] = parts or (AmbivalentHeuristics(),)

    def update(self, pokemon: PokemonSet) -> None:
        for part in self.parts:
            part.update(pokemon)

    def species(self, *species: str) -> Transform:
        return self._fold([part.species(*species) for part in self.parts])

    def spread(self, pokemon: PokemonSet) -> Transform:
        return self._fold([part.spread(pokemon) for part in self.parts])

    def ability(self, pokemon: PokemonSet) -> Transform:
        return self._fold([part.ability(pokemon) for part in self.parts])

    def item(self, pokemon: PokemonSet) -> Transform:
        return self._fold([part.item(pokemon) for part in self.parts])

    def moves(self, pokemon: PokemonSet) -> Transform:
        return self._fold([part.moves(pokemon) for part in self.parts])

    def move(self, *moves: str) -> Transform:
        return self._fold([part.move(*moves) for part in self.parts])

    @staticmethod
    def _fold(transforms: Sequence[Transform]) -> Transform:
        return reduce(combine, transforms)
