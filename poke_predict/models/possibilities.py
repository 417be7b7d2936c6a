"""Per-slot constraints combined with a species' sampling pools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from ..data.names import to_id
from ..sampling import EXCLUDED, WeightedPool
from .team import PokemonSet, Spread

if TYPE_CHECKING:  # pragma: no cover
    from ..statistics import SpeciesStatistics

MAX_MOVES = 4


@dataclass(frozen=True, slots=True)
class SetPossibilities:
    """Everything known or likely about one team member.

    ``ability``/``item`` are fixed when non-empty; ``locked_moves`` are moves
    already revealed and are excluded from ``moves``. Pools are immutable, so
    sharing an instance between predictions is safe.
    """

    species: str
    level: int = 100
    gender: str = ""
    ability: str = ""
    item: str = ""
    locked_moves: Tuple[str, ...] = ()
    spreads: WeightedPool[Spread] = field(default_factory=WeightedPool)
    abilities: WeightedPool[str] = field(default_factory=WeightedPool)
    items: WeightedPool[str] = field(default_factory=WeightedPool)
    moves: WeightedPool[str] = field(default_factory=WeightedPool)

    @classmethod
    def create(
        cls,
        species: str,
        statistics: Optional["SpeciesStatistics"] = None,
        *,
        known: Optional[PokemonSet] = None,
        level: int = 100,
    ) -> "SetPossibilities":
        locked: Dict[str, str] = {}
        if known is not None:
            for move in known.moves:
                if move and to_id(move) not in locked and len(locked) < MAX_MOVES:
                    locked[to_id(move)] = move

        if statistics is None:
            spreads: WeightedPool[Spread] = WeightedPool()
            abilities: WeightedPool[str] = WeightedPool()
            items: WeightedPool[str] = WeightedPool()
            moves: WeightedPool[str] = WeightedPool()
        else:
            spreads = WeightedPool.create(statistics.spreads, _spread_entry)
            abilities = WeightedPool.from_weights(statistics.abilities)
            items = WeightedPool.from_weights(statistics.items)
            moves = WeightedPool.create(
                statistics.moves,
                lambda move, weight: (move, EXCLUDED if to_id(move) in locked else weight),
            )

        return cls(
            species=species,
            level=min(known.level, level) if known is not None else level,
            gender=known.gender if known is not None else "",
            ability=(known.ability or "") if known is not None else "",
            item=(known.item or "") if known is not None else "",
            locked_moves=tuple(locked.values()),
            spreads=spreads,
            abilities=abilities,
            items=items,
            moves=moves,
        )


def _spread_entry(key: str, weight: float) -> Tuple[Spread, float]:
    spread = Spread.parse(key)
    if spread is None:
        return Spread(nature=key), EXCLUDED
    return spread, weight
