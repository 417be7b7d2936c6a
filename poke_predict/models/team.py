"""Core dataclasses shared across the team predictor."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..data.names import MAX_HAPPINESS, STAT_NAMES

_SPREAD_PATTERN = re.compile(r"^\s*([A-Za-z]+)\s*:\s*(\d+(?:\s*/\s*\d+){5})\s*$")


@dataclass(frozen=True, slots=True)
class Spread:
    """A nature plus EV/IV allocation, as keyed in usage statistics."""

    nature: str
    evs: Tuple[int, int, int, int, int, int] = (0, 0, 0, 0, 0, 0)
    ivs: Tuple[int, int, int, int, int, int] = (31, 31, 31, 31, 31, 31)

    @classmethod
    def parse(cls, key: str) -> Optional["Spread"]:
        """Parse a usage key like ``Adamant:4/252/0/0/0/252``; ``None`` when malformed."""

        match = _SPREAD_PATTERN.match(key)
        if not match:
            return None
        evs = tuple(int(value) for value in match.group(2).split("/"))
        if any(value > 255 for value in evs):
            return None
        return cls(nature=match.group(1).title(), evs=evs)  # type: ignore[arg-type]

    def ev_dict(self) -> Dict[str, int]:
        return dict(zip(STAT_NAMES, self.evs))

    def iv_dict(self) -> Dict[str, int]:
        return dict(zip(STAT_NAMES, self.ivs))

    def __str__(self) -> str:
        return f"{self.nature}:{'/'.join(str(v) for v in self.evs)}"


@dataclass(slots=True)
class PokemonSet:
    """Represents a single Smogon/Showdown style Pokemon set."""

    name: str
    species: str = ""
    level: int = 100
    gender: str = ""
    item: str = ""
    ability: str = ""
    nature: str = ""
    evs: Dict[str, int] = field(default_factory=dict)
    ivs: Dict[str, int] = field(default_factory=dict)
    moves: List[str] = field(default_factory=list)
    happiness: int = MAX_HAPPINESS
    shiny: bool = False
    tera_type: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.species:
            self.species = self.name


@dataclass(slots=True)
class Team:
    """Ordered collection of Pokemon sets; the first member is the lead."""

    format: str = "gen9ou"
    name: Optional[str] = None
    pokemon: List[PokemonSet] = field(default_factory=list)

    def add_pokemon(self, pokemon: PokemonSet) -> None:
        self.pokemon.append(pokemon)

    def is_empty(self) -> bool:
        return not self.pokemon

    def species(self) -> List[str]:
        return [p.species for p in self.pokemon]

    def __len__(self) -> int:
        return len(self.pokemon)
