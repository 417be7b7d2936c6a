"""Rule-driven legality checker for predicted teams.

Complaint wording follows Pokemon Showdown's team validator so callers can
pattern-match on it (minimum team size, event-only shiny requirements).
"""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..data.names import generation_of, to_id
from ..models import PokemonSet
from .oracle import MIN_TEAM_SIZE_PREFIX, Facts


def _ids(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(to_id(value) for value in values or ())


@dataclass(frozen=True, slots=True)
class Ruleset:
    """Format rules. Empty ``species``/``learnsets``/``abilities`` mean "not enforced"."""

    format_id: str = "gen9ou"
    min_team_size: int = 6
    max_team_size: int = 6
    max_level: int = 100
    default_level: int = 100
    species_clause: bool = True
    item_clause: bool = False
    banned_species: FrozenSet[str] = frozenset()
    banned_moves: FrozenSet[str] = frozenset()
    banned_abilities: FrozenSet[str] = frozenset()
    banned_items: FrozenSet[str] = frozenset()
    shiny_required: FrozenSet[str] = frozenset()
    species: FrozenSet[str] = frozenset()
    learnsets: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    abilities: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    @property
    def gen(self) -> int:
        return generation_of(self.format_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Ruleset":
        if not isinstance(data, Mapping):
            raise ValueError("Ruleset must be a JSON object")
        format_id = str(data.get("format", data.get("format_id", "gen9ou")))
        max_level = int(data.get("max_level", 100))
        return cls(
            format_id=format_id,
            min_team_size=int(data.get("min_team_size", 6)),
            max_team_size=int(data.get("max_team_size", 6)),
            max_level=max_level,
            default_level=int(data.get("default_level", max_level)),
            species_clause=bool(data.get("species_clause", True)),
            item_clause=bool(data.get("item_clause", False)),
            banned_species=_ids(data.get("banned_species")),
            banned_moves=_ids(data.get("banned_moves")),
            banned_abilities=_ids(data.get("banned_abilities")),
            banned_items=_ids(data.get("banned_items")),
            shiny_required=_ids(data.get("shiny_required")),
            species=_ids(data.get("species")),
            learnsets={to_id(k): _ids(v) for k, v in (data.get("learnsets") or {}).items()},
            abilities={to_id(k): _ids(v) for k, v in (data.get("abilities") or {}).items()},
        )

    @classmethod
    def load(cls, path: str | Path) -> "Ruleset":
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ValueError(f"Unreadable ruleset {path}: {exc}") from exc
        return cls.from_dict(payload)


class RulesetValidator:
    """Implements the legality-oracle contract on top of a :class:`Ruleset`."""

    def __init__(self, ruleset: Optional[Ruleset] = None) -> None:
        self.ruleset = ruleset or Ruleset()

    def check_species(self, species: str) -> Tuple[bool, Facts]:
        sid = to_id(species)
        rules = self.ruleset
        if not sid or sid in rules.banned_species:
            return True, {}
        if rules.species and sid not in rules.species:
            return True, {}
        facts: Facts = {}
        for move in rules.learnsets.get(sid, ()):
            if move not in rules.banned_moves:
                facts[f"move:{move}"] = True
        for ability in rules.abilities.get(sid, ()):
            if ability not in rules.banned_abilities:
                facts[f"ability:{ability}"] = True
        return False, facts

    def validate_team(
        self,
        team: Sequence[PokemonSet],
        skip_sets: Optional[Mapping[str, Facts]] = None,
    ) -> Optional[List[str]]:
        rules = self.ruleset
        problems: List[str] = []
        if len(team) < rules.min_team_size:
            problems.append(
                f"{MIN_TEAM_SIZE_PREFIX} {rules.min_team_size} Pokémon (your team has {len(team)})."
            )
        if len(team) > rules.max_team_size:
            problems.append(
                f"You may only bring up to {rules.max_team_size} Pokémon (your team has {len(team)})."
            )
        if rules.species_clause:
            for species in _duplicates(p.species for p in team):
                problems.append(
                    "You are limited to one of each Pokémon by Species Clause "
                    f"(you have more than one {species})."
                )
        if rules.item_clause:
            for item in _duplicates(p.item for p in team if p.item):
                problems.append(
                    "You are limited to one of each item by Item Clause "
                    f"(you have more than one {item})."
                )
        skip_sets = skip_sets or {}
        for pokemon in team:
            problems.extend(self._check_set(pokemon, skip_sets.get(pokemon.name) or {}))
        return problems or None

    def validate_set(self, pokemon: PokemonSet) -> Optional[List[str]]:
        return self._check_set(pokemon, {}) or None

    def _check_set(self, pokemon: PokemonSet, skip: Facts) -> List[str]:
        rules = self.ruleset
        name = pokemon.name or pokemon.species
        sid = to_id(pokemon.species)
        problems: List[str] = []

        if rules.species and sid not in rules.species:
            return [f'The Pokemon "{pokemon.species}" does not exist.']
        if sid in rules.banned_species:
            problems.append(f"{pokemon.species} is banned.")
        if pokemon.level > rules.max_level:
            problems.append(f"{name} is higher than level {rules.max_level}.")

        if len(pokemon.moves) > 4:
            problems.append(f"{name} has more than four moves.")
        seen: set[str] = set()
        learnset = rules.learnsets.get(sid)
        for move in pokemon.moves:
            mid = to_id(move)
            if mid in seen:
                problems.append(f"{name} has multiple copies of {move}.")
                continue
            seen.add(mid)
            if mid in rules.banned_moves:
                problems.append(f"{name}'s move {move} is banned.")
            elif learnset is not None and not skip.get(f"move:{mid}") and mid not in learnset:
                problems.append(f"{name} can't learn {move}.")

        aid = to_id(pokemon.ability)
        if aid:
            legal = rules.abilities.get(sid)
            if aid in rules.banned_abilities:
                problems.append(f"{name}'s ability {pokemon.ability} is banned.")
            elif legal is not None and not skip.get(f"ability:{aid}") and aid not in legal:
                problems.append(f"{name} can't have {pokemon.ability}.")

        iid = to_id(pokemon.item)
        if iid and iid in rules.banned_items:
            problems.append(f"{name}'s item {pokemon.item} is banned.")

        if sid in rules.shiny_required and not pokemon.shiny:
            problems.append(f"{name} must be shiny because it is only obtainable from a shiny event.")
        return problems


def _duplicates(values: Iterable[str]) -> List[str]:
    names = list(values)
    counts = Counter(to_id(name) for name in names)
    reported: List[str] = []
    for name in names:
        key = to_id(name)
        if counts[key] > 1:
            reported.append(name)
            counts[key] = 0
    return reported
