"""Usage statistics model and loaders for Smogon display and chaos data."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..data.names import to_id

# Chaos files list "no item" and the empty move slot explicitly.
_CHAOS_PLACEHOLDERS = {"", "nothing"}


@dataclass(slots=True)
class UsageWeights:
    raw: float = 0.0
    real: float = 0.0
    weighted: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "UsageWeights":
        data = data or {}
        return cls(
            raw=float(data.get("raw", 0) or 0),
            real=float(data.get("real", 0) or 0),
            weighted=float(data.get("weighted", 0) or 0),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"raw": self.raw, "real": self.real, "weighted": self.weighted}


@dataclass(slots=True)
class SpeciesStatistics:
    """Per-species usage plus the distributions a set is sampled from."""

    name: str
    usage: UsageWeights = field(default_factory=UsageWeights)
    lead: UsageWeights = field(default_factory=UsageWeights)
    count: int = 0
    abilities: Dict[str, float] = field(default_factory=dict)
    items: Dict[str, float] = field(default_factory=dict)
    spreads: Dict[str, float] = field(default_factory=dict)
    moves: Dict[str, float] = field(default_factory=dict)
    teammates: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "SpeciesStatistics":
        return cls(
            name=name,
            usage=UsageWeights.from_dict(data.get("usage")),
            lead=UsageWeights.from_dict(data.get("lead")),
            count=int(data.get("count", 0) or 0),
            abilities=_weights(data.get("abilities")),
            items=_weights(data.get("items")),
            # @smogon/stats names the spread table "stats"
            spreads=_weights(data.get("spreads", data.get("stats"))),
            moves=_weights(data.get("moves")),
            teammates=_weights(data.get("teammates"), keep_negative=True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usage": self.usage.to_dict(),
            "lead": self.lead.to_dict(),
            "count": self.count,
            "abilities": dict(self.abilities),
            "items": dict(self.items),
            "spreads": dict(self.spreads),
            "moves": dict(self.moves),
            "teammates": dict(self.teammates),
        }


@dataclass(slots=True)
class UsageStatistics:
    """A statistics snapshot keyed by species name."""

    battles: int = 0
    pokemon: Dict[str, SpeciesStatistics] = field(default_factory=dict)

    def get(self, species: str) -> Optional[SpeciesStatistics]:
        found = self.pokemon.get(species)
        if found is not None:
            return found
        target = to_id(species)
        for name, stats in self.pokemon.items():
            if to_id(name) == target:
                return stats
        return None

    def __contains__(self, species: object) -> bool:
        return isinstance(species, str) and self.get(species) is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UsageStatistics":
        """Parse the display format (``{"battles": n, "pokemon": {...}}``)."""

        pokemon = data.get("pokemon")
        if not isinstance(pokemon, Mapping):
            raise ValueError("Statistics payload has no 'pokemon' section")
        return cls(
            battles=int(data.get("battles", 0) or 0),
            pokemon={
                name: SpeciesStatistics.from_dict(name, entry)
                for name, entry in pokemon.items()
                if isinstance(entry, Mapping)
            },
        )

    @classmethod
    def from_chaos(
        cls,
        chaos: Mapping[str, Any],
        leads: Optional[Mapping[str, UsageWeights]] = None,
    ) -> "UsageStatistics":
        """Convert Smogon's chaos JSON, optionally merging a parsed leads table."""

        data = chaos.get("data")
        if not isinstance(data, Mapping):
            raise ValueError("Chaos payload has no 'data' section")
        info = chaos.get("info") or {}
        lead_table = {to_id(name): weights for name, weights in (leads or {}).items()}

        pokemon: Dict[str, SpeciesStatistics] = {}
        for name, entry in data.items():
            if not isinstance(entry, Mapping):
                continue
            raw = float(entry.get("Raw count", 0) or 0)
            pokemon[name] = SpeciesStatistics(
                name=name,
                usage=UsageWeights(
                    raw=raw,
                    real=float(entry.get("Real count", raw) or 0),
                    weighted=float(entry.get("usage", 0) or 0),
                ),
                lead=lead_table.get(to_id(name), UsageWeights()),
                count=int(raw),
                abilities=_weights(entry.get("Abilities")),
                items=_weights(entry.get("Items")),
                spreads=_weights(entry.get("Spreads")),
                moves=_weights(entry.get("Moves")),
                teammates=_weights(entry.get("Teammates"), keep_negative=True),
            )
        return cls(battles=int(info.get("number of battles", 0) or 0), pokemon=pokemon)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "battles": self.battles,
            "pokemon": {name: stats.to_dict() for name, stats in self.pokemon.items()},
        }


def parse_leads(text: str) -> Dict[str, UsageWeights]:
    """Parse a Smogon leads table.

    Rows look like ``| 1    | Great Tusk         | 12.34567% | 1234   |  5.00% |``.
    """

    leads: Dict[str, UsageWeights] = {}
    for line in text.splitlines():
        parts = [part.strip() for part in line.strip().strip("|").split("|")]
        if len(parts) < 4 or not parts[0].isdigit():
            continue
        try:
            weighted = float(parts[2].rstrip("%")) / 100
            raw = float(parts[3])
        except ValueError:
            continue
        leads[parts[1]] = UsageWeights(raw=raw, real=raw, weighted=weighted)
    return leads


def load_statistics(path: str | Path) -> UsageStatistics:
    """Load a JSON statistics file in either display or chaos form."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(payload, Mapping) and "data" in payload and "pokemon" not in payload:
        return UsageStatistics.from_chaos(payload)
    return UsageStatistics.from_dict(payload)


def _weights(table: Any, *, keep_negative: bool = False) -> Dict[str, float]:
    if not isinstance(table, Mapping):
        return {}
    weights: Dict[str, float] = {}
    for key, value in table.items():
        if key in _CHAOS_PLACEHOLDERS:
            continue
        try:
            weight = float(value)
        except (TypeError, ValueError):
            continue
        if weight > 0 or keep_negative:
            weights[str(key)] = weight
    return weights
