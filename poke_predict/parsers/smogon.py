"""Parser and formatter for Smogon/Showdown team export text."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List

from ..data.names import MAX_HAPPINESS, STAT_NAMES
from ..models import PokemonSet, Team

_GENDERS = {"M", "F"}


def parse_team(raw_text: str, *, name: str | None = None, format_hint: str = "gen9ou") -> Team:
    """Parse a (possibly partial) Showdown export into a Team object."""

    cleaned = raw_text.strip()
    if not cleaned:
        raise ValueError("Team text is empty")

    team = Team(format=format_hint, name=name)
    for entry in _split_entries(cleaned):
        team.add_pokemon(_parse_entry(entry))
    return team


def format_team(team: Team | Iterable[PokemonSet]) -> str:
    members = team.pokemon if isinstance(team, Team) else list(team)
    return "\n\n".join(format_set(pokemon) for pokemon in members) + "\n"


def format_set(pokemon: PokemonSet) -> str:
    """Render one set in export form, omitting default values."""

    header = pokemon.species
    if pokemon.name and pokemon.name != pokemon.species:
        header = f"{pokemon.name} ({pokemon.species})"
    if pokemon.gender in _GENDERS:
        header += f" ({pokemon.gender})"
    if pokemon.item:
        header += f" @ {pokemon.item}"

    lines = [header]
    if pokemon.ability:
        lines.append(f"Ability: {pokemon.ability}")
    if pokemon.level != 100:
        lines.append(f"Level: {pokemon.level}")
    if pokemon.shiny:
        lines.append("Shiny: Yes")
    if pokemon.happiness != MAX_HAPPINESS:
        lines.append(f"Happiness: {pokemon.happiness}")
    if pokemon.tera_type:
        lines.append(f"Tera Type: {pokemon.tera_type}")
    evs = _format_stat_spread(pokemon.evs, default=0)
    if evs:
        lines.append(f"EVs: {evs}")
    if pokemon.nature:
        lines.append(f"{pokemon.nature} Nature")
    ivs = _format_stat_spread(pokemon.ivs, default=31)
    if ivs:
        lines.append(f"IVs: {ivs}")
    lines.extend(f"- {move}" for move in pokemon.moves)
    return "\n".join(lines)


def _split_entries(text: str) -> List[str]:
    return [chunk.strip() for chunk in re.split(r"\n\s*\n", text) if chunk.strip()]


def _parse_entry(chunk: str) -> PokemonSet:
    lines = [line.strip() for line in chunk.splitlines() if line.strip()]
    if not lines:
        raise ValueError("Pokemon entry is empty")

    name, species, gender, item = _parse_header(lines[0])
    pokemon = PokemonSet(name=name, species=species, gender=gender, item=item)

    for line in lines[1:]:
        if line.startswith("Ability:"):
            pokemon.ability = _value_after_colon(line)
        elif line.startswith("Level:"):
            pokemon.level = _int_after_colon(line, pokemon.level)
        elif line.startswith("Happiness:"):
            pokemon.happiness = _int_after_colon(line, pokemon.happiness)
        elif line.startswith("Shiny:"):
            pokemon.shiny = _value_after_colon(line).lower() == "yes"
        elif line.startswith("Tera Type:"):
            pokemon.tera_type = _value_after_colon(line)
        elif line.startswith("EVs:"):
            pokemon.evs = _parse_stat_spread(_value_after_colon(line))
        elif line.startswith("IVs:"):
            pokemon.ivs = _parse_stat_spread(_value_after_colon(line))
        elif line.endswith("Nature"):
            pokemon.nature = line.replace("Nature", "").strip()
        elif line.startswith("-"):
            move = line.lstrip("- ").strip()
            if move and move not in pokemon.moves:
                pokemon.moves.append(move)
        else:
            pokemon.notes.append(line)

    return pokemon


def _parse_header(line: str) -> tuple[str, str, str, str]:
    item = ""
    if "@" in line:
        line, item = (part.strip() for part in line.split("@", 1))
    groups = re.findall(r"\(([^)]*)\)", line)
    gender = ""
    if groups and groups[-1].strip().upper() in _GENDERS:
        gender = groups.pop().strip().upper()
    name = re.sub(r"\s*\([^)]*\)", "", line).strip()
    species = groups[-1].strip() if groups and groups[-1].strip() else name
    return name or species, species, gender, item


def _parse_stat_spread(spread: str) -> Dict[str, int]:
    stats: Dict[str, int] = {}
    for value, stat in _split_stat_tokens(spread):
        stats[stat] = value
    return stats


def _split_stat_tokens(spread: str) -> Iterable[tuple[int, str]]:
    for raw in spread.split("/"):
        parts = raw.split()
        if len(parts) < 2:
            continue
        try:
            value = int(parts[0])
        except ValueError:
            continue
        normalized = _normalize_stat(parts[1])
        if normalized:
            yield value, normalized


def _normalize_stat(stat: str) -> str | None:
    key = stat.upper().replace(".", "")
    return {name.upper(): name for name in STAT_NAMES}.get(key)


def _format_stat_spread(stats: Dict[str, int], *, default: int) -> str:
    return " / ".join(
        f"{stats[stat]} {stat}" for stat in STAT_NAMES if stats.get(stat, default) != default
    )


def _value_after_colon(line: str) -> str:
    return line.split(":", 1)[1].strip()


def _int_after_colon(line: str, default: int) -> int:
    try:
        return int(_value_after_colon(line))
    except ValueError:
        return default
