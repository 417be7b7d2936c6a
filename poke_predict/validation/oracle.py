"""Contract the predictor expects from a team legality checker."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..models import PokemonSet

# ``move:<id>``/``ability:<id>``/``item:<id>`` -> already known to be legal.
Facts = Dict[str, bool]

MIN_TEAM_SIZE_PREFIX = "You must bring at least"
SHINY_MARKER = "must be shiny"


class LegalityOracle(Protocol):
    def check_species(self, species: str) -> Tuple[bool, Facts]:
        """Return ``(invalid, facts)`` for a species."""
        ...

    def validate_team(
        self,
        team: Sequence[PokemonSet],
        skip_sets: Optional[Mapping[str, Facts]] = None,
    ) -> Optional[List[str]]:
        """Complaints about the team, or ``None`` when it is legal."""
        ...

    def validate_set(self, pokemon: PokemonSet) -> Optional[List[str]]:
        ...
