"""Usage-statistics driven prediction of an opponent's full team."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .data.names import MAX_HAPPINESS, generation_of, to_id
from .heuristics import AmbivalentHeuristics, Heuristics, veto
from .models import PokemonSet, SetPossibilities, Spread, Team
from .sampling import EXCLUDED, RandomSource, Transform, WeightedPool, combine, neutral
from .statistics import SpeciesStatistics, UsageStatistics
from .validation import (
    MIN_TEAM_SIZE_PREFIX,
    SHINY_MARKER,
    Facts,
    LegalityOracle,
    Ruleset,
    RulesetValidator,
)

TEAM_SIZE = 6
MAX_MOVES = 4

# Happiness-inverse move pair: Frustration wants 0 happiness unless Return is also run.
FRUSTRATION = "frustration"
RETURN = "return"

DEFAULT_SPREAD = Spread(nature="Serious")


class Predictor:
    """Samples plausible teams and sets from a usage statistics snapshot.

    Every draw goes through an immutable :class:`WeightedPool`, so rejecting a
    candidate never requires undoing anything: the builder simply keeps the
    pool lineage it already has. Given a seeded random source the whole
    prediction is deterministic.
    """

    def __init__(
        self,
        statistics: UsageStatistics,
        *,
        validator: Optional[LegalityOracle] = None,
        format_id: str = "gen9ou",
        gen: Optional[int] = None,
        level: int = 100,
        lead_generation_cutoff: int = 5,
        heuristics: Callable[[], Heuristics] = AmbivalentHeuristics,
        debug_logger: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.statistics = statistics
        self.format_id = format_id
        self.validator: LegalityOracle = validator or RulesetValidator(Ruleset(format_id=format_id))
        self.gen = gen if gen is not None else generation_of(format_id)
        self.level = level
        self.lead_generation_cutoff = lead_generation_cutoff
        self.heuristics = heuristics
        self._debug_logger = debug_logger

        # Species banned since the snapshot was published stay in the pool as
        # non-selectable entries.
        self._species_has: Dict[str, Facts] = {}
        self.species: WeightedPool[str] = WeightedPool.create(statistics.pokemon, self._usage_entry)
        self.leads: WeightedPool[str] = WeightedPool.create(statistics.pokemon, self._lead_entry)
        self._debug(
            f"Built species pool ({len(self.species.available())} legal of {len(self.species)})"
        )

    @property
    def legality_cache(self) -> Mapping[str, Facts]:
        return MappingProxyType(self._species_has)

    def _debug(self, message: str) -> None:
        if self._debug_logger:
            self._debug_logger(message)

    def _usage_entry(self, name: str, stats: SpeciesStatistics) -> Tuple[str, float]:
        invalid, facts = self.validator.check_species(name)
        if invalid:
            self._debug(f"Excluding {name}: rejected by the rules")
            return name, EXCLUDED
        self._species_has[name] = facts
        return name, stats.usage.weighted

    def _lead_entry(self, name: str, stats: SpeciesStatistics) -> Tuple[str, float]:
        return (name, stats.lead.weighted) if name in self._species_has else (name, EXCLUDED)

    # ------------------------------------------------------------------
    # Partial information
    # ------------------------------------------------------------------
    def possibilities(
        self, known: Union[Team, Iterable[PokemonSet]]
    ) -> List[SetPossibilities]:
        """Turn revealed sets into ordered per-slot constraints."""

        members = known.pokemon if isinstance(known, Team) else list(known)
        result: List[SetPossibilities] = []
        for pokemon in members[:TEAM_SIZE]:
            stats = self.statistics.get(pokemon.species)
            species = stats.name if stats else pokemon.species
            result.append(SetPossibilities.create(species, stats, known=pokemon, level=self.level))
        return result

    # ------------------------------------------------------------------
    # Team construction
    # ------------------------------------------------------------------
    def predict_team(
        self,
        possibilities: Sequence[SetPossibilities] = (),
        random: Optional[RandomSource] = None,
        validate: int = 0,
    ) -> Team:
        """Build up to six members, honouring fixed slots first.

        ``possibilities`` must have no gaps and is never modified. ``validate``
        is the number of legality checks allowed; once spent, remaining
        members are accepted unchecked.
        """

        H = self.heuristics()
        species = self.species
        leads = self.leads
        budget = validate

        # True: nothing generated yet, score against every fixed member at once.
        # A set: score against that freshly added teammate. False: no bias.
        last: Union[PokemonSet, bool] = True
        team = Team(format=self.format_id)
        while len(team) < TEAM_SIZE:
            slot = len(team)
            if slot < len(possibilities):
                pokemon = self.predict_set(possibilities[slot], random, H)
            else:
                if not slot and self.gen < self.lead_generation_cutoff:
                    # No team context exists for the lead, so no heuristics apply.
                    name, leads = leads.select(neutral, random)
                else:
                    name, species = species.select(self._species_transform(H, team, last), random)
                if name is None:
                    self._debug(f"No selectable species left for slot {slot}; stopping early")
                    break
                self._debug(f"Slot {slot}: drew {name}")
                p = SetPossibilities.create(name, self.statistics.pokemon[name], level=self.level)
                pokemon = self.predict_set(p, random, H)
                last = pokemon

            if budget > 0:
                budget -= 1
                if not self._validate(team.pokemon, pokemon):
                    self._debug(f"Slot {slot}: {pokemon.species} rejected ({budget} checks left)")
                    last = False
                    continue

            team.add_pokemon(pokemon)
            if len(team) < TEAM_SIZE:
                H.update(pokemon)
        return team

    def _species_transform(
        self, H: Heuristics, team: Team, last: Union[PokemonSet, bool]
    ) -> Transform:
        taken = veto(*team.species())
        if last is True:
            return combine(taken, H.species(*team.species()))
        if isinstance(last, PokemonSet):
            return combine(taken, H.species(last.species))
        return taken

    # ------------------------------------------------------------------
    # Set construction
    # ------------------------------------------------------------------
    def predict_set(
        self,
        p: SetPossibilities,
        random: Optional[RandomSource] = None,
        H: Optional[Heuristics] = None,
    ) -> PokemonSet:
        """Fill in spread, ability, item, and up to four moves for one member."""

        H = H or AmbivalentHeuristics()
        pokemon = PokemonSet(
            name=p.species,
            species=p.species,
            level=p.level,
            gender=p.gender or "",
            ability=p.ability or "",
            item=p.item or "",
            moves=list(p.locked_moves),
        )

        spread, _ = p.spreads.select(H.spread(pokemon), random)
        spread = spread or DEFAULT_SPREAD
        pokemon.nature = spread.nature
        pokemon.evs = spread.ev_dict()
        pokemon.ivs = spread.iv_dict()

        if not pokemon.ability:
            pokemon.ability = p.abilities.select(H.ability(pokemon), random)[0] or ""
        if not pokemon.item:
            pokemon.item = p.items.select(H.item(pokemon), random)[0] or ""

        moves = p.moves
        last: Optional[str] = None
        while len(pokemon.moves) < MAX_MOVES:
            # First draw scores against the whole set and every locked move.
            fn = H.move(last) if last else combine(H.moves(pokemon), H.move(*pokemon.moves))
            move, moves = moves.select(fn, random)
            # Species like Ditto run out of moves early.
            if move is None:
                break
            last = move
            pokemon.moves.append(move)

        ids = {to_id(move) for move in pokemon.moves}
        pokemon.happiness = 0 if FRUSTRATION in ids and RETURN not in ids else MAX_HAPPINESS
        return pokemon

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _validate(self, team: Sequence[PokemonSet], pokemon: PokemonSet) -> bool:
        candidate = [*team, pokemon]
        # Only the cached species facts are known legal; drawn details must still be checked.
        skip_sets = {member.name: self._species_facts(member) for member in candidate}

        invalid = self.validator.validate_team(candidate, skip_sets)
        if not invalid:
            return True
        # The team only reaches its minimum size once it is finished.
        invalid = [problem for problem in invalid if not problem.startswith(MIN_TEAM_SIZE_PREFIX)]
        if not invalid:
            return True

        # Formats with their own single-set validation hook are not consulted here.
        invalid = self.validator.validate_set(pokemon)
        if not invalid:
            return True
        if len(invalid) == 1 and SHINY_MARKER in invalid[0]:
            pokemon.shiny = True
            self._debug(f"{pokemon.species} must be shiny; retrying as shiny")
            return not self.validator.validate_set(pokemon)
        self._debug(f"{pokemon.species}: {'; '.join(invalid)}")
        return False

    def _species_facts(self, pokemon: PokemonSet) -> Facts:
        return dict(self._species_has.get(pokemon.species, {}))
