"""Tests for set and team prediction."""

from __future__ import annotations

import random
from dataclasses import asdict
from typing import List, Optional

import pytest

from poke_predict import Predictor
from poke_predict.heuristics import AmbivalentHeuristics
from poke_predict.models import PokemonSet, SetPossibilities, Team
from poke_predict.sampling import EXCLUDED
from poke_predict.statistics import UsageStatistics
from poke_predict.validation import Ruleset, RulesetValidator

from conftest import FixedRandom


class RejectingValidator:
    """Accepts every species up front, then rejects sets by species name."""

    def __init__(self, rejected: Optional[set] = None, *, reject_all: bool = False) -> None:
        self.rejected = rejected or set()
        self.reject_all = reject_all
        self.team_checks = 0
        self.set_checks = 0

    def check_species(self, species):
        return False, {}

    def validate_team(self, team, skip_sets=None):
        self.team_checks += 1
        newest = team[-1]
        if self.reject_all or newest.species in self.rejected:
            return [f"{newest.species} is banned."]
        return None

    def validate_set(self, pokemon):
        self.set_checks += 1
        if self.reject_all or pokemon.species in self.rejected:
            return [f"{pokemon.species} is banned."]
        return None


class RecordingHeuristics(AmbivalentHeuristics):
    def __init__(self) -> None:
        self.species_calls: List[tuple] = []
        self.updates: List[str] = []

    def species(self, *species):
        self.species_calls.append(species)
        return super().species(*species)

    def update(self, pokemon):
        self.updates.append(pokemon.species)


def _moves_are_valid(pokemon: PokemonSet) -> bool:
    ids = [move.lower() for move in pokemon.moves]
    return len(ids) <= 4 and len(set(ids)) == len(ids)


# ----------------------------------------------------------------------
# Set prediction
# ----------------------------------------------------------------------
def test_predict_set_takes_heaviest_choices(statistics, first_choice) -> None:
    predictor = Predictor(statistics)
    p = SetPossibilities.create("Pidgey", statistics.get("Pidgey"))

    pokemon = predictor.predict_set(p, first_choice)

    assert pokemon.species == "Pidgey"
    assert pokemon.ability == "Keen Eye"
    assert pokemon.item == "Leftovers"
    assert pokemon.nature == "Jolly"
    assert pokemon.evs["Atk"] == 252
    assert pokemon.ivs["Spe"] == 31
    assert pokemon.moves == ["Return", "Frustration", "Quick Attack", "Roost"]
    assert pokemon.happiness == 255


def test_predict_set_keeps_locked_moves_and_revealed_details(statistics, first_choice) -> None:
    predictor = Predictor(statistics)
    known = PokemonSet(name="Pidgey", item="Choice Band", level=50, moves=["Return"])
    p = predictor.possibilities([known])[0]

    pokemon = predictor.predict_set(p, first_choice)

    assert pokemon.item == "Choice Band"
    assert pokemon.level == 50
    assert pokemon.moves[0] == "Return"
    assert pokemon.moves.count("Return") == 1
    assert _moves_are_valid(pokemon)
    assert known.moves == ["Return"]


def test_locked_return_keeps_max_happiness(statistics) -> None:
    predictor = Predictor(statistics)
    p = predictor.possibilities([PokemonSet(name="Pidgey", moves=["Return"])])[0]

    for seed in range(25):
        pokemon = predictor.predict_set(p, random.Random(seed))
        assert pokemon.happiness == 255
        assert _moves_are_valid(pokemon)


def test_frustration_without_return_sets_zero_happiness(statistics, last_choice) -> None:
    predictor = Predictor(statistics)
    p = predictor.possibilities([PokemonSet(name="Pidgey", moves=["Frustration"])])[0]

    pokemon = predictor.predict_set(p, last_choice)

    assert pokemon.moves == ["Frustration", "U-turn", "Roost", "Quick Attack"]
    assert pokemon.happiness == 0


def test_predict_set_stops_when_moves_run_out(first_choice) -> None:
    statistics = UsageStatistics.from_dict(
        {"pokemon": {"Ditto": {"usage": {"weighted": 1.0}, "moves": {"Transform": 1.0}}}}
    )
    predictor = Predictor(statistics)

    pokemon = predictor.predict_set(
        SetPossibilities.create("Ditto", statistics.get("Ditto")), first_choice
    )

    assert pokemon.moves == ["Transform"]
    assert pokemon.nature == "Serious"
    assert pokemon.ability == ""
    assert pokemon.item == ""


def test_possibilities_are_never_modified(statistics) -> None:
    predictor = Predictor(statistics)
    possibilities = predictor.possibilities([PokemonSet(name="Zubat", moves=["Bite"])])
    before = possibilities[0].moves

    predictor.predict_team(possibilities, random.Random(5))

    assert possibilities[0].moves is before
    assert possibilities[0].locked_moves == ("Bite",)
    assert before.weight("Bite") == EXCLUDED


# ----------------------------------------------------------------------
# Team prediction
# ----------------------------------------------------------------------
def test_predict_team_builds_six_distinct_members(statistics) -> None:
    predictor = Predictor(statistics)

    team = predictor.predict_team(random=random.Random(1))

    assert isinstance(team, Team)
    assert len(team) == 6
    assert len(set(team.species())) == 6
    assert all(_moves_are_valid(pokemon) for pokemon in team.pokemon)


def test_predict_team_is_deterministic_for_a_seed(statistics) -> None:
    predictor = Predictor(statistics, validator=RulesetValidator(Ruleset()))

    first = predictor.predict_team(random=random.Random(42), validate=6)
    second = predictor.predict_team(random=random.Random(42), validate=6)

    assert asdict(first) == asdict(second)


def test_lead_is_drawn_from_lead_statistics_before_gen5(statistics, first_choice) -> None:
    predictor = Predictor(statistics, format_id="gen4ou")

    team = predictor.predict_team(random=first_choice)

    assert team.pokemon[0].species == "Pidgey"
    assert team.species()[1:] == ["Rattata", "Spearow", "Zubat", "Geodude", "Machop"]


def test_lead_uses_usage_from_gen5(statistics, first_choice) -> None:
    predictor = Predictor(statistics, format_id="gen5ou")

    team = predictor.predict_team(random=first_choice)

    assert team.pokemon[0].species == "Rattata"


def test_known_members_fill_the_first_slots(statistics) -> None:
    predictor = Predictor(statistics, format_id="gen4ou")
    known = Team(pokemon=[PokemonSet(name="Zubat", moves=["Bite"]), PokemonSet(name="Onix")])

    team = predictor.predict_team(predictor.possibilities(known), random.Random(9))

    assert team.species()[:2] == ["Zubat", "Onix"]
    assert team.pokemon[0].moves[0] == "Bite"
    assert len(set(team.species())) == len(team) == 6


def test_banned_species_are_excluded_at_construction(statistics) -> None:
    validator = RulesetValidator(Ruleset(banned_species=frozenset({"rattata"})))
    predictor = Predictor(statistics, validator=validator)

    assert "Rattata" not in predictor.legality_cache
    assert predictor.species.weight("Rattata") == EXCLUDED
    assert predictor.leads.weight("Rattata") == EXCLUDED
    for seed in range(10):
        team = predictor.predict_team(random=random.Random(seed))
        assert "Rattata" not in team.species()
        assert len(team) == 6


def test_legality_cache_is_read_only(statistics) -> None:
    predictor = Predictor(statistics)

    with pytest.raises(TypeError):
        predictor.legality_cache["Mew"] = {}  # type: ignore[index]


def test_min_team_size_complaints_are_ignored(statistics, first_choice) -> None:
    predictor = Predictor(statistics, validator=RulesetValidator(Ruleset(min_team_size=6)))

    team = predictor.predict_team(random=first_choice, validate=6)

    assert team.species() == ["Rattata", "Pidgey", "Spearow", "Zubat", "Geodude", "Machop"]


def test_rejected_draw_is_retried_and_spends_budget(statistics, first_choice) -> None:
    validator = RejectingValidator({"Rattata"})
    predictor = Predictor(statistics, validator=validator)

    team = predictor.predict_team(random=first_choice, validate=6)

    assert team.species() == ["Pidgey", "Spearow", "Zubat", "Geodude", "Machop", "Onix"]
    # Budget of six covers the rejected draw plus five accepted members.
    assert validator.team_checks == 6
    assert validator.set_checks == 1


def test_rejection_resets_synergy_bias(statistics, first_choice) -> None:
    heuristics = RecordingHeuristics()
    predictor = Predictor(
        statistics,
        validator=RejectingValidator({"Rattata"}),
        heuristics=lambda: heuristics,
    )

    team = predictor.predict_team(random=first_choice, validate=6)

    assert all("Rattata" not in call for call in heuristics.species_calls)
    assert heuristics.species_calls[:2] == [(), ("Pidgey",)]
    assert heuristics.updates == team.species()[:5]


def test_exhausted_budget_accepts_remaining_members(statistics, first_choice) -> None:
    validator = RejectingValidator(reject_all=True)
    predictor = Predictor(statistics, validator=validator)

    team = predictor.predict_team(random=first_choice, validate=2)

    assert validator.team_checks == 2
    # Two species were burned on rejected draws, leaving five to accept unchecked.
    assert team.species() == ["Spearow", "Zubat", "Geodude", "Machop", "Onix"]


def test_shiny_requirement_is_corrected(statistics, first_choice) -> None:
    validator = RulesetValidator(Ruleset(shiny_required=frozenset({"pidgey"})))
    predictor = Predictor(statistics, validator=validator)

    team = predictor.predict_team(random=first_choice, validate=6)

    assert team.species()[:2] == ["Rattata", "Pidgey"]
    assert team.pokemon[1].shiny is True
    assert not any(pokemon.shiny for pokemon in team.pokemon if pokemon.species != "Pidgey")


def test_uncorrectable_set_is_rejected(statistics, first_choice) -> None:
    validator = RulesetValidator(
        Ruleset(shiny_required=frozenset({"pidgey"}), banned_items=frozenset({"leftovers"}))
    )
    predictor = Predictor(statistics, validator=validator)

    team = predictor.predict_team(random=first_choice, validate=12)

    # Every first-choice set holds Leftovers, so every draw fails until species run out.
    assert team.is_empty()


def test_unlearnable_moves_are_rejected_and_retried(statistics, first_choice) -> None:
    validator = RulesetValidator(Ruleset(learnsets={"rattata": frozenset({"tackle", "bite"})}))
    predictor = Predictor(statistics, validator=validator)

    team = predictor.predict_team(random=first_choice, validate=6)

    # First-choice Rattata runs Quick Attack and Crunch, which it cannot learn here.
    assert team.species() == ["Pidgey", "Spearow", "Zubat", "Geodude", "Machop", "Onix"]
    assert all(validator.validate_set(pokemon) is None for pokemon in team.pokemon)


def test_illegal_abilities_are_rejected_and_retried(statistics, first_choice) -> None:
    validator = RulesetValidator(Ruleset(abilities={"pidgey": frozenset({"bigpecks"})}))
    predictor = Predictor(statistics, validator=validator)

    team = predictor.predict_team(random=first_choice, validate=6)

    assert team.species() == ["Rattata", "Spearow", "Zubat", "Geodude", "Machop", "Onix"]


def test_validation_hints_carry_only_cached_species_facts(statistics, first_choice) -> None:
    hints = []

    class RecordingValidator(RulesetValidator):
        def validate_team(self, team, skip_sets=None):
            hints.append(skip_sets)
            return super().validate_team(team, skip_sets)

    validator = RecordingValidator(
        Ruleset(learnsets={"rattata": frozenset({"tackle", "quickattack", "bite", "crunch"})})
    )
    predictor = Predictor(statistics, validator=validator)

    team = predictor.predict_team(random=first_choice, validate=1)

    assert team.pokemon[0].species == "Rattata"
    assert hints == [
        {
            "Rattata": {
                "move:tackle": True,
                "move:quickattack": True,
                "move:bite": True,
                "move:crunch": True,
            }
        }
    ]
    assert predictor.legality_cache["Pidgey"] == {}


def test_small_snapshot_yields_partial_team(first_choice) -> None:
    statistics = UsageStatistics.from_dict(
        {
            "pokemon": {
                "Bulbasaur": {"usage": {"weighted": 0.5}, "moves": {"Tackle": 1.0}},
                "Charmander": {"usage": {"weighted": 0.4}, "moves": {"Ember": 1.0}},
                "Squirtle": {"usage": {"weighted": 0.3}, "moves": {"Bubble": 1.0}},
            }
        }
    )
    predictor = Predictor(statistics)

    team = predictor.predict_team(random=first_choice)

    assert team.species() == ["Bulbasaur", "Charmander", "Squirtle"]


def test_empty_snapshot_yields_empty_team() -> None:
    predictor = Predictor(UsageStatistics())
    assert predictor.predict_team().is_empty()
