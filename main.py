"""Command-line interface for predicting an opponent's team from usage statistics."""

from __future__ import annotations

import argparse
import json
import random
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Callable, List, Optional

from poke_predict import Predictor, format_team, parse_team
from poke_predict.clients import PokeAPIClient, SmogonStatsClient, SmogonStatsClientError
from poke_predict.config import PredictorSettings
from poke_predict.heuristics import (
    AmbivalentHeuristics,
    CompositeHeuristics,
    Heuristics,
    TeammateHeuristics,
    TypeCoverageHeuristics,
)
from poke_predict.statistics import UsageStatistics, load_statistics
from poke_predict.validation import Ruleset, RulesetValidator


def _read_team_text(path: str) -> str:
    if path == "-":
        data = sys.stdin.read()
        if not data.strip():
            raise SystemExit("No team text provided on stdin.")
        return data
    file_path = Path(path)
    if not file_path.exists():
        raise SystemExit(f"File not found: {file_path}")
    return file_path.read_text(encoding="utf-8")


def _debug_print(enabled: bool, message: str) -> None:
    if enabled:
        sys.stderr.write(f"[debug] {message}\n")


def _load_statistics(args: argparse.Namespace, settings: PredictorSettings) -> UsageStatistics:
    if args.stats:
        path = Path(args.stats)
        if not path.exists():
            raise SystemExit(f"File not found: {path}")
        try:
            return load_statistics(path)
        except ValueError as exc:
            raise SystemExit(f"Unreadable statistics file {path}: {exc}")
    if not args.month:
        raise SystemExit("Provide --stats FILE or --month YYYY-MM to download statistics.")
    client = SmogonStatsClient(
        timeout=settings.timeout,
        user_agent=settings.user_agent,
        data_dir=settings.stats_dir,
    )
    try:
        return client.fetch_statistics(args.format, args.month, args.rating)
    except SmogonStatsClientError as exc:
        raise SystemExit(f"Could not load usage statistics: {exc}")


def _load_ruleset(path: Optional[str], format_id: str) -> Ruleset:
    if not path:
        return Ruleset(format_id=format_id)
    try:
        return Ruleset.load(path)
    except ValueError as exc:
        raise SystemExit(str(exc))


def _heuristics_factory(
    args: argparse.Namespace, statistics: UsageStatistics, debug: bool
) -> Callable[[], Heuristics]:
    pokeapi = PokeAPIClient() if args.coverage else None

    def types_of(species: str) -> List[str]:
        try:
            return pokeapi.get_pokemon_types(species) if pokeapi else []
        except Exception as exc:
            _debug_print(debug, f"No typing for {species}: {exc}")
            return []

    def build() -> Heuristics:
        parts: List[Heuristics] = []
        if args.teammates:
            parts.append(TeammateHeuristics(statistics))
        if args.coverage:
            parts.append(TypeCoverageHeuristics(types_of))
        if not parts:
            return AmbivalentHeuristics()
        return CompositeHeuristics(*parts)

    return build


def main(argv: list[str] | None = None) -> int:
    settings = PredictorSettings.from_env()
    parser = argparse.ArgumentParser(description="Predict a full team from partial information")
    parser.add_argument(
        "known_team",
        nargs="?",
        help="Showdown export of the revealed members, or '-' to read from stdin",
    )
    parser.add_argument("--stats", help="Usage statistics JSON (display or chaos format)")
    parser.add_argument(
        "--format",
        default=settings.format_id,
        help=f"Format id (default: {settings.format_id})",
    )
    parser.add_argument("--month", default=settings.month, help="Statistics month, e.g. 2025-09")
    parser.add_argument("--rating", type=int, default=settings.rating, help="Rating cutoff")
    parser.add_argument(
        "--ruleset",
        default=str(settings.ruleset) if settings.ruleset else None,
        help="JSON ruleset used to validate the predicted team",
    )
    parser.add_argument("--seed", type=int, help="Seed for reproducible predictions")
    parser.add_argument(
        "--validate",
        type=int,
        default=settings.validation_budget,
        help="Number of legality checks allowed while building",
    )
    parser.add_argument(
        "--lead-cutoff",
        type=int,
        default=settings.lead_generation_cutoff,
        help="Generations below this sample the lead from lead statistics",
    )
    parser.add_argument(
        "--teammates",
        action="store_true",
        help="Bias species toward common teammates of the previous pick",
    )
    parser.add_argument(
        "--coverage",
        action="store_true",
        help="Avoid stacking type weaknesses (looks typings up on PokeAPI)",
    )
    parser.add_argument("--json", action="store_true", help="Emit the team as JSON")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print debug progress information to stderr",
    )
    args = parser.parse_args(argv)

    _debug_print(args.debug, f"Arguments parsed: {args}")
    statistics = _load_statistics(args, settings)
    _debug_print(args.debug, f"Loaded statistics for {len(statistics.pokemon)} species")
    ruleset = _load_ruleset(args.ruleset, args.format)
    predictor = Predictor(
        statistics,
        validator=RulesetValidator(ruleset),
        format_id=ruleset.format_id,
        level=ruleset.default_level,
        lead_generation_cutoff=args.lead_cutoff,
        heuristics=_heuristics_factory(args, statistics, args.debug),
        debug_logger=(lambda msg: _debug_print(args.debug, msg)),
    )

    possibilities = []
    if args.known_team:
        known = parse_team(_read_team_text(args.known_team), format_hint=ruleset.format_id)
        _debug_print(args.debug, f"Parsed {len(known.pokemon)} revealed Pokémon")
        possibilities = predictor.possibilities(known)

    rng = random.Random(args.seed)
    team = predictor.predict_team(possibilities, rng, args.validate)
    _debug_print(args.debug, f"Predicted {len(team.pokemon)} Pokémon")

    if args.json:
        json.dump(asdict(team), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        sys.stdout.write(format_team(team))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
