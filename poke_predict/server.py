"""FastMCP server exposing team prediction tools."""

from __future__ import annotations

from dataclasses import asdict
from typing import Annotated, Any, Dict, Optional

from fastmcp import FastMCP

from .parsers import parse_team
from .services import PredictionService

app = FastMCP("poke-predict", version="0.1.0")
_service = PredictionService()


@app.tool()
def parse_smogon_team(
    team_text: Annotated[str, "Smogon/Showdown export text"],
) -> Dict[str, Any]:
    """Parse a Smogon-format team and return its structured representation."""

    team = parse_team(team_text)
    return asdict(team)


@app.tool()
def predict_team(
    team_text: Annotated[str, "Revealed members as Showdown export text (may be empty)"] = "",
    seed: Annotated[Optional[int], "Seed for a reproducible prediction"] = None,
    validate: Annotated[Optional[int], "Number of legality checks allowed"] = None,
) -> Dict[str, Any] | str:
    """Predict the full team from whatever members have been revealed."""

    try:
        return _service.predict_team(team_text, seed=seed, validate=validate)
    except Exception as exc:  # pragma: no cover - statistics download failure
        return f"Error predicting team: {exc}"


@app.tool()
def predict_set(
    species: Annotated[str, "Species name (e.g., 'Garchomp')"],
    seed: Annotated[Optional[int], "Seed for a reproducible prediction"] = None,
) -> Dict[str, Any] | str:
    """Predict a likely set for one species."""

    try:
        return _service.predict_set(species, seed=seed)
    except Exception as exc:  # pragma: no cover - statistics download failure
        return f"Error predicting {species}: {exc}"


def run() -> None:
    """Entry point for `python -m poke_predict.server` or console script."""

    print("[poke-predict] Starting MCP server. Press Ctrl+C to stop.")
    app.run()


if __name__ == "__main__":
    run()
