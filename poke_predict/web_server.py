"""FastAPI web server exposing team prediction via REST API."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from .parsers import parse_team
from .services import PredictionService

app = FastAPI(
    title="Poke-Predict Web API",
    description="REST API for predicting teams from usage statistics",
    version="0.1.0",
)

# Statistics are loaded on the first prediction request.
_service = PredictionService()


# Pydantic models for request/response
class TeamTextRequest(BaseModel):
    """Request model for team text endpoints."""

    team_text: str


class PredictTeamRequest(BaseModel):
    """Request model for team prediction."""

    team_text: str = ""
    seed: Optional[int] = None
    validate_budget: Optional[int] = None


class PredictSetRequest(BaseModel):
    """Request model for single set prediction."""

    species: str
    seed: Optional[int] = None


class ParseTeamResponse(BaseModel):
    """Response model for parsed team."""

    result: Dict[str, Any]


class PredictionResponse(BaseModel):
    """Response model for predictions."""

    result: Dict[str, Any]


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve a minimal landing page."""
    return (
        "<html><body><h1>Poke-Predict Web API</h1>"
        "<p>POST to /api/predict_team, /api/predict_set or /api/parse_smogon_team. "
        "See <a href=\"/docs\">/docs</a>.</p></body></html>"
    )


@app.post("/api/parse_smogon_team", response_model=ParseTeamResponse)
async def parse_smogon_team(request: TeamTextRequest) -> ParseTeamResponse:
    """Parse a Smogon-format team and return its structured representation."""
    try:
        team = parse_team(request.team_text)
        return ParseTeamResponse(result=asdict(team))
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"Failed to parse team: {exc}")


@app.post("/api/predict_team", response_model=PredictionResponse)
async def predict_team(request: PredictTeamRequest) -> PredictionResponse:
    """Predict the full team from whatever members have been revealed."""
    try:
        result = _service.predict_team(
            request.team_text, seed=request.seed, validate=request.validate_budget
        )
        return PredictionResponse(result=result)
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"Failed to predict team: {exc}")


@app.post("/api/predict_set", response_model=PredictionResponse)
async def predict_set(request: PredictSetRequest) -> PredictionResponse:
    """Predict a likely set for one species."""
    try:
        return PredictionResponse(result=_service.predict_set(request.species, seed=request.seed))
    except Exception as exc:
        raise HTTPException(status_code=400, detail=f"Failed to predict set: {exc}")


def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Entry point for running the web server."""
    import uvicorn

    print(f"[poke-predict-web] Starting web server at http://{host}:{port}")
    print("[poke-predict-web] Press Ctrl+C to stop.")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
