"""Shared prediction service backing the MCP and web surfaces."""

from __future__ import annotations

import random
from dataclasses import asdict
from typing import Any, Callable, Dict, Optional

from ..clients import SmogonStatsClient
from ..config import PredictorSettings
from ..models import SetPossibilities
from ..parsers import format_set, format_team, parse_team
from ..predictor import Predictor
from ..statistics import UsageStatistics, load_statistics
from ..validation import Ruleset, RulesetValidator


class PredictionService:
    """Loads statistics on first use and turns text requests into predictions."""

    def __init__(
        self,
        settings: Optional[PredictorSettings] = None,
        *,
        statistics: Optional[UsageStatistics] = None,
        stats_client: Optional[SmogonStatsClient] = None,
        debug_logger: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.settings = settings or PredictorSettings.from_env()
        self._statistics = statistics
        self._stats_client = stats_client
        self._predictor: Optional[Predictor] = None
        self._debug_logger = debug_logger

    def _debug(self, message: str) -> None:
        if self._debug_logger:
            self._debug_logger(message)

    @property
    def predictor(self) -> Predictor:
        if self._predictor is None:
            ruleset = (
                Ruleset.load(self.settings.ruleset)
                if self.settings.ruleset
                else Ruleset(format_id=self.settings.format_id)
            )
            self._predictor = Predictor(
                self._load_statistics(),
                validator=RulesetValidator(ruleset),
                format_id=ruleset.format_id,
                level=ruleset.default_level,
                lead_generation_cutoff=self.settings.lead_generation_cutoff,
                debug_logger=self._debug_logger,
            )
        return self._predictor

    def _load_statistics(self) -> UsageStatistics:
        if self._statistics is not None:
            return self._statistics
        snapshot = self.settings.stats_dir / f"{self.settings.format_id}.json"
        if snapshot.exists():
            self._debug(f"Loading statistics from {snapshot}")
            self._statistics = load_statistics(snapshot)
            return self._statistics
        if not self.settings.month:
            raise ValueError(
                "No statistics available: set POKE_PREDICT_MONTH or place "
                f"a snapshot at {snapshot}"
            )
        client = self._stats_client or SmogonStatsClient(
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
            data_dir=self.settings.stats_dir,
        )
        self._statistics = client.fetch_statistics(
            self.settings.format_id, self.settings.month, self.settings.rating
        )
        return self._statistics

    def predict_team(
        self,
        team_text: str = "",
        *,
        seed: Optional[int] = None,
        validate: Optional[int] = None,
    ) -> Dict[str, Any]:
        predictor = self.predictor
        possibilities = []
        if team_text.strip():
            known = parse_team(team_text, format_hint=predictor.format_id)
            possibilities = predictor.possibilities(known)
        budget = self.settings.validation_budget if validate is None else validate
        team = predictor.predict_team(possibilities, random.Random(seed), budget)
        return {"team": asdict(team), "export": format_team(team)}

    def predict_set(self, species: str, *, seed: Optional[int] = None) -> Dict[str, Any]:
        predictor = self.predictor
        stats = predictor.statistics.get(species)
        if stats is None:
            raise ValueError(f"No usage statistics for {species}")
        p = SetPossibilities.create(stats.name, stats, level=predictor.level)
        pokemon = predictor.predict_set(p, random.Random(seed))
        return {"set": asdict(pokemon), "export": format_set(pokemon)}
