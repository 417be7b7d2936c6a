"""Runtime settings read from the environment and optional ``.env`` files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "POKE_PREDICT_"


def _env(name: str, default: str = "") -> str:
    return os.getenv(ENV_PREFIX + name, default).strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


@dataclass(slots=True)
class PredictorSettings:
    format_id: str = "gen9ou"
    month: str = ""
    rating: int = 1695
    stats_dir: Path = Path("data/stats")
    ruleset: Optional[Path] = None
    validation_budget: int = 0
    lead_generation_cutoff: int = 5
    timeout: int = 30
    user_agent: str = "poke-predict/0.1 (+https://github.com/)"

    @classmethod
    def from_env(cls, *, load_files: bool = True) -> "PredictorSettings":
        """Build settings from ``POKE_PREDICT_*`` variables.

        ``.env`` is loaded first and ``.env.local`` overlays it so user-specific
        values win.
        """

        if load_files:
            load_dotenv()
            load_dotenv(".env.local", override=True)
        defaults = cls()
        ruleset = _env("RULESET")
        return cls(
            format_id=_env("FORMAT") or defaults.format_id,
            month=_env("MONTH"),
            rating=_env_int("RATING", defaults.rating),
            stats_dir=Path(_env("STATS_DIR") or defaults.stats_dir),
            ruleset=Path(ruleset) if ruleset else None,
            validation_budget=_env_int("VALIDATION_BUDGET", defaults.validation_budget),
            lead_generation_cutoff=_env_int("LEAD_GENERATION_CUTOFF", defaults.lead_generation_cutoff),
            timeout=_env_int("TIMEOUT", defaults.timeout),
            user_agent=_env("USER_AGENT") or defaults.user_agent,
        )
