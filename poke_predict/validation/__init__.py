"""Team legality checking."""

from .oracle import MIN_TEAM_SIZE_PREFIX, SHINY_MARKER, Facts, LegalityOracle
from .ruleset import Ruleset, RulesetValidator

__all__ = [
    "Facts",
    "LegalityOracle",
    "MIN_TEAM_SIZE_PREFIX",
    "Ruleset",
    "RulesetValidator",
    "SHINY_MARKER",
]
