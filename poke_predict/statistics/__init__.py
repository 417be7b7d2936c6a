"""Usage statistics consumed by the predictor."""

from .usage import (
    SpeciesStatistics,
    UsageStatistics,
    UsageWeights,
    load_statistics,
    parse_leads,
)

__all__ = [
    "SpeciesStatistics",
    "UsageStatistics",
    "UsageWeights",
    "load_statistics",
    "parse_leads",
]
