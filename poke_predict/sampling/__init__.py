"""Weighted sampling primitives."""

from .pool import EXCLUDED, RandomSource, Transform, WeightedPool, combine, neutral

__all__ = [
    "EXCLUDED",
    "RandomSource",
    "Transform",
    "WeightedPool",
    "combine",
    "neutral",
]
