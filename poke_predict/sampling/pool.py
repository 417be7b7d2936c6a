"""Immutable weighted pools for selection without replacement.

A pool never changes after construction. Drawing from it returns the chosen
key together with a *new* pool in which that key is excluded, so any earlier
pool can be drawn from again to backtrack without undo bookkeeping.
"""

from __future__ import annotations

import random as _random
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
    Union,
)

K = TypeVar("K")
V = TypeVar("V")

Transform = Callable[[Any, float], float]

# Weight written over a key once it has been drawn.
EXCLUDED = -1.0


class RandomSource(Protocol):
    """Anything exposing ``random() -> float`` in ``[0, 1)``, e.g. ``random.Random``."""

    def random(self) -> float:
        ...


def neutral(_: Any, weight: float) -> float:
    """Scoring transform that leaves every weight untouched."""

    return weight


def combine(first: Transform, second: Transform) -> Transform:
    """Chain two transforms; a veto (``<= 0``) from ``first`` short-circuits ``second``."""

    def combined(key: Any, weight: float) -> float:
        weight = first(key, weight)
        return weight if weight <= 0 else second(key, weight)

    return combined


class WeightedPool(Generic[K]):
    """Keyed weights with a precomputed total of the selectable entries.

    Entries are kept in descending weight order, so a random source that
    returns ``0.0`` always draws the heaviest candidate.
    """

    __slots__ = ("_entries", "_total")

    def __init__(self, entries: Iterable[Tuple[K, float]] = ()) -> None:
        ordered = sorted(entries, key=lambda entry: entry[1], reverse=True)
        self._entries: Tuple[Tuple[K, float], ...] = tuple(ordered)
        self._total = sum(weight for _, weight in self._entries if weight > 0)

    @classmethod
    def create(
        cls,
        source: Union[Mapping[Any, V], Iterable[Tuple[Any, V]]],
        fn: Callable[[Any, V], Tuple[K, float]],
    ) -> "WeightedPool[K]":
        """Build a pool from any keyed source.

        ``fn`` maps each ``(key, raw value)`` to ``(key, weight)``; a weight
        ``<= 0`` keeps the key in the pool but never lets it be drawn.
        """

        items = source.items() if isinstance(source, Mapping) else source
        return cls(fn(key, value) for key, value in items)

    @classmethod
    def from_weights(cls, weights: Mapping[K, float]) -> "WeightedPool[K]":
        return cls(weights.items())

    @property
    def total(self) -> float:
        return self._total

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[K, float]]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"WeightedPool(size={len(self._entries)}, total={self._total:g})"

    def weight(self, key: K) -> Optional[float]:
        for candidate, weight in self._entries:
            if candidate == key:
                return weight
        return None

    def available(self) -> List[K]:
        """Keys that can still be drawn (ignoring any transform)."""

        return [key for key, weight in self._entries if weight > 0]

    def select(
        self,
        fn: Transform = neutral,
        random: Optional[RandomSource] = None,
    ) -> Tuple[Optional[K], "WeightedPool[K]"]:
        """Draw one key with probability proportional to ``fn(key, weight)``.

        Returns ``(None, self)`` when nothing is selectable. Excluded entries
        are never passed to ``fn`` and cannot be revived by it.
        """

        rng = random if random is not None else _random
        effective: List[Tuple[int, float]] = []
        total = 0.0
        for index, (key, weight) in enumerate(self._entries):
            if weight <= 0:
                continue
            scored = fn(key, weight)
            if scored <= 0:
                continue
            effective.append((index, scored))
            total += scored
        if not effective:
            return None, self

        target = rng.random() * total
        chosen = effective[-1][0]
        cumulative = 0.0
        for index, scored in effective:
            cumulative += scored
            if target < cumulative:
                chosen = index
                break

        key = self._entries[chosen][0]
        return key, self._without(chosen)

    def _without(self, index: int) -> "WeightedPool[K]":
        pool = WeightedPool.__new__(WeightedPool)
        entries = list(self._entries)
        key, weight = entries[index]
        entries[index] = (key, EXCLUDED)
        pool._entries = tuple(entries)
        pool._total = self._total - weight
        return pool
