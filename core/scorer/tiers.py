#!/usr/bin/env python3
"""
Tier Classifier - map a composite score to a discrete band.

Bands are half-open [low, high) except the last one, which is closed so
that 100 is always classified. A table with gaps or overlaps, or one that
doesn't span exactly [0, 100], is rejected at construction time.
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from core.scorer.exceptions import ConfigurationError
from core.scorer.models import Tier

SCORE_FLOOR = 0.0
SCORE_CEILING = 100.0


class TierTable:
    """Validated, ordered set of tiers covering [0, 100]."""

    def __init__(self, tiers: Sequence[Tier]):
        ordered = sorted(tiers, key=lambda t: (t.low, t.high))
        self._validate(ordered)
        # Rank follows score order whatever the caller passed in
        self._tiers: Tuple[Tier, ...] = tuple(
            Tier(rank=i, name=t.name, low=t.low, high=t.high) for i, t in enumerate(ordered)
        )

    @classmethod
    def from_bounds(cls, bounds: Iterable[Tuple[str, float, float]]) -> "TierTable":
        """Build from (name, low, high) triples."""
        return cls([Tier(rank=i, name=name, low=float(low), high=float(high))
                    for i, (name, low, high) in enumerate(bounds)])

    @staticmethod
    def _validate(tiers: Sequence[Tier]) -> None:
        if not tiers:
            raise ConfigurationError("Tier table must contain at least one tier")

        names = [t.name for t in tiers]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Tier names must be unique: {names}")

        for t in tiers:
            if not (math.isfinite(t.low) and math.isfinite(t.high)) or t.high <= t.low:
                raise ConfigurationError(f"Tier {t.name!r} has an empty or invalid range [{t.low}, {t.high})")

        if tiers[0].low != SCORE_FLOOR:
            raise ConfigurationError(f"Tier table must start at {SCORE_FLOOR}, starts at {tiers[0].low}")
        if tiers[-1].high != SCORE_CEILING:
            raise ConfigurationError(f"Tier table must end at {SCORE_CEILING}, ends at {tiers[-1].high}")

        for prev, nxt in zip(tiers, tiers[1:]):
            if nxt.low > prev.high:
                raise ConfigurationError(f"Gap between tiers {prev.name!r} and {nxt.name!r}: [{prev.high}, {nxt.low})")
            if nxt.low < prev.high:
                raise ConfigurationError(f"Tiers {prev.name!r} and {nxt.name!r} overlap at [{nxt.low}, {prev.high})")

    def __iter__(self) -> Iterator[Tier]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self._tiers)

    def get(self, name: str) -> Optional[Tier]:
        for t in self._tiers:
            if t.name == name:
                return t
        return None

    def classify(self, score: float) -> Tier:
        return classify(score, self)


def classify(score: float, table: TierTable) -> Tier:
    """Deterministic range lookup. Scores outside [0, 100] raise ValueError."""
    if math.isnan(score) or not SCORE_FLOOR <= score <= SCORE_CEILING:
        raise ValueError(f"Score {score!r} outside [{SCORE_FLOOR}, {SCORE_CEILING}]")

    tiers = tuple(table)
    for tier in tiers[:-1]:
        if tier.low <= score < tier.high:
            return tier
    return tiers[-1]
