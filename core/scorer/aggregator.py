#!/usr/bin/env python3
"""
Weighted Aggregator - combine normalized factors into one composite score.

Weights are validated once when a rubric is built. At scoring time, the
weight of factors whose data is missing is redistributed proportionally
over the factors that are present, so the active weights still sum to 1.0.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Mapping, Sequence

import numpy as np

from core.scorer.exceptions import ConfigurationError
from core.scorer.models import FactorDefinition

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-6


def _weights_sum_to_one(weights: Iterable[float]) -> bool:
    return abs(math.fsum(weights) - 1.0) <= WEIGHT_TOLERANCE


def validate_weights(factors: Sequence[FactorDefinition]) -> None:
    """Fail loudly for a rubric whose factor weights are unusable."""
    if not factors:
        raise ConfigurationError("Rubric must declare at least one factor")

    names = [f.name for f in factors]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate factor names: {duplicates}")

    for f in factors:
        if not 0.0 <= f.weight <= 1.0 or math.isnan(f.weight):
            raise ConfigurationError(f"Factor {f.name!r} weight must be within [0, 1], got {f.weight}")

    total = math.fsum(f.weight for f in factors)
    if not _weights_sum_to_one(f.weight for f in factors):
        raise ConfigurationError(
            f"Factor weights must sum to 1.0 (+/- {WEIGHT_TOLERANCE}), got {total:.6f} for {names}"
        )


def redistribute(weights: Mapping[str, float], missing: Iterable[str]) -> Dict[str, float]:
    """
    Spread the weight of missing factors proportionally over present ones.

    Missing factors end up with an effective weight of 0. When the present
    factors carry no weight at all there is nothing to redistribute onto,
    and the declared weights are returned unchanged.
    """
    missing_set = set(missing)
    present_total = math.fsum(w for name, w in weights.items() if name not in missing_set)

    if not missing_set:
        return dict(weights)
    if present_total <= 0.0:
        logger.debug("No weighted factor present (missing=%s); keeping declared weights", sorted(missing_set))
        return dict(weights)

    return {
        name: (0.0 if name in missing_set else w / present_total)
        for name, w in weights.items()
    }


def aggregate(per_factor_normalized: Mapping[str, float], weights: Mapping[str, float]) -> float:
    """
    Weighted sum of normalized factor scores, clamped to [0, 100].

    Raises ConfigurationError if the weights don't sum to 1.0 within
    tolerance or don't cover the same factors as the scores.
    """
    if set(per_factor_normalized) != set(weights):
        raise ConfigurationError(
            f"Weights {sorted(weights)} do not match factors {sorted(per_factor_normalized)}"
        )
    if not _weights_sum_to_one(weights.values()):
        raise ConfigurationError(
            f"Active weights must sum to 1.0, got {math.fsum(weights.values()):.6f}"
        )

    # Stable key order keeps the floating-point sum bit-identical across calls
    names: List[str] = list(weights)
    scores = np.array([float(per_factor_normalized[n]) for n in names], dtype=np.float64)
    w = np.array([float(weights[n]) for n in names], dtype=np.float64)

    composite = float(np.dot(scores, w))
    return max(0.0, min(100.0, composite))


def round_score(value: float) -> int:
    """Round half-up to an integer for display."""
    return int(math.floor(value + 0.5))
