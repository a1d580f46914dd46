#!/usr/bin/env python3
"""
Comparator / Ranker - order scored records and flag the best value per factor.

Ties are always resolved in favour of the record seen first, so results
are deterministic whatever else is in the list.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from core.scorer.models import MISSING, ScoreResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedResult:
    rank: int
    record_id: str
    composite_score: int
    raw_composite: float
    result: ScoreResult


def _comparable(raw: Any) -> Optional[float]:
    if raw is MISSING or raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) else value


def compare_all(results: Sequence[ScoreResult], factor_name: str, inverse: bool = False) -> Optional[str]:
    """
    Id of the record with the best raw value for `factor_name`.

    Best is the maximum, or the minimum for inverse (lower-is-better)
    factors. Records where the factor is missing are skipped; None if no
    record has a value. Ties go to the first record in `results`.
    """
    best_id: Optional[str] = None
    best_value: Optional[float] = None

    for result in results:
        value = _comparable(result.raw(factor_name))
        if value is None:
            continue
        if best_value is None:
            best_id, best_value = result.record_id, value
        elif (value < best_value) if inverse else (value > best_value):
            best_id, best_value = result.record_id, value

    return best_id


def best_values(
    results: Sequence[ScoreResult],
    factor_names: Sequence[str],
    inverse: Sequence[str] = ()
) -> Dict[str, float]:
    """Best raw value per factor across `results` (factors with no values are omitted)."""
    best: Dict[str, float] = {}
    for name in factor_names:
        lower_is_better = name in inverse
        value: Optional[float] = None
        for result in results:
            candidate = _comparable(result.raw(name))
            if candidate is None:
                continue
            if value is None or (candidate < value if lower_is_better else candidate > value):
                value = candidate
        if value is not None:
            best[name] = value
    return best


def rank_all(results: Sequence[ScoreResult]) -> List[RankedResult]:
    """Results ordered by full-precision composite, highest first; stable on ties."""
    ordered = sorted(results, key=lambda r: -r.raw_composite)
    return [
        RankedResult(
            rank=position,
            record_id=r.record_id,
            composite_score=r.composite_score,
            raw_composite=r.raw_composite,
            result=r,
        )
        for position, r in enumerate(ordered, start=1)
    ]
