#!/usr/bin/env python3
"""
Trend helpers - rolling composites over a time-ordered series of snapshots.

Nothing is accumulated between calls: every point is re-derived from the
snapshot records passed in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence, Tuple

from core.scorer.engine import RecordInput, ScoringEngine
from core.scorer.extractors import to_datetime


@dataclass(frozen=True)
class TrendPoint:
    as_of: datetime
    record_id: str
    composite: float
    rolling_average: float


def rolling_composites(
    engine: ScoringEngine,
    snapshots: Sequence[Tuple[datetime, RecordInput]],
    window: int = 3
) -> List[TrendPoint]:
    """
    Score each (as_of, record) snapshot at its own instant and attach the
    trailing average over the last `window` points (e.g. 3 monthly
    snapshots for a 3-month rolling average).
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    ordered = sorted(((to_datetime(ts), record) for ts, record in snapshots), key=lambda item: item[0])

    composites: List[float] = []
    points: List[TrendPoint] = []
    for as_of, record in ordered:
        result = engine.evaluate(record, as_of=as_of)
        composites.append(result.raw_composite)
        trailing = composites[-window:]
        points.append(TrendPoint(
            as_of=as_of,
            record_id=result.record_id,
            composite=result.raw_composite,
            rolling_average=math.fsum(trailing) / len(trailing),
        ))
    return points
