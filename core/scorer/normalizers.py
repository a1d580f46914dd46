#!/usr/bin/env python3
"""
Normalizers - map a raw factor value onto the common 0-100 scale.

Rule kinds:
- Linear: clamp((value - min) / (max - min) * 100, 0, 100)
- InverseLinear: lower-is-better variant of Linear
- ThresholdBucket: ordered (upper_bound, score) pairs; first bucket whose
  upper bound is >= value wins
- Ratio: clamp(value / target * 100, 0, 100), for "you vs. benchmark"

Every rule validates its parameters when constructed so that a bad rubric
fails at start-up instead of per request.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from core.scorer.exceptions import ConfigurationError
from core.scorer.models import MISSING

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def _clamp(x: float, lo: float = SCORE_MIN, hi: float = SCORE_MAX) -> float:
    return max(lo, min(hi, x))


def _finite(name: str, value: Any) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be numeric, got {value!r}")
    if not math.isfinite(f):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return f


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    f = float(value)
    if math.isnan(f):
        raise ValueError("NaN raw value")
    return f


@dataclass(frozen=True)
class Linear:
    min: float
    max: float

    kind = "linear"

    def __post_init__(self):
        lo = _finite("linear.min", self.min)
        hi = _finite("linear.max", self.max)
        if hi <= lo:
            raise ConfigurationError(f"linear.max ({hi}) must be greater than linear.min ({lo})")
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)

    def apply(self, value: float) -> float:
        return _clamp((value - self.min) / (self.max - self.min) * 100.0)


@dataclass(frozen=True)
class InverseLinear:
    min: float
    max: float

    kind = "inverse_linear"

    def __post_init__(self):
        lo = _finite("inverse_linear.min", self.min)
        hi = _finite("inverse_linear.max", self.max)
        if hi <= lo:
            raise ConfigurationError(f"inverse_linear.max ({hi}) must be greater than inverse_linear.min ({lo})")
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)

    def apply(self, value: float) -> float:
        return _clamp(100.0 - (value - self.min) / (self.max - self.min) * 100.0)


@dataclass(frozen=True)
class ThresholdBucket:
    """
    Buckets are (upper_bound, score) pairs sorted by upper bound.

    A value above every upper bound gets `overflow`, or the last bucket's
    score when no overflow is configured.
    """
    buckets: Tuple[Tuple[float, float], ...]
    overflow: Optional[float] = None

    kind = "threshold_bucket"

    def __post_init__(self):
        if not self.buckets:
            raise ConfigurationError("threshold_bucket needs at least one bucket")
        cleaned = []
        for upper, score in self.buckets:
            try:
                upper_f = float(upper)
            except (TypeError, ValueError):
                raise ConfigurationError(f"threshold_bucket upper bound must be numeric, got {upper!r}")
            score_f = _finite("threshold_bucket.score", score)
            if math.isnan(upper_f):
                raise ConfigurationError("threshold_bucket upper bound cannot be NaN")
            if not SCORE_MIN <= score_f <= SCORE_MAX:
                raise ConfigurationError(f"threshold_bucket score {score_f} outside [0, 100]")
            cleaned.append((upper_f, score_f))
        bounds = [upper for upper, _ in cleaned]
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            raise ConfigurationError(f"threshold_bucket upper bounds must be strictly ascending: {bounds}")
        object.__setattr__(self, "buckets", tuple(cleaned))
        if self.overflow is not None:
            overflow = _finite("threshold_bucket.overflow", self.overflow)
            if not SCORE_MIN <= overflow <= SCORE_MAX:
                raise ConfigurationError(f"threshold_bucket overflow {overflow} outside [0, 100]")
            object.__setattr__(self, "overflow", overflow)

    def apply(self, value: float) -> float:
        for upper, score in self.buckets:
            if upper >= value:
                return score
        if self.overflow is not None:
            return self.overflow
        return self.buckets[-1][1]


@dataclass(frozen=True)
class Ratio:
    target: float

    kind = "ratio"

    def __post_init__(self):
        target = _finite("ratio.target", self.target)
        if target <= 0:
            raise ConfigurationError(f"ratio.target must be positive, got {target}")
        object.__setattr__(self, "target", target)

    def apply(self, value: float) -> float:
        return _clamp(value / self.target * 100.0)


NormalizationRule = Union[Linear, InverseLinear, ThresholdBucket, Ratio]


def is_inverse(rule: NormalizationRule) -> bool:
    """True for rules where a lower raw value is better."""
    if isinstance(rule, InverseLinear):
        return True
    if isinstance(rule, ThresholdBucket):
        scores = [score for _, score in rule.buckets]
        return len(scores) > 1 and scores[0] > scores[-1]
    return False


def normalize(raw: Any, rule: NormalizationRule, neutral_default: float = 50.0) -> float:
    """
    Map a raw value onto 0-100.

    MISSING yields `neutral_default`. Non-numeric raw values raise
    ValueError/TypeError; the engine degrades those to the neutral default.
    """
    if raw is MISSING:
        return float(neutral_default)
    return float(rule.apply(_as_number(raw)))
