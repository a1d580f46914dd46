#!/usr/bin/env python3
"""
Scoring Models - Data structures shared by every rubric.

- ScorableRecord: caller-supplied entity (offer, contact, response, metrics)
- FactorDefinition: how one factor is extracted, normalized and weighted
- FactorScore / ScoreResult: per-call outputs, immutable once returned
- Tier: one band of a tier table
- RecommendationRule: condition + template, emitted by priority
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union, TYPE_CHECKING

from core.scorer.exceptions import ConfigurationError, InvalidRecord

if TYPE_CHECKING:
    from core.scorer.normalizers import NormalizationRule


class Missing(enum.Enum):
    """Sentinel for a factor whose source attribute is absent."""
    MISSING = "missing"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = Missing.MISSING


@dataclass(frozen=True)
class ScorableRecord:
    """An opaque domain entity identified by id, with named attributes."""
    id: str
    kind: str = "generic"
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.id is None or not str(self.id).strip():
            raise InvalidRecord(f"{self.kind} record is missing its id")
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        kind: str = "generic",
        id_field: str = "id"
    ) -> "ScorableRecord":
        """Build a record from a plain mapping, lifting `id_field` out of the attributes."""
        if not isinstance(data, Mapping):
            raise InvalidRecord(f"{kind} record must be a mapping, got {type(data).__name__}")
        attributes = {k: v for k, v in data.items() if k != id_field}
        return cls(id=data.get(id_field), kind=kind, attributes=attributes)


# (record, as_of) -> raw value or MISSING
Extractor = Callable[[ScorableRecord, datetime], Any]


@dataclass(frozen=True)
class FactorDefinition:
    """One named input signal of a rubric."""
    name: str
    extractor: Extractor
    normalizer: "NormalizationRule"
    weight: float
    neutral_default: float = 50.0
    label: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("Factor definition needs a name")
        if not callable(self.extractor):
            raise ConfigurationError(f"Factor {self.name!r} has no extractor")
        try:
            weight = float(self.weight)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Factor {self.name!r} has a non-numeric weight: {self.weight!r}")
        object.__setattr__(self, "weight", weight)
        if not 0.0 <= self.neutral_default <= 100.0:
            raise ConfigurationError(
                f"Factor {self.name!r} neutral_default must be within [0, 100], got {self.neutral_default}"
            )

    @property
    def display_label(self) -> str:
        return self.label or self.name.replace("_", " ")


@dataclass(frozen=True)
class FactorScore:
    """Evidence for one factor: raw signal, normalized value and the weight it carried."""
    name: str
    label: str
    raw: Any
    normalized: float
    weight: float
    effective_weight: float
    missing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "raw": None if self.missing else self.raw,
            "normalized": self.normalized,
            "weight": self.weight,
            "effective_weight": self.effective_weight,
            "missing": self.missing,
        }


@dataclass(frozen=True, order=True)
class Tier:
    """One band of a tier table; ordered by rank (0 = lowest band)."""
    rank: int
    name: str
    low: float
    high: float

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ScoreResult:
    """Complete scoring output for one record."""
    record_id: str
    rubric: str
    composite_score: int
    raw_composite: float
    per_factor_scores: Mapping[str, float] = field(hash=False)
    factors: Tuple[FactorScore, ...] = field(hash=False)
    tier: Tier
    recommendations: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "per_factor_scores", MappingProxyType(dict(self.per_factor_scores)))
        object.__setattr__(self, "factors", tuple(self.factors))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    def factor(self, name: str) -> Optional[FactorScore]:
        for factor_score in self.factors:
            if factor_score.name == name:
                return factor_score
        return None

    def raw(self, name: str, default: Any = MISSING) -> Any:
        factor_score = self.factor(name)
        if factor_score is None or factor_score.missing:
            return default
        return factor_score.raw

    @property
    def missing_factors(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.factors if f.missing)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "record_id": self.record_id,
            "rubric": self.rubric,
            "composite_score": self.composite_score,
            "raw_composite": self.raw_composite,
            "per_factor_scores": dict(self.per_factor_scores),
            "factors": [f.to_dict() for f in self.factors],
            "tier": self.tier.name,
            "recommendations": list(self.recommendations),
        }


RuleContext = Mapping[str, Any]
Condition = Callable[[ScorableRecord, ScoreResult, RuleContext], bool]
Template = Union[str, Callable[[ScorableRecord, ScoreResult, RuleContext], str]]


@dataclass(frozen=True)
class RecommendationRule:
    """
    Emits `template` when `condition` holds.

    Fallback rules are only emitted when no regular rule matched.
    """
    name: str
    condition: Optional[Condition]
    template: Template
    priority: int = 0
    fallback: bool = False

    def __post_init__(self):
        if self.condition is None or not callable(self.condition):
            raise ConfigurationError(f"Recommendation rule {self.name!r} has no condition")
        if not self.template:
            raise ConfigurationError(f"Recommendation rule {self.name!r} has no template")
