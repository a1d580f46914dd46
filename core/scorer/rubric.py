#!/usr/bin/env python3
"""
Rubric - the full configuration of one scoring use case.

Validated on construction: factor weights must sum to 1.0 and the tier
table must span [0, 100] without gaps or overlaps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from core.scorer.aggregator import validate_weights
from core.scorer.exceptions import ConfigurationError
from core.scorer.models import FactorDefinition, RecommendationRule
from core.scorer.tiers import TierTable


@dataclass(frozen=True, eq=False)
class Rubric:
    name: str
    factors: Tuple[FactorDefinition, ...]
    tiers: TierTable
    rules: Tuple[RecommendationRule, ...] = ()
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "factors", tuple(self.factors))
        object.__setattr__(self, "rules", tuple(self.rules))

        if not self.name:
            raise ConfigurationError("Rubric needs a name")
        validate_weights(self.factors)
        if not isinstance(self.tiers, TierTable):
            raise ConfigurationError(f"Rubric {self.name!r} tiers must be a TierTable")
        for rule in self.rules:
            if not isinstance(rule, RecommendationRule):
                raise ConfigurationError(f"Rubric {self.name!r} has an invalid rule: {rule!r}")

    @property
    def weights(self) -> Dict[str, float]:
        return {f.name: f.weight for f in self.factors}

    @property
    def factor_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.factors)

    def factor(self, name: str) -> Optional[FactorDefinition]:
        for f in self.factors:
            if f.name == name:
                return f
        return None
