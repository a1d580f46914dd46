"""
Factor catalogs: every factor a rubric knows how to compute, selected and
weighted by configuration.
"""

from dataclasses import dataclass, replace
from typing import List, Mapping, Optional, Sequence

from core.scorer.exceptions import ConfigurationError
from core.scorer.models import Extractor, FactorDefinition
from core.scorer.normalizers import InverseLinear, Linear, NormalizationRule


@dataclass(frozen=True)
class FactorSpec:
    extractor: Extractor
    normalizer: NormalizationRule
    label: str
    neutral_default: float = 50.0


def select_factors(
    rubric_name: str,
    catalog: Mapping[str, FactorSpec],
    weights: Mapping[str, float],
    ranges: Optional[Mapping[str, Sequence[float]]] = None
) -> List[FactorDefinition]:
    """
    FactorDefinitions for the configured weights, in weight-mapping order.

    `ranges` replaces the (min, max) of a linear normalizer. Unknown factor
    names in either mapping raise ConfigurationError.
    """
    unknown = [name for name in weights if name not in catalog]
    if unknown:
        raise ConfigurationError(
            f"Unknown {rubric_name} factor(s) {unknown}; known factors: {sorted(catalog)}"
        )

    ranges = ranges or {}
    for name in ranges:
        if name not in catalog:
            raise ConfigurationError(f"Range given for unknown {rubric_name} factor {name!r}")

    factors = []
    for name, weight in weights.items():
        spec = catalog[name]
        normalizer = spec.normalizer
        if name in ranges:
            normalizer = _with_range(rubric_name, name, normalizer, ranges[name])
        factors.append(FactorDefinition(
            name=name,
            extractor=spec.extractor,
            normalizer=normalizer,
            weight=weight,
            neutral_default=spec.neutral_default,
            label=spec.label,
        ))
    return factors


def _with_range(rubric_name: str, name: str, normalizer: NormalizationRule, bounds: Sequence[float]) -> NormalizationRule:
    if not isinstance(normalizer, (Linear, InverseLinear)):
        raise ConfigurationError(
            f"{rubric_name} factor {name!r} uses a {normalizer.kind} normalizer; only linear ranges can be overridden"
        )
    try:
        low, high = bounds
    except (TypeError, ValueError):
        raise ConfigurationError(f"Range for {rubric_name} factor {name!r} must be [min, max], got {bounds!r}")
    return replace(normalizer, min=low, max=high)
