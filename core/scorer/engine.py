#!/usr/bin/env python3
"""
Scoring Engine - one rubric, many independent scoring calls.

Pipeline per record:
    extract -> normalize -> redistribute weights -> aggregate -> classify -> recommend

The engine holds only read-only configuration, so a single instance can be
shared by any number of concurrent callers.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from core.scorer import aggregator
from core.scorer.exceptions import ConfigurationError, InvalidRecord
from core.scorer.extractors import extract, to_datetime
from core.scorer.models import MISSING, FactorScore, RuleContext, ScorableRecord, ScoreResult
from core.scorer.normalizers import is_inverse, normalize
from core.scorer.ranking import RankedResult, compare_all, rank_all
from core.scorer.recommendations import DEFAULT_MAX_ITEMS, Recommender, RuleBasedRecommender
from core.scorer.rubric import Rubric

logger = logging.getLogger(__name__)

RecordInput = Union[ScorableRecord, Mapping[str, Any]]
AsOf = Union[datetime, str, None]


def resolve_as_of(as_of: AsOf) -> datetime:
    if as_of is None:
        return datetime.now(timezone.utc)
    return to_datetime(as_of)


class ScoringEngine:
    """
    Scores records against a validated rubric.

    Construction fails with ConfigurationError for a malformed rubric;
    scoring itself never fails for missing data, only for records without
    an id (InvalidRecord).
    """

    def __init__(
        self,
        rubric: Rubric,
        recommender: Optional[Recommender] = None,
        max_recommendations: int = DEFAULT_MAX_ITEMS
    ):
        if not isinstance(rubric, Rubric):
            raise ConfigurationError(f"ScoringEngine needs a Rubric, got {type(rubric).__name__}")
        if max_recommendations < 0:
            raise ConfigurationError(f"max_recommendations must be >= 0, got {max_recommendations}")
        self.rubric = rubric
        self.recommender = recommender or RuleBasedRecommender()
        self.max_recommendations = max_recommendations

    @property
    def name(self) -> str:
        return self.rubric.name

    def _as_record(self, record: RecordInput) -> ScorableRecord:
        if isinstance(record, ScorableRecord):
            return record
        if isinstance(record, Mapping):
            return ScorableRecord.from_mapping(record, kind=self.rubric.name)
        raise InvalidRecord(f"Cannot score a {type(record).__name__}")

    def evaluate(self, record: RecordInput, as_of: AsOf = None) -> ScoreResult:
        """Score a record without generating recommendations."""
        record = self._as_record(record)
        as_of_dt = resolve_as_of(as_of)

        factor_scores: List[FactorScore] = []
        normalized: Dict[str, float] = {}
        raws: Dict[str, Any] = {}
        missing: List[str] = []

        for factor in self.rubric.factors:
            raw = extract(record, factor, as_of_dt)
            if raw is not MISSING:
                try:
                    value = normalize(raw, factor.normalizer, factor.neutral_default)
                except (TypeError, ValueError, OverflowError) as e:
                    logger.debug("Normalizing %s=%r failed on record %s: %r", factor.name, raw, record.id, e)
                    raw = MISSING
            if raw is MISSING:
                value = float(factor.neutral_default)
                missing.append(factor.name)
            raws[factor.name] = raw
            normalized[factor.name] = value

        weights = aggregator.redistribute(self.rubric.weights, missing)
        raw_composite = aggregator.aggregate(normalized, weights)
        composite_score = aggregator.round_score(raw_composite)
        tier = self.rubric.tiers.classify(composite_score)

        for factor in self.rubric.factors:
            factor_scores.append(FactorScore(
                name=factor.name,
                label=factor.display_label,
                raw=raws[factor.name],
                normalized=normalized[factor.name],
                weight=factor.weight,
                effective_weight=weights[factor.name],
                missing=factor.name in missing,
            ))

        if missing:
            logger.debug("Record %s (%s) missing factors %s; weight redistributed", record.id, self.name, missing)
        logger.debug("Record %s (%s): composite=%.2f tier=%s", record.id, self.name, raw_composite, tier.name)

        return ScoreResult(
            record_id=record.id,
            rubric=self.name,
            composite_score=composite_score,
            raw_composite=raw_composite,
            per_factor_scores=normalized,
            factors=tuple(factor_scores),
            tier=tier,
        )

    def recommend(
        self,
        record: RecordInput,
        result: ScoreResult,
        context: Optional[RuleContext] = None
    ) -> ScoreResult:
        """Attach recommendations to an evaluated result (returns a new result)."""
        record = self._as_record(record)
        texts = self.recommender.recommend(
            record,
            result,
            self.rubric.rules,
            max_items=self.max_recommendations,
            context=context or {},
        )
        return replace(result, recommendations=tuple(texts))

    def score(
        self,
        record: RecordInput,
        as_of: AsOf = None,
        context: Optional[RuleContext] = None
    ) -> ScoreResult:
        """Full scoring call: evaluate then recommend."""
        record = self._as_record(record)
        return self.recommend(record, self.evaluate(record, as_of=as_of), context=context)

    def score_all(
        self,
        records: Iterable[RecordInput],
        as_of: AsOf = None,
        context: Optional[RuleContext] = None
    ) -> List[ScoreResult]:
        # One instant for the whole batch
        as_of_dt = resolve_as_of(as_of)
        return [self.score(r, as_of=as_of_dt, context=context) for r in records]

    def rank_all(self, records: Iterable[RecordInput], as_of: AsOf = None) -> List[RankedResult]:
        as_of_dt = resolve_as_of(as_of)
        return rank_all([self.evaluate(r, as_of=as_of_dt) for r in records])

    def compare_all(
        self,
        records: Sequence[RecordInput],
        factor_name: str,
        as_of: AsOf = None
    ) -> Optional[str]:
        """Id of the record with the best raw value for one factor (first-seen wins ties)."""
        factor = self.rubric.factor(factor_name)
        if factor is None:
            raise ValueError(f"Unknown factor {factor_name!r} for rubric {self.name!r}")
        as_of_dt = resolve_as_of(as_of)
        return self.compare_results([self.evaluate(r, as_of=as_of_dt) for r in records], factor_name)

    def compare_results(self, results: Sequence[ScoreResult], factor_name: str) -> Optional[str]:
        """compare_all over results that were already scored by this engine."""
        factor = self.rubric.factor(factor_name)
        if factor is None:
            raise ValueError(f"Unknown factor {factor_name!r} for rubric {self.name!r}")
        return compare_all(results, factor_name, inverse=is_inverse(factor.normalizer))

    def is_inverse(self, factor_name: str) -> bool:
        factor = self.rubric.factor(factor_name)
        return factor is not None and is_inverse(factor.normalizer)
