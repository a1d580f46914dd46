#!/usr/bin/env python3
"""
Scoring Service - one entry point for the four scoring use cases.

Builds every engine once from configuration (a bad rubric fails here,
not on the first request) and turns caller payloads into typed records
before scoring. Each call captures a single `as_of` instant so every
record in a batch is scored against the same clock.

Stateless after construction: safe to share across concurrent requests.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from core.config_loader import AppConfig, ScoringConfig
from core.llm.interfaces import TextGenerationProvider
from core.rubrics import benchmarks, offers, relationships, responses
from core.rubrics.benchmarks import BenchmarkReport
from core.rubrics.offers import OfferComparison
from core.rubrics.relationships import RelationshipHealth
from core.rubrics.responses import ResponseSuggestion
from core.scorer.engine import AsOf, ScoringEngine, resolve_as_of
from core.scorer.exceptions import ConfigurationError, InvalidRecord
from core.scorer.recommendations import AIRecommender, Recommender, RuleBasedRecommender
from core.scorer.records import (
    ContactRecord,
    JobContext,
    NetworkingMetricsRecord,
    OfferRecord,
    ResponseRecord,
    parse_record,
)
from core.scorer.rubric import Rubric

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], Any]


def _unique_ids(kind: str, records) -> None:
    seen = set()
    for record in records:
        if record.id in seen:
            raise InvalidRecord(f"Duplicate {kind} id {record.id!r}")
        seen.add(record.id)


class ScoringService:
    """
    Orchestrates offer comparison, relationship health, response suggestions
    and networking benchmarks.

    Args:
        config: Scoring configuration (weights, ranges, recommendation settings)
        provider: Optional text-generation provider for AI-phrased recommendations
        llm_timeout_seconds: Per-call bound for the AI path
    """

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        provider: Optional[TextGenerationProvider] = None,
        llm_timeout_seconds: float = 5.0
    ):
        self.config = config or ScoringConfig()
        self.provider = provider
        self.llm_timeout_seconds = llm_timeout_seconds
        rec = self.config.recommendations
        self.ai_enabled = bool(rec.ai_enabled and provider is not None)

        if rec.ai_enabled and provider is None:
            logger.warning("AI recommendations enabled but no LLM is configured; using rule-based recommendations")

        offer_cfg = self.config.offers
        self.offer_engine = self._engine(
            offers.build_offer_rubric(offer_cfg.weights, offer_cfg.ranges, offer_cfg.negotiation_gap),
            offers.IDENTITY_FIELDS,
        )

        relationship_cfg = self.config.relationships
        self.relationship_engine = self._engine(
            relationships.build_relationship_rubric(
                relationship_cfg.weights, relationship_cfg.reconnect_after_days
            ),
            relationships.IDENTITY_FIELDS,
        )

        self.response_engine = self._engine(
            responses.build_response_rubric(self.config.responses.weights),
            responses.IDENTITY_FIELDS,
        )

        benchmark_cfg = self.config.benchmarks
        self.default_industry = benchmarks.resolve_industry(benchmark_cfg.default_industry, default='')
        if not self.default_industry:
            raise ConfigurationError(
                f"Unknown default industry {benchmark_cfg.default_industry!r}; "
                f"known: {sorted(benchmarks.INDUSTRY_BENCHMARKS)}"
            )
        self.benchmark_engines = {
            industry: self._engine(
                benchmarks.build_benchmark_rubric(industry, benchmark_cfg.weights),
                benchmarks.IDENTITY_FIELDS,
            )
            for industry in benchmarks.INDUSTRY_BENCHMARKS
        }

        logger.info(
            "Scoring service ready: %d rubrics, AI recommendations %s",
            len(self.engines), "enabled" if self.ai_enabled else "disabled"
        )

    @classmethod
    def from_config(
        cls,
        config: Union[AppConfig, ScoringConfig, None] = None,
        provider: Optional[TextGenerationProvider] = None
    ) -> "ScoringService":
        """Build from an AppConfig (or its scoring section)."""
        timeout = 5.0
        if isinstance(config, AppConfig):
            if config.llm is not None:
                timeout = config.llm.timeout_seconds
            config = config.scoring
        return cls(config, provider=provider, llm_timeout_seconds=timeout)

    def _recommender(self, identity_fields: Sequence[str]) -> Recommender:
        base = RuleBasedRecommender()
        if not self.ai_enabled:
            return base
        return AIRecommender(
            base,
            self.provider,
            timeout_seconds=self.llm_timeout_seconds,
            identity_fields=identity_fields,
        )

    def _engine(self, rubric: Rubric, identity_fields: Sequence[str]) -> ScoringEngine:
        return ScoringEngine(
            rubric,
            recommender=self._recommender(identity_fields),
            max_recommendations=self.config.recommendations.max_items,
        )

    @property
    def engines(self) -> List[ScoringEngine]:
        return [
            self.offer_engine,
            self.relationship_engine,
            self.response_engine,
            *self.benchmark_engines.values(),
        ]

    # ----------------------------
    # Use cases
    # ----------------------------
    def compare_offers(self, offer_payloads: Sequence[Payload], as_of: AsOf = None) -> OfferComparison:
        if not offer_payloads:
            raise InvalidRecord("At least one offer is required")
        records = [parse_record(OfferRecord, p).to_scorable() for p in offer_payloads]
        _unique_ids("offer", records)
        return offers.compare_offers(self.offer_engine, records, resolve_as_of(as_of))

    def assess_relationships(
        self,
        contact_payloads: Sequence[Payload],
        as_of: AsOf = None
    ) -> List[RelationshipHealth]:
        as_of_dt = resolve_as_of(as_of)
        records = [parse_record(ContactRecord, p).to_scorable() for p in contact_payloads]
        return [relationships.assess_relationship(self.relationship_engine, r, as_of_dt) for r in records]

    def suggest_responses(
        self,
        response_payloads: Sequence[Payload],
        job: Optional[Payload] = None,
        as_of: AsOf = None
    ) -> List[ResponseSuggestion]:
        job_context = parse_job(job)
        records = [parse_record(ResponseRecord, p).to_scorable(job_context) for p in response_payloads]
        _unique_ids("response", records)
        return responses.suggest_responses(
            self.response_engine,
            records,
            resolve_as_of(as_of),
            include_favorites=self.config.responses.include_favorites,
        )

    def benchmark_networking(self, metrics_payload: Payload, as_of: AsOf = None) -> BenchmarkReport:
        record = parse_record(NetworkingMetricsRecord, metrics_payload).to_scorable()
        return benchmarks.benchmark_networking(
            self.benchmark_engines,
            record,
            resolve_as_of(as_of),
            default_industry=self.default_industry,
        )

    def rubric_summary(self) -> List[Dict[str, Any]]:
        """Factors, weights and tier bands of every configured rubric."""
        summary = []
        for engine in self.engines:
            rubric = engine.rubric
            summary.append({
                'name': rubric.name,
                'description': rubric.description,
                'factors': [
                    {
                        'name': f.name,
                        'label': f.display_label,
                        'weight': f.weight,
                        'normalizer': f.normalizer.kind,
                        'inverse': engine.is_inverse(f.name),
                    }
                    for f in rubric.factors
                ],
                'tiers': [
                    {'name': t.name, 'low': t.low, 'high': t.high}
                    for t in rubric.tiers
                ],
                'ai_recommendations': isinstance(engine.recommender, AIRecommender),
            })
        return summary


def parse_job(job: Optional[Payload]) -> Optional[JobContext]:
    if job is None or isinstance(job, JobContext):
        return job
    try:
        return JobContext.model_validate(job)
    except ValueError as e:
        raise InvalidRecord(f"Invalid job context: {e}") from e
