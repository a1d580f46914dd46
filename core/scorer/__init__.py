#!/usr/bin/env python3
"""
Scoring Module - weighted multi-factor scoring with tiers and recommendations.

Public API:
- ScoringEngine: scores records against one Rubric
- ScorableRecord / ScoreResult / FactorDefinition / RecommendationRule: data structures

The module is split into focused, single-responsibility modules:

- models.py: Data structures (ScorableRecord, FactorScore, ScoreResult, Tier)
- extractors.py: Raw signal extraction, MISSING for absent data
- normalizers.py: Linear, inverse linear, threshold bucket and ratio rules
- aggregator.py: Weight validation, redistribution and weighted mean
- tiers.py: Tier tables and classification
- recommendations.py: Rule table evaluation and the AI decorator
- ranking.py: Ranking and best-per-factor comparison
- trends.py: Rolling composite averages over dated snapshots
- records.py: Typed record variants (offer, contact, response, metrics)
- service.py: ScoringService orchestrator (import from core.scorer.service)
"""

from core.scorer.exceptions import (
    ScoringError,
    ConfigurationError,
    InvalidRecord,
    MissingFactorData,
    ExternalServiceFailure,
)
from core.scorer.models import (
    MISSING,
    ScorableRecord,
    FactorDefinition,
    FactorScore,
    ScoreResult,
    Tier,
    RecommendationRule,
)
from core.scorer.rubric import Rubric
from core.scorer.engine import ScoringEngine

__all__ = [
    'ScoringError', 'ConfigurationError', 'InvalidRecord', 'MissingFactorData', 'ExternalServiceFailure',
    'MISSING', 'ScorableRecord', 'FactorDefinition', 'FactorScore', 'ScoreResult', 'Tier',
    'RecommendationRule', 'Rubric', 'ScoringEngine',
]
