"""
Rubrics - the four scoring use cases built on core.scorer.

- offers: job offer comparison
- relationships: professional contact health
- responses: interview response-library relevance
- benchmarks: networking metrics against industry benchmarks
"""

from core.rubrics.offers import build_offer_rubric, compare_offers, OfferComparison
from core.rubrics.relationships import build_relationship_rubric, assess_relationship, RelationshipHealth
from core.rubrics.responses import build_response_rubric, suggest_responses, ResponseSuggestion
from core.rubrics.benchmarks import (
    build_benchmark_rubric,
    benchmark_networking,
    BenchmarkReport,
    INDUSTRY_BENCHMARKS,
)

__all__ = [
    'build_offer_rubric', 'compare_offers', 'OfferComparison',
    'build_relationship_rubric', 'assess_relationship', 'RelationshipHealth',
    'build_response_rubric', 'suggest_responses', 'ResponseSuggestion',
    'build_benchmark_rubric', 'benchmark_networking', 'BenchmarkReport', 'INDUSTRY_BENCHMARKS',
]
