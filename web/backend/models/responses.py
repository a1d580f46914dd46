#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class FactorScoreResponse(BaseModel):
    """Evidence for one factor."""
    name: str
    label: str
    raw: Optional[Any] = None
    normalized: float = Field(ge=0, le=100)
    weight: float
    effective_weight: float
    missing: bool = False


class ScoreResultResponse(BaseModel):
    """Scoring output for one record."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "record_id": "offer-b",
                "rubric": "offers",
                "composite_score": 48,
                "raw_composite": 47.5,
                "per_factor_scores": {"total_compensation": 45.0, "pto_days": 75.0, "annual_equity": 33.33},
                "factors": [],
                "tier": "fair",
                "recommendations": ["This is a competitive offer. Focus on non-monetary perks."]
            }
        }
    )

    record_id: str
    rubric: str
    composite_score: int = Field(ge=0, le=100)
    raw_composite: float = Field(ge=0, le=100)
    per_factor_scores: Dict[str, float]
    factors: List[FactorScoreResponse]
    tier: str
    recommendations: List[str] = Field(default_factory=list)


class RankingEntry(BaseModel):
    rank: int = Field(ge=1)
    record_id: str
    composite_score: int


class OfferComparisonResponse(BaseModel):
    """Ranked offers with the best offer per factor."""
    success: bool = True
    ranking: List[RankingEntry]
    best_by_factor: Dict[str, Optional[str]]
    results: List[ScoreResultResponse]


class RelationshipHealthResponse(ScoreResultResponse):
    health_status: str
    engagement_level: Optional[str] = None
    days_since_contact: Optional[int] = None
    response_rate: Optional[float] = None


class RelationshipHealthListResponse(BaseModel):
    success: bool = True
    count: int
    results: List[RelationshipHealthResponse]


class ResponseSuggestionResponse(ScoreResultResponse):
    rank: int
    relevance_score: int
    matched_skills: List[str] = Field(default_factory=list)
    is_favorite: bool = False


class ResponseSuggestionListResponse(BaseModel):
    success: bool = True
    count: int
    suggestions: List[ResponseSuggestionResponse]


class MetricComparison(BaseModel):
    percentage: Optional[int] = Field(None, ge=0, description="User value as a percentage of the benchmark (not capped); null when there is no data")
    label: str


class IndustryBenchmarkResponse(BaseModel):
    network_size: float
    monthly_interactions: float
    response_rate: float
    referral_success_rate: float
    best_practices: List[str]


class BenchmarkReportResponse(ScoreResultResponse):
    success: bool = True
    industry: str
    user: Dict[str, Optional[float]]
    benchmarks: IndustryBenchmarkResponse
    comparisons: Dict[str, MetricComparison]


class RubricFactorResponse(BaseModel):
    name: str
    label: str
    weight: float
    normalizer: str
    inverse: bool


class TierResponse(BaseModel):
    name: str
    low: float
    high: float


class RubricResponse(BaseModel):
    name: str
    description: str
    factors: List[RubricFactorResponse]
    tiers: List[TierResponse]
    ai_recommendations: bool


class RubricsResponse(BaseModel):
    success: bool = True
    count: int
    rubrics: List[RubricResponse]
