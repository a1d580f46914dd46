import yaml
import os
import logging
from typing import Optional, Dict, Any, Tuple
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class LlmConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    temperature: float = 0.2
    timeout_seconds: float = 5.0  # Interactive path: keep this to a few seconds


class RecommendationConfig(BaseModel):
    """Recommendation generation settings shared by every rubric."""
    max_items: int = Field(4, ge=0, le=10)
    # When enabled and an LLM is configured, rule-based output is rephrased by the LLM
    # (rule-based output is still the fallback on any failure).
    ai_enabled: bool = False


class OfferScoringConfig(BaseModel):
    """
    Offer comparison rubric.

    Weights must sum to 1.0; only factors named here are scored.
    Ranges override the (min, max) of a factor's linear normalizer.
    """
    weights: Dict[str, float] = Field(default_factory=lambda: {
        'total_compensation': 0.5,
        'pto_days': 0.2,
        'annual_equity': 0.3,
    })
    ranges: Dict[str, Tuple[float, float]] = Field(default_factory=dict)
    # Competing total comp more than this fraction above an offer triggers a negotiation tip
    negotiation_gap: float = Field(0.05, ge=0, le=1)


class RelationshipScoringConfig(BaseModel):
    """Relationship health rubric. Default weights are a product choice, not a derived value."""
    weights: Dict[str, float] = Field(default_factory=lambda: {
        'recency': 0.3,
        'engagement': 0.3,
        'mutual_value': 0.2,
        'response_rate': 0.2,
    })
    reconnect_after_days: int = Field(30, ge=1)


class ResponseScoringConfig(BaseModel):
    """Response-library relevance rubric."""
    weights: Dict[str, float] = Field(default_factory=lambda: {
        'skill_match': 0.35,
        'tag_match': 0.15,
        'company_match': 0.15,
        'track_record': 0.15,
        'effectiveness': 0.10,
        'favorite': 0.10,
    })
    include_favorites: bool = True  # Favorites are suggested even with a zero score


class BenchmarkScoringConfig(BaseModel):
    """Networking benchmark rubric."""
    weights: Dict[str, float] = Field(default_factory=lambda: {
        'network_size': 0.25,
        'monthly_interactions': 0.25,
        'response_rate': 0.25,
        'referral_success_rate': 0.25,
    })
    default_industry: str = "Default"


class ScoringConfig(BaseModel):
    offers: OfferScoringConfig = Field(default_factory=OfferScoringConfig)
    relationships: RelationshipScoringConfig = Field(default_factory=RelationshipScoringConfig)
    responses: ResponseScoringConfig = Field(default_factory=ResponseScoringConfig)
    benchmarks: BenchmarkScoringConfig = Field(default_factory=BenchmarkScoringConfig)
    recommendations: RecommendationConfig = Field(default_factory=RecommendationConfig)


class WebConfig(BaseModel):
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080


class AppConfig(BaseModel):
    llm: Optional[LlmConfig] = None
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    web: WebConfig = Field(default_factory=WebConfig)


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "y", "on")


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    # Allow env var overrides for the LLM endpoint
    for env_name, key in (("LLM_BASE_URL", "base_url"), ("LLM_API_KEY", "api_key"), ("LLM_MODEL", "model")):
        value = os.environ.get(env_name)
        if value:
            if data.get('llm') is None:
                data['llm'] = {}
            data['llm'][key] = value

    env_ai_enabled = os.environ.get("AI_RECOMMENDATIONS_ENABLED")
    if env_ai_enabled:
        data.setdefault('scoring', {})
        if data['scoring'] is None:
            data['scoring'] = {}
        data['scoring'].setdefault('recommendations', {})
        data['scoring']['recommendations']['ai_enabled'] = _truthy(env_ai_enabled)

    # Web server overrides
    if ('WEB_HOST' in os.environ or 'WEB_PORT' in os.environ) and data.get('web') is None:
        data['web'] = {}
    if 'WEB_HOST' in os.environ:
        data['web']['host'] = os.environ['WEB_HOST']
    if 'WEB_PORT' in os.environ:
        data['web']['port'] = int(os.environ['WEB_PORT'])

    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from another dir), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info("No config file found; using defaults")

    return AppConfig(**_apply_env_overrides(data))
