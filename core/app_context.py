import logging
from dataclasses import dataclass
from typing import Optional

from openai import OpenAIError

from core.config_loader import AppConfig, LlmConfig
from core.llm.openai_service import OpenAIService
from core.scorer.service import ScoringService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Provides a single source of truth for service instantiation; the web
    layer builds one at start-up and shares it across requests.
    """
    config: AppConfig
    scoring_service: ScoringService
    ai_service: Optional[OpenAIService] = None

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        The LLM client is only created when AI recommendations are enabled
        and an endpoint is configured.
        """
        ai_service = None
        if config.scoring.recommendations.ai_enabled and config.llm is not None:
            try:
                ai_service = cls._build_ai_service(config.llm)
            except OpenAIError as e:
                # AI phrasing is optional; rule-based recommendations still work
                logger.warning(f"LLM client unavailable, AI recommendations disabled: {e}")

        scoring_service = ScoringService.from_config(config, provider=ai_service)

        return cls(
            config=config,
            scoring_service=scoring_service,
            ai_service=ai_service,
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'model': llm_config.model,
            'temperature': llm_config.temperature,
        }

        return OpenAIService(
            base_url=llm_config.base_url,
            api_key=llm_config.api_key,
            model_config=model_config,
            timeout_seconds=llm_config.timeout_seconds,
        )
