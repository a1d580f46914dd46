"""LLM Module - text-generation services and interfaces."""
from core.llm.interfaces import TextGenerationProvider
from core.llm.openai_service import OpenAIService

__all__ = ['TextGenerationProvider', 'OpenAIService']
