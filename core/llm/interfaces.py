"""
LLM Provider Interface - Abstract base for text-generation providers.

This module defines the interface used by the AI-augmented recommendation
path (OpenAI, Ollama or any OpenAI-compatible endpoint).
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class TextGenerationProvider(ABC):
    """
    Abstract Interface for text-generation services.
    """

    @abstractmethod
    def generate_structured(
        self,
        system_instruction: str,
        prompt: str,
        schema_spec: Dict[str, Any],
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Generate a JSON object adhering to a schema.

        Args:
            system_instruction: System message steering the model
            prompt: User message, including all evidence the model needs
            schema_spec: Either a wrapped spec {'name', 'strict', 'schema'} or raw JSON schema
            timeout: Per-call timeout in seconds; None uses the provider default

        Raises on transport errors, non-2xx responses and unparsable bodies.
        """
        pass
