"""
OpenAI Service - text generation using the OpenAI API (or any compatible endpoint).

Provides schema-constrained JSON generation for recommendation phrasing.
Calls are made once, bounded by a timeout; callers own the fallback.
"""
from typing import Dict, Any, Optional, Tuple
import json
import logging
import copy

from openai import OpenAI

from core.llm.interfaces import TextGenerationProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT_SECONDS = 5.0


def _unwrap_schema_spec(spec: Dict[str, Any]) -> Tuple[str, bool, Dict[str, Any]]:
    """Unwrap a schema spec to extract name, strict flag, and raw JSON schema.

    Args:
        spec: Either a wrapped spec {'name': str, 'strict': bool, 'schema': {...}}
              or a raw JSON schema dict

    Returns:
        Tuple of (name, strict, raw_schema)
    """
    if isinstance(spec, dict) and "schema" in spec and "name" in spec:
        return spec.get("name", "structured_response"), bool(spec.get("strict", False)), spec["schema"]
    return "structured_response", False, spec


class OpenAIService(TextGenerationProvider):
    """
    OpenAI LLM Service.

    Uses JSON Schema response format so the model output is constrained to
    the declared schema. The SDK's built-in retries are disabled: one attempt
    per call, then the caller falls back.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ):
        client_kwargs = {}
        if api_key:
            client_kwargs['api_key'] = api_key
        if base_url:
            client_kwargs['base_url'] = base_url

        self.timeout_seconds = timeout_seconds
        self.client = OpenAI(timeout=timeout_seconds, max_retries=0, **client_kwargs)

        self.model_config = model_config or {}
        self.model = self.model_config.get('model', DEFAULT_MODEL)
        self.temperature = self.model_config.get('temperature', 0.2)

    def generate_structured(
        self,
        system_instruction: str,
        prompt: str,
        schema_spec: Dict[str, Any],
        timeout: Optional[float] = None
    ) -> Dict[str, Any]:
        """Generate a JSON object constrained by `schema_spec`.

        Args:
            system_instruction: System message
            prompt: User message with the full evidence
            schema_spec: Either a wrapped spec {'name', 'strict', 'schema'} or raw JSON schema
            timeout: Per-call timeout in seconds (defaults to the service timeout)
        """
        name, strict, raw_schema = _unwrap_schema_spec(schema_spec)
        runtime_schema = copy.deepcopy(raw_schema)

        if runtime_schema.get("type") != "object" or "properties" not in runtime_schema:
            raise ValueError(f"Not a valid JSON Schema object. Top-level keys: {list(runtime_schema.keys())}")

        messages = [
            {"role": "system", "content": system_instruction},
            {"role": "user", "content": prompt},
        ]

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": name,
                    "schema": runtime_schema,
                    "strict": strict,
                },
            },
            timeout=timeout if timeout is not None else self.timeout_seconds,
        )

        try:
            content = response.choices[0].message.content
            data = json.loads(content)
        except (json.JSONDecodeError, IndexError, AttributeError, TypeError) as e:
            logger.error(f"Failed to parse structured response from {self.model}: {e}")
            raise

        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object from {self.model}, got {type(data).__name__}")

        logger.debug(f"Structured response ({self.model}): keys={list(data.keys())}")
        return data
