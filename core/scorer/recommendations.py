#!/usr/bin/env python3
"""
Recommendation Generator - short, actionable advice for a scored record.

- generate(): rule table evaluation, no external dependencies
- RuleBasedRecommender: the required fallback, wraps generate()
- AIRecommender: decorator that asks a text-generation provider for richer
  phrasing from the full factor breakdown and falls back to the wrapped
  recommender on any failure
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.llm.interfaces import TextGenerationProvider
from core.llm.system_prompts import RECOMMENDATION_SCHEMA, RECOMMENDATION_SYSTEM_PROMPT
from core.scorer.exceptions import ExternalServiceFailure
from core.scorer.models import RecommendationRule, RuleContext, ScorableRecord, ScoreResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 4
PROMPT_VALUE_MAX_CHARS = 300


def always(record: ScorableRecord, result: ScoreResult, context: RuleContext) -> bool:
    return True


def _render(rule: RecommendationRule, record: ScorableRecord, result: ScoreResult, context: RuleContext) -> str:
    if callable(rule.template):
        return rule.template(record, result, context)

    values: Dict[str, Any] = dict(record.attributes)
    values.update({f.name: f.raw for f in result.factors if not f.missing})
    values.update(context)
    values.update(id=record.id, score=result.composite_score, tier=result.tier.name)
    return rule.template.format_map(values)


def generate(
    record: ScorableRecord,
    result: ScoreResult,
    rules: Sequence[RecommendationRule],
    max_items: int = DEFAULT_MAX_ITEMS,
    context: Optional[RuleContext] = None
) -> List[str]:
    """
    Evaluate every rule and return matching texts ordered by
    (priority desc, declaration order asc), truncated to `max_items`.
    """
    context = context or {}
    matched = []
    fallbacks = []

    for index, rule in enumerate(rules):
        try:
            if not rule.condition(record, result, context):
                continue
            text = _render(rule, record, result, context)
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping rule %s for record %s: %r", rule.name, record.id, e)
            continue

        if not text:
            continue
        bucket = fallbacks if rule.fallback else matched
        bucket.append((-rule.priority, index, text))

    chosen = matched if matched else fallbacks
    chosen.sort(key=lambda item: (item[0], item[1]))

    texts: List[str] = []
    for _, _, text in chosen:
        if text not in texts:
            texts.append(text)
    return texts[:max(0, max_items)]


class Recommender(ABC):
    """Produces recommendation texts for one scored record."""

    @abstractmethod
    def recommend(
        self,
        record: ScorableRecord,
        result: ScoreResult,
        rules: Sequence[RecommendationRule],
        max_items: int = DEFAULT_MAX_ITEMS,
        context: Optional[RuleContext] = None
    ) -> List[str]:
        pass


class RuleBasedRecommender(Recommender):
    """Deterministic recommender backed by the rubric's rule table."""

    def recommend(self, record, result, rules, max_items=DEFAULT_MAX_ITEMS, context=None) -> List[str]:
        return generate(record, result, rules, max_items=max_items, context=context)


def _prompt_value(value: Any) -> str:
    if isinstance(value, float):
        text = f"{value:.2f}"
    elif isinstance(value, (list, tuple)):
        text = ", ".join(str(v) for v in value[:10])
    else:
        text = str(value)
    if len(text) > PROMPT_VALUE_MAX_CHARS:
        text = text[:PROMPT_VALUE_MAX_CHARS] + "..."
    return text


def build_recommendation_prompt(
    record: ScorableRecord,
    result: ScoreResult,
    baseline: Sequence[str],
    max_items: int,
    identity_fields: Optional[Sequence[str]] = None
) -> str:
    """Prompt embedding the record's identity and every factor's evidence."""
    if identity_fields is None:
        identity_fields = [k for k, v in record.attributes.items()
                           if isinstance(v, (str, int, float, bool))]

    lines = [
        f"Record: {record.kind} {record.id}",
    ]
    for name in identity_fields:
        value = record.get(name)
        if value is not None:
            lines.append(f"- {name}: {_prompt_value(value)}")

    lines.append("")
    lines.append(f"Composite score: {result.composite_score}/100 (tier: {result.tier.name})")
    lines.append("Factor evidence (name | raw value | normalized 0-100 | weight):")
    for f in result.factors:
        raw = "unknown" if f.missing else _prompt_value(f.raw)
        lines.append(
            f"- {f.label} | {raw} | {f.normalized:.1f} | {f.effective_weight:.2f}"
        )

    if baseline:
        lines.append("")
        lines.append("Rule-based suggestions so far:")
        lines.extend(f"- {text}" for text in baseline)

    lines.append("")
    lines.append(
        f"Provide up to {max_items} concise, specific recommendations (10-20 words each) "
        "that address the weakest factors."
    )
    return "\n".join(lines)


def parse_recommendations(data: Any, max_items: int) -> List[str]:
    """Validate a provider response; raises ExternalServiceFailure if unusable."""
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ExternalServiceFailure(f"Unparsable response body: {e}") from e

    if not isinstance(data, Mapping):
        raise ExternalServiceFailure(f"Expected an object, got {type(data).__name__}")

    items = data.get("recommendations")
    if not isinstance(items, list):
        raise ExternalServiceFailure("Response has no 'recommendations' list")

    texts = [item.strip() for item in items if isinstance(item, str) and item.strip()]
    if not texts:
        raise ExternalServiceFailure("Response contained no usable recommendations")
    return texts[:max(0, max_items)]


class AIRecommender(Recommender):
    """
    Decorates another recommender with text-generation phrasing.

    Single attempt, bounded by `timeout_seconds`. Timeouts, API errors and
    malformed responses are logged and resolved to the wrapped recommender's
    output; nothing propagates to the caller.
    """

    def __init__(
        self,
        base: Recommender,
        provider: TextGenerationProvider,
        timeout_seconds: float = 5.0,
        identity_fields: Optional[Sequence[str]] = None,
        system_instruction: str = RECOMMENDATION_SYSTEM_PROMPT,
        schema_spec: Optional[Dict[str, Any]] = None
    ):
        self.base = base
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self.identity_fields = identity_fields
        self.system_instruction = system_instruction
        self.schema_spec = schema_spec or RECOMMENDATION_SCHEMA

    def recommend(self, record, result, rules, max_items=DEFAULT_MAX_ITEMS, context=None) -> List[str]:
        baseline = self.base.recommend(record, result, rules, max_items=max_items, context=context)
        try:
            return self._generate(record, result, baseline, max_items)
        except Exception as e:
            logger.warning(
                "AI recommendations failed for record %s (rubric %s); using rule-based fallback: %s",
                record.id, result.rubric, e
            )
            return baseline

    def _generate(self, record, result, baseline, max_items) -> List[str]:
        prompt = build_recommendation_prompt(record, result, baseline, max_items, self.identity_fields)
        try:
            data = self.provider.generate_structured(
                self.system_instruction,
                prompt,
                self.schema_spec,
                timeout=self.timeout_seconds
            )
        except ExternalServiceFailure:
            raise
        except Exception as e:
            raise ExternalServiceFailure(f"{type(e).__name__}: {e}") from e
        return parse_recommendations(data, max_items)
