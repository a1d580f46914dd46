#!/usr/bin/env python3
"""
Response Library Relevance Rubric.

Ranks saved interview responses against a target job: skill and tag
keywords found in the job text, prior use at the same company, track
record, effectiveness and favorites.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Sequence

from core.rubrics.catalog import FactorSpec, select_factors
from core.scorer.engine import ScoringEngine
from core.scorer.exceptions import MissingFactorData
from core.scorer.extractors import exact_match, flag, keyword_hits, matched_keywords, numeric
from core.scorer.models import RecommendationRule, ScorableRecord, ScoreResult
from core.scorer.normalizers import Linear
from core.scorer.ranking import rank_all
from core.scorer.recommendations import always
from core.scorer.rubric import Rubric
from core.scorer.tiers import TierTable

logger = logging.getLogger(__name__)

RUBRIC_NAME = "responses"

JOB_TEXT_FIELDS = ('job_description', 'job_title')
LOW_EFFECTIVENESS = 40

RESPONSE_TIERS = TierTable.from_bounds([
    ("low", 0, 40),
    ("medium", 40, 70),
    ("high", 70, 100),
])

IDENTITY_FIELDS = ('question', 'question_type', 'skills', 'tags', 'job_title', 'job_company')

RESPONSE_FACTORS: Dict[str, FactorSpec] = {
    # 20 points per matched skill, 10 per matched tag
    'skill_match': FactorSpec(keyword_hits('skills', JOB_TEXT_FIELDS), Linear(0, 5), 'skills found in job'),
    'tag_match': FactorSpec(keyword_hits('tags', JOB_TEXT_FIELDS), Linear(0, 10), 'tags found in job'),
    'company_match': FactorSpec(exact_match('companies_used_for', 'job_company'), Linear(0, 1), 'used at this company'),
    'track_record': FactorSpec(numeric('success_count'), Linear(0, 5), 'successful uses'),
    'effectiveness': FactorSpec(numeric('effectiveness_score'), Linear(0, 100), 'effectiveness'),
    'favorite': FactorSpec(flag('is_favorite'), Linear(0, 1), 'favorite'),
}


def matched_skills(record: ScorableRecord) -> List[str]:
    try:
        return matched_keywords(record, 'skills', JOB_TEXT_FIELDS)
    except MissingFactorData:
        return []


# ----------------------------
# Recommendation rules
# ----------------------------
def _has_matched_skills(record, result, context) -> bool:
    return bool(matched_skills(record))


def _emphasize_text(record, result, context) -> str:
    return f"Lead with {', '.join(matched_skills(record)[:3])} - the job description asks for it"


def _used_at_company(record, result, context) -> bool:
    return exact_match('companies_used_for', 'job_company')(record, None) == 1.0


def _untested(record, result, context) -> bool:
    return not record.get('success_count') and not record.get('usage_count')


def _low_effectiveness(record, result, context) -> bool:
    score = record.get('effectiveness_score')
    return score is not None and score < LOW_EFFECTIVENESS


def response_rules() -> List[RecommendationRule]:
    return [
        RecommendationRule('emphasize_skills', _has_matched_skills, _emphasize_text, priority=80),
        RecommendationRule(
            'tailor_for_company', _used_at_company,
            "You used this response at {job_company} before - tailor it with new examples", priority=70,
        ),
        RecommendationRule(
            'rework', _low_effectiveness,
            "Rework this response: its effectiveness score is {effectiveness_score:.0f}/100", priority=60,
        ),
        RecommendationRule(
            'practice', _untested,
            "Practice this response aloud before using it in an interview", priority=40,
        ),
        RecommendationRule(
            'ready', always,
            "Strong match - review it once before the interview", fallback=True,
        ),
    ]


def build_response_rubric(weights: Mapping[str, float]) -> Rubric:
    return Rubric(
        name=RUBRIC_NAME,
        factors=tuple(select_factors(RUBRIC_NAME, RESPONSE_FACTORS, weights)),
        tiers=RESPONSE_TIERS,
        rules=tuple(response_rules()),
        description="Relevance of saved interview responses to a target job.",
    )


@dataclass(frozen=True)
class ResponseSuggestion:
    rank: int
    result: ScoreResult
    matched_skills: List[str]
    is_favorite: bool

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data.update(
            rank=self.rank,
            relevance_score=self.result.composite_score,
            matched_skills=list(self.matched_skills),
            is_favorite=self.is_favorite,
        )
        return data


def suggest_responses(
    engine: ScoringEngine,
    responses: Sequence[ScorableRecord],
    as_of: datetime,
    include_favorites: bool = True
) -> List[ResponseSuggestion]:
    """
    Responses ranked by relevance, highest first.

    Responses scoring 0 are dropped unless they are favorites and
    `include_favorites` is set.
    """
    by_id = {r.id: r for r in responses}
    results = [engine.score(r, as_of=as_of) for r in responses]

    suggestions = []
    for ranked in rank_all(results):
        record = by_id[ranked.record_id]
        favorite = bool(record.get('is_favorite'))
        if ranked.raw_composite <= 0 and not (favorite and include_favorites):
            continue
        suggestions.append(ResponseSuggestion(
            rank=len(suggestions) + 1,
            result=ranked.result,
            matched_skills=matched_skills(record),
            is_favorite=favorite,
        ))

    logger.info("Suggested %d of %d responses", len(suggestions), len(responses))
    return suggestions
