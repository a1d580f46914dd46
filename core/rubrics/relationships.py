#!/usr/bin/env python3
"""
Relationship Health Rubric.

Four factors per contact, each on a 0-100 scale before weighting:
- recency: days since last contact, bucketed (<=14: 100, <=30: 80, <=60: 60, <=90: 40, else 20)
- engagement: 30 + min(40, 8/message) + min(20, 5/activity in last 90 days) + strength bonus
- mutual_value: 20/opportunity + min(30, 5/message)
- response_rate: estimated from recent activity and opportunities

A contact with no activity log has engagement MISSING rather than low, so
its weight moves to the factors that are known.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from core.rubrics.catalog import FactorSpec, select_factors
from core.scorer.engine import ScoringEngine
from core.scorer.extractors import days_since, items_within_days
from core.scorer.models import MISSING, RecommendationRule, ScorableRecord, ScoreResult
from core.scorer.normalizers import Linear, ThresholdBucket
from core.scorer.recommendations import always
from core.scorer.rubric import Rubric
from core.scorer.tiers import TierTable

logger = logging.getLogger(__name__)

RUBRIC_NAME = "relationships"

RECENT_ACTIVITY_DAYS = 90
STRENGTH_BONUS = {'strong': 10, 'moderate': 5}

RELATIONSHIP_TIERS = TierTable.from_bounds([
    ("at_risk", 0, 30),
    ("needs_attention", 30, 50),
    ("healthy", 50, 75),
    ("strong", 75, 100),
])

IDENTITY_FIELDS = (
    'first_name', 'last_name', 'current_company', 'current_title',
    'relationship_strength', 'shared_interests', 'recent_message_notes',
)


def _activity_type(activity: Any) -> Optional[str]:
    if isinstance(activity, Mapping):
        return activity.get('activity_type')
    return getattr(activity, 'activity_type', None)


def _message_count(activities) -> int:
    return sum(1 for a in activities if _activity_type(a) == 'message')


def engagement(record: ScorableRecord, as_of: datetime) -> Any:
    activities = record.get('activities')
    if activities is None:
        return MISSING
    messages = _message_count(activities)
    recent = len(items_within_days(activities, as_of, RECENT_ACTIVITY_DAYS))

    score = 30 + min(40, messages * 8) + min(20, recent * 5)
    strength = str(record.get('relationship_strength') or '').strip().lower()
    score += STRENGTH_BONUS.get(strength, 0)
    return min(100, score)


def mutual_value(record: ScorableRecord, as_of: datetime) -> Any:
    activities = record.get('activities')
    opportunities = record.get('opportunities_generated')
    if activities is None and opportunities is None:
        return MISSING
    messages = _message_count(activities or [])
    return min(100, (opportunities or 0) * 20 + min(30, messages * 5))


def response_rate(record: ScorableRecord, as_of: datetime) -> Any:
    """Estimated reply rate in [0, 1]."""
    activities = record.get('activities')
    opportunities = record.get('opportunities_generated')
    if activities is None and opportunities is None:
        return MISSING

    rate = 0.3
    activities = activities or []
    if _message_count(activities) > 0:
        recent = len(items_within_days(activities, as_of, RECENT_ACTIVITY_DAYS))
        if recent > 0:
            rate = min(0.9, 0.3 + recent * 0.15)
    if opportunities:
        rate = max(rate, 0.7)
    return rate


RELATIONSHIP_FACTORS: Dict[str, FactorSpec] = {
    'recency': FactorSpec(
        days_since('last_contacted_at'),
        ThresholdBucket(((14, 100), (30, 80), (60, 60), (90, 40)), overflow=20),
        'days since last contact',
    ),
    'engagement': FactorSpec(engagement, Linear(0, 100), 'engagement'),
    'mutual_value': FactorSpec(mutual_value, Linear(0, 100), 'mutual value'),
    'response_rate': FactorSpec(response_rate, Linear(0, 1), 'response rate'),
}


def engagement_level(score: Any) -> Optional[str]:
    if score is MISSING:
        return None
    if score >= 70:
        return 'high'
    if score >= 40:
        return 'medium'
    return 'low'


# ----------------------------
# Recommendation rules
# ----------------------------
def _days(context: Mapping[str, Any]) -> Optional[int]:
    return context.get('days_since_contact')


def _overdue(after_days: int):
    def _condition(record, result, context) -> bool:
        days = _days(context)
        return days is not None and days > after_days
    return _condition


def _reconnect_text(record, result, context) -> str:
    return f"Reconnect soon - it's been {_days(context)} days since last contact"


def _weak_or_unknown_strength(record, result, context) -> bool:
    strength = str(record.get('relationship_strength') or '').strip().lower()
    return strength in ('', 'weak')


def _no_opportunities(record, result, context) -> bool:
    return not record.get('opportunities_generated')


def _has_shared_interests(record, result, context) -> bool:
    return bool(record.get('shared_interests'))


def _shared_interests_text(record, result, context) -> str:
    return f"Discuss shared interests: {', '.join(record.get('shared_interests')[:2])}"


def _contact_date_unknown(record, result, context) -> bool:
    return _days(context) is None


def relationship_rules(reconnect_after_days: int = 30):
    return [
        RecommendationRule('reconnect', _overdue(reconnect_after_days), _reconnect_text, priority=90),
        RecommendationRule(
            'log_last_contact', _contact_date_unknown,
            "Log when you last spoke so reminders can keep this relationship on track", priority=80,
        ),
        RecommendationRule(
            'share_news', _weak_or_unknown_strength,
            "Share relevant industry news to strengthen the relationship", priority=70,
        ),
        RecommendationRule(
            'mutual_value', _no_opportunities,
            "Explore ways to provide mutual value", priority=60,
        ),
        RecommendationRule('shared_interests', _has_shared_interests, _shared_interests_text, priority=50),
        RecommendationRule(
            'keep_in_touch', always,
            "Keep up regular check-ins to maintain this relationship", fallback=True,
        ),
    ]


def build_relationship_rubric(weights: Mapping[str, float], reconnect_after_days: int = 30) -> Rubric:
    return Rubric(
        name=RUBRIC_NAME,
        factors=tuple(select_factors(RUBRIC_NAME, RELATIONSHIP_FACTORS, weights)),
        tiers=RELATIONSHIP_TIERS,
        rules=tuple(relationship_rules(reconnect_after_days)),
        description="Health of a professional relationship from recency, engagement and mutual value.",
    )


@dataclass(frozen=True)
class RelationshipHealth:
    result: ScoreResult
    engagement_level: Optional[str]
    days_since_contact: Optional[int]
    response_rate: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data.update(
            health_status=self.result.tier.name,
            engagement_level=self.engagement_level,
            days_since_contact=self.days_since_contact,
            response_rate=self.response_rate,
        )
        return data


def assess_relationship(engine: ScoringEngine, contact: ScorableRecord, as_of: datetime) -> RelationshipHealth:
    days = days_since('last_contacted_at')(contact, as_of)
    engagement_score = engagement(contact, as_of)
    rate = response_rate(contact, as_of)

    context = {'days_since_contact': None if days is MISSING else days}
    result = engine.score(contact, as_of=as_of, context=context)

    return RelationshipHealth(
        result=result,
        engagement_level=engagement_level(engagement_score),
        days_since_contact=context['days_since_contact'],
        response_rate=None if rate is MISSING else rate,
    )
