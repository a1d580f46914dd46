#!/usr/bin/env python3
"""
Offer Comparison Rubric.

Scores job offers on compensation, time off, equity and subjective ratings,
ranks them, flags the best offer per factor, and produces negotiation tips
that look at the competing offers (rule context = best peer values).

Total compensation, when not given, is annualized from its parts:
    base + base * bonus% + equity / vesting_years + health + min(base * match%, match_cap)
    + base / 260 * pto_days + other_benefits + signing_bonus / 4
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.rubrics.catalog import FactorSpec, select_factors
from core.scorer.engine import ScoringEngine
from core.scorer.extractors import numeric, to_number
from core.scorer.models import MISSING, RecommendationRule, ScorableRecord, ScoreResult
from core.scorer.normalizers import Linear
from core.scorer.ranking import RankedResult, rank_all
from core.scorer.recommendations import always
from core.scorer.rubric import Rubric
from core.scorer.tiers import TierTable

logger = logging.getLogger(__name__)

RUBRIC_NAME = "offers"

DEFAULT_VESTING_YEARS = 4
WORKING_DAYS_PER_YEAR = 260
SIGNING_BONUS_AMORTIZATION_YEARS = 4
AVERAGE_PTO_DAYS = 20
BASELINE_COST_OF_LIVING = 100.0

COST_OF_LIVING_INDEX = {
    'san francisco': 180,
    'new york': 170,
    'seattle': 150,
    'boston': 145,
    'los angeles': 140,
    'washington dc': 135,
    'denver': 115,
    'austin': 110,
    'chicago': 105,
    'atlanta': 100,
    'dallas': 95,
    'phoenix': 95,
    'remote': 100,
}

OFFER_TIERS = TierTable.from_bounds([
    ("weak", 0, 40),
    ("fair", 40, 60),
    ("competitive", 60, 80),
    ("excellent", 80, 100),
])

# Levers a candidate can negotiate on, with the text used in tips
NEGOTIATION_LEVERS = (
    ('annual_equity', 'equity'),
    ('pto_days', 'PTO'),
)

IDENTITY_FIELDS = ('company_name', 'position_title', 'location', 'remote_policy')


def _amount(record: ScorableRecord, name: str) -> float:
    value = record.get(name)
    return 0.0 if value is None else to_number(value)


def annual_equity(record: ScorableRecord, as_of: datetime = None) -> Any:
    """Yearly equity: explicit `annual_equity`, else grant value over the vesting period."""
    value = record.get('annual_equity')
    if value is not None:
        return to_number(value)
    grant = record.get('equity_value')
    if grant is None:
        return MISSING
    years = record.get('equity_vesting_years') or DEFAULT_VESTING_YEARS
    return to_number(grant) / to_number(years)


def total_compensation(record: ScorableRecord, as_of: datetime = None) -> Any:
    value = record.get('total_compensation')
    if value is not None:
        return to_number(value)

    base = record.get('base_salary')
    if base is None:
        return MISSING
    base = to_number(base)

    equity = annual_equity(record)
    total = base
    total += base * _amount(record, 'annual_bonus_percent') / 100
    total += 0.0 if equity is MISSING else equity
    total += _amount(record, 'health_insurance_value')

    match = base * _amount(record, 'retirement_match_percent') / 100
    cap = record.get('retirement_max_match')
    if cap is not None:
        match = min(match, to_number(cap))
    total += match

    total += base / WORKING_DAYS_PER_YEAR * _amount(record, 'pto_days')
    total += _amount(record, 'other_benefits_value')
    total += _amount(record, 'signing_bonus') / SIGNING_BONUS_AMORTIZATION_YEARS
    return total


def cost_of_living_index(record: ScorableRecord) -> float:
    value = record.get('cost_of_living_index')
    if value is not None:
        return to_number(value)
    if str(record.get('remote_policy') or '').strip().lower() == 'remote':
        return BASELINE_COST_OF_LIVING
    location = str(record.get('location') or '').strip().lower()
    for city, index in COST_OF_LIVING_INDEX.items():
        if city in location:
            return float(index)
    return BASELINE_COST_OF_LIVING


def adjusted_compensation(record: ScorableRecord, as_of: datetime = None) -> Any:
    """Total compensation in baseline-city dollars."""
    total = total_compensation(record, as_of)
    if total is MISSING:
        return MISSING
    return total / cost_of_living_index(record) * BASELINE_COST_OF_LIVING


def _rating(name: str) -> FactorSpec:
    return FactorSpec(numeric(f'{name}_score'), Linear(1, 10), name.replace('_', ' '))


OFFER_FACTORS: Dict[str, FactorSpec] = {
    'total_compensation': FactorSpec(total_compensation, Linear(100000, 200000), 'total compensation'),
    'adjusted_compensation': FactorSpec(adjusted_compensation, Linear(100000, 200000), 'cost-of-living adjusted compensation'),
    'base_salary': FactorSpec(numeric('base_salary'), Linear(80000, 180000), 'base salary'),
    'pto_days': FactorSpec(numeric('pto_days'), Linear(10, 30), 'PTO days'),
    'annual_equity': FactorSpec(annual_equity, Linear(0, 30000), 'annual equity'),
    'signing_bonus': FactorSpec(numeric('signing_bonus'), Linear(0, 50000), 'signing bonus'),
    'culture_fit': _rating('culture_fit'),
    'growth_opportunity': _rating('growth_opportunity'),
    'work_life_balance': _rating('work_life_balance'),
    'job_security': _rating('job_security'),
    'commute': _rating('commute'),
}

# Values compared across offers for negotiation tips, independent of the scored factors
PEER_VALUES = {
    'total_compensation': total_compensation,
    'annual_equity': annual_equity,
    'pto_days': numeric('pto_days'),
    'signing_bonus': numeric('signing_bonus'),
}


def peer_values(record: ScorableRecord, as_of: datetime) -> Dict[str, Any]:
    return {name: extractor(record, as_of) for name, extractor in PEER_VALUES.items()}


# ----------------------------
# Recommendation rules
# ----------------------------
def _own(context: Mapping[str, Any], name: str) -> Any:
    return context.get('own', {}).get(name, MISSING)


def _best(context: Mapping[str, Any], name: str) -> Any:
    return context.get('best', {}).get(name, MISSING)


def _below_peer_levers(context: Mapping[str, Any]) -> List[str]:
    levers = []
    for name, text in NEGOTIATION_LEVERS:
        own, best = _own(context, name), _best(context, name)
        if best is MISSING:
            continue
        if own is MISSING or own < best:
            levers.append(text)
    return levers


def _has_levers_below(record, result, context) -> bool:
    return context.get('offer_count', 1) > 1 and bool(_below_peer_levers(context))


def _negotiate_levers(record, result, context) -> str:
    return f"Negotiate — {'/'.join(_below_peer_levers(context))} below competing offer"


def _comp_gap(context: Mapping[str, Any]) -> float:
    own, best = _own(context, 'total_compensation'), _best(context, 'total_compensation')
    if own is MISSING or best is MISSING:
        return 0.0
    return best - own


def _comp_below(gap_fraction: float):
    def _condition(record, result, context) -> bool:
        best = _best(context, 'total_compensation')
        return best is not MISSING and best > 0 and _comp_gap(context) > best * gap_fraction
    return _condition


def _comp_gap_text(record, result, context) -> str:
    return f"Total comp is ${_comp_gap(context):,.0f} below the best offer. Consider negotiating."


def _lacks_peer_has(name: str):
    def _condition(record, result, context) -> bool:
        own, best = _own(context, name), _best(context, name)
        return (own is MISSING or own <= 0) and best is not MISSING and best > 0
    return _condition


def _pto_below_average(record, result, context) -> bool:
    own = _own(context, 'pto_days')
    return own is not MISSING and own < AVERAGE_PTO_DAYS


def offer_rules(negotiation_gap: float = 0.05) -> List[RecommendationRule]:
    return [
        RecommendationRule('negotiate_levers', _has_levers_below, _negotiate_levers, priority=90),
        RecommendationRule('comp_below_best', _comp_below(negotiation_gap), _comp_gap_text, priority=80),
        RecommendationRule(
            'request_signing_bonus', _lacks_peer_has('signing_bonus'),
            "No signing bonus - request one to match other offers.", priority=60,
        ),
        RecommendationRule(
            'ask_for_equity', _lacks_peer_has('annual_equity'),
            "No equity - ask about stock options or RSUs.", priority=50,
        ),
        RecommendationRule(
            'more_pto', _pto_below_average,
            "PTO is below average - consider negotiating more days.", priority=40,
        ),
        RecommendationRule(
            'competitive', always,
            "This is a competitive offer. Focus on non-monetary perks.", fallback=True,
        ),
    ]


def build_offer_rubric(
    weights: Mapping[str, float],
    ranges: Optional[Mapping[str, Sequence[float]]] = None,
    negotiation_gap: float = 0.05
) -> Rubric:
    return Rubric(
        name=RUBRIC_NAME,
        factors=tuple(select_factors(RUBRIC_NAME, OFFER_FACTORS, weights, ranges)),
        tiers=OFFER_TIERS,
        rules=tuple(offer_rules(negotiation_gap)),
        description="Compare job offers on compensation, time off, equity and fit.",
    )


@dataclass(frozen=True)
class OfferComparison:
    ranked: List[RankedResult]
    best_by_factor: Dict[str, Optional[str]]
    results: List[ScoreResult]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ranking': [
                {'rank': r.rank, 'record_id': r.record_id, 'composite_score': r.composite_score}
                for r in self.ranked
            ],
            'best_by_factor': dict(self.best_by_factor),
            'results': [r.to_dict() for r in self.results],
        }


def compare_offers(
    engine: ScoringEngine,
    offers: Sequence[ScorableRecord],
    as_of: datetime
) -> OfferComparison:
    """
    Score, rank and cross-compare offers.

    Recommendations for each offer are generated with the other offers'
    best values in context, so a lone offer only gets absolute tips.
    """
    results = [engine.evaluate(offer, as_of=as_of) for offer in offers]

    own_values = [peer_values(offer, as_of) for offer in offers]
    best = {}
    for name in PEER_VALUES:
        present = [v[name] for v in own_values if v[name] is not MISSING]
        if present:
            best[name] = max(present)

    recommended = []
    for offer, result, own in zip(offers, results, own_values):
        context = {'own': own, 'best': best, 'offer_count': len(offers)}
        recommended.append(engine.recommend(offer, result, context=context))

    ranked = rank_all(recommended)
    best_by_factor = {
        name: engine.compare_results(recommended, name) for name in engine.rubric.factor_names
    }
    if ranked:
        logger.info("Compared %d offers; top=%s", len(offers), ranked[0].record_id)
    return OfferComparison(
        ranked=ranked,
        best_by_factor=best_by_factor,
        results=recommended,
    )
