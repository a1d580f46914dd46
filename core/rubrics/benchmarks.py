#!/usr/bin/env python3
"""
Networking Benchmark Rubric.

Compares a user's networking metrics against industry averages. Each
metric is scored as a ratio of its benchmark (capped at 100), and the
uncapped percentage is reported alongside with a label:
    >=120 Excellent, >=100 Above Average, >=75 Average, >=50 Below Average, else Needs Improvement
A metric with no data is reported as "No Data" and never triggers a tip.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Tuple

from core.rubrics.catalog import FactorSpec, select_factors
from core.scorer.aggregator import round_score
from core.scorer.engine import ScoringEngine
from core.scorer.extractors import items_within_days, numeric, to_number
from core.scorer.models import MISSING, RecommendationRule, ScorableRecord, ScoreResult
from core.scorer.normalizers import Ratio
from core.scorer.recommendations import always
from core.scorer.rubric import Rubric
from core.scorer.tiers import TierTable

logger = logging.getLogger(__name__)

RUBRIC_NAME = "benchmarks"
DEFAULT_INDUSTRY = "Default"
INTERACTION_WINDOW_DAYS = 30
IMPROVEMENT_THRESHOLD = 75
NO_DATA_LABEL = 'No Data'


@dataclass(frozen=True)
class IndustryBenchmark:
    network_size: float
    monthly_interactions: float
    response_rate: float
    referral_success_rate: float
    best_practices: Tuple[str, ...] = field(default_factory=tuple)

    def target(self, metric: str) -> float:
        return getattr(self, metric)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'network_size': self.network_size,
            'monthly_interactions': self.monthly_interactions,
            'response_rate': self.response_rate,
            'referral_success_rate': self.referral_success_rate,
            'best_practices': list(self.best_practices),
        }


INDUSTRY_BENCHMARKS: Dict[str, IndustryBenchmark] = {
    'Technology': IndustryBenchmark(150, 20, 35, 25, (
        'Attend 1-2 tech meetups or conferences monthly',
        'Engage with open source communities',
        'Maintain active LinkedIn presence with technical content',
        'Join industry-specific Slack/Discord communities',
    )),
    'Finance': IndustryBenchmark(120, 15, 30, 30, (
        'Attend industry networking events quarterly',
        'Join professional associations (CFA, FPA)',
        'Leverage alumni networks from target firms',
        'Maintain connections with former colleagues',
    )),
    'Healthcare': IndustryBenchmark(100, 12, 40, 35, (
        'Attend medical conferences and CME events',
        'Join specialty-specific professional societies',
        'Network through hospital committees',
        'Maintain relationships with medical school connections',
    )),
    'Marketing': IndustryBenchmark(180, 25, 32, 22, (
        'Attend 2-3 marketing events monthly',
        'Engage actively on LinkedIn and Twitter',
        'Join marketing communities (GrowthHackers, Product Hunt)',
        'Contribute to marketing blogs and podcasts',
    )),
    'Education': IndustryBenchmark(90, 10, 45, 40, (
        'Attend education conferences (ISTE, ASCD)',
        'Join educator networks (Edutopia community)',
        'Participate in district committees',
        'Connect through professional development workshops',
    )),
    DEFAULT_INDUSTRY: IndustryBenchmark(130, 18, 33, 27, (
        'Attend 1-2 industry events monthly',
        'Maintain active professional social media presence',
        'Join relevant professional associations',
        'Follow up within 24-48 hours after meeting contacts',
    )),
}

BENCHMARK_TIERS = TierTable.from_bounds([
    ("needs_improvement", 0, 50),
    ("below_average", 50, 75),
    ("average", 75, 90),
    ("above_average", 90, 100),
])

METRIC_LABELS = {
    'network_size': 'network size',
    'monthly_interactions': 'monthly interactions',
    'response_rate': 'outreach response rate',
    'referral_success_rate': 'referral success rate',
}

IMPROVEMENT_TIPS = {
    'network_size': "Grow your network: aim for {target:.0f} contacts ({industry} average), you have {value:.0f}",
    'monthly_interactions': "Reach out more often: {industry} professionals average {target:.0f} interactions a month",
    'response_rate': "Personalize outreach messages to lift your response rate toward {target:.0f}%",
    'referral_success_rate': "Ask for referrals from stronger relationships to approach the {target:.0f}% success rate",
}

IDENTITY_FIELDS = ('industry', 'network_size', 'monthly_interactions', 'response_rate', 'referral_success_rate')


def resolve_industry(industry: Any, default: str = DEFAULT_INDUSTRY) -> str:
    """Canonical industry name; unknown or blank industries use `default`."""
    wanted = str(industry or '').strip().lower()
    for name in INDUSTRY_BENCHMARKS:
        if name.lower() == wanted:
            return name
    if wanted:
        logger.info("No benchmarks for industry %r; using %s", industry, default)
    return default


def _percentage_of(items, predicate) -> Any:
    if not items:
        return MISSING
    return sum(1 for item in items if predicate(item)) / len(items) * 100


def response_rate(record: ScorableRecord, as_of: datetime) -> Any:
    """Explicit rate, else the share of campaign outreach that got a response."""
    value = record.get('response_rate')
    if value is not None:
        return to_number(value)
    return _percentage_of(record.get('campaigns'), lambda c: bool(c.get('response_received')))


def referral_success_rate(record: ScorableRecord, as_of: datetime) -> Any:
    value = record.get('referral_success_rate')
    if value is not None:
        return to_number(value)
    return _percentage_of(record.get('referrals'), lambda r: r.get('status') == 'successful')


def monthly_interactions(record: ScorableRecord, as_of: datetime) -> Any:
    value = record.get('monthly_interactions')
    if value is not None:
        return to_number(value)
    dates = record.get('interaction_dates')
    if dates is None:
        return MISSING
    stamped = [{'at': d} for d in dates]
    return len(items_within_days(stamped, as_of, INTERACTION_WINDOW_DAYS, date_key='at'))


METRIC_EXTRACTORS = {
    'network_size': numeric('network_size'),
    'monthly_interactions': monthly_interactions,
    'response_rate': response_rate,
    'referral_success_rate': referral_success_rate,
}


def benchmark_factors(benchmark: IndustryBenchmark) -> Dict[str, FactorSpec]:
    return {
        name: FactorSpec(extractor, Ratio(benchmark.target(name)), METRIC_LABELS[name])
        for name, extractor in METRIC_EXTRACTORS.items()
    }


def comparison_label(percentage: float) -> str:
    if percentage >= 120:
        return 'Excellent'
    if percentage >= 100:
        return 'Above Average'
    if percentage >= 75:
        return 'Average'
    if percentage >= 50:
        return 'Below Average'
    return 'Needs Improvement'


def compare_metric(value: Any, target: float) -> Dict[str, Any]:
    """Uncapped percentage of the benchmark; a missing value has no percentage."""
    if value is MISSING:
        return {'percentage': None, 'label': NO_DATA_LABEL}
    percentage = round_score(value / target * 100) if value else 0
    return {'percentage': percentage, 'label': comparison_label(percentage)}


# ----------------------------
# Recommendation rules
# ----------------------------
def _below_benchmark(metric: str):
    def _condition(record, result, context) -> bool:
        comparison = context.get('comparisons', {}).get(metric)
        return (comparison is not None and comparison['percentage'] is not None
                and comparison['percentage'] < IMPROVEMENT_THRESHOLD)
    return _condition


def _tip(metric: str):
    def _template(record, result, context) -> str:
        value = context['user'].get(metric)
        return IMPROVEMENT_TIPS[metric].format(
            target=context['benchmarks'][metric],
            value=0 if value is None else value,
            industry=context['industry'],
        )
    return _template


def benchmark_rules(industry: str) -> List[RecommendationRule]:
    rules = [
        RecommendationRule(f'improve_{metric}', _below_benchmark(metric), _tip(metric), priority=90 - 10 * i)
        for i, metric in enumerate(METRIC_EXTRACTORS)
    ]
    rules.append(RecommendationRule(
        'on_track', always,
        f"You meet the {industry} benchmarks - keep your current networking routine", fallback=True,
    ))
    return rules


def build_benchmark_rubric(industry: str, weights: Mapping[str, float]) -> Rubric:
    benchmark = INDUSTRY_BENCHMARKS[industry]
    return Rubric(
        name=f"{RUBRIC_NAME}/{industry.lower()}",
        factors=tuple(select_factors(RUBRIC_NAME, benchmark_factors(benchmark), weights)),
        tiers=BENCHMARK_TIERS,
        rules=tuple(benchmark_rules(industry)),
        description=f"Networking metrics against {industry} averages.",
    )


@dataclass(frozen=True)
class BenchmarkReport:
    industry: str
    result: ScoreResult
    user: Dict[str, Any]
    benchmarks: IndustryBenchmark
    comparisons: Dict[str, Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data.update(
            industry=self.industry,
            user=dict(self.user),
            benchmarks=self.benchmarks.to_dict(),
            comparisons={k: dict(v) for k, v in self.comparisons.items()},
        )
        return data


def benchmark_networking(
    engines: Mapping[str, ScoringEngine],
    metrics: ScorableRecord,
    as_of: datetime,
    default_industry: str = DEFAULT_INDUSTRY
) -> BenchmarkReport:
    """Score metrics with the engine for the record's industry (or `default_industry`)."""
    industry = resolve_industry(metrics.get('industry'), default_industry)
    benchmark = INDUSTRY_BENCHMARKS[industry]

    user = {}
    comparisons = {}
    for metric, extractor in METRIC_EXTRACTORS.items():
        value = extractor(metrics, as_of)
        user[metric] = None if value is MISSING else value
        comparisons[metric] = compare_metric(value, benchmark.target(metric))

    context = {
        'industry': industry,
        'user': user,
        'benchmarks': benchmark.to_dict(),
        'comparisons': comparisons,
    }
    result = engines[industry].score(metrics, as_of=as_of, context=context)
    return BenchmarkReport(
        industry=industry,
        result=result,
        user=user,
        benchmarks=benchmark,
        comparisons=comparisons,
    )
