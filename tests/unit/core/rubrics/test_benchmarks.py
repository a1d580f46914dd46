#!/usr/bin/env python3
"""
Unit tests for networking benchmarks.
"""

import unittest
from datetime import datetime, timedelta, timezone

from core.rubrics.benchmarks import (
    INDUSTRY_BENCHMARKS,
    benchmark_networking,
    build_benchmark_rubric,
    compare_metric,
    comparison_label,
    monthly_interactions,
    resolve_industry,
)
from core.scorer.engine import ScoringEngine
from core.scorer.exceptions import ConfigurationError
from core.scorer.models import MISSING
from core.scorer.records import NetworkingMetricsRecord

AS_OF = datetime(2026, 3, 1, tzinfo=timezone.utc)

WEIGHTS = {
    'network_size': 0.25,
    'monthly_interactions': 0.25,
    'response_rate': 0.25,
    'referral_success_rate': 0.25,
}


def _engines():
    return {name: ScoringEngine(build_benchmark_rubric(name, WEIGHTS)) for name in INDUSTRY_BENCHMARKS}


def _metrics(**fields):
    return NetworkingMetricsRecord(**fields).to_scorable()


class TestBenchmarkNetworking(unittest.TestCase):

    def setUp(self):
        self.engines = _engines()

    def test_technology_user(self):
        metrics = _metrics(
            id="user-1",
            industry="technology",
            network_size=150,
            monthly_interactions=10,
            campaigns=[
                {"response_received": True},
                {"response_received": True},
                {"response_received": False},
                {},
            ],
            referrals=[
                {"status": "successful"},
                {"status": "pending"},
                {"status": "declined"},
                {"status": "pending"},
            ],
        )
        report = benchmark_networking(self.engines, metrics, AS_OF)

        self.assertEqual(report.industry, "Technology")
        self.assertEqual(report.result.rubric, "benchmarks/technology")
        self.assertEqual(report.user['response_rate'], 50.0)
        self.assertEqual(report.user['referral_success_rate'], 25.0)

        # network 100, interactions 50, response capped at 100, referrals 100
        self.assertAlmostEqual(report.result.raw_composite, 87.5)
        self.assertEqual(report.result.tier.name, "average")

        self.assertEqual(report.comparisons['network_size'], {'percentage': 100, 'label': 'Above Average'})
        self.assertEqual(report.comparisons['monthly_interactions'], {'percentage': 50, 'label': 'Below Average'})
        self.assertEqual(report.comparisons['response_rate'], {'percentage': 143, 'label': 'Excellent'})

        self.assertEqual(report.result.recommendations, (
            "Reach out more often: Technology professionals average 20 interactions a month",
        ))

    def test_unknown_industry_uses_default(self):
        metrics = _metrics(id="u", industry="Basket Weaving", network_size=130,
                           monthly_interactions=18, response_rate=33, referral_success_rate=27)
        report = benchmark_networking(self.engines, metrics, AS_OF)

        self.assertEqual(report.industry, "Default")
        self.assertAlmostEqual(report.result.raw_composite, 100.0)
        self.assertEqual(report.result.recommendations, (
            "You meet the Default benchmarks - keep your current networking routine",
        ))

    def test_empty_campaigns_are_missing(self):
        metrics = _metrics(id="u", network_size=130, monthly_interactions=18,
                           referral_success_rate=27, campaigns=[])
        report = benchmark_networking(self.engines, metrics, AS_OF)

        self.assertIsNone(report.user['response_rate'])
        self.assertEqual(report.result.missing_factors, ('response_rate',))
        self.assertEqual(report.comparisons['response_rate'], {'percentage': None, 'label': 'No Data'})
        self.assertEqual(report.result.recommendations, (
            "You meet the Default benchmarks - keep your current networking routine",
        ))

    def test_missing_referrals_get_no_tip(self):
        metrics = _metrics(id="u", industry="Technology", network_size=150,
                           monthly_interactions=20, response_rate=35)
        report = benchmark_networking(self.engines, metrics, AS_OF)

        self.assertEqual(report.result.missing_factors, ('referral_success_rate',))
        self.assertEqual(report.comparisons['referral_success_rate'], {'percentage': None, 'label': 'No Data'})
        self.assertEqual(report.result.recommendations, (
            "You meet the Technology benchmarks - keep your current networking routine",
        ))

    def test_to_dict(self):
        metrics = _metrics(id="u", industry="Finance", network_size=60)
        data = benchmark_networking(self.engines, metrics, AS_OF).to_dict()

        self.assertEqual(data['industry'], "Finance")
        self.assertEqual(data['benchmarks']['network_size'], 120)
        self.assertEqual(len(data['benchmarks']['best_practices']), 4)
        self.assertEqual(data['comparisons']['network_size']['percentage'], 50)
        self.assertEqual(data['record_id'], "u")


class TestMetricHelpers(unittest.TestCase):

    def test_monthly_interactions_from_dates(self):
        metrics = _metrics(id="u", interaction_dates=[
            AS_OF - timedelta(days=1),
            AS_OF - timedelta(days=15),
            AS_OF - timedelta(days=29),
            AS_OF - timedelta(days=45),
        ])
        self.assertEqual(monthly_interactions(metrics, AS_OF), 3)
        self.assertIs(monthly_interactions(_metrics(id="u"), AS_OF), MISSING)

    def test_comparison_labels(self):
        self.assertEqual(comparison_label(120), 'Excellent')
        self.assertEqual(comparison_label(100), 'Above Average')
        self.assertEqual(comparison_label(75), 'Average')
        self.assertEqual(comparison_label(50), 'Below Average')
        self.assertEqual(comparison_label(49), 'Needs Improvement')

    def test_compare_metric_is_uncapped(self):
        self.assertEqual(compare_metric(300, 150), {'percentage': 200, 'label': 'Excellent'})
        self.assertEqual(compare_metric(0, 150)['percentage'], 0)
        self.assertEqual(compare_metric(0, 150)['label'], 'Needs Improvement')

    def test_compare_missing_metric(self):
        self.assertEqual(compare_metric(MISSING, 150), {'percentage': None, 'label': 'No Data'})

    def test_resolve_industry(self):
        self.assertEqual(resolve_industry("HEALTHCARE"), "Healthcare")
        self.assertEqual(resolve_industry(None), "Default")
        self.assertEqual(resolve_industry("Space", default="Technology"), "Technology")

    def test_unknown_metric_weight(self):
        with self.assertRaises(ConfigurationError):
            build_benchmark_rubric("Technology", {'followers': 1.0})


if __name__ == '__main__':
    unittest.main()
