#!/usr/bin/env python3
"""
Unit tests for ranking and best-per-factor comparison.
"""

import random
import unittest
from datetime import datetime, timezone

from core.scorer.engine import ScoringEngine
from core.scorer.extractors import numeric
from core.scorer.models import FactorDefinition
from core.scorer.normalizers import InverseLinear, Linear
from core.scorer.ranking import best_values, compare_all, rank_all
from core.scorer.rubric import Rubric
from core.scorer.tiers import TierTable

AS_OF = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _engine():
    return ScoringEngine(Rubric(
        name="jobs",
        factors=(
            FactorDefinition("salary", numeric("salary"), Linear(0, 100), 0.5),
            FactorDefinition("commute", numeric("commute"), InverseLinear(0, 120), 0.5),
        ),
        tiers=TierTable.from_bounds([("low", 0, 50), ("high", 50, 100)]),
    ))


class TestRankAll(unittest.TestCase):

    def test_highest_first(self):
        engine = _engine()
        ranked = engine.rank_all([
            {"id": "a", "salary": 10, "commute": 60},
            {"id": "b", "salary": 90, "commute": 60},
            {"id": "c", "salary": 50, "commute": 60},
        ], as_of=AS_OF)
        self.assertEqual([r.record_id for r in ranked], ["b", "c", "a"])
        self.assertEqual([r.rank for r in ranked], [1, 2, 3])

    def test_ties_keep_input_order(self):
        engine = _engine()
        records = [{"id": f"r{i}", "salary": 50, "commute": 60} for i in range(5)]
        ranked = engine.rank_all(records, as_of=AS_OF)
        self.assertEqual([r.record_id for r in ranked], ["r0", "r1", "r2", "r3", "r4"])

    def test_ranks_by_full_precision(self):
        engine = _engine()
        # 50.2 and 49.8 composites both display as 50
        results = [
            engine.evaluate({"id": "lower", "salary": 49.6, "commute": 60}, as_of=AS_OF),
            engine.evaluate({"id": "higher", "salary": 50.4, "commute": 60}, as_of=AS_OF),
        ]
        self.assertEqual(results[0].composite_score, results[1].composite_score)
        self.assertEqual(rank_all(results)[0].record_id, "higher")


class TestCompareAll(unittest.TestCase):

    def test_max_for_regular_factor(self):
        engine = _engine()
        records = [
            {"id": "a", "salary": 70},
            {"id": "b", "salary": 95},
            {"id": "c", "salary": 80},
        ]
        self.assertEqual(engine.compare_all(records, "salary", as_of=AS_OF), "b")

    def test_min_for_inverse_factor(self):
        engine = _engine()
        records = [
            {"id": "a", "commute": 45},
            {"id": "b", "commute": 10},
            {"id": "c", "commute": 90},
        ]
        self.assertEqual(engine.compare_all(records, "commute", as_of=AS_OF), "b")

    def test_tie_goes_to_first_seen_regardless_of_other_records(self):
        engine = _engine()
        tied = [{"id": "first", "salary": 90}, {"id": "second", "salary": 90}]
        others = [{"id": f"x{i}", "salary": s} for i, s in enumerate([10, 40, 89, 5, 60])]

        rng = random.Random(7)
        for _ in range(20):
            shuffled = list(others)
            rng.shuffle(shuffled)
            # Interleave unrelated records while keeping first before second
            records = shuffled[:2] + [tied[0]] + shuffled[2:4] + [tied[1]] + shuffled[4:]
            self.assertEqual(engine.compare_all(records, "salary", as_of=AS_OF), "first")

    def test_missing_values_skipped(self):
        engine = _engine()
        records = [{"id": "a"}, {"id": "b", "salary": 5}]
        self.assertEqual(engine.compare_all(records, "salary", as_of=AS_OF), "b")
        self.assertIsNone(engine.compare_all([{"id": "a"}], "salary", as_of=AS_OF))

    def test_unknown_factor(self):
        with self.assertRaises(ValueError):
            _engine().compare_all([{"id": "a", "salary": 1}], "bonus", as_of=AS_OF)

    def test_compare_all_on_results(self):
        engine = _engine()
        results = [engine.evaluate({"id": i, "salary": s}, as_of=AS_OF) for i, s in (("a", 1), ("b", 3))]
        self.assertEqual(compare_all(results, "salary"), "b")
        self.assertEqual(compare_all(results, "salary", inverse=True), "a")


class TestBestValues(unittest.TestCase):

    def test_best_per_factor(self):
        engine = _engine()
        results = [
            engine.evaluate({"id": "a", "salary": 70, "commute": 30}, as_of=AS_OF),
            engine.evaluate({"id": "b", "salary": 90}, as_of=AS_OF),
        ]
        best = best_values(results, ["salary", "commute", "bonus"], inverse=["commute"])
        self.assertEqual(best, {"salary": 90.0, "commute": 30.0})


if __name__ == '__main__':
    unittest.main()
