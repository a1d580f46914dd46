#!/usr/bin/env python3
"""
Unit tests for the scoring engine.

Covers the properties every rubric relies on: bounded composites, weight
redistribution for missing data, monotonicity, idempotence and totality.
"""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from core.scorer.engine import ScoringEngine
from core.scorer.exceptions import ConfigurationError, InvalidRecord
from core.scorer.extractors import days_since, numeric
from core.scorer.models import MISSING, FactorDefinition, RecommendationRule, ScorableRecord
from core.scorer.normalizers import Linear, ThresholdBucket
from core.scorer.recommendations import always
from core.scorer.rubric import Rubric
from core.scorer.tiers import TierTable

AS_OF = datetime(2026, 3, 1, tzinfo=timezone.utc)

TIERS = TierTable.from_bounds([
    ("weak", 0, 40),
    ("fair", 40, 60),
    ("competitive", 60, 80),
    ("excellent", 80, 100),
])


def offer_rubric(rules=()):
    return Rubric(
        name="offers",
        factors=(
            FactorDefinition("comp", numeric("comp"), Linear(100000, 200000), 0.5),
            FactorDefinition("pto", numeric("pto"), Linear(10, 30), 0.2),
            FactorDefinition("equity", numeric("equity"), Linear(0, 30000), 0.3),
        ),
        tiers=TIERS,
        rules=tuple(rules),
    )


@pytest.fixture
def engine():
    return ScoringEngine(offer_rubric())


class TestOfferExample:

    def test_composites_and_ranking(self, engine):
        a = {"id": "A", "comp": 150000, "pto": 15, "equity": 0}
        b = {"id": "B", "comp": 145000, "pto": 25, "equity": 10000}

        result_a = engine.evaluate(a, as_of=AS_OF)
        result_b = engine.evaluate(b, as_of=AS_OF)

        assert result_a.per_factor_scores["comp"] == pytest.approx(50)
        assert result_a.per_factor_scores["pto"] == pytest.approx(25)
        assert result_a.per_factor_scores["equity"] == pytest.approx(0)
        assert result_b.per_factor_scores["comp"] == pytest.approx(45)
        assert result_b.per_factor_scores["pto"] == pytest.approx(75)
        assert result_b.per_factor_scores["equity"] == pytest.approx(33.333, abs=1e-3)

        assert result_a.raw_composite == pytest.approx(30.0)
        assert result_a.composite_score == 30
        assert result_b.raw_composite == pytest.approx(47.5)
        assert result_b.composite_score in (47, 48)

        ranked = engine.rank_all([a, b], as_of=AS_OF)
        assert [r.record_id for r in ranked] == ["B", "A"]


class TestMissingData:

    def test_missing_factor_redistributes_weight(self, engine):
        result = engine.evaluate({"id": "x", "comp": 150000, "pto": 30}, as_of=AS_OF)

        equity = result.factor("equity")
        assert equity.missing
        assert equity.raw is MISSING
        assert equity.effective_weight == 0.0
        assert result.per_factor_scores["equity"] == 50.0
        assert result.missing_factors == ("equity",)

        # (0.5 * 50 + 0.2 * 100) / 0.7
        assert result.raw_composite == pytest.approx(45 / 0.7)
        assert sum(f.effective_weight for f in result.factors) == pytest.approx(1.0)

    def test_all_missing_scores_neutral(self, engine):
        result = engine.evaluate({"id": "empty"}, as_of=AS_OF)
        assert result.raw_composite == pytest.approx(50.0)
        assert result.tier.name == "fair"
        assert set(result.missing_factors) == {"comp", "pto", "equity"}

    def test_garbage_values_degrade_to_missing(self, engine):
        result = engine.evaluate({"id": "g", "comp": "lots", "pto": float("nan"), "equity": 0}, as_of=AS_OF)
        assert set(result.missing_factors) == {"comp", "pto"}
        assert result.raw_composite == pytest.approx(0.0)

    def test_missing_is_not_low(self, engine):
        missing = engine.evaluate({"id": "m", "comp": 150000, "pto": 20}, as_of=AS_OF)
        zero = engine.evaluate({"id": "z", "comp": 150000, "pto": 20, "equity": 0}, as_of=AS_OF)
        assert missing.raw_composite > zero.raw_composite


class TestProperties:

    @pytest.mark.parametrize("attrs", [
        {},
        {"comp": -1e12, "pto": -5, "equity": -1},
        {"comp": 1e12, "pto": 1e6, "equity": 1e9},
        {"comp": 123456, "pto": 17, "equity": 2500},
    ])
    def test_composite_bounded(self, engine, attrs):
        result = engine.evaluate(dict(attrs, id="r"), as_of=AS_OF)
        assert 0.0 <= result.raw_composite <= 100.0
        assert 0 <= result.composite_score <= 100
        assert result.tier.name in TIERS.names

    def test_monotonic_in_each_factor(self, engine):
        base = {"id": "r", "comp": 120000, "pto": 15, "equity": 5000}
        previous = engine.evaluate(base, as_of=AS_OF).raw_composite
        for comp in (130000, 150000, 199000, 250000):
            current = engine.evaluate(dict(base, comp=comp), as_of=AS_OF).raw_composite
            assert current >= previous
            previous = current

    def test_idempotent(self, engine):
        record = {"id": "r", "comp": 133333, "pto": 17, "equity": 7777}
        first = engine.score(record, as_of=AS_OF)
        second = engine.score(record, as_of=AS_OF)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_record_without_id(self, engine):
        with pytest.raises(InvalidRecord):
            engine.evaluate({"comp": 100}, as_of=AS_OF)
        with pytest.raises(InvalidRecord):
            engine.evaluate({"id": "  "}, as_of=AS_OF)

    def test_non_record_input(self, engine):
        with pytest.raises(InvalidRecord):
            engine.evaluate(["not", "a", "record"], as_of=AS_OF)

    def test_result_is_immutable(self, engine):
        result = engine.evaluate({"id": "r", "comp": 150000}, as_of=AS_OF)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.composite_score = 100
        with pytest.raises(TypeError):
            result.per_factor_scores["comp"] = 100

    def test_result_is_hashable(self, engine):
        record = {"id": "r", "comp": 150000, "pto": 20}
        first = engine.score(record, as_of=AS_OF)
        second = engine.score(record, as_of=AS_OF)
        assert hash(first) == hash(second)
        assert len({first, second}) == 1


class TestTierClassification:

    def test_tier_follows_rounded_composite(self):
        tiers = TierTable.from_bounds([
            ("at_risk", 0, 25),
            ("needs_attention", 25, 50),
            ("healthy", 50, 75),
            ("strong", 75, 100),
        ])
        rubric = Rubric(
            name="single",
            factors=(FactorDefinition("x", numeric("x"), Linear(0, 1000), 1.0),),
            tiers=tiers,
        )
        result = ScoringEngine(rubric).evaluate({"id": "r", "x": 746}, as_of=AS_OF)

        assert result.raw_composite == pytest.approx(74.6)
        assert result.composite_score == 75
        assert result.tier.name == "strong"
        assert tiers.classify(result.composite_score) == result.tier


class TestTimeRelativeFactors:

    @pytest.fixture
    def recency_engine(self):
        return ScoringEngine(Rubric(
            name="recency",
            factors=(FactorDefinition(
                "recency",
                days_since("last_contacted_at"),
                ThresholdBucket(((14, 100), (30, 80), (60, 60), (90, 40)), overflow=20),
                1.0,
            ),),
            tiers=TIERS,
        ))

    def test_as_of_drives_result(self, recency_engine):
        record = {"id": "c", "last_contacted_at": (AS_OF - timedelta(days=10)).isoformat()}
        assert recency_engine.evaluate(record, as_of=AS_OF).raw_composite == 100
        later = AS_OF + timedelta(days=100)
        assert recency_engine.evaluate(record, as_of=later).raw_composite == 20

    def test_as_of_string(self, recency_engine):
        record = {"id": "c", "last_contacted_at": "2026-02-10T00:00:00Z"}
        result = recency_engine.evaluate(record, as_of="2026-03-01T00:00:00Z")
        assert result.raw("recency") == 19
        assert result.per_factor_scores["recency"] == 80

    def test_score_all_shares_one_instant(self, recency_engine):
        records = [
            {"id": "a", "last_contacted_at": AS_OF - timedelta(days=20)},
            {"id": "b", "last_contacted_at": AS_OF - timedelta(days=70)},
        ]
        results = recency_engine.score_all(records, as_of=AS_OF)
        assert [r.raw("recency") for r in results] == [20, 70]


class TestConstruction:

    def test_bad_weights(self):
        with pytest.raises(ConfigurationError):
            Rubric(
                name="bad",
                factors=(FactorDefinition("a", numeric("a"), Linear(0, 1), 0.7),),
                tiers=TIERS,
            )

    def test_engine_needs_rubric(self):
        with pytest.raises(ConfigurationError):
            ScoringEngine({"name": "not a rubric"})

    def test_rule_needs_condition(self):
        with pytest.raises(ConfigurationError):
            RecommendationRule("r", None, "text")

    def test_negative_max_recommendations(self):
        with pytest.raises(ConfigurationError):
            ScoringEngine(offer_rubric(), max_recommendations=-1)


class TestRecommend:

    def test_score_attaches_recommendations(self):
        engine = ScoringEngine(offer_rubric([
            RecommendationRule("tier", always, "Tier is {tier}"),
        ]))
        record = ScorableRecord(id="r", attributes={"comp": 200000, "pto": 30, "equity": 30000})
        result = engine.score(record, as_of=AS_OF)
        assert result.recommendations == ("Tier is excellent",)

    def test_recommend_returns_new_result(self):
        engine = ScoringEngine(offer_rubric([RecommendationRule("r", always, "tip")]))
        record = {"id": "r", "comp": 150000}
        evaluated = engine.evaluate(record, as_of=AS_OF)
        recommended = engine.recommend(record, evaluated)
        assert evaluated.recommendations == ()
        assert recommended.recommendations == ("tip",)
        assert recommended.raw_composite == evaluated.raw_composite
