#!/usr/bin/env python3
"""
Unit tests for the offer comparison rubric.
"""

from datetime import datetime, timezone

import pytest

from core.rubrics.offers import (
    adjusted_compensation,
    build_offer_rubric,
    compare_offers,
    total_compensation,
)
from core.scorer.engine import ScoringEngine
from core.scorer.exceptions import ConfigurationError
from core.scorer.models import MISSING
from core.scorer.records import OfferRecord

AS_OF = datetime(2026, 3, 1, tzinfo=timezone.utc)

DEFAULT_WEIGHTS = {'total_compensation': 0.5, 'pto_days': 0.2, 'annual_equity': 0.3}

NEGOTIATE = "Negotiate — equity/PTO below competing offer"
COMPETITIVE = "This is a competitive offer. Focus on non-monetary perks."


def _offer(**fields):
    return OfferRecord(**fields).to_scorable()


@pytest.fixture
def engine():
    return ScoringEngine(build_offer_rubric(DEFAULT_WEIGHTS))


class TestOfferExample:
    """Two offers: higher salary with no equity vs. lower salary with equity and PTO."""

    @pytest.fixture
    def comparison(self, engine):
        offer_a = _offer(id="A", total_compensation=150000, pto_days=15, annual_equity=0)
        offer_b = _offer(id="B", total_compensation=145000, pto_days=25, annual_equity=10000)
        return compare_offers(engine, [offer_a, offer_b], AS_OF)

    def test_b_ranks_higher(self, comparison):
        assert [r.record_id for r in comparison.ranked] == ["B", "A"]
        by_id = {r.record_id: r for r in comparison.results}
        assert by_id["A"].raw_composite == pytest.approx(30.0)
        assert by_id["B"].raw_composite == pytest.approx(47.5)

    def test_negotiation_tip_for_a(self, comparison):
        by_id = {r.record_id: r for r in comparison.results}
        assert by_id["A"].recommendations[0] == NEGOTIATE
        assert "No equity - ask about stock options or RSUs." in by_id["A"].recommendations
        assert "PTO is below average - consider negotiating more days." in by_id["A"].recommendations

    def test_b_is_competitive(self, comparison):
        by_id = {r.record_id: r for r in comparison.results}
        assert by_id["B"].recommendations == (COMPETITIVE,)

    def test_best_by_factor(self, comparison):
        assert comparison.best_by_factor == {
            'total_compensation': "A",
            'pto_days': "B",
            'annual_equity': "B",
        }

    def test_tiers(self, comparison):
        by_id = {r.record_id: r for r in comparison.results}
        assert by_id["A"].tier.name == "weak"
        assert by_id["B"].tier.name == "fair"

    def test_to_dict(self, comparison):
        data = comparison.to_dict()
        assert data['ranking'][0] == {'rank': 1, 'record_id': "B", 'composite_score': comparison.ranked[0].composite_score}
        assert len(data['results']) == 2


class TestCompensation:

    def test_total_from_components(self):
        offer = _offer(
            id="x",
            base_salary=100000,
            annual_bonus_percent=10,
            equity_value=40000,
            health_insurance_value=5000,
            retirement_match_percent=6,
            retirement_max_match=5000,
            pto_days=20,
            other_benefits_value=1000,
            signing_bonus=20000,
        )
        expected = 100000 + 10000 + 10000 + 5000 + 5000 + 100000 / 260 * 20 + 1000 + 5000
        assert total_compensation(offer) == pytest.approx(expected)

    def test_explicit_total_wins(self):
        assert total_compensation(_offer(id="x", base_salary=1, total_compensation=99)) == 99

    def test_no_salary_is_missing(self):
        assert total_compensation(_offer(id="x", pto_days=20)) is MISSING

    def test_cost_of_living_adjustment(self):
        sf = _offer(id="sf", total_compensation=180000, location="San Francisco, CA")
        remote = _offer(id="r", total_compensation=180000, location="San Francisco, CA", remote_policy="remote")
        explicit = _offer(id="e", total_compensation=180000, cost_of_living_index=90)
        unknown = _offer(id="u", total_compensation=180000, location="Somewhere")

        assert adjusted_compensation(sf) == pytest.approx(100000)
        assert adjusted_compensation(remote) == pytest.approx(180000)
        assert adjusted_compensation(explicit) == pytest.approx(200000)
        assert adjusted_compensation(unknown) == pytest.approx(180000)


class TestOfferRules:

    def test_comp_gap(self, engine):
        low = _offer(id="low", total_compensation=100000, pto_days=25, annual_equity=10000)
        high = _offer(id="high", total_compensation=150000, pto_days=25, annual_equity=10000)
        comparison = compare_offers(engine, [low, high], AS_OF)
        by_id = {r.record_id: r for r in comparison.results}
        assert by_id["low"].recommendations == (
            "Total comp is $50,000 below the best offer. Consider negotiating.",
        )

    def test_signing_bonus_tip(self, engine):
        plain = _offer(id="plain", total_compensation=150000, pto_days=25, annual_equity=10000)
        bonus = _offer(id="bonus", total_compensation=150000, pto_days=25, annual_equity=10000, signing_bonus=10000)
        comparison = compare_offers(engine, [plain, bonus], AS_OF)
        by_id = {r.record_id: r for r in comparison.results}
        assert by_id["plain"].recommendations == ("No signing bonus - request one to match other offers.",)

    def test_single_offer_gets_absolute_tips_only(self, engine):
        only = _offer(id="only", total_compensation=150000, pto_days=12, annual_equity=0)
        comparison = compare_offers(engine, [only], AS_OF)
        assert comparison.results[0].recommendations == (
            "PTO is below average - consider negotiating more days.",
        )


class TestBuildOfferRubric:

    def test_unknown_factor(self):
        with pytest.raises(ConfigurationError):
            build_offer_rubric({'stock_options': 1.0})

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ConfigurationError):
            build_offer_rubric({'total_compensation': 0.5, 'pto_days': 0.2})

    def test_range_override(self):
        rubric = build_offer_rubric(DEFAULT_WEIGHTS, ranges={'total_compensation': (50000, 150000)})
        normalizer = rubric.factor('total_compensation').normalizer
        assert (normalizer.min, normalizer.max) == (50000, 150000)

    def test_bad_range(self):
        with pytest.raises(ConfigurationError):
            build_offer_rubric(DEFAULT_WEIGHTS, ranges={'pto_days': (30, 10)})
        with pytest.raises(ConfigurationError):
            build_offer_rubric(DEFAULT_WEIGHTS, ranges={'bonus': (0, 1)})

    def test_rating_factor(self):
        engine = ScoringEngine(build_offer_rubric({'culture_fit': 0.5, 'commute': 0.5}))
        result = engine.evaluate(_offer(id="r", culture_fit_score=10, commute_score=1), as_of=AS_OF)
        assert result.per_factor_scores == {'culture_fit': 100.0, 'commute': 0.0}
        assert result.factor('culture_fit').label == "culture fit"
