"""
Tests for the Child Tax Credit and Additional Child Tax Credit.

Tests cover:
- $2,000 per child under 17 and $500 per other dependent
- $50 per $1,000 (or fraction) phase-out over the threshold
- Nonrefundable part limited to tax
- Refundable ACTC: $1,700 per child and 15% of earned income over $2,500
"""

import pytest

from calculator.credits import compute_child_tax_credit, is_ctc_qualifying_child
from models.taxpayer import DependentRelationship
from tests.fixtures.returns import make_child, make_return, traced

TWO_KIDS = [make_child("Sam", 2015), make_child("Ava", 2018, ssn="987-65-4322")]


def ctc(dependents, agi=6_000_000, tax=516_150, earned=None, config=None):
    return compute_child_tax_credit(
        make_return(dependents=dependents),
        traced(agi, "form1040.line11"),
        traced(tax, "form1040.line18"),
        traced(agi if earned is None else earned, "earnedIncome"),
        config,
    )


class TestInitialCredit:
    def test_two_children(self, config_2025):
        result = ctc(TWO_KIDS, config=config_2025)
        assert result.qualifying_children == 2
        assert result.initial_credit.amount == 400_000
        assert result.non_refundable_credit.amount == 400_000
        assert result.additional_ctc.amount == 0

    def test_other_dependent(self, config_2025):
        parent = make_child("Pat", 1950, relationship=DependentRelationship.PARENT)
        result = ctc([parent], config=config_2025)
        assert result.qualifying_children == 0
        assert result.other_dependents == 1
        assert result.initial_credit.amount == 50_000
        assert result.additional_ctc.amount == 0

    def test_seventeen_year_old_is_other_dependent(self, config_2025):
        teen = make_child("Lee", 2008)
        assert not is_ctc_qualifying_child(teen, 2025, config_2025)
        assert ctc([teen], config=config_2025).initial_credit.amount == 50_000

    def test_no_ssn_gets_nothing(self, config_2025):
        result = ctc([make_child(ssn=None)], config=config_2025)
        assert result.initial_credit.amount == 0

    def test_none_without_dependents(self, config_2025):
        assert ctc([], config=config_2025) is None


class TestPhaseOut:
    @pytest.mark.parametrize("agi,reduction", [
        (20_000_000, 0),
        (20_000_001, 5_000),        # $0.01 over counts as a full step
        (20_100_000, 5_000),
        (21_000_000, 50_000),
        (40_000_000, 400_000),      # never more than the credit
    ])
    def test_single_threshold(self, config_2025, agi, reduction):
        result = ctc(TWO_KIDS, agi=agi, tax=10_000_000, config=config_2025)
        assert result.phase_out_reduction.amount == reduction
        assert result.credit_after_phase_out.amount == 400_000 - reduction


class TestAdditionalCTC:
    def test_unused_credit_refunded(self, config_2025):
        # 400,000 credit, 100,000 of tax; 15% x (30,000 - 2,500) = 4,125
        result = ctc(TWO_KIDS, agi=3_000_000, tax=100_000, config=config_2025)
        assert result.non_refundable_credit.amount == 100_000
        assert result.additional_ctc.amount == 300_000

    def test_limited_by_earned_income(self, config_2025):
        # 15% x (10,000 - 2,500) = 1,125
        result = ctc(TWO_KIDS, agi=1_000_000, tax=0, config=config_2025)
        assert result.additional_ctc.amount == 112_500
        assert "earnedIncome" in result.additional_ctc.inputs

    def test_limited_per_child(self, config_2025):
        result = ctc(TWO_KIDS, agi=5_000_000, tax=0, config=config_2025)
        assert result.additional_ctc.amount == 340_000
