"""
End-to-end tests for the Form 1040 computation.

Tests cover:
- Wage earner refund and balance due
- Self-employment: SE tax, deductible half, QBI deduction
- Qualified dividends through the QDCG worksheet
- Joint return with children (CTC limited to tax)
- Standard deduction: age 65, blindness, dependent filer
- Itemized vs standard deduction choice
"""

import logging

import pytest

from calculator.form1040 import compute_form1040, compute_standard_deduction
from models.deductions import DeductionMethod, DependentCareExpenses, EstimatedTaxPayments
from models.taxpayer import FilingStatus
from tests.fixtures.returns import (
    make_business,
    make_child,
    make_dividends,
    make_itemized,
    make_person,
    make_return,
    make_w2,
    traced,
)


class TestWageEarner:
    def test_60000_single_refund(self, config_2025):
        tax_return = make_return(w2s=[make_w2(6_000_000, withheld=600_000)])
        result = compute_form1040(tax_return, config_2025)

        assert result.agi == 6_000_000
        assert result.line12.amount == 1_500_000
        assert result.taxable_income == 4_500_000
        assert result.line16.amount == 516_150
        assert result.total_tax == 516_150
        assert result.line25.amount == 600_000
        assert result.refund == 83_850
        assert result.amount_owed == 0
        assert result.deduction_method == DeductionMethod.STANDARD
        assert result.executed_schedules() == []

    def test_balance_due_with_estimated_payments(self, config_2025):
        tax_return = make_return(
            w2s=[make_w2(6_000_000, withheld=400_000)],
            estimated_payments=EstimatedTaxPayments(q1=25_000, q2=25_000),
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.line26.amount == 50_000
        assert result.line33.amount == 450_000
        assert result.amount_owed == 66_150
        assert result.refund == 0

    def test_debug_log(self, config_2025, caplog):
        with caplog.at_level(logging.DEBUG, logger="calculator"):
            compute_form1040(make_return(w2s=[make_w2(6_000_000)]), config_2025)
        assert "Computing Form 1040 for tax year 2025" in caplog.text

    def test_withholding_is_traced_to_w2(self, config_2025):
        tax_return = make_return(w2s=[make_w2(6_000_000, withheld=600_000)])
        result = compute_form1040(tax_return, config_2025)
        assert "w2:w2-1:box2" in result.line25.inputs
        assert result.line1a.inputs == ("w2:w2-1:box1",)


class TestSelfEmployed:
    def test_100000_net_profit(self, config_2025):
        tax_return = make_return(schedule_c_businesses=[make_business(10_000_000)])
        result = compute_form1040(tax_return, config_2025)

        # 100,000 - 7,064.78 deductible half of SE tax
        assert result.line10.amount == 706_478
        assert result.agi == 9_293_522
        assert result.line13.amount == 1_558_704
        assert result.taxable_income == 6_234_818
        assert result.line16.amount == 863_060
        assert result.line23.amount == 1_412_955
        assert result.total_tax == 2_276_015
        assert result.amount_owed == 2_276_015
        assert result.earned_income.amount == 9_235_000
        assert result.executed_schedules() == ["scheduleC", "scheduleSE", "form8995"]


class TestInvestmentIncome:
    def test_qualified_dividends_taxed_at_preferential_rate(self, config_2025):
        tax_return = make_return(
            w2s=[make_w2(4_000_000)],
            form_1099_divs=[make_dividends(1_000_000, qualified=1_000_000)],
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.agi == 5_000_000
        assert result.taxable_income == 3_500_000
        assert result.line16.amount == 276_150
        assert "form1040.line3a" in result.line16.inputs
        assert result.schedule_b.required
        assert result.executed_schedules() == ["scheduleB"]


class TestFamily:
    def test_mfj_two_children(self, config_2025):
        tax_return = make_return(
            FilingStatus.MARRIED_JOINT,
            w2s=[make_w2(10_000_000)],
            dependents=[make_child("Sam", 2015), make_child("Ava", 2018, ssn="987-65-4322")],
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.taxable_income == 7_000_000
        assert result.line18.amount == 792_300
        assert result.line19.amount == 400_000
        assert result.line22.amount == 392_300
        assert result.line27.amount == 0
        assert result.line28.amount == 0
        assert "schedule8812" in result.executed_schedules()

    def test_credit_order_limits_later_credits(self, config_2025):
        # Low tax: the CTC uses all of it, nothing left for dependent care
        tax_return = make_return(
            w2s=[make_w2(2_000_000)],
            dependents=[make_child()],
            dependent_care=DependentCareExpenses(total_expenses=300_000),
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.line19.amount == result.line18.amount
        assert result.dependent_care_credit.credit.amount == 0
        assert result.line22.amount == 0


class TestStandardDeduction:
    @pytest.mark.parametrize("tax_return,expected", [
        (make_return(taxpayer=make_person(birth_year=1955)), 1_700_000),
        (make_return(taxpayer=make_person(birth_year=1955, is_blind=True)), 1_900_000),
        (
            make_return(
                FilingStatus.MARRIED_JOINT,
                taxpayer=make_person(birth_year=1955),
                spouse=make_person("Jordan", birth_year=1958, ssn="234-56-7890"),
            ),
            3_320_000,
        ),
        (make_return(FilingStatus.HEAD_OF_HOUSEHOLD), 2_250_000),
    ])
    def test_additional_amounts(self, config_2025, tax_return, expected):
        result = compute_standard_deduction(tax_return, traced(0, "earnedIncome"), config_2025)
        assert result.amount == expected

    def test_dependent_filer(self, config_2025):
        # max(1,350, 5,000 + 450)
        tax_return = make_return(can_be_claimed_as_dependent=True)
        result = compute_standard_deduction(tax_return, traced(500_000, "earnedIncome"), config_2025)
        assert result.amount == 545_000
        assert result.inputs == ("earnedIncome",)

    def test_dependent_filer_minimum(self, config_2025):
        tax_return = make_return(can_be_claimed_as_dependent=True)
        result = compute_standard_deduction(tax_return, traced(0, "earnedIncome"), config_2025)
        assert result.amount == 135_000


class TestDeductionChoice:
    def test_itemized_when_larger(self, config_2025):
        tax_return = make_return(
            w2s=[make_w2(10_000_000)],
            deductions=make_itemized(
                state_local_income_tax=500_000, real_estate_tax=500_000, mortgage_interest=1_500_000
            ),
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.schedule_a.line17.amount == 2_500_000
        assert result.line12.amount == 2_500_000
        assert result.deduction_method == DeductionMethod.ITEMIZED
        assert result.taxable_income == 7_500_000
        # 1,192.50 + 4,386 + 22% x 26,525
        assert result.line16.amount == 1_141_400

    def test_standard_when_larger(self, config_2025):
        tax_return = make_return(
            w2s=[make_w2(10_000_000)],
            deductions=make_itemized(mortgage_interest=500_000),
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.schedule_a is not None
        assert result.line12.amount == 1_500_000
        assert result.deduction_method == DeductionMethod.STANDARD
        assert result.line12.inputs == ("standardDeduction", "scheduleA.line17")
