"""
Tests for Schedule A itemized deductions.

Tests cover:
- Medical expenses over 7.5% of AGI
- SALT cap of $40,000 with the MAGI phase-out down to the $10,000 floor
- Mortgage interest proration over the acquisition debt limit
- Investment interest limited to net investment income
- Charitable percentage limits
- Negative AGI treated as zero for the medical floor and charitable limits
"""

import pytest

from calculator.form1040 import compute_form1040
from calculator.schedules import compute_salt_cap, compute_schedule_a
from models.taxpayer import FilingStatus
from tests.fixtures.returns import make_business, make_itemized, make_return, make_w2, traced


def schedule_a(agi=20_000_000, nii=0, filing_status=FilingStatus.SINGLE, config=None, **itemized):
    tax_return = make_return(filing_status, deductions=make_itemized(**itemized))
    return compute_schedule_a(
        tax_return,
        traced(agi, "form1040.line11"),
        traced(nii, "form4952.netInvestmentIncome"),
        config,
    )


class TestScheduleAPresence:
    def test_none_without_itemized_entries(self, config_2025):
        tax_return = make_return()
        assert compute_schedule_a(
            tax_return, traced(0, "form1040.line11"), traced(0, "form4952.netInvestmentIncome"), config_2025
        ) is None


class TestMedical:
    def test_amount_over_floor(self, config_2025):
        # AGI 200,000 x 7.5% = 15,000; 20,000 - 15,000
        result = schedule_a(medical_expenses=2_000_000, config=config_2025)
        assert result.line3.amount == 1_500_000
        assert result.line4.amount == 500_000

    def test_below_floor_is_zero(self, config_2025):
        result = schedule_a(medical_expenses=1_000_000, config=config_2025)
        assert result.line4.amount == 0


class TestSALT:
    def test_capped_at_40000(self, config_2025):
        # 30,000 income tax + 20,000 real estate = 50,000 -> 40,000
        result = schedule_a(state_local_income_tax=3_000_000, real_estate_tax=2_000_000, config=config_2025)
        assert result.line5d.amount == 5_000_000
        assert result.line5e.amount == 4_000_000
        assert result.line7.amount == 4_000_000

    def test_larger_of_income_or_sales_tax(self, config_2025):
        result = schedule_a(state_local_income_tax=300_000, state_local_sales_tax=500_000, config=config_2025)
        assert result.line5a.amount == 500_000

    def test_line5e_cites_5d_and_agi(self, config_2025):
        result = schedule_a(real_estate_tax=100_000, config=config_2025)
        assert result.line5e.inputs == ("scheduleA.line5d", "scheduleA.line2")

    @pytest.mark.parametrize("magi,expected_cap", [
        (20_000_000, 4_000_000),   # under the $500,000 threshold
        (55_000_000, 2_500_000),   # 40,000 - 30% x 50,000
        (60_000_000, 1_000_000),   # 40,000 - 30,000
        (70_000_000, 1_000_000),   # floor
    ])
    def test_phase_out(self, config_2025, magi, expected_cap):
        assert compute_salt_cap(FilingStatus.SINGLE, magi, config_2025) == expected_cap

    def test_married_separate_half_amounts(self, config_2025):
        assert compute_salt_cap(FilingStatus.MARRIED_SEPARATE, 10_000_000, config_2025) == 2_000_000
        assert compute_salt_cap(FilingStatus.MARRIED_SEPARATE, 40_000_000, config_2025) == 500_000


class TestInterest:
    def test_mortgage_prorated_over_limit(self, config_2025):
        # 40,000 x 750,000 / 1,000,000
        result = schedule_a(mortgage_interest=4_000_000, mortgage_principal=100_000_000, config=config_2025)
        assert result.line8a.amount == 3_000_000
        assert "itemized.mortgagePrincipal" in result.line8a.inputs

    def test_grandfathered_debt_uses_1m_limit(self, config_2025):
        result = schedule_a(
            mortgage_interest=4_000_000, mortgage_principal=100_000_000, is_grandfathered_debt=True,
            config=config_2025,
        )
        assert result.line8a.amount == 4_000_000

    def test_unknown_principal_is_within_limit(self, config_2025):
        result = schedule_a(mortgage_interest=1_200_000, config=config_2025)
        assert result.line8a.amount == 1_200_000
        assert result.line8a.inputs == ("itemized.mortgageInterest",)

    def test_investment_interest_limited(self, config_2025):
        result = schedule_a(investment_interest=500_000, nii=300_000, config=config_2025)
        assert result.line9.amount == 300_000
        assert result.line10.amount == 300_000


class TestCharitable:
    def test_cash_limited_to_60_percent(self, config_2025):
        result = schedule_a(charitable_cash=15_000_000, config=config_2025)
        assert result.line11.amount == 12_000_000
        assert result.line14.amount == 12_000_000

    def test_noncash_limited_to_30_percent(self, config_2025):
        result = schedule_a(charitable_non_cash=8_000_000, config=config_2025)
        assert result.line12.amount == 6_000_000

    def test_combined_limit(self, config_2025):
        # 100,000 cash + 50,000 noncash, overall 60% of 200,000
        result = schedule_a(charitable_cash=10_000_000, charitable_non_cash=5_000_000, config=config_2025)
        assert result.line14.amount == 12_000_000


class TestTotal:
    def test_line17_sums_sections(self, config_2025):
        result = schedule_a(
            medical_expenses=2_000_000,
            state_local_income_tax=1_000_000,
            mortgage_interest=1_200_000,
            charitable_cash=300_000,
            other_itemized=50_000,
            config=config_2025,
        )
        # 5,000 + 10,000 + 12,000 + 3,000 + 500
        assert result.line17.amount == 3_050_000
        assert result.total == 3_050_000


class TestNegativeAGI:
    def test_floor_and_limits_use_zero(self, config_2025):
        result = schedule_a(
            agi=-2_000_000,
            medical_expenses=300_000,
            real_estate_tax=400_000,
            charitable_cash=500_000,
            config=config_2025,
        )
        assert result.line2.amount == 0
        assert result.line3.amount == 0
        assert result.line4.amount == 300_000
        assert result.line11.amount == 0
        assert result.line14.amount == 0
        assert result.line17.amount == 700_000

    def test_business_loss_return(self, config_2025):
        tax_return = make_return(
            w2s=[make_w2(1_000_000)],
            schedule_c_businesses=[make_business(500_000, supplies=4_000_000)],
            deductions=make_itemized(medical_expenses=300_000, charitable_cash=200_000, mortgage_interest=1_600_000),
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.agi < 0
        assert result.schedule_a.line2.amount == 0
        assert result.schedule_a.line4.amount == 300_000
        assert result.schedule_a.line14.amount == 0
        assert result.schedule_a.line17.amount >= 0
        assert result.taxable_income == 0
