"""
Tests for the alternative minimum tax (Form 6251).

Tests cover:
- No AMT for typical wage returns
- Incentive stock option spread and private activity bond interest in AMTI
- Taxes added back when itemizing, standard deduction otherwise
- Exemption phase-out and the 28% rate
- Part III keeps qualified dividends at capital gain rates
- AMT carried to Form 1040 line 17
"""

import pytest

from calculator.form1040 import compute_form1040
from models.deductions import AMTItems
from models.taxpayer import FilingStatus
from tests.fixtures.returns import make_dividends, make_itemized, make_return, make_w2


def create_iso_return(wages=10_000_000, iso_spread=20_000_000, **kwargs):
    return make_return(w2s=[make_w2(wages)], amt_items=AMTItems(iso_spread=iso_spread), **kwargs)


class TestNoAMT:
    @pytest.mark.parametrize("filing_status,wages", [
        (FilingStatus.SINGLE, 6_000_000),
        (FilingStatus.SINGLE, 30_000_000),
        (FilingStatus.MARRIED_JOINT, 20_000_000),
        (FilingStatus.HEAD_OF_HOUSEHOLD, 9_000_000),
    ])
    def test_wage_returns(self, config_2025, filing_status, wages):
        result = compute_form1040(make_return(filing_status, w2s=[make_w2(wages)]), config_2025)
        assert result.amt.amt == 0
        assert result.line17.amount == 0
        assert "form6251" not in result.executed_schedules()

    def test_standard_deduction_added_back(self, config_2025):
        result = compute_form1040(make_return(w2s=[make_w2(6_000_000)]), config_2025)
        assert result.amt.line2a.amount == 1_500_000
        assert result.amt.line2a.inputs == ("form1040.line12",)
        assert result.amt.line4.amount == 6_000_000


class TestISOSpread:
    def test_iso_spread_triggers_amt(self, config_2025):
        # AMTI 85,000 + 15,000 + 200,000 = 300,000; less 88,100 exemption
        # 26% x 211,900 = 55,094 - 13,614 regular tax
        result = compute_form1040(create_iso_return(), config_2025)
        amt = result.amt
        assert amt.line4.amount == 30_000_000
        assert amt.line5.amount == 8_810_000
        assert amt.line6.amount == 21_190_000
        assert amt.line7.amount == 5_509_400
        assert amt.line10.amount == 1_361_400
        assert amt.amt == 4_148_000
        assert result.line17.amount == 4_148_000
        assert result.line18.amount == 1_361_400 + 4_148_000
        assert "amtItems.isoSpread" in amt.line2i.inputs
        assert "form6251" in result.executed_schedules()

    def test_private_activity_bond_interest(self, config_2025):
        tax_return = make_return(
            w2s=[make_w2(10_000_000)],
            amt_items=AMTItems(iso_spread=20_000_000, private_activity_bond_interest=1_000_000),
        )
        amt = compute_form1040(tax_return, config_2025).amt
        assert amt.line2g.amount == 1_000_000
        assert amt.line4.amount == 31_000_000


class TestItemized:
    def test_taxes_added_back(self, config_2025):
        tax_return = create_iso_return(
            wages=40_000_000,
            deductions=make_itemized(state_local_income_tax=3_000_000, mortgage_interest=4_000_000),
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.schedule_a is not None
        assert result.amt.line2a.amount == result.schedule_a.line7.amount
        assert result.amt.line2a.inputs == ("scheduleA.line7",)


class TestExemptionPhaseout:
    def test_high_income(self, config_2025):
        # 25% x (700,000 - 626,350) = 18,412.50 off the 88,100 exemption
        # 26% x 239,100 + 28% x 391,212.50 = 171,705.50, below regular tax
        result = compute_form1040(make_return(w2s=[make_w2(70_000_000)]), config_2025)
        amt = result.amt
        assert amt.line4.amount == 70_000_000
        assert amt.exemption_reduction.amount == 1_841_250
        assert amt.line5.amount == 6_968_750
        assert amt.line6.amount == 63_031_250
        assert amt.line7.amount == 17_170_550
        assert amt.amt == 0


class TestPartIII:
    def test_qualified_dividends_keep_capital_gain_rate(self, config_2025):
        # 26% x 211,900 + 15% x 20,000 = 58,094, less 16,614 regular tax
        tax_return = create_iso_return(form_1099_divs=[make_dividends(2_000_000, qualified=2_000_000)])
        result = compute_form1040(tax_return, config_2025)
        amt = result.amt
        assert amt.line6.amount == 23_190_000
        assert amt.line7.amount == 5_809_400
        assert "form1040.line3a" in amt.line7.inputs
        assert result.line16.amount == 1_661_400
        assert amt.amt == 4_148_000
