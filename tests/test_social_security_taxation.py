"""
Tests for taxable Social Security benefits.

Tests cover:
- Publication 915 worksheet: 50% tier above the base amount, 85% above the additional amount
- Taxable amount never above 85% of benefits
- Tax-exempt interest in provisional income
- Married filing separately base amounts of zero
- Repayments exceeding benefits
- SSA-1099 withholding on Form 1040 line 25
"""

import pytest

from calculator.form1040 import compute_form1040
from calculator.social_security import compute_taxable_social_security
from models.taxpayer import FilingStatus
from tests.fixtures.returns import make_return, make_ssa, make_w2, traced


def taxable_benefits(config, benefits, other_income, filing_status=FilingStatus.SINGLE, tax_exempt=0):
    tax_return = make_return(filing_status, form_ssa1099s=[make_ssa(benefits)])
    return compute_taxable_social_security(
        tax_return,
        [traced(other_income, "form1040.line1z")],
        traced(tax_exempt, "form1040.line2a"),
        None,
        config,
    )


class TestWorksheet:
    def test_both_tiers(self, config_2025):
        # Provisional 30,000 + 10,000 = 40,000; 4,500 + 85% x 6,000
        result = taxable_benefits(config_2025, 2_000_000, 3_000_000)
        assert result.provisional_income.amount == 4_000_000
        assert result.tier1.amount == 450_000
        assert result.tier2.amount == 510_000
        assert result.line6b.amount == 960_000

    def test_below_base_amount(self, config_2025):
        result = taxable_benefits(config_2025, 2_000_000, 1_000_000)
        assert result.provisional_income.amount == 2_000_000
        assert result.line6b.amount == 0

    def test_limited_to_85_percent(self, config_2025):
        result = taxable_benefits(config_2025, 2_000_000, 10_000_000)
        assert result.line6b.amount == 1_700_000

    def test_tax_exempt_interest_counts(self, config_2025):
        # Provisional 20,000 + 5,000 + 10,000 = 35,000
        result = taxable_benefits(config_2025, 2_000_000, 2_000_000, tax_exempt=500_000)
        assert result.provisional_income.amount == 3_500_000
        assert result.line6b.amount == 535_000
        assert "form1040.line2a" in result.provisional_income.inputs

    @pytest.mark.parametrize("other_income,expected", [
        (0, 850_000),
        (1_000_000, 1_700_000),
    ])
    def test_married_separate(self, config_2025, other_income, expected):
        result = taxable_benefits(config_2025, 2_000_000, other_income, FilingStatus.MARRIED_SEPARATE)
        assert result.line6b.amount == expected

    def test_repayments_exceed_benefits(self, config_2025):
        result = taxable_benefits(config_2025, -100_000, 5_000_000)
        assert result.line6a.amount == -100_000
        assert result.line6b.amount == 0

    def test_no_benefits(self, config_2025):
        result = compute_taxable_social_security(
            make_return(), [traced(0, "form1040.line1z")], traced(0, "form1040.line2a"), None, config_2025
        )
        assert result is None


class TestForm1040:
    def test_taxable_benefits_in_total_income(self, config_2025):
        tax_return = make_return(
            w2s=[make_w2(3_000_000, withheld=100_000)],
            form_ssa1099s=[make_ssa(2_000_000, withheld=200_000)],
        )
        result = compute_form1040(tax_return, config_2025)
        assert result.line6a.amount == 2_000_000
        assert result.line6b.amount == 960_000
        assert result.line6a.inputs == ("ssa1099:ssa-1:box5",)
        assert result.line9.amount == 3_960_000
        assert "form1040.line6b" in result.line9.inputs
        assert result.line25.amount == 300_000
        assert "ssa1099:ssa-1:box6" in result.line25.inputs

    def test_no_benefits_lines_are_zero(self, config_2025):
        result = compute_form1040(make_return(w2s=[make_w2(3_000_000)]), config_2025)
        assert result.social_security is None
        assert result.line6a.amount == 0
        assert result.line6b.amount == 0
