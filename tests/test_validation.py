"""
Tests for return validation findings.

Tests cover:
- Scope notices on every return; nonresident aliens and unrecognized inputs
- K-1, suspended rental loss and AMT notices
- Source document checks (1099-DIV, W-2 social security boxes)
- Unmodeled Schedule C features and QBI above the threshold
- Foreign tax credit, capital loss carryforward, dependent notices
- State support and nonresident proration notices
- Findings never change computed amounts
"""

from datetime import date

import pytest

from calculator.engine import compute_all
from models.deductions import Adjustments, AMTItems
from models.state_return import ResidencyType
from validation.federal_validation import (
    ValidationSeverity,
    has_errors,
    has_warnings,
    validate_return,
)
from tests.fixtures.returns import (
    make_business,
    make_child,
    make_dividends,
    make_k1,
    make_rental,
    make_return,
    make_sale,
    make_state,
    make_w2,
)


def finding_codes(tax_return):
    return [f.code for f in compute_all(tax_return).findings]


class TestScope:
    def test_simple_return(self):
        result = compute_all(make_return(w2s=[make_w2(6_000_000)]))
        assert [f.code for f in result.findings] == ["SCOPE_LIMITATIONS"]
        assert not has_warnings(result.findings)
        assert not has_errors(result.findings)

    def test_config_looked_up_when_omitted(self, year_2025):
        tax_return = make_return(w2s=[make_w2(6_000_000)])
        form1040 = year_2025.compute_form1040(tax_return)
        findings = validate_return(tax_return, form1040)
        assert findings[0].severity == ValidationSeverity.INFO

    def test_nonresident_alien(self):
        result = compute_all(make_return(w2s=[make_w2(6_000_000)], nonresident_alien=True))
        finding = next(f for f in result.findings if f.code == "NONRESIDENT_ALIEN_NOT_SUPPORTED")
        assert finding.severity == ValidationSeverity.ERROR
        assert has_errors(result.findings)

    def test_unrecognized_input_reported(self):
        tax_return = make_return(w2s=[make_w2(6_000_000)], form_1099_rs=[{"box1": 1_000_000}])
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "UNRECOGNIZED_INPUT")
        assert "form_1099_rs" in finding.message
        assert finding.severity == ValidationSeverity.WARNING
        assert result.form1040.agi == 6_000_000


class TestDocuments:
    def test_qualified_exceeds_ordinary(self):
        tax_return = make_return(form_1099_divs=[make_dividends(100_000, qualified=200_000)])
        assert "DIV_QUALIFIED_EXCEEDS_ORDINARY" in finding_codes(tax_return)

    def test_qualified_amount_used_as_entered(self):
        tax_return = make_return(
            w2s=[make_w2(4_000_000)], form_1099_divs=[make_dividends(100_000, qualified=200_000)]
        )
        assert compute_all(tax_return).form1040.line3a.amount == 200_000

    def test_ss_wages_over_base(self):
        tax_return = make_return(w2s=[make_w2(20_000_000)])
        codes = finding_codes(tax_return)
        assert "W2_SS_WAGES_OVER_BASE" in codes
        assert "W2_SS_WITHHOLDING_MISMATCH" not in codes

    @pytest.mark.parametrize("box4,flagged", [
        (372_000, False),
        (372_100, False),      # within $1 rounding
        (372_101, True),
        (0, True),
    ])
    def test_ss_withholding_mismatch(self, box4, flagged):
        # 6.2% x 60,000 = 3,720
        tax_return = make_return(w2s=[make_w2(6_000_000, box4=box4)])
        assert ("W2_SS_WITHHOLDING_MISMATCH" in finding_codes(tax_return)) is flagged


class TestSelfEmployment:
    def test_inventory_and_vehicle(self):
        tax_return = make_return(
            schedule_c_businesses=[make_business(5_000_000, has_inventory=True, has_vehicle=True)]
        )
        codes = finding_codes(tax_return)
        assert "SCHEDULE_C_INVENTORY" in codes
        assert "SCHEDULE_C_VEHICLE" in codes

    def test_qbi_above_threshold(self):
        tax_return = make_return(schedule_c_businesses=[make_business(30_000_000)])
        assert "QBI_ABOVE_THRESHOLD" in finding_codes(tax_return)


class TestSupplementalIncome:
    def test_k1_amounts_used_as_reported(self):
        tax_return = make_return(schedule_k1s=[make_k1(ordinary_income=5_000_000)])
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "K1_SIMPLIFIED")
        assert "Maple Partners LP" in finding.message

    def test_suspended_rental_loss(self):
        tax_return = make_return(
            w2s=[make_w2(13_000_000)],
            rental_properties=[make_rental(1_000_000, repairs=4_000_000)],
        )
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "PASSIVE_LOSS_SUSPENDED")
        assert "$20,000.00" in finding.message
        assert "RENTAL_ACTIVE_PARTICIPATION_ASSUMED" in finding_codes(tax_return)

    def test_amt_notice(self):
        tax_return = make_return(w2s=[make_w2(10_000_000)], amt_items=AMTItems(iso_spread=20_000_000))
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "AMT_SIMPLIFIED")
        assert "$41,480.00" in finding.message


class TestCredits:
    def test_foreign_tax(self):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            form_1099_divs=[make_dividends(100_000, box7=15_000)],
        )
        codes = finding_codes(tax_return)
        assert "FTC_DIRECT_ELECTION" in codes
        assert "FTC_EXCESS_NOT_CARRIED" in codes

    def test_capital_loss_carryforward(self):
        tax_return = make_return(w2s=[make_w2(6_000_000)], capital_transactions=[make_sale(0, 1_000_000)])
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "CAPITAL_LOSS_CARRYFORWARD")
        assert "$7,000.00" in finding.message

    def test_savers_credit_gap(self):
        tax_return = make_return(
            w2s=[make_w2(3_000_000)], adjustments=Adjustments(traditional_ira_contribution=200_000)
        )
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "SAVERS_CREDIT_NOT_COMPUTED")
        assert finding.severity == ValidationSeverity.WARNING
        assert result.form1040.line10.amount == 200_000

    def test_dependent_filer(self):
        assert "DEPENDENT_FILER_LIMITATIONS" in finding_codes(make_return(can_be_claimed_as_dependent=True))

    def test_dependent_without_ssn(self):
        tax_return = make_return(dependents=[make_child(ssn=None)])
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "DEPENDENT_MISSING_SSN")
        assert "Sam" in finding.message
        assert finding.severity == ValidationSeverity.WARNING


class TestStates:
    def test_unsupported_state(self):
        tax_return = make_return(w2s=[make_w2(6_000_000)], states=[make_state("NY")])
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "STATE_NOT_SUPPORTED")
        assert finding.message.startswith("NY")
        assert result.state_results == ()

    def test_part_year_notice(self):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            states=[make_state("IL", ResidencyType.PART_YEAR, move_in_date=date(2025, 7, 1))],
        )
        result = compute_all(tax_return)
        finding = next(f for f in result.findings if f.code == "STATE_NONRESIDENT_SOURCE_INCOME")
        assert "50.4%" in finding.message

    def test_finding_to_dict(self):
        result = compute_all(make_return())
        data = result.findings[0].to_dict()
        assert data["severity"] == "info"
        assert data["category"] == "unsupported"
        assert data["irs_citation"] == "Form 1040"
