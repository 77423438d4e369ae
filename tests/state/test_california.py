"""
Tests for the California Form 540 module.

Tests cover:
- CA bracket tax on CA AGI less the CA standard deduction
- Exemption credits and their phase-out
- Mental health services tax over $1,000,000
- Renter's credit
- Schedule CA adjustments (Treasury interest, Social Security benefits, HSA add-back)
- CA itemized deductions without the SALT cap or state income tax
- Part-year proration
"""

from datetime import date

from models.deductions import Adjustments, DeductionMethod
from models.state_return import ResidencyType
from tests.fixtures.returns import make_interest, make_itemized, make_return, make_ssa, make_state, make_w2


def create_ca_return(wages, state=None, **kwargs):
    return make_return(
        w2s=[make_w2(wages, state="CA", state_withheld=kwargs.pop("state_withheld", 0))],
        states=[state or make_state("CA")],
        **kwargs,
    )


class TestCaliforniaTax:
    def test_60000_single(self, compute_state):
        result = compute_state(create_ca_return(6_000_000))
        detail = result.detail
        assert detail.ca_agi.amount == 6_000_000
        assert detail.deduction.amount == 570_600
        assert result.state_taxable_income == 5_429_400
        # 110.79 + 303.70 + 607.52 + 770.52
        assert detail.tax.amount == 179_253
        assert detail.exemption_credits.amount == 15_300
        assert result.tax_after_credits == 163_953
        assert detail.mental_health_tax.amount == 0

    def test_renters_credit(self, compute_state):
        state = make_state("CA", rent_paid_in_state=1_800_000)
        result = compute_state(create_ca_return(5_000_000, state=state))
        assert result.detail.tax.amount == 119_253
        assert result.detail.tax_after_exemptions.amount == 103_953
        assert result.detail.renters_credit.amount == 6_000
        assert "state.CA.rentPaidInState" in result.detail.renters_credit.inputs
        assert result.tax_after_credits == 97_953

    def test_social_security_subtracted(self, compute_state):
        tax_return = create_ca_return(3_000_000, form_ssa1099s=[make_ssa(2_000_000)])
        detail = compute_state(tax_return).detail
        assert detail.federal_agi.amount == 3_960_000
        assert detail.subtractions.amount == 960_000
        assert "form1040.line6b" in detail.subtractions.inputs
        assert detail.ca_agi.amount == 3_000_000

    def test_renters_credit_agi_limit(self, compute_state):
        state = make_state("CA", rent_paid_in_state=1_800_000)
        result = compute_state(create_ca_return(6_000_000, state=state))
        assert result.detail.renters_credit.amount == 0

    def test_mental_health_tax(self, compute_state):
        result = compute_state(create_ca_return(120_000_000))
        # 1% x (1,194,294 - 1,000,000)
        assert result.detail.mental_health_tax.amount == 194_294
        assert result.detail.exemption_credits.amount == 0
        assert result.state_tax == result.detail.tax.amount + 194_294

    def test_exemption_phaseout_step(self, compute_state):
        # 2,500 over the threshold: one 6% step of 153
        result = compute_state(create_ca_return(25_470_300))
        assert result.detail.exemption_credits.amount == 14_382


class TestScheduleCA:
    def test_treasury_interest_subtracted(self, compute_state):
        tax_return = create_ca_return(6_000_000, form_1099_ints=[make_interest(300_000, box3=300_000)])
        detail = compute_state(tax_return).detail
        assert detail.subtractions.amount == 300_000
        assert detail.ca_agi.amount == 6_000_000

    def test_hsa_added_back(self, compute_state):
        tax_return = create_ca_return(6_000_000, adjustments=Adjustments(hsa_deduction=300_000))
        detail = compute_state(tax_return).detail
        assert detail.federal_agi.amount == 5_700_000
        assert detail.additions.amount == 300_000
        assert detail.ca_agi.amount == 6_000_000


class TestCaliforniaItemized:
    def test_state_income_tax_excluded(self, compute_state):
        tax_return = create_ca_return(
            10_000_000,
            deductions=make_itemized(
                real_estate_tax=1_000_000, state_local_income_tax=2_000_000, mortgage_interest=1_500_000
            ),
        )
        detail = compute_state(tax_return).detail
        assert detail.taxes_deduction.amount == 1_000_000
        assert detail.itemized_deductions.amount == 2_500_000
        assert detail.deduction.amount == 2_500_000
        assert detail.deduction_method == DeductionMethod.ITEMIZED

    def test_mortgage_debt_limit(self, compute_state):
        tax_return = create_ca_return(
            20_000_000,
            deductions=make_itemized(mortgage_interest=6_000_000, mortgage_principal=150_000_000),
        )
        detail = compute_state(tax_return).detail
        # 60,000 x 1,000,000 / 1,500,000
        assert detail.mortgage_interest.amount == 4_000_000

    def test_standard_deduction_without_schedule_a(self, compute_state):
        detail = compute_state(create_ca_return(6_000_000)).detail
        assert detail.itemized_deductions is None
        assert detail.deduction.inputs == ("form540.standardDeduction",)


class TestCaliforniaPartYear:
    def test_tax_prorated(self, compute_state):
        state = make_state("CA", ResidencyType.PART_YEAR, move_in_date=date(2025, 7, 1))
        result = compute_state(create_ca_return(6_000_000, state=state))
        # 1,792.53 x 184 / 365
        assert result.detail.tax.amount == 90_363
        assert result.detail.tax_after_exemptions.amount == 75_063

    def test_withholding(self, compute_state):
        result = compute_state(create_ca_return(6_000_000, state_withheld=200_000))
        assert result.state_withholding == 200_000
        assert result.overpaid == 36_047
