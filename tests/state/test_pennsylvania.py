"""
Tests for the Pennsylvania PA-40 module.

Tests cover:
- Flat 3.07% on the sum of income classes
- Losses in one class do not offset another
- IRC 529 contribution deduction cap
- Rents and royalties, partnership and estate income as separate classes
- Part-year proration
"""

from datetime import date

from models.schedule_e import K1EntityType
from models.state_return import ResidencyType
from tests.fixtures.returns import (
    make_business,
    make_dividends,
    make_interest,
    make_k1,
    make_rental,
    make_return,
    make_sale,
    make_state,
    make_w2,
)


class TestPennsylvania:
    def test_60000_wages(self, compute_state):
        tax_return = make_return(w2s=[make_w2(6_000_000)], states=[make_state("PA")])
        result = compute_state(tax_return)
        assert result.detail.compensation.amount == 6_000_000
        assert result.state_tax == 184_200
        assert result.state_credits == 0

    def test_income_classes(self, compute_state):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            form_1099_ints=[make_interest(100_000)],
            form_1099_divs=[make_dividends(50_000, box2a=20_000)],
            capital_transactions=[make_sale(100_000, 400_000)],
            states=[make_state("PA", contributions_529=2_000_000)],
        )
        detail = compute_state(tax_return).detail
        assert detail.interest.amount == 100_000
        assert detail.dividends.amount == 70_000
        # A net loss does not reduce other classes
        assert detail.net_gains.amount == 0
        assert detail.total_taxable_income.amount == 6_170_000
        assert detail.deduction_529.amount == 1_800_000
        assert detail.deduction_529.inputs == ("state.PA.contributions529",)
        assert detail.adjusted_taxable_income.amount == 4_370_000
        assert detail.tax.amount == 134_159

    def test_business_loss_counts_as_zero(self, compute_state):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            schedule_c_businesses=[make_business(100_000, supplies=500_000)],
            states=[make_state("PA")],
        )
        detail = compute_state(tax_return).detail
        assert detail.business_profits.amount == 0
        assert detail.total_taxable_income.amount == 6_000_000

    def test_part_year(self, compute_state):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            states=[make_state("PA", ResidencyType.PART_YEAR, move_in_date=date(2025, 7, 1))],
        )
        assert compute_state(tax_return).state_tax == 92_857

    def test_nonresident(self, compute_state):
        tax_return = make_return(w2s=[make_w2(6_000_000)], states=[make_state("PA", ResidencyType.NONRESIDENT)])
        assert compute_state(tax_return).state_tax == 0


class TestSupplementalIncomeClasses:
    def test_rents_class(self, compute_state):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            rental_properties=[make_rental(2_400_000, repairs=400_000)],
            states=[make_state("PA")],
        )
        detail = compute_state(tax_return).detail
        assert detail.rents_royalties.amount == 2_000_000
        assert detail.rents_royalties.inputs == ("form8582.netPassive",)
        assert detail.total_taxable_income.amount == 8_000_000

    def test_rental_loss_counts_as_zero(self, compute_state):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            rental_properties=[make_rental(1_000_000, repairs=2_000_000)],
            states=[make_state("PA")],
        )
        detail = compute_state(tax_return).detail
        assert detail.rents_royalties.amount == 0
        assert detail.total_taxable_income.amount == 6_000_000

    def test_partnership_income_in_business_class(self, compute_state):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            schedule_k1s=[make_k1(
                ordinary_income=1_000_000,
                guaranteed_payments=500_000,
                interest_income=30_000,
                long_term_capital_gain=200_000,
            )],
            states=[make_state("PA")],
        )
        detail = compute_state(tax_return).detail
        assert detail.business_profits.amount == 1_500_000
        assert "k1:k1-1:guaranteedPayments" in detail.business_profits.inputs
        assert detail.interest.amount == 30_000
        assert detail.net_gains.amount == 200_000
        # 60,000 + 15,000 + 300 + 2,000
        assert detail.total_taxable_income.amount == 7_730_000

    def test_estate_income_separate_from_business(self, compute_state):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            schedule_c_businesses=[make_business(100_000, supplies=500_000)],
            schedule_k1s=[make_k1(
                entity="Hale Family Trust",
                entity_type=K1EntityType.ESTATE_OR_TRUST,
                ordinary_income=800_000,
            )],
            states=[make_state("PA")],
        )
        detail = compute_state(tax_return).detail
        assert detail.estate_trust_income.amount == 800_000
        assert detail.estate_trust_income.inputs == ("k1:k1-1:ordinaryIncome",)
        assert detail.business_profits.amount == 0
        assert detail.total_taxable_income.amount == 6_800_000
