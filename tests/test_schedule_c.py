"""
Tests for Schedule C business profit or loss.

Tests cover:
- Part I income lines and Part II expenses
- 50% limit on business meals
- Business use of home
- Aggregation across several businesses, losses included
"""

from calculator.schedules import compute_business, compute_schedule_c
from tests.fixtures.returns import make_business, make_return


class TestSingleBusiness:
    def test_lines(self, config_2025):
        business = make_business(
            5_000_000,
            returns_and_allowances=100_000,
            cost_of_goods_sold=900_000,
            advertising=200_000,
            supplies=300_000,
            meals=100_000,
            home_office_deduction=150_000,
        )
        result = compute_business(business, config_2025)

        assert result.line3.amount == 4_900_000
        assert result.line5.amount == 4_000_000
        assert result.line7.amount == 4_000_000
        # 2,000 + 3,000 + 50% of 1,000
        assert result.line24b.amount == 50_000
        assert result.line28.amount == 550_000
        assert result.line29.amount == 3_450_000
        assert result.line31.amount == 3_300_000
        assert result.net_profit == 3_300_000

    def test_node_ids_are_scoped_to_the_business(self, config_2025):
        result = compute_business(make_business(100_000, business_id="shop"), config_2025)
        assert result.line1.node_id == "scheduleC.shop.line1"
        assert result.line1.inputs == ("schedulec:shop:grossReceipts",)
        assert "scheduleC.shop.line24b" in result.line28.inputs
        assert "schedulec:shop:meals" not in result.line28.inputs


class TestScheduleC:
    def test_none_without_businesses(self, config_2025):
        assert compute_schedule_c(make_return(), config_2025) is None

    def test_total_includes_losses(self, config_2025):
        tax_return = make_return(schedule_c_businesses=[
            make_business(3_300_000),
            make_business(0, business_id="biz-2", name="Side Gig", other_expenses=500_000),
        ])
        result = compute_schedule_c(tax_return, config_2025)
        assert result.business("biz-2").net_profit == -500_000
        assert result.total_net_profit.amount == 2_800_000
        assert result.total_net_profit.inputs == ("scheduleC.biz-1.line31", "scheduleC.biz-2.line31")
        assert result.business("missing") is None
