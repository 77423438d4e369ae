"""
Schedule C (Form 1040) - Profit or Loss From Business

Computes net profit or loss per sole proprietorship and the total that
flows to Schedule 1 and Schedule SE. Cost of goods sold and car and truck
expenses are used as entered; Part III inventory detail and Part IV
vehicle detail are not modeled (the validation engine flags them).

Reference: IRS Instructions for Schedule C (Form 1040)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from calculator.decimal_math import apply_rate
from calculator.results import TracedResult
from calculator.source_documents import schedule_c_ref
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.schedule_c import ScheduleCBusiness
    from models.tax_return import TaxReturn


# Part II expense lines other than meals, in form order.
EXPENSE_FIELDS = (
    ("advertising", "advertising"),
    ("carAndTruck", "car_and_truck"),
    ("contractLabor", "contract_labor"),
    ("insurance", "insurance"),
    ("legalAndProfessional", "legal_and_professional"),
    ("officeExpense", "office_expense"),
    ("rentOrLease", "rent_or_lease"),
    ("supplies", "supplies"),
    ("taxesAndLicenses", "taxes_and_licenses"),
    ("travel", "travel"),
    ("utilities", "utilities"),
    ("otherExpenses", "other_expenses"),
)


@dataclass(frozen=True)
class ScheduleCBusinessResult(TracedResult):
    business_id: str
    business_name: str
    line1: TracedValue  # gross receipts
    line2: TracedValue  # returns and allowances
    line3: TracedValue
    line4: TracedValue  # cost of goods sold
    line5: TracedValue  # gross profit
    line6: TracedValue  # other income
    line7: TracedValue  # gross income
    line24b: TracedValue  # deductible meals
    line28: TracedValue  # total expenses
    line29: TracedValue  # tentative profit or loss
    line30: TracedValue  # business use of home
    line31: TracedValue  # net profit or loss

    @property
    def net_profit(self) -> int:
        return self.line31.amount


@dataclass(frozen=True)
class ScheduleCResult(TracedResult):
    businesses: Tuple[ScheduleCBusinessResult, ...]
    total_net_profit: TracedValue

    def business(self, business_id: str) -> Optional[ScheduleCBusinessResult]:
        return next((b for b in self.businesses if b.business_id == business_id), None)


def compute_business(business: "ScheduleCBusiness", config: "TaxYearConfig") -> ScheduleCBusinessResult:
    prefix = f"scheduleC.{business.id}"

    def ref(field_name: str) -> str:
        return schedule_c_ref(business.id, field_name)

    # Part I - Income
    line1 = traced_from_computation(
        business.gross_receipts, f"{prefix}.line1", [ref("grossReceipts")], "Gross receipts or sales"
    )
    line2 = traced_from_computation(
        business.returns_and_allowances, f"{prefix}.line2", [ref("returnsAndAllowances")], "Returns and allowances"
    )
    line3 = traced_from_computation(
        line1.amount - line2.amount, f"{prefix}.line3", [f"{prefix}.line1", f"{prefix}.line2"], "line 1 - line 2"
    )
    line4 = traced_from_computation(
        business.cost_of_goods_sold, f"{prefix}.line4", [ref("costOfGoodsSold")], "Cost of goods sold, as entered"
    )
    line5 = traced_from_computation(
        line3.amount - line4.amount, f"{prefix}.line5", [f"{prefix}.line3", f"{prefix}.line4"], "line 3 - line 4"
    )
    line6 = traced_from_computation(business.other_income, f"{prefix}.line6", [ref("otherIncome")], "Other income")
    line7 = traced_from_computation(
        line5.amount + line6.amount, f"{prefix}.line7", [f"{prefix}.line5", f"{prefix}.line6"], "line 5 + line 6"
    )

    # Part II - Expenses
    line24b = traced_from_computation(
        apply_rate(business.meals, config.meals_deductible_rate),
        f"{prefix}.line24b",
        [ref("meals")],
        f"meals x {config.meals_deductible_rate:.0%}",
    )
    expense_total = sum(getattr(business, attr) for _, attr in EXPENSE_FIELDS) + line24b.amount
    line28 = traced_from_computation(
        expense_total,
        f"{prefix}.line28",
        [ref(name) for name, _ in EXPENSE_FIELDS] + [f"{prefix}.line24b"],
        "sum of expense lines 8 through 27a",
    )
    line29 = traced_from_computation(
        line7.amount - line28.amount, f"{prefix}.line29", [f"{prefix}.line7", f"{prefix}.line28"], "line 7 - line 28"
    )
    line30 = traced_from_computation(
        business.home_office_deduction, f"{prefix}.line30", [ref("homeOffice")], "Business use of home"
    )
    line31 = traced_from_computation(
        line29.amount - line30.amount, f"{prefix}.line31", [f"{prefix}.line29", f"{prefix}.line30"],
        "line 29 - line 30",
    )

    return ScheduleCBusinessResult(
        business_id=business.id,
        business_name=business.business_name,
        line1=line1, line2=line2, line3=line3, line4=line4, line5=line5, line6=line6, line7=line7,
        line24b=line24b, line28=line28, line29=line29, line30=line30, line31=line31,
    )


def compute_schedule_c(tax_return: "TaxReturn", config: "TaxYearConfig") -> Optional[ScheduleCResult]:
    """All Schedule C businesses plus the aggregate net profit; None without businesses."""
    if not tax_return.schedule_c_businesses:
        return None

    results = tuple(compute_business(b, config) for b in tax_return.schedule_c_businesses)
    total = traced_from_computation(
        sum(r.line31.amount for r in results),
        "scheduleC.totalNetProfit",
        [r.line31.node_id for r in results],
        "sum of line 31 across businesses",
    )
    return ScheduleCResult(businesses=results, total_net_profit=total)
