"""
Schedule A (Form 1040) - Itemized Deductions

- Medical and dental: only the amount over 7.5% of AGI (IRC Section 213)
- SALT: larger of income or sales tax, plus real estate and personal
  property taxes, capped with the MAGI phase-out (IRC Section 164(b)(6))
- Home mortgage interest: prorated when the loan exceeds the $750K/$1M
  acquisition debt limit (IRC Section 163(h)(3))
- Investment interest: limited to net investment income (Form 4952)
- Charitable: 60% of AGI for cash, 30% for noncash, 60% overall (IRC Section 170(b))

A negative AGI counts as zero for the medical floor and the charitable limits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.decimal_math import apply_rate, prorate
from calculator.results import TracedResult
from calculator.source_documents import itemized_ref
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class ScheduleAResult(TracedResult):
    line1: TracedValue  # medical and dental expenses
    line2: TracedValue  # AGI, not less than zero
    line3: TracedValue  # 7.5% of line 2
    line4: TracedValue  # line 1 minus line 3, floored at zero
    line5a: TracedValue  # income tax or general sales tax
    line5b: TracedValue  # real estate taxes
    line5c: TracedValue  # personal property taxes
    line5d: TracedValue  # 5a + 5b + 5c
    line5e: TracedValue  # 5d limited to the effective SALT cap
    line7: TracedValue
    line8a: TracedValue  # deductible mortgage interest
    line9: TracedValue  # investment interest
    line10: TracedValue
    line11: TracedValue  # cash gifts
    line12: TracedValue  # noncash gifts
    line14: TracedValue
    line16: TracedValue  # other itemized deductions
    line17: TracedValue  # total itemized deductions

    @property
    def total(self) -> int:
        return self.line17.amount


def compute_salt_cap(filing_status: str, magi: int, config: "TaxYearConfig") -> int:
    """
    Effective SALT cap after the high-income phase-out.

    cap = max(floor, base cap - 30% x (MAGI - threshold)), MFS amounts are half.
    """
    excess = max(0, magi - config.salt_phaseout_threshold[filing_status])
    reduction = apply_rate(excess, config.salt_phaseout_rate)
    return max(config.salt_floor[filing_status], config.salt_base_cap[filing_status] - reduction)


def compute_schedule_a(
    tax_return: "TaxReturn",
    agi: TracedValue,
    net_investment_income: TracedValue,
    config: "TaxYearConfig",
) -> Optional[ScheduleAResult]:
    """
    Compute Schedule A.

    Args:
        tax_return: Return holding the itemized deduction entries
        agi: Form 1040 line 11
        net_investment_income: Form 4952 net investment income limit
        config: Tax year constants

    Returns:
        ScheduleAResult, or None when the return carries no itemized entries
    """
    d = tax_return.deductions.itemized
    if d is None:
        return None

    fs = tax_return.filing_status

    # Medical
    line1 = traced_from_computation(
        d.medical_expenses, "scheduleA.line1", [itemized_ref("medicalExpenses")], "Medical and dental expenses"
    )
    line2 = traced_from_computation(
        max(0, agi.amount), "scheduleA.line2", [agi.node_id], "Form 1040, line 11, not less than zero"
    )
    line3 = traced_from_computation(
        apply_rate(line2.amount, config.medical_floor_rate),
        "scheduleA.line3",
        ["scheduleA.line2"],
        f"line 2 x {config.medical_floor_rate:.1%}",
    )
    line4 = traced_from_computation(
        max(0, line1.amount - line3.amount), "scheduleA.line4", ["scheduleA.line1", "scheduleA.line3"],
        "max(0, line 1 - line 3)",
    )

    # Taxes paid
    line5a = traced_from_computation(
        max(d.state_local_income_tax, d.state_local_sales_tax),
        "scheduleA.line5a",
        [itemized_ref("stateLocalIncomeTax"), itemized_ref("stateLocalSalesTax")],
        "larger of state/local income tax or general sales tax",
    )
    line5b = traced_from_computation(
        d.real_estate_tax, "scheduleA.line5b", [itemized_ref("realEstateTax")], "State and local real estate taxes"
    )
    line5c = traced_from_computation(
        d.personal_property_tax, "scheduleA.line5c", [itemized_ref("personalPropertyTax")],
        "State and local personal property taxes",
    )
    line5d = traced_from_computation(
        line5a.amount + line5b.amount + line5c.amount,
        "scheduleA.line5d",
        ["scheduleA.line5a", "scheduleA.line5b", "scheduleA.line5c"],
        "line 5a + 5b + 5c",
    )
    salt_cap = compute_salt_cap(fs, line2.amount, config)
    line5e = traced_from_computation(
        min(line5d.amount, salt_cap),
        "scheduleA.line5e",
        ["scheduleA.line5d", "scheduleA.line2"],
        "min(line 5d, SALT cap after MAGI phase-out)",
    )
    line7 = traced_from_computation(line5e.amount, "scheduleA.line7", ["scheduleA.line5e"], "line 5e")

    # Interest
    loan_limit = (
        config.mortgage_limit_pre_tcja[fs] if d.is_grandfathered_debt else config.mortgage_limit_post_tcja[fs]
    )
    if d.mortgage_principal > loan_limit:
        line8a = traced_from_computation(
            prorate(d.mortgage_interest, loan_limit, d.mortgage_principal),
            "scheduleA.line8a",
            [itemized_ref("mortgageInterest"), itemized_ref("mortgagePrincipal")],
            "interest x debt limit / principal",
        )
    else:
        line8a = traced_from_computation(
            d.mortgage_interest, "scheduleA.line8a", [itemized_ref("mortgageInterest")], "Home mortgage interest"
        )
    line9 = traced_from_computation(
        min(d.investment_interest, max(0, net_investment_income.amount)),
        "scheduleA.line9",
        [itemized_ref("investmentInterest"), net_investment_income.node_id],
        "min(investment interest, net investment income)",
    )
    line10 = traced_from_computation(
        line8a.amount + line9.amount, "scheduleA.line10", ["scheduleA.line8a", "scheduleA.line9"], "line 8a + line 9"
    )

    # Gifts to charity
    cash_limit = apply_rate(line2.amount, config.charitable_cash_rate)
    line11 = traced_from_computation(
        min(d.charitable_cash, cash_limit),
        "scheduleA.line11",
        [itemized_ref("charitableCash"), "scheduleA.line2"],
        f"min(cash gifts, {config.charitable_cash_rate:.0%} of AGI)",
    )
    line12 = traced_from_computation(
        min(d.charitable_non_cash, apply_rate(line2.amount, config.charitable_noncash_rate)),
        "scheduleA.line12",
        [itemized_ref("charitableNonCash"), "scheduleA.line2"],
        f"min(noncash gifts, {config.charitable_noncash_rate:.0%} of AGI)",
    )
    line14 = traced_from_computation(
        min(line11.amount + line12.amount, cash_limit),
        "scheduleA.line14",
        ["scheduleA.line11", "scheduleA.line12", "scheduleA.line2"],
        f"min(line 11 + line 12, {config.charitable_cash_rate:.0%} of AGI)",
    )

    line16 = traced_from_computation(
        d.other_itemized, "scheduleA.line16", [itemized_ref("otherItemized")], "Other itemized deductions"
    )
    line17 = traced_from_computation(
        line4.amount + line7.amount + line10.amount + line14.amount + line16.amount,
        "scheduleA.line17",
        ["scheduleA.line4", "scheduleA.line7", "scheduleA.line10", "scheduleA.line14", "scheduleA.line16"],
        "line 4 + 7 + 10 + 14 + 16",
    )

    return ScheduleAResult(
        line1=line1, line2=line2, line3=line3, line4=line4,
        line5a=line5a, line5b=line5b, line5c=line5c, line5d=line5d, line5e=line5e, line7=line7,
        line8a=line8a, line9=line9, line10=line10,
        line11=line11, line12=line12, line14=line14,
        line16=line16, line17=line17,
    )
