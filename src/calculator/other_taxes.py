"""
Other taxes reported on Schedule 2, Part II.

Form 8959 - Additional Medicare Tax, IRC Section 3101(b)(2)
    0.9% on Medicare wages over the filing-status threshold, plus 0.9% on
    net self-employment earnings over whatever part of the threshold the
    wages did not use. Medicare tax withheld beyond the regular 1.45% is
    credited back as withholding.

Form 8960 - Net Investment Income Tax, IRC Section 1411
    3.8% on the lesser of net investment income or MAGI over the threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.decimal_math import apply_rate
from calculator.results import TracedResult
from calculator.source_documents import w2_ref
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class AdditionalMedicareTaxResult(TracedResult):
    medicare_wages: TracedValue
    wage_tax: TracedValue
    self_employment_tax: TracedValue
    additional_tax: TracedValue  # to Schedule 2 / line 23
    withholding_credit: TracedValue  # to line 25


@dataclass(frozen=True)
class NIITResult(TracedResult):
    net_investment_income: TracedValue
    magi_excess: TracedValue
    niit: TracedValue  # to Schedule 2 / line 23


def compute_additional_medicare_tax(
    tax_return: "TaxReturn",
    net_se_earnings: Optional[TracedValue],
    config: "TaxYearConfig",
) -> AdditionalMedicareTaxResult:
    threshold = config.additional_medicare_threshold[tax_return.filing_status]
    rate = config.additional_medicare_rate

    wages = traced_from_computation(
        sum(w.box5 for w in tax_return.w2s),
        "form8959.medicareWages",
        [w2_ref(w.id, "box5") for w in tax_return.w2s],
        "sum of W-2 box 5",
    )
    wage_tax = traced_from_computation(
        apply_rate(max(0, wages.amount - threshold), rate),
        "form8959.wageTax",
        ["form8959.medicareWages"],
        f"{rate:.1%} x Medicare wages over ${threshold // 100:,}",
    )

    if net_se_earnings is not None and net_se_earnings.amount > 0:
        # Wages use up the threshold first
        remaining_threshold = max(0, threshold - wages.amount)
        se_tax = traced_from_computation(
            apply_rate(max(0, net_se_earnings.amount - remaining_threshold), rate),
            "form8959.selfEmploymentTax",
            [net_se_earnings.node_id, "form8959.medicareWages"],
            f"{rate:.1%} x SE earnings over (threshold - Medicare wages)",
        )
    else:
        se_tax = traced_from_computation(0, "form8959.selfEmploymentTax", [], "no self-employment earnings")

    total = traced_from_computation(
        wage_tax.amount + se_tax.amount,
        "form8959.additionalMedicareTax",
        ["form8959.wageTax", "form8959.selfEmploymentTax"],
        "wage part + self-employment part",
    )

    regular = apply_rate(wages.amount, config.employee_medicare_rate)
    withheld = sum(w.box6 for w in tax_return.w2s)
    credit = traced_from_computation(
        max(0, withheld - regular),
        "form8959.withholdingCredit",
        [w2_ref(w.id, "box6") for w in tax_return.w2s] + ["form8959.medicareWages"],
        f"Medicare tax withheld - {config.employee_medicare_rate:.2%} of Medicare wages",
    )
    return AdditionalMedicareTaxResult(
        medicare_wages=wages,
        wage_tax=wage_tax,
        self_employment_tax=se_tax,
        additional_tax=total,
        withholding_credit=credit,
    )


def compute_niit(
    tax_return: "TaxReturn",
    agi: TracedValue,
    taxable_interest: TracedValue,
    ordinary_dividends: TracedValue,
    capital_gain: TracedValue,
    config: "TaxYearConfig",
    rental_income: Optional[TracedValue] = None,
) -> NIITResult:
    """
    Compute the net investment income tax.

    Net investment income is taxable interest plus ordinary dividends
    plus capital gain and allowed passive rental income, each when
    positive. MAGI equals AGI here.
    """
    parts = [taxable_interest, ordinary_dividends]
    positive_parts = [capital_gain] + ([rental_income] if rental_income is not None else [])
    nii = traced_from_computation(
        sum(p.amount for p in parts) + sum(max(0, p.amount) for p in positive_parts),
        "form8960.netInvestmentIncome",
        [p.node_id for p in parts + positive_parts],
        "taxable interest + ordinary dividends + positive capital gain and rental income",
    )
    threshold = config.niit_threshold[tax_return.filing_status]
    excess = traced_from_computation(
        max(0, agi.amount - threshold),
        "form8960.magiExcess",
        [agi.node_id],
        f"MAGI over ${threshold // 100:,}",
    )
    niit = traced_from_computation(
        apply_rate(min(nii.amount, excess.amount), config.niit_rate),
        "form8960.niit",
        ["form8960.netInvestmentIncome", "form8960.magiExcess"],
        f"{config.niit_rate:.1%} x min(net investment income, MAGI excess)",
    )
    return NIITResult(net_investment_income=nii, magi_excess=excess, niit=niit)
