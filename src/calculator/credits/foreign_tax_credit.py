"""
Foreign Tax Credit - Form 1116 (passive category, simplified)

Foreign taxes withheld on portfolio income (1099-DIV box 7, 1099-INT
box 6) are credited against U.S. tax, limited by IRC Section 904:

    limitation = US tax x min(foreign-source income, taxable income) / taxable income

The limitation is 0 when taxable income or U.S. tax is 0. Any excess
foreign tax is reported but not carried back or forward. Filers with no
more than $300 ($600 MFJ) of foreign tax qualify for the direct credit
election; the arithmetic is the same either way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from calculator.decimal_math import prorate
from calculator.results import TracedResult
from calculator.source_documents import div_ref, int_ref
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class ForeignTaxCreditResult(TracedResult):
    foreign_tax_paid: TracedValue
    foreign_source_income: TracedValue
    limitation: TracedValue
    allowed: TracedValue  # min(foreign tax paid, limitation)
    credit: TracedValue  # allowed credit limited to remaining tax
    direct_credit_election: bool
    excess_foreign_tax: int
    countries: Tuple[str, ...]


def compute_foreign_tax_credit(
    tax_return: "TaxReturn",
    taxable_income: TracedValue,
    tax_before_credits: TracedValue,
    tax_limit: TracedValue,
    config: "TaxYearConfig",
) -> Optional[ForeignTaxCreditResult]:
    """
    Compute the foreign tax credit.

    Returns None when no 1099 reports foreign tax paid.
    """
    divs = [f for f in tax_return.form_1099_divs if f.box7 > 0]
    ints = [f for f in tax_return.form_1099_ints if f.box6 > 0]
    if not divs and not ints:
        return None

    paid = traced_from_computation(
        sum(f.box7 for f in divs) + sum(f.box6 for f in ints),
        "form1116.foreignTaxPaid",
        [div_ref(f.id, "box7") for f in divs] + [int_ref(f.id, "box6") for f in ints],
        "1099-DIV box 7 + 1099-INT box 6",
    )
    income = traced_from_computation(
        sum(f.box1a for f in divs) + sum(f.box1 for f in ints),
        "form1116.foreignSourceIncome",
        [div_ref(f.id, "box1a") for f in divs] + [int_ref(f.id, "box1") for f in ints],
        "dividends and interest from payers reporting foreign tax",
    )

    if taxable_income.amount > 0 and tax_before_credits.amount > 0:
        limit_amount = prorate(
            tax_before_credits.amount,
            min(income.amount, taxable_income.amount),
            taxable_income.amount,
        )
    else:
        limit_amount = 0
    limitation = traced_from_computation(
        limit_amount,
        "form1116.limitation",
        ["form1116.foreignSourceIncome", taxable_income.node_id, tax_before_credits.node_id],
        "tax x min(foreign-source income, taxable income) / taxable income",
    )
    allowed = traced_from_computation(
        min(paid.amount, limitation.amount),
        "form1116.allowedCredit",
        ["form1116.foreignTaxPaid", "form1116.limitation"],
        "min(foreign tax paid, limitation)",
    )
    credit = traced_from_computation(
        min(allowed.amount, max(0, tax_limit.amount)),
        "credits.foreignTaxCredit",
        ["form1116.allowedCredit", tax_limit.node_id],
        "min(allowed credit, remaining tax)",
    )

    countries = tuple(sorted({f.foreign_country for f in divs + ints if f.foreign_country}))
    return ForeignTaxCreditResult(
        foreign_tax_paid=paid,
        foreign_source_income=income,
        limitation=limitation,
        allowed=allowed,
        credit=credit,
        direct_credit_election=paid.amount <= config.ftc_direct_election_limit[tax_return.filing_status],
        excess_foreign_tax=max(0, paid.amount - credit.amount),
        countries=countries,
    )
