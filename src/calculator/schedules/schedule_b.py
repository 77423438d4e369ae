"""
Schedule B (Form 1040) - Interest and Ordinary Dividends

Lists each payer and totals taxable interest (line 4) and ordinary
dividends (line 6), including amounts passed through on Schedule K-1. The
schedule must be filed when either total exceeds $1,500.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple

from calculator.results import TracedResult
from calculator.source_documents import div_ref, int_ref, k1_ref
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class ScheduleBLineItem:
    payer_name: str
    amount: int
    document_id: str


@dataclass(frozen=True)
class ScheduleBResult(TracedResult):
    required: bool
    interest_items: Tuple[ScheduleBLineItem, ...]
    line4: TracedValue  # total interest
    dividend_items: Tuple[ScheduleBLineItem, ...]
    line6: TracedValue  # total ordinary dividends


def _k1_items(tax_return: "TaxReturn", field_name: str, attr: str) -> List[Tuple[ScheduleBLineItem, str]]:
    return [
        (ScheduleBLineItem(k1.entity_name, getattr(k1, attr), k1.id), k1_ref(k1.id, field_name))
        for k1 in tax_return.schedule_k1s
        if getattr(k1, attr) > 0
    ]


def compute_schedule_b(tax_return: "TaxReturn", config: "TaxYearConfig") -> ScheduleBResult:
    k1_interest = _k1_items(tax_return, "interestIncome", "interest_income")
    interest_items = tuple(
        ScheduleBLineItem(f.payer_name, f.box1, f.id) for f in tax_return.form_1099_ints
    ) + tuple(item for item, _ in k1_interest)
    line4 = traced_from_computation(
        sum(item.amount for item in interest_items),
        "scheduleB.line4",
        [int_ref(f.id, "box1") for f in tax_return.form_1099_ints] + [ref for _, ref in k1_interest],
        "sum of 1099-INT box 1 + K-1 interest",
    )

    k1_dividends = _k1_items(tax_return, "ordinaryDividends", "ordinary_dividends")
    dividend_items = tuple(
        ScheduleBLineItem(f.payer_name, f.box1a, f.id) for f in tax_return.form_1099_divs
    ) + tuple(item for item, _ in k1_dividends)
    line6 = traced_from_computation(
        sum(item.amount for item in dividend_items),
        "scheduleB.line6",
        [div_ref(f.id, "box1a") for f in tax_return.form_1099_divs] + [ref for _, ref in k1_dividends],
        "sum of 1099-DIV box 1a + K-1 ordinary dividends",
    )

    required = line4.amount > config.schedule_b_threshold or line6.amount > config.schedule_b_threshold
    return ScheduleBResult(
        required=required,
        interest_items=interest_items,
        line4=line4,
        dividend_items=dividend_items,
        line6=line6,
    )
