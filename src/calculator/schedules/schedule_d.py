"""
Schedule D (Form 1040) - Capital Gains and Losses

Part I totals short-term sales, Part II long-term sales and capital gain
distributions, and Part III nets them. Gains and losses passed through on
Schedule K-1 go on lines 5 and 12. A net loss is limited to $3,000
($1,500 married filing separately); the remainder carries forward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.results import TracedResult
from calculator.source_documents import LT_CARRYOVER_REF, ST_CARRYOVER_REF, capital_ref, div_ref, k1_entries
from models.traced import TracedValue, traced_from_computation, traced_zero

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleDResult(TracedResult):
    line1b: TracedValue  # short-term sales
    line5: TracedValue  # short-term gain or loss from K-1s
    line6: TracedValue  # short-term carryover, negative
    line7: TracedValue  # net short-term gain or loss
    line8b: TracedValue  # long-term sales
    line12: TracedValue  # long-term gain or loss from K-1s
    line13: TracedValue  # capital gain distributions
    line14: TracedValue  # long-term carryover, negative
    line15: TracedValue  # net long-term gain or loss
    line16: TracedValue  # line 7 + line 15
    line21: TracedValue  # amount for Form 1040 line 7
    capital_loss_carryforward: int  # unused loss carried to next year, positive


def needs_schedule_d(tax_return: "TaxReturn") -> bool:
    prior = tax_return.prior_year
    return bool(
        tax_return.capital_transactions
        or any(f.box2a > 0 for f in tax_return.form_1099_divs)
        or any(k1.short_term_capital_gain or k1.long_term_capital_gain for k1 in tax_return.schedule_k1s)
        or (prior is not None and (prior.capital_loss_carryforward_st > 0 or prior.capital_loss_carryforward_lt > 0))
    )


def _carryover(amount: int, node_id: str, ref: str, present: bool) -> TracedValue:
    if not present or amount <= 0:
        return traced_zero(node_id, "no carryover")
    return traced_from_computation(-amount, node_id, [ref], "prior-year loss carryover")


def compute_schedule_d(tax_return: "TaxReturn", config: "TaxYearConfig") -> Optional[ScheduleDResult]:
    if not needs_schedule_d(tax_return):
        return None

    short_term = [t for t in tax_return.capital_transactions if not t.long_term]
    long_term = [t for t in tax_return.capital_transactions if t.long_term]
    prior = tax_return.prior_year

    # Part I - Short-term
    line1b = traced_from_computation(
        sum(t.gain_loss for t in short_term),
        "scheduleD.line1b",
        [capital_ref(t.id) for t in short_term],
        "short-term sales, proceeds - basis + adjustment",
    )
    st_k1 = k1_entries(tax_return, "shortTermCapitalGain")
    line5 = traced_from_computation(
        sum(amount for amount, _ in st_k1),
        "scheduleD.line5",
        [ref for _, ref in st_k1],
        "K-1 net short-term gain or loss",
    )
    line6 = _carryover(
        prior.capital_loss_carryforward_st if prior else 0, "scheduleD.line6", ST_CARRYOVER_REF, prior is not None
    )
    line7 = traced_from_computation(
        line1b.amount + line5.amount + line6.amount,
        "scheduleD.line7",
        ["scheduleD.line1b", "scheduleD.line5", "scheduleD.line6"],
        "line 1b + line 5 + line 6",
    )

    # Part II - Long-term
    line8b = traced_from_computation(
        sum(t.gain_loss for t in long_term),
        "scheduleD.line8b",
        [capital_ref(t.id) for t in long_term],
        "long-term sales, proceeds - basis + adjustment",
    )
    lt_k1 = k1_entries(tax_return, "longTermCapitalGain")
    line12 = traced_from_computation(
        sum(amount for amount, _ in lt_k1),
        "scheduleD.line12",
        [ref for _, ref in lt_k1],
        "K-1 net long-term gain or loss",
    )
    distributions = [f for f in tax_return.form_1099_divs if f.box2a > 0]
    line13 = traced_from_computation(
        sum(f.box2a for f in distributions),
        "scheduleD.line13",
        [div_ref(f.id, "box2a") for f in distributions],
        "sum of 1099-DIV box 2a",
    )
    line14 = _carryover(
        prior.capital_loss_carryforward_lt if prior else 0, "scheduleD.line14", LT_CARRYOVER_REF, prior is not None
    )
    line15 = traced_from_computation(
        line8b.amount + line12.amount + line13.amount + line14.amount,
        "scheduleD.line15",
        ["scheduleD.line8b", "scheduleD.line12", "scheduleD.line13", "scheduleD.line14"],
        "line 8b + line 12 + line 13 + line 14",
    )

    # Part III - Summary
    line16 = traced_from_computation(
        line7.amount + line15.amount, "scheduleD.line16", ["scheduleD.line7", "scheduleD.line15"], "line 7 + line 15"
    )
    loss_limit = config.capital_loss_limit[tax_return.filing_status]
    if line16.amount >= 0:
        line21_amount = line16.amount
        carryforward = 0
    else:
        line21_amount = max(line16.amount, -loss_limit)
        carryforward = line21_amount - line16.amount
        logger.debug(f"Capital loss limited to {-line21_amount} cents, {carryforward} cents carried forward")
    line21 = traced_from_computation(
        line21_amount, "scheduleD.line21", ["scheduleD.line16"], "line 16, loss limited to the annual cap"
    )

    return ScheduleDResult(
        line1b=line1b, line5=line5, line6=line6, line7=line7,
        line8b=line8b, line12=line12, line13=line13, line14=line14, line15=line15,
        line16=line16, line21=line21,
        capital_loss_carryforward=carryforward,
    )
