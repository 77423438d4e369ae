"""
Alternative Minimum Tax - Form 6251, IRC Sections 55-59

    AMTI = taxable income + taxes (or standard deduction) added back
           + private activity bond interest + ISO bargain element
    exemption = base - 25% x (AMTI - phase-out threshold)
    TMT = 26% / 28% of (AMTI - exemption), with qualified dividends and
          net capital gain kept at their preferential rates (Part III)
    AMT = max(0, TMT - regular tax)

Depreciation, passive activity and other adjustments are not modeled.
The AMT foreign tax credit is not modeled; TMT is not reduced by it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from calculator.brackets import Bracket, BracketSchedule, compute_qdcg_tax
from calculator.decimal_math import apply_rate, format_dollars
from calculator.results import TracedResult
from calculator.source_documents import amt_item_ref
from models.deductions import DeductionMethod
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.schedules.schedule_a import ScheduleAResult
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AMTResult(TracedResult):
    line1: TracedValue  # taxable income before the zero floor
    line2a: TracedValue  # taxes or standard deduction added back
    line2g: TracedValue  # private activity bond interest
    line2i: TracedValue  # incentive stock options
    line4: TracedValue  # AMTI
    exemption_reduction: TracedValue
    line5: TracedValue  # exemption
    line6: TracedValue  # AMTI less exemption
    line7: TracedValue  # tentative minimum tax
    line10: TracedValue  # regular tax
    line11: TracedValue  # AMT, to Form 1040 line 17

    @property
    def amt(self) -> int:
        return self.line11.amount


def amt_rate_schedule(filing_status: str, config: "TaxYearConfig") -> BracketSchedule:
    """The 26% / 28% rates for a filing status as a bracket schedule."""
    return (
        Bracket(0, config.amt_low_rate),
        Bracket(config.amt_high_rate_threshold[filing_status], config.amt_high_rate),
    )


def compute_amt(
    tax_return: "TaxReturn",
    agi: TracedValue,
    deduction: TracedValue,
    total_deductions: TracedValue,
    deduction_method: DeductionMethod,
    schedule_a: Optional["ScheduleAResult"],
    qualified_dividends: TracedValue,
    net_capital_gain: int,
    net_capital_gain_inputs: List[str],
    regular_tax: TracedValue,
    config: "TaxYearConfig",
) -> AMTResult:
    """
    Compute Form 6251.

    Args:
        tax_return: Return holding the filing status and AMT items
        agi: Form 1040 line 11
        deduction: Form 1040 line 12
        total_deductions: Form 1040 line 14
        deduction_method: Deduction actually taken on line 12
        schedule_a: Schedule A, for the taxes on line 7 when itemizing
        qualified_dividends: Form 1040 line 3a
        net_capital_gain: Smaller of Schedule D lines 15 and 16, or 0
        net_capital_gain_inputs: Schedule D node ids behind ``net_capital_gain``
        regular_tax: Form 1040 line 16
        config: Tax year constants

    Returns:
        AMTResult; line 11 is zero when regular tax is at least the TMT
    """
    fs = tax_return.filing_status

    # Part I - AMTI
    line1 = traced_from_computation(
        agi.amount - total_deductions.amount,
        "form6251.line1",
        [agi.node_id, total_deductions.node_id],
        "Form 1040 line 11 - line 14",
    )
    if deduction_method == DeductionMethod.ITEMIZED and schedule_a is not None:
        line2a = traced_from_computation(
            schedule_a.line7.amount, "form6251.line2a", [schedule_a.line7.node_id], "Schedule A, line 7 taxes"
        )
    else:
        line2a = traced_from_computation(
            deduction.amount, "form6251.line2a", [deduction.node_id], "standard deduction, Form 1040 line 12"
        )
    items = tax_return.amt_items
    line2g = traced_from_computation(
        items.private_activity_bond_interest,
        "form6251.line2g",
        [amt_item_ref("privateActivityBondInterest")],
        "private activity bond interest",
    )
    line2i = traced_from_computation(
        items.iso_spread, "form6251.line2i", [amt_item_ref("isoSpread")], "incentive stock option bargain element"
    )
    line4 = traced_from_computation(
        line1.amount + line2a.amount + line2g.amount + line2i.amount,
        "form6251.line4",
        ["form6251.line1", "form6251.line2a", "form6251.line2g", "form6251.line2i"],
        "line 1 + line 2a + line 2g + line 2i",
    )

    # Part II - exemption and tentative minimum tax
    threshold = config.amt_phaseout_threshold[fs]
    exemption_reduction = traced_from_computation(
        apply_rate(max(0, line4.amount - threshold), config.amt_phaseout_rate),
        "form6251.exemptionReduction",
        ["form6251.line4"],
        f"{config.amt_phaseout_rate:.0%} x (AMTI - {format_dollars(threshold)})",
    )
    exemption = config.amt_exemption[fs]
    line5 = traced_from_computation(
        max(0, exemption - exemption_reduction.amount),
        "form6251.line5",
        ["form6251.exemptionReduction"],
        f"max(0, {format_dollars(exemption)} - exemption reduction)",
    )
    line6 = traced_from_computation(
        max(0, line4.amount - line5.amount), "form6251.line6", ["form6251.line4", "form6251.line5"],
        "max(0, line 4 - line 5)",
    )

    # Part III keeps preferential income at capital gain rates
    preferential = qualified_dividends.amount + net_capital_gain
    tmt = compute_qdcg_tax(
        line6.amount,
        qualified_dividends.amount,
        net_capital_gain,
        amt_rate_schedule(fs, config),
        config.ltcg_brackets[fs],
    )
    if preferential > 0:
        line7 = traced_from_computation(
            tmt,
            "form6251.line7",
            ["form6251.line6", qualified_dividends.node_id] + list(net_capital_gain_inputs),
            "Part III: 26% / 28% on ordinary AMTI + capital gain rates on preferential income",
        )
    else:
        line7 = traced_from_computation(
            tmt,
            "form6251.line7",
            ["form6251.line6"],
            f"{config.amt_low_rate:.0%} up to {format_dollars(config.amt_high_rate_threshold[fs])}, "
            f"{config.amt_high_rate:.0%} above",
        )

    line10 = traced_from_computation(
        regular_tax.amount, "form6251.line10", [regular_tax.node_id], "regular tax, Form 1040 line 16"
    )
    line11 = traced_from_computation(
        max(0, line7.amount - line10.amount), "form6251.line11", ["form6251.line7", "form6251.line10"],
        "max(0, line 7 - line 10)",
    )
    if line11.amount > 0:
        logger.debug(f"AMT of {line11.amount} cents applies")

    return AMTResult(
        line1=line1,
        line2a=line2a,
        line2g=line2g,
        line2i=line2i,
        line4=line4,
        exemption_reduction=exemption_reduction,
        line5=line5,
        line6=line6,
        line7=line7,
        line10=line10,
        line11=line11,
    )
