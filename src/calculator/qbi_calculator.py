"""
QBI (Qualified Business Income) Deduction - Section 199A, Form 8995

Simplified computation for taxpayers at or below the taxable income
threshold:

    deduction = min(20% x QBI, 20% x (taxable income before QBI - net capital gain))

Above the threshold the W-2 wage / UBIA limits and the SSTB rules of
Form 8995-A apply. Those are not modeled: the deduction is $0 and the
validation engine reports QBI_ABOVE_THRESHOLD.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.brackets import net_cap_gain_for_qdcg
from calculator.decimal_math import apply_rate
from calculator.results import TracedResult
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.schedules.schedule_d import ScheduleDResult
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QBIDeductionResult(TracedResult):
    """Form 8995 lines, all in cents."""

    above_threshold: bool
    qualified_business_income: TracedValue
    qbi_component: TracedValue  # 20% of QBI
    taxable_income_before_qbi: TracedValue
    net_capital_gain: TracedValue
    income_limitation: TracedValue  # 20% of (taxable income - net capital gain)
    deduction: TracedValue  # Form 1040 line 13


def compute_qbi_deduction(
    tax_return: "TaxReturn",
    qbi: TracedValue,
    agi: TracedValue,
    deduction: TracedValue,
    qualified_dividends: TracedValue,
    schedule_d: Optional["ScheduleDResult"],
    config: "TaxYearConfig",
) -> Optional[QBIDeductionResult]:
    """
    Calculate the QBI deduction per Section 199A.

    Args:
        tax_return: The tax return (filing status for the threshold)
        qbi: Qualified business income, Schedule C net profit plus K-1
            Section 199A income (``form8995.qbi``)
        agi: Form 1040 line 11
        deduction: Form 1040 line 12
        qualified_dividends: Form 1040 line 3a
        schedule_d: Schedule D, for the net capital gain, when filed
        config: Tax year configuration with the rate and thresholds

    Returns:
        QBIDeductionResult, or None when the return has no business income
    """
    if not tax_return.schedule_c_businesses and not any(k1.section_199a_qbi for k1 in tax_return.schedule_k1s):
        return None

    # Step 1: 20% of QBI (a net loss gives no deduction)
    qbi_component = traced_from_computation(
        apply_rate(max(0, qbi.amount), config.qbi_rate),
        "form8995.qbiComponent",
        [qbi.node_id],
        f"{config.qbi_rate:.0%} x qualified business income",
    )

    # Step 2: taxable income limitation
    ti_before = traced_from_computation(
        max(0, agi.amount - deduction.amount),
        "form8995.taxableIncomeBeforeQBI",
        [agi.node_id, deduction.node_id],
        "max(0, AGI - deduction)",
    )
    if schedule_d is not None:
        ncg_amount = qualified_dividends.amount + net_cap_gain_for_qdcg(
            schedule_d.line15.amount, schedule_d.line16.amount
        )
        ncg_inputs = [qualified_dividends.node_id, schedule_d.line15.node_id, schedule_d.line16.node_id]
    else:
        ncg_amount = qualified_dividends.amount
        ncg_inputs = [qualified_dividends.node_id]
    net_capital_gain = traced_from_computation(
        ncg_amount, "form8995.netCapitalGain", ncg_inputs, "qualified dividends + net capital gain"
    )
    income_limitation = traced_from_computation(
        apply_rate(max(0, ti_before.amount - net_capital_gain.amount), config.qbi_rate),
        "form8995.incomeLimitation",
        ["form8995.taxableIncomeBeforeQBI", "form8995.netCapitalGain"],
        f"{config.qbi_rate:.0%} x (taxable income before QBI - net capital gain)",
    )

    # Step 3: threshold test
    threshold = config.qbi_threshold[tax_return.filing_status]
    above = ti_before.amount > threshold
    if above:
        logger.debug("Taxable income above QBI threshold; Form 8995-A limits not modeled")
        result = traced_from_computation(
            0,
            "form8995.deduction",
            ["form8995.taxableIncomeBeforeQBI"],
            "taxable income above threshold, Form 8995-A not modeled",
        )
    else:
        result = traced_from_computation(
            min(qbi_component.amount, income_limitation.amount),
            "form8995.deduction",
            ["form8995.qbiComponent", "form8995.incomeLimitation"],
            "min(QBI component, income limitation)",
        )

    return QBIDeductionResult(
        above_threshold=above,
        qualified_business_income=qbi,
        qbi_component=qbi_component,
        taxable_income_before_qbi=ti_before,
        net_capital_gain=net_capital_gain,
        income_limitation=income_limitation,
        deduction=result,
    )
