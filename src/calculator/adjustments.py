"""
Schedule 1, Part II - Adjustments to Income

Educator expenses and the HSA deduction are used as entered; half of
self-employment tax comes from Schedule SE.

Traditional IRA (IRC Section 219):
    The deductible amount is the contribution, at most the annual limit
    (plus the catch-up at age 50) and at most earned income. When the
    taxpayer is covered by a workplace plan, or the spouse is, the
    deduction phases out over a modified AGI range for the filing status.
    The remaining limit is rounded up to the next $10 and, when not zero,
    is at least $200.

Student loan interest (IRC Section 221):
    At most $2,500, phased out over a modified AGI range. Married filing
    separately may not take the deduction.

Modified AGI for the IRA is total income less the other adjustments;
for student loan interest it is also reduced by the IRA deduction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from calculator.decimal_math import cents, format_dollars, prorate, round_up_to
from calculator.results import TracedResult
from calculator.source_documents import adjustment_ref
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation, traced_zero

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)

IRA_MINIMUM_PARTIAL_DEDUCTION = cents(200)


@dataclass(frozen=True)
class AdjustmentsResult(TracedResult):
    line11: TracedValue  # educator expenses
    line13: TracedValue  # HSA deduction
    line15: TracedValue  # deductible part of self-employment tax
    ira_magi: TracedValue
    ira_limit: TracedValue  # contribution allowed before the phase-out
    line20: TracedValue  # IRA deduction
    student_loan_magi: TracedValue
    line21: TracedValue  # student loan interest deduction
    line26: TracedValue  # total adjustments, to Form 1040 line 10


def ira_phaseout_range(tax_return: "TaxReturn", config: "TaxYearConfig") -> Optional[Tuple[int, int]]:
    """
    Modified AGI range over which the IRA deduction phases out.

    None when neither spouse is covered by a workplace plan.
    """
    fs = tax_return.filing_status
    adjustments = tax_return.adjustments
    if adjustments.covered_by_workplace_plan:
        return config.ira_phaseout_covered_start[fs], config.ira_phaseout_covered_end[fs]
    if adjustments.spouse_covered_by_workplace_plan:
        if fs == FilingStatus.MARRIED_JOINT:
            return config.ira_phaseout_spouse_covered_start, config.ira_phaseout_spouse_covered_end
        if fs == FilingStatus.MARRIED_SEPARATE:
            return config.ira_phaseout_covered_start[fs], config.ira_phaseout_covered_end[fs]
    return None


def compute_ira_deduction(
    tax_return: "TaxReturn",
    ira_limit: TracedValue,
    magi: TracedValue,
    config: "TaxYearConfig",
) -> TracedValue:
    """
    IRA deduction after the workplace-plan phase-out.

    Examples:
        Single, covered, MAGI $84,000 (2025 range $79,000 - $89,000),
        $7,000 contributed: 7,000 x 5,000 / 10,000 = $3,500.
    """
    inputs = [ira_limit.node_id, magi.node_id]
    limits = ira_phaseout_range(tax_return, config)
    if limits is None or ira_limit.amount == 0:
        return traced_from_computation(ira_limit.amount, "schedule1.line20", inputs, "no workplace plan phase-out")

    start, end = limits
    if magi.amount <= start:
        return traced_from_computation(ira_limit.amount, "schedule1.line20", inputs, "modified AGI below the phase-out")
    if magi.amount >= end:
        logger.debug(f"IRA deduction fully phased out at modified AGI {magi.amount} cents")
        return traced_from_computation(0, "schedule1.line20", inputs, "modified AGI above the phase-out")

    remaining = round_up_to(prorate(ira_limit.amount, end - magi.amount, end - start), config.ira_reduction_step)
    remaining = max(remaining, IRA_MINIMUM_PARTIAL_DEDUCTION)
    return traced_from_computation(
        min(ira_limit.amount, remaining),
        "schedule1.line20",
        inputs,
        f"limit x ({format_dollars(end)} - modified AGI) / {format_dollars(end - start)}, rounded up to $10",
    )


def compute_student_loan_deduction(
    tax_return: "TaxReturn",
    magi: TracedValue,
    config: "TaxYearConfig",
) -> TracedValue:
    fs = tax_return.filing_status
    paid = tax_return.adjustments.student_loan_interest
    ref = adjustment_ref("studentLoanInterest")
    if paid == 0:
        return traced_zero("schedule1.line21", "no student loan interest")
    if fs == FilingStatus.MARRIED_SEPARATE:
        return traced_from_computation(0, "schedule1.line21", [ref], "not allowed when married filing separately")

    allowed = min(paid, config.student_loan_max)
    start = config.student_loan_phaseout_start[fs]
    end = config.student_loan_phaseout_end[fs]
    if magi.amount >= end:
        amount = 0
    elif magi.amount <= start:
        amount = allowed
    else:
        amount = allowed - prorate(allowed, magi.amount - start, end - start)
    return traced_from_computation(
        amount,
        "schedule1.line21",
        [ref, magi.node_id],
        f"min(interest, {format_dollars(config.student_loan_max)}) phased out between "
        f"{format_dollars(start)} and {format_dollars(end)}",
    )


def compute_adjustments(
    tax_return: "TaxReturn",
    total_income: TracedValue,
    earned_income: TracedValue,
    se_deduction: Optional[TracedValue],
    config: "TaxYearConfig",
) -> AdjustmentsResult:
    """
    Compute Schedule 1 Part II.

    Args:
        tax_return: Return holding the adjustment entries
        total_income: Form 1040 line 9
        earned_income: Wages plus net self-employment earnings, the IRA ceiling
        se_deduction: ``scheduleSE.deductibleHalf``, or None without self-employment
        config: Tax year constants
    """
    adjustments = tax_return.adjustments

    line11 = traced_from_computation(
        adjustments.educator_expenses, "schedule1.line11", [adjustment_ref("educatorExpenses")], "educator expenses"
    )
    line13 = traced_from_computation(
        adjustments.hsa_deduction, "schedule1.line13", [adjustment_ref("hsaDeduction")], "HSA deduction"
    )
    if se_deduction is not None:
        line15 = traced_from_computation(
            se_deduction.amount, "schedule1.line15", [se_deduction.node_id], "Schedule SE deductible half"
        )
    else:
        line15 = traced_zero("schedule1.line15", "no self-employment tax")

    ira_magi = traced_from_computation(
        total_income.amount - line11.amount - line13.amount - line15.amount,
        "schedule1.iraModifiedAGI",
        [total_income.node_id, "schedule1.line11", "schedule1.line13", "schedule1.line15"],
        "line 9 - other adjustments",
    )

    # Traditional IRA
    age = tax_return.taxpayer.age_at_year_end(tax_return.tax_year)
    annual_limit = config.ira_contribution_limit
    if age is not None and age >= config.ira_catch_up_age:
        annual_limit += config.ira_catch_up
    ira_limit = traced_from_computation(
        min(adjustments.traditional_ira_contribution, annual_limit, max(0, earned_income.amount)),
        "schedule1.iraLimit",
        [adjustment_ref("traditionalIraContribution"), earned_income.node_id],
        f"min(contribution, {format_dollars(annual_limit)}, earned income)",
    )
    line20 = compute_ira_deduction(tax_return, ira_limit, ira_magi, config)

    # Student loan interest
    student_loan_magi = traced_from_computation(
        ira_magi.amount - line20.amount,
        "schedule1.studentLoanModifiedAGI",
        ["schedule1.iraModifiedAGI", "schedule1.line20"],
        "IRA modified AGI - IRA deduction",
    )
    line21 = compute_student_loan_deduction(tax_return, student_loan_magi, config)

    parts = [line11, line13, line15, line20, line21]
    line26 = traced_from_computation(
        sum(p.amount for p in parts),
        "schedule1.line26",
        [p.node_id for p in parts],
        "line 11 + line 13 + line 15 + line 20 + line 21",
    )
    return AdjustmentsResult(
        line11=line11,
        line13=line13,
        line15=line15,
        ira_magi=ira_magi,
        ira_limit=ira_limit,
        line20=line20,
        student_loan_magi=student_loan_magi,
        line21=line21,
        line26=line26,
    )
