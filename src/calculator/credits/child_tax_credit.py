"""
Child Tax Credit and Additional Child Tax Credit - IRC Section 24, Schedule 8812

$2,000 per qualifying child under 17 and $500 per other dependent,
reduced by $50 for each $1,000 (or fraction) of AGI over the filing
status threshold. The nonrefundable part is limited to tax; the unused
part is refundable as the ACTC up to $1,700 per child and 15% of earned
income over $2,500.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.decimal_math import apply_rate, ceil_div
from calculator.results import TracedResult
from models.taxpayer import QUALIFYING_CHILD_RELATIONSHIPS, has_valid_ssn
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn
    from models.taxpayer import Dependent


@dataclass(frozen=True)
class ChildTaxCreditResult(TracedResult):
    qualifying_children: int
    other_dependents: int
    initial_credit: TracedValue
    phase_out_reduction: TracedValue
    credit_after_phase_out: TracedValue
    non_refundable_credit: TracedValue  # Form 1040 line 19
    additional_ctc: TracedValue  # Form 1040 line 28


def is_ctc_qualifying_child(dependent: "Dependent", tax_year: int, config: "TaxYearConfig") -> bool:
    if not has_valid_ssn(dependent.ssn):
        return False
    if dependent.relationship not in QUALIFYING_CHILD_RELATIONSHIPS:
        return False
    if dependent.months_lived_with_taxpayer < config.eitc_min_months_residency:
        return False
    age = dependent.age_at_year_end(tax_year)
    return age is not None and 0 <= age < config.ctc_child_age_limit


def is_other_dependent(dependent: "Dependent", tax_year: int, config: "TaxYearConfig") -> bool:
    """Dependent with an SSN who is not a CTC qualifying child ($500 credit)."""
    return has_valid_ssn(dependent.ssn) and not is_ctc_qualifying_child(dependent, tax_year, config)


def compute_child_tax_credit(
    tax_return: "TaxReturn",
    agi: TracedValue,
    tax_limit: TracedValue,
    earned_income: TracedValue,
    config: "TaxYearConfig",
) -> Optional[ChildTaxCreditResult]:
    """
    Compute the CTC/ODC and the refundable ACTC.

    Args:
        tax_return: Return holding dependents and filing status
        agi: Form 1040 line 11
        tax_limit: Tax the nonrefundable credit may offset (line 18)
        earned_income: Wages plus net self-employment earnings
        config: Tax year constants

    Returns:
        ChildTaxCreditResult, or None when no dependents are claimed
    """
    if not tax_return.dependents:
        return None

    year = tax_return.tax_year
    children = sum(1 for d in tax_return.dependents if is_ctc_qualifying_child(d, year, config))
    others = sum(1 for d in tax_return.dependents if is_other_dependent(d, year, config))

    initial = traced_from_computation(
        children * config.ctc_per_child + others * config.ctc_other_dependent,
        "ctc.initialCredit",
        [],
        f"{children} qualifying children x per-child amount + {others} other dependents x $500",
    )

    # $50 for each $1,000 or part of $1,000 over the threshold
    excess = max(0, agi.amount - config.ctc_phaseout_threshold[tax_return.filing_status])
    reduction = min(ceil_div(excess, config.ctc_phaseout_step) * config.ctc_phaseout_per_step, initial.amount)
    phase_out = traced_from_computation(
        reduction,
        "ctc.phaseOutReduction",
        [agi.node_id, "ctc.initialCredit"],
        "$50 per $1,000 (or part) of AGI over the threshold",
    )
    after = traced_from_computation(
        max(0, initial.amount - phase_out.amount),
        "ctc.creditAfterPhaseOut",
        ["ctc.initialCredit", "ctc.phaseOutReduction"],
        "initial credit - phase-out reduction",
    )
    non_refundable = traced_from_computation(
        min(after.amount, max(0, tax_limit.amount)),
        "ctc.nonRefundableCredit",
        ["ctc.creditAfterPhaseOut", tax_limit.node_id],
        "min(credit after phase-out, tax)",
    )

    unused = after.amount - non_refundable.amount
    if children > 0 and unused > 0:
        earned_base = apply_rate(max(0, earned_income.amount - config.actc_earned_income_floor), config.actc_rate)
        actc_amount = min(children * config.ctc_refundable_per_child, earned_base, unused)
        additional = traced_from_computation(
            actc_amount,
            "ctc.additionalCTC",
            ["ctc.creditAfterPhaseOut", "ctc.nonRefundableCredit", earned_income.node_id],
            "min(children x refundable cap, 15% of earned income over $2,500, unused credit)",
        )
    else:
        additional = traced_from_computation(
            0,
            "ctc.additionalCTC",
            ["ctc.creditAfterPhaseOut", "ctc.nonRefundableCredit"],
            "no unused credit for qualifying children",
        )

    return ChildTaxCreditResult(
        qualifying_children=children,
        other_dependents=others,
        initial_credit=initial,
        phase_out_reduction=phase_out,
        credit_after_phase_out=after,
        non_refundable_credit=non_refundable,
        additional_ctc=additional,
    )
