"""
Earned Income Credit - IRC Section 32

Refundable credit for low and moderate income workers. The credit is a
piecewise function of income selected by the number of qualifying
children (0, 1, 2, 3 or more):

    phase-in   income <= plateau start        round(income x phase-in rate)
    plateau    up to the phase-out start      max credit
    phase-out  above the phase-out start      max(0, max credit - round(excess x phase-out rate))

It is evaluated at both earned income and AGI with the same schedule and
the smaller amount is allowed.

Eligibility gates, checked in this order:
    1. Married filing separately
    2. Investment income above the annual limit
    3. No qualifying children and no filer aged 25-64 (when the age is known)
    4. No earned income
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.decimal_math import apply_rate
from calculator.results import TracedResult
from models.taxpayer import QUALIFYING_CHILD_RELATIONSHIPS, FilingStatus, has_valid_ssn
from models.traced import TracedValue, traced_from_computation, traced_zero

if TYPE_CHECKING:
    from calculator.tax_year_config import EITCSchedule, TaxYearConfig
    from models.tax_return import TaxReturn
    from models.taxpayer import Dependent


INELIGIBLE_MFS = "mfs"
INELIGIBLE_INVESTMENT_INCOME = "investment_income"
INELIGIBLE_AGE = "age"
INELIGIBLE_NO_EARNED_INCOME = "no_earned_income"


@dataclass(frozen=True)
class EarnedIncomeCreditResult(TracedResult):
    qualifying_children: int
    eligible: bool
    ineligible_reason: Optional[str]
    investment_income: TracedValue
    credit_at_earned_income: TracedValue
    credit_at_agi: TracedValue
    credit: TracedValue  # Form 1040 line 27


def is_qualifying_child(dependent: "Dependent", tax_year: int, config: "TaxYearConfig") -> bool:
    """
    Qualifying child test for the EIC.

    Requires a valid 9-digit SSN, an eligible relationship, more than six
    months in the home, and age under 19 at year end (under 24 for a
    full-time student, any age if permanently disabled).
    """
    if not has_valid_ssn(dependent.ssn):
        return False
    if dependent.relationship not in QUALIFYING_CHILD_RELATIONSHIPS:
        return False
    if dependent.months_lived_with_taxpayer < config.eitc_min_months_residency:
        return False
    age = dependent.age_at_year_end(tax_year)
    if age is None or age < 0:
        return False
    if dependent.is_permanently_disabled:
        return True
    limit = config.eitc_student_age_limit if dependent.is_student else config.eitc_child_age_limit
    return age < limit


def credit_at_income(income: int, schedule: "EITCSchedule", phaseout_start: int) -> int:
    """Evaluate one EIC schedule at ``income``."""
    if income <= 0:
        return 0
    if income <= schedule.plateau_start:
        return min(schedule.max_credit, apply_rate(income, schedule.phase_in_rate))
    if income <= phaseout_start:
        return schedule.max_credit
    reduction = apply_rate(income - phaseout_start, schedule.phaseout_rate)
    return max(0, schedule.max_credit - reduction)


def _filer_ages(tax_return: "TaxReturn"):
    ages = [tax_return.taxpayer.age_at_year_end(tax_return.tax_year)]
    if tax_return.filing_status == FilingStatus.MARRIED_JOINT and tax_return.spouse is not None:
        ages.append(tax_return.spouse.age_at_year_end(tax_return.tax_year))
    return [a for a in ages if a is not None]


def compute_earned_income_credit(
    tax_return: "TaxReturn",
    earned_income: TracedValue,
    agi: TracedValue,
    investment_income: TracedValue,
    config: "TaxYearConfig",
) -> EarnedIncomeCreditResult:
    """
    Compute the earned income credit.

    Args:
        tax_return: Return holding filing status, filers and dependents
        earned_income: Wages plus net self-employment earnings
        agi: Form 1040 line 11
        investment_income: Tax-exempt and taxable interest, ordinary dividends, positive capital gain
        config: Tax year constants
    """
    children = sum(1 for d in tax_return.dependents if is_qualifying_child(d, tax_return.tax_year, config))

    def ineligible(reason: str) -> EarnedIncomeCreditResult:
        return EarnedIncomeCreditResult(
            qualifying_children=children,
            eligible=False,
            ineligible_reason=reason,
            investment_income=investment_income,
            credit_at_earned_income=traced_zero("eitc.creditAtEarnedIncome", f"ineligible ({reason})"),
            credit_at_agi=traced_zero("eitc.creditAtAGI", f"ineligible ({reason})"),
            credit=traced_zero("eitc.credit", f"ineligible ({reason})"),
        )

    if tax_return.filing_status == FilingStatus.MARRIED_SEPARATE:
        return ineligible(INELIGIBLE_MFS)
    if investment_income.amount > config.eitc_investment_income_limit:
        return ineligible(INELIGIBLE_INVESTMENT_INCOME)
    if children == 0:
        ages = _filer_ages(tax_return)
        if ages and not any(config.eitc_min_age <= a <= config.eitc_max_age for a in ages):
            return ineligible(INELIGIBLE_AGE)
    if earned_income.amount <= 0:
        return ineligible(INELIGIBLE_NO_EARNED_INCOME)

    schedule = config.eitc_schedule(children)
    if tax_return.filing_status == FilingStatus.MARRIED_JOINT:
        phaseout_start = schedule.phaseout_start_mfj
    else:
        phaseout_start = schedule.phaseout_start_single

    label = f"EIC schedule for {min(children, 3)} qualifying children"
    at_earned = traced_from_computation(
        credit_at_income(earned_income.amount, schedule, phaseout_start),
        "eitc.creditAtEarnedIncome",
        [earned_income.node_id],
        f"{label} at earned income",
    )
    at_agi = traced_from_computation(
        credit_at_income(agi.amount, schedule, phaseout_start),
        "eitc.creditAtAGI",
        [agi.node_id],
        f"{label} at AGI",
    )
    credit = traced_from_computation(
        min(at_earned.amount, at_agi.amount),
        "eitc.credit",
        ["eitc.creditAtEarnedIncome", "eitc.creditAtAGI"],
        "smaller of the credit at earned income and at AGI",
    )
    return EarnedIncomeCreditResult(
        qualifying_children=children,
        eligible=True,
        ineligible_reason=None,
        investment_income=investment_income,
        credit_at_earned_income=at_earned,
        credit_at_agi=at_agi,
        credit=credit,
    )
