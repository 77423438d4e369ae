"""
Child and Dependent Care Credit - IRC Section 21, Form 2441

Allowable expenses are limited to $3,000 for one qualifying person
($6,000 for two or more) and to earned income (the lower-earning spouse
on a joint return). The rate starts at 35% and drops one point for each
$2,000 (or fraction) of AGI over $15,000, never below 20%.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.decimal_math import apply_rate, ceil_div
from calculator.results import TracedResult
from calculator.source_documents import DEPENDENT_CARE_EXPENSES_REF, DEPENDENT_CARE_SPOUSE_EARNED_REF
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class DependentCareCreditResult(TracedResult):
    qualifying_persons: int
    expense_limit: int
    credit_rate: float
    allowable_expenses: TracedValue
    tentative_credit: TracedValue
    credit: TracedValue  # limited to remaining tax


def count_qualifying_persons(tax_return: "TaxReturn", config: "TaxYearConfig") -> int:
    """Entered count, or dependents under 13 at year end when none was entered."""
    care = tax_return.dependent_care
    if care is not None and care.num_qualifying_persons is not None:
        return care.num_qualifying_persons
    count = 0
    for dep in tax_return.dependents:
        age = dep.age_at_year_end(tax_return.tax_year)
        if age is not None and 0 <= age < config.dcc_child_age_limit:
            count += 1
    return count


def credit_rate(agi: int, config: "TaxYearConfig") -> float:
    steps = ceil_div(agi - config.dcc_rate_step_agi_floor, config.dcc_rate_step)
    return max(config.dcc_min_rate, round(config.dcc_max_rate - steps * config.dcc_rate_step_reduction, 4))


def compute_dependent_care_credit(
    tax_return: "TaxReturn",
    agi: TracedValue,
    earned_income: TracedValue,
    tax_limit: TracedValue,
    config: "TaxYearConfig",
) -> Optional[DependentCareCreditResult]:
    """
    Compute Form 2441.

    Args:
        tax_return: Return holding the care expenses and dependents
        agi: Form 1040 line 11
        earned_income: Wages plus net self-employment earnings for the return
        tax_limit: Tax still available after the credits applied before this one
        config: Tax year constants

    Returns:
        DependentCareCreditResult, or None without dependent care expenses
    """
    care = tax_return.dependent_care
    if care is None:
        return None

    persons = count_qualifying_persons(tax_return, config)
    if persons == 0:
        limit = 0
    elif persons == 1:
        limit = config.dcc_expense_limit_one
    else:
        limit = config.dcc_expense_limit_two_or_more

    earned_limit = earned_income.amount
    allowable_inputs = [DEPENDENT_CARE_EXPENSES_REF, earned_income.node_id]
    if tax_return.filing_status == FilingStatus.MARRIED_JOINT and care.spouse_earned_income is not None:
        own = max(0, earned_income.amount - care.spouse_earned_income)
        earned_limit = min(own, care.spouse_earned_income)
        allowable_inputs.append(DEPENDENT_CARE_SPOUSE_EARNED_REF)

    allowable = traced_from_computation(
        max(0, min(care.total_expenses, limit, earned_limit)),
        "form2441.allowableExpenses",
        allowable_inputs,
        f"min(expenses, ${limit // 100:,} limit for {persons} persons, earned income)",
    )

    rate = credit_rate(agi.amount, config)
    tentative = traced_from_computation(
        apply_rate(allowable.amount, rate),
        "form2441.tentativeCredit",
        ["form2441.allowableExpenses", agi.node_id],
        f"allowable expenses x {rate:.0%}",
    )
    credit = traced_from_computation(
        min(tentative.amount, max(0, tax_limit.amount)),
        "credits.dependentCare",
        ["form2441.tentativeCredit", tax_limit.node_id],
        "min(tentative credit, remaining tax)",
    )
    return DependentCareCreditResult(
        qualifying_persons=persons,
        expense_limit=limit,
        credit_rate=rate,
        allowable_expenses=allowable,
        tentative_credit=tentative,
        credit=credit,
    )
