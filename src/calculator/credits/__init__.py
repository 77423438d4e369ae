"""Credits: earned income, child tax, dependent care and foreign tax."""

from .child_tax_credit import ChildTaxCreditResult, compute_child_tax_credit, is_ctc_qualifying_child
from .dependent_care_credit import DependentCareCreditResult, compute_dependent_care_credit
from .earned_income_credit import (
    EarnedIncomeCreditResult,
    compute_earned_income_credit,
    credit_at_income,
    is_qualifying_child,
)
from .foreign_tax_credit import ForeignTaxCreditResult, compute_foreign_tax_credit

__all__ = [
    "ChildTaxCreditResult",
    "compute_child_tax_credit",
    "is_ctc_qualifying_child",
    "DependentCareCreditResult",
    "compute_dependent_care_credit",
    "EarnedIncomeCreditResult",
    "compute_earned_income_credit",
    "credit_at_income",
    "is_qualifying_child",
    "ForeignTaxCreditResult",
    "compute_foreign_tax_credit",
]
