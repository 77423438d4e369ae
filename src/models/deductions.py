from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DeductionMethod(str, Enum):
    STANDARD = "standard"
    ITEMIZED = "itemized"


class ItemizedDeductions(BaseModel):
    """Itemized deduction details (Schedule A), integer cents."""
    medical_expenses: int = Field(default=0, ge=0)
    state_local_income_tax: int = Field(default=0, ge=0)
    state_local_sales_tax: int = Field(default=0, ge=0)
    real_estate_tax: int = Field(default=0, ge=0)
    personal_property_tax: int = Field(default=0, ge=0)
    mortgage_interest: int = Field(default=0, ge=0)

    # Mortgage debt tracking for the acquisition-debt limit (IRS Pub. 936)
    mortgage_principal: int = Field(
        default=0, ge=0,
        description="Outstanding mortgage principal; 0 means unknown and treated as within limits"
    )
    is_grandfathered_debt: bool = Field(
        default=False,
        description="Mortgage originated before Dec 16, 2017 (uses $1M limit)"
    )

    investment_interest: int = Field(default=0, ge=0)
    charitable_cash: int = Field(default=0, ge=0)
    charitable_non_cash: int = Field(default=0, ge=0)
    other_itemized: int = Field(default=0, ge=0)


class Deductions(BaseModel):
    method: DeductionMethod = DeductionMethod.STANDARD
    itemized: Optional[ItemizedDeductions] = Field(
        default=None,
        description="Present only when the taxpayer entered Schedule A detail"
    )
    taxpayer_age_65: bool = False
    spouse_age_65: bool = False


class Adjustments(BaseModel):
    """
    Schedule 1 Part II entries.

    Educator expenses and the HSA deduction are used as entered. The IRA
    contribution and student loan interest are limited and phased out by
    modified AGI before they reach line 10.
    """
    educator_expenses: int = Field(default=0, ge=0)
    hsa_deduction: int = Field(default=0, ge=0)
    traditional_ira_contribution: int = Field(default=0, ge=0, description="Contributions for the year")
    covered_by_workplace_plan: bool = Field(
        default=False, description="Taxpayer is an active participant in an employer plan (W-2 box 13)"
    )
    spouse_covered_by_workplace_plan: bool = False
    student_loan_interest: int = Field(default=0, ge=0, description="Qualified student loan interest paid")


class AMTItems(BaseModel):
    """Form 6251 adjustments and preferences not found elsewhere on the return."""
    iso_spread: int = Field(default=0, ge=0, description="Line 2i, incentive stock option bargain element")
    private_activity_bond_interest: int = Field(default=0, ge=0, description="Line 2g")


class DependentCareExpenses(BaseModel):
    """Form 2441 inputs."""
    total_expenses: int = Field(default=0, ge=0)
    num_qualifying_persons: Optional[int] = Field(
        default=None, ge=0,
        description="When omitted, dependents under 13 at year end are counted"
    )
    spouse_earned_income: Optional[int] = Field(
        default=None, ge=0,
        description="Spouse earned income for the MFJ earned income limit"
    )


class EstimatedTaxPayments(BaseModel):
    q1: int = Field(default=0, ge=0)
    q2: int = Field(default=0, ge=0)
    q3: int = Field(default=0, ge=0)
    q4: int = Field(default=0, ge=0)


class PriorYearCarryforwards(BaseModel):
    capital_loss_carryforward_st: int = Field(default=0, ge=0)
    capital_loss_carryforward_lt: int = Field(default=0, ge=0)
