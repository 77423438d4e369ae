"""
Schedule C - Profit or Loss From Business (Sole Proprietorship)

Input model for one sole-proprietor business. The engine computes the
Schedule C lines from these entries; see ``calculator.schedules.schedule_c``.

Reference: IRS Instructions for Schedule C (Form 1040)
"""

from typing import Optional

from pydantic import BaseModel, Field


class ScheduleCBusiness(BaseModel):
    """One business reported on its own Schedule C."""
    id: str
    business_name: str
    principal_business_code: Optional[str] = None
    business_state: Optional[str] = Field(default=None, description="State where the business operates")

    # Part I - Income
    gross_receipts: int = Field(default=0, ge=0, description="Line 1")
    returns_and_allowances: int = Field(default=0, ge=0, description="Line 2")
    cost_of_goods_sold: int = Field(default=0, ge=0, description="Line 4, entered directly")
    other_income: int = Field(default=0, ge=0, description="Line 6")

    # Part II - Expenses
    advertising: int = Field(default=0, ge=0, description="Line 8")
    car_and_truck: int = Field(default=0, ge=0, description="Line 9")
    contract_labor: int = Field(default=0, ge=0, description="Line 11")
    insurance: int = Field(default=0, ge=0, description="Line 15")
    legal_and_professional: int = Field(default=0, ge=0, description="Line 17")
    office_expense: int = Field(default=0, ge=0, description="Line 18")
    rent_or_lease: int = Field(default=0, ge=0, description="Line 20")
    supplies: int = Field(default=0, ge=0, description="Line 22")
    taxes_and_licenses: int = Field(default=0, ge=0, description="Line 23")
    travel: int = Field(default=0, ge=0, description="Line 24a")
    meals: int = Field(default=0, ge=0, description="Line 24b, before the 50% limit")
    utilities: int = Field(default=0, ge=0, description="Line 25")
    other_expenses: int = Field(default=0, ge=0, description="Line 27a")

    home_office_deduction: int = Field(default=0, ge=0, description="Line 30, from Form 8829 or simplified method")

    # Parts III and IV are not modeled; these flags surface findings
    has_inventory: bool = Field(default=False, description="Part III inventory accounting applies")
    has_vehicle: bool = Field(default=False, description="Part IV vehicle information applies")
