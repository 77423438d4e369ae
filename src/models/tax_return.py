from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from config.settings import get_settings

from .deductions import (
    Adjustments,
    AMTItems,
    Deductions,
    DependentCareExpenses,
    EstimatedTaxPayments,
    PriorYearCarryforwards,
)
from .documents import CapitalTransaction, Form1099DIV, Form1099INT, FormSSA1099, W2
from .schedule_c import ScheduleCBusiness
from .schedule_e import RentalProperty, ScheduleK1
from .state_return import StateReturnConfig
from .taxpayer import Dependent, FilingStatus, Person


def _default_tax_year() -> int:
    return get_settings().default_tax_year


class TaxReturn(BaseModel):
    """
    Complete raw input for one return.

    The caller owns this object. The engine reads it and never writes
    back; each edit by the caller is followed by a fresh computation.

    Keys the engine does not know (a 1099-R list, say) are kept in
    ``model_extra`` so validation can report them instead of silently
    dropping the income they carry.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    tax_year: int = Field(default_factory=_default_tax_year)
    filing_status: FilingStatus
    taxpayer: Person
    spouse: Optional[Person] = None
    dependents: List[Dependent] = Field(default_factory=list)
    can_be_claimed_as_dependent: bool = False
    nonresident_alien: bool = Field(default=False, description="Filer must use Form 1040-NR")

    w2s: List[W2] = Field(default_factory=list)
    form_1099_ints: List[Form1099INT] = Field(default_factory=list)
    form_1099_divs: List[Form1099DIV] = Field(default_factory=list)
    form_ssa1099s: List[FormSSA1099] = Field(default_factory=list)
    capital_transactions: List[CapitalTransaction] = Field(default_factory=list)
    schedule_c_businesses: List[ScheduleCBusiness] = Field(default_factory=list)
    rental_properties: List[RentalProperty] = Field(default_factory=list)
    schedule_k1s: List[ScheduleK1] = Field(default_factory=list)
    other_income: int = Field(default=0, description="Schedule 1 other income, cents")

    adjustments: Adjustments = Field(default_factory=Adjustments)
    deductions: Deductions = Field(default_factory=Deductions)
    amt_items: AMTItems = Field(default_factory=AMTItems)
    dependent_care: Optional[DependentCareExpenses] = None
    estimated_payments: EstimatedTaxPayments = Field(default_factory=EstimatedTaxPayments)
    prior_year: Optional[PriorYearCarryforwards] = None

    states: List[StateReturnConfig] = Field(default_factory=list)

    @property
    def unrecognized_inputs(self) -> List[str]:
        return sorted(self.model_extra or {})
