from .taxpayer import (
    Dependent,
    DependentRelationship,
    FilingStatus,
    Person,
    QUALIFYING_CHILD_RELATIONSHIPS,
    has_valid_ssn,
)
from .documents import CapitalTransaction, Form1099DIV, Form1099INT, FormSSA1099, W2
from .schedule_c import ScheduleCBusiness
from .schedule_e import K1EntityType, RentalProperty, ScheduleK1
from .deductions import (
    Adjustments,
    AMTItems,
    DeductionMethod,
    Deductions,
    DependentCareExpenses,
    EstimatedTaxPayments,
    ItemizedDeductions,
    PriorYearCarryforwards,
)
from .state_return import ResidencyType, StateReturnConfig
from .tax_return import TaxReturn
from .traced import (
    ComputeTrace,
    ComputedSource,
    DocumentSource,
    TracedValue,
    traced_from_computation,
    traced_from_document,
    traced_zero,
)

__all__ = [
    'Adjustments',
    'AMTItems',
    'CapitalTransaction',
    'ComputeTrace',
    'ComputedSource',
    'DeductionMethod',
    'Deductions',
    'Dependent',
    'DependentCareExpenses',
    'DependentRelationship',
    'DocumentSource',
    'EstimatedTaxPayments',
    'FilingStatus',
    'Form1099DIV',
    'Form1099INT',
    'FormSSA1099',
    'ItemizedDeductions',
    'K1EntityType',
    'Person',
    'PriorYearCarryforwards',
    'QUALIFYING_CHILD_RELATIONSHIPS',
    'RentalProperty',
    'ResidencyType',
    'ScheduleCBusiness',
    'ScheduleK1',
    'StateReturnConfig',
    'TaxReturn',
    'TracedValue',
    'W2',
    'has_valid_ssn',
    'traced_from_computation',
    'traced_from_document',
    'traced_zero',
]
