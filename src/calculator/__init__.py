from .exceptions import (
    ConfigurationError,
    MalformedBracketTableError,
    TaxEngineError,
    TaxParameterError,
    TraceCycleError,
    UnsupportedTaxYearError,
)
from .tax_year_config import TaxYearConfig
from .form1040 import Form1040Result, compute_form1040, compute_standard_deduction
from .state import (
    StateComputeResult,
    StateModule,
    StateTaxConfig,
    StateTaxEngine,
    NO_INCOME_TAX_STATES,
)

# The year registry, engine and trace load parameter files at import;
# import them from calculator.year_modules, calculator.engine and
# calculator.trace directly.

__all__ = [
    "ConfigurationError",
    "MalformedBracketTableError",
    "TaxEngineError",
    "TaxParameterError",
    "TraceCycleError",
    "UnsupportedTaxYearError",
    "TaxYearConfig",
    "Form1040Result",
    "compute_form1040",
    "compute_standard_deduction",
    "StateComputeResult",
    "StateModule",
    "StateTaxConfig",
    "StateTaxEngine",
    "NO_INCOME_TAX_STATES",
]
