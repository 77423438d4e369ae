"""State tax calculation module."""

from calculator.state.apportionment import Apportionment, compute_apportionment, compute_apportionment_ratio
from calculator.state.state_module import (
    StateComputeResult,
    StateModule,
    StateReviewItem,
    StateReviewResultLine,
    StateReviewSection,
)
from calculator.state.state_registry import NO_INCOME_TAX_STATES, STATE_MODULE_CLASSES, build_state_modules
from calculator.state.state_tax_config import RentersCredit, StateTaxConfig
from calculator.state.state_tax_engine import StateTaxEngine

__all__ = [
    "Apportionment",
    "compute_apportionment",
    "compute_apportionment_ratio",
    "StateComputeResult",
    "StateModule",
    "StateReviewItem",
    "StateReviewResultLine",
    "StateReviewSection",
    "NO_INCOME_TAX_STATES",
    "STATE_MODULE_CLASSES",
    "build_state_modules",
    "RentersCredit",
    "StateTaxConfig",
    "StateTaxEngine",
]
