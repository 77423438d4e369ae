"""State tax engine - runs the state modules a return asks for."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Mapping, Optional, Tuple

from calculator.state.state_module import StateComputeResult, StateModule

if TYPE_CHECKING:
    from calculator.form1040 import Form1040Result
    from models.state_return import StateReturnConfig
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


class StateTaxEngine:
    """
    Orchestrates state tax calculations for one tax year.

    The engine is handed the year's state modules and dispatches each
    requested state to its module. A state without a module is skipped
    and reported back to the caller instead of failing the return.
    """

    def __init__(self, tax_year: int, modules: Mapping[str, StateModule]):
        """
        Initialize the state tax engine.

        Args:
            tax_year: Tax year the modules were built for
            modules: State code -> StateModule for that year
        """
        self.tax_year = tax_year
        self.modules = modules

    def calculate(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        state_config: "StateReturnConfig",
    ) -> Optional[StateComputeResult]:
        """
        Calculate one state return.

        Args:
            tax_return: The return with income, deductions, etc.
            federal: Completed Form 1040 for the same return
            state_config: The taxpayer's entry for the state

        Returns:
            StateComputeResult or None if the state is not supported
        """
        if not self.is_state_supported(state_config.state_code):
            return None
        module = self.modules[state_config.state_code.upper()]
        logger.debug(f"Computing {module.form_label} for {self.tax_year}")
        return module.compute(tax_return, federal, state_config)

    def calculate_all(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
    ) -> Tuple[List[StateComputeResult], List[str]]:
        """
        Calculate every state listed on the return, in input order.

        Returns:
            (results, unsupported state codes)
        """
        results: List[StateComputeResult] = []
        unsupported: List[str] = []
        for state_config in tax_return.states:
            result = self.calculate(tax_return, federal, state_config)
            if result is None:
                logger.warning(f"State {state_config.state_code} is not supported for {self.tax_year}; skipped")
                unsupported.append(state_config.state_code)
                continue
            results.append(result)
        return results, unsupported

    def is_state_supported(self, state_code: str) -> bool:
        """
        Check if a state is supported.

        Args:
            state_code: Two-letter state code

        Returns:
            True if state has a module (no-income-tax states included)
        """
        return state_code.upper() in self.modules

    def get_supported_states(self) -> List[str]:
        """
        Get list of states with modules.

        Returns:
            Sorted list of supported state codes
        """
        return sorted(self.modules)
