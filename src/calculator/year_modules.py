"""
Tax year registry.

Every supported year is described by a ``YearModule``: the year's
constants plus the state modules built from the same parameter file.
The registry is filled once at import and is read-only afterwards; a
year that is not registered raises ``UnsupportedTaxYearError`` rather
than falling back to a neighbouring year.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, List, Mapping, Optional

from calculator.exceptions import UnsupportedTaxYearError
from calculator.form1040 import Form1040Result, compute_form1040, compute_standard_deduction
from calculator.schedules.schedule_b import ScheduleBResult, compute_schedule_b
from calculator.state.state_registry import build_state_modules
from calculator.state.state_tax_engine import StateTaxEngine
from config.settings import get_settings
from config.tax_config_loader import TaxConfigLoader

if TYPE_CHECKING:
    from calculator.state.state_module import StateModule
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn
    from models.traced import TracedValue

logger = logging.getLogger(__name__)

SUPPORTED_TAX_YEARS = (2025, 2026)


@dataclass(frozen=True)
class YearModule:
    """Everything needed to compute a return for one tax year."""

    tax_year: int
    config: "TaxYearConfig"
    state_modules: Mapping[str, "StateModule"]

    def standard_deduction(self, tax_return: "TaxReturn", earned_income: "TracedValue") -> "TracedValue":
        return compute_standard_deduction(tax_return, earned_income, self.config)

    def compute_form1040(self, tax_return: "TaxReturn") -> Form1040Result:
        return compute_form1040(tax_return, self.config)

    def compute_schedule_b(self, tax_return: "TaxReturn") -> ScheduleBResult:
        return compute_schedule_b(tax_return, self.config)

    def state_module(self, state_code: str) -> Optional["StateModule"]:
        return self.state_modules.get(state_code.upper())

    def supported_states(self) -> List[str]:
        return self.state_engine().get_supported_states()

    def state_engine(self) -> StateTaxEngine:
        return StateTaxEngine(self.tax_year, self.state_modules)


def build_year_module(tax_year: int, loader: TaxConfigLoader) -> YearModule:
    """Build a year module from the year's parameter file."""
    config = loader.build_year_config(tax_year)
    modules = build_state_modules(loader.build_state_configs(tax_year))
    logger.debug(f"Built year module {tax_year} with states {', '.join(sorted(modules))}")
    return YearModule(tax_year=tax_year, config=config, state_modules=modules)


def _build_registry() -> Mapping[int, YearModule]:
    loader = TaxConfigLoader(get_settings().tax_parameters_dir)
    return MappingProxyType({year: build_year_module(year, loader) for year in SUPPORTED_TAX_YEARS})


YEAR_MODULES: Mapping[int, YearModule] = _build_registry()


def get_year_module(tax_year: int) -> YearModule:
    """
    Exact lookup of the year module for ``tax_year``.

    Raises:
        UnsupportedTaxYearError: no module is registered for the year.
    """
    try:
        return YEAR_MODULES[tax_year]
    except KeyError:
        raise UnsupportedTaxYearError(tax_year, get_supported_tax_years()) from None


def get_supported_tax_years() -> List[int]:
    return sorted(YEAR_MODULES)
