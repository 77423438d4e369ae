"""Concrete state modules."""

from calculator.state.modules.california import CaliforniaModule, Form540Result
from calculator.state.modules.illinois import IL1040Result, IllinoisModule
from calculator.state.modules.no_income_tax import NoIncomeTaxModule, NoIncomeTaxResult
from calculator.state.modules.pennsylvania import PA40Result, PennsylvaniaModule

__all__ = [
    "CaliforniaModule",
    "Form540Result",
    "IL1040Result",
    "IllinoisModule",
    "NoIncomeTaxModule",
    "NoIncomeTaxResult",
    "PA40Result",
    "PennsylvaniaModule",
]
