"""States that levy no tax on wage income."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from calculator.results import TracedResult
from calculator.state.apportionment import compute_apportionment
from calculator.state.state_module import StateComputeResult, StateModule, StateReviewSection

if TYPE_CHECKING:
    from calculator.form1040 import Form1040Result
    from models.state_return import StateReturnConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class NoIncomeTaxResult(TracedResult):
    state_code: str


class NoIncomeTaxModule(StateModule):
    """Returns an all-zero result; there are no state lines to trace."""

    review_layout = (StateReviewSection("No state income tax", ()),)

    @property
    def node_prefix(self) -> str:
        return self.state_code.lower()

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        state_config: "StateReturnConfig",
    ) -> StateComputeResult:
        apportionment = compute_apportionment(state_config, tax_return.tax_year)
        return StateComputeResult(
            state_code=self.state_code,
            state_name=self.state_name,
            form_label=self.form_label,
            residency_type=state_config.residency_type,
            apportionment_ratio=apportionment.ratio,
            state_agi=0,
            state_taxable_income=0,
            state_tax=0,
            state_credits=0,
            tax_after_credits=0,
            state_withholding=0,
            overpaid=0,
            amount_owed=0,
            detail=NoIncomeTaxResult(state_code=self.state_code),
        )
