"""Contract shared by every state module."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Mapping, Optional, Tuple

from calculator.results import TracedResult
from calculator.source_documents import w2_ref
from models.state_return import ResidencyType
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.form1040 import Form1040Result
    from calculator.state.state_tax_config import StateTaxConfig
    from models.state_return import StateReturnConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class StateComputeResult(TracedResult):
    """
    Normalized summary of one state return, in cents.

    ``detail`` holds the state's own traced lines; the summary figures are
    copies of the matching detail amounts for consumers that do not care
    which state they are looking at.
    """

    state_code: str
    state_name: str
    form_label: str
    residency_type: ResidencyType
    apportionment_ratio: float
    state_agi: int
    state_taxable_income: int
    state_tax: int
    state_credits: int
    tax_after_credits: int
    state_withholding: int
    overpaid: int
    amount_owed: int
    detail: TracedResult


ShowWhen = Callable[[Mapping[str, TracedValue]], bool]


@dataclass(frozen=True)
class StateReviewItem:
    label: str
    node_id: str
    explanation: str = ""
    show_when: Optional[ShowWhen] = None

    def is_visible(self, values: Mapping[str, TracedValue]) -> bool:
        if self.node_id not in values:
            return False
        return self.show_when(values) if self.show_when is not None else True


@dataclass(frozen=True)
class StateReviewSection:
    title: str
    items: Tuple[StateReviewItem, ...]


@dataclass(frozen=True)
class StateReviewResultLine:
    kind: str  # "refund", "owed" or "zero"
    label: str
    node_id: Optional[str]


def positive(node_id: str) -> ShowWhen:
    """Show an item only when its value is above zero."""
    return lambda values: values[node_id].amount > 0


class StateModule(ABC):
    """
    One state's return computation.

    A module is bound to the ``StateTaxConfig`` of a single tax year and
    is stateless otherwise, so year modules can share instances freely.
    Subclasses set ``node_prefix``, ``node_labels`` and ``review_layout``
    and implement ``compute``.
    """

    node_prefix: str = ""
    node_labels: Mapping[str, str] = {}
    review_layout: Tuple[StateReviewSection, ...] = ()

    def __init__(self, config: "StateTaxConfig"):
        self.config = config

    @property
    def state_code(self) -> str:
        return self.config.state_code

    @property
    def state_name(self) -> str:
        return self.config.state_name

    @property
    def form_label(self) -> str:
        return self.config.form_label

    @abstractmethod
    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        state_config: "StateReturnConfig",
    ) -> StateComputeResult:
        """
        Compute the state return from the raw input and the federal result.

        Args:
            tax_return: The return being computed; never mutated
            federal: Completed Form 1040 for the same return
            state_config: The taxpayer's entry for this state

        Returns:
            StateComputeResult with the state's traced detail
        """

    def collect_traced_values(self, result: StateComputeResult) -> Dict[str, TracedValue]:
        return result.detail.values_by_node()

    @property
    def review_result_lines(self) -> Tuple[StateReviewResultLine, ...]:
        code = self.state_code
        return (
            StateReviewResultLine("refund", f"{code} refund", f"{self.node_prefix}.overpaid"),
            StateReviewResultLine("owed", f"{code} amount you owe", f"{self.node_prefix}.amountOwed"),
            StateReviewResultLine("zero", f"{code} tax balance", None),
        )

    def visible_review_items(self, result: StateComputeResult) -> List[Tuple[str, StateReviewItem, int]]:
        """(section title, item, amount) for every item the review screen shows."""
        values = self.collect_traced_values(result)
        return [
            (section.title, item, values[item.node_id].amount)
            for section in self.review_layout
            for item in section.items
            if item.is_visible(values)
        ]

    def visible_result_line(self, result: StateComputeResult) -> StateReviewResultLine:
        refund, owed, zero = self.review_result_lines
        if result.overpaid > 0:
            return refund
        if result.amount_owed > 0:
            return owed
        return zero

    # Helpers shared by the concrete modules

    def node(self, name: str) -> str:
        return f"{self.node_prefix}.{name}"

    def state_withholding(self, tax_return: "TaxReturn") -> TracedValue:
        """W-2 box 17 for every W-2 whose box 15 names this state."""
        w2s = [w for w in tax_return.w2s if (w.box15_state or "").upper() == self.state_code]
        return traced_from_computation(
            sum(w.box17_state_income_tax for w in w2s),
            self.node("stateWithholding"),
            [w2_ref(w.id, "box17") for w in w2s],
            f"{self.state_code} income tax withheld (W-2 box 17)",
        )

    def settle(self, tax_after_credits: TracedValue, payments: TracedValue) -> Tuple[TracedValue, TracedValue]:
        """Overpaid and amount owed nodes."""
        inputs = [tax_after_credits.node_id, payments.node_id]
        overpaid = traced_from_computation(
            max(0, payments.amount - tax_after_credits.amount),
            self.node("overpaid"),
            inputs,
            "payments - tax after credits",
        )
        owed = traced_from_computation(
            max(0, tax_after_credits.amount - payments.amount),
            self.node("amountOwed"),
            inputs,
            "tax after credits - payments",
        )
        return overpaid, owed
