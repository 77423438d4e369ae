"""State tax configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from calculator.brackets import Bracket, BracketSchedule, BracketTable


@dataclass(frozen=True)
class RentersCredit:
    credit: int
    agi_limit: int


@dataclass(frozen=True)
class StateTaxConfig:
    """
    Configuration for a specific state and tax year, in integer cents.

    Holds the static data a state module needs: rate structure,
    deductions, exemptions, and the handful of state-specific credits
    the modules support. Loaded from the ``states:`` section of the
    year's parameter file.
    """

    # Basic identification
    state_code: str
    state_name: str
    tax_year: int
    form_label: str

    has_income_tax: bool = True

    # Tax structure
    is_flat_tax: bool = False
    flat_rate: Optional[float] = None  # If is_flat_tax is True
    brackets: Optional[BracketTable] = None  # If progressive

    # Standard deduction amounts by filing status
    standard_deduction: Dict[str, int] = field(default_factory=dict)

    # Exemption allowances (deducted from income)
    personal_exemption_amount: int = 0
    # Exemption credits (subtracted from tax), with a stepped phase-out
    personal_exemption_credit: int = 0
    dependent_exemption_credit: int = 0
    exemption_phaseout_threshold: Dict[str, int] = field(default_factory=dict)
    exemption_phaseout_step: int = 0
    exemption_phaseout_rate: float = 0.0

    # State EITC (as percentage of federal EITC, e.g., 0.20 = 20%)
    eitc_percentage: Optional[float] = None

    # Surtax on taxable income above a threshold (CA mental health services tax)
    surtax_threshold: Optional[int] = None
    surtax_rate: float = 0.0

    # Nonrefundable renter's credit, keyed "single_mfs" / "other"
    renters_credit: Dict[str, RentersCredit] = field(default_factory=dict)

    # Itemized deduction differences from federal
    mortgage_limit: Dict[str, int] = field(default_factory=dict)
    medical_floor_rate: float = 0.0

    # PA IRC 529 deduction limit per beneficiary
    max_529_deduction: int = 0

    def get_standard_deduction(self, filing_status: str) -> int:
        """Get standard deduction for a filing status."""
        return self.standard_deduction.get(filing_status, 0)

    def get_brackets(self, filing_status: str) -> BracketSchedule:
        """Get tax brackets for a filing status."""
        if self.is_flat_tax:
            return (Bracket(0, self.flat_rate or 0.0),)
        if self.brackets:
            return self.brackets.get(filing_status, self.brackets.get("single", ()))
        return ()
