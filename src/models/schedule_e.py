"""
Schedule E (Form 1040) - Supplemental Income and Loss

Input models for:
- Part I: rental real estate and royalties, one entry per property
- Parts II and III: Schedule K-1 amounts from partnerships, S corporations,
  estates and trusts

Key Rules:
- Rental losses are passive; up to $25,000 is allowed for active
  participants, phased out between $100,000 and $150,000 of modified AGI
- K-1 amounts are used as reported by the entity; basis and at-risk
  limits are the partner's responsibility

All amounts are integer cents.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class K1EntityType(str, Enum):
    """Type of entity issuing the K-1."""
    PARTNERSHIP = "partnership"
    S_CORPORATION = "s_corporation"
    ESTATE_OR_TRUST = "estate_or_trust"


class RentalProperty(BaseModel):
    """One rental property or royalty source (Schedule E, Part I)."""
    id: str
    property_address: str = Field(description="Property address")

    # Income
    rents_received: int = Field(default=0, ge=0, description="Line 3")
    royalties_received: int = Field(default=0, ge=0, description="Line 4")

    # Expenses
    advertising: int = Field(default=0, ge=0, description="Line 5")
    auto_travel: int = Field(default=0, ge=0, description="Line 6")
    cleaning_maintenance: int = Field(default=0, ge=0, description="Line 7")
    commissions: int = Field(default=0, ge=0, description="Line 8")
    insurance: int = Field(default=0, ge=0, description="Line 9")
    legal_professional: int = Field(default=0, ge=0, description="Line 10")
    management_fees: int = Field(default=0, ge=0, description="Line 11")
    mortgage_interest: int = Field(default=0, ge=0, description="Line 12")
    other_interest: int = Field(default=0, ge=0, description="Line 13")
    repairs: int = Field(default=0, ge=0, description="Line 14")
    supplies: int = Field(default=0, ge=0, description="Line 15")
    taxes: int = Field(default=0, ge=0, description="Line 16")
    utilities: int = Field(default=0, ge=0, description="Line 17")
    depreciation: int = Field(default=0, ge=0, description="Line 18")
    other_expenses: int = Field(default=0, ge=0, description="Line 19")

    def total_income(self) -> int:
        """Calculate total income from this property."""
        return self.rents_received + self.royalties_received

    def total_expenses(self) -> int:
        """Calculate total expenses for this property."""
        return (
            self.advertising +
            self.auto_travel +
            self.cleaning_maintenance +
            self.commissions +
            self.insurance +
            self.legal_professional +
            self.management_fees +
            self.mortgage_interest +
            self.other_interest +
            self.repairs +
            self.supplies +
            self.taxes +
            self.utilities +
            self.depreciation +
            self.other_expenses
        )

    def net_income_loss(self) -> int:
        """Calculate net income or loss for this property."""
        return self.total_income() - self.total_expenses()


class ScheduleK1(BaseModel):
    """Pass-through amounts from one Schedule K-1."""
    id: str
    entity_name: str = Field(description="Name of the partnership, S corporation, estate or trust")
    entity_type: K1EntityType = K1EntityType.PARTNERSHIP

    ordinary_income: int = Field(default=0, description="Ordinary business income or (loss)")
    rental_income: int = Field(default=0, description="Net rental real estate income or (loss); passive")
    guaranteed_payments: int = Field(default=0, ge=0, description="Guaranteed payments to a partner")
    interest_income: int = Field(default=0, ge=0, description="Interest income")
    ordinary_dividends: int = Field(default=0, ge=0, description="Ordinary dividends")
    qualified_dividends: int = Field(default=0, ge=0, description="Qualified dividends, part of ordinary dividends")
    short_term_capital_gain: int = Field(default=0, description="Net short-term capital gain or (loss)")
    long_term_capital_gain: int = Field(default=0, description="Net long-term capital gain or (loss)")
    self_employment_earnings: int = Field(
        default=0,
        description="Net earnings from self-employment (partnership box 14, code A; includes guaranteed payments)",
    )
    section_199a_qbi: int = Field(default=0, description="Section 199A qualified business income")
