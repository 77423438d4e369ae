from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ResidencyType(str, Enum):
    FULL_YEAR = "full_year"
    PART_YEAR = "part_year"
    NONRESIDENT = "nonresident"


class StateReturnConfig(BaseModel):
    """One state return the taxpayer wants computed."""
    state_code: str = Field(min_length=2, max_length=2)
    residency_type: ResidencyType = ResidencyType.FULL_YEAR
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None

    # CA nonrefundable renter's credit
    rent_paid_in_state: int = Field(default=0, ge=0, description="Rent paid for a principal residence in the state")
    # PA IRC 529 contribution deduction
    contributions_529: int = Field(default=0, ge=0)

    @field_validator("state_code")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()
