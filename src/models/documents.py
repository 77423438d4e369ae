"""
Source documents: wage statements, 1099 variants, Social Security
benefit statements and brokerage sales.

Every amount is integer cents. Field names follow the box numbers printed
on the form so that document node ids (``w2:{id}:box1``) read the same as
the paper form.
"""

from typing import Optional

from pydantic import BaseModel, Field


class W2(BaseModel):
    """Form W-2 Wage and Tax Statement."""
    id: str
    employer_name: str
    box1: int = Field(default=0, ge=0, description="Wages, tips, other compensation")
    box2: int = Field(default=0, ge=0, description="Federal income tax withheld")
    box3: int = Field(default=0, ge=0, description="Social security wages")
    box4: int = Field(default=0, ge=0, description="Social security tax withheld")
    box5: int = Field(default=0, ge=0, description="Medicare wages and tips")
    box6: int = Field(default=0, ge=0, description="Medicare tax withheld")
    box15_state: Optional[str] = Field(default=None, description="Employer's state (two-letter code)")
    box16_state_wages: int = Field(default=0, ge=0, description="State wages")
    box17_state_income_tax: int = Field(default=0, ge=0, description="State income tax withheld")


class Form1099INT(BaseModel):
    """Form 1099-INT Interest Income."""
    id: str
    payer_name: str
    box1: int = Field(default=0, ge=0, description="Interest income")
    box3: int = Field(default=0, ge=0, description="Interest on U.S. Savings Bonds and Treasury obligations")
    box4: int = Field(default=0, ge=0, description="Federal income tax withheld")
    box6: int = Field(default=0, ge=0, description="Foreign tax paid")
    box8: int = Field(default=0, ge=0, description="Tax-exempt interest")
    foreign_country: Optional[str] = None


class Form1099DIV(BaseModel):
    """Form 1099-DIV Dividends and Distributions."""
    id: str
    payer_name: str
    box1a: int = Field(default=0, ge=0, description="Total ordinary dividends")
    box1b: int = Field(default=0, ge=0, description="Qualified dividends")
    box2a: int = Field(default=0, ge=0, description="Total capital gain distributions")
    box4: int = Field(default=0, ge=0, description="Federal income tax withheld")
    box7: int = Field(default=0, ge=0, description="Foreign tax paid")
    box12: int = Field(default=0, ge=0, description="Exempt-interest dividends")
    foreign_country: Optional[str] = None


class CapitalTransaction(BaseModel):
    """One sale reported on Form 1099-B (or entered directly)."""
    id: str
    description: str
    proceeds: int = Field(default=0, ge=0)
    cost_basis: int = Field(default=0, ge=0)
    adjustment: int = Field(default=0, description="Basis adjustment, e.g. disallowed wash sale loss")
    long_term: bool = Field(default=False, description="Held more than one year")

    @property
    def gain_loss(self) -> int:
        return self.proceeds - self.cost_basis + self.adjustment


class FormSSA1099(BaseModel):
    """Form SSA-1099 Social Security Benefit Statement."""
    id: str
    recipient_name: str = ""
    box5: int = Field(default=0, description="Net benefits for the year; negative when repayments exceed benefits")
    box6: int = Field(default=0, ge=0, description="Voluntary federal income tax withheld")
