import re
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

_SSN_DIGITS = re.compile(r"^\d{9}$")


class FilingStatus(str, Enum):
    """IRS filing status options"""
    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_WIDOW = "qualifying_widow"


class DependentRelationship(str, Enum):
    """Relationship of a dependent to the taxpayer."""
    SON = "son"
    DAUGHTER = "daughter"
    STEPCHILD = "stepchild"
    FOSTER_CHILD = "foster_child"
    BROTHER = "brother"
    SISTER = "sister"
    GRANDCHILD = "grandchild"
    NIECE = "niece"
    NEPHEW = "nephew"
    PARENT = "parent"
    OTHER = "other"


# Relationships that can satisfy the qualifying-child relationship test
QUALIFYING_CHILD_RELATIONSHIPS = frozenset({
    DependentRelationship.SON,
    DependentRelationship.DAUGHTER,
    DependentRelationship.STEPCHILD,
    DependentRelationship.FOSTER_CHILD,
    DependentRelationship.BROTHER,
    DependentRelationship.SISTER,
    DependentRelationship.GRANDCHILD,
    DependentRelationship.NIECE,
    DependentRelationship.NEPHEW,
})


def has_valid_ssn(ssn: Optional[str]) -> bool:
    """True when ``ssn`` holds exactly nine digits once dashes are removed."""
    if not ssn:
        return False
    return bool(_SSN_DIGITS.match(ssn.replace("-", "")))


def age_at_year_end(date_of_birth: Optional[date], tax_year: int) -> Optional[int]:
    """Age on December 31 of ``tax_year``; None when the birth date is unknown."""
    if date_of_birth is None:
        return None
    return tax_year - date_of_birth.year


class Person(BaseModel):
    """Taxpayer or spouse."""
    first_name: str
    last_name: str
    ssn: Optional[str] = Field(None, description="Social Security Number")
    date_of_birth: Optional[date] = None
    is_blind: bool = False

    def age_at_year_end(self, tax_year: int) -> Optional[int]:
        return age_at_year_end(self.date_of_birth, tax_year)


class Dependent(BaseModel):
    """Dependent claimed on the return."""
    first_name: str
    last_name: str
    ssn: Optional[str] = None
    relationship: DependentRelationship
    date_of_birth: Optional[date] = None
    months_lived_with_taxpayer: int = Field(default=12, ge=0, le=12, description="Months lived with taxpayer in tax year")
    is_student: bool = Field(default=False, description="Full-time student for 5+ months")
    is_permanently_disabled: bool = Field(default=False, description="Permanently and totally disabled")

    def age_at_year_end(self, tax_year: int) -> Optional[int]:
        return age_at_year_end(self.date_of_birth, tax_year)
