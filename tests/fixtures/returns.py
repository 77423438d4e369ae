"""
Builders for test returns.

All amounts are integer cents. W-2 social security and Medicare boxes
default to the figures an employer would report for the wages, so a
plain W-2 never trips the document checks.
"""

from datetime import date
from typing import Optional

from calculator.decimal_math import apply_rate
from models.deductions import Deductions, DeductionMethod, ItemizedDeductions
from models.documents import CapitalTransaction, Form1099DIV, Form1099INT, FormSSA1099, W2
from models.schedule_c import ScheduleCBusiness
from models.schedule_e import K1EntityType, RentalProperty, ScheduleK1
from models.state_return import ResidencyType, StateReturnConfig
from models.tax_return import TaxReturn
from models.taxpayer import Dependent, DependentRelationship, FilingStatus, Person
from models.traced import TracedValue, traced_from_computation

SS_WAGE_BASE_2025 = 17_610_000


def make_person(first_name: str = "Alex", birth_year: int = 1985, **kwargs) -> Person:
    return Person(
        first_name=first_name,
        last_name="Rivera",
        ssn=kwargs.pop("ssn", "123-45-6789"),
        date_of_birth=date(birth_year, 6, 1),
        **kwargs,
    )


def make_child(
    first_name: str = "Sam",
    birth_year: int = 2015,
    ssn: Optional[str] = "987-65-4321",
    relationship: DependentRelationship = DependentRelationship.SON,
    **kwargs,
) -> Dependent:
    return Dependent(
        first_name=first_name,
        last_name="Rivera",
        ssn=ssn,
        relationship=relationship,
        date_of_birth=date(birth_year, 3, 15),
        **kwargs,
    )


def make_w2(
    wages: int,
    withheld: int = 0,
    w2_id: str = "w2-1",
    employer: str = "Acme Corp",
    state: Optional[str] = None,
    state_withheld: int = 0,
    **boxes,
) -> W2:
    """W-2 with boxes 3-6 derived from box 1 unless given."""
    ss_wages = boxes.pop("box3", wages)
    medicare_wages = boxes.pop("box5", wages)
    return W2(
        id=w2_id,
        employer_name=employer,
        box1=wages,
        box2=withheld,
        box3=ss_wages,
        box4=boxes.pop("box4", apply_rate(min(ss_wages, SS_WAGE_BASE_2025), 0.062)),
        box5=medicare_wages,
        box6=boxes.pop("box6", apply_rate(medicare_wages, 0.0145)),
        box15_state=state,
        box16_state_wages=wages if state else 0,
        box17_state_income_tax=state_withheld,
    )


def make_interest(amount: int, form_id: str = "int-1", payer: str = "First Bank", **boxes) -> Form1099INT:
    return Form1099INT(id=form_id, payer_name=payer, box1=amount, **boxes)


def make_dividends(
    ordinary: int,
    qualified: int = 0,
    form_id: str = "div-1",
    payer: str = "Index Fund",
    **boxes,
) -> Form1099DIV:
    return Form1099DIV(id=form_id, payer_name=payer, box1a=ordinary, box1b=qualified, **boxes)


def make_sale(
    proceeds: int,
    cost_basis: int,
    long_term: bool = True,
    txn_id: str = "sale-1",
    description: str = "100 sh XYZ",
) -> CapitalTransaction:
    return CapitalTransaction(
        id=txn_id, description=description, proceeds=proceeds, cost_basis=cost_basis, long_term=long_term
    )


def make_business(gross_receipts: int, business_id: str = "biz-1", name: str = "Rivera Consulting", **kwargs):
    return ScheduleCBusiness(id=business_id, business_name=name, gross_receipts=gross_receipts, **kwargs)


def make_rental(
    rents: int,
    property_id: str = "rental-1",
    address: str = "12 Elm St, Springfield",
    **expenses,
) -> RentalProperty:
    return RentalProperty(id=property_id, property_address=address, rents_received=rents, **expenses)


def make_k1(
    k1_id: str = "k1-1",
    entity: str = "Maple Partners LP",
    entity_type: K1EntityType = K1EntityType.PARTNERSHIP,
    **amounts,
) -> ScheduleK1:
    return ScheduleK1(id=k1_id, entity_name=entity, entity_type=entity_type, **amounts)


def make_ssa(benefits: int, withheld: int = 0, form_id: str = "ssa-1") -> FormSSA1099:
    return FormSSA1099(id=form_id, box5=benefits, box6=withheld)


def make_itemized(**kwargs) -> Deductions:
    return Deductions(method=DeductionMethod.ITEMIZED, itemized=ItemizedDeductions(**kwargs))


def make_state(
    state_code: str,
    residency_type: ResidencyType = ResidencyType.FULL_YEAR,
    **kwargs,
) -> StateReturnConfig:
    return StateReturnConfig(state_code=state_code, residency_type=residency_type, **kwargs)


def make_return(
    filing_status: FilingStatus = FilingStatus.SINGLE,
    w2s=(),
    tax_year: int = 2025,
    taxpayer: Optional[Person] = None,
    spouse: Optional[Person] = None,
    **kwargs,
) -> TaxReturn:
    """
    Return for a 40-year-old filer; MFJ returns get a spouse of the same age.
    """
    if spouse is None and filing_status == FilingStatus.MARRIED_JOINT:
        spouse = make_person("Jordan", ssn="234-56-7890")
    return TaxReturn(
        tax_year=tax_year,
        filing_status=filing_status,
        taxpayer=taxpayer or make_person(),
        spouse=spouse,
        w2s=list(w2s),
        **kwargs,
    )


def traced(amount: int, node_id: str) -> TracedValue:
    """Stand-in upstream value for calling a schedule or credit directly."""
    return traced_from_computation(amount, node_id, [], "test input")
