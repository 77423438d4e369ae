"""
Schedule E (Form 1040) - Supplemental Income and Loss

Part I nets each rental property or royalty source. Parts II and III add
the K-1 amounts from partnerships, S corporations, estates and trusts.

Rental real estate is passive. Net passive income from Part I and from
K-1 rental activities is netted on Form 8582; a net passive loss is
allowed only up to the $25,000 special allowance for active
participants, reduced by 50% of modified AGI over $100,000. Married
filing separately gets no allowance. The disallowed part is suspended
and carried to next year.

K-1 ordinary income and guaranteed payments are nonpassive and flow
through in full.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from calculator.decimal_math import format_dollars, prorate
from calculator.results import TracedResult
from calculator.source_documents import RENTAL_FIELDS, RENTAL_INCOME_FIELDS, k1_entries, rental_ref
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.schedule_e import RentalProperty
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RentalPropertyResult(TracedResult):
    property_id: str
    property_address: str
    income: TracedValue  # lines 3 + 4
    expenses: TracedValue  # line 20
    net: TracedValue  # line 21

    @property
    def net_income_loss(self) -> int:
        return self.net.amount


@dataclass(frozen=True)
class ScheduleEResult(TracedResult):
    properties: Tuple[RentalPropertyResult, ...]
    line23a: TracedValue  # net rental and royalty income or loss
    k1_rental: TracedValue  # K-1 rental real estate income or loss
    net_passive: TracedValue  # Form 8582 net passive income or loss
    modified_agi: TracedValue  # Form 8582 line 7
    special_allowance: TracedValue  # Form 8582 line 9
    allowed_passive: TracedValue  # passive income, or loss allowed this year
    line32: TracedValue  # nonpassive K-1 income
    line41: TracedValue  # total to Schedule 1 line 5
    suspended_loss: int  # disallowed passive loss carried forward, positive

    def property(self, property_id: str) -> Optional[RentalPropertyResult]:
        return next((p for p in self.properties if p.property_id == property_id), None)


def needs_schedule_e(tax_return: "TaxReturn") -> bool:
    return bool(tax_return.rental_properties or tax_return.schedule_k1s)


def compute_rental_property(prop: "RentalProperty") -> RentalPropertyResult:
    prefix = f"scheduleE.{prop.id}"
    expense_fields = [name for name in RENTAL_FIELDS if name not in RENTAL_INCOME_FIELDS]

    income = traced_from_computation(
        prop.total_income(),
        f"{prefix}.income",
        [rental_ref(prop.id, name) for name in RENTAL_INCOME_FIELDS],
        "rents received + royalties received",
    )
    expenses = traced_from_computation(
        prop.total_expenses(),
        f"{prefix}.expenses",
        [rental_ref(prop.id, name) for name in expense_fields],
        "sum of expense lines 5 through 19",
    )
    net = traced_from_computation(
        prop.net_income_loss(), f"{prefix}.net", [f"{prefix}.income", f"{prefix}.expenses"], "income - expenses"
    )
    return RentalPropertyResult(
        property_id=prop.id,
        property_address=prop.property_address,
        income=income,
        expenses=expenses,
        net=net,
    )


def compute_special_allowance(
    modified_agi: TracedValue,
    filing_status: FilingStatus,
    config: "TaxYearConfig",
) -> TracedValue:
    """
    Rental loss allowance for active participants (Form 8582 Part II).

    Examples:
        MAGI $120,000: 25,000 - 50% x 20,000 = $15,000.
    """
    if filing_status == FilingStatus.MARRIED_SEPARATE:
        return traced_from_computation(
            0, "form8582.specialAllowance", [], "married filing separately: no special allowance"
        )
    start = config.passive_phaseout_start
    width = config.passive_phaseout_range
    excess = min(max(0, modified_agi.amount - start), width)
    reduction = prorate(config.passive_special_allowance, excess, width)
    return traced_from_computation(
        max(0, config.passive_special_allowance - reduction),
        "form8582.specialAllowance",
        [modified_agi.node_id],
        f"{format_dollars(config.passive_special_allowance)} less 50% of modified AGI over {format_dollars(start)}",
    )


def compute_schedule_e(
    tax_return: "TaxReturn",
    nonpassive_income: Sequence[TracedValue],
    config: "TaxYearConfig",
) -> Optional[ScheduleEResult]:
    """
    Compute Schedule E and the Form 8582 passive loss limit.

    Args:
        tax_return: Return holding the rental properties and K-1s
        nonpassive_income: Income lines that make up modified AGI for the
            special allowance (wages, interest, dividends, capital gain,
            business profit, other income)
        config: Tax year constants

    Returns:
        ScheduleEResult, or None when there are no rentals or K-1s
    """
    if not needs_schedule_e(tax_return):
        return None

    properties = tuple(compute_rental_property(p) for p in tax_return.rental_properties)
    line23a = traced_from_computation(
        sum(p.net.amount for p in properties),
        "scheduleE.line23a",
        [p.net.node_id for p in properties],
        "sum of net rental and royalty income or loss",
    )

    rental_k1 = k1_entries(tax_return, "rentalIncome")
    k1_rental = traced_from_computation(
        sum(amount for amount, _ in rental_k1),
        "scheduleE.k1Rental",
        [ref for _, ref in rental_k1],
        "K-1 net rental real estate income or loss",
    )
    net_passive = traced_from_computation(
        line23a.amount + k1_rental.amount,
        "form8582.netPassive",
        ["scheduleE.line23a", "scheduleE.k1Rental"],
        "Schedule E rentals + K-1 rentals",
    )

    # Nonpassive K-1 income counts toward modified AGI
    nonpassive_k1 = k1_entries(tax_return, "ordinaryIncome") + k1_entries(tax_return, "guaranteedPayments")
    line32 = traced_from_computation(
        sum(amount for amount, _ in nonpassive_k1),
        "scheduleE.line32",
        [ref for _, ref in nonpassive_k1],
        "K-1 ordinary income + guaranteed payments",
    )
    magi_parts = list(nonpassive_income) + [line32]
    modified_agi = traced_from_computation(
        sum(p.amount for p in magi_parts),
        "form8582.modifiedAGI",
        [p.node_id for p in magi_parts],
        "income other than passive activities",
    )
    allowance = compute_special_allowance(modified_agi, tax_return.filing_status, config)

    if net_passive.amount >= 0:
        allowed_amount = net_passive.amount
        suspended = 0
        formula = "net passive income"
    else:
        loss = -net_passive.amount
        allowed_amount = -min(loss, allowance.amount)
        suspended = loss + allowed_amount
        formula = "net passive loss, limited to the special allowance"
        if suspended:
            logger.debug(f"Passive loss of {loss} cents limited, {suspended} cents suspended")
    allowed_passive = traced_from_computation(
        allowed_amount,
        "form8582.allowedPassive",
        ["form8582.netPassive", "form8582.specialAllowance"],
        formula,
    )

    line41 = traced_from_computation(
        allowed_passive.amount + line32.amount,
        "scheduleE.line41",
        ["form8582.allowedPassive", "scheduleE.line32"],
        "allowed passive income or loss + nonpassive K-1 income",
    )

    return ScheduleEResult(
        properties=properties,
        line23a=line23a,
        k1_rental=k1_rental,
        net_passive=net_passive,
        modified_agi=modified_agi,
        special_allowance=allowance,
        allowed_passive=allowed_passive,
        line32=line32,
        line41=line41,
        suspended_loss=suspended,
    )
