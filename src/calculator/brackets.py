"""
Progressive bracket math and the qualified dividends / capital gain
stacking worksheet.

Brackets are ascending ``(floor, rate)`` pairs in cents; each bracket's
ceiling is the next bracket's floor and the top bracket is open ended.
Tax is accumulated exactly and rounded once, never per bracket.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Sequence, Tuple

from calculator.decimal_math import round_cents, to_decimal
from calculator.exceptions import MalformedBracketTableError

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig


@dataclass(frozen=True)
class Bracket:
    floor: int
    rate: float


BracketSchedule = Tuple[Bracket, ...]
BracketTable = Dict[str, BracketSchedule]


def validate_bracket_schedule(brackets: Sequence[Bracket], name: str = "brackets") -> BracketSchedule:
    """
    Check a single bracket schedule and return it as a tuple.

    Raises:
        MalformedBracketTableError: empty schedule, first floor not zero,
            floors not strictly ascending, or a rate outside [0, 1].
    """
    schedule = tuple(brackets)
    if not schedule:
        raise MalformedBracketTableError(f"{name}: bracket schedule is empty")
    if schedule[0].floor != 0:
        raise MalformedBracketTableError(
            f"{name}: first bracket must start at 0, got {schedule[0].floor}"
        )
    previous: Optional[int] = None
    for bracket in schedule:
        if not 0 <= bracket.rate <= 1:
            raise MalformedBracketTableError(f"{name}: rate {bracket.rate} outside [0, 1]")
        if previous is not None and bracket.floor <= previous:
            raise MalformedBracketTableError(
                f"{name}: floors must be strictly ascending ({previous} then {bracket.floor})"
            )
        previous = bracket.floor
    return schedule


def _ceilings(brackets: BracketSchedule) -> Iterable[Tuple[Bracket, Optional[int]]]:
    for i, bracket in enumerate(brackets):
        ceiling = brackets[i + 1].floor if i + 1 < len(brackets) else None
        yield bracket, ceiling


def compute_bracket_tax(income: int, brackets: BracketSchedule) -> int:
    """
    Tax on ``income`` under a progressive schedule.

    Examples:
        Single 2025, $20,000 taxable: 10% of 11,925 + 12% of 8,075
        = 1,192.50 + 969.00 = 2,161.50 -> 216150 cents.
    """
    if income <= 0:
        return 0

    total = Decimal(0)
    for bracket, ceiling in _ceilings(brackets):
        if income <= bracket.floor:
            break
        top = income if ceiling is None else min(income, ceiling)
        total += to_decimal(bracket.rate) * (top - bracket.floor)
    return round_cents(total)


def _preferential_tax(ordinary: int, taxable: int, ltcg_brackets: BracketSchedule) -> int:
    """Tax on the slice (ordinary, taxable] stacked against the LTCG schedule."""
    total = Decimal(0)
    for bracket, ceiling in _ceilings(ltcg_brackets):
        top = taxable if ceiling is None else min(taxable, ceiling)
        bottom = max(ordinary, bracket.floor)
        if top > bottom:
            total += to_decimal(bracket.rate) * (top - bottom)
    return round_cents(total)


def compute_qdcg_tax(
    taxable_income: int,
    qualified_dividends: int,
    net_capital_gain: int,
    ordinary_brackets: BracketSchedule,
    ltcg_brackets: BracketSchedule,
) -> int:
    """
    Qualified Dividends and Capital Gain Tax Worksheet.

    Preferential income (qualified dividends plus net capital gain) is
    capped at taxable income and stacked on top of ordinary income. The
    result never exceeds tax on the whole amount at ordinary rates.
    """
    if taxable_income <= 0:
        return 0

    preferential = min(max(0, qualified_dividends) + max(0, net_capital_gain), taxable_income)
    ordinary = taxable_income - preferential

    stacked = (
        compute_bracket_tax(ordinary, ordinary_brackets)
        + _preferential_tax(ordinary, taxable_income, ltcg_brackets)
    )
    return min(stacked, compute_bracket_tax(taxable_income, ordinary_brackets))


def net_cap_gain_for_qdcg(schedule_d_line15: int, schedule_d_line16: int) -> int:
    """Smaller of Schedule D lines 15 and 16; zero when either is not a gain."""
    if schedule_d_line15 <= 0 or schedule_d_line16 <= 0:
        return 0
    return min(schedule_d_line15, schedule_d_line16)


def compute_ordinary_tax(income: int, filing_status: str, config: "TaxYearConfig") -> int:
    """Ordinary-rate tax for a filing status under a year's configuration."""
    return compute_bracket_tax(income, config.ordinary_brackets[filing_status])


def compute_qdcg_tax_for_status(
    taxable_income: int,
    qualified_dividends: int,
    net_capital_gain: int,
    filing_status: str,
    config: "TaxYearConfig",
) -> int:
    return compute_qdcg_tax(
        taxable_income,
        qualified_dividends,
        net_capital_gain,
        config.ordinary_brackets[filing_status],
        config.ltcg_brackets[filing_status],
    )
