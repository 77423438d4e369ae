"""
Residency apportionment.

The fraction of a tax year attributable to residency in one state:
1 for full-year residents, 0 for nonresidents, and for part-year
residents the days from move-in through move-out (both inclusive,
clamped to the tax year) over the days in the year.

A part-year entry with no dates, or with a move-out date before the
move-in date, is treated as a full year.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from calculator.decimal_math import prorate
from models.state_return import ResidencyType, StateReturnConfig


@dataclass(frozen=True)
class Apportionment:
    days_in_state: int
    days_in_year: int

    @property
    def ratio(self) -> float:
        return self.days_in_state / self.days_in_year

    @property
    def is_full_year(self) -> bool:
        return self.days_in_state == self.days_in_year

    def apply(self, amount: int) -> int:
        """Prorate a cent amount by the residency fraction."""
        if self.is_full_year:
            return amount
        return prorate(amount, self.days_in_state, self.days_in_year)


def days_in_year(tax_year: int) -> int:
    return 366 if calendar.isleap(tax_year) else 365


def compute_apportionment(config: StateReturnConfig, tax_year: int) -> Apportionment:
    total = days_in_year(tax_year)
    if config.residency_type == ResidencyType.FULL_YEAR:
        return Apportionment(total, total)
    if config.residency_type == ResidencyType.NONRESIDENT:
        return Apportionment(0, total)

    move_in, move_out = config.move_in_date, config.move_out_date
    if move_in is None and move_out is None:
        return Apportionment(total, total)
    if move_in is not None and move_out is not None and move_out < move_in:
        return Apportionment(total, total)

    year_start = date(tax_year, 1, 1)
    year_end = date(tax_year, 12, 31)
    start = max(move_in or year_start, year_start)
    end = min(move_out or year_end, year_end)

    # Dates entirely outside the year leave no days present
    present = (end - start).days + 1
    return Apportionment(min(max(present, 0), total), total)


def compute_apportionment_ratio(config: StateReturnConfig, tax_year: int) -> float:
    """Residency fraction of the year, in [0, 1]."""
    return compute_apportionment(config, tax_year).ratio
