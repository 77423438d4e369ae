"""
Tests for bracket math.

Tests cover:
- Progressive tax under the 2025 schedules
- Single rounding of the accumulated tax
- The qualified dividends and capital gain worksheet
- Bracket table validation
- Monotonic, continuous schedules for every filing status and year
"""

import pytest

from calculator.brackets import (
    Bracket,
    compute_bracket_tax,
    compute_ordinary_tax,
    compute_qdcg_tax,
    compute_qdcg_tax_for_status,
    net_cap_gain_for_qdcg,
    validate_bracket_schedule,
)
from calculator.exceptions import MalformedBracketTableError
from models.taxpayer import FilingStatus


class TestOrdinaryBrackets:
    """2025 ordinary rate schedules."""

    def test_single_45000(self, config_2025):
        # 10% x 11,925 + 12% x 33,075 = 1,192.50 + 3,969.00
        assert compute_ordinary_tax(4_500_000, FilingStatus.SINGLE, config_2025) == 516_150

    def test_single_20000(self, config_2025):
        # 1,192.50 + 12% x 8,075 = 2,161.50
        assert compute_ordinary_tax(2_000_000, FilingStatus.SINGLE, config_2025) == 216_150

    def test_mfj_70000(self, config_2025):
        # 10% x 23,850 + 12% x 46,150 = 2,385 + 5,538
        assert compute_ordinary_tax(7_000_000, FilingStatus.MARRIED_JOINT, config_2025) == 792_300

    def test_exactly_at_bracket_floor(self, config_2025):
        assert compute_ordinary_tax(1_192_500, FilingStatus.SINGLE, config_2025) == 119_250

    @pytest.mark.parametrize("income", [0, -100_000])
    def test_no_income_no_tax(self, config_2025, income):
        assert compute_ordinary_tax(income, FilingStatus.SINGLE, config_2025) == 0

    def test_top_bracket_open_ended(self):
        schedule = (Bracket(0, 0.10), Bracket(100_000, 0.50))
        # 10% x 1,000 + 50% x 9,000
        assert compute_bracket_tax(1_000_000, schedule) == 460_000

    def test_rounds_once_not_per_bracket(self):
        schedule = (Bracket(0, 0.105), Bracket(1, 0.105))
        # 0.105 + 0.42 = 0.525 -> 1; rounding each bracket would give 0 + 0
        assert compute_bracket_tax(5, schedule) == 1


class TestQualifiedDividendWorksheet:
    def test_preferential_income_in_zero_bracket(self, config_2025):
        # Ordinary 25,000 taxed normally, 10,000 of dividends at 0%
        tax = compute_qdcg_tax_for_status(3_500_000, 1_000_000, 0, FilingStatus.SINGLE, config_2025)
        assert tax == 276_150

    def test_stacking_across_the_15_percent_floor(self, config_2025):
        # Single: ordinary 40,000, gain 20,000; 0% up to 48,350, 15% on 11,650
        ordinary_tax = compute_ordinary_tax(4_000_000, FilingStatus.SINGLE, config_2025)
        tax = compute_qdcg_tax_for_status(6_000_000, 0, 2_000_000, FilingStatus.SINGLE, config_2025)
        assert tax == ordinary_tax + 174_750

    def test_preferential_capped_at_taxable_income(self, config_2025):
        tax = compute_qdcg_tax_for_status(1_000_000, 5_000_000, 0, FilingStatus.SINGLE, config_2025)
        assert tax == 0

    def test_never_above_regular_tax(self, config_2025):
        ordinary = config_2025.ordinary_brackets[FilingStatus.SINGLE]
        punitive = (Bracket(0, 0.5),)
        regular = compute_bracket_tax(3_000_000, ordinary)
        assert compute_qdcg_tax(3_000_000, 1_000_000, 0, ordinary, punitive) == regular

    @pytest.mark.parametrize("line15,line16,expected", [
        (500_000, 300_000, 300_000),
        (300_000, 500_000, 300_000),
        (-100_000, 500_000, 0),
        (500_000, 0, 0),
    ])
    def test_net_capital_gain(self, line15, line16, expected):
        assert net_cap_gain_for_qdcg(line15, line16) == expected


class TestValidation:
    def test_valid_schedule_returned_as_tuple(self):
        schedule = validate_bracket_schedule([Bracket(0, 0.1), Bracket(100, 0.2)])
        assert schedule == (Bracket(0, 0.1), Bracket(100, 0.2))

    @pytest.mark.parametrize("brackets", [
        [],
        [Bracket(100, 0.1)],
        [Bracket(0, 0.1), Bracket(100, 1.5)],
        [Bracket(0, -0.1)],
        [Bracket(0, 0.1), Bracket(500, 0.2), Bracket(500, 0.3)],
        [Bracket(0, 0.1), Bracket(500, 0.2), Bracket(400, 0.3)],
    ])
    def test_malformed_schedules(self, brackets):
        with pytest.raises(MalformedBracketTableError):
            validate_bracket_schedule(brackets, "test")


@pytest.fixture(params=[2025, 2026])
def any_config(request):
    return request.getfixturevalue(f"config_{request.param}")


INCOME_GRID = range(0, 80_000_000, 237_500)


class TestScheduleProperties:
    """Sweeps over every filing status in each supported year."""

    @pytest.mark.parametrize("filing_status", list(FilingStatus))
    def test_tax_never_decreases(self, any_config, filing_status):
        taxes = [compute_ordinary_tax(income, filing_status, any_config) for income in INCOME_GRID]
        assert taxes == sorted(taxes)

    @pytest.mark.parametrize("filing_status", list(FilingStatus))
    def test_marginal_rate_within_schedule(self, any_config, filing_status):
        top_rate = any_config.ordinary_brackets[filing_status][-1].rate
        previous = 0
        for income in INCOME_GRID[1:]:
            tax = compute_ordinary_tax(income, filing_status, any_config)
            assert tax - previous <= round(237_500 * top_rate) + 1
            previous = tax

    @pytest.mark.parametrize("filing_status", list(FilingStatus))
    def test_continuous_at_bracket_floors(self, any_config, filing_status):
        schedule = any_config.ordinary_brackets[filing_status]
        for bracket in schedule[1:]:
            below = compute_bracket_tax(bracket.floor - 1, schedule)
            at = compute_bracket_tax(bracket.floor, schedule)
            above = compute_bracket_tax(bracket.floor + 10_000, schedule)
            assert 0 <= at - below <= 1
            assert abs((above - at) - round(10_000 * bracket.rate)) <= 1

    @pytest.mark.parametrize("filing_status", list(FilingStatus))
    def test_preferential_tax_never_above_ordinary(self, any_config, filing_status):
        for taxable in range(0, 120_000_000, 1_950_000):
            ordinary_tax = compute_ordinary_tax(taxable, filing_status, any_config)
            for share in (0, 0.25, 0.5, 1.0):
                gain = int(taxable * share)
                tax = compute_qdcg_tax_for_status(taxable, 0, gain, filing_status, any_config)
                assert 0 <= tax <= ordinary_tax
