"""
Schedule SE (Form 1040) - Self-Employment Tax

Short Schedule SE, IRC Sections 1401 and 1402.

Net earnings are 92.35% of Schedule C net profit plus partnership
self-employment earnings (K-1 box 14, code A). The 12.4% social
security part applies only to the room left under the annual wage base
after W-2 social security wages (box 3) are counted first; the 2.9%
Medicare part applies to all net earnings. Each part is rounded on its
own before they are added. Half of the total is an adjustment to income.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from calculator.decimal_math import apply_rate
from calculator.results import TracedResult
from calculator.source_documents import k1_entries, w2_ref
from models.traced import TracedValue, traced_from_computation, traced_zero

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class ScheduleSEResult(TracedResult):
    line2: TracedValue  # Schedule C net profit + K-1 earnings
    line3: TracedValue  # net earnings from self-employment
    line4a: TracedValue  # earnings subject to social security tax
    line4b: TracedValue  # social security part
    line5: TracedValue  # Medicare part
    line6: TracedValue  # self-employment tax
    deductible_half: TracedValue

    @property
    def net_se_earnings(self) -> int:
        return self.line3.amount

    @property
    def total_se_tax(self) -> int:
        return self.line6.amount


def _zero_result(line2: TracedValue) -> ScheduleSEResult:
    return ScheduleSEResult(
        line2=line2,
        line3=traced_zero("scheduleSE.line3", "no net earnings"),
        line4a=traced_zero("scheduleSE.line4a", "no net earnings"),
        line4b=traced_zero("scheduleSE.line4b", "no net earnings"),
        line5=traced_zero("scheduleSE.line5", "no net earnings"),
        line6=traced_zero("scheduleSE.line6", "no net earnings"),
        deductible_half=traced_zero("scheduleSE.deductibleHalf", "no net earnings"),
    )


def compute_schedule_se(
    tax_return: "TaxReturn",
    net_profit: Optional[TracedValue],
    config: "TaxYearConfig",
) -> ScheduleSEResult:
    """
    Compute self-employment tax.

    Args:
        tax_return: Return holding the W-2s whose box 3 wages use up the
            wage base and the K-1s reporting self-employment earnings
        net_profit: Aggregate Schedule C net profit (``scheduleC.totalNetProfit``),
            or None without a Schedule C
        config: Tax year constants

    Returns:
        ScheduleSEResult; every line is zero when net earnings are not positive
    """
    k1_earnings = k1_entries(tax_return, "selfEmploymentEarnings")
    profit = net_profit.amount if net_profit is not None else 0
    total = profit + sum(amount for amount, _ in k1_earnings)
    if total <= 0:
        return _zero_result(traced_zero("scheduleSE.line2", "no net profit"))

    line2 = traced_from_computation(
        total,
        "scheduleSE.line2",
        ([net_profit.node_id] if net_profit is not None else []) + [ref for _, ref in k1_earnings],
        "Schedule C net profit + K-1 self-employment earnings",
    )
    line3 = traced_from_computation(
        apply_rate(line2.amount, config.se_net_earnings_factor),
        "scheduleSE.line3",
        ["scheduleSE.line2"],
        f"line 2 x {config.se_net_earnings_factor:.2%}",
    )
    if line3.amount <= 0:
        return _zero_result(line2)

    ss_wages = sum(w.box3 for w in tax_return.w2s)
    room = max(0, config.ss_wage_base - ss_wages)
    line4a = traced_from_computation(
        min(line3.amount, room),
        "scheduleSE.line4a",
        ["scheduleSE.line3"] + [w2_ref(w.id, "box3") for w in tax_return.w2s],
        "min(line 3, wage base - W-2 social security wages)",
    )
    line4b = traced_from_computation(
        apply_rate(line4a.amount, config.ss_rate),
        "scheduleSE.line4b",
        ["scheduleSE.line4a"],
        f"line 4a x {config.ss_rate:.1%}",
    )
    line5 = traced_from_computation(
        apply_rate(line3.amount, config.medicare_rate),
        "scheduleSE.line5",
        ["scheduleSE.line3"],
        f"line 3 x {config.medicare_rate:.1%}",
    )
    line6 = traced_from_computation(
        line4b.amount + line5.amount, "scheduleSE.line6", ["scheduleSE.line4b", "scheduleSE.line5"], "line 4b + line 5"
    )
    deductible_half = traced_from_computation(
        apply_rate(line6.amount, config.se_deductible_fraction),
        "scheduleSE.deductibleHalf",
        ["scheduleSE.line6"],
        f"line 6 x {config.se_deductible_fraction:.0%}",
    )
    return ScheduleSEResult(
        line2=line2, line3=line3, line4a=line4a, line4b=line4b, line5=line5, line6=line6,
        deductible_half=deductible_half,
    )
