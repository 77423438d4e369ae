"""
Taxable Social Security benefits (IRS Publication 915 worksheet).

Provisional income is other income plus tax-exempt interest plus half of
the benefits, less the adjustments that do not depend on modified AGI.
Up to 50% of the benefits is taxable above the base amount and up to
85% above the additional amount, never more than 85% of the benefits.
Married filing separately uses base amounts of zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from calculator.decimal_math import apply_rate
from calculator.results import TracedResult
from calculator.source_documents import adjustment_ref, ssa_ref
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class SocialSecurityResult(TracedResult):
    line6a: TracedValue  # net benefits, SSA-1099 box 5
    half_benefits: TracedValue
    provisional_income: TracedValue
    excess_over_base: TracedValue
    excess_over_additional: TracedValue
    tier1: TracedValue  # up to 50% of benefits
    tier2: TracedValue  # 85% of income over the additional amount
    line6b: TracedValue  # taxable benefits

    @property
    def taxable_benefits(self) -> int:
        return self.line6b.amount


def compute_taxable_social_security(
    tax_return: "TaxReturn",
    other_income: Sequence[TracedValue],
    tax_exempt_interest: TracedValue,
    se_deduction: Optional[TracedValue],
    config: "TaxYearConfig",
) -> Optional[SocialSecurityResult]:
    """
    Run the Social Security Benefits Worksheet.

    Args:
        tax_return: Return holding the SSA-1099s
        other_income: Form 1040 lines 1z, 2b, 3b, 7 and 8
        tax_exempt_interest: Form 1040 line 2a
        se_deduction: ``scheduleSE.deductibleHalf`` when self-employed
        config: Tax year constants

    Returns:
        SocialSecurityResult, or None without an SSA-1099

    Examples:
        Single, $20,000 benefits, $30,000 other income:
        provisional 30,000 + 10,000 = 40,000; over base 15,000;
        over additional 6,000; tier 1 = min(10,000, 50% x 9,000) = 4,500;
        tier 2 = 85% x 6,000 = 5,100; taxable = min(9,600, 17,000) = $9,600.
    """
    forms = tax_return.form_ssa1099s
    if not forms:
        return None
    fs = tax_return.filing_status

    line6a = traced_from_computation(
        sum(f.box5 for f in forms),
        "form1040.line6a",
        [ssa_ref(f.id, "box5") for f in forms],
        "sum of SSA-1099 box 5",
    )
    benefits = max(0, line6a.amount)
    half = traced_from_computation(
        apply_rate(benefits, config.ss_benefits_tier1_rate),
        "ssWorksheet.halfBenefits",
        ["form1040.line6a"],
        f"line 6a x {config.ss_benefits_tier1_rate:.0%}",
    )

    adjustments = tax_return.adjustments
    adjustment_amount = adjustments.educator_expenses + adjustments.hsa_deduction
    adjustment_inputs = [adjustment_ref("educatorExpenses"), adjustment_ref("hsaDeduction")]
    if se_deduction is not None:
        adjustment_amount += se_deduction.amount
        adjustment_inputs.append(se_deduction.node_id)
    parts = list(other_income) + [tax_exempt_interest, half]
    provisional = traced_from_computation(
        max(0, sum(p.amount for p in parts) - adjustment_amount),
        "ssWorksheet.provisionalIncome",
        [p.node_id for p in parts] + adjustment_inputs,
        "other income + tax-exempt interest + half of benefits - adjustments",
    )

    base = config.ss_benefits_base_amount[fs]
    additional = config.ss_benefits_additional_amount[fs]
    excess_base = traced_from_computation(
        max(0, provisional.amount - base),
        "ssWorksheet.excessOverBase",
        ["ssWorksheet.provisionalIncome"],
        f"provisional income over ${base // 100:,}",
    )
    excess_additional = traced_from_computation(
        max(0, excess_base.amount - (additional - base)),
        "ssWorksheet.excessOverAdditional",
        ["ssWorksheet.excessOverBase"],
        f"provisional income over ${additional // 100:,}",
    )
    tier1 = traced_from_computation(
        min(half.amount, apply_rate(min(excess_base.amount, additional - base), config.ss_benefits_tier1_rate)),
        "ssWorksheet.tier1",
        ["ssWorksheet.halfBenefits", "ssWorksheet.excessOverBase"],
        f"min(half of benefits, {config.ss_benefits_tier1_rate:.0%} of income between base and additional amounts)",
    )
    tier2 = traced_from_computation(
        apply_rate(excess_additional.amount, config.ss_benefits_tier2_rate),
        "ssWorksheet.tier2",
        ["ssWorksheet.excessOverAdditional"],
        f"{config.ss_benefits_tier2_rate:.0%} of income over the additional amount",
    )
    line6b = traced_from_computation(
        min(tier1.amount + tier2.amount, apply_rate(benefits, config.ss_benefits_tier2_rate)),
        "form1040.line6b",
        ["ssWorksheet.tier1", "ssWorksheet.tier2", "form1040.line6a"],
        f"min(tier 1 + tier 2, {config.ss_benefits_tier2_rate:.0%} of benefits)",
    )
    return SocialSecurityResult(
        line6a=line6a,
        half_benefits=half,
        provisional_income=provisional,
        excess_over_base=excess_base,
        excess_over_additional=excess_additional,
        tier1=tier1,
        tier2=tier2,
        line6b=line6b,
    )
