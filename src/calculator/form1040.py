"""
Form 1040 orchestrator.

Composes the schedules, credits and other taxes into the federal return:

    income (lines 1-9, with Schedules B, C, D, E and the Social Security
    worksheet) -> Schedule 1 adjustments (10) -> AGI (11)
    -> deduction (12-14) -> taxable income (15)
    -> tax and AMT (16-18) -> nonrefundable credits (19-22)
    -> other taxes (23-24) -> payments and refundable credits (25-33)
    -> overpaid (34) or amount owed (37)

The graph is fixed. Every line is a computed TracedValue whose inputs are
exactly the upstream nodes its arithmetic used. Nonrefundable credits are
applied in a fixed order (child tax credit, foreign tax credit, dependent
care credit), each limited to the tax left by the ones before it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

from calculator.adjustments import AdjustmentsResult, compute_adjustments
from calculator.amt import AMTResult, compute_amt
from calculator.brackets import compute_ordinary_tax, compute_qdcg_tax_for_status, net_cap_gain_for_qdcg
from calculator.credits import (
    ChildTaxCreditResult,
    DependentCareCreditResult,
    EarnedIncomeCreditResult,
    ForeignTaxCreditResult,
    compute_child_tax_credit,
    compute_dependent_care_credit,
    compute_earned_income_credit,
    compute_foreign_tax_credit,
)
from calculator.other_taxes import (
    AdditionalMedicareTaxResult,
    NIITResult,
    compute_additional_medicare_tax,
    compute_niit,
)
from calculator.qbi_calculator import QBIDeductionResult, compute_qbi_deduction
from calculator.results import TracedResult
from calculator.schedules import (
    ScheduleAResult,
    ScheduleBResult,
    ScheduleCResult,
    ScheduleDResult,
    ScheduleEResult,
    ScheduleSEResult,
    compute_schedule_a,
    compute_schedule_b,
    compute_schedule_c,
    compute_schedule_d,
    compute_schedule_e,
    compute_schedule_se,
)
from calculator.social_security import SocialSecurityResult, compute_taxable_social_security
from calculator.source_documents import (
    OTHER_INCOME_REF,
    div_ref,
    estimated_ref,
    int_ref,
    k1_entries,
    ssa_ref,
    w2_ref,
)
from models.deductions import DeductionMethod
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation, traced_from_document, traced_zero

if TYPE_CHECKING:
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Form1040Result(TracedResult):
    tax_year: int
    filing_status: FilingStatus
    deduction_method: DeductionMethod

    # Income
    line1a: TracedValue  # W-2 wages
    line1z: TracedValue
    line2a: TracedValue  # tax-exempt interest
    line2b: TracedValue  # taxable interest
    line3a: TracedValue  # qualified dividends
    line3b: TracedValue  # ordinary dividends
    line6a: TracedValue  # social security benefits
    line6b: TracedValue  # taxable social security benefits
    line7: TracedValue  # capital gain or loss
    line8: TracedValue  # additional income from Schedule 1
    line9: TracedValue  # total income

    # Adjustments and AGI
    line10: TracedValue
    line11: TracedValue  # AGI

    # Deductions and taxable income
    standard_deduction: TracedValue
    line12: TracedValue
    line13: TracedValue  # QBI deduction
    line14: TracedValue
    line15: TracedValue  # taxable income

    # Tax and credits
    line16: TracedValue
    line17: TracedValue  # Schedule 2 part I, AMT
    line18: TracedValue
    line19: TracedValue  # child tax credit / credit for other dependents
    tax_after_ctc: TracedValue
    tax_after_ftc: TracedValue
    line20: TracedValue  # Schedule 3 nonrefundable credits
    line21: TracedValue
    line22: TracedValue
    line23: TracedValue  # other taxes
    line24: TracedValue  # total tax

    # Payments
    line25: TracedValue  # federal income tax withheld
    line26: TracedValue  # estimated payments
    line27: TracedValue  # earned income credit
    line28: TracedValue  # additional child tax credit
    line32: TracedValue
    line33: TracedValue  # total payments

    # Refund or amount owed
    line34: TracedValue
    line37: TracedValue

    # Supporting values shared by several modules
    earned_income: TracedValue
    investment_interest_limit: TracedValue  # Form 4952 net investment income

    # Schedules, credits and other taxes; None when not applicable
    schedule_a: Optional[ScheduleAResult]
    schedule_b: ScheduleBResult
    schedule_c: Optional[ScheduleCResult]
    schedule_d: Optional[ScheduleDResult]
    schedule_e: Optional[ScheduleEResult]
    schedule_se: Optional[ScheduleSEResult]
    social_security: Optional[SocialSecurityResult]
    adjustments: AdjustmentsResult
    qbi: Optional[QBIDeductionResult]
    child_tax_credit: Optional[ChildTaxCreditResult]
    foreign_tax_credit: Optional[ForeignTaxCreditResult]
    dependent_care_credit: Optional[DependentCareCreditResult]
    earned_income_credit: EarnedIncomeCreditResult
    additional_medicare_tax: AdditionalMedicareTaxResult
    niit: NIITResult
    amt: AMTResult

    @property
    def agi(self) -> int:
        return self.line11.amount

    @property
    def taxable_income(self) -> int:
        return self.line15.amount

    @property
    def total_tax(self) -> int:
        return self.line24.amount

    @property
    def refund(self) -> int:
        return self.line34.amount

    @property
    def amount_owed(self) -> int:
        return self.line37.amount

    def executed_schedules(self) -> List[str]:
        names = [
            ("scheduleA", self.schedule_a),
            ("scheduleB", self.schedule_b if self.schedule_b.required else None),
            ("scheduleC", self.schedule_c),
            ("scheduleD", self.schedule_d),
            ("scheduleE", self.schedule_e),
            ("scheduleSE", self.schedule_se),
            ("form8995", self.qbi),
            ("schedule8812", self.child_tax_credit),
            ("form1116", self.foreign_tax_credit),
            ("form2441", self.dependent_care_credit),
            ("form6251", self.amt if self.amt.amt > 0 else None),
        ]
        return [name for name, result in names if result is not None]


def _sum(node_id: str, parts: Sequence[TracedValue], formula: str) -> TracedValue:
    """Sum of ``parts``; inputs are exactly the parts summed."""
    return traced_from_computation(sum(p.amount for p in parts), node_id, [p.node_id for p in parts], formula)


def _copy(node_id: str, source: TracedValue, formula: str) -> TracedValue:
    return traced_from_computation(source.amount, node_id, [source.node_id], formula)


def compute_standard_deduction(
    tax_return: "TaxReturn",
    earned_income: TracedValue,
    config: "TaxYearConfig",
) -> TracedValue:
    """
    Standard deduction with the additional amount for age 65 or blindness.

    A filer who can be claimed as a dependent is limited to the greater of
    $1,350 or earned income plus $450, never more than the regular amount;
    the additional amounts are added on top of the limited base.
    """
    fs = tax_return.filing_status
    year = tax_return.tax_year
    base = config.standard_deduction[fs]

    def is_65(person, flag: bool) -> bool:
        age = person.age_at_year_end(year) if person is not None else None
        return flag or (age is not None and age >= 65)

    conditions = 0
    conditions += is_65(tax_return.taxpayer, tax_return.deductions.taxpayer_age_65)
    conditions += tax_return.taxpayer.is_blind
    if fs in (FilingStatus.MARRIED_JOINT, FilingStatus.MARRIED_SEPARATE) and tax_return.spouse is not None:
        conditions += is_65(tax_return.spouse, tax_return.deductions.spouse_age_65)
        conditions += tax_return.spouse.is_blind
    additional = conditions * config.additional_standard_deduction[fs]

    if tax_return.can_be_claimed_as_dependent:
        limited = min(
            base,
            max(config.dependent_filer_minimum, earned_income.amount + config.dependent_filer_earned_addon),
        )
        return traced_from_computation(
            limited + additional,
            "standardDeduction",
            [earned_income.node_id],
            "dependent filer: min(standard, max($1,350, earned income + $450)) + additional",
        )
    return traced_from_computation(
        base + additional,
        "standardDeduction",
        [],
        f"standard deduction for {fs.value} + {conditions} additional amounts",
    )


def compute_form1040(tax_return: "TaxReturn", config: "TaxYearConfig") -> Form1040Result:
    """
    Compute the complete federal return.

    Args:
        tax_return: Caller-owned return; never mutated
        config: Constants for the return's tax year

    Returns:
        Form1040Result with every line traced
    """
    fs = tax_return.filing_status
    logger.debug(f"Computing Form 1040 for tax year {config.tax_year}")

    # Schedules with no dependency on income totals
    schedule_b = compute_schedule_b(tax_return, config)
    schedule_c = compute_schedule_c(tax_return, config)
    schedule_d = compute_schedule_d(tax_return, config)
    business_profit = schedule_c.total_net_profit if schedule_c is not None else None
    schedule_se = None
    if schedule_c is not None or k1_entries(tax_return, "selfEmploymentEarnings"):
        schedule_se = compute_schedule_se(tax_return, business_profit, config)
    se_deduction = schedule_se.deductible_half if schedule_se is not None else None

    # Income
    line1a = traced_from_computation(
        sum(w.box1 for w in tax_return.w2s),
        "form1040.line1a",
        [w2_ref(w.id, "box1") for w in tax_return.w2s],
        "sum of W-2 box 1",
    )
    line1z = _copy("form1040.line1z", line1a, "line 1a")
    line2a = traced_from_computation(
        sum(f.box8 for f in tax_return.form_1099_ints) + sum(f.box12 for f in tax_return.form_1099_divs),
        "form1040.line2a",
        [int_ref(f.id, "box8") for f in tax_return.form_1099_ints]
        + [div_ref(f.id, "box12") for f in tax_return.form_1099_divs],
        "1099-INT box 8 + 1099-DIV box 12",
    )
    line2b = _copy("form1040.line2b", schedule_b.line4, "Schedule B, line 4")
    k1_qualified = k1_entries(tax_return, "qualifiedDividends")
    line3a = traced_from_computation(
        sum(f.box1b for f in tax_return.form_1099_divs) + sum(amount for amount, _ in k1_qualified),
        "form1040.line3a",
        [div_ref(f.id, "box1b") for f in tax_return.form_1099_divs] + [ref for _, ref in k1_qualified],
        "1099-DIV box 1b + K-1 qualified dividends",
    )
    line3b = _copy("form1040.line3b", schedule_b.line6, "Schedule B, line 6")
    if schedule_d is not None:
        line7 = _copy("form1040.line7", schedule_d.line21, "Schedule D, line 21")
    else:
        line7 = traced_zero("form1040.line7", "no capital gains or losses")

    other_income = traced_from_document(
        tax_return.other_income, "otherIncome", "amount", "Other income", node_id=OTHER_INCOME_REF
    )
    business_parts = [business_profit] if business_profit is not None else []
    schedule_e = compute_schedule_e(
        tax_return, [line1z, line2b, line3b, line7] + business_parts + [other_income], config
    )
    line8_parts = business_parts + ([schedule_e.line41] if schedule_e is not None else []) + [other_income]
    line8 = _sum("form1040.line8", line8_parts, "Schedule 1: business income + Schedule E + other income")

    social_security = compute_taxable_social_security(
        tax_return, [line1z, line2b, line3b, line7, line8], line2a, se_deduction, config
    )
    if social_security is not None:
        line6a, line6b = social_security.line6a, social_security.line6b
    else:
        line6a = traced_zero("form1040.line6a", "no social security benefits")
        line6b = traced_zero("form1040.line6b", "no social security benefits")
    line9 = _sum("form1040.line9", [line1z, line2b, line3b, line6b, line7, line8], "line 1z + 2b + 3b + 6b + 7 + 8")

    # Adjustments and AGI
    earned_parts = [line1a]
    earned_amount = line1a.amount
    if schedule_se is not None:
        earned_parts.append(schedule_se.line3)
        earned_amount += max(0, schedule_se.line3.amount)
    earned_income = traced_from_computation(
        earned_amount, "earnedIncome", [p.node_id for p in earned_parts], "wages + net self-employment earnings"
    )
    adjustments = compute_adjustments(tax_return, line9, earned_income, se_deduction, config)
    line10 = _copy("form1040.line10", adjustments.line26, "Schedule 1, line 26")
    line11 = traced_from_computation(
        line9.amount - line10.amount, "form1040.line11", ["form1040.line9", "form1040.line10"], "line 9 - line 10"
    )

    # Deductions
    standard = compute_standard_deduction(tax_return, earned_income, config)
    schedule_d_line7 = [schedule_d.line7] if schedule_d is not None else []
    investment_interest_limit = traced_from_computation(
        line2b.amount
        + max(0, line3b.amount - line3a.amount)
        + sum(max(0, v.amount) for v in schedule_d_line7),
        "form4952.netInvestmentIncome",
        ["form1040.line2b", "form1040.line3b", "form1040.line3a"] + [v.node_id for v in schedule_d_line7],
        "taxable interest + nonqualified dividends + net short-term gain",
    )

    schedule_a = None
    if tax_return.deductions.method == DeductionMethod.ITEMIZED:
        schedule_a = compute_schedule_a(tax_return, line11, investment_interest_limit, config)

    if schedule_a is not None:
        itemize = schedule_a.line17.amount > standard.amount
        line12 = traced_from_computation(
            max(standard.amount, schedule_a.line17.amount),
            "form1040.line12",
            ["standardDeduction", "scheduleA.line17"],
            "larger of standard deduction and itemized deductions",
        )
    else:
        itemize = False
        line12 = _copy("form1040.line12", standard, "standard deduction")
    method = DeductionMethod.ITEMIZED if itemize else DeductionMethod.STANDARD

    k1_qbi = k1_entries(tax_return, "section199AQBI")
    qbi_parts = business_parts
    qbi_income = traced_from_computation(
        sum(p.amount for p in qbi_parts) + sum(amount for amount, _ in k1_qbi),
        "form8995.qbi",
        [p.node_id for p in qbi_parts] + [ref for _, ref in k1_qbi],
        "Schedule C net profit + K-1 Section 199A income",
    )
    qbi = compute_qbi_deduction(tax_return, qbi_income, line11, line12, line3a, schedule_d, config)
    if qbi is not None:
        line13 = _copy("form1040.line13", qbi.deduction, "Form 8995")
    else:
        line13 = traced_zero("form1040.line13", "no qualified business income")
    line14 = _sum("form1040.line14", [line12, line13], "line 12 + line 13")
    line15 = traced_from_computation(
        max(0, line11.amount - line14.amount),
        "form1040.line15",
        ["form1040.line11", "form1040.line14"],
        "max(0, line 11 - line 14)",
    )

    # Tax
    net_cg = net_cap_gain_for_qdcg(schedule_d.line15.amount, schedule_d.line16.amount) if schedule_d else 0
    if line3a.amount > 0 or net_cg > 0:
        qdcg_inputs = ["form1040.line15", "form1040.line3a"]
        if schedule_d is not None:
            qdcg_inputs += ["scheduleD.line15", "scheduleD.line16"]
        line16 = traced_from_computation(
            compute_qdcg_tax_for_status(line15.amount, line3a.amount, net_cg, fs, config),
            "form1040.line16",
            qdcg_inputs,
            "Qualified Dividends and Capital Gain Tax Worksheet",
        )
    else:
        line16 = traced_from_computation(
            compute_ordinary_tax(line15.amount, fs, config),
            "form1040.line16",
            ["form1040.line15"],
            "tax on line 15 from the ordinary rate schedule",
        )
    amt = compute_amt(
        tax_return,
        line11,
        line12,
        line14,
        method,
        schedule_a,
        line3a,
        net_cg,
        ["scheduleD.line15", "scheduleD.line16"] if schedule_d is not None else [],
        line16,
        config,
    )
    line17 = _copy("form1040.line17", amt.line11, "Form 6251, line 11")
    line18 = _sum("form1040.line18", [line16, line17], "line 16 + line 17")

    # Nonrefundable credits, in order
    ctc = compute_child_tax_credit(tax_return, line11, line18, earned_income, config)
    if ctc is not None:
        line19 = _copy("form1040.line19", ctc.non_refundable_credit, "Schedule 8812")
    else:
        line19 = traced_zero("form1040.line19", "no dependents")
    tax_after_ctc = traced_from_computation(
        max(0, line18.amount - line19.amount),
        "credits.taxAfterCTC",
        ["form1040.line18", "form1040.line19"],
        "line 18 - line 19",
    )

    ftc = compute_foreign_tax_credit(tax_return, line15, line18, tax_after_ctc, config)
    if ftc is not None:
        tax_after_ftc = traced_from_computation(
            max(0, tax_after_ctc.amount - ftc.credit.amount),
            "credits.taxAfterFTC",
            ["credits.taxAfterCTC", "credits.foreignTaxCredit"],
            "tax after child tax credit - foreign tax credit",
        )
    else:
        tax_after_ftc = _copy("credits.taxAfterFTC", tax_after_ctc, "no foreign tax credit")

    dcc = compute_dependent_care_credit(tax_return, line11, earned_income, tax_after_ftc, config)

    schedule3 = [c.credit for c in (ftc, dcc) if c is not None]
    line20 = _sum("form1040.line20", schedule3, "Schedule 3: foreign tax credit + dependent care credit")
    line21 = _sum("form1040.line21", [line19, line20], "line 19 + line 20")
    line22 = traced_from_computation(
        max(0, line18.amount - line21.amount),
        "form1040.line22",
        ["form1040.line18", "form1040.line21"],
        "max(0, line 18 - line 21)",
    )

    # Other taxes
    amt_8959 = compute_additional_medicare_tax(
        tax_return, schedule_se.line3 if schedule_se is not None else None, config
    )
    niit = compute_niit(
        tax_return, line11, line2b, line3b, line7, config,
        rental_income=schedule_e.allowed_passive if schedule_e is not None else None,
    )
    other = [amt_8959.additional_tax, niit.niit]
    if schedule_se is not None:
        other.insert(0, schedule_se.line6)
    line23 = _sum("form1040.line23", other, "Schedule 2: SE tax + Additional Medicare Tax + NIIT")
    line24 = _sum("form1040.line24", [line22, line23], "line 22 + line 23")

    # Payments
    line25 = traced_from_computation(
        sum(w.box2 for w in tax_return.w2s)
        + sum(f.box4 for f in tax_return.form_1099_ints)
        + sum(f.box4 for f in tax_return.form_1099_divs)
        + sum(f.box6 for f in tax_return.form_ssa1099s)
        + amt_8959.withholding_credit.amount,
        "form1040.line25",
        [w2_ref(w.id, "box2") for w in tax_return.w2s]
        + [int_ref(f.id, "box4") for f in tax_return.form_1099_ints]
        + [div_ref(f.id, "box4") for f in tax_return.form_1099_divs]
        + [ssa_ref(f.id, "box6") for f in tax_return.form_ssa1099s]
        + [amt_8959.withholding_credit.node_id],
        "W-2 box 2 + 1099 box 4 + SSA-1099 box 6 + Form 8959 withholding",
    )
    payments = tax_return.estimated_payments
    line26 = traced_from_computation(
        payments.q1 + payments.q2 + payments.q3 + payments.q4,
        "form1040.line26",
        [estimated_ref(q) for q in range(1, 5)],
        "estimated tax payments",
    )

    eitc_investment_income = traced_from_computation(
        line2a.amount + line2b.amount + line3b.amount + max(0, line7.amount),
        "eitc.investmentIncome",
        ["form1040.line2a", "form1040.line2b", "form1040.line3b", "form1040.line7"],
        "tax-exempt interest + taxable interest + ordinary dividends + capital gain",
    )
    eitc = compute_earned_income_credit(tax_return, earned_income, line11, eitc_investment_income, config)
    line27 = _copy("form1040.line27", eitc.credit, "earned income credit")
    if ctc is not None:
        line28 = _copy("form1040.line28", ctc.additional_ctc, "Schedule 8812 additional child tax credit")
    else:
        line28 = traced_zero("form1040.line28", "no dependents")
    line32 = _sum("form1040.line32", [line27, line28], "line 27 + line 28")
    line33 = _sum("form1040.line33", [line25, line26, line32], "line 25 + line 26 + line 32")

    line34 = traced_from_computation(
        max(0, line33.amount - line24.amount),
        "form1040.line34",
        ["form1040.line33", "form1040.line24"],
        "overpaid: line 33 - line 24",
    )
    line37 = traced_from_computation(
        max(0, line24.amount - line33.amount),
        "form1040.line37",
        ["form1040.line24", "form1040.line33"],
        "amount owed: line 24 - line 33",
    )

    return Form1040Result(
        tax_year=config.tax_year,
        filing_status=fs,
        deduction_method=method,
        line1a=line1a, line1z=line1z, line2a=line2a, line2b=line2b, line3a=line3a, line3b=line3b,
        line6a=line6a, line6b=line6b,
        line7=line7, line8=line8, line9=line9,
        line10=line10, line11=line11,
        standard_deduction=standard,
        line12=line12, line13=line13, line14=line14, line15=line15,
        line16=line16, line17=line17, line18=line18, line19=line19,
        tax_after_ctc=tax_after_ctc, tax_after_ftc=tax_after_ftc,
        line20=line20, line21=line21, line22=line22, line23=line23, line24=line24,
        line25=line25, line26=line26, line27=line27, line28=line28, line32=line32, line33=line33,
        line34=line34, line37=line37,
        earned_income=earned_income,
        investment_interest_limit=investment_interest_limit,
        schedule_a=schedule_a,
        schedule_b=schedule_b,
        schedule_c=schedule_c,
        schedule_d=schedule_d,
        schedule_e=schedule_e,
        schedule_se=schedule_se,
        social_security=social_security,
        adjustments=adjustments,
        qbi=qbi,
        child_tax_credit=ctc,
        foreign_tax_credit=ftc,
        dependent_care_credit=dcc,
        earned_income_credit=eitc,
        additional_medicare_tax=amt_8959,
        niit=niit,
        amt=amt,
    )
