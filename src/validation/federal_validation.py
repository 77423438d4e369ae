"""
Return validation.

Scans the input return and the computed result for conditions the user
should know about: features the engine does not model, source documents
whose numbers do not add up, and scope notices. Validation never blocks
computation and never changes a computed amount.

Codes are stable strings; interfaces key off them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from calculator.decimal_math import apply_rate, format_dollars
from models.state_return import ResidencyType
from models.taxpayer import has_valid_ssn

if TYPE_CHECKING:
    from calculator.form1040 import Form1040Result
    from calculator.state.state_module import StateComputeResult
    from calculator.tax_year_config import TaxYearConfig
    from models.tax_return import TaxReturn

# Box 4 may differ from 6.2% of box 3 by rounding on each paycheck
SS_WITHHOLDING_TOLERANCE = 100


class ValidationSeverity(str, Enum):
    """Finding severity."""
    INFO = "info"          # Scope disclosure, informational only
    WARNING = "warning"    # Computed with a conservative default or as entered
    ERROR = "error"        # Result should not be relied on


class FindingCategory(str, Enum):
    UNSUPPORTED = "unsupported"
    DATA_QUALITY = "data-quality"
    ACCURACY = "accuracy"
    COMPLIANCE = "compliance"


@dataclass(frozen=True)
class ValidationFinding:
    """One finding about a computed return."""
    code: str
    severity: ValidationSeverity
    message: str
    category: FindingCategory
    irs_citation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        data["category"] = self.category.value
        return data


def _finding(code, severity, message, category, irs_citation=None) -> ValidationFinding:
    return ValidationFinding(code, severity, message, category, irs_citation)


def validate_scope(tax_return: "TaxReturn") -> List[ValidationFinding]:
    findings = [
        _finding(
            "SCOPE_LIMITATIONS", ValidationSeverity.INFO,
            "Supported: W-2 wages, interest, dividends, capital gains (Schedule D), sole proprietorships "
            "(Schedule C/SE), rental real estate and Schedule K-1 income (Schedule E), Social Security "
            "benefits, IRA and student loan interest deductions, itemized deductions, the alternative "
            "minimum tax, child tax, earned income, dependent care and foreign tax credits. Not supported: "
            "retirement distributions, unemployment compensation, farm income, education credits, the saver's "
            "credit and the Premium Tax Credit.",
            FindingCategory.UNSUPPORTED, "Form 1040",
        ),
    ]
    if tax_return.nonresident_alien:
        findings.append(_finding(
            "NONRESIDENT_ALIEN_NOT_SUPPORTED", ValidationSeverity.ERROR,
            "Nonresident aliens file Form 1040-NR, which is not supported. The result was computed as a "
            "Form 1040 and should not be relied on.",
            FindingCategory.UNSUPPORTED, "Form 1040-NR",
        ))
    for key in tax_return.unrecognized_inputs:
        findings.append(_finding(
            "UNRECOGNIZED_INPUT", ValidationSeverity.WARNING,
            f"Input '{key}' is not recognized and was ignored. Any income or tax it reports is not "
            "included in the result.",
            FindingCategory.UNSUPPORTED,
        ))
    return findings


def validate_documents(tax_return: "TaxReturn", config: "TaxYearConfig") -> List[ValidationFinding]:
    """Source-document arithmetic. Amounts are always used as entered."""
    findings = []

    for div in tax_return.form_1099_divs:
        if div.box1b > div.box1a:
            findings.append(_finding(
                "DIV_QUALIFIED_EXCEEDS_ORDINARY", ValidationSeverity.WARNING,
                f"1099-DIV from {div.payer_name}: qualified dividends (box 1b, {format_dollars(div.box1b)}) "
                f"exceed total ordinary dividends (box 1a, {format_dollars(div.box1a)}). Please verify the form.",
                FindingCategory.DATA_QUALITY, "Form 1099-DIV",
            ))

    employee_ss_rate = config.ss_rate / 2
    for w2 in tax_return.w2s:
        if w2.box3 > config.ss_wage_base:
            findings.append(_finding(
                "W2_SS_WAGES_OVER_BASE", ValidationSeverity.WARNING,
                f"W-2 from {w2.employer_name}: social security wages (box 3, {format_dollars(w2.box3)}) exceed "
                f"the {config.tax_year} wage base of {format_dollars(config.ss_wage_base)}.",
                FindingCategory.DATA_QUALITY, "Form W-2, box 3",
            ))
        expected = apply_rate(min(w2.box3, config.ss_wage_base), employee_ss_rate)
        if abs(w2.box4 - expected) > SS_WITHHOLDING_TOLERANCE:
            findings.append(_finding(
                "W2_SS_WITHHOLDING_MISMATCH", ValidationSeverity.WARNING,
                f"W-2 from {w2.employer_name}: social security tax withheld (box 4, {format_dollars(w2.box4)}) "
                f"does not match {employee_ss_rate:.1%} of box 3 ({format_dollars(expected)}). "
                "Excess withholding from multiple employers is not claimed automatically.",
                FindingCategory.DATA_QUALITY, "Form W-2, box 4",
            ))

    return findings


def validate_self_employment(tax_return: "TaxReturn", form1040: "Form1040Result") -> List[ValidationFinding]:
    findings = []
    for biz in tax_return.schedule_c_businesses:
        if biz.has_inventory:
            findings.append(_finding(
                "SCHEDULE_C_INVENTORY", ValidationSeverity.WARNING,
                f"{biz.business_name}: inventory accounting (Schedule C Part III) is not modeled. "
                "Cost of goods sold is used as entered.",
                FindingCategory.UNSUPPORTED, "Schedule C, Part III",
            ))
        if biz.has_vehicle:
            findings.append(_finding(
                "SCHEDULE_C_VEHICLE", ValidationSeverity.WARNING,
                f"{biz.business_name}: vehicle expenses (Schedule C Part IV) are not computed. "
                "Include the deductible amount in car and truck expenses.",
                FindingCategory.UNSUPPORTED, "Schedule C, Part IV",
            ))

    if form1040.qbi is not None and form1040.qbi.above_threshold:
        findings.append(_finding(
            "QBI_ABOVE_THRESHOLD", ValidationSeverity.WARNING,
            "Taxable income is above the QBI threshold. The wage and property limitations (Form 8995-A) "
            "are not modeled, so no qualified business income deduction was taken.",
            FindingCategory.UNSUPPORTED, "Form 8995-A",
        ))
    return findings


def validate_supplemental_income(tax_return: "TaxReturn", form1040: "Form1040Result") -> List[ValidationFinding]:
    findings = []
    for k1 in tax_return.schedule_k1s:
        findings.append(_finding(
            "K1_SIMPLIFIED", ValidationSeverity.WARNING,
            f"Schedule K-1 from {k1.entity_name}: amounts are used as reported. Basis, at-risk and "
            "material participation limits are not checked, and rental income is treated as passive.",
            FindingCategory.ACCURACY, "IRC Sections 465, 469 and 704(d)",
        ))

    schedule_e = form1040.schedule_e
    if schedule_e is not None and schedule_e.suspended_loss > 0:
        findings.append(_finding(
            "PASSIVE_LOSS_SUSPENDED", ValidationSeverity.WARNING,
            f"{format_dollars(schedule_e.suspended_loss)} of rental loss exceeds the special allowance "
            f"({format_dollars(schedule_e.special_allowance.amount)}) and is suspended. Suspended losses "
            "from prior years are not tracked; enter them on the return they are released.",
            FindingCategory.COMPLIANCE, "Form 8582",
        ))
    if tax_return.rental_properties:
        findings.append(_finding(
            "RENTAL_ACTIVE_PARTICIPATION_ASSUMED", ValidationSeverity.INFO,
            "Rental losses assume active participation and no personal use of the property. "
            "Real estate professional status is not modeled.",
            FindingCategory.ACCURACY, "IRC Section 469(i)",
        ))

    if form1040.amt.amt > 0:
        findings.append(_finding(
            "AMT_SIMPLIFIED", ValidationSeverity.INFO,
            f"Alternative minimum tax of {format_dollars(form1040.amt.amt)} applies. Only the taxes or "
            "standard deduction, private activity bond interest and incentive stock option adjustments "
            "are included; depreciation and other adjustments are not modeled.",
            FindingCategory.ACCURACY, "Form 6251",
        ))
    return findings


def validate_credits(tax_return: "TaxReturn", form1040: "Form1040Result") -> List[ValidationFinding]:
    findings = []
    ftc = form1040.foreign_tax_credit
    if ftc is not None:
        if ftc.direct_credit_election:
            findings.append(_finding(
                "FTC_DIRECT_ELECTION", ValidationSeverity.INFO,
                "Foreign taxes are within the direct election limit, so the credit was claimed "
                "without Form 1116.",
                FindingCategory.COMPLIANCE, "Form 1116 instructions",
            ))
        if ftc.excess_foreign_tax > 0:
            findings.append(_finding(
                "FTC_EXCESS_NOT_CARRIED", ValidationSeverity.WARNING,
                f"{format_dollars(ftc.excess_foreign_tax)} of foreign tax exceeds the limitation. "
                "Carryback and carryforward of the excess are not tracked.",
                FindingCategory.UNSUPPORTED, "IRC Section 904(c)",
            ))

    if form1040.schedule_d is not None and form1040.schedule_d.capital_loss_carryforward > 0:
        findings.append(_finding(
            "CAPITAL_LOSS_CARRYFORWARD", ValidationSeverity.INFO,
            f"{format_dollars(form1040.schedule_d.capital_loss_carryforward)} of capital loss exceeds "
            "the annual limit and carries forward to next year.",
            FindingCategory.COMPLIANCE, "IRC Section 1212(b)",
        ))

    if tax_return.adjustments.traditional_ira_contribution > 0 and not tax_return.can_be_claimed_as_dependent:
        findings.append(_finding(
            "SAVERS_CREDIT_NOT_COMPUTED", ValidationSeverity.WARNING,
            "Retirement contributions may qualify for the saver's credit (Form 8880) at lower incomes. "
            "The credit is not computed, so tax may be overstated.",
            FindingCategory.UNSUPPORTED, "IRC Section 25B",
        ))

    if tax_return.can_be_claimed_as_dependent:
        findings.append(_finding(
            "DEPENDENT_FILER_LIMITATIONS", ValidationSeverity.INFO,
            "You can be claimed as a dependent. Your standard deduction is limited to the greater of "
            "$1,350 or your earned income plus $450 (not exceeding the normal standard deduction). "
            "Additional amounts for age 65+ or blind are still added.",
            FindingCategory.COMPLIANCE, "IRC Section 63(c)(5)",
        ))

    for dependent in tax_return.dependents:
        if not has_valid_ssn(dependent.ssn):
            findings.append(_finding(
                "DEPENDENT_MISSING_SSN", ValidationSeverity.WARNING,
                f"Dependent {dependent.first_name} has no valid SSN and cannot be a qualifying child "
                "for the child tax credit or the earned income credit.",
                FindingCategory.DATA_QUALITY, "IRC Section 24(h)(7)",
            ))
    return findings


def validate_states(
    state_results: Sequence["StateComputeResult"],
    unsupported_states: Sequence[str],
) -> List[ValidationFinding]:
    findings = []
    for code in unsupported_states:
        findings.append(_finding(
            "STATE_NOT_SUPPORTED", ValidationSeverity.WARNING,
            f"{code} state returns are not supported; no {code} tax was computed.",
            FindingCategory.UNSUPPORTED,
        ))
    for result in state_results:
        if result.residency_type != ResidencyType.FULL_YEAR and result.state_tax > 0:
            findings.append(_finding(
                "STATE_NONRESIDENT_SOURCE_INCOME", ValidationSeverity.WARNING,
                f"{result.form_label}: income was prorated by days of residency "
                f"({result.apportionment_ratio:.1%}). Income sourced to {result.state_name} "
                "while a nonresident is not allocated separately.",
                FindingCategory.ACCURACY,
            ))
    return findings


def validate_return(
    tax_return: "TaxReturn",
    form1040: "Form1040Result",
    state_results: Sequence["StateComputeResult"] = (),
    unsupported_states: Sequence[str] = (),
    config: Optional["TaxYearConfig"] = None,
) -> List[ValidationFinding]:
    """
    Run every check over a computed return.

    Args:
        tax_return: The input return
        form1040: Its computed federal return
        state_results: Computed state returns
        unsupported_states: Requested states that had no module
        config: Year constants; looked up from the year registry when omitted

    Returns:
        Findings in a stable order (scope, documents, self-employment,
        supplemental income, credits, states)
    """
    if config is None:
        from calculator.year_modules import get_year_module
        config = get_year_module(tax_return.tax_year).config

    return [
        *validate_scope(tax_return),
        *validate_documents(tax_return, config),
        *validate_self_employment(tax_return, form1040),
        *validate_supplemental_income(tax_return, form1040),
        *validate_credits(tax_return, form1040),
        *validate_states(state_results, unsupported_states),
    ]


def has_errors(findings: Sequence[ValidationFinding]) -> bool:
    return any(f.severity == ValidationSeverity.ERROR for f in findings)


def has_warnings(findings: Sequence[ValidationFinding]) -> bool:
    return any(f.severity == ValidationSeverity.WARNING for f in findings)
