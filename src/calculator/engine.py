"""
Engine entry point.

``compute_all`` selects the year module for the return, computes the
federal return and every requested state, gathers all traced values into
one node map and runs validation. Nothing here does tax arithmetic; it
only composes the year module's results.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from calculator.form1040 import Form1040Result
from calculator.schedules.schedule_b import ScheduleBResult
from calculator.source_documents import collect_document_values
from calculator.state.state_module import StateComputeResult
from calculator.year_modules import get_year_module
from models.tax_return import TaxReturn
from models.traced import TracedValue
from validation.federal_validation import ValidationFinding, validate_return

logger = logging.getLogger(__name__)


NODE_LABELS: Dict[str, str] = {
    # Form 1040
    "form1040.line1a": "Wages, salaries, tips",
    "form1040.line1z": "Add lines 1a through 1i",
    "form1040.line2a": "Tax-exempt interest",
    "form1040.line2b": "Taxable interest",
    "form1040.line3a": "Qualified dividends",
    "form1040.line3b": "Ordinary dividends",
    "form1040.line6a": "Social security benefits",
    "form1040.line6b": "Taxable social security benefits",
    "form1040.line7": "Capital gain or (loss)",
    "form1040.line8": "Other income",
    "form1040.line9": "Total income",
    "form1040.line10": "Adjustments to income",
    "form1040.line11": "Adjusted gross income",
    "form1040.line12": "Deductions",
    "form1040.line13": "Qualified business income deduction",
    "form1040.line14": "Total deductions",
    "form1040.line15": "Taxable income",
    "form1040.line16": "Tax",
    "form1040.line17": "Alternative minimum tax (Schedule 2, Part I)",
    "form1040.line18": "Tax + Schedule 2",
    "form1040.line19": "Child tax credit / credit for other dependents",
    "form1040.line20": "Other nonrefundable credits",
    "form1040.line21": "Total credits",
    "form1040.line22": "Tax after credits",
    "form1040.line23": "Other taxes",
    "form1040.line24": "Total tax",
    "form1040.line25": "Federal income tax withheld",
    "form1040.line26": "Estimated tax payments",
    "form1040.line27": "Earned income credit",
    "form1040.line28": "Additional child tax credit",
    "form1040.line32": "Total other payments and refundable credits",
    "form1040.line33": "Total payments",
    "form1040.line34": "Overpaid",
    "form1040.line37": "Amount you owe",
    "standardDeduction": "Standard deduction",
    "earnedIncome": "Earned income",

    # Schedule A
    "scheduleA.line1": "Medical and dental expenses",
    "scheduleA.line2": "AGI (from Form 1040)",
    "scheduleA.line3": "AGI x 7.5%",
    "scheduleA.line4": "Medical deduction (excess over floor)",
    "scheduleA.line5a": "State/local income or sales taxes (elected)",
    "scheduleA.line5b": "Real estate taxes",
    "scheduleA.line5c": "Personal property taxes",
    "scheduleA.line5d": "State and local taxes (before cap)",
    "scheduleA.line5e": "State and local taxes (after cap)",
    "scheduleA.line7": "Total taxes",
    "scheduleA.line8a": "Home mortgage interest (after limit)",
    "scheduleA.line9": "Investment interest",
    "scheduleA.line10": "Total interest you paid",
    "scheduleA.line11": "Cash charitable contributions",
    "scheduleA.line12": "Non-cash charitable contributions",
    "scheduleA.line14": "Charitable contributions",
    "scheduleA.line16": "Other itemized deductions",
    "scheduleA.line17": "Total itemized deductions",
    "form4952.netInvestmentIncome": "Net investment income (Form 4952)",

    # Schedule B
    "scheduleB.line4": "Total interest",
    "scheduleB.line6": "Total ordinary dividends",

    # Schedule C
    "scheduleC.totalNetProfit": "Total Schedule C net profit or (loss)",

    # Schedule D
    "scheduleD.line1b": "Short-term gain/loss from sales",
    "scheduleD.line5": "Short-term gain or (loss) from Schedule K-1",
    "scheduleD.line6": "Short-term capital loss carryover from prior year",
    "scheduleD.line7": "Net short-term capital gain or (loss)",
    "scheduleD.line8b": "Long-term gain/loss from sales",
    "scheduleD.line12": "Long-term gain or (loss) from Schedule K-1",
    "scheduleD.line13": "Capital gain distributions",
    "scheduleD.line14": "Long-term capital loss carryover from prior year",
    "scheduleD.line15": "Net long-term capital gain or (loss)",
    "scheduleD.line16": "Combined net gain or (loss)",
    "scheduleD.line21": "Capital gain/loss for Form 1040",

    # Schedule SE
    "scheduleSE.line2": "Net profit from Schedule C and Schedule K-1",
    "scheduleSE.line3": "Combined SE income",
    "scheduleSE.line4a": "Net earnings from self-employment (92.35%)",
    "scheduleSE.line4b": "Net SE earnings subject to tax",
    "scheduleSE.line5": "Social security portion",
    "scheduleSE.line6": "Self-employment tax",
    "scheduleSE.deductibleHalf": "Deductible part of self-employment tax",

    # Form 8959 / Form 8960
    "form8959.medicareWages": "Medicare wages (W-2 box 5)",
    "form8959.wageTax": "Additional Medicare Tax on wages",
    "form8959.selfEmploymentTax": "Additional Medicare Tax on SE income",
    "form8959.additionalMedicareTax": "Additional Medicare Tax",
    "form8959.withholdingCredit": "Additional Medicare Tax withheld",
    "form8960.netInvestmentIncome": "Net investment income",
    "form8960.magiExcess": "MAGI over threshold",
    "form8960.niit": "Net investment income tax",

    # Schedule E / Form 8582
    "scheduleE.line23a": "Total rental real estate and royalty income or (loss)",
    "scheduleE.k1Rental": "Rental real estate income or (loss) from Schedule K-1",
    "scheduleE.line32": "Nonpassive income from Schedule K-1",
    "scheduleE.line41": "Total supplemental income or (loss)",
    "form8582.netPassive": "Net passive income or (loss)",
    "form8582.modifiedAGI": "Modified AGI for the special allowance",
    "form8582.specialAllowance": "Special allowance for rental real estate",
    "form8582.allowedPassive": "Passive income or allowed loss",

    # Schedule 1 Part II
    "schedule1.line11": "Educator expenses",
    "schedule1.line13": "Health savings account deduction",
    "schedule1.line15": "Deductible part of self-employment tax",
    "schedule1.iraModifiedAGI": "Modified AGI for the IRA deduction",
    "schedule1.iraLimit": "IRA contribution within the limit",
    "schedule1.line20": "IRA deduction",
    "schedule1.studentLoanModifiedAGI": "Modified AGI for the student loan interest deduction",
    "schedule1.line21": "Student loan interest deduction",
    "schedule1.line26": "Total adjustments to income",

    # Social Security Benefits Worksheet
    "ssWorksheet.halfBenefits": "One-half of social security benefits",
    "ssWorksheet.provisionalIncome": "Provisional income",
    "ssWorksheet.excessOverBase": "Provisional income over the base amount",
    "ssWorksheet.excessOverAdditional": "Provisional income over the additional amount",
    "ssWorksheet.tier1": "Benefits taxable up to 50%",
    "ssWorksheet.tier2": "Benefits taxable at 85%",

    # Form 6251
    "form6251.line1": "Taxable income for AMT",
    "form6251.line2a": "Taxes or standard deduction added back",
    "form6251.line2g": "Private activity bond interest",
    "form6251.line2i": "Incentive stock options",
    "form6251.line4": "Alternative minimum taxable income",
    "form6251.exemptionReduction": "AMT exemption phase-out",
    "form6251.line5": "AMT exemption",
    "form6251.line6": "AMTI less exemption",
    "form6251.line7": "Tentative minimum tax",
    "form6251.line10": "Regular tax",
    "form6251.line11": "Alternative minimum tax",

    # Form 8995
    "form8995.qbi": "Qualified business income",
    "form8995.qbiComponent": "QBI component (20%)",
    "form8995.taxableIncomeBeforeQBI": "Taxable income before QBI deduction",
    "form8995.netCapitalGain": "Net capital gain",
    "form8995.incomeLimitation": "Income limitation (20%)",
    "form8995.deduction": "Qualified business income deduction",

    # Child tax credit
    "ctc.initialCredit": "Initial child tax credit",
    "ctc.phaseOutReduction": "CTC phase-out reduction",
    "ctc.creditAfterPhaseOut": "CTC after phase-out",
    "ctc.nonRefundableCredit": "Nonrefundable child tax credit",
    "ctc.additionalCTC": "Additional child tax credit",
    "credits.taxAfterCTC": "Tax remaining after child tax credit",

    # Earned income credit
    "eitc.investmentIncome": "EIC investment income",
    "eitc.creditAtEarnedIncome": "EIC at earned income",
    "eitc.creditAtAGI": "EIC at AGI",
    "eitc.credit": "Earned income credit",

    # Foreign tax credit
    "form1116.foreignTaxPaid": "Foreign taxes paid",
    "form1116.foreignSourceIncome": "Foreign source income",
    "form1116.limitation": "Foreign tax credit limitation",
    "form1116.allowedCredit": "Allowed foreign tax credit",
    "credits.foreignTaxCredit": "Foreign tax credit",
    "credits.taxAfterFTC": "Tax remaining after foreign tax credit",

    # Dependent care credit
    "form2441.allowableExpenses": "Allowable care expenses",
    "form2441.tentativeCredit": "Tentative dependent care credit",
    "credits.dependentCare": "Dependent care credit (Form 2441)",
}

_SCHEDULE_C_LINES = {
    "line1": "Gross receipts",
    "line2": "Returns and allowances",
    "line3": "Gross receipts less returns",
    "line4": "Cost of goods sold",
    "line5": "Gross profit",
    "line6": "Other income",
    "line7": "Gross income",
    "line24b": "Deductible meals",
    "line28": "Total expenses",
    "line29": "Tentative profit or (loss)",
    "line30": "Business use of home",
    "line31": "Net profit or (loss)",
}

_SCHEDULE_C_NODE = re.compile(r"^scheduleC\.(.+)\.(line\w+)$")

_RENTAL_LINES = {
    "income": "Rents and royalties received",
    "expenses": "Total expenses",
    "net": "Net income or (loss)",
}

_RENTAL_NODE = re.compile(r"^scheduleE\.(.+)\.(income|expenses|net)$")


@dataclass(frozen=True)
class ComputeResult:
    """Everything computed for one return."""

    tax_year: int
    form1040: Form1040Result
    state_results: Sequence[StateComputeResult]
    values: Mapping[str, TracedValue]
    labels: Mapping[str, str]
    findings: Sequence[ValidationFinding] = field(default_factory=tuple)
    tax_return: Optional[TaxReturn] = None

    @property
    def schedule_b(self) -> ScheduleBResult:
        return self.form1040.schedule_b

    @property
    def executed_schedules(self) -> List[str]:
        names = self.form1040.executed_schedules()
        names.extend(r.form_label for r in self.state_results)
        return names

    def value(self, node_id: str) -> Optional[TracedValue]:
        return self.values.get(node_id)

    def state_result(self, state_code: str) -> Optional[StateComputeResult]:
        code = state_code.upper()
        return next((r for r in self.state_results if r.state_code == code), None)

    def label_for(self, node_id: str) -> str:
        if node_id in self.labels:
            return self.labels[node_id]
        m = _SCHEDULE_C_NODE.match(node_id)
        if m:
            business_id, line = m.groups()
            return f"Schedule C ({business_id}): {_SCHEDULE_C_LINES.get(line, line)}"
        m = _RENTAL_NODE.match(node_id)
        if m:
            property_id, line = m.groups()
            return f"Schedule E ({property_id}): {_RENTAL_LINES[line]}"
        tv = self.values.get(node_id)
        if tv is not None and not tv.is_computed and tv.source.description:
            return tv.source.description
        return node_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taxYear": self.tax_year,
            "form1040": self.form1040.to_dict(),
            "stateResults": [r.to_dict() for r in self.state_results],
            "executedSchedules": self.executed_schedules,
            "values": {node_id: tv.to_dict() for node_id, tv in self.values.items()},
            "findings": [f.to_dict() for f in self.findings],
        }


def collect_all_values(
    form1040: Form1040Result,
    tax_return: TaxReturn,
    state_results: Sequence[StateComputeResult] = (),
) -> Dict[str, TracedValue]:
    """
    Flat node id -> value map for the whole return.

    Document leaves come first so computed nodes never get shadowed by a
    leaf with the same id.
    """
    values = collect_document_values(tax_return)
    values.update(form1040.values_by_node())
    for result in state_results:
        values.update(result.detail.values_by_node())
    return values


def compute_all(tax_return: TaxReturn) -> ComputeResult:
    """
    Compute the federal return, every requested state, and findings.

    Raises:
        UnsupportedTaxYearError: no year module for ``tax_return.tax_year``.
    """
    year_module = get_year_module(tax_return.tax_year)
    logger.debug(f"Computing {tax_return.tax_year} return ({tax_return.filing_status.value})")

    form1040 = year_module.compute_form1040(tax_return)
    state_results, unsupported = year_module.state_engine().calculate_all(tax_return, form1040)

    labels: Dict[str, str] = dict(NODE_LABELS)
    for result in state_results:
        module = year_module.state_module(result.state_code)
        if module is not None:
            labels.update(module.node_labels)

    values = collect_all_values(form1040, tax_return, state_results)
    findings = validate_return(
        tax_return, form1040, state_results, unsupported_states=unsupported, config=year_module.config
    )
    logger.debug(f"Executed schedules: {', '.join(form1040.executed_schedules()) or 'none'}")

    return ComputeResult(
        tax_year=tax_return.tax_year,
        form1040=form1040,
        state_results=tuple(state_results),
        values=values,
        labels=labels,
        findings=tuple(findings),
        tax_return=tax_return,
    )
