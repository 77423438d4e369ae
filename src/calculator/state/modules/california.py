"""
California Form 540.

CA starts from federal AGI and adjusts it (Schedule CA): U.S. Treasury
interest and taxable Social Security benefits are subtracted and the
federal HSA deduction is added back. The deduction is the larger of the
CA standard deduction or CA itemized deductions, which differ from
federal Schedule A:

- no SALT cap, and state income tax is not deductible
- the medical floor is measured against CA AGI
- mortgage interest uses the $1,000,000 acquisition debt limit

Tax comes from the CA bracket schedules, then personal and dependent
exemption credits (reduced 6% per $2,500 of AGI over the threshold), the
1% mental health services tax on taxable income over $1,000,000, and the
nonrefundable renter's credit.

Part-year and nonresident filers owe tax prorated by the residency
fraction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from calculator.brackets import compute_bracket_tax
from calculator.decimal_math import apply_rate, ceil_div, prorate
from calculator.results import TracedResult
from calculator.source_documents import adjustment_ref, int_ref, itemized_ref, state_entry_ref
from calculator.state.apportionment import compute_apportionment
from calculator.state.state_module import (
    StateComputeResult,
    StateModule,
    StateReviewItem,
    StateReviewSection,
    positive,
)
from models.deductions import DeductionMethod
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation, traced_zero

if TYPE_CHECKING:
    from calculator.form1040 import Form1040Result
    from models.state_return import StateReturnConfig
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Form540Result(TracedResult):
    federal_agi: TracedValue
    subtractions: TracedValue  # Schedule CA
    additions: TracedValue  # Schedule CA
    ca_agi: TracedValue
    standard_deduction: TracedValue
    medical_deduction: Optional[TracedValue]
    taxes_deduction: Optional[TracedValue]
    mortgage_interest: Optional[TracedValue]
    itemized_deductions: Optional[TracedValue]
    deduction: TracedValue
    deduction_method: DeductionMethod
    taxable_income: TracedValue
    tax: TracedValue
    exemption_credits: TracedValue
    tax_after_exemptions: TracedValue
    mental_health_tax: TracedValue
    renters_credit: TracedValue
    tax_after_credits: TracedValue
    withholding: TracedValue
    overpaid: TracedValue
    amount_owed: TracedValue


class CaliforniaModule(StateModule):
    node_prefix = "form540"
    node_labels = {
        "form540.federalAGI": "Federal AGI",
        "form540.caSubtractions": "Schedule CA subtractions",
        "form540.caAdditions": "Schedule CA additions",
        "form540.caAGI": "California AGI",
        "form540.standardDeduction": "CA standard deduction",
        "form540.medicalDeduction": "CA medical deduction",
        "form540.taxesDeduction": "CA deductible taxes",
        "form540.mortgageInterest": "CA mortgage interest",
        "form540.itemizedDeductions": "CA itemized deductions",
        "form540.deduction": "CA deduction",
        "form540.taxableIncome": "California taxable income",
        "form540.tax": "California tax",
        "form540.exemptionCredits": "CA exemption credits",
        "form540.taxAfterExemptions": "CA tax after exemption credits",
        "form540.mentalHealthTax": "Mental health services tax",
        "form540.rentersCredit": "Nonrefundable renter's credit",
        "form540.taxAfterCredits": "CA tax after credits",
        "form540.stateWithholding": "CA state income tax withheld",
        "form540.overpaid": "CA overpaid (refund)",
        "form540.amountOwed": "CA amount you owe",
    }
    review_layout = (
        StateReviewSection("Income", (
            StateReviewItem("Federal AGI", "form540.federalAGI"),
            StateReviewItem(
                "Schedule CA subtractions", "form540.caSubtractions",
                "U.S. Treasury interest and Social Security benefits are not taxed by California.",
                positive("form540.caSubtractions"),
            ),
            StateReviewItem(
                "Schedule CA additions", "form540.caAdditions",
                "California does not allow the HSA deduction.",
                positive("form540.caAdditions"),
            ),
            StateReviewItem("CA AGI", "form540.caAGI"),
        )),
        StateReviewSection("Deductions", (
            StateReviewItem("CA deduction", "form540.deduction"),
            StateReviewItem("CA taxable income", "form540.taxableIncome"),
        )),
        StateReviewSection("Tax & Credits", (
            StateReviewItem("CA tax", "form540.tax"),
            StateReviewItem("Exemption credits", "form540.exemptionCredits"),
            StateReviewItem(
                "Mental health services tax", "form540.mentalHealthTax", show_when=positive("form540.mentalHealthTax")
            ),
            StateReviewItem(
                "Renter's credit", "form540.rentersCredit", show_when=positive("form540.rentersCredit")
            ),
            StateReviewItem("CA tax after credits", "form540.taxAfterCredits"),
        )),
        StateReviewSection("Payments", (
            StateReviewItem(
                "CA withholding", "form540.stateWithholding", show_when=positive("form540.stateWithholding")
            ),
        )),
    )

    def _itemized(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        ca_agi: TracedValue,
    ) -> Optional[Tuple[TracedValue, ...]]:
        """(medical, taxes, mortgage, total), or None when federal Schedule A was not computed."""
        schedule_a = federal.schedule_a
        d = tax_return.deductions.itemized
        if schedule_a is None or d is None:
            return None
        fs = tax_return.filing_status

        medical = traced_from_computation(
            max(0, d.medical_expenses - apply_rate(ca_agi.amount, self.config.medical_floor_rate)),
            "form540.medicalDeduction",
            [itemized_ref("medicalExpenses"), "form540.caAGI"],
            f"medical expenses over {self.config.medical_floor_rate:.1%} of CA AGI",
        )
        taxes = traced_from_computation(
            d.real_estate_tax + d.personal_property_tax + d.state_local_sales_tax,
            "form540.taxesDeduction",
            [itemized_ref("realEstateTax"), itemized_ref("personalPropertyTax"), itemized_ref("stateLocalSalesTax")],
            "real estate + personal property + sales taxes, no cap",
        )
        limit = self.config.mortgage_limit.get(fs, 0)
        if limit and d.mortgage_principal > limit:
            mortgage = traced_from_computation(
                prorate(d.mortgage_interest, limit, d.mortgage_principal),
                "form540.mortgageInterest",
                [itemized_ref("mortgageInterest"), itemized_ref("mortgagePrincipal")],
                "mortgage interest x CA debt limit / principal",
            )
        else:
            mortgage = traced_from_computation(
                d.mortgage_interest,
                "form540.mortgageInterest",
                [itemized_ref("mortgageInterest")],
                "mortgage interest within the CA debt limit",
            )
        parts = [medical, taxes, mortgage, schedule_a.line9, schedule_a.line14, schedule_a.line16]
        total = traced_from_computation(
            sum(p.amount for p in parts),
            "form540.itemizedDeductions",
            [p.node_id for p in parts],
            "medical + taxes + mortgage interest + investment interest + gifts + other",
        )
        return medical, taxes, mortgage, total

    def _exemption_credits(self, tax_return: "TaxReturn", ca_agi: TracedValue) -> TracedValue:
        cfg = self.config
        fs = tax_return.filing_status
        personal = 2 if fs in (FilingStatus.MARRIED_JOINT, FilingStatus.MARRIED_SEPARATE) else 1
        base = personal * cfg.personal_exemption_credit + len(tax_return.dependents) * cfg.dependent_exemption_credit

        threshold = cfg.exemption_phaseout_threshold.get(fs, 0)
        if ca_agi.amount <= threshold:
            return traced_from_computation(
                base, "form540.exemptionCredits", [],
                f"{personal} personal + {len(tax_return.dependents)} dependent exemption credits",
            )
        steps = ceil_div(ca_agi.amount - threshold, cfg.exemption_phaseout_step)
        reduction = min(apply_rate(base, steps * cfg.exemption_phaseout_rate), base)
        return traced_from_computation(
            base - reduction,
            "form540.exemptionCredits",
            ["form540.caAGI"],
            f"exemption credits less {cfg.exemption_phaseout_rate:.0%} x {steps} steps of AGI over threshold",
        )

    def _renters_credit(self, tax_return: "TaxReturn", state_config: "StateReturnConfig", ca_agi: TracedValue):
        rent_ref = state_entry_ref(self.state_code, "rentPaidInState")
        if state_config.rent_paid_in_state <= 0:
            return traced_zero("form540.rentersCredit", "no rent paid in California")
        single = tax_return.filing_status in (FilingStatus.SINGLE, FilingStatus.MARRIED_SEPARATE)
        terms = self.config.renters_credit.get("single_mfs" if single else "other")
        if terms is None or ca_agi.amount > terms.agi_limit:
            return traced_from_computation(0, "form540.rentersCredit", ["form540.caAGI", rent_ref], "CA AGI over the limit")
        return traced_from_computation(
            terms.credit, "form540.rentersCredit", ["form540.caAGI", rent_ref], "renter's credit, CA AGI within the limit"
        )

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        state_config: "StateReturnConfig",
    ) -> StateComputeResult:
        cfg = self.config
        fs = tax_return.filing_status
        apportionment = compute_apportionment(state_config, tax_return.tax_year)

        # Income (Schedule CA)
        federal_agi = traced_from_computation(
            federal.line11.amount, "form540.federalAGI", ["form1040.line11"], "Form 1040, line 11"
        )
        subtractions = traced_from_computation(
            sum(f.box3 for f in tax_return.form_1099_ints) + federal.line6b.amount,
            "form540.caSubtractions",
            [int_ref(f.id, "box3") for f in tax_return.form_1099_ints] + ["form1040.line6b"],
            "U.S. Treasury interest + taxable social security benefits",
        )
        additions = traced_from_computation(
            tax_return.adjustments.hsa_deduction,
            "form540.caAdditions",
            [adjustment_ref("hsaDeduction")],
            "HSA deduction added back",
        )
        ca_agi = traced_from_computation(
            federal_agi.amount - subtractions.amount + additions.amount,
            "form540.caAGI",
            ["form540.federalAGI", "form540.caSubtractions", "form540.caAdditions"],
            "federal AGI - subtractions + additions",
        )

        # Deduction
        standard = traced_from_computation(
            cfg.get_standard_deduction(fs), "form540.standardDeduction", [], f"CA standard deduction ({fs.value})"
        )
        itemized_parts = None
        if tax_return.deductions.method == DeductionMethod.ITEMIZED:
            itemized_parts = self._itemized(tax_return, federal, ca_agi)
        medical, taxes, mortgage, itemized = itemized_parts or (None, None, None, None)
        if itemized is not None and itemized.amount > standard.amount:
            method = DeductionMethod.ITEMIZED
            deduction = traced_from_computation(
                itemized.amount, "form540.deduction",
                ["form540.standardDeduction", "form540.itemizedDeductions"],
                "larger of standard or itemized",
            )
        elif itemized is not None:
            method = DeductionMethod.STANDARD
            deduction = traced_from_computation(
                standard.amount, "form540.deduction",
                ["form540.standardDeduction", "form540.itemizedDeductions"],
                "larger of standard or itemized",
            )
        else:
            method = DeductionMethod.STANDARD
            deduction = traced_from_computation(
                standard.amount, "form540.deduction", ["form540.standardDeduction"], "standard deduction"
            )

        taxable = traced_from_computation(
            max(0, ca_agi.amount - deduction.amount),
            "form540.taxableIncome",
            ["form540.caAGI", "form540.deduction"],
            "max(0, CA AGI - deduction)",
        )

        # Tax
        residency = "" if apportionment.is_full_year else " x residency fraction"
        tax = traced_from_computation(
            apportionment.apply(compute_bracket_tax(taxable.amount, cfg.get_brackets(fs))),
            "form540.tax",
            ["form540.taxableIncome"],
            f"CA tax rate schedule{residency}",
        )
        exemptions = self._exemption_credits(tax_return, ca_agi)
        after_exemptions = traced_from_computation(
            max(0, tax.amount - exemptions.amount),
            "form540.taxAfterExemptions",
            ["form540.tax", "form540.exemptionCredits"],
            "max(0, tax - exemption credits)",
        )
        surtax_threshold = cfg.surtax_threshold or 0
        mental_health = traced_from_computation(
            apportionment.apply(apply_rate(max(0, taxable.amount - surtax_threshold), cfg.surtax_rate)),
            "form540.mentalHealthTax",
            ["form540.taxableIncome"],
            f"{cfg.surtax_rate:.0%} of taxable income over the threshold{residency}",
        )
        renters = self._renters_credit(tax_return, state_config, ca_agi)
        after_credits = traced_from_computation(
            max(0, after_exemptions.amount + mental_health.amount - renters.amount),
            "form540.taxAfterCredits",
            ["form540.taxAfterExemptions", "form540.mentalHealthTax", "form540.rentersCredit"],
            "tax after exemptions + mental health tax - renter's credit",
        )

        withholding = self.state_withholding(tax_return)
        overpaid, owed = self.settle(after_credits, withholding)
        logger.debug(f"CA deduction method: {method.value}")

        detail = Form540Result(
            federal_agi=federal_agi,
            subtractions=subtractions,
            additions=additions,
            ca_agi=ca_agi,
            standard_deduction=standard,
            medical_deduction=medical,
            taxes_deduction=taxes,
            mortgage_interest=mortgage,
            itemized_deductions=itemized,
            deduction=deduction,
            deduction_method=method,
            taxable_income=taxable,
            tax=tax,
            exemption_credits=exemptions,
            tax_after_exemptions=after_exemptions,
            mental_health_tax=mental_health,
            renters_credit=renters,
            tax_after_credits=after_credits,
            withholding=withholding,
            overpaid=overpaid,
            amount_owed=owed,
        )
        return StateComputeResult(
            state_code=self.state_code,
            state_name=self.state_name,
            form_label=self.form_label,
            residency_type=state_config.residency_type,
            apportionment_ratio=apportionment.ratio,
            state_agi=ca_agi.amount,
            state_taxable_income=taxable.amount,
            state_tax=tax.amount + mental_health.amount,
            state_credits=exemptions.amount + renters.amount,
            tax_after_credits=after_credits.amount,
            state_withholding=withholding.amount,
            overpaid=overpaid.amount,
            amount_owed=owed.amount,
            detail=detail,
        )
