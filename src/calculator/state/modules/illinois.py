"""
Illinois Form IL-1040.

IL starts from federal AGI, adds federally tax-exempt interest, subtracts
U.S. government obligation interest and taxable Social Security
benefits, deducts a personal exemption allowance per person and applies
a flat rate. The IL earned income credit is a fixed percentage of the
federal credit.

Part-year and nonresident filers are taxed on net income prorated by
the residency fraction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from calculator.decimal_math import apply_rate, format_dollars
from calculator.results import TracedResult
from calculator.source_documents import div_ref, int_ref
from calculator.state.apportionment import compute_apportionment
from calculator.state.state_module import (
    StateComputeResult,
    StateModule,
    StateReviewItem,
    StateReviewSection,
    positive,
)
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.form1040 import Form1040Result
    from models.state_return import StateReturnConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class IL1040Result(TracedResult):
    federal_agi: TracedValue
    additions: TracedValue
    subtractions: TracedValue
    base_income: TracedValue
    exemption_count: int
    exemption_allowance: TracedValue
    net_income: TracedValue
    taxable_income: TracedValue
    tax: TracedValue
    earned_income_credit: TracedValue
    total_credits: TracedValue
    tax_after_credits: TracedValue
    withholding: TracedValue
    overpaid: TracedValue
    amount_owed: TracedValue


class IllinoisModule(StateModule):
    node_prefix = "il1040"
    node_labels = {
        "il1040.federalAGI": "Federal AGI",
        "il1040.ilAdditions": "IL additions (Schedule M)",
        "il1040.ilSubtractions": "IL subtractions (Schedule M)",
        "il1040.ilBaseIncome": "Illinois base income",
        "il1040.exemptionAllowance": "IL personal exemption allowance",
        "il1040.ilNetIncome": "Illinois net income",
        "il1040.ilTaxableIncome": "Illinois taxable income",
        "il1040.ilTax": "Illinois income tax",
        "il1040.ilEIC": "IL earned income credit",
        "il1040.totalCredits": "IL total credits",
        "il1040.taxAfterCredits": "IL tax after credits",
        "il1040.stateWithholding": "IL state income tax withheld",
        "il1040.overpaid": "IL overpaid (refund)",
        "il1040.amountOwed": "IL amount you owe",
    }
    review_layout = (
        StateReviewSection("Income", (
            StateReviewItem("Federal AGI", "il1040.federalAGI", "Illinois starts from federal AGI (Form 1040, line 11)."),
            StateReviewItem(
                "IL additions", "il1040.ilAdditions",
                "Federally tax-exempt interest is taxable in Illinois.",
                positive("il1040.ilAdditions"),
            ),
            StateReviewItem(
                "IL subtractions", "il1040.ilSubtractions",
                "Interest on U.S. government obligations and Social Security benefits are exempt in Illinois.",
                positive("il1040.ilSubtractions"),
            ),
            StateReviewItem("IL base income", "il1040.ilBaseIncome"),
        )),
        StateReviewSection("Exemptions", (
            StateReviewItem("Exemption allowance", "il1040.exemptionAllowance"),
            StateReviewItem("IL net income", "il1040.ilNetIncome"),
            StateReviewItem("IL taxable income", "il1040.ilTaxableIncome"),
        )),
        StateReviewSection("Tax & Credits", (
            StateReviewItem("IL tax", "il1040.ilTax"),
            StateReviewItem("IL earned income credit", "il1040.ilEIC", show_when=positive("il1040.ilEIC")),
            StateReviewItem("IL tax after credits", "il1040.taxAfterCredits"),
        )),
        StateReviewSection("Payments", (
            StateReviewItem(
                "IL withholding", "il1040.stateWithholding", show_when=positive("il1040.stateWithholding")
            ),
        )),
    )

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        state_config: "StateReturnConfig",
    ) -> StateComputeResult:
        cfg = self.config
        apportionment = compute_apportionment(state_config, tax_return.tax_year)

        federal_agi = traced_from_computation(
            federal.line11.amount, "il1040.federalAGI", ["form1040.line11"], "Form 1040, line 11"
        )
        additions = traced_from_computation(
            sum(f.box8 for f in tax_return.form_1099_ints) + sum(f.box12 for f in tax_return.form_1099_divs),
            "il1040.ilAdditions",
            [int_ref(f.id, "box8") for f in tax_return.form_1099_ints]
            + [div_ref(f.id, "box12") for f in tax_return.form_1099_divs],
            "federally tax-exempt interest and exempt-interest dividends",
        )
        subtractions = traced_from_computation(
            sum(f.box3 for f in tax_return.form_1099_ints) + federal.line6b.amount,
            "il1040.ilSubtractions",
            [int_ref(f.id, "box3") for f in tax_return.form_1099_ints] + ["form1040.line6b"],
            "U.S. government obligation interest + taxable social security benefits",
        )
        base_income = traced_from_computation(
            max(0, federal_agi.amount + additions.amount - subtractions.amount),
            "il1040.ilBaseIncome",
            ["il1040.federalAGI", "il1040.ilAdditions", "il1040.ilSubtractions"],
            "federal AGI + additions - subtractions",
        )

        count = 1 + len(tax_return.dependents)
        if tax_return.filing_status == FilingStatus.MARRIED_JOINT and tax_return.spouse is not None:
            count += 1
        exemption = traced_from_computation(
            count * cfg.personal_exemption_amount,
            "il1040.exemptionAllowance",
            [],
            f"{format_dollars(cfg.personal_exemption_amount)} x {count} exemptions",
        )
        net_income = traced_from_computation(
            max(0, base_income.amount - exemption.amount),
            "il1040.ilNetIncome",
            ["il1040.ilBaseIncome", "il1040.exemptionAllowance"],
            "base income - exemption allowance",
        )
        taxable = traced_from_computation(
            apportionment.apply(net_income.amount),
            "il1040.ilTaxableIncome",
            ["il1040.ilNetIncome"],
            "net income" if apportionment.is_full_year else
            f"net income x {apportionment.days_in_state}/{apportionment.days_in_year} days of residency",
        )
        tax = traced_from_computation(
            apply_rate(taxable.amount, cfg.flat_rate or 0.0),
            "il1040.ilTax",
            ["il1040.ilTaxableIncome"],
            f"{cfg.flat_rate or 0:.2%} x taxable income",
        )

        eic = traced_from_computation(
            apply_rate(federal.line27.amount, cfg.eitc_percentage or 0.0),
            "il1040.ilEIC",
            ["form1040.line27"],
            f"{cfg.eitc_percentage or 0:.0%} of federal earned income credit",
        )
        credits = traced_from_computation(eic.amount, "il1040.totalCredits", ["il1040.ilEIC"], "IL EIC")
        after_credits = traced_from_computation(
            max(0, tax.amount - credits.amount),
            "il1040.taxAfterCredits",
            ["il1040.ilTax", "il1040.totalCredits"],
            "max(0, tax - credits)",
        )
        withholding = self.state_withholding(tax_return)
        overpaid, owed = self.settle(after_credits, withholding)

        detail = IL1040Result(
            federal_agi=federal_agi,
            additions=additions,
            subtractions=subtractions,
            base_income=base_income,
            exemption_count=count,
            exemption_allowance=exemption,
            net_income=net_income,
            taxable_income=taxable,
            tax=tax,
            earned_income_credit=eic,
            total_credits=credits,
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
            state_agi=base_income.amount,
            state_taxable_income=taxable.amount,
            state_tax=tax.amount,
            state_credits=credits.amount,
            tax_after_credits=after_credits.amount,
            state_withholding=withholding.amount,
            overpaid=overpaid.amount,
            amount_owed=owed.amount,
            detail=detail,
        )
