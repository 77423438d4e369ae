"""
Pennsylvania PA-40.

PA does not start from federal AGI. Income is sorted into classes and
each class is taxed only when positive; a loss in one class never
offsets another. The flat rate applies to the sum of positive classes
less IRC Section 529 contributions (capped per beneficiary).

Classes modeled: compensation, interest, dividends (including capital
gain distributions), net business profits (Schedule C plus partnership
and S corporation income), net gains from the sale of property, rents
and royalties, and income from estates and trusts. Rental losses are
not subject to the federal passive loss limit but still count as zero
when the class is negative. Part-year and nonresident filers owe tax
prorated by the residency fraction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from calculator.decimal_math import apply_rate, format_dollars
from calculator.results import TracedResult
from calculator.source_documents import capital_ref, div_ref, int_ref, k1_entries, k1_ref, state_entry_ref, w2_ref
from calculator.state.apportionment import compute_apportionment
from calculator.state.state_module import (
    StateComputeResult,
    StateModule,
    StateReviewItem,
    StateReviewSection,
    positive,
)
from models.schedule_e import K1EntityType
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.form1040 import Form1040Result
    from models.state_return import StateReturnConfig
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class PA40Result(TracedResult):
    compensation: TracedValue
    interest: TracedValue
    dividends: TracedValue
    business_profits: TracedValue
    net_gains: TracedValue
    rents_royalties: TracedValue
    estate_trust_income: TracedValue
    total_taxable_income: TracedValue
    deduction_529: TracedValue
    adjusted_taxable_income: TracedValue
    tax: TracedValue
    withholding: TracedValue
    overpaid: TracedValue
    amount_owed: TracedValue


class PennsylvaniaModule(StateModule):
    node_prefix = "pa40"
    node_labels = {
        "pa40.compensation": "PA compensation",
        "pa40.interest": "PA interest income",
        "pa40.dividends": "PA dividend income",
        "pa40.netBusinessProfits": "PA net business profits",
        "pa40.netGains": "PA net gains from property",
        "pa40.rentsRoyalties": "PA net income from rents and royalties",
        "pa40.estateTrustIncome": "PA income from estates and trusts",
        "pa40.totalTaxableIncome": "PA total taxable income",
        "pa40.deduction529": "IRC Section 529 deduction",
        "pa40.adjustedTaxableIncome": "PA adjusted taxable income",
        "pa40.tax": "Pennsylvania income tax",
        "pa40.stateWithholding": "PA state income tax withheld",
        "pa40.overpaid": "PA overpaid (refund)",
        "pa40.amountOwed": "PA amount you owe",
    }
    review_layout = (
        StateReviewSection("Income classes", (
            StateReviewItem("Compensation", "pa40.compensation", show_when=positive("pa40.compensation")),
            StateReviewItem("Interest", "pa40.interest", show_when=positive("pa40.interest")),
            StateReviewItem("Dividends", "pa40.dividends", show_when=positive("pa40.dividends")),
            StateReviewItem(
                "Net business profits", "pa40.netBusinessProfits", show_when=positive("pa40.netBusinessProfits")
            ),
            StateReviewItem("Net gains", "pa40.netGains", show_when=positive("pa40.netGains")),
            StateReviewItem(
                "Rents and royalties", "pa40.rentsRoyalties", show_when=positive("pa40.rentsRoyalties")
            ),
            StateReviewItem(
                "Estates and trusts", "pa40.estateTrustIncome", show_when=positive("pa40.estateTrustIncome")
            ),
            StateReviewItem(
                "Total taxable income", "pa40.totalTaxableIncome",
                "Losses in one class do not offset income in another.",
            ),
        )),
        StateReviewSection("Tax", (
            StateReviewItem("529 deduction", "pa40.deduction529", show_when=positive("pa40.deduction529")),
            StateReviewItem("Adjusted taxable income", "pa40.adjustedTaxableIncome"),
            StateReviewItem("PA tax", "pa40.tax"),
        )),
        StateReviewSection("Payments", (
            StateReviewItem(
                "PA withholding", "pa40.stateWithholding", show_when=positive("pa40.stateWithholding")
            ),
        )),
    )

    def _income_classes(self, tax_return: "TaxReturn", federal: "Form1040Result"):
        k1_interest = k1_entries(tax_return, "interestIncome")
        k1_dividends = k1_entries(tax_return, "ordinaryDividends")
        k1_gains = k1_entries(tax_return, "shortTermCapitalGain") + k1_entries(tax_return, "longTermCapitalGain")
        pass_through = [k1 for k1 in tax_return.schedule_k1s if k1.entity_type != K1EntityType.ESTATE_OR_TRUST]
        fiduciary = [k1 for k1 in tax_return.schedule_k1s if k1.entity_type == K1EntityType.ESTATE_OR_TRUST]

        compensation = traced_from_computation(
            sum(w.box1 for w in tax_return.w2s),
            "pa40.compensation",
            [w2_ref(w.id, "box1") for w in tax_return.w2s],
            "W-2 box 1 wages",
        )
        interest = traced_from_computation(
            sum(f.box1 + f.box8 for f in tax_return.form_1099_ints) + sum(amount for amount, _ in k1_interest),
            "pa40.interest",
            [ref for f in tax_return.form_1099_ints for ref in (int_ref(f.id, "box1"), int_ref(f.id, "box8"))]
            + [ref for _, ref in k1_interest],
            "taxable and tax-exempt interest + K-1 interest",
        )
        dividends = traced_from_computation(
            sum(f.box1a + f.box2a for f in tax_return.form_1099_divs) + sum(amount for amount, _ in k1_dividends),
            "pa40.dividends",
            [ref for f in tax_return.form_1099_divs for ref in (div_ref(f.id, "box1a"), div_ref(f.id, "box2a"))]
            + [ref for _, ref in k1_dividends],
            "ordinary dividends + capital gain distributions + K-1 dividends",
        )

        business_amount = sum(k1.ordinary_income + k1.guaranteed_payments for k1 in pass_through)
        business_inputs = [
            k1_ref(k1.id, name) for k1 in pass_through for name in ("ordinaryIncome", "guaranteedPayments")
        ]
        if federal.schedule_c is not None:
            business_amount += federal.schedule_c.total_net_profit.amount
            business_inputs.insert(0, "scheduleC.totalNetProfit")
        business = traced_from_computation(
            max(0, business_amount),
            "pa40.netBusinessProfits",
            business_inputs,
            "Schedule C net profit + partnership and S corporation income, a loss counts as zero",
        )
        gains = traced_from_computation(
            max(0, sum(t.gain_loss for t in tax_return.capital_transactions) + sum(amount for amount, _ in k1_gains)),
            "pa40.netGains",
            [capital_ref(t.id) for t in tax_return.capital_transactions] + [ref for _, ref in k1_gains],
            "net gain from sales + K-1 gains, a net loss counts as zero",
        )
        if federal.schedule_e is not None:
            rents = traced_from_computation(
                max(0, federal.schedule_e.net_passive.amount),
                "pa40.rentsRoyalties",
                ["form8582.netPassive"],
                "net rents and royalties before the federal passive loss limit, a loss counts as zero",
            )
        else:
            rents = traced_from_computation(0, "pa40.rentsRoyalties", [], "no rental or royalty income")
        estates_trusts = traced_from_computation(
            max(0, sum(k1.ordinary_income for k1 in fiduciary)),
            "pa40.estateTrustIncome",
            [k1_ref(k1.id, "ordinaryIncome") for k1 in fiduciary],
            "income from estates and trusts, a loss counts as zero",
        )
        return compensation, interest, dividends, business, gains, rents, estates_trusts

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        state_config: "StateReturnConfig",
    ) -> StateComputeResult:
        cfg = self.config
        apportionment = compute_apportionment(state_config, tax_return.tax_year)

        classes = self._income_classes(tax_return, federal)
        compensation, interest, dividends, business, gains, rents, estates_trusts = classes

        # Step 1: sum the positive classes
        total = traced_from_computation(
            sum(max(0, c.amount) for c in classes),
            "pa40.totalTaxableIncome",
            [c.node_id for c in classes],
            "sum of positive income classes",
        )

        # Step 2: 529 deduction
        deduction_529 = traced_from_computation(
            min(state_config.contributions_529, cfg.max_529_deduction),
            "pa40.deduction529",
            [state_entry_ref("PA", "contributions529")],
            f"529 contributions, at most {format_dollars(cfg.max_529_deduction)} per beneficiary",
        )
        adjusted = traced_from_computation(
            max(0, total.amount - deduction_529.amount),
            "pa40.adjustedTaxableIncome",
            ["pa40.totalTaxableIncome", "pa40.deduction529"],
            "max(0, total taxable income - 529 deduction)",
        )

        # Step 3: flat tax, prorated for part-year and nonresident filers
        residency = "" if apportionment.is_full_year else " x residency fraction"
        tax = traced_from_computation(
            apportionment.apply(apply_rate(adjusted.amount, cfg.flat_rate or 0.0)),
            "pa40.tax",
            ["pa40.adjustedTaxableIncome"],
            f"{cfg.flat_rate or 0:.2%} x adjusted taxable income{residency}",
        )

        withholding = self.state_withholding(tax_return)
        overpaid, owed = self.settle(tax, withholding)

        detail = PA40Result(
            compensation=compensation,
            interest=interest,
            dividends=dividends,
            business_profits=business,
            net_gains=gains,
            rents_royalties=rents,
            estate_trust_income=estates_trusts,
            total_taxable_income=total,
            deduction_529=deduction_529,
            adjusted_taxable_income=adjusted,
            tax=tax,
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
            state_agi=total.amount,
            state_taxable_income=adjusted.amount,
            state_tax=tax.amount,
            state_credits=0,
            tax_after_credits=tax.amount,
            state_withholding=withholding.amount,
            overpaid=overpaid.amount,
            amount_owed=owed.amount,
            detail=detail,
        )
