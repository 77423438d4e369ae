"""
Document leaf nodes.

Schedules cite raw input through stable leaf ids such as
``w2:{id}:box1`` or ``itemized.medicalExpenses``. This module owns those
ids: it builds them, turns a TaxReturn into the matching leaf values,
and resolves a leaf id back to a human label.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from models.tax_return import TaxReturn
from models.traced import TracedValue, traced_from_document

W2_BOXES = {
    "box1": "Wages, tips, other compensation",
    "box2": "Federal income tax withheld",
    "box3": "Social security wages",
    "box4": "Social security tax withheld",
    "box5": "Medicare wages and tips",
    "box6": "Medicare tax withheld",
    "box17": "State income tax withheld",
}

# Boxes whose model attribute is not the bare box name
_W2_ATTRS = {"box17": "box17_state_income_tax"}

INT_BOXES = {
    "box1": "Interest income",
    "box3": "U.S. Treasury interest",
    "box4": "Federal income tax withheld",
    "box6": "Foreign tax paid",
    "box8": "Tax-exempt interest",
}

DIV_BOXES = {
    "box1a": "Total ordinary dividends",
    "box1b": "Qualified dividends",
    "box2a": "Capital gain distributions",
    "box4": "Federal income tax withheld",
    "box7": "Foreign tax paid",
    "box12": "Exempt-interest dividends",
}

SCHEDULE_C_FIELDS = {
    "grossReceipts": "gross_receipts",
    "returnsAndAllowances": "returns_and_allowances",
    "costOfGoodsSold": "cost_of_goods_sold",
    "otherIncome": "other_income",
    "advertising": "advertising",
    "carAndTruck": "car_and_truck",
    "contractLabor": "contract_labor",
    "insurance": "insurance",
    "legalAndProfessional": "legal_and_professional",
    "officeExpense": "office_expense",
    "rentOrLease": "rent_or_lease",
    "supplies": "supplies",
    "taxesAndLicenses": "taxes_and_licenses",
    "travel": "travel",
    "meals": "meals",
    "utilities": "utilities",
    "otherExpenses": "other_expenses",
    "homeOffice": "home_office_deduction",
}

ITEMIZED_FIELDS = {
    "medicalExpenses": "medical_expenses",
    "stateLocalIncomeTax": "state_local_income_tax",
    "stateLocalSalesTax": "state_local_sales_tax",
    "realEstateTax": "real_estate_tax",
    "personalPropertyTax": "personal_property_tax",
    "mortgageInterest": "mortgage_interest",
    "mortgagePrincipal": "mortgage_principal",
    "investmentInterest": "investment_interest",
    "charitableCash": "charitable_cash",
    "charitableNonCash": "charitable_non_cash",
    "otherItemized": "other_itemized",
}

ADJUSTMENT_FIELDS = {
    "educatorExpenses": "educator_expenses",
    "hsaDeduction": "hsa_deduction",
    "traditionalIraContribution": "traditional_ira_contribution",
    "studentLoanInterest": "student_loan_interest",
}

SSA_BOXES = {
    "box5": "Net benefits",
    "box6": "Federal income tax withheld",
}

RENTAL_FIELDS = {
    "rentsReceived": "rents_received",
    "royaltiesReceived": "royalties_received",
    "advertising": "advertising",
    "autoTravel": "auto_travel",
    "cleaningMaintenance": "cleaning_maintenance",
    "commissions": "commissions",
    "insurance": "insurance",
    "legalProfessional": "legal_professional",
    "managementFees": "management_fees",
    "mortgageInterest": "mortgage_interest",
    "otherInterest": "other_interest",
    "repairs": "repairs",
    "supplies": "supplies",
    "taxes": "taxes",
    "utilities": "utilities",
    "depreciation": "depreciation",
    "otherExpenses": "other_expenses",
}

RENTAL_INCOME_FIELDS = ("rentsReceived", "royaltiesReceived")

K1_FIELDS = {
    "ordinaryIncome": "ordinary_income",
    "rentalIncome": "rental_income",
    "guaranteedPayments": "guaranteed_payments",
    "interestIncome": "interest_income",
    "ordinaryDividends": "ordinary_dividends",
    "qualifiedDividends": "qualified_dividends",
    "shortTermCapitalGain": "short_term_capital_gain",
    "longTermCapitalGain": "long_term_capital_gain",
    "selfEmploymentEarnings": "self_employment_earnings",
    "section199AQBI": "section_199a_qbi",
}

AMT_ITEM_FIELDS = {
    "isoSpread": "iso_spread",
    "privateActivityBondInterest": "private_activity_bond_interest",
}

STATE_ENTRY_FIELDS = {
    "contributions529": "contributions_529",
    "rentPaidInState": "rent_paid_in_state",
}

_LEAF_PATTERN = re.compile(r"^(w2|1099int|1099div|ssa1099|capital|schedulec|rental|k1):(.+?):(.+)$")


def w2_ref(w2_id: str, box: str) -> str:
    return f"w2:{w2_id}:{box}"


def w2_amount(w2, box: str) -> int:
    return getattr(w2, _W2_ATTRS.get(box, box), 0)


def int_ref(form_id: str, box: str) -> str:
    return f"1099int:{form_id}:{box}"


def div_ref(form_id: str, box: str) -> str:
    return f"1099div:{form_id}:{box}"


def capital_ref(txn_id: str) -> str:
    return f"capital:{txn_id}:gainLoss"


def schedule_c_ref(business_id: str, field_name: str) -> str:
    return f"schedulec:{business_id}:{field_name}"


def itemized_ref(field_name: str) -> str:
    return f"itemized.{field_name}"


def adjustment_ref(field_name: str) -> str:
    return f"adjustments.{field_name}"


def estimated_ref(quarter: int) -> str:
    return f"estimatedTax.q{quarter}"


def ssa_ref(form_id: str, box: str) -> str:
    return f"ssa1099:{form_id}:{box}"


def rental_ref(property_id: str, field_name: str) -> str:
    return f"rental:{property_id}:{field_name}"


def k1_ref(k1_id: str, field_name: str) -> str:
    return f"k1:{k1_id}:{field_name}"


def amt_item_ref(field_name: str) -> str:
    return f"amtItems.{field_name}"


def state_entry_ref(state_code: str, field_name: str) -> str:
    return f"state.{state_code.upper()}.{field_name}"


OTHER_INCOME_REF = "otherIncome"
ST_CARRYOVER_REF = "priorYear.capitalLossCarryforwardST"
LT_CARRYOVER_REF = "priorYear.capitalLossCarryforwardLT"
DEPENDENT_CARE_EXPENSES_REF = "dependentCare.totalExpenses"
DEPENDENT_CARE_SPOUSE_EARNED_REF = "dependentCare.spouseEarnedIncome"


def collect_document_values(tax_return: TaxReturn) -> Dict[str, TracedValue]:
    """Leaf values for every document field and user entry on the return."""
    values: Dict[str, TracedValue] = {}

    def put(tv: TracedValue) -> None:
        values[tv.node_id] = tv

    for w2 in tax_return.w2s:
        for box, label in W2_BOXES.items():
            put(traced_from_document(w2_amount(w2, box), f"w2:{w2.id}", box, f"W-2 from {w2.employer_name} ({label})"))

    for f in tax_return.form_1099_ints:
        for box, label in INT_BOXES.items():
            put(traced_from_document(getattr(f, box), f"1099int:{f.id}", box, f"1099-INT from {f.payer_name} ({label})"))

    for f in tax_return.form_1099_divs:
        for box, label in DIV_BOXES.items():
            put(traced_from_document(getattr(f, box), f"1099div:{f.id}", box, f"1099-DIV from {f.payer_name} ({label})"))

    for f in tax_return.form_ssa1099s:
        for box, label in SSA_BOXES.items():
            put(traced_from_document(getattr(f, box), f"ssa1099:{f.id}", box, f"SSA-1099 ({label})"))

    for txn in tax_return.capital_transactions:
        term = "long-term" if txn.long_term else "short-term"
        put(traced_from_document(txn.gain_loss, f"capital:{txn.id}", "gainLoss", f"Sale of {txn.description} ({term})"))

    for biz in tax_return.schedule_c_businesses:
        for field_name, attr in SCHEDULE_C_FIELDS.items():
            put(traced_from_document(
                getattr(biz, attr), f"schedulec:{biz.id}", field_name, f"{biz.business_name} ({field_name})"
            ))

    for prop in tax_return.rental_properties:
        for field_name, attr in RENTAL_FIELDS.items():
            put(traced_from_document(
                getattr(prop, attr), f"rental:{prop.id}", field_name, f"{prop.property_address} ({field_name})"
            ))

    for k1 in tax_return.schedule_k1s:
        for field_name, attr in K1_FIELDS.items():
            put(traced_from_document(
                getattr(k1, attr), f"k1:{k1.id}", field_name, f"K-1 from {k1.entity_name} ({field_name})"
            ))

    itemized = tax_return.deductions.itemized
    if itemized is not None:
        for field_name, attr in ITEMIZED_FIELDS.items():
            put(traced_from_document(
                getattr(itemized, attr), "itemized", field_name, f"Itemized deductions ({field_name})",
                node_id=itemized_ref(field_name),
            ))

    for field_name, attr in ADJUSTMENT_FIELDS.items():
        put(traced_from_document(
            getattr(tax_return.adjustments, attr), "adjustments", field_name, f"Adjustment ({field_name})",
            node_id=adjustment_ref(field_name),
        ))

    for field_name, attr in AMT_ITEM_FIELDS.items():
        put(traced_from_document(
            getattr(tax_return.amt_items, attr), "amtItems", field_name, f"Form 6251 item ({field_name})",
            node_id=amt_item_ref(field_name),
        ))

    for state in tax_return.states:
        for field_name, attr in STATE_ENTRY_FIELDS.items():
            put(traced_from_document(
                getattr(state, attr), f"state.{state.state_code}", field_name,
                f"{state.state_code} return ({field_name})", node_id=state_entry_ref(state.state_code, field_name),
            ))

    for quarter in range(1, 5):
        put(traced_from_document(
            getattr(tax_return.estimated_payments, f"q{quarter}"), "estimatedTax", f"q{quarter}",
            f"Estimated tax payment Q{quarter}", node_id=estimated_ref(quarter),
        ))

    put(traced_from_document(tax_return.other_income, "otherIncome", "amount", "Other income", node_id=OTHER_INCOME_REF))

    if tax_return.prior_year is not None:
        put(traced_from_document(
            tax_return.prior_year.capital_loss_carryforward_st, "priorYear", "capitalLossCarryforwardST",
            "Short-term capital loss carryover", node_id=ST_CARRYOVER_REF,
        ))
        put(traced_from_document(
            tax_return.prior_year.capital_loss_carryforward_lt, "priorYear", "capitalLossCarryforwardLT",
            "Long-term capital loss carryover", node_id=LT_CARRYOVER_REF,
        ))

    if tax_return.dependent_care is not None:
        put(traced_from_document(
            tax_return.dependent_care.total_expenses, "dependentCare", "totalExpenses",
            "Qualifying care expenses", node_id=DEPENDENT_CARE_EXPENSES_REF,
        ))
        if tax_return.dependent_care.spouse_earned_income is not None:
            put(traced_from_document(
                tax_return.dependent_care.spouse_earned_income, "dependentCare", "spouseEarnedIncome",
                "Spouse earned income", node_id=DEPENDENT_CARE_SPOUSE_EARNED_REF,
            ))

    return values


def resolve_document_ref(tax_return: TaxReturn, ref_id: str) -> Tuple[str, int]:
    """
    Label and amount for a document leaf id.

    Unknown documents resolve to ``("Unknown <kind> (<id>)", 0)`` rather
    than raising, since the explain view must render whatever id it is given.
    """
    m = _LEAF_PATTERN.match(ref_id)
    if m:
        kind, doc_id, field_name = m.groups()
        if kind == "w2":
            doc = next((w for w in tax_return.w2s if w.id == doc_id), None)
            if doc is None:
                return f"Unknown W-2 ({doc_id})", 0
            return f"W-2 from {doc.employer_name} ({W2_BOXES.get(field_name, field_name)})", w2_amount(doc, field_name)
        if kind == "1099int":
            doc = next((f for f in tax_return.form_1099_ints if f.id == doc_id), None)
            if doc is None:
                return f"Unknown 1099-INT ({doc_id})", 0
            return f"1099-INT from {doc.payer_name} ({INT_BOXES.get(field_name, field_name)})", getattr(doc, field_name, 0)
        if kind == "1099div":
            doc = next((f for f in tax_return.form_1099_divs if f.id == doc_id), None)
            if doc is None:
                return f"Unknown 1099-DIV ({doc_id})", 0
            return f"1099-DIV from {doc.payer_name} ({DIV_BOXES.get(field_name, field_name)})", getattr(doc, field_name, 0)
        if kind == "ssa1099":
            doc = next((f for f in tax_return.form_ssa1099s if f.id == doc_id), None)
            if doc is None:
                return f"Unknown SSA-1099 ({doc_id})", 0
            return f"SSA-1099 ({SSA_BOXES.get(field_name, field_name)})", getattr(doc, field_name, 0)
        if kind == "rental":
            doc = next((p for p in tax_return.rental_properties if p.id == doc_id), None)
            if doc is None:
                return f"Unknown rental property ({doc_id})", 0
            return f"{doc.property_address} ({field_name})", getattr(doc, RENTAL_FIELDS.get(field_name, field_name), 0)
        if kind == "k1":
            doc = next((k for k in tax_return.schedule_k1s if k.id == doc_id), None)
            if doc is None:
                return f"Unknown K-1 ({doc_id})", 0
            return f"K-1 from {doc.entity_name} ({field_name})", getattr(doc, K1_FIELDS.get(field_name, field_name), 0)
        if kind == "capital":
            doc = next((t for t in tax_return.capital_transactions if t.id == doc_id), None)
            if doc is None:
                return f"Unknown sale ({doc_id})", 0
            return f"Sale of {doc.description}", doc.gain_loss
        # schedulec
        doc = next((b for b in tax_return.schedule_c_businesses if b.id == doc_id), None)
        if doc is None:
            return f"Unknown business ({doc_id})", 0
        attr = SCHEDULE_C_FIELDS.get(field_name, field_name)
        return f"{doc.business_name} ({field_name})", getattr(doc, attr, 0)

    leaf = collect_document_values(tax_return).get(ref_id)
    if leaf is not None:
        return leaf.source.description or ref_id, leaf.amount
    return f"Unknown ({ref_id})", 0


def k1_entries(tax_return: TaxReturn, field_name: str) -> List[Tuple[int, str]]:
    """Nonzero ``(amount, leaf id)`` pairs for one K-1 field across all K-1s."""
    attr = K1_FIELDS[field_name]
    return [
        (getattr(k1, attr), k1_ref(k1.id, field_name))
        for k1 in tax_return.schedule_k1s
        if getattr(k1, attr) != 0
    ]
