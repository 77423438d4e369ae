"""Tax law citation database and utilities."""

from typing import Optional

# Topics with IRC citations
TAX_CITATIONS = {
    "gross_income": {
        "irc": "IRC Section 61",
        "form": "Form 1040",
        "pub": "IRS Publication 17",
    },
    "adjusted_gross_income": {
        "irc": "IRC Section 62",
        "form": "Form 1040",
        "pub": "IRS Publication 17",
    },
    "standard_deduction": {
        "irc": "IRC Section 63(c)",
        "form": "Form 1040",
        "pub": "IRS Publication 501",
    },
    "tax_rates": {
        "irc": "IRC Section 1",
        "form": "Form 1040",
        "pub": "IRS Publication 17",
    },
    "capital_gains": {
        "irc": "IRC Section 1(h)",
        "form": "Schedule D (Form 1040)",
        "pub": "IRS Publication 550",
    },
    "capital_losses": {
        "irc": "IRC Section 1211(b)",
        "form": "Schedule D (Form 1040)",
        "pub": "IRS Publication 550",
    },
    "interest_dividends": {
        "irc": "IRC Section 61(a)",
        "form": "Schedule B (Form 1040)",
        "pub": "IRS Publication 550",
    },
    "business_income": {
        "irc": "IRC Section 162",
        "form": "Schedule C (Form 1040)",
        "pub": "IRS Publication 334",
    },
    "medical_expenses": {
        "irc": "IRC Section 213",
        "form": "Schedule A (Form 1040)",
        "pub": "IRS Publication 502",
    },
    "salt_deduction": {
        "irc": "IRC Section 164",
        "form": "Schedule A (Form 1040)",
        "pub": "IRS Publication 17",
    },
    "mortgage_interest": {
        "irc": "IRC Section 163(h)",
        "form": "Schedule A (Form 1040)",
        "pub": "IRS Publication 936",
    },
    "investment_interest": {
        "irc": "IRC Section 163(d)",
        "form": "Form 4952",
        "pub": "IRS Publication 550",
    },
    "charitable_contributions": {
        "irc": "IRC Section 170",
        "form": "Schedule A (Form 1040)",
        "pub": "IRS Publication 526",
    },
    "itemized_deductions": {
        "irc": "IRC Section 67",
        "form": "Schedule A (Form 1040)",
        "pub": "IRS Publication 17",
    },
    "self_employment_tax": {
        "irc": "IRC Section 1401",
        "form": "Schedule SE",
        "pub": "IRS Publication 334",
    },
    "additional_medicare_tax": {
        "irc": "IRC Section 3101(b)(2)",
        "form": "Form 8959",
        "pub": "IRS Publication 15",
    },
    "niit": {
        "irc": "IRC Section 1411",
        "form": "Form 8960",
        "pub": "IRS Publication 550",
    },
    "qbi_deduction": {
        "irc": "IRC Section 199A",
        "form": "Form 8995",
        "pub": "IRS Publication 535",
    },
    "child_tax_credit": {
        "irc": "IRC Section 24",
        "form": "Schedule 8812",
        "pub": "IRS Publication 972",
    },
    "earned_income_credit": {
        "irc": "IRC Section 32",
        "form": "Schedule EIC",
        "pub": "IRS Publication 596",
    },
    "dependent_care_credit": {
        "irc": "IRC Section 21",
        "form": "Form 2441",
        "pub": "IRS Publication 503",
    },
    "foreign_tax_credit": {
        "irc": "IRC Section 901",
        "form": "Form 1116",
        "pub": "IRS Publication 514",
    },
    "payments": {
        "irc": "IRC Section 31",
        "form": "Form 1040",
        "pub": "IRS Publication 505",
    },
    "alternative_minimum_tax": {
        "irc": "IRC Section 55",
        "form": "Form 6251",
        "pub": "IRS Publication 17",
    },
    "rental_income": {
        "irc": "IRC Section 469",
        "form": "Schedule E (Form 1040)",
        "pub": "IRS Publication 527",
    },
    "passive_activity_loss": {
        "irc": "IRC Section 469(i)",
        "form": "Form 8582",
        "pub": "IRS Publication 925",
    },
    "social_security_benefits": {
        "irc": "IRC Section 86",
        "form": "Form 1040",
        "pub": "IRS Publication 915",
    },
    "ira_deduction": {
        "irc": "IRC Section 219",
        "form": "Schedule 1 (Form 1040)",
        "pub": "IRS Publication 590-A",
    },
    "student_loan_interest": {
        "irc": "IRC Section 221",
        "form": "Schedule 1 (Form 1040)",
        "pub": "IRS Publication 970",
    },
}

# Exact node ids, then section prefixes ending in "." (longest prefix wins).
NODE_TOPICS = {
    "form1040.line1a": "gross_income",
    "form1040.line1z": "gross_income",
    "form1040.line2a": "interest_dividends",
    "form1040.line2b": "interest_dividends",
    "form1040.line3a": "interest_dividends",
    "form1040.line3b": "interest_dividends",
    "form1040.line6a": "social_security_benefits",
    "form1040.line6b": "social_security_benefits",
    "form1040.line7": "capital_gains",
    "form1040.line8": "gross_income",
    "form1040.line9": "gross_income",
    "form1040.line10": "adjusted_gross_income",
    "form1040.line11": "adjusted_gross_income",
    "form1040.line12": "standard_deduction",
    "form1040.line13": "qbi_deduction",
    "form1040.line15": "tax_rates",
    "form1040.line16": "tax_rates",
    "form1040.line17": "alternative_minimum_tax",
    "form1040.line19": "child_tax_credit",
    "form1040.line25": "payments",
    "form1040.line26": "payments",
    "form1040.line27": "earned_income_credit",
    "form1040.line28": "child_tax_credit",
    "form1040.line33": "payments",
    "form1040.line32": "payments",
    "standardDeduction": "standard_deduction",
    "earnedIncome": "earned_income_credit",
    "scheduleA.line1": "medical_expenses",
    "scheduleA.line3": "medical_expenses",
    "scheduleA.line4": "medical_expenses",
    "scheduleA.line5a": "salt_deduction",
    "scheduleA.line5b": "salt_deduction",
    "scheduleA.line5c": "salt_deduction",
    "scheduleA.line5d": "salt_deduction",
    "scheduleA.line5e": "salt_deduction",
    "scheduleA.line7": "salt_deduction",
    "scheduleA.line8a": "mortgage_interest",
    "scheduleA.line9": "investment_interest",
    "scheduleA.line10": "mortgage_interest",
    "scheduleA.line11": "charitable_contributions",
    "scheduleA.line12": "charitable_contributions",
    "scheduleA.line14": "charitable_contributions",
    "scheduleA.line17": "itemized_deductions",
    "scheduleD.line21": "capital_losses",
    "schedule1.iraLimit": "ira_deduction",
    "schedule1.iraModifiedAGI": "ira_deduction",
    "schedule1.line20": "ira_deduction",
    "schedule1.studentLoanModifiedAGI": "student_loan_interest",
    "schedule1.line21": "student_loan_interest",
    "credits.dependentCare": "dependent_care_credit",
    "credits.foreignTaxCredit": "foreign_tax_credit",
    "scheduleB.": "interest_dividends",
    "scheduleC.": "business_income",
    "scheduleD.": "capital_gains",
    "scheduleSE.": "self_employment_tax",
    "scheduleE.": "rental_income",
    "form8582.": "passive_activity_loss",
    "ssWorksheet.": "social_security_benefits",
    "schedule1.": "adjusted_gross_income",
    "form6251.": "alternative_minimum_tax",
    "form8959.": "additional_medicare_tax",
    "form8960.": "niit",
    "form8995.": "qbi_deduction",
    "ctc.": "child_tax_credit",
    "eitc.": "earned_income_credit",
    "form1116.": "foreign_tax_credit",
    "form4952.": "investment_interest",
    "form2441.": "dependent_care_credit",
}


def get_citation(topic: str) -> Optional[str]:
    """Get formatted citation for a tax topic."""
    if topic not in TAX_CITATIONS:
        return None
    c = TAX_CITATIONS[topic]
    return f"{c['irc']}; {c['form']}"


def topic_for_node(node_id: str) -> Optional[str]:
    """Topic for a node id: exact match first, then the longest section prefix."""
    if node_id in NODE_TOPICS:
        return NODE_TOPICS[node_id]
    prefixes = [p for p in NODE_TOPICS if p.endswith(".") and node_id.startswith(p)]
    if not prefixes:
        return None
    return NODE_TOPICS[max(prefixes, key=len)]


def citation_for_node(node_id: str) -> Optional[str]:
    """Citation string for a node id, or None when no topic applies."""
    topic = topic_for_node(node_id)
    return get_citation(topic) if topic else None
