from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from calculator.brackets import BracketTable


# Amounts keyed by filing status value ("single", "married_joint", ...).
# FilingStatus is a str Enum, so members index these dicts directly.
StatusAmounts = Dict[str, int]


@dataclass(frozen=True)
class EITCSchedule:
    """One row of the EIC table, selected by qualifying-child count."""

    phase_in_rate: float
    plateau_start: int  # earned income amount; max credit reached here
    max_credit: int
    phaseout_start_single: int
    phaseout_start_mfj: int
    phaseout_rate: float


@dataclass(frozen=True)
class TaxYearConfig:
    """
    Centralized constants for a given tax year, in integer cents.

    Built by ``config.tax_config_loader`` from the year's YAML parameter
    file. Nothing in the engine hard-codes a year's figures; schedules and
    credits read them from here.
    """

    tax_year: int
    ordinary_brackets: BracketTable
    ltcg_brackets: BracketTable  # 0% / 15% / 20% floors for QD and LTCG
    standard_deduction: StatusAmounts
    additional_standard_deduction: StatusAmounts  # per condition (65+ or blind)
    dependent_filer_minimum: int
    dependent_filer_earned_addon: int

    # Schedule SE
    ss_wage_base: int
    ss_rate: float  # 12.4%
    medicare_rate: float  # 2.9%, no wage base
    se_net_earnings_factor: float  # 92.35%
    se_deductible_fraction: float  # 50%

    # Form 8959 / Form 8960
    employee_medicare_rate: float  # 1.45% withheld on W-2 Medicare wages
    additional_medicare_rate: float
    additional_medicare_threshold: StatusAmounts
    niit_rate: float
    niit_threshold: StatusAmounts

    # Schedule A
    medical_floor_rate: float
    salt_base_cap: StatusAmounts
    salt_phaseout_threshold: StatusAmounts
    salt_phaseout_rate: float
    salt_floor: StatusAmounts
    mortgage_limit_post_tcja: StatusAmounts
    mortgage_limit_pre_tcja: StatusAmounts
    charitable_cash_rate: float  # of AGI; also the aggregate cap
    charitable_noncash_rate: float

    # Schedules B, C, D
    schedule_b_threshold: int
    meals_deductible_rate: float
    capital_loss_limit: StatusAmounts

    # Earned income credit
    eitc_schedules: Tuple[EITCSchedule, ...]  # index = min(children, 3)
    eitc_investment_income_limit: int
    eitc_min_age: int
    eitc_max_age: int
    eitc_child_age_limit: int  # under this age at year end
    eitc_student_age_limit: int
    eitc_min_months_residency: int

    # Child tax credit / additional child tax credit
    ctc_per_child: int
    ctc_other_dependent: int
    ctc_refundable_per_child: int
    ctc_child_age_limit: int
    ctc_phaseout_threshold: StatusAmounts
    ctc_phaseout_step: int  # $1,000 or fraction thereof
    ctc_phaseout_per_step: int  # $50
    actc_earned_income_floor: int
    actc_rate: float

    # Child and dependent care credit
    dcc_expense_limit_one: int
    dcc_expense_limit_two_or_more: int
    dcc_max_rate: float
    dcc_min_rate: float
    dcc_rate_step_agi_floor: int
    dcc_rate_step: int  # $2,000 or fraction thereof
    dcc_rate_step_reduction: float
    dcc_child_age_limit: int

    # Foreign tax credit
    ftc_direct_election_limit: StatusAmounts

    # QBI deduction (simplified, below threshold only)
    qbi_rate: float
    qbi_threshold: StatusAmounts

    # Form 8582 rental real estate allowance
    passive_special_allowance: int
    passive_phaseout_start: int  # modified AGI
    passive_phaseout_range: int

    # Form 6251
    amt_exemption: StatusAmounts
    amt_phaseout_threshold: StatusAmounts
    amt_phaseout_rate: float
    amt_high_rate_threshold: StatusAmounts  # 28% applies above this
    amt_low_rate: float
    amt_high_rate: float

    # Taxable social security benefits (Pub. 915)
    ss_benefits_base_amount: StatusAmounts
    ss_benefits_additional_amount: StatusAmounts
    ss_benefits_tier1_rate: float
    ss_benefits_tier2_rate: float

    # Traditional IRA deduction
    ira_contribution_limit: int
    ira_catch_up: int
    ira_catch_up_age: int
    ira_reduction_step: int  # reductions round up to this step
    ira_phaseout_covered_start: StatusAmounts
    ira_phaseout_covered_end: StatusAmounts
    ira_phaseout_spouse_covered_start: int
    ira_phaseout_spouse_covered_end: int

    # Student loan interest deduction
    student_loan_max: int
    student_loan_phaseout_start: StatusAmounts
    student_loan_phaseout_end: StatusAmounts

    def eitc_schedule(self, qualifying_children: int) -> EITCSchedule:
        return self.eitc_schedules[min(qualifying_children, len(self.eitc_schedules) - 1)]
