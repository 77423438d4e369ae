"""
Tax Configuration Loader.

Loads per-year tax parameters from YAML files and turns them into the
frozen, cent-denominated configuration objects the engine computes with:
- ``TaxYearConfig`` for federal schedules and credits
- one ``StateTaxConfig`` per supported state

Parameter files are written in dollars so they can be checked line by
line against the published IRS and state tables.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from calculator.brackets import Bracket, BracketTable, validate_bracket_schedule
from calculator.decimal_math import cents
from calculator.exceptions import MalformedBracketTableError, TaxParameterError
from calculator.state.state_tax_config import RentersCredit, StateTaxConfig
from calculator.tax_year_config import EITCSchedule, TaxYearConfig

logger = logging.getLogger(__name__)

# Default config directory
CONFIG_DIR = Path(__file__).parent / "tax_parameters"

FILING_STATUS_KEYS = (
    "single",
    "married_joint",
    "married_separate",
    "head_of_household",
    "qualifying_widow",
)


@dataclass
class ConfigMetadata:
    """Metadata about a configuration file."""
    version: str
    tax_year: int
    effective_date: str
    source: str  # "IRS", "state", "custom"
    irs_references: List[str] = field(default_factory=list)
    last_updated: str = ""
    updated_by: str = ""
    notes: str = ""


def _require(section: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return section[key]
    except (KeyError, TypeError):
        raise TaxParameterError(f"Missing parameter '{key}' in {where}") from None


def _status_amounts(raw: Mapping[str, Any], where: str) -> Dict[str, int]:
    """Dollar amounts keyed by filing status -> cents; every status is required."""
    missing = [s for s in FILING_STATUS_KEYS if s not in (raw or {})]
    if missing:
        raise TaxParameterError(f"{where} is missing filing statuses: {missing}")
    return {status: cents(raw[status]) for status in FILING_STATUS_KEYS}


def _bracket_table(raw: Mapping[str, Any], where: str, require_all: bool = True) -> BracketTable:
    if not isinstance(raw, Mapping) or not raw:
        raise MalformedBracketTableError(f"{where}: bracket table must be a non-empty mapping")
    statuses = FILING_STATUS_KEYS if require_all else tuple(raw.keys())
    table: BracketTable = {}
    for status in statuses:
        rows = raw.get(status)
        if not rows:
            raise MalformedBracketTableError(f"{where}: no brackets for '{status}'")
        try:
            brackets = [Bracket(floor=cents(floor), rate=float(rate)) for floor, rate in rows]
        except (TypeError, ValueError) as e:
            raise MalformedBracketTableError(f"{where}.{status}: rows must be [floor, rate] pairs") from e
        table[status] = validate_bracket_schedule(brackets, f"{where}.{status}")
    return table


class TaxConfigLoader:
    """
    Loads tax configuration from YAML files.

    Raw files are cached per year; the built configuration objects are
    immutable and safe to share between computations.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the config loader.

        Args:
            config_dir: Directory containing YAML config files.
                       Defaults to src/config/tax_parameters/
        """
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self._raw: Dict[int, Dict[str, Any]] = {}
        self._metadata: Dict[int, ConfigMetadata] = {}

    def load_raw(self, tax_year: int) -> Dict[str, Any]:
        """
        Load the raw parameter mapping for a tax year.

        Raises:
            TaxParameterError: the file is missing or is not valid YAML.
        """
        if tax_year in self._raw:
            return self._raw[tax_year]

        year_file = self.config_dir / f"tax_year_{tax_year}.yaml"
        if not year_file.exists():
            raise TaxParameterError(f"No tax parameter file for {tax_year}: {year_file}")

        logger.info(f"Loading tax config from {year_file}")
        try:
            with open(year_file, 'r') as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise TaxParameterError(f"Could not parse {year_file}: {e}") from e

        if '_metadata' in config:
            self._metadata[tax_year] = ConfigMetadata(**config.pop('_metadata'))

        self._raw[tax_year] = config
        return config

    def get_metadata(self, tax_year: int) -> Optional[ConfigMetadata]:
        """Get metadata for a tax year's configuration."""
        self.load_raw(tax_year)  # Ensure loaded
        return self._metadata.get(tax_year)

    def build_year_config(self, tax_year: int) -> TaxYearConfig:
        """Build the federal configuration for ``tax_year``."""
        raw = self.load_raw(tax_year)
        where = f"tax_year_{tax_year}"

        se = _require(raw, 'self_employment', where)
        medicare = _require(raw, 'medicare', where)
        niit = _require(raw, 'niit', where)
        sched_a = _require(raw, 'schedule_a', where)
        salt = _require(sched_a, 'salt', f"{where}.schedule_a")
        mortgage = _require(sched_a, 'mortgage_limit', f"{where}.schedule_a")
        dep_filer = _require(raw, 'dependent_filer', where)
        eitc = _require(raw, 'eitc', where)
        ctc = _require(raw, 'child_tax_credit', where)
        dcc = _require(raw, 'dependent_care', where)
        ftc = _require(raw, 'foreign_tax_credit', where)
        qbi = _require(raw, 'qbi', where)
        passive = _require(raw, 'passive_activity', where)
        amt = _require(raw, 'amt', where)
        ssb = _require(raw, 'social_security_benefits', where)
        ira = _require(raw, 'ira', where)
        ira_covered = _require(ira, 'phaseout_covered', f"{where}.ira")
        ira_spouse = _require(ira, 'phaseout_spouse_covered', f"{where}.ira")
        student_loan = _require(raw, 'student_loan_interest', where)

        schedules = tuple(
            EITCSchedule(
                phase_in_rate=float(row['phase_in_rate']),
                plateau_start=cents(row['plateau_start']),
                max_credit=cents(row['max_credit']),
                phaseout_start_single=cents(row['phaseout_start_single']),
                phaseout_start_mfj=cents(row['phaseout_start_mfj']),
                phaseout_rate=float(row['phaseout_rate']),
            )
            for row in _require(eitc, 'schedules', f"{where}.eitc")
        )
        if len(schedules) != 4:
            raise TaxParameterError(f"{where}.eitc.schedules must list 0, 1, 2 and 3+ children")

        return TaxYearConfig(
            tax_year=tax_year,
            ordinary_brackets=_bracket_table(_require(raw, 'ordinary_brackets', where), f"{where}.ordinary_brackets"),
            ltcg_brackets=_bracket_table(_require(raw, 'ltcg_brackets', where), f"{where}.ltcg_brackets"),
            standard_deduction=_status_amounts(_require(raw, 'standard_deduction', where), "standard_deduction"),
            additional_standard_deduction=_status_amounts(
                _require(raw, 'additional_standard_deduction', where), "additional_standard_deduction"
            ),
            dependent_filer_minimum=cents(_require(dep_filer, 'minimum', "dependent_filer")),
            dependent_filer_earned_addon=cents(_require(dep_filer, 'earned_income_addon', "dependent_filer")),
            ss_wage_base=cents(_require(se, 'ss_wage_base', "self_employment")),
            ss_rate=float(_require(se, 'ss_rate', "self_employment")),
            medicare_rate=float(_require(se, 'medicare_rate', "self_employment")),
            se_net_earnings_factor=float(_require(se, 'net_earnings_factor', "self_employment")),
            se_deductible_fraction=float(_require(se, 'deductible_fraction', "self_employment")),
            employee_medicare_rate=float(_require(medicare, 'employee_rate', "medicare")),
            additional_medicare_rate=float(_require(medicare, 'additional_rate', "medicare")),
            additional_medicare_threshold=_status_amounts(
                _require(medicare, 'additional_threshold', "medicare"), "medicare.additional_threshold"
            ),
            niit_rate=float(_require(niit, 'rate', "niit")),
            niit_threshold=_status_amounts(_require(niit, 'threshold', "niit"), "niit.threshold"),
            medical_floor_rate=float(_require(sched_a, 'medical_floor_rate', "schedule_a")),
            salt_base_cap=_status_amounts(_require(salt, 'base_cap', "salt"), "salt.base_cap"),
            salt_phaseout_threshold=_status_amounts(
                _require(salt, 'phaseout_threshold', "salt"), "salt.phaseout_threshold"
            ),
            salt_phaseout_rate=float(_require(salt, 'phaseout_rate', "salt")),
            salt_floor=_status_amounts(_require(salt, 'floor', "salt"), "salt.floor"),
            mortgage_limit_post_tcja=_status_amounts(
                _require(mortgage, 'post_tcja', "mortgage_limit"), "mortgage_limit.post_tcja"
            ),
            mortgage_limit_pre_tcja=_status_amounts(
                _require(mortgage, 'pre_tcja', "mortgage_limit"), "mortgage_limit.pre_tcja"
            ),
            charitable_cash_rate=float(_require(sched_a, 'charitable_cash_rate', "schedule_a")),
            charitable_noncash_rate=float(_require(sched_a, 'charitable_noncash_rate', "schedule_a")),
            schedule_b_threshold=cents(_require(raw, 'schedule_b_threshold', where)),
            meals_deductible_rate=float(
                _require(_require(raw, 'schedule_c', where), 'meals_deductible_rate', "schedule_c")
            ),
            capital_loss_limit=_status_amounts(_require(raw, 'capital_loss_limit', where), "capital_loss_limit"),
            eitc_schedules=schedules,
            eitc_investment_income_limit=cents(_require(eitc, 'investment_income_limit', "eitc")),
            eitc_min_age=int(_require(eitc, 'min_age', "eitc")),
            eitc_max_age=int(_require(eitc, 'max_age', "eitc")),
            eitc_child_age_limit=int(_require(eitc, 'child_age_limit', "eitc")),
            eitc_student_age_limit=int(_require(eitc, 'student_age_limit', "eitc")),
            eitc_min_months_residency=int(_require(eitc, 'min_months_residency', "eitc")),
            ctc_per_child=cents(_require(ctc, 'per_child', "child_tax_credit")),
            ctc_other_dependent=cents(_require(ctc, 'other_dependent', "child_tax_credit")),
            ctc_refundable_per_child=cents(_require(ctc, 'refundable_per_child', "child_tax_credit")),
            ctc_child_age_limit=int(_require(ctc, 'child_age_limit', "child_tax_credit")),
            ctc_phaseout_threshold=_status_amounts(
                _require(ctc, 'phaseout_threshold', "child_tax_credit"), "child_tax_credit.phaseout_threshold"
            ),
            ctc_phaseout_step=cents(_require(ctc, 'phaseout_step', "child_tax_credit")),
            ctc_phaseout_per_step=cents(_require(ctc, 'phaseout_per_step', "child_tax_credit")),
            actc_earned_income_floor=cents(_require(ctc, 'actc_earned_income_floor', "child_tax_credit")),
            actc_rate=float(_require(ctc, 'actc_rate', "child_tax_credit")),
            dcc_expense_limit_one=cents(_require(dcc, 'expense_limit_one', "dependent_care")),
            dcc_expense_limit_two_or_more=cents(_require(dcc, 'expense_limit_two_or_more', "dependent_care")),
            dcc_max_rate=float(_require(dcc, 'max_rate', "dependent_care")),
            dcc_min_rate=float(_require(dcc, 'min_rate', "dependent_care")),
            dcc_rate_step_agi_floor=cents(_require(dcc, 'rate_step_agi_floor', "dependent_care")),
            dcc_rate_step=cents(_require(dcc, 'rate_step', "dependent_care")),
            dcc_rate_step_reduction=float(_require(dcc, 'rate_step_reduction', "dependent_care")),
            dcc_child_age_limit=int(_require(dcc, 'child_age_limit', "dependent_care")),
            ftc_direct_election_limit=_status_amounts(
                _require(ftc, 'direct_election_limit', "foreign_tax_credit"),
                "foreign_tax_credit.direct_election_limit",
            ),
            qbi_rate=float(_require(qbi, 'rate', "qbi")),
            qbi_threshold=_status_amounts(_require(qbi, 'threshold', "qbi"), "qbi.threshold"),
            passive_special_allowance=cents(_require(passive, 'special_allowance', "passive_activity")),
            passive_phaseout_start=cents(_require(passive, 'phaseout_start', "passive_activity")),
            passive_phaseout_range=cents(_require(passive, 'phaseout_range', "passive_activity")),
            amt_exemption=_status_amounts(_require(amt, 'exemption', "amt"), "amt.exemption"),
            amt_phaseout_threshold=_status_amounts(
                _require(amt, 'phaseout_threshold', "amt"), "amt.phaseout_threshold"
            ),
            amt_phaseout_rate=float(_require(amt, 'phaseout_rate', "amt")),
            amt_high_rate_threshold=_status_amounts(
                _require(amt, 'high_rate_threshold', "amt"), "amt.high_rate_threshold"
            ),
            amt_low_rate=float(_require(amt, 'low_rate', "amt")),
            amt_high_rate=float(_require(amt, 'high_rate', "amt")),
            ss_benefits_base_amount=_status_amounts(
                _require(ssb, 'base_amount', "social_security_benefits"), "social_security_benefits.base_amount"
            ),
            ss_benefits_additional_amount=_status_amounts(
                _require(ssb, 'additional_amount', "social_security_benefits"),
                "social_security_benefits.additional_amount",
            ),
            ss_benefits_tier1_rate=float(_require(ssb, 'tier1_rate', "social_security_benefits")),
            ss_benefits_tier2_rate=float(_require(ssb, 'tier2_rate', "social_security_benefits")),
            ira_contribution_limit=cents(_require(ira, 'contribution_limit', "ira")),
            ira_catch_up=cents(_require(ira, 'catch_up', "ira")),
            ira_catch_up_age=int(_require(ira, 'catch_up_age', "ira")),
            ira_reduction_step=cents(_require(ira, 'reduction_step', "ira")),
            ira_phaseout_covered_start=_status_amounts(
                _require(ira_covered, 'start', "ira.phaseout_covered"), "ira.phaseout_covered.start"
            ),
            ira_phaseout_covered_end=_status_amounts(
                _require(ira_covered, 'end', "ira.phaseout_covered"), "ira.phaseout_covered.end"
            ),
            ira_phaseout_spouse_covered_start=cents(_require(ira_spouse, 'start', "ira.phaseout_spouse_covered")),
            ira_phaseout_spouse_covered_end=cents(_require(ira_spouse, 'end', "ira.phaseout_spouse_covered")),
            student_loan_max=cents(_require(student_loan, 'maximum', "student_loan_interest")),
            student_loan_phaseout_start=_status_amounts(
                _require(student_loan, 'phaseout_start', "student_loan_interest"),
                "student_loan_interest.phaseout_start",
            ),
            student_loan_phaseout_end=_status_amounts(
                _require(student_loan, 'phaseout_end', "student_loan_interest"),
                "student_loan_interest.phaseout_end",
            ),
        )

    def build_state_configs(self, tax_year: int) -> Dict[str, StateTaxConfig]:
        """Build one ``StateTaxConfig`` per state listed in the year's file."""
        raw = self.load_raw(tax_year)
        configs: Dict[str, StateTaxConfig] = {}

        for code, params in (raw.get('states') or {}).items():
            code = code.upper()
            where = f"tax_year_{tax_year}.states.{code}"
            brackets = None
            if 'brackets' in params:
                brackets = _bracket_table(params['brackets'], f"{where}.brackets")
            flat_rate = params.get('flat_rate')
            configs[code] = StateTaxConfig(
                state_code=code,
                state_name=_require(params, 'name', where),
                tax_year=tax_year,
                form_label=_require(params, 'form_label', where),
                is_flat_tax=flat_rate is not None,
                flat_rate=float(flat_rate) if flat_rate is not None else None,
                brackets=brackets,
                standard_deduction=(
                    _status_amounts(params['standard_deduction'], f"{where}.standard_deduction")
                    if 'standard_deduction' in params else {}
                ),
                personal_exemption_amount=cents(params.get('personal_exemption_amount', 0)),
                personal_exemption_credit=cents(params.get('personal_exemption_credit', 0)),
                dependent_exemption_credit=cents(params.get('dependent_exemption_credit', 0)),
                exemption_phaseout_threshold=(
                    _status_amounts(params['exemption_phaseout_threshold'], f"{where}.exemption_phaseout_threshold")
                    if 'exemption_phaseout_threshold' in params else {}
                ),
                exemption_phaseout_step=cents(params.get('exemption_phaseout_step', 0)),
                exemption_phaseout_rate=float(params.get('exemption_phaseout_rate', 0.0)),
                eitc_percentage=params.get('eitc_percentage'),
                surtax_threshold=cents(params['surtax_threshold']) if 'surtax_threshold' in params else None,
                surtax_rate=float(params.get('surtax_rate', 0.0)),
                renters_credit={
                    key: RentersCredit(credit=cents(v['credit']), agi_limit=cents(v['agi_limit']))
                    for key, v in (params.get('renters_credit') or {}).items()
                },
                mortgage_limit=(
                    _status_amounts(params['mortgage_limit'], f"{where}.mortgage_limit")
                    if 'mortgage_limit' in params else {}
                ),
                max_529_deduction=cents(params.get('max_529_deduction', 0)),
                medical_floor_rate=float(params.get('medical_floor_rate', 0.0)),
            )
            if not configs[code].is_flat_tax and brackets is None:
                raise MalformedBracketTableError(f"{where}: needs either flat_rate or brackets")

        for code, name in (raw.get('no_income_tax_states') or {}).items():
            configs[code.upper()] = StateTaxConfig(
                state_code=code.upper(),
                state_name=name,
                tax_year=tax_year,
                form_label=f"{name} (no income tax)",
                has_income_tax=False,
            )

        return configs
