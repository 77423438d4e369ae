"""
Tests for compute_all and the explain graph.

Tests cover:
- compute_all: federal and state results, findings, executed schedules
- Every computed input resolves to a node in the value map
- Topological order of the value map
- Totals, copies and floored differences recomputed from their inputs
- build_trace / explain_line rendering
- Cycle detection and unknown leaves
"""

from datetime import date

import pytest

from calculator.engine import ComputeResult, compute_all
from calculator.exceptions import TraceCycleError, UnsupportedTaxYearError
from calculator.trace import build_trace, explain_line, topological_sort
from models.deductions import Adjustments, AMTItems, DependentCareExpenses, PriorYearCarryforwards
from models.state_return import ResidencyType
from models.taxpayer import FilingStatus
from models.traced import traced_from_computation
from tests.fixtures.returns import (
    make_business,
    make_child,
    make_dividends,
    make_interest,
    make_itemized,
    make_k1,
    make_rental,
    make_return,
    make_sale,
    make_ssa,
    make_state,
    make_w2,
)


def create_illinois_return():
    return make_return(
        w2s=[make_w2(6_000_000, withheld=600_000, state="IL", state_withheld=250_000)],
        states=[make_state("IL")],
    )


def create_full_return():
    """Joint return touching every schedule, credit and state module."""
    return make_return(
        FilingStatus.MARRIED_JOINT,
        w2s=[
            make_w2(9_000_000, withheld=900_000, state="IL", state_withheld=300_000),
            make_w2(4_000_000, withheld=300_000, w2_id="w2-2", employer="Beta LLC", state="CA"),
        ],
        form_1099_ints=[make_interest(250_000, box3=50_000)],
        form_1099_divs=[make_dividends(400_000, qualified=300_000, box2a=100_000, box7=5_000)],
        capital_transactions=[
            make_sale(1_500_000, 1_000_000),
            make_sale(200_000, 500_000, long_term=False, txn_id="sale-2"),
        ],
        schedule_c_businesses=[make_business(3_000_000, supplies=400_000)],
        rental_properties=[make_rental(1_800_000, mortgage_interest=900_000, depreciation=1_200_000)],
        schedule_k1s=[make_k1(
            ordinary_income=1_500_000, interest_income=20_000, long_term_capital_gain=250_000,
            self_employment_earnings=1_500_000, section_199a_qbi=1_500_000,
        )],
        form_ssa1099s=[make_ssa(1_200_000, withheld=60_000)],
        adjustments=Adjustments(traditional_ira_contribution=400_000, student_loan_interest=120_000),
        amt_items=AMTItems(private_activity_bond_interest=30_000),
        dependents=[make_child("Sam", 2015), make_child("Ava", 2020, ssn="987-65-4322")],
        dependent_care=DependentCareExpenses(total_expenses=400_000),
        deductions=make_itemized(real_estate_tax=900_000, mortgage_interest=2_400_000, charitable_cash=300_000),
        prior_year=PriorYearCarryforwards(capital_loss_carryforward_lt=100_000),
        states=[
            make_state("IL", ResidencyType.PART_YEAR, move_out_date=date(2025, 6, 30)),
            make_state("CA", ResidencyType.PART_YEAR, move_in_date=date(2025, 7, 1), rent_paid_in_state=1_800_000),
            make_state("PA", ResidencyType.NONRESIDENT, contributions_529=500_000),
            make_state("TX"),
        ],
    )


class TestComputeAll:
    def test_federal_and_state(self):
        result = compute_all(create_illinois_return())
        assert result.tax_year == 2025
        assert result.form1040.refund == 83_850
        il = result.state_result("il")
        assert il.state_tax == 284_006
        assert il.state_withholding == 250_000
        assert il.amount_owed == 34_006
        assert result.executed_schedules == ["IL-1040"]

    def test_values_hold_federal_state_and_document_nodes(self):
        result = compute_all(create_illinois_return())
        assert result.value("form1040.line15").amount == 4_500_000
        assert result.value("w2:w2-1:box1").amount == 6_000_000
        assert result.value("w2:w2-1:box17").amount == 250_000
        assert result.value("il1040.ilTax").amount == 284_006
        assert result.value("nonexistent.node") is None

    def test_state_labels_merged(self):
        result = compute_all(create_illinois_return())
        assert result.label_for("form1040.line11") == "Adjusted gross income"
        assert result.label_for("il1040.ilTax") != "il1040.ilTax"

    def test_unsupported_state_reported(self):
        tax_return = make_return(
            w2s=[make_w2(6_000_000)],
            states=[make_state("IL"), make_state("NY"), make_state("TX")],
        )
        result = compute_all(tax_return)
        assert [r.state_code for r in result.state_results] == ["IL", "TX"]
        codes = [f.code for f in result.findings]
        assert "STATE_NOT_SUPPORTED" in codes
        assert result.state_result("NY") is None

    def test_unsupported_year(self):
        with pytest.raises(UnsupportedTaxYearError):
            compute_all(make_return(tax_year=2024))

    def test_input_not_mutated(self):
        tax_return = create_full_return()
        before = tax_return.model_dump()
        compute_all(tax_return)
        assert tax_return.model_dump() == before

    def test_repeatable(self):
        tax_return = create_full_return()
        assert compute_all(tax_return).to_dict() == compute_all(tax_return).to_dict()

    def test_to_dict(self):
        data = compute_all(create_illinois_return()).to_dict()
        assert data["taxYear"] == 2025
        assert data["form1040"]["line15"]["amount"] == 4_500_000
        assert data["stateResults"][0]["state_code"] == "IL"
        assert "form1040.line24" in data["values"]
        assert data["findings"][0]["code"] == "SCOPE_LIMITATIONS"


class TestGraph:
    def test_every_input_is_a_node(self):
        result = compute_all(create_full_return())
        missing = {
            (node_id, input_id)
            for node_id, tv in result.values.items()
            for input_id in tv.inputs
            if input_id not in result.values
        }
        assert missing == set()

    def test_node_ids_match_keys(self):
        result = compute_all(create_full_return())
        for node_id, tv in result.values.items():
            assert tv.node_id == node_id

    def test_topological_order(self):
        result = compute_all(create_full_return())
        ordered = topological_sort(result.values)
        assert sorted(ordered) == sorted(result.values)
        position = {node_id: i for i, node_id in enumerate(ordered)}
        for node_id, tv in result.values.items():
            for input_id in tv.inputs:
                assert position[input_id] < position[node_id]

    def test_full_return_executes_every_schedule(self):
        result = compute_all(create_full_return())
        names = result.form1040.executed_schedules()
        for name in ("scheduleA", "scheduleC", "scheduleD", "scheduleE", "scheduleSE", "form8995",
                     "schedule8812", "form1116", "form2441"):
            assert name in names
        assert len(result.state_results) == 4

    @pytest.mark.parametrize("leaf", ["state.PA.contributions529", "state.CA.rentPaidInState"])
    def test_state_entries_are_leaves(self, leaf):
        result = compute_all(create_full_return())
        assert result.value(leaf).inputs == ()
        assert any(leaf in tv.inputs for tv in result.values.values())


SUM_NODES = [
    "form1040.line8",
    "form1040.line9",
    "form1040.line14",
    "form1040.line18",
    "form1040.line21",
    "form1040.line23",
    "form1040.line24",
    "form1040.line33",
    "schedule1.line26",
    "scheduleE.line23a",
    "scheduleE.line41",
    "form8582.netPassive",
]

COPY_NODES = [
    "form1040.line1z",
    "form1040.line2b",
    "form1040.line3b",
    "form1040.line7",
    "form1040.line10",
    "form1040.line13",
    "form1040.line17",
]


class TestLineArithmetic:
    """Totals recomputed from the values their inputs point at."""

    @pytest.fixture(scope="class")
    def values(self):
        return compute_all(create_full_return()).values

    @pytest.mark.parametrize("node_id", SUM_NODES)
    def test_sums(self, values, node_id):
        tv = values[node_id]
        assert tv.inputs
        assert tv.amount == sum(values[i].amount for i in tv.inputs)

    @pytest.mark.parametrize("node_id", COPY_NODES)
    def test_copies(self, values, node_id):
        (source,) = values[node_id].inputs
        assert values[node_id].amount == values[source].amount

    def test_agi(self, values):
        assert values["form1040.line11"].amount == values["form1040.line9"].amount - values["form1040.line10"].amount

    @pytest.mark.parametrize("node_id,minuend,subtrahend", [
        ("form1040.line15", "form1040.line11", "form1040.line14"),
        ("form1040.line22", "form1040.line18", "form1040.line21"),
        ("form1040.line34", "form1040.line33", "form1040.line24"),
        ("form1040.line37", "form1040.line24", "form1040.line33"),
        ("form6251.line11", "form6251.line7", "form6251.line10"),
    ])
    def test_floored_differences(self, values, node_id, minuend, subtrahend):
        assert values[node_id].inputs == (minuend, subtrahend)
        assert values[node_id].amount == max(0, values[minuend].amount - values[subtrahend].amount)

    def test_refund_or_balance_due(self, values):
        assert min(values["form1040.line34"].amount, values["form1040.line37"].amount) == 0


class TestExplain:
    def test_build_trace(self):
        result = compute_all(create_illinois_return())
        trace = build_trace(result, "form1040.line15")
        assert trace.label == "Taxable income"
        assert trace.output.amount == 4_500_000
        assert [child.node_id for child in trace.inputs] == ["form1040.line11", "form1040.line14"]
        assert trace.irs_citation == "IRC Section 1; Form 1040"

    def test_trace_reaches_documents(self):
        result = compute_all(create_illinois_return())
        trace = build_trace(result, "form1040.line1a")
        (leaf,) = trace.inputs
        assert leaf.node_id == "w2:w2-1:box1"
        assert leaf.inputs == ()
        assert leaf.label == "W-2 from Acme Corp (Wages, tips, other compensation)"

    def test_explain_line(self):
        result = compute_all(create_illinois_return())
        lines = explain_line(result, "form1040.line15").splitlines()
        assert lines[0] == "Taxable income: $45,000.00 [IRC Section 1; Form 1040]"
        assert lines[1] == "  |- Adjusted gross income: $60,000.00 [IRC Section 62; Form 1040]"
        assert any(
            line.strip() == "|- W-2 from Acme Corp (Wages, tips, other compensation): $60,000.00"
            for line in lines
        )

    def test_schedule_c_labels(self):
        tax_return = make_return(schedule_c_businesses=[make_business(1_000_000)])
        result = compute_all(tax_return)
        assert result.label_for("scheduleC.biz-1.line31") == "Schedule C (biz-1): Net profit or (loss)"

    def test_unknown_document_leaf(self):
        result = compute_all(create_illinois_return())
        values = dict(result.values)
        values["custom.total"] = traced_from_computation(0, "custom.total", ["w2:missing:box1"], "test")
        patched = ComputeResult(2025, result.form1040, (), values, result.labels, tax_return=result.tax_return)
        (leaf,) = build_trace(patched, "custom.total").inputs
        assert leaf.label == "Unknown W-2 (missing)"
        assert leaf.output.amount == 0


class TestCycles:
    def create_cyclic_result(self, tax_return=None):
        values = {
            "a": traced_from_computation(1, "a", ["b"], "b"),
            "b": traced_from_computation(1, "b", ["a"], "a"),
            "c": traced_from_computation(2, "c", ["missing"], "missing"),
        }
        return ComputeResult(2025, None, (), values, {}, tax_return=tax_return)

    def test_build_trace_detects_cycle(self):
        with pytest.raises(TraceCycleError) as exc_info:
            build_trace(self.create_cyclic_result(), "a")
        assert exc_info.value.node_ids == ["a", "b"]

    def test_topological_sort_detects_cycle(self):
        with pytest.raises(TraceCycleError) as exc_info:
            topological_sort(self.create_cyclic_result().values)
        assert exc_info.value.node_ids == ["a", "b"]

    def test_unknown_node_without_return(self):
        (leaf,) = build_trace(self.create_cyclic_result(), "c").inputs
        assert leaf.label == "Unknown (missing)"
        assert leaf.output.amount == 0
