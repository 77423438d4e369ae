"""
Explain graph over a computed return.

``build_trace`` expands a node into a tree of the values that produced
it, ``explain_line`` renders that tree as indented text, and
``topological_sort`` orders a value map so every node follows its inputs.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Mapping

from calculator.decimal_math import format_dollars
from calculator.engine import ComputeResult
from calculator.exceptions import TraceCycleError
from calculator.source_documents import resolve_document_ref
from models.traced import ComputeTrace, TracedValue, traced_from_document, traced_zero
from tax_references.citations import citation_for_node

__all__ = ["build_trace", "explain_line", "topological_sort", "resolve_document_ref"]


def _leaf(result: ComputeResult, node_id: str) -> ComputeTrace:
    if result.tax_return is not None:
        label, amount = resolve_document_ref(result.tax_return, node_id)
        output = traced_from_document(amount, node_id, "amount", label, node_id=node_id)
        return ComputeTrace(node_id, label, output, (), citation_for_node(node_id))
    return ComputeTrace(node_id, f"Unknown ({node_id})", traced_zero(node_id), ())


def build_trace(result: ComputeResult, node_id: str) -> ComputeTrace:
    """
    Explain tree rooted at ``node_id``.

    Inputs missing from ``result.values`` become leaves, resolved against
    the documents of the attached return or shown as ``Unknown (<id>)``
    with a zero amount. Shared inputs appear under each parent that uses
    them.

    Raises:
        TraceCycleError: a node is reached again through its own inputs.
    """

    def walk(current: str, path: List[str]) -> ComputeTrace:
        if current in path:
            raise TraceCycleError(path[path.index(current):])
        tv = result.values.get(current)
        if tv is None:
            return _leaf(result, current)
        citation = tv.irs_citation or citation_for_node(current)
        if not tv.is_computed:
            return ComputeTrace(current, result.label_for(current), tv, (), citation)
        path.append(current)
        children = tuple(walk(input_id, path) for input_id in tv.inputs)
        path.pop()
        return ComputeTrace(current, result.label_for(current), tv, children, citation)

    return walk(node_id, [])


def _format(trace: ComputeTrace, depth: int, lines: List[str]) -> None:
    prefix = "" if depth == 0 else "  " * depth + "|- "
    citation = f" [{trace.irs_citation}]" if trace.irs_citation else ""
    lines.append(f"{prefix}{trace.label}: {format_dollars(trace.output.amount)}{citation}")
    for child in trace.inputs:
        _format(child, depth + 1, lines)


def explain_line(result: ComputeResult, node_id: str) -> str:
    """Indented text rendering of ``build_trace``."""
    lines: List[str] = []
    _format(build_trace(result, node_id), 0, lines)
    return "\n".join(lines)


def topological_sort(values: Mapping[str, TracedValue]) -> List[str]:
    """
    Order node ids so every node comes after the inputs it depends on.

    Inputs outside ``values`` are ignored. Ties keep the mapping's order.

    Raises:
        TraceCycleError: some nodes could not be ordered.
    """
    in_degree: Dict[str, int] = {node_id: 0 for node_id in values}
    dependents: Dict[str, List[str]] = {node_id: [] for node_id in values}

    for node_id, tv in values.items():
        for input_id in tv.inputs:
            if input_id in values:
                in_degree[node_id] += 1
                dependents[input_id].append(node_id)

    queue = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
    ordered: List[str] = []
    while queue:
        node_id = queue.popleft()
        ordered.append(node_id)
        for dependent in dependents[node_id]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(ordered) != len(values):
        placed = set(ordered)
        raise TraceCycleError(node_id for node_id in values if node_id not in placed)
    return ordered
