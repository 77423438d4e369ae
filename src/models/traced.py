"""
Traced values: an amount in cents plus the provenance that produced it.

Every line item the engine emits is a TracedValue. A value either comes
straight from a source document (or a user entry) or is computed from
other values. A computed value lists, in order, exactly the node ids its
arithmetic consumed; the explain graph walks those ids and nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple, Union


@dataclass(frozen=True)
class DocumentSource:
    """Value read from an input document or a user-entered field."""

    node_id: str
    document_id: str
    field: str
    description: Optional[str] = None

    kind = "document"


@dataclass(frozen=True)
class ComputedSource:
    """Value derived from upstream nodes."""

    node_id: str
    inputs: Tuple[str, ...] = ()
    formula: Optional[str] = None

    kind = "computed"


Source = Union[DocumentSource, ComputedSource]


@dataclass(frozen=True)
class TracedValue:
    amount: int
    source: Source
    confidence: float = 1.0
    irs_citation: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            raise TypeError(f"TracedValue amount must be integer cents, got {self.amount!r}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")

    @property
    def node_id(self) -> str:
        return self.source.node_id

    @property
    def is_computed(self) -> bool:
        return isinstance(self.source, ComputedSource)

    @property
    def inputs(self) -> Tuple[str, ...]:
        """Upstream node ids, empty for document values."""
        if isinstance(self.source, ComputedSource):
            return self.source.inputs
        return ()

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.source, ComputedSource):
            source: Dict[str, Any] = {
                "kind": "computed",
                "nodeId": self.source.node_id,
                "inputs": list(self.source.inputs),
                "formula": self.source.formula,
            }
        else:
            source = {
                "kind": "document",
                "nodeId": self.source.node_id,
                "documentId": self.source.document_id,
                "field": self.source.field,
                "description": self.source.description,
            }
        return {
            "amount": self.amount,
            "source": source,
            "confidence": self.confidence,
            "irsCitation": self.irs_citation,
        }


def traced_from_document(
    amount: int,
    document_id: str,
    field_name: str,
    description: Optional[str] = None,
    node_id: Optional[str] = None,
    confidence: float = 1.0,
    irs_citation: Optional[str] = None,
) -> TracedValue:
    """Build a document value; its node id defaults to ``{document_id}:{field}``."""
    return TracedValue(
        amount=amount,
        source=DocumentSource(node_id or f"{document_id}:{field_name}", document_id, field_name, description),
        confidence=confidence,
        irs_citation=irs_citation,
    )


def traced_from_computation(
    amount: int,
    node_id: str,
    inputs: Iterable[str],
    formula: Optional[str] = None,
    irs_citation: Optional[str] = None,
) -> TracedValue:
    """Build a computed value.

    ``inputs`` must name exactly the upstream nodes used to get ``amount``.
    Confidence is fixed at 1.0 since the engine never estimates.
    """
    return TracedValue(
        amount=amount,
        source=ComputedSource(node_id, tuple(inputs), formula),
        irs_citation=irs_citation,
    )


def traced_zero(node_id: str, formula: Optional[str] = None) -> TracedValue:
    """A computed zero with no inputs (inapplicable line)."""
    return traced_from_computation(0, node_id, (), formula)


@dataclass(frozen=True)
class ComputeTrace:
    """
    Explain tree for one node.

    Shared upstream nodes are repeated under every parent that uses them,
    so the structure is always a finite tree even though the underlying
    value graph is a DAG.
    """

    node_id: str
    label: str
    output: TracedValue
    inputs: Tuple["ComputeTrace", ...] = field(default_factory=tuple)
    irs_citation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "label": self.label,
            "output": self.output.to_dict(),
            "inputs": [child.to_dict() for child in self.inputs],
            "irsCitation": self.irs_citation,
        }
