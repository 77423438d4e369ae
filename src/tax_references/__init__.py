"""Tax law references and citations module."""

from .citations import TAX_CITATIONS, citation_for_node, get_citation, topic_for_node

__all__ = ["TAX_CITATIONS", "citation_for_node", "get_citation", "topic_for_node"]
