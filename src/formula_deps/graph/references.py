"""Formula reference graph for precedent and dependent lookups."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

import networkx as nx

from ..model.document import Document
from ..model.elements import Element, NodeAttribute, owning_node
from ..model.formula import extract_references
from ..utils.logger import get_logger


class Direction(Enum):
    """Direction for formula dependency lookups."""
    PRECEDENTS = "precedents"  # What does this element use?
    DEPENDENTS = "dependents"  # What uses this element?


@dataclass(frozen=True)
class RelatedElements:
    """Elements found by a single lookup, with their distinct owning nodes."""
    elements: frozenset = field(default_factory=frozenset)

    @classmethod
    def of(cls, elements: Iterable[Element]) -> "RelatedElements":
        return cls(frozenset(elements))

    @property
    def nodes(self) -> frozenset:
        """Distinct owning nodes of the elements."""
        return frozenset(owning_node(element) for element in self.elements)

    def is_empty(self) -> bool:
        return not self.elements

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)


class ReferenceGraph:
    """Directed graph of formula references over document elements.

    Every edge points from a precedent to the dependent whose formula
    references it. The graph is rebuilt lazily when the document changes.
    """

    def __init__(self, document: Document):
        self.document = document
        self.graph = nx.DiGraph()
        self._built_revision: Optional[int] = None
        self.logger = get_logger("references")

    def build(self) -> nx.DiGraph:
        """(Re)build the reference graph from the document formulas.

        Returns:
            The rebuilt graph
        """
        graph = nx.DiGraph()

        for node in self.document.iter_nodes():
            graph.add_node(node)
            if node.formula is not None:
                for precedent in extract_references(node.formula, self.document, node):
                    graph.add_edge(precedent, node)

            for attribute in node.attributes:
                element = NodeAttribute(node, attribute)
                graph.add_node(element)
                if attribute.formula is not None:
                    references = extract_references(attribute.formula, self.document, node, attribute)
                    for precedent in references:
                        graph.add_edge(precedent, element)

        self.graph = graph
        self._built_revision = self.document.revision
        self.logger.debug(
            f"Built reference graph: {graph.number_of_nodes()} elements, "
            f"{graph.number_of_edges()} references"
        )
        return graph

    def _ensure_current(self) -> nx.DiGraph:
        if self._built_revision != self.document.revision:
            self.build()
        return self.graph

    def related(self, element: Element, direction: Direction) -> set[Element]:
        """Find elements directly related to an element.

        Args:
            element: Node or node attribute to look up
            direction: PRECEDENTS for referenced elements, DEPENDENTS for
                referencing elements

        Returns:
            Set of related elements; empty for elements no longer in the document
        """
        graph = self._ensure_current()
        if element not in graph:
            return set()

        if direction is Direction.PRECEDENTS:
            return set(graph.predecessors(element))
        return set(graph.successors(element))

    def precedents(self, element: Element) -> set[Element]:
        return self.related(element, Direction.PRECEDENTS)

    def dependents(self, element: Element) -> set[Element]:
        return self.related(element, Direction.DEPENDENTS)
