"""Projection of one trace step's lookups onto highlights, connectors and frontier."""

from dataclasses import dataclass, field
from typing import Iterable

from ..graph.references import Direction, RelatedElements
from ..model.elements import Node
from .strategy import in_connection_order


@dataclass(frozen=True)
class Projection:
    """Everything one trace step discovered.

    ``highlights`` and ``frontier`` hold elements (attributes as NodeAttribute
    handles); ``connectors`` holds (precedent, dependent) node pairs in
    discovery order without duplicates.
    """
    highlights: frozenset = field(default_factory=frozenset)
    connectors: tuple[tuple[Node, Node], ...] = ()
    frontier: frozenset = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.highlights and not self.connectors


def project(
    pairs: Iterable[tuple[Node, RelatedElements]],
    direction: Direction
) -> Projection:
    """Project (origin node, related elements) pairs from one trace step.

    Args:
        pairs: Non-empty lookup results keyed by the node they started from
        direction: Direction the lookups were made in

    Returns:
        Projection with discovered elements and connectors in
        precedent-to-dependent order
    """
    discovered: set = set()
    node_pairs: dict[tuple[Node, Node], None] = {}

    for origin, related in pairs:
        discovered.update(related.elements)
        for related_node in related.nodes:
            node_pairs.setdefault((origin, related_node), None)

    connectors: dict[tuple[Node, Node], None] = {}
    for origin, related_node in node_pairs:
        connectors.setdefault(in_connection_order(direction, origin, related_node), None)

    frontier = frozenset(discovered)
    return Projection(
        highlights=frontier,
        connectors=tuple(connectors),
        frontier=frontier
    )
