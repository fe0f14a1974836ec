"""Dependency search strategies: direction-aware lookup and connector order."""

from typing import Optional

from ..graph.references import Direction, ReferenceGraph, RelatedElements
from ..model.elements import Attribute, Element, Node, NodeAttribute, owning_node


def find_related(
    references: ReferenceGraph,
    direction: Direction,
    node: Node,
    attribute: Optional[Attribute] = None
) -> RelatedElements:
    """Look up the elements related to a node, or to one of its attributes.

    Args:
        references: Reference graph to query
        direction: PRECEDENTS finds what the formula uses, DEPENDENTS finds
            the formulas using the element
        node: Node to look up
        attribute: Narrow the lookup to this attribute of the node

    Returns:
        RelatedElements found in the given direction
    """
    element: Element = node if attribute is None else NodeAttribute(node, attribute)
    return RelatedElements.of(references.related(element, direction))


def find_related_to(
    references: ReferenceGraph,
    direction: Direction,
    element: Element
) -> tuple[Node, RelatedElements]:
    """Look up any element, returning its origin node with the result."""
    if isinstance(element, NodeAttribute):
        return element.node, find_related(references, direction, element.node, element.attribute)
    return owning_node(element), find_related(references, direction, element)


def in_connection_order(direction: Direction, origin: Node, related: Node) -> tuple[Node, Node]:
    """Order a discovered node pair from precedent to dependent.

    A precedents lookup starts at the dependent, so the pair is reversed;
    a dependents lookup starts at the precedent and keeps its order.
    """
    if direction is Direction.PRECEDENTS:
        return related, origin
    return origin, related
