"""Element model: nodes, attributes and the element handles formulas refer to."""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


FORMULA_PREFIX = "="


def is_formula(value: Any) -> bool:
    """Check whether a node text or attribute value holds a formula."""
    return isinstance(value, str) and len(value) > 1 and value.startswith(FORMULA_PREFIX)


@dataclass(eq=False)
class Attribute:
    """A named value stored on a node (the attribute's value container)."""
    name: str
    value: Any = None

    @property
    def formula(self) -> Optional[str]:
        """Formula source without the leading '=', or None."""
        return self.value[1:] if is_formula(self.value) else None

    def __repr__(self) -> str:
        return f"Attribute({self.name!r}={self.value!r})"


@dataclass(eq=False)
class Node:
    """A node in the document tree.

    Nodes compare by identity. The document owns nodes, and each node owns
    its attributes and children; ``parent`` is a back-reference only.
    """
    id: str
    text: str = ""
    attributes: list[Attribute] = field(default_factory=list)
    children: list["Node"] = field(default_factory=list, repr=False)
    parent: Optional["Node"] = field(default=None, repr=False)

    @property
    def formula(self) -> Optional[str]:
        """Formula source of the node text without the leading '=', or None."""
        return self.text[1:] if is_formula(self.text) else None

    def attribute(self, name: str) -> Optional[Attribute]:
        """Get the first attribute with the given name."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def iter_subtree(self):
        """Yield this node and all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_subtree()

    def __repr__(self) -> str:
        return f"Node({self.id!r})"


@dataclass(frozen=True)
class NodeAttribute:
    """Element handle for an attribute together with its owning node.

    Equality delegates to the identity of the node and the attribute, so two
    handles for the same attribute collapse in sets.
    """
    node: Node
    attribute: Attribute

    @property
    def name(self) -> str:
        return self.attribute.name

    def __repr__(self) -> str:
        return f"{self.node.id}[{self.attribute.name!r}]"


Element = Union[Node, NodeAttribute]


def owning_node(element: Element) -> Node:
    """Node an element belongs to: the node itself, or an attribute's owner."""
    if isinstance(element, NodeAttribute):
        return element.node
    return element


def highlight_entity(element: Element) -> Union[Node, Attribute]:
    """Entity recorded for highlighting: attributes unwrap to their value container."""
    if isinstance(element, NodeAttribute):
        return element.attribute
    return element


def element_label(element: Element) -> str:
    """Short human-readable label for an element."""
    if isinstance(element, NodeAttribute):
        return f"{element.node.id}['{element.attribute.name}']"
    return element.id
