"""Formula reference extraction.

Formulas address other elements by node id, optionally narrowed to one of the
node's attributes::

    =ID_2 * 2               node ID_2
    =ID_2['Rate'] * 100     attribute Rate of node ID_2
    =node['Rate'] + 1       attribute Rate of the formula's own node
"""

import re
from typing import Optional

from ..utils.logger import get_logger
from .document import Document
from .elements import Attribute, Element, Node, NodeAttribute

logger = get_logger("formula")

# Patterns for formula references
REFERENCE_PATTERN = re.compile(
    r"\b(?P<target>ID_\w+|node)\b"
    r"(?:\s*\[\s*(?P<quote>['\"])(?P<attribute>.*?)(?P=quote)\s*\])?"
)
STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"")
SUBSCRIPT_PREFIX_PATTERN = re.compile(r"\b(?:ID_\w+|node)\s*\[\s*$")


def _strip_string_literals(formula: str) -> str:
    """Blank out string literals that are not attribute subscripts."""
    result = []
    last = 0
    for match in STRING_LITERAL_PATTERN.finditer(formula):
        if SUBSCRIPT_PREFIX_PATTERN.search(formula, 0, match.start()):
            continue
        result.append(formula[last:match.start()])
        result.append(" " * (match.end() - match.start()))
        last = match.end()
    result.append(formula[last:])
    return "".join(result)


def extract_references(
    formula: str,
    document: Document,
    owner: Node,
    attribute: Optional[Attribute] = None
) -> set[Element]:
    """Find the elements a formula references.

    Args:
        formula: Formula source, with or without the leading '='
        document: Document used to resolve node ids
        owner: Node the formula belongs to
        attribute: Attribute holding the formula, if it is an attribute formula

    Returns:
        Set of referenced elements. Unresolvable references are skipped and a
        formula never references its own element.
    """
    if formula.startswith("="):
        formula = formula[1:]

    own_element: Element = NodeAttribute(owner, attribute) if attribute is not None else owner
    references: set[Element] = set()

    for match in REFERENCE_PATTERN.finditer(_strip_string_literals(formula)):
        target_id = match.group("target")
        if target_id == "node":
            node = owner
        else:
            node = document.find_node(target_id)
            if node is None:
                logger.warning(f"Unresolved reference to {target_id} in formula of {owner.id}")
                continue

        attribute_name = match.group("attribute")
        if attribute_name is None:
            element: Element = node
        else:
            target_attribute = node.attribute(attribute_name)
            if target_attribute is None:
                logger.warning(
                    f"Unresolved reference to {node.id}['{attribute_name}'] in formula of {owner.id}"
                )
                continue
            element = NodeAttribute(node, target_attribute)

        if element != own_element:
            references.add(element)

    return references
