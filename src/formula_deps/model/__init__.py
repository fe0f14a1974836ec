"""Document model: nodes, attributes, selection and formula references."""

from .elements import (
    Attribute,
    Element,
    Node,
    NodeAttribute,
    element_label,
    highlight_entity,
    is_formula,
    owning_node,
)
from .document import Document, Selection
from .formula import extract_references
from .loader import load_document, dump_document, document_from_dict, document_to_dict

__all__ = [
    "Attribute",
    "Element",
    "Node",
    "NodeAttribute",
    "element_label",
    "highlight_entity",
    "is_formula",
    "owning_node",
    "Document",
    "Selection",
    "extract_references",
    "load_document",
    "dump_document",
    "document_from_dict",
    "document_to_dict"
]
