"""Formula dependency tracing for hierarchical documents."""

from .exceptions import DocumentLoadError, FormulaDepsError, InvalidSelection, UnknownNodeError
from .graph import Direction, ReferenceGraph, RelatedElements
from .model import Attribute, Document, Node, NodeAttribute, load_document
from .tracing import FormulaDependencyTracer, TraceHost, TraceSession, IDLE, trace, clear

__version__ = "0.1.0"

__all__ = [
    "DocumentLoadError",
    "FormulaDepsError",
    "InvalidSelection",
    "UnknownNodeError",
    "Direction",
    "ReferenceGraph",
    "RelatedElements",
    "Attribute",
    "Document",
    "Node",
    "NodeAttribute",
    "load_document",
    "FormulaDependencyTracer",
    "TraceHost",
    "TraceSession",
    "IDLE",
    "trace",
    "clear"
]
