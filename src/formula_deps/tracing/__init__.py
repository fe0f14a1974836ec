"""Formula dependency tracing."""

from .host import TraceHost
from .projector import Projection, project
from .session import IDLE, TraceSession, clear, trace
from .sinks import ConnectorArrows, ConnectorStyle, Connector, Connectors, HighlightedElements
from .strategy import find_related, find_related_to, in_connection_order
from .tracer import FormulaDependencyTracer

__all__ = [
    "TraceHost",
    "Projection",
    "project",
    "IDLE",
    "TraceSession",
    "clear",
    "trace",
    "ConnectorArrows",
    "ConnectorStyle",
    "Connector",
    "Connectors",
    "HighlightedElements",
    "find_related",
    "find_related_to",
    "in_connection_order",
    "FormulaDependencyTracer"
]
