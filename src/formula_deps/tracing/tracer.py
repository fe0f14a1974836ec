"""Formula dependency tracer attached to a document."""

from typing import Optional

from ..graph.references import Direction
from ..model.document import Document
from .host import TraceHost
from .session import IDLE, TraceSession, clear, trace
from .sinks import ConnectorStyle


class FormulaDependencyTracer:
    """Walks formula dependencies of the selection one hop per call.

    The tracer lives in the document's extension registry for the duration
    of a trace session; clear() removes it together with its highlights and
    connectors.
    """

    def __init__(self, document: Document, connector_style: Optional[ConnectorStyle] = None):
        self.host = TraceHost(document, connector_style)
        self.session: TraceSession = IDLE

    @classmethod
    def for_document(cls, document: Document) -> "FormulaDependencyTracer":
        """Get the document's tracer, registering a new one if needed."""
        return document.compute_if_absent(cls, lambda: cls(document))

    @property
    def document(self) -> Document:
        return self.host.document

    def find_precedents(self) -> TraceSession:
        """Highlight the next hop of elements the traced formulas use."""
        return self._find_dependencies(Direction.PRECEDENTS)

    def find_dependents(self) -> TraceSession:
        """Highlight the next hop of formulas using the traced elements."""
        return self._find_dependencies(Direction.DEPENDENTS)

    def _find_dependencies(self, direction: Direction) -> TraceSession:
        session = trace(self.session, direction, self.host)
        if not self.session.is_active:
            # A fresh session puts a cleared tracer back on its document
            self.document.compute_if_absent(type(self), lambda: self)
        self.session = session
        return self.session

    def clear(self) -> None:
        self.session = clear(self.host, self)
