"""Document-side collaborators used by a trace step."""

from typing import Any, Optional

from ..graph.references import Direction, ReferenceGraph, RelatedElements
from ..model.document import Document
from ..model.elements import Element, Node
from .sinks import Connector, ConnectorStyle, Connectors, HighlightedElements
from .strategy import find_related_to


class TraceHost:
    """Selection, reference lookups, highlight and connector stores of a document."""

    def __init__(self, document: Document, connector_style: Optional[ConnectorStyle] = None):
        self.document = document
        self.connector_style = connector_style or ConnectorStyle.from_config()

    @property
    def references(self) -> ReferenceGraph:
        return self.document.compute_if_absent(ReferenceGraph, lambda: ReferenceGraph(self.document))

    def selected_element(self) -> Optional[Element]:
        """The selected attribute if there is one, else the selected node."""
        selection = self.document.selection
        return selection.selected_attribute or selection.node

    def lookup(self, element: Element, direction: Direction) -> tuple[Node, RelatedElements]:
        return find_related_to(self.references, direction, element)

    def highlight_sink(self) -> HighlightedElements:
        return self.document.compute_if_absent(HighlightedElements, HighlightedElements)

    def connector_sink(self) -> Connectors:
        return self.document.compute_if_absent(Connectors, Connectors)

    def add_connector(self, sink: Connectors, source: Node, target: Node) -> None:
        sink.add(Connector(source, target, self.connector_style))

    def remove_sinks(self) -> None:
        self.document.remove_extension(HighlightedElements)
        self.document.remove_extension(Connectors)

    def remove_extension(self, extension: Any) -> None:
        self.document.remove_extension(extension)

    def refresh(self) -> None:
        self.document.refresh()
