"""Trace session state machine.

A session is Idle until the first trace call seeds it from the selection.
Each further call in the same direction expands the most recent hop only;
switching direction re-traces every element highlighted so far.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import InvalidSelection
from ..graph.references import Direction, RelatedElements
from ..model.elements import Element, Node, element_label, highlight_entity
from ..utils.logger import get_logger
from .host import TraceHost
from .projector import Projection, project

logger = get_logger("tracer")


@dataclass(frozen=True)
class TraceSession:
    """Accumulated state of a trace session."""
    frontier: Optional[frozenset] = None
    direction: Optional[Direction] = None
    highlighted: frozenset = field(default_factory=frozenset)
    connectors: frozenset = field(default_factory=frozenset)
    last_step: Projection = field(default_factory=Projection, compare=False)

    @property
    def is_active(self) -> bool:
        return self.frontier is not None


IDLE = TraceSession()


def _lookup_all(
    host: TraceHost,
    frontier: frozenset,
    direction: Direction
) -> list[tuple[Node, RelatedElements]]:
    pairs = []
    for element in frontier:
        origin, related = host.lookup(element, direction)
        if not related.is_empty():
            pairs.append((origin, related))
    return pairs


def trace(session: TraceSession, direction: Direction, host: TraceHost) -> TraceSession:
    """Run one trace step.

    Args:
        session: Session returned by the previous step, or IDLE
        direction: Direction to trace in
        host: Document collaborators to read from and write into

    Returns:
        The session to pass into the next step

    Raises:
        InvalidSelection: If the session is idle and nothing is selected
    """
    seed: Optional[Element] = None

    if session.frontier is None:
        seed = host.selected_element()
        if seed is None:
            raise InvalidSelection("Select a node or attribute to start tracing")
        frontier = frozenset({seed})
        highlighted = frozenset({seed})
        connectors: frozenset = frozenset()
        logger.info(f"Tracing {direction.value} of {element_label(seed)}")
    elif session.direction is not direction:
        frontier = session.highlighted
        highlighted = session.highlighted
        connectors = session.connectors
        logger.debug(f"Switching to {direction.value}, re-tracing {len(frontier)} highlighted elements")
    else:
        frontier = session.frontier
        highlighted = session.highlighted
        connectors = session.connectors

    # Compute the whole step before touching the document
    pairs = _lookup_all(host, frontier, direction)
    projection = project(pairs, direction)
    logger.debug(
        f"{direction.value}: expanded {len(frontier)} elements, "
        f"found {len(projection.frontier)} elements and {len(projection.connectors)} connectors"
    )

    highlight_sink = host.highlight_sink()
    connector_sink = host.connector_sink()
    if seed is not None:
        highlight_sink.clear()
        connector_sink.clear()
        highlight_sink.add(highlight_entity(seed))

    for element in projection.highlights:
        highlight_sink.add(highlight_entity(element))
    for source, target in projection.connectors:
        host.add_connector(connector_sink, source, target)
    host.refresh()

    return TraceSession(
        frontier=projection.frontier,
        direction=direction,
        highlighted=highlighted | projection.highlights,
        connectors=connectors | frozenset(projection.connectors),
        last_step=projection
    )


def clear(host: TraceHost, extension: Optional[object] = None) -> TraceSession:
    """Remove highlights and connectors from the document and end the session.

    Args:
        host: Document collaborators
        extension: Tracer registered on the document, removed along with the stores

    Returns:
        IDLE
    """
    host.remove_sinks()
    if extension is not None:
        host.remove_extension(extension)
    host.refresh()
    logger.info("Cleared formula dependency trace")
    return IDLE
