from __future__ import annotations

import pytest

from formula_deps.exceptions import InvalidSelection
from formula_deps.graph import Direction
from formula_deps.model import Document, Node, NodeAttribute, owning_node
from formula_deps.tracing import (
    IDLE,
    ConnectorStyle,
    Connectors,
    HighlightedElements,
    TraceHost,
    TraceSession,
    clear,
    trace,
)


class RecordingHost(TraceHost):
    """TraceHost that records every element it is asked to look up."""

    def __init__(self, document: Document, style: ConnectorStyle | None = None) -> None:
        super().__init__(document, style or ConnectorStyle())
        self.looked_up: list[object] = []
        self.refreshes = 0

    def lookup(self, element, direction):
        self.looked_up.append(element)
        return super().lookup(element, direction)

    def refresh(self) -> None:
        self.refreshes += 1
        super().refresh()


class FailingHost(TraceHost):
    def lookup(self, element, direction):
        raise RuntimeError("lookup failed")


def _attr(document: Document, node_id: str, name: str) -> NodeAttribute:
    node = document.get_node(node_id)
    return NodeAttribute(node, node.attribute(name))


def _sinks(document: Document) -> tuple[HighlightedElements, Connectors]:
    return document.get_extension(HighlightedElements), document.get_extension(Connectors)


def _snapshot(document: Document) -> tuple[set, set]:
    highlights, connectors = _sinks(document)
    return set(highlights), connectors.pairs()


# ---------------------------------------------------------------------------
# Seeding a fresh session
# ---------------------------------------------------------------------------


def test_fresh_trace_without_selection_raises(budget: Document) -> None:
    host = RecordingHost(budget)

    with pytest.raises(InvalidSelection):
        trace(IDLE, Direction.PRECEDENTS, host)

    assert host.looked_up == []
    assert budget.get_extension(HighlightedElements) is None


def test_selected_attribute_takes_precedence_over_node(budget: Document) -> None:
    budget.select("ID_3", "Rate")
    host = RecordingHost(budget)

    session = trace(IDLE, Direction.DEPENDENTS, host)

    assert host.looked_up == [_attr(budget, "ID_3", "Rate")]
    assert session.frontier == {budget.get_node("ID_2"), _attr(budget, "ID_3", "Margin")}
    assert session.direction is Direction.DEPENDENTS


def test_seed_is_highlighted_as_value_container(budget: Document) -> None:
    budget.select("ID_3", "Rate")

    trace(IDLE, Direction.DEPENDENTS, RecordingHost(budget))

    highlights, _ = _sinks(budget)
    rate = budget.get_node("ID_3").attribute("Rate")
    assert rate in highlights
    assert budget.get_node("ID_3") not in highlights


def test_fresh_trace_clears_stale_sinks(budget: Document) -> None:
    stale = Node(id="ID_stale")
    budget.compute_if_absent(HighlightedElements, HighlightedElements).add(stale)
    budget.select("ID_6")

    trace(IDLE, Direction.PRECEDENTS, RecordingHost(budget))

    highlights, _ = _sinks(budget)
    assert stale not in highlights
    assert set(highlights) == {budget.get_node(i) for i in ("ID_6", "ID_2", "ID_4")}


# ---------------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------------


def test_same_direction_expands_last_hop_only(budget: Document) -> None:
    budget.select("ID_6")
    host = RecordingHost(budget)

    session = trace(IDLE, Direction.PRECEDENTS, host)
    host.looked_up.clear()
    session = trace(session, Direction.PRECEDENTS, host)

    assert set(host.looked_up) == {budget.get_node("ID_2"), budget.get_node("ID_4")}
    assert session.frontier == {
        _attr(budget, "ID_3", "Rate"),
        budget.get_node("ID_4"),
        _attr(budget, "ID_5", "Hours"),
        _attr(budget, "ID_5", "Wage"),
    }
    assert session.highlighted == {budget.get_node("ID_6"), budget.get_node("ID_2")} | session.frontier


def test_empty_expansion_is_idempotent(budget: Document) -> None:
    budget.select("ID_4")
    host = RecordingHost(budget)

    session = trace(IDLE, Direction.PRECEDENTS, host)
    session = trace(session, Direction.PRECEDENTS, host)
    assert session.frontier == frozenset()
    assert session.is_active
    before = _snapshot(budget)

    repeated = trace(session, Direction.PRECEDENTS, host)

    assert _snapshot(budget) == before
    assert repeated.highlighted == session.highlighted
    assert repeated.connectors == session.connectors
    assert repeated.frontier == frozenset()


def test_direction_switch_retraces_whole_highlight_set(budget: Document) -> None:
    budget.select("ID_3", "Rate")
    host = RecordingHost(budget)

    session = trace(IDLE, Direction.DEPENDENTS, host)
    session = trace(session, Direction.DEPENDENTS, host)
    assert session.frontier == {budget.get_node("ID_6")}
    highlighted = session.highlighted

    host.looked_up.clear()
    session = trace(session, Direction.PRECEDENTS, host)

    assert set(host.looked_up) == set(highlighted)
    assert len(host.looked_up) == 4
    assert session.direction is Direction.PRECEDENTS
    assert _attr(budget, "ID_3", "Rate") in session.frontier


def test_refresh_requested_after_every_step(budget: Document) -> None:
    budget.select("ID_2")
    host = RecordingHost(budget)

    session = trace(IDLE, Direction.PRECEDENTS, host)
    trace(session, Direction.DEPENDENTS, host)

    assert host.refreshes == 2


# ---------------------------------------------------------------------------
# Highlights and connectors
# ---------------------------------------------------------------------------


def test_connectors_always_point_from_precedent_to_dependent(budget: Document) -> None:
    host = RecordingHost(budget)
    references = host.references

    for start, attribute, direction in (
        ("ID_6", None, Direction.PRECEDENTS),
        ("ID_5", "Hours", Direction.DEPENDENTS),
    ):
        clear(host)
        budget.select(start, attribute)
        session = IDLE
        for _ in range(3):
            session = trace(session, direction, host)

        _, connectors = _sinks(budget)
        assert len(connectors) > 0
        for connector in connectors:
            assert any(
                owning_node(precedent) is connector.source and owning_node(dependent) is connector.target
                for precedent, dependent in references.graph.edges
            )


def test_attribute_elements_unwrap_for_highlights_and_connectors(budget: Document) -> None:
    budget.select("ID_4")

    trace(IDLE, Direction.PRECEDENTS, RecordingHost(budget))

    highlights, connectors = _sinks(budget)
    staff = budget.get_node("ID_5")
    assert staff.attribute("Hours") in highlights
    assert staff.attribute("Wage") in highlights
    assert staff not in highlights
    assert connectors.pairs() == {(staff, budget.get_node("ID_4"))}
    assert all(isinstance(c.source, Node) and isinstance(c.target, Node) for c in connectors)


def test_connectors_carry_forward_arrow_and_host_style(budget: Document, style: ConnectorStyle) -> None:
    budget.select("ID_2")

    trace(IDLE, Direction.DEPENDENTS, TraceHost(budget, style))

    _, connectors = _sinks(budget)
    [connector] = list(connectors)
    assert connector.style == style
    assert connector.to_dict()["arrows"] == "forward"
    assert connector.to_dict()["from"] == "ID_2"
    assert connector.to_dict()["to"] == "ID_6"


def test_rate_scenario(rate_document: Document) -> None:
    n1 = rate_document.get_node("ID_N1")
    n2 = rate_document.get_node("ID_N2")
    rate = NodeAttribute(n2, n2.attribute("Rate"))
    rate_document.select("ID_N1")
    host = RecordingHost(rate_document)

    session = trace(IDLE, Direction.PRECEDENTS, host)
    highlights, connectors = _sinks(rate_document)
    assert rate.attribute in highlights
    assert connectors.pairs() == {(n2, n1)}
    after_first = _snapshot(rate_document)

    session = trace(session, Direction.PRECEDENTS, host)
    assert _snapshot(rate_document) == after_first

    host.looked_up.clear()
    session = trace(session, Direction.DEPENDENTS, host)
    assert rate in host.looked_up
    assert n1 in session.last_step.highlights
    assert connectors.pairs() == {(n2, n1)}
    assert session.connectors == {(n2, n1)}


# ---------------------------------------------------------------------------
# Failures and clearing
# ---------------------------------------------------------------------------


def test_failed_step_leaves_state_unchanged(budget: Document) -> None:
    budget.select("ID_6")
    session = trace(IDLE, Direction.PRECEDENTS, RecordingHost(budget))
    before = _snapshot(budget)

    with pytest.raises(RuntimeError, match="lookup failed"):
        trace(session, Direction.PRECEDENTS, FailingHost(budget, ConnectorStyle()))

    assert _snapshot(budget) == before
    assert session.frontier == {budget.get_node("ID_2"), budget.get_node("ID_4")}


def test_stale_frontier_elements_yield_nothing(budget: Document) -> None:
    budget.select("ID_4")
    host = RecordingHost(budget)
    session = trace(IDLE, Direction.PRECEDENTS, host)

    budget.remove_node(budget.get_node("ID_5"))
    session = trace(session, Direction.PRECEDENTS, host)

    assert session.frontier == frozenset()


def test_clear_resets_fully(budget: Document) -> None:
    budget.select("ID_6")
    host = RecordingHost(budget)
    first = trace(IDLE, Direction.PRECEDENTS, host)
    first_snapshot = _snapshot(budget)
    trace(first, Direction.PRECEDENTS, host)

    session = clear(host)

    assert session is IDLE
    assert session.frontier is None
    assert session.direction is None
    assert budget.get_extension(HighlightedElements) is None
    assert budget.get_extension(Connectors) is None

    again = trace(session, Direction.PRECEDENTS, host)
    assert again == TraceSession(
        frontier=first.frontier,
        direction=first.direction,
        highlighted=first.highlighted,
        connectors=first.connectors,
    )
    assert _snapshot(budget) == first_snapshot


def test_clear_is_idempotent(budget: Document) -> None:
    host = RecordingHost(budget)
    assert clear(host) is IDLE
    assert clear(host) is IDLE
    assert host.refreshes == 2


def test_seed_without_relations_yields_empty_step(budget: Document) -> None:
    budget.select("ID_1")
    host = RecordingHost(budget)

    session = trace(IDLE, Direction.DEPENDENTS, host)

    assert session.last_step.is_empty
    assert session.frontier == frozenset()
    assert session.highlighted == {budget.root}
