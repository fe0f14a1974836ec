"""Hierarchical document holding nodes, selection and session extensions."""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, TypeVar

from ..exceptions import UnknownNodeError
from .elements import Attribute, Node, NodeAttribute

T = TypeVar("T")


@dataclass
class Selection:
    """Current selection: a node, and optionally one of its attributes."""
    node: Optional[Node] = None
    attribute: Optional[Attribute] = None

    @property
    def selected_attribute(self) -> Optional[NodeAttribute]:
        if self.node is None or self.attribute is None:
            return None
        return NodeAttribute(self.node, self.attribute)


class Document:
    """A tree of nodes addressed by id.

    Besides the nodes, a document carries the state a session attaches to it:
    the selection, an extension registry keyed by type, and the listeners
    asked to redraw after a change.
    """

    def __init__(self, root: Optional[Node] = None, name: str = ""):
        self.name = name
        self.root = root or Node(id="ID_root")
        self.revision = 0
        self.selection = Selection()
        self._nodes: dict[str, Node] = {}
        self._extensions: dict[type, Any] = {}
        self._refresh_listeners: list[Callable[["Document"], None]] = []
        self._index(self.root)

    # =====================
    # Nodes
    # =====================

    def _index(self, node: Node) -> None:
        for current in node.iter_subtree():
            if current.id in self._nodes:
                raise ValueError(f"Duplicate node id: {current.id}")
            self._nodes[current.id] = current

    def _touch(self) -> None:
        self.revision += 1

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def iter_nodes(self) -> Iterator[Node]:
        """Iterate over all nodes, depth first from the root."""
        return self.root.iter_subtree()

    def find_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_node(self, node_id: str) -> Node:
        """Get a node by id, raising UnknownNodeError if absent."""
        node = self._nodes.get(node_id)
        if node is None:
            raise UnknownNodeError(node_id)
        return node

    def add_node(self, parent: Node, node: Node) -> Node:
        """Attach a node (and its subtree) under a parent."""
        if self._nodes.get(parent.id) is not parent:
            raise UnknownNodeError(parent.id)
        self._index(node)
        node.parent = parent
        parent.children.append(node)
        self._touch()
        return node

    def remove_node(self, node: Node) -> None:
        """Detach a node and its subtree from the document."""
        if node is self.root:
            raise ValueError("Cannot remove the root node")
        if self._nodes.get(node.id) is not node:
            raise UnknownNodeError(node.id)

        for current in node.iter_subtree():
            del self._nodes[current.id]
        node.parent.children.remove(node)
        node.parent = None

        if self.selection.node is not None and self.selection.node.id not in self._nodes:
            self.selection = Selection()
        self._touch()

    def set_text(self, node: Node, text: str) -> None:
        node.text = text
        self._touch()

    def set_attribute(self, node: Node, name: str, value: Any) -> Attribute:
        """Set an attribute value, adding the attribute if it does not exist."""
        attribute = node.attribute(name)
        if attribute is None:
            attribute = Attribute(name, value)
            node.attributes.append(attribute)
        else:
            attribute.value = value
        self._touch()
        return attribute

    # =====================
    # Selection
    # =====================

    def select(self, node_id: str, attribute_name: Optional[str] = None) -> Selection:
        """Select a node by id, optionally narrowing to one of its attributes."""
        node = self.get_node(node_id)
        attribute = None
        if attribute_name is not None:
            attribute = node.attribute(attribute_name)
            if attribute is None:
                raise KeyError(f"Node {node_id} has no attribute {attribute_name!r}")
        self.selection = Selection(node, attribute)
        return self.selection

    def clear_selection(self) -> None:
        self.selection = Selection()

    # =====================
    # Extensions
    # =====================

    def compute_if_absent(self, key: type[T], factory: Callable[[], T]) -> T:
        """Get the extension registered under a type, creating it if absent."""
        if key not in self._extensions:
            self._extensions[key] = factory()
        return self._extensions[key]

    def get_extension(self, key: type[T]) -> Optional[T]:
        return self._extensions.get(key)

    def remove_extension(self, key_or_extension: Any) -> None:
        """Remove an extension by its type or by the instance itself."""
        if isinstance(key_or_extension, type):
            self._extensions.pop(key_or_extension, None)
        elif self._extensions.get(type(key_or_extension)) is key_or_extension:
            del self._extensions[type(key_or_extension)]

    # =====================
    # Refresh
    # =====================

    def add_refresh_listener(self, listener: Callable[["Document"], None]) -> None:
        self._refresh_listeners.append(listener)

    def refresh(self) -> None:
        """Ask every listener to redraw the document."""
        for listener in self._refresh_listeners:
            listener(self)
