"""Highlight and connector stores attached to a document while tracing."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Union

from ..model.elements import Attribute, Node
from ..utils.config import config


class ConnectorArrows(Enum):
    """Arrowheads drawn on a connector."""
    NONE = "none"
    FORWARD = "forward"
    BACKWARD = "backward"
    BOTH = "both"


@dataclass(frozen=True)
class ConnectorStyle:
    """Default styling applied to dependency connectors."""
    color: str = "#ff00ff"
    alpha: int = 200
    shape: str = "cubic_curve"
    width: int = 2
    label_font_family: str = "SansSerif"
    label_font_size: int = 12

    @classmethod
    def from_config(cls) -> "ConnectorStyle":
        """Build the style from the 'connectors' configuration section."""
        return cls(
            color=config.get("connectors.color", cls.color),
            alpha=int(config.get("connectors.alpha", cls.alpha)),
            shape=config.get("connectors.shape", cls.shape),
            width=int(config.get("connectors.width", cls.width)),
            label_font_family=config.get("connectors.label_font_family", cls.label_font_family),
            label_font_size=int(config.get("connectors.label_font_size", cls.label_font_size))
        )

    def to_dict(self) -> dict:
        return {
            "color": self.color,
            "alpha": self.alpha,
            "shape": self.shape,
            "width": self.width,
            "label_font_family": self.label_font_family,
            "label_font_size": self.label_font_size
        }


@dataclass(frozen=True)
class Connector:
    """A directed connector drawn from a precedent node to a dependent node."""
    source: Node
    target: Node
    style: ConnectorStyle = ConnectorStyle()
    arrows: ConnectorArrows = ConnectorArrows.FORWARD

    @property
    def endpoints(self) -> tuple[Node, Node]:
        return self.source, self.target

    def to_dict(self) -> dict:
        return {
            "from": self.source.id,
            "to": self.target.id,
            "arrows": self.arrows.value,
            "style": self.style.to_dict()
        }


class HighlightedElements:
    """Entities highlighted in the view: nodes and attribute value containers."""

    def __init__(self):
        # Insertion-ordered; nodes and attributes hash by identity
        self._elements: dict[Union[Node, Attribute], None] = {}

    def add(self, entity: Union[Node, Attribute]) -> None:
        self._elements.setdefault(entity, None)

    def clear(self) -> None:
        self._elements.clear()

    def __contains__(self, entity: Any) -> bool:
        return entity in self._elements

    def __iter__(self) -> Iterator[Union[Node, Attribute]]:
        return iter(list(self._elements))

    def __len__(self) -> int:
        return len(self._elements)


class Connectors:
    """Connectors drawn in the view, one per (source, target) node pair."""

    def __init__(self):
        self._connectors: dict[tuple[Node, Node], Connector] = {}

    def add(self, connector: Connector) -> None:
        self._connectors.setdefault(connector.endpoints, connector)

    def clear(self) -> None:
        self._connectors.clear()

    def pairs(self) -> set[tuple[Node, Node]]:
        return set(self._connectors)

    def __contains__(self, pair: Any) -> bool:
        return pair in self._connectors

    def __iter__(self) -> Iterator[Connector]:
        return iter(list(self._connectors.values()))

    def __len__(self) -> int:
        return len(self._connectors)
