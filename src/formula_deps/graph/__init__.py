"""Formula reference graph."""

from .references import Direction, ReferenceGraph, RelatedElements

__all__ = [
    "Direction",
    "ReferenceGraph",
    "RelatedElements"
]
