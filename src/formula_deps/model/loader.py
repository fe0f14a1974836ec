"""Load and save documents as YAML.

A document file holds one root node; every node has an ``id`` and may have
``text``, ``attributes`` (a mapping, or a list of ``{name, value}`` items
when names repeat) and ``children``::

    name: Budget
    root:
      id: ID_1
      text: Budget
      children:
        - id: ID_2
          text: "=ID_3['Rate'] * 100"
        - id: ID_3
          attributes:
            Rate: 0.2
"""

from pathlib import Path
from typing import Any, Union

import yaml

from ..exceptions import DocumentLoadError
from .document import Document
from .elements import Attribute, Node


def _parse_attributes(raw: Any, node_id: str) -> list[Attribute]:
    if raw is None:
        return []
    if isinstance(raw, dict):
        return [Attribute(str(name), value) for name, value in raw.items()]
    if isinstance(raw, list):
        attributes = []
        for item in raw:
            if not isinstance(item, dict) or "name" not in item:
                raise DocumentLoadError(f"Node {node_id}: attribute items need a 'name'")
            attributes.append(Attribute(str(item["name"]), item.get("value")))
        return attributes
    raise DocumentLoadError(f"Node {node_id}: attributes must be a mapping or a list")


def _parse_node(raw: Any) -> Node:
    if not isinstance(raw, dict) or "id" not in raw:
        raise DocumentLoadError(f"Every node needs an 'id', got: {raw!r}")

    node_id = str(raw["id"])
    text = raw.get("text", "")
    node = Node(
        id=node_id,
        text="" if text is None else str(text),
        attributes=_parse_attributes(raw.get("attributes"), node_id)
    )

    for child_raw in raw.get("children") or []:
        child = _parse_node(child_raw)
        child.parent = node
        node.children.append(child)

    return node


def document_from_dict(data: Any) -> Document:
    """Build a document from already-parsed YAML data."""
    if not isinstance(data, dict) or "root" not in data:
        raise DocumentLoadError("Document must be a mapping with a 'root' node")

    root = _parse_node(data["root"])
    try:
        return Document(root, name=str(data.get("name", "")))
    except ValueError as e:
        raise DocumentLoadError(str(e)) from e


def load_document(path: Union[str, Path]) -> Document:
    """Load a document from a YAML file.

    Args:
        path: Path to the document file

    Returns:
        The loaded document

    Raises:
        DocumentLoadError: If the file cannot be read or is malformed
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise DocumentLoadError(f"Failed to read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"Failed to parse {path}: {e}") from e

    document = document_from_dict(data)
    if not document.name:
        document.name = path.stem
    return document


def _node_to_dict(node: Node) -> dict:
    data: dict[str, Any] = {"id": node.id}
    if node.text:
        data["text"] = node.text
    if node.attributes:
        names = [attribute.name for attribute in node.attributes]
        if len(set(names)) == len(names):
            data["attributes"] = {a.name: a.value for a in node.attributes}
        else:
            data["attributes"] = [{"name": a.name, "value": a.value} for a in node.attributes]
    if node.children:
        data["children"] = [_node_to_dict(child) for child in node.children]
    return data


def document_to_dict(document: Document) -> dict:
    return {"name": document.name, "root": _node_to_dict(document.root)}


def dump_document(document: Document, path: Union[str, Path]) -> None:
    """Write a document to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(document_to_dict(document), f, sort_keys=False, allow_unicode=True)
