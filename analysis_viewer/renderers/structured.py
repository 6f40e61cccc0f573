"""Schema-less rendering of decoded JSON into a navigable display tree.

Every value is first classified into a closed set of shapes and then turned
into a ``RenderNode`` row of a flat ``RenderTree``. Traversal uses an explicit
stack and the output holds no nested models, so arbitrarily deep documents hit
neither the recursion limit nor the serialiser depth limit.
"""
from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any

from analysis_viewer.models import RenderNode, RenderTree

LONG_TEXT_THRESHOLD = 100
_URL_PREFIXES = ("http://", "https://")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=\S)([A-Z])")
_JSON_SCALARS = (str, int, float, bool)


class Shape(str, Enum):
    PRIMITIVE = "primitive"
    EMPTY_OBJECT = "empty_object"
    EMPTY_ARRAY = "empty_array"
    SCALAR_ARRAY = "scalar_array"
    MIXED_ARRAY = "mixed_array"
    OBJECT = "object"


class PrimitiveKind(str, Enum):
    EMPTY = "empty"
    BOOLEAN = "boolean"
    NUMBER = "number"
    LINK = "link"
    LONG_TEXT = "long_text"
    TEXT = "text"


def _is_container(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple))


def classify_shape(value: Any) -> Shape:
    if isinstance(value, dict):
        return Shape.OBJECT if value else Shape.EMPTY_OBJECT
    if isinstance(value, (list, tuple)):
        if not value:
            return Shape.EMPTY_ARRAY
        if all(not _is_container(item) for item in value):
            return Shape.SCALAR_ARRAY
        return Shape.MIXED_ARRAY
    return Shape.PRIMITIVE


def classify_primitive(value: Any) -> PrimitiveKind:
    if value is None:
        return PrimitiveKind.EMPTY
    if isinstance(value, bool):
        return PrimitiveKind.BOOLEAN
    if isinstance(value, (int, float)):
        return PrimitiveKind.NUMBER
    if isinstance(value, str):
        if value.startswith(_URL_PREFIXES):
            return PrimitiveKind.LINK
        if len(value) > LONG_TEXT_THRESHOLD:
            return PrimitiveKind.LONG_TEXT
    return PrimitiveKind.TEXT


def scalar_text(value: Any) -> str:
    """Display text for a scalar, spelled the way JSON spells it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return str(value)


def format_label(key: Any) -> str:
    """``key_findings`` -> ``Key findings``, ``camelCase`` -> ``Camel Case``."""
    text = str(key).replace("_", " ")
    text = _CAMEL_BOUNDARY_RE.sub(r" \1", text).strip()
    return text[:1].upper() + text[1:]


def _fill_primitive(node: RenderNode, value: Any) -> None:
    kind = classify_primitive(value)
    node.kind = kind.value
    node.value = value if value is None or isinstance(value, _JSON_SCALARS) else str(value)
    node.text = scalar_text(value)


def _add_node(tree: RenderTree, parent: RenderNode | None, **fields: Any) -> RenderNode:
    node = RenderNode(
        id=len(tree.nodes),
        parentId=parent.id if parent is not None else None,
        kind=PrimitiveKind.EMPTY.value,
        depth=parent.depth + 1 if parent is not None else 0,
        **fields,
    )
    tree.nodes.append(node)
    if parent is not None:
        parent.childIds.append(node.id)
    return node


def render_json(value: Any) -> RenderTree:
    """Build the display tree for a decoded JSON value.

    Nodes are emitted into a flat table and linked by ``parentId`` and
    ``childIds``; children keep their source order. The result depends only on
    *value*, so rendering the same input twice gives equal trees.
    """
    tree = RenderTree()
    root = _add_node(tree, None)
    stack: list[tuple[RenderNode, Any]] = [(root, value)]

    while stack:
        node, current = stack.pop()
        shape = classify_shape(current)

        if shape is Shape.PRIMITIVE:
            _fill_primitive(node, current)
        elif shape is Shape.EMPTY_OBJECT:
            node.kind = "empty_object"
            node.text = "Empty object"
        elif shape is Shape.EMPTY_ARRAY:
            node.kind = "empty_list"
            node.text = "Empty list"
        elif shape is Shape.SCALAR_ARRAY:
            node.kind = "badges"
            node.items = [scalar_text(item) for item in current]
            node.count = len(node.items)
        elif shape is Shape.MIXED_ARRAY:
            node.kind = "list"
            node.expanded = True
            node.count = len(current)
            node.text = f"{node.count} items"
            for index, item in enumerate(current, start=1):
                stack.append((_add_node(tree, node, index=index), item))
        elif shape is Shape.OBJECT:
            node.kind = "object"
            node.count = len(current)
            for key, item in current.items():
                child = _add_node(tree, node, key=str(key), label=format_label(key))
                stack.append((child, item))
        else:  # pragma: no cover - Shape is closed
            raise ValueError(f"Unhandled shape: {shape}")

    return tree
