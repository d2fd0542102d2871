"""Render a node tree back to SVG markup."""
from __future__ import annotations

from typing import List, Optional

from .nodes import NAMESPACE_PREFIXES, CharacterData, Element, Node, Text, _local_name, _namespace_of


def to_svg(node: Optional[Node]) -> str:
    """Serialize ``node`` and its descendants.

    Text is written verbatim; callers that need escaping must escape first.
    Attributes holding non-scalar values or only whitespace are skipped.
    """
    if node is None:
        return ""
    parts: List[str] = []
    _write(node, parts)
    return "".join(parts)


def _write(node: Node, parts: List[str]) -> None:
    if isinstance(node, Text):
        parts.append(node.data)
        return
    if isinstance(node, CharacterData):
        parts.append(f"<![CDATA[{node.data}]]>")
        return
    if not isinstance(node, Element):
        return
    parts.append(f"<{node.tag}")
    for key, value in node.attributes.items():
        if not isinstance(value, str) or not value.strip():
            continue
        parts.append(f' {_attribute_markup_name(key)}="{value}"')
    if node.children:
        parts.append(">")
        for child in node.children:
            _write(child, parts)
        parts.append(f"</{node.tag}>")
    else:
        parts.append("/>")


def _attribute_markup_name(key: str) -> str:
    namespace = _namespace_of(key)
    local = _local_name(key)
    if namespace is None:
        return local
    prefix = NAMESPACE_PREFIXES.get(namespace)
    return f"{prefix}:{local}" if prefix else local
