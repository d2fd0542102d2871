"""Clone foreign markup trees into the SVG namespace."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Optional
from xml.dom import Node as DomNode

from .nodes import XLINK_NS, CharacterData, Element, Node, Text, _local_name, _namespace_of

logger = logging.getLogger(__name__)


def import_subtree(node: object) -> Optional[Node]:
    """Return a copy of ``node`` whose elements all live in the SVG namespace.

    Accepts ``xml.dom`` nodes (for example from ``minidom``), ElementTree
    elements and this package's own nodes. Whitespace-only text and CDATA is
    dropped, as are comments, processing instructions and documents.
    """
    if isinstance(node, DomNode):
        return _import_dom(node)
    if isinstance(node, ET.Element):
        return _import_etree(node)
    if isinstance(node, Node):
        return _import_native(node)
    logger.debug("Skipping unsupported node type %s", type(node).__name__)
    return None


def check_name(name: str) -> str:
    """Lower-case names starting with a capital and strip an ``svg:`` prefix."""
    name = _local_name(name)
    if name[:4].lower() == "svg:":
        name = name[4:]
    if name[:1].isupper() and name[:1].isascii():
        name = name.lower()
    return name


def _is_namespace_declaration(name: str) -> bool:
    return name == "xmlns" or name.startswith("xmlns:")


def _text_node(data: Optional[str]) -> Optional[Text]:
    if data and data.strip():
        return Text(data)
    return None


def _import_dom(node: DomNode) -> Optional[Node]:
    if node.nodeType == DomNode.ELEMENT_NODE:
        clone = Element(check_name(node.nodeName))
        attributes = node.attributes
        for idx in range(attributes.length):
            attr = attributes.item(idx)
            if _is_namespace_declaration(attr.nodeName) or not attr.nodeValue:
                continue
            if attr.prefix == "xlink" or attr.namespaceURI == XLINK_NS:
                clone.set_attribute_ns(XLINK_NS, attr.localName, attr.nodeValue)
            else:
                clone.set_attribute(check_name(attr.nodeName), attr.nodeValue)
        for child in node.childNodes:
            imported = _import_dom(child)
            if imported is not None:
                clone.append_child(imported)
        return clone
    if node.nodeType == DomNode.TEXT_NODE:
        return _text_node(node.nodeValue)
    if node.nodeType == DomNode.CDATA_SECTION_NODE:
        if node.nodeValue and node.nodeValue.strip():
            return CharacterData(node.nodeValue)
    return None


def _import_etree(node: ET.Element) -> Optional[Element]:
    if not isinstance(node.tag, str):
        # Comments and processing instructions use factory functions as tags.
        return None
    clone = Element(check_name(node.tag))
    for key, value in node.attrib.items():
        if not value:
            continue
        if _namespace_of(key) == XLINK_NS:
            clone.set_attribute_ns(XLINK_NS, _local_name(key), value)
        elif key.startswith("xlink:"):
            clone.set_attribute_ns(XLINK_NS, key[len("xlink:"):], value)
        elif _namespace_of(key) is not None:
            clone.set_attribute_ns(_namespace_of(key), _local_name(key), value)
        elif not _is_namespace_declaration(key):
            clone.set_attribute(check_name(key), value)
    text = _text_node(node.text)
    if text is not None:
        clone.append_child(text)
    for child in node:
        imported = _import_etree(child)
        if imported is not None:
            clone.append_child(imported)
        tail = _text_node(child.tail)
        if tail is not None:
            clone.append_child(tail)
    return clone


def _import_native(node: Node) -> Optional[Node]:
    if isinstance(node, Element):
        clone = Element(check_name(node.tag))
        for key, value in node.attributes.items():
            if value is None or value == "" or _is_namespace_declaration(key):
                continue
            if _namespace_of(key) == XLINK_NS:
                clone.set_attribute_ns(XLINK_NS, _local_name(key), value)
            else:
                clone.attributes[check_name(key) if _namespace_of(key) is None else key] = value
        for child in node.children:
            imported = _import_native(child)
            if imported is not None:
                clone.append_child(imported)
        return clone
    if isinstance(node, Text):
        return _text_node(node.data)
    if isinstance(node, CharacterData):
        if node.data.strip():
            return CharacterData(node.data)
    return None
