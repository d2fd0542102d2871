"""In-memory SVG node tree: elements, text and CDATA sections."""
from __future__ import annotations

import math
from typing import Dict, Iterator, List, Mapping, Optional

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
XML_NS = "http://www.w3.org/XML/1998/namespace"

NAMESPACE_PREFIXES = {XLINK_NS: "xlink", XML_NS: "xml"}


class Node:
    """Base class for every entry in a document tree."""

    def __init__(self) -> None:
        self.parent: Optional[Element] = None

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.remove_child(self)


class Text(Node):
    def __init__(self, data: str) -> None:
        super().__init__()
        self.data = data

    def __repr__(self) -> str:
        return f"Text({self.data!r})"


class CharacterData(Node):
    """A CDATA section; serialized inside ``<![CDATA[...]]>``."""

    def __init__(self, data: str) -> None:
        super().__init__()
        self.data = data

    def __repr__(self) -> str:
        return f"CharacterData({self.data!r})"


class Element(Node):
    """An SVG element with ordered attributes and ordered children.

    Namespaced attributes are keyed in Clark notation, e.g.
    ``{http://www.w3.org/1999/xlink}href``. Elements always belong to the
    SVG namespace.
    """

    namespace = SVG_NS

    def __init__(self, tag: str, attributes: Optional[Mapping[str, object]] = None) -> None:
        super().__init__()
        self.tag = tag
        self.attributes: Dict[str, object] = {}
        self.children: List[Node] = []
        for name, value in (attributes or {}).items():
            self.set_attribute(name, value)

    def __repr__(self) -> str:
        return f"<Element {self.tag} at {id(self):#x}>"

    def __iter__(self) -> Iterator[Node]:
        return iter(self.children)

    def set_attribute(self, name: str, value: object) -> None:
        self.attributes[name] = _coerce_value(value)

    def set_attribute_ns(self, namespace: Optional[str], name: str, value: object) -> None:
        key = _qual(namespace, name) if namespace else name
        self.attributes[key] = _coerce_value(value)

    def get(self, name: str, default: Optional[object] = None) -> Optional[object]:
        return self.attributes.get(name, default)

    def get_ns(self, namespace: str, name: str, default: Optional[object] = None) -> Optional[object]:
        return self.attributes.get(_qual(namespace, name), default)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def append_child(self, node: Node) -> Node:
        node.detach()
        node.parent = self
        self.children.append(node)
        return node

    def remove_child(self, node: Node) -> None:
        self.children.remove(node)
        node.parent = None

    def iter(self, tag: Optional[str] = None) -> Iterator[Element]:
        """Yield this element and its element descendants in document order."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter(tag)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        for elem in self.iter():
            if elem.attributes.get("id") == element_id:
                return elem
        return None

    def itertext(self) -> Iterator[str]:
        for child in self.children:
            if isinstance(child, Element):
                yield from child.itertext()
            else:
                yield child.data


def normalize_attributes(
    settings: Optional[Mapping[str, object]] = None, **attrs: object
) -> Dict[str, object]:
    """Drop ``None`` and empty-string values, keeping the order of the rest.

    Keyword names are translated to SVG spelling: a trailing underscore is
    stripped and remaining underscores become hyphens, so ``class_`` is
    ``class`` and ``stroke_width`` is ``stroke-width``.
    """
    merged: Dict[str, object] = dict(settings or {})
    for key, value in attrs.items():
        merged[_attribute_name(key)] = value
    return {
        name: value
        for name, value in merged.items()
        if value is not None and not (isinstance(value, str) and value == "")
    }


def format_number(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def is_serializable(value: object) -> bool:
    return isinstance(value, (str, int, float, bool))


def _coerce_value(value: object) -> object:
    # Scalars are stored in their markup form; anything else is kept as-is
    # and later skipped by the serializer.
    if isinstance(value, str):
        return value
    if is_serializable(value):
        return format_number(value)
    return value


def _attribute_name(key: str) -> str:
    if key.endswith("_"):
        key = key[:-1]
    return key.replace("_", "-")


def _namespace_of(tag: Optional[str]) -> Optional[str]:
    if tag is None:
        return None
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def _local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _qual(ns: str, local: str) -> str:
    return f"{{{ns}}}{local}"
