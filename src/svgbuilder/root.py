"""The drawing API: shape, text and definition constructors over a root ``svg`` element."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union
from xml.dom import minidom
from xml.sax.saxutils import escape

from .errors import LoadError
from .importer import import_subtree
from .loader import Fetcher, fetch_document, parse_markup
from .nodes import XLINK_NS, Element, Node, Text, format_number, normalize_attributes
from .path import PathBuilder
from .resources import load_regional
from .serializer import to_svg
from .text import PathTextRun, PlainRun, ReferenceRun, SpanRun, TextBuilder

logger = logging.getLogger(__name__)

Settings = Optional[Mapping[str, object]]
Coordinate = Union[float, int, str]
ExtensionFactory = Callable[["SVGRoot"], object]
LoadCallback = Callable[["SVGRoot", Optional[str]], None]

# Root attributes that survive configure(..., clear=True).
_PROTECTED_ROOT_ATTRIBUTES = ("onload", "version")

ERROR_TEXT_POSITION = (10, 20)


class SVGRoot:
    """Builds and edits one SVG document.

    Every constructor takes the parent element first (``None`` means the root
    ``svg`` element) and ends with an optional settings mapping plus keyword
    attributes, e.g. ``root.rect(None, 0, 0, 10, 10, fill="blue", stroke_width=2)``.
    Settings whose value is ``None`` or ``""`` are dropped.
    """

    def __init__(
        self,
        svg: Element,
        container: object = None,
        *,
        extensions: Iterable[Tuple[str, ExtensionFactory]] = (),
        local: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._svg = svg
        self._container = container
        self._local = dict(local) if local is not None else load_regional()[""]
        self._extensions: Dict[str, object] = {}
        for name, factory in extensions:
            self._extensions[name] = factory(self)

    @property
    def root(self) -> Element:
        return self._svg

    @property
    def container(self) -> object:
        return self._container

    @property
    def width(self) -> Optional[str]:
        return self._svg.get("width")

    @property
    def height(self) -> Optional[str]:
        return self._svg.get("height")

    def extension(self, name: str) -> object:
        try:
            return self._extensions[name]
        except KeyError:
            raise KeyError(f"no extension registered as {name!r}") from None

    def configure(self, settings: Settings = None, clear: bool = False, **attrs: object) -> SVGRoot:
        """Set root attributes, optionally removing the existing ones first.

        Clearing keeps ``version``, ``onload`` and namespace declarations.
        """
        if clear:
            for name in list(self._svg.attributes):
                if name in _PROTECTED_ROOT_ATTRIBUTES or name.startswith("xmlns"):
                    continue
                self._svg.remove_attribute(name)
        for name, value in normalize_attributes(settings, **attrs).items():
            self._svg.set_attribute(name, value)
        return self

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return self._svg.get_element_by_id(element_id)

    # Metadata and definitions

    def title(self, parent: Optional[Element], text: str, settings: Settings = None, **attrs: object) -> Element:
        node = self._make_node(parent, "title", _merge({}, settings, attrs))
        node.append_child(Text(text))
        return node

    def describe(self, parent: Optional[Element], text: str, settings: Settings = None, **attrs: object) -> Element:
        node = self._make_node(parent, "desc", _merge({}, settings, attrs))
        node.append_child(Text(text))
        return node

    def defs(self, parent: Optional[Element], id: Optional[str] = None, settings: Settings = None, **attrs: object) -> Element:
        if isinstance(id, Mapping):
            id, settings = None, id
        return self._make_node(parent, "defs", _merge({"id": id}, settings, attrs))

    def symbol(
        self,
        parent: Optional[Element],
        id: str,
        x1: Coordinate,
        y1: Coordinate,
        x2: Coordinate,
        y2: Coordinate,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        return self._make_node(
            parent, "symbol", _merge({"id": id, "viewBox": _view_box(x1, y1, x2, y2)}, settings, attrs)
        )

    def marker(
        self,
        parent: Optional[Element],
        id: str,
        ref_x: Coordinate,
        ref_y: Coordinate,
        width: Coordinate,
        height: Coordinate,
        orient: Union[str, int, float, None] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        if isinstance(orient, Mapping):
            orient, settings = None, orient
        base = {
            "id": id,
            "refX": ref_x,
            "refY": ref_y,
            "markerWidth": width,
            "markerHeight": height,
            "orient": orient if orient is not None else "auto",
        }
        return self._make_node(parent, "marker", _merge(base, settings, attrs))

    def style(self, parent: Optional[Element], styles: str, settings: Settings = None, **attrs: object) -> Element:
        node = self._make_node(parent, "style", _merge({"type": "text/css"}, settings, attrs))
        node.append_child(Text(escape(styles)))
        return node

    def script(
        self,
        parent: Optional[Element],
        script: str,
        type: Optional[str] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        if isinstance(type, Mapping):
            type, settings = None, type
        node = self._make_node(parent, "script", _merge({"type": type or "text/javascript"}, settings, attrs))
        node.append_child(Text(escape(script)))
        return node

    def linear_gradient(
        self,
        parent: Optional[Element],
        id: str,
        stops: Sequence[Sequence[object]],
        x1: Union[Coordinate, Mapping[str, object], None] = None,
        y1: Optional[Coordinate] = None,
        x2: Optional[Coordinate] = None,
        y2: Optional[Coordinate] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        """Gradient along a line; give all of x1, y1, x2, y2 or none of them."""
        if isinstance(x1, Mapping):
            x1, settings = None, x1
        base: Dict[str, object] = {"id": id}
        if x1 is not None:
            base.update({"x1": x1, "y1": y1, "x2": x2, "y2": y2})
        return self._gradient(parent, "linearGradient", _merge(base, settings, attrs), stops)

    def radial_gradient(
        self,
        parent: Optional[Element],
        id: str,
        stops: Sequence[Sequence[object]],
        cx: Union[Coordinate, Mapping[str, object], None] = None,
        cy: Optional[Coordinate] = None,
        r: Optional[Coordinate] = None,
        fx: Optional[Coordinate] = None,
        fy: Optional[Coordinate] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        """Gradient from a focus to a circle; give all of cx, cy, r, fx, fy or none."""
        if isinstance(cx, Mapping):
            cx, settings = None, cx
        base: Dict[str, object] = {"id": id}
        if cx is not None:
            base.update({"cx": cx, "cy": cy, "r": r, "fx": fx, "fy": fy})
        return self._gradient(parent, "radialGradient", _merge(base, settings, attrs), stops)

    def _gradient(
        self, parent: Optional[Element], name: str, settings: Dict[str, object], stops: Sequence[Sequence[object]]
    ) -> Element:
        node = self._make_node(parent, name, settings)
        for stop in stops:
            stop_settings = {"offset": stop[0], "stop-color": stop[1]}
            if len(stop) > 2 and stop[2] is not None:
                stop_settings["stop-opacity"] = stop[2]
            self._make_node(node, "stop", stop_settings)
        return node

    def pattern(
        self,
        parent: Optional[Element],
        id: str,
        x: Coordinate,
        y: Coordinate,
        width: Coordinate,
        height: Coordinate,
        vx: Union[Coordinate, Mapping[str, object], None] = None,
        vy: Optional[Coordinate] = None,
        vwidth: Optional[Coordinate] = None,
        vheight: Optional[Coordinate] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        if isinstance(vx, Mapping):
            vx, settings = None, vx
        base: Dict[str, object] = {"id": id, "x": x, "y": y, "width": width, "height": height}
        if vx is not None:
            base["viewBox"] = _view_box(vx, vy, vwidth, vheight)
        return self._make_node(parent, "pattern", _merge(base, settings, attrs))

    def mask(
        self,
        parent: Optional[Element],
        id: str,
        x: Coordinate,
        y: Coordinate,
        width: Coordinate,
        height: Coordinate,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        base = {"id": id, "x": x, "y": y, "width": width, "height": height}
        return self._make_node(parent, "mask", _merge(base, settings, attrs))

    def create_path(self) -> PathBuilder:
        return PathBuilder()

    def create_text(self) -> TextBuilder:
        return TextBuilder()

    # Structure

    def svg(
        self,
        parent: Optional[Element],
        x: Coordinate,
        y: Coordinate,
        width: Coordinate,
        height: Coordinate,
        vx: Union[Coordinate, Mapping[str, object], None] = None,
        vy: Optional[Coordinate] = None,
        vwidth: Optional[Coordinate] = None,
        vheight: Optional[Coordinate] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        """Embed a nested ``svg`` viewport; give all of the view box values or none."""
        if isinstance(vx, Mapping):
            vx, settings = None, vx
        base: Dict[str, object] = {"x": x, "y": y, "width": width, "height": height}
        if vx is not None:
            base["viewBox"] = _view_box(vx, vy, vwidth, vheight)
        return self._make_node(parent, "svg", _merge(base, settings, attrs))

    def group(self, parent: Optional[Element], id: Optional[str] = None, settings: Settings = None, **attrs: object) -> Element:
        if isinstance(id, Mapping):
            id, settings = None, id
        return self._make_node(parent, "g", _merge({"id": id}, settings, attrs))

    def use(
        self,
        parent: Optional[Element],
        x: Optional[Coordinate] = None,
        y: Optional[Coordinate] = None,
        width: Optional[Coordinate] = None,
        height: Optional[Coordinate] = None,
        ref: Optional[str] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        """Reference a definition; ``use(parent, "#id")`` skips the geometry."""
        if isinstance(x, str) and ref is None:
            if isinstance(y, Mapping):
                settings = y
            ref, x, y = x, None, None
        base = {"x": x, "y": y, "width": width, "height": height}
        node = self._make_node(parent, "use", _merge(base, settings, attrs))
        node.set_attribute_ns(XLINK_NS, "href", ref)
        return node

    def link(self, parent: Optional[Element], ref: str, settings: Settings = None, **attrs: object) -> Element:
        node = self._make_node(parent, "a", _merge({}, settings, attrs))
        node.set_attribute_ns(XLINK_NS, "href", ref)
        return node

    def image(
        self,
        parent: Optional[Element],
        x: Coordinate,
        y: Coordinate,
        width: Coordinate,
        height: Coordinate,
        ref: str,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        base = {"x": x, "y": y, "width": width, "height": height}
        node = self._make_node(parent, "image", _merge(base, settings, attrs))
        node.set_attribute_ns(XLINK_NS, "href", ref)
        return node

    # Shapes

    def path(
        self, parent: Optional[Element], path: Union[PathBuilder, str], settings: Settings = None, **attrs: object
    ) -> Element:
        d = path.path() if isinstance(path, PathBuilder) else path
        return self._make_node(parent, "path", _merge({"d": d}, settings, attrs))

    def rect(
        self,
        parent: Optional[Element],
        x: Coordinate,
        y: Coordinate,
        width: Coordinate,
        height: Coordinate,
        rx: Optional[Coordinate] = None,
        ry: Optional[Coordinate] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        """Rectangle; a lone ``rx`` or ``ry`` is used for both corner radii."""
        if isinstance(rx, Mapping):
            rx, settings = None, rx
        base: Dict[str, object] = {"x": x, "y": y, "width": width, "height": height}
        if rx is not None or ry is not None:
            base["rx"] = rx if rx is not None else ry
            base["ry"] = ry if ry is not None else rx
        return self._make_node(parent, "rect", _merge(base, settings, attrs))

    def circle(
        self,
        parent: Optional[Element],
        cx: Coordinate,
        cy: Coordinate,
        r: Coordinate,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        return self._make_node(parent, "circle", _merge({"cx": cx, "cy": cy, "r": r}, settings, attrs))

    def ellipse(
        self,
        parent: Optional[Element],
        cx: Coordinate,
        cy: Coordinate,
        rx: Coordinate,
        ry: Coordinate,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        base = {"cx": cx, "cy": cy, "rx": rx, "ry": ry}
        return self._make_node(parent, "ellipse", _merge(base, settings, attrs))

    def line(
        self,
        parent: Optional[Element],
        x1: Coordinate,
        y1: Coordinate,
        x2: Coordinate,
        y2: Coordinate,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        base = {"x1": x1, "y1": y1, "x2": x2, "y2": y2}
        return self._make_node(parent, "line", _merge(base, settings, attrs))

    def polyline(
        self, parent: Optional[Element], points: Sequence[Sequence[Coordinate]], settings: Settings = None, **attrs: object
    ) -> Element:
        return self._poly(parent, "polyline", points, _merge({}, settings, attrs))

    def polygon(
        self, parent: Optional[Element], points: Sequence[Sequence[Coordinate]], settings: Settings = None, **attrs: object
    ) -> Element:
        return self._poly(parent, "polygon", points, _merge({}, settings, attrs))

    def _poly(
        self, parent: Optional[Element], name: str, points: Sequence[Sequence[Coordinate]], settings: Dict[str, object]
    ) -> Element:
        joined = " ".join(",".join(format_number(value) for value in point) for point in points)
        return self._make_node(parent, name, {"points": joined.strip(), **settings})

    # Text

    def text(
        self,
        parent: Optional[Element],
        x: Union[Coordinate, Sequence[Coordinate], TextBuilder, None],
        y: Union[Coordinate, Sequence[Coordinate], Mapping[str, object], None] = None,
        value: Union[str, TextBuilder, None] = None,
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        """Draw text; ``text(parent, value)`` leaves out the position.

        ``x`` and ``y`` may be sequences to place individual glyphs or lines.
        """
        if value is None and isinstance(x, (str, TextBuilder)):
            if isinstance(y, Mapping):
                settings = y
            value, x, y = x, None, None
        base = {"x": _join_coords(x), "y": _join_coords(y)}
        return self._text(parent, "text", value if value is not None else "", _merge(base, settings, attrs))

    def textpath(
        self,
        parent: Optional[Element],
        path: str,
        value: Union[str, TextBuilder],
        settings: Settings = None,
        **attrs: object,
    ) -> Element:
        node = self._text(parent, "textPath", value, _merge({}, settings, attrs))
        node.set_attribute_ns(XLINK_NS, "href", path)
        return node

    def _text(
        self, parent: Optional[Element], name: str, value: Union[str, TextBuilder], settings: Dict[str, object]
    ) -> Element:
        node = self._make_node(parent, name, settings)
        if isinstance(value, str):
            node.append_child(Text(value))
            return node
        for run in value.runs:
            if isinstance(run, SpanRun):
                child = self._make_node(node, "tspan", run.attributes)
                child.append_child(Text(run.text))
            elif isinstance(run, ReferenceRun):
                child = self._make_node(node, "tref", run.attributes)
                child.set_attribute_ns(XLINK_NS, "href", run.target)
            elif isinstance(run, PathTextRun):
                generic = {key: val for key, val in run.attributes.items() if key != "href"}
                child = self._make_node(node, "textPath", generic)
                child.set_attribute_ns(XLINK_NS, "href", run.target)
                child.append_child(Text(run.text))
            elif isinstance(run, PlainRun):
                node.append_child(Text(run.text))
        return node

    def other(self, parent: Optional[Element], name: str, settings: Settings = None, **attrs: object) -> Element:
        """Add an element with any tag name."""
        return self._make_node(parent, name, _merge({}, settings, attrs))

    def _make_node(self, parent: Optional[Element], name: str, settings: Mapping[str, object]) -> Element:
        node = Element(name, normalize_attributes(settings))
        (parent if parent is not None else self._svg).append_child(node)
        return node

    # Tree editing

    def add(self, parent: Optional[Element], nodes: object) -> SVGRoot:
        """Import foreign node(s) under ``parent``, converting them to SVG nodes."""
        parent = parent if parent is not None else self._svg
        if isinstance(nodes, (list, tuple)):
            candidates = list(nodes)
        else:
            candidates = [nodes]
        for candidate in candidates:
            child = import_subtree(candidate)
            if child is not None:
                parent.append_child(child)
        logger.debug("Imported %d node(s) under <%s>", len(candidates), parent.tag)
        return self

    def remove(self, node: Node) -> SVGRoot:
        node.detach()
        return self

    def clear(self, attrs_too: bool = False) -> SVGRoot:
        if attrs_too:
            self.configure({}, True)
        for child in list(self._svg.children):
            self._svg.remove_child(child)
        return self

    def to_svg(self) -> str:
        return to_svg(self._svg)

    # Loading

    def load(
        self,
        url: str,
        add_to: bool = False,
        change_size: bool = False,
        on_load: Optional[LoadCallback] = None,
        fetcher: Optional[Fetcher] = None,
    ) -> SVGRoot:
        """Replace (or with ``add_to`` extend) the drawing with an external document.

        ``on_load(root, error)`` is called once with ``error`` set to a message
        on failure. Without a callback a failure is drawn as text at (10, 20).
        """
        fetch = fetcher or fetch_document
        return self._load(lambda: fetch(url), url, add_to, change_size, on_load)

    def load_markup(
        self,
        markup: str,
        add_to: bool = False,
        change_size: bool = False,
        on_load: Optional[LoadCallback] = None,
    ) -> SVGRoot:
        return self._load(lambda: parse_markup(markup), "<markup>", add_to, change_size, on_load)

    def _load(
        self,
        fetch: Callable[[], minidom.Document],
        source: str,
        add_to: bool,
        change_size: bool,
        on_load: Optional[LoadCallback],
    ) -> SVGRoot:
        if not add_to:
            self.clear(False)
        size = (self.width, self.height)
        try:
            document = fetch()
        except LoadError as exc:
            logger.warning("Failed to load %s: %s", source, exc)
            self._report_load_error(f"{self._local['errorLoadingText']}: {exc}", on_load)
            return self
        logger.debug("Loaded %s", source)
        loaded_root = document.documentElement
        attrs: Dict[str, object] = {}
        for idx in range(loaded_root.attributes.length):
            attr = loaded_root.attributes.item(idx)
            if attr.nodeName == "version" or attr.nodeName.startswith("xmlns"):
                continue
            attrs[attr.nodeName] = attr.nodeValue
        self.configure(attrs, True)
        self.add(None, list(loaded_root.childNodes))
        if not change_size:
            self.configure({"width": size[0], "height": size[1]})
        if on_load is not None:
            on_load(self, None)
        return self

    def _report_load_error(self, message: str, on_load: Optional[LoadCallback]) -> None:
        if on_load is not None:
            on_load(self, message)
        else:
            self.text(None, ERROR_TEXT_POSITION[0], ERROR_TEXT_POSITION[1], message)


def _merge(base: Mapping[str, object], settings: Settings, attrs: Mapping[str, object]) -> Dict[str, object]:
    merged: Dict[str, object] = dict(base)
    merged.update(settings or {})
    return normalize_attributes(merged, **attrs)


def _join_coords(value: object) -> object:
    if isinstance(value, (list, tuple)):
        return " ".join(format_number(item) for item in value)
    return value


def _view_box(*values: object) -> str:
    return " ".join(format_number(value) for value in values)
