"""Public API for svgbuilder."""
from .errors import BackendUnavailableError, LoadError, SvgBuilderError
from .importer import import_subtree
from .manager import Backend, DocumentRegistry, ExtensionRegistry, NativeBackend, UnsupportedBackend
from .nodes import SVG_NS, XLINK_NS, CharacterData, Element, Text, normalize_attributes
from .path import PathBuilder
from .root import SVGRoot
from .serializer import to_svg
from .text import PathTextRun, PlainRun, ReferenceRun, SpanRun, TextBuilder

__all__ = [
    "Backend",
    "BackendUnavailableError",
    "CharacterData",
    "DocumentRegistry",
    "Element",
    "ExtensionRegistry",
    "LoadError",
    "NativeBackend",
    "PathBuilder",
    "PathTextRun",
    "PlainRun",
    "ReferenceRun",
    "SVGRoot",
    "SVG_NS",
    "SpanRun",
    "SvgBuilderError",
    "Text",
    "TextBuilder",
    "UnsupportedBackend",
    "XLINK_NS",
    "import_subtree",
    "normalize_attributes",
    "to_svg",
]
