"""Document registry, rendering backends and root extensions."""
from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, Hashable, Iterator, Mapping, Optional, Protocol, Tuple, Union

from .errors import BackendUnavailableError
from .nodes import SVG_NS, XLINK_NS, Element, normalize_attributes
from .resources import load_regional
from .root import ExtensionFactory, SVGRoot

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 300


class Backend(Protocol):
    """Creates the live root element a document is built on."""

    name: str

    def create_root(self, width: Union[int, float, str], height: Union[int, float, str]) -> Element:
        ...


class NativeBackend:
    """Hosts documents as in-memory node trees."""

    name = "native"

    def create_root(self, width: Union[int, float, str], height: Union[int, float, str]) -> Element:
        return Element(
            "svg",
            normalize_attributes(
                {
                    "version": "1.1",
                    "xmlns": SVG_NS,
                    "xmlns:xlink": XLINK_NS,
                    "width": width,
                    "height": height,
                }
            ),
        )


class UnsupportedBackend:
    """Backend for hosts that cannot display SVG at all."""

    name = "unsupported"

    def create_root(self, width: Union[int, float, str], height: Union[int, float, str]) -> Element:
        raise BackendUnavailableError("no SVG backend is available for this container")


BackendSelector = Callable[[Hashable], Backend]


def native_backend_selector(container: Hashable) -> Backend:
    return NativeBackend()


class ExtensionRegistry:
    """Named factories whose products are attached to every new root."""

    def __init__(self) -> None:
        self._factories: Dict[str, ExtensionFactory] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[Tuple[str, ExtensionFactory]]:
        return iter(list(self._factories.items()))

    def register(self, name: str, factory: ExtensionFactory) -> None:
        self._factories[name] = factory


class DocumentRegistry:
    """Owns the documents attached to containers, keyed by numeric handle.

    Containers are any hashable key chosen by the caller (a widget, a file
    name, an id). The backend for a container is chosen once, when it is
    attached, through ``backend_selector``.
    """

    def __init__(
        self,
        backend_selector: Optional[BackendSelector] = None,
        extensions: Optional[ExtensionRegistry] = None,
        locale: str = "",
    ) -> None:
        self._backend_selector = backend_selector or native_backend_selector
        self.extensions = extensions if extensions is not None else ExtensionRegistry()
        self._regional = load_regional()
        self.local = self._regional.get(locale, self._regional[""])
        self._next_handle = itertools.count()
        self._handles: Dict[Hashable, int] = {}
        self._roots: Dict[int, SVGRoot] = {}
        self._errors: Dict[Hashable, str] = {}

    def __contains__(self, container: object) -> bool:
        return container in self._handles

    def __len__(self) -> int:
        return len(self._roots)

    def set_locale(self, locale: str) -> None:
        self.local = self._regional.get(locale, self._regional[""])

    def attach(
        self,
        container: Hashable,
        width: Union[int, float, str] = DEFAULT_WIDTH,
        height: Union[int, float, str] = DEFAULT_HEIGHT,
        *,
        load_url: Optional[str] = None,
        settings: Optional[Mapping[str, object]] = None,
        on_load: Optional[Callable[[Hashable], None]] = None,
    ) -> int:
        """Create a document for ``container`` and return its handle.

        Returns the existing handle when the container is already attached,
        and -1 when the selected backend cannot host SVG; the localised
        reason is then available from ``error_of``.
        """
        if container in self._handles:
            return self._handles[container]
        backend = self._backend_selector(container)
        logger.debug("Selected %s backend for %r", backend.name, container)
        try:
            svg = backend.create_root(width, height)
        except BackendUnavailableError:
            self._errors[container] = self.local["notSupportedText"]
            return -1
        handle = next(self._next_handle)
        root = SVGRoot(svg, container, extensions=self.extensions, local=self.local)
        self._handles[container] = handle
        self._roots[handle] = root
        self._errors.pop(container, None)
        logger.debug("Attached %r as document %d", container, handle)
        if load_url:
            root.load(load_url)
        if settings:
            root.configure(settings)
        if on_load is not None:
            on_load(container)
        return handle

    def get(self, container: Hashable) -> Optional[SVGRoot]:
        handle = self._handles.get(container)
        if handle is None:
            return None
        return self._roots.get(handle)

    def get_by_handle(self, handle: int) -> Optional[SVGRoot]:
        return self._roots.get(handle)

    def handle_of(self, container: Hashable) -> Optional[int]:
        return self._handles.get(container)

    def error_of(self, container: Hashable) -> Optional[str]:
        return self._errors.get(container)

    def destroy(self, container: Hashable) -> None:
        """Detach the document from ``container``; unknown containers are ignored."""
        self._errors.pop(container, None)
        handle = self._handles.pop(container, None)
        if handle is None:
            return
        root = self._roots.pop(handle)
        root.clear(False)
        logger.debug("Destroyed document %d for %r", handle, container)
