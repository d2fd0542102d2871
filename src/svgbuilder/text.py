"""Rich text composition: plain runs, styled spans and cross-references."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .nodes import normalize_attributes


@dataclass(frozen=True)
class PlainRun:
    text: str


@dataclass(frozen=True)
class SpanRun:
    text: str
    attributes: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ReferenceRun:
    target: str
    attributes: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class PathTextRun:
    target: str
    text: str
    attributes: Dict[str, object] = field(default_factory=dict)


TextRun = Union[PlainRun, SpanRun, ReferenceRun, PathTextRun]


class TextBuilder:
    """Collects text runs for expansion under a ``text`` element.

    Example::

        text = TextBuilder().string("This is ").span("red", fill="red").string("!")
        root.text(None, 10, 20, text, fill="blue")
    """

    def __init__(self) -> None:
        self._runs: List[TextRun] = []

    def __len__(self) -> int:
        return len(self._runs)

    @property
    def runs(self) -> Tuple[TextRun, ...]:
        return tuple(self._runs)

    def reset(self) -> TextBuilder:
        self._runs = []
        return self

    def string(self, value: str) -> TextBuilder:
        self._runs.append(PlainRun(value))
        return self

    def span(self, value: str, settings: Optional[Mapping[str, object]] = None, **attrs: object) -> TextBuilder:
        self._runs.append(SpanRun(value, normalize_attributes(settings, **attrs)))
        return self

    def ref(self, element_id: str, settings: Optional[Mapping[str, object]] = None, **attrs: object) -> TextBuilder:
        """Reference previously defined text by its id (``#id``)."""
        self._runs.append(ReferenceRun(element_id, normalize_attributes(settings, **attrs)))
        return self

    def path(
        self,
        path_id: str,
        value: str,
        settings: Optional[Mapping[str, object]] = None,
        **attrs: object,
    ) -> TextBuilder:
        """Add text drawn along the path referenced by ``path_id``."""
        self._runs.append(PathTextRun(path_id, value, normalize_attributes(settings, **attrs)))
        return self
