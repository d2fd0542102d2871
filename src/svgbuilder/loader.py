"""Retrieve and parse external SVG documents."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlparse
from xml.dom import minidom
from xml.parsers.expat import ExpatError

import requests

from .errors import LoadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

Fetcher = Callable[[str], minidom.Document]


def fetch_document(url: str, timeout: float = DEFAULT_TIMEOUT) -> minidom.Document:
    """Fetch ``url`` and parse it as XML.

    ``http``/``https`` URLs are retrieved with requests; ``file://`` URLs and
    bare paths are read from disk. Every failure surfaces as ``LoadError``.
    """
    return parse_markup(_read_source(url, timeout))


def parse_markup(text: str) -> minidom.Document:
    try:
        return minidom.parseString(text)
    except ExpatError as exc:
        raise LoadError(f"failed to parse XML: {exc}") from exc


def _read_source(url: str, timeout: float) -> str:
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https"):
        logger.debug("Fetching %s", url)
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise LoadError(f"HTTP {exc.response.status_code} for {url}") from exc
        except requests.RequestException as exc:
            raise LoadError(f"request failed for {url}: {exc}") from exc
        return response.text
    if parsed.scheme == "file":
        path = Path(unquote(parsed.path))
    elif parsed.scheme and len(parsed.scheme) > 1:
        raise LoadError(f"unsupported URL scheme: {parsed.scheme}")
    else:
        path = Path(url)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(f"failed to read {path}: {exc.strerror or exc}") from exc
