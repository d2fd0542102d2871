from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from svgbuilder import LoadError, NativeBackend, SVGRoot
from svgbuilder.loader import fetch_document, parse_markup

EXTERNAL = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
    'version="1.1" width="300" height="200" viewBox="0 0 30 20">\n'
    '  <circle cx="5" cy="5" r="2"/>\n'
    '  <use xlink:href="#c"/>\n'
    "</svg>"
)


def _new_root() -> SVGRoot:
    return SVGRoot(NativeBackend().create_root(100, 50))


class FetchDocumentTests(unittest.TestCase):
    def test_reads_local_paths_and_file_urls(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "drawing.svg"
            path.write_text(EXTERNAL, encoding="utf-8")
            self.assertEqual(fetch_document(str(path)).documentElement.getAttribute("width"), "300")
            self.assertEqual(fetch_document(path.as_uri()).documentElement.tagName, "svg")

    def test_missing_file(self) -> None:
        with self.assertRaises(LoadError) as ctx:
            fetch_document("/nonexistent/drawing.svg")
        self.assertEqual(ctx.exception.code, "E_LOAD")

    def test_http_uses_requests(self) -> None:
        response = mock.Mock(text=EXTERNAL)
        with mock.patch("svgbuilder.loader.requests.get", return_value=response) as get:
            doc = fetch_document("https://example.com/a.svg", timeout=5)
        get.assert_called_once_with("https://example.com/a.svg", timeout=5)
        response.raise_for_status.assert_called_once_with()
        self.assertEqual(doc.documentElement.getAttribute("height"), "200")

    def test_http_errors_become_load_errors(self) -> None:
        with mock.patch(
            "svgbuilder.loader.requests.get", side_effect=requests.ConnectionError("refused")
        ):
            with self.assertRaises(LoadError) as ctx:
                fetch_document("http://example.com/a.svg")
        self.assertIn("refused", str(ctx.exception))

    def test_unsupported_scheme(self) -> None:
        with self.assertRaises(LoadError):
            fetch_document("ftp://example.com/a.svg")

    def test_parse_errors(self) -> None:
        with self.assertRaises(LoadError) as ctx:
            parse_markup("<svg><g></svg>")
        self.assertIn("failed to parse XML", str(ctx.exception))


class LoadTests(unittest.TestCase):
    def test_replaces_content_and_keeps_size(self) -> None:
        root = _new_root()
        root.rect(None, 0, 0, 1, 1)
        calls = []
        root.load_markup(EXTERNAL, on_load=lambda owner, error: calls.append((owner, error)))
        self.assertEqual(calls, [(root, None)])
        self.assertEqual([child.tag for child in root.root.children], ["circle", "use"])
        self.assertEqual((root.width, root.height), ("100", "50"))
        self.assertEqual(root.root.get("viewBox"), "0 0 30 20")
        self.assertEqual(root.root.get("version"), "1.1")

    def test_change_size_and_add_to(self) -> None:
        root = _new_root()
        root.rect(None, 0, 0, 1, 1)
        root.load_markup(EXTERNAL, add_to=True, change_size=True)
        self.assertEqual([child.tag for child in root.root.children], ["rect", "circle", "use"])
        self.assertEqual((root.width, root.height), ("300", "200"))

    def test_load_uses_fetcher(self) -> None:
        root = _new_root()
        fetcher = mock.Mock(return_value=parse_markup(EXTERNAL))
        root.load("https://example.com/a.svg", fetcher=fetcher)
        fetcher.assert_called_once_with("https://example.com/a.svg")
        self.assertEqual(len(root.root.children), 2)

    def test_failure_is_reported_once(self) -> None:
        root = _new_root()
        root.rect(None, 0, 0, 1, 1)
        calls = []
        fetcher = mock.Mock(side_effect=LoadError("HTTP 404 for x"))
        root.load("x", on_load=lambda owner, error: calls.append(error), fetcher=fetcher)
        self.assertEqual(calls, ["Error loading: HTTP 404 for x"])
        self.assertEqual(root.root.children, [])
        self.assertEqual(root.width, "100")

    def test_failure_without_callback_draws_message(self) -> None:
        root = _new_root()
        root.load_markup("<svg>", add_to=True)
        text = root.root.children[0]
        self.assertEqual(text.tag, "text")
        self.assertEqual((text.get("x"), text.get("y")), ("10", "20"))
        self.assertTrue(text.children[0].data.startswith("Error loading: failed to parse XML"))


class RoundTripTests(unittest.TestCase):
    def test_group_rect_round_trip(self) -> None:
        original = _new_root()
        group = original.group(None)
        original.rect(group, 0, 0, 10, 10, fill="blue")
        first = original.to_svg()

        fresh = SVGRoot(NativeBackend().create_root(1, 1))
        fresh.load_markup(first, change_size=True)
        second = fresh.to_svg()
        self.assertEqual(second, first)
        self.assertIn('<g><rect x="0" y="0" width="10" height="10" fill="blue"/></g>', second)

    def test_rich_text_round_trip(self) -> None:
        original = _new_root()
        original.text(None, 5, 5, original.create_text().string("a").span("b", fill="red").ref("#t"))
        original.use(None, "#t")
        first = original.to_svg()
        fresh = _new_root()
        fresh.load_markup(first)
        self.assertEqual(fresh.to_svg(), first)


if __name__ == "__main__":
    unittest.main()
