from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest import mock

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from svgbuilder import DocumentRegistry, ExtensionRegistry, NativeBackend, SVGRoot, UnsupportedBackend
from svgbuilder.resources import load_regional


class _Counter:
    def __init__(self, root: SVGRoot) -> None:
        self.root = root

    def count(self) -> int:
        return len(self.root.root.children)


class DocumentRegistryTests(unittest.TestCase):
    def test_attach_creates_root_with_size(self) -> None:
        registry = DocumentRegistry()
        handle = registry.attach("chart", 200, 100)
        root = registry.get("chart")
        self.assertIsInstance(root, SVGRoot)
        self.assertIs(registry.get_by_handle(handle), root)
        self.assertEqual(registry.handle_of("chart"), handle)
        self.assertEqual((root.width, root.height), ("200", "100"))
        self.assertEqual(root.container, "chart")
        self.assertIn("chart", registry)
        self.assertEqual(len(registry), 1)

    def test_integer_containers_are_separate_from_handles(self) -> None:
        registry = DocumentRegistry()
        handle = registry.attach("a")
        registry.attach(handle, 10, 10)
        self.assertEqual(registry.get(handle).container, handle)
        self.assertEqual(registry.get_by_handle(handle).container, "a")
        self.assertIsNone(registry.get("missing"))

    def test_attach_is_idempotent_per_container(self) -> None:
        registry = DocumentRegistry()
        first = registry.attach("a")
        self.assertEqual(registry.attach("a", 10, 10), first)
        second = registry.attach("b")
        self.assertNotEqual(first, second)
        self.assertEqual(registry.get("a").width, "400")

    def test_attach_applies_settings_and_notifies(self) -> None:
        registry = DocumentRegistry()
        seen = []
        registry.attach("a", settings={"viewBox": "0 0 4 4"}, on_load=seen.append)
        self.assertEqual(seen, ["a"])
        self.assertEqual(registry.get("a").root.get("viewBox"), "0 0 4 4")

    def test_attach_loads_url(self) -> None:
        registry = DocumentRegistry()
        with mock.patch.object(SVGRoot, "load") as load:
            registry.attach("a", load_url="https://example.com/a.svg")
        load.assert_called_once_with("https://example.com/a.svg")

    def test_destroy_deregisters(self) -> None:
        registry = DocumentRegistry()
        handle = registry.attach("a")
        root = registry.get("a")
        root.circle(None, 1, 1, 1)
        registry.destroy("a")
        self.assertNotIn("a", registry)
        self.assertIsNone(registry.get_by_handle(handle))
        self.assertEqual(root.root.children, [])
        registry.destroy("a")
        self.assertNotEqual(registry.attach("a"), handle)

    def test_backend_strategy_is_injected(self) -> None:
        chosen = []

        def selector(container):
            chosen.append(container)
            return UnsupportedBackend() if container == "legacy" else NativeBackend()

        registry = DocumentRegistry(backend_selector=selector)
        self.assertEqual(registry.attach("legacy"), -1)
        self.assertEqual(registry.error_of("legacy"), load_regional()[""]["notSupportedText"])
        self.assertIsNone(registry.get("legacy"))
        self.assertGreaterEqual(registry.attach("modern"), 0)
        self.assertEqual(chosen, ["legacy", "modern"])

    def test_extensions_attach_to_each_root(self) -> None:
        extensions = ExtensionRegistry()
        extensions.register("counter", _Counter)
        self.assertIn("counter", extensions)
        registry = DocumentRegistry(extensions=extensions)
        registry.attach("a")
        root = registry.get("a")
        counter = root.extension("counter")
        self.assertIs(counter.root, root)
        root.rect(None, 0, 0, 1, 1)
        self.assertEqual(counter.count(), 1)

    def test_unknown_locale_falls_back_to_default(self) -> None:
        registry = DocumentRegistry(locale="xx")
        self.assertEqual(registry.local["errorLoadingText"], "Error loading")


if __name__ == "__main__":
    unittest.main()
