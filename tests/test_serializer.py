from __future__ import annotations

import sys
import unittest
from pathlib import Path

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from svgbuilder import XLINK_NS, CharacterData, Element, Text, to_svg
from svgbuilder.nodes import XML_NS


class SerializerTests(unittest.TestCase):
    def test_none_renders_empty(self) -> None:
        self.assertEqual(to_svg(None), "")

    def test_self_closing_and_nested(self) -> None:
        leaf = Element("rect", {"x": 0, "fill": "blue"})
        self.assertEqual(to_svg(leaf), '<rect x="0" fill="blue"/>')
        group = Element("g", {"id": "a"})
        group.append_child(leaf)
        self.assertEqual(to_svg(group), '<g id="a"><rect x="0" fill="blue"/></g>')

    def test_text_is_written_verbatim(self) -> None:
        elem = Element("text")
        elem.append_child(Text("a &amp; <b>"))
        self.assertEqual(to_svg(elem), "<text>a &amp; <b></text>")

    def test_cdata_section(self) -> None:
        elem = Element("style")
        elem.append_child(CharacterData(".a{fill:red}"))
        self.assertEqual(to_svg(elem), "<style><![CDATA[.a{fill:red}]]></style>")

    def test_skips_blank_and_non_scalar_values(self) -> None:
        elem = Element("rect")
        elem.set_attribute("x", "1")
        elem.set_attribute("blank", "   ")
        elem.set_attribute("settings", {"fill": "red"})
        elem.set_attribute("callback", lambda: None)
        elem.set_attribute("missing", None)
        elem.set_attribute("y", 2)
        self.assertEqual(to_svg(elem), '<rect x="1" y="2"/>')

    def test_namespaced_prefixes(self) -> None:
        elem = Element("use")
        elem.set_attribute_ns(XLINK_NS, "href", "#foo")
        elem.set_attribute_ns(XML_NS, "space", "preserve")
        elem.set_attribute_ns("urn:other", "thing", "1")
        self.assertEqual(to_svg(elem), '<use xlink:href="#foo" xml:space="preserve" thing="1"/>')


if __name__ == "__main__":
    unittest.main()
