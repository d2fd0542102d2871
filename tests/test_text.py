from __future__ import annotations

import sys
import unittest
from pathlib import Path

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from svgbuilder import PathTextRun, PlainRun, ReferenceRun, SpanRun, TextBuilder


class TextBuilderTests(unittest.TestCase):
    def test_runs_in_order(self) -> None:
        text = (
            TextBuilder()
            .string("a")
            .span("b", {"fill": "red"})
            .ref("#t1", font_size=12)
            .path("#curve", "along", {"startOffset": "10%"})
        )
        self.assertEqual(
            text.runs,
            (
                PlainRun("a"),
                SpanRun("b", {"fill": "red"}),
                ReferenceRun("#t1", {"font-size": 12}),
                PathTextRun("#curve", "along", {"startOffset": "10%"}),
            ),
        )

    def test_span_drops_empty_settings(self) -> None:
        text = TextBuilder().span("b", {"fill": None, "stroke": "", "opacity": 0})
        self.assertEqual(text.runs[0].attributes, {"opacity": 0})

    def test_reset(self) -> None:
        text = TextBuilder().string("a").string("b")
        self.assertEqual(len(text), 2)
        self.assertIs(text.reset(), text)
        self.assertEqual(text.runs, ())


if __name__ == "__main__":
    unittest.main()
