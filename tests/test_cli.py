"""Tests for the `python -m padpack pack` command."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from padpack.__main__ import _pack
from tests.pack_fixtures import make_input_dict


class TestPackCommand(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.input = self.tmp / "input.json"
        self.input.write_text(json.dumps(make_input_dict()), encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def test_writes_output_and_png(self):
        out = self.tmp / "out.json"
        png = self.tmp / "out.png"
        self.assertEqual(_pack([str(self.input), "--out", str(out), "--png", str(png)]), 0)
        data = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual([c["componentId"] for c in data["components"]], ["U1", "U2"])
        self.assertTrue(png.exists())

    def test_invalid_input(self):
        data = make_input_dict()
        data["minGap"] = -1
        self.input.write_text(json.dumps(data), encoding="utf-8")
        self.assertEqual(_pack([str(self.input)]), 1)

    def test_null_offset(self):
        data = make_input_dict()
        data["components"][0]["pads"][0]["offset"] = None
        self.input.write_text(json.dumps(data), encoding="utf-8")
        buf = io.StringIO()
        with redirect_stdout(buf):
            self.assertEqual(_pack([str(self.input)]), 1)
        self.assertIn("Cannot read", buf.getvalue())

    def test_missing_file(self):
        self.assertEqual(_pack([str(self.tmp / "missing.json")]), 1)

    def test_usage(self):
        self.assertEqual(_pack([]), 1)


if __name__ == "__main__":
    unittest.main()
