from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace

from filederive.config import Settings
from filederive.server import AppState, derive_files_tool, get_documentation, list_generators


def _ctx(settings: Settings):
    return SimpleNamespace(request_context=SimpleNamespace(lifespan_context=AppState(settings=settings)))


class ServerToolTests(unittest.TestCase):
    def test_list_generators(self) -> None:
        names = [row["name"] for row in json.loads(list_generators())]
        self.assertEqual(names, sorted(names))
        self.assertIn("pdf_split", names)

    def test_get_documentation(self) -> None:
        self.assertIn("s3://", get_documentation("backends"))
        self.assertIn("documentation sections", get_documentation())

    def test_derive_files_tool_copies(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            source = root / "a.txt"
            source.write_text("abc", encoding="utf-8")

            payload = json.loads(
                derive_files_tool(
                    "copy",
                    [f"file://{source}"],
                    f"file://{root}/copies/{{{{ filename }}}}",
                    _ctx(Settings()),
                )
            )
            self.assertEqual(payload["outputs"], [f"file://{root}/copies/a.txt"])

    def test_derive_files_tool_requires_inputs(self) -> None:
        with self.assertRaises(ValueError):
            derive_files_tool("copy", [], "file:///out/{{ filename }}", _ctx(Settings()))


if __name__ == "__main__":
    unittest.main()
