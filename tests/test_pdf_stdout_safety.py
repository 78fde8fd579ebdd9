from __future__ import annotations

import os
import sys
import tempfile
import unittest
from pathlib import Path

from filederive.pdf_runtime import silence_mupdf_display
from filederive.providers.pdf import PagesSummary, PyMuPdfSplitter
from tests.fixtures.pdf_factory import create_malformed_pdf


def _run_with_fd1_capture(fn) -> str:
    sys.stdout.flush()
    original_fd = os.dup(1)
    with tempfile.TemporaryFile(mode="w+b") as tmp:
        os.dup2(tmp.fileno(), 1)
        try:
            fn()
        finally:
            sys.stdout.flush()
            os.dup2(original_fd, 1)
            os.close(original_fd)
        tmp.seek(0)
        return tmp.read().decode("utf-8", errors="ignore")


class PdfStdoutSafetyTests(unittest.TestCase):
    def test_silence_mupdf_display_turns_output_off(self) -> None:
        import fitz

        fitz.TOOLS.mupdf_display_errors(True)
        fitz.TOOLS.mupdf_display_warnings(True)
        silence_mupdf_display()
        self.assertEqual(fitz.TOOLS.mupdf_display_errors(), 0)
        self.assertEqual(fitz.TOOLS.mupdf_display_warnings(), 0)

    def test_split_of_bad_pdf_does_not_write_stdout(self) -> None:
        import fitz

        with tempfile.TemporaryDirectory() as tmp:
            bad_pdf = create_malformed_pdf(Path(tmp) / "bad.pdf")
            fitz.TOOLS.mupdf_display_errors(True)
            fitz.TOOLS.mupdf_display_warnings(True)

            def _split() -> None:
                with self.assertRaises(Exception):
                    PyMuPdfSplitter().split(bad_pdf, Path(tmp) / "pages", "bad", "tiff")

            self.assertEqual(_run_with_fd1_capture(_split).strip(), "")

    def test_summary_of_bad_pdf_does_not_write_stdout(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            bad_pdf = create_malformed_pdf(Path(tmp) / "bad.pdf")

            def _summarize() -> None:
                with self.assertRaises(Exception):
                    PagesSummary.extract_from(bad_pdf)

            self.assertEqual(_run_with_fd1_capture(_summarize).strip(), "")


if __name__ == "__main__":
    unittest.main()
