from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

_display_lock = threading.Lock()
_capture_lock = threading.Lock()


def silence_mupdf_display() -> None:
    """Keep MuPDF from printing to stdout, which carries CLI JSON and the MCP transport."""
    with _display_lock:
        import fitz  # pymupdf

        fitz.TOOLS.mupdf_display_errors(False)
        fitz.TOOLS.mupdf_display_warnings(False)


def _compact(diagnostics: str) -> str:
    return " | ".join(line.strip() for line in diagnostics.splitlines() if line.strip())


@contextmanager
def capture_mupdf_diagnostics(context: str, *, log: logging.Logger | None = None) -> Iterator[None]:
    target_logger = log or logger
    with _capture_lock:
        silence_mupdf_display()
        import fitz  # pymupdf

        fitz.TOOLS.reset_mupdf_warnings()
        try:
            yield
        finally:
            try:
                diagnostics = fitz.TOOLS.mupdf_warnings(reset=1) or ""
            except Exception as exc:  # pragma: no cover - diagnostic only
                target_logger.debug("Could not read MuPDF diagnostics for %s: %s", context, exc)
            else:
                if diagnostics.strip():
                    target_logger.warning("MuPDF reported issues for %s: %s", context, _compact(diagnostics))


__all__ = ["capture_mupdf_diagnostics", "silence_mupdf_display"]
