from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class OcrEngine(Protocol):
    name: str
    version: str

    def hocr(self, image_path: Path, output_path: Path) -> None:
        ...


@dataclass
class TesseractOcrEngine:
    name: str = "tesseract"
    version: str = "pytesseract"
    languages: str = "eng"
    config: str = ""
    tesseract_cmd: str | None = None

    def hocr(self, image_path: Path, output_path: Path) -> None:
        import pytesseract
        from PIL import Image

        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd

        with Image.open(image_path) as image:
            markup = pytesseract.image_to_pdf_or_hocr(
                image,
                lang=self.languages,
                config=self.config,
                extension="hocr",
            )
        output_path.write_bytes(markup)
        logger.debug("Wrote hOCR for %s (%d bytes)", image_path, len(markup))


__all__ = ["OcrEngine", "TesseractOcrEngine"]
