from __future__ import annotations

from pathlib import Path
from typing import Any

from filederive.generators.base import Generator
from filederive.generators.monochrome import MonochromeGenerator
from filederive.providers.ocr import OcrEngine, TesseractOcrEngine
from filederive.storage import Location


class HocrGenerator(Generator):
    """OCR the monochrome rendition of each input into hOCR markup."""

    name = "hocr"
    output_extension = "hocr"
    requires = MonochromeGenerator

    def __init__(self, *args: Any, ocr_engine: OcrEngine | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.ocr_engine = ocr_engine or TesseractOcrEngine()

    def build(self, input_location: Location, destination: Location, staged_input: Path) -> Location:
        with destination.stage_for_write() as staged_output:
            self.ocr_engine.hocr(staged_input, staged_output)
        return destination


__all__ = ["HocrGenerator"]
