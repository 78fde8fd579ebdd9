from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from filederive.pdf_runtime import capture_mupdf_diagnostics

logger = logging.getLogger(__name__)

DIMENSIONS_PATTERN = re.compile(r"^\s*(?P<width>\d+)\s*x\s*(?P<height>\d+)\s*$")


def parse_dimensions(dimensions: str) -> tuple[int, int]:
    match = DIMENSIONS_PATTERN.match(dimensions)
    if match is None:
        raise ValueError(f"Dimensions must look like WIDTHxHEIGHT, got {dimensions!r}")
    return int(match.group("width")), int(match.group("height"))


class ImageConverter(Protocol):
    name: str
    version: str

    def is_monochrome(self, path: Path) -> bool:
        ...

    def to_monochrome(self, source: Path, target: Path) -> None:
        ...

    def thumbnail(self, source: Path, target: Path, dimensions: str) -> None:
        ...


@dataclass
class PillowImageConverter:
    name: str = "pillow"
    version: str = "pillow+pymupdf"
    pdf_render_dpi: int = 150

    def _open(self, path: Path):
        from PIL import Image

        if path.suffix.lower() != ".pdf":
            image = Image.open(path)
            image.load()
            return image

        import fitz  # pymupdf

        with capture_mupdf_diagnostics(f"rasterize:{path}", log=logger):
            doc = fitz.open(str(path))
            try:
                pix = doc.load_page(0).get_pixmap(dpi=self.pdf_render_dpi, alpha=False)
            finally:
                doc.close()
        return Image.frombytes("RGB", (pix.width, pix.height), pix.samples)

    def is_monochrome(self, path: Path) -> bool:
        image = self._open(path)
        try:
            if image.mode == "1":
                return True
            if image.mode != "L":
                return False
            # Bilevel data stored as 8-bit gray.
            colors = image.getcolors(maxcolors=2)
            return colors is not None and {value for _count, value in colors} <= {0, 255}
        finally:
            image.close()

    def to_monochrome(self, source: Path, target: Path) -> None:
        image = self._open(source)
        try:
            mono = image.convert("L").convert("1")
            mono.save(target, format="TIFF", compression="group4")
        finally:
            image.close()
        logger.debug("Converted %s to monochrome at %s", source, target)

    def thumbnail(self, source: Path, target: Path, dimensions: str) -> None:
        size = parse_dimensions(dimensions)
        image = self._open(source)
        try:
            preview = image.convert("RGB")
            preview.thumbnail(size)
            preview.save(target, format="JPEG")
        finally:
            image.close()


__all__ = ["ImageConverter", "PillowImageConverter", "parse_dimensions"]
