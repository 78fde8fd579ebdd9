from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from filederive.pdf_runtime import capture_mupdf_diagnostics

logger = logging.getLogger(__name__)

DEFAULT_DPI = 400
JPEG_QUALITY = 50
# Above this many pixels per embedded image a one-image-per-page PDF is treated as a scan.
SCANNED_PIXEL_THRESHOLD = 1024 * 1024 * 10
SUPPORTED_IMAGE_EXTENSIONS = ("tiff", "png", "jpg")


@dataclass(frozen=True)
class PagesSummary:
    path: str
    page_count: int
    image_count: int
    width: int
    height: int
    pixels_per_inch: int
    color_description: str
    channels: int
    bits_per_channel: int

    @property
    def valid(self) -> bool:
        return self.page_count > 0 and self.height > 0 and self.channels > 0 and self.bits_per_channel > 0

    @property
    def looks_scanned(self) -> bool:
        return self.image_count == self.page_count and self.width * self.height > SCANNED_PIXEL_THRESHOLD

    @classmethod
    def extract_from(cls, path: str | Path) -> PagesSummary:
        """Summarize the raster images embedded in a PDF (largest values across pages)."""
        import fitz  # pymupdf

        image_count = 0
        color_description = "gray"
        width = height = channels = bits_per_channel = pixels_per_inch = 0

        with capture_mupdf_diagnostics(f"summary:{path}", log=logger):
            doc = fitz.open(str(path))
            try:
                page_count = doc.page_count
                for page in doc:
                    for image in page.get_images(full=True):
                        xref, _smask, img_width, img_height, bpc, colorspace = image[:6]
                        image_count += 1
                        if colorspace != "DeviceGray":
                            color_description = "rgb"
                        width = max(width, int(img_width))
                        height = max(height, int(img_height))
                        bits_per_channel = max(bits_per_channel, int(bpc))
                        channels = max(channels, _channels_for(colorspace))
                        for rect in page.get_image_rects(xref):
                            if rect.width > 0:
                                pixels_per_inch = max(pixels_per_inch, int(72 * img_width / rect.width))
            finally:
                doc.close()

        return cls(
            path=str(path),
            page_count=page_count,
            image_count=image_count,
            width=width,
            height=height,
            pixels_per_inch=pixels_per_inch,
            color_description=color_description,
            channels=channels,
            bits_per_channel=bits_per_channel,
        )


def _channels_for(colorspace: str) -> int:
    if colorspace in {"DeviceGray", "CalGray"}:
        return 1
    if colorspace == "DeviceCMYK":
        return 4
    return 3


class PdfSplitter(Protocol):
    name: str
    version: str

    def split(self, pdf_path: Path, output_dir: Path, basename: str, image_extension: str) -> list[Path]:
        ...


def page_filename(basename: str, page_number: int, image_extension: str) -> str:
    return f"{basename}--page-{page_number}.{image_extension}"


@dataclass
class PyMuPdfSplitter:
    name: str = "pymupdf"
    version: str = "pymupdf+pillow"
    default_dpi: int = DEFAULT_DPI
    jpeg_quality: int = JPEG_QUALITY

    def _dpi_for(self, summary: PagesSummary) -> int:
        if summary.looks_scanned and summary.pixels_per_inch > 0:
            return summary.pixels_per_inch
        return self.default_dpi

    @staticmethod
    def _image_mode_for(summary: PagesSummary) -> str:
        if summary.color_description == "gray" and summary.image_count > 0:
            return "1" if summary.bits_per_channel == 1 else "L"
        return "RGB"

    def split(self, pdf_path: Path, output_dir: Path, basename: str, image_extension: str) -> list[Path]:
        import fitz  # pymupdf

        if image_extension not in SUPPORTED_IMAGE_EXTENSIONS:
            raise ValueError(f"Unsupported page image extension: {image_extension}")

        output_dir.mkdir(parents=True, exist_ok=True)
        summary = PagesSummary.extract_from(pdf_path)
        dpi = self._dpi_for(summary)
        mode = self._image_mode_for(summary)
        colorspace = fitz.csRGB if mode == "RGB" else fitz.csGRAY
        outputs: list[Path] = []

        with capture_mupdf_diagnostics(f"split:{pdf_path}", log=logger):
            doc = fitz.open(str(pdf_path))
            try:
                for index, page in enumerate(doc, start=1):
                    target = output_dir / page_filename(basename, index, image_extension)
                    pix = page.get_pixmap(dpi=dpi, colorspace=colorspace, alpha=False)
                    self._write_page(pix, target, image_extension, mode)
                    outputs.append(target)
            finally:
                doc.close()

        logger.info("Split %s into %d %s page(s) at %d dpi", pdf_path, len(outputs), image_extension, dpi)
        return outputs

    def _write_page(self, pix, target: Path, image_extension: str, mode: str) -> None:
        from PIL import Image

        image = Image.frombytes("RGB" if mode == "RGB" else "L", (pix.width, pix.height), pix.samples)
        if image_extension == "png":
            image.save(target, format="PNG")
        elif image_extension == "jpg":
            image.save(target, format="JPEG", quality=self.jpeg_quality)
        elif mode == "1":
            image.convert("1").save(target, format="TIFF", compression="group4")
        else:
            image.save(target, format="TIFF", compression="tiff_lzw")


__all__ = [
    "DEFAULT_DPI",
    "JPEG_QUALITY",
    "PagesSummary",
    "PdfSplitter",
    "PyMuPdfSplitter",
    "page_filename",
]
