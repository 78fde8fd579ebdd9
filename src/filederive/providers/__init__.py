from filederive.providers.imaging import ImageConverter, PillowImageConverter
from filederive.providers.ocr import OcrEngine, TesseractOcrEngine
from filederive.providers.pdf import PagesSummary, PdfSplitter, PyMuPdfSplitter

__all__ = [
    "ImageConverter",
    "OcrEngine",
    "PagesSummary",
    "PdfSplitter",
    "PillowImageConverter",
    "PyMuPdfSplitter",
    "TesseractOcrEngine",
]
