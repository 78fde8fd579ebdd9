from __future__ import annotations

from pathlib import Path

from filederive.generators.base import Generator
from filederive.hocr import HocrDocument
from filederive.storage import Location


class _HocrConversion(Generator):
    """Read an hOCR input and write one rendering of it."""

    def render(self, document: HocrDocument) -> str:
        raise NotImplementedError

    def build(self, input_location: Location, destination: Location, staged_input: Path) -> Location:
        document = HocrDocument.parse(staged_input.read_bytes())
        with destination.stage_for_write() as staged_output:
            staged_output.write_text(self.render(document) + "\n", encoding="utf-8")
        return destination


class PlainTextGenerator(_HocrConversion):
    name = "plain_text"
    output_extension = "plain_text.txt"

    def render(self, document: HocrDocument) -> str:
        return document.text


class WordCoordinatesGenerator(_HocrConversion):
    name = "word_coordinates"
    output_extension = "coordinates.json"

    def render(self, document: HocrDocument) -> str:
        return document.to_json()


class AltoGenerator(_HocrConversion):
    name = "alto"
    output_extension = "alto.xml"

    def render(self, document: HocrDocument) -> str:
        return document.to_alto()


__all__ = ["AltoGenerator", "PlainTextGenerator", "WordCoordinatesGenerator"]
