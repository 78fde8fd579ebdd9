from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from filederive.generators.base import Generator
from filederive.providers.imaging import ImageConverter, PillowImageConverter
from filederive.storage import Location

logger = logging.getLogger(__name__)


class MonochromeGenerator(Generator):
    name = "monochrome"
    output_extension = "mono.tiff"

    def __init__(self, *args: Any, image_converter: ImageConverter | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.image_converter = image_converter or PillowImageConverter()

    def build(self, input_location: Location, destination: Location, staged_input: Path) -> Location:
        if self.image_converter.is_monochrome(staged_input):
            logger.info("%s is already monochrome; reusing it", input_location.uri)
            return input_location

        with destination.stage_for_write() as staged_output:
            self.image_converter.to_monochrome(staged_input, staged_output)
        return destination


__all__ = ["MonochromeGenerator"]
