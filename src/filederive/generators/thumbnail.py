from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

from filederive.generators.base import Generator
from filederive.providers.imaging import ImageConverter, PillowImageConverter
from filederive.storage import Location


class ThumbnailGenerator(Generator):
    name = "thumbnail"
    output_extension = "thumbnail.jpeg"
    dimensions_by_type: ClassVar[dict[str, str]] = {"pdf": "338x493"}
    dimensions_fallback: ClassVar[str] = "200x150"

    def __init__(self, *args: Any, image_converter: ImageConverter | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.image_converter = image_converter or PillowImageConverter()

    @classmethod
    def dimensions_for(cls, filename: str) -> str:
        file_type = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        return cls.dimensions_by_type.get(file_type, cls.dimensions_fallback)

    def build(self, input_location: Location, destination: Location, staged_input: Path) -> Location:
        dimensions = self.dimensions_for(input_location.filename)
        with destination.stage_for_write() as staged_output:
            self.image_converter.thumbnail(staged_input, staged_output, dimensions)
        return destination


__all__ = ["ThumbnailGenerator"]
