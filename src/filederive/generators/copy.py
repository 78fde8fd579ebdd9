from __future__ import annotations

import shutil
from pathlib import Path

from filederive.generators.base import Generator
from filederive.storage import Location
from filederive.templates import InheritExtension


class CopyGenerator(Generator):
    """Transfer each input unchanged; the output keeps the input's extension."""

    name = "copy"
    output_extension = InheritExtension.SAME

    def build(self, input_location: Location, destination: Location, staged_input: Path) -> Location:
        with destination.stage_for_write() as staged_output:
            shutil.copyfile(staged_input, staged_output)
        return destination


__all__ = ["CopyGenerator"]
