from filederive.generators.base import Generator
from filederive.generators.copy import CopyGenerator
from filederive.generators.hocr import HocrGenerator
from filederive.generators.hocr_outputs import AltoGenerator, PlainTextGenerator, WordCoordinatesGenerator
from filederive.generators.monochrome import MonochromeGenerator
from filederive.generators.pdf_split import PdfSplitGenerator
from filederive.generators.thumbnail import ThumbnailGenerator

GENERATORS: dict[str, type[Generator]] = {
    generator.name: generator
    for generator in (
        AltoGenerator,
        CopyGenerator,
        HocrGenerator,
        MonochromeGenerator,
        PdfSplitGenerator,
        PlainTextGenerator,
        ThumbnailGenerator,
        WordCoordinatesGenerator,
    )
}


def generator_class_for(name: str) -> type[Generator]:
    try:
        return GENERATORS[name]
    except KeyError:
        raise ValueError(f"Unknown generator {name!r}; expected one of: {', '.join(sorted(GENERATORS))}") from None


def describe_generators() -> list[dict[str, str | None]]:
    rows: list[dict[str, str | None]] = []
    for name in sorted(GENERATORS):
        generator = GENERATORS[name]
        extension = generator.output_extension
        rows.append(
            {
                "name": name,
                "output_extension": extension if isinstance(extension, str) else "same as input",
                "requires": generator.requires.name if generator.requires else None,
            }
        )
    return rows


__all__ = [
    "AltoGenerator",
    "CopyGenerator",
    "GENERATORS",
    "Generator",
    "HocrGenerator",
    "MonochromeGenerator",
    "PdfSplitGenerator",
    "PlainTextGenerator",
    "ThumbnailGenerator",
    "WordCoordinatesGenerator",
    "describe_generators",
    "generator_class_for",
]
