from __future__ import annotations

import glob
import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any

from filederive.generators.base import Generator
from filederive.generators.copy import CopyGenerator
from filederive.providers.pdf import SUPPORTED_IMAGE_EXTENSIONS, PdfSplitter, PyMuPdfSplitter
from filederive.storage import Location

logger = logging.getLogger(__name__)

PAGE_NUMBER_PATTERN = re.compile(r"--page-(\d+)\.[^.]+$")


def _page_number(location: Location) -> int:
    match = PAGE_NUMBER_PATTERN.search(location.filename)
    return int(match.group(1)) if match else 0


class PdfSplitGenerator(Generator):
    """Split each input PDF into one image per page.

    Pages are written next to the resolved destination as ``<basename>--page-<n>.<ext>``.
    Any page already present at the destination (or the preprocessed location) is taken
    as the complete set for that PDF.
    """

    name = "pdf_split"
    output_extension = "tiff"

    def __init__(
        self,
        *args: Any,
        pdf_splitter: PdfSplitter | None = None,
        image_extension: str | None = None,
        **kwargs: Any,
    ):
        if image_extension is not None:
            image_extension = image_extension.lstrip(".").lower()
            if image_extension not in SUPPORTED_IMAGE_EXTENSIONS:
                raise ValueError(f"Unsupported page image extension: {image_extension}")
            self.output_extension = image_extension
        super().__init__(*args, **kwargs)
        self.pdf_splitter = pdf_splitter or PyMuPdfSplitter()

    @property
    def image_extension(self) -> str:
        return str(self.output_extension)

    def page_pattern(self, destination: Location) -> str:
        return f"{glob.escape(destination.basename)}--page-*.{self.image_extension}"

    def _existing_pages(self, requisite: Location, destination: Location) -> list[Location]:
        pattern = self.page_pattern(destination)
        pages = destination.list_matching(pattern)
        if pages:
            logger.info("%s: found %d page(s) next to %s", type(self).__name__, len(pages), destination.uri)
            return pages

        template = self.preprocessed_template_for(requisite)
        if not template:
            return []
        preprocessed = self._derive(requisite, template)
        pages = preprocessed.list_matching(pattern)
        if not pages:
            return []

        logger.info("%s: found %d preprocessed page(s) next to %s", type(self).__name__, len(pages), preprocessed.uri)
        if not self.promote_preprocessed:
            return pages
        return [
            CopyGenerator([page.uri], destination.sibling(page.filename).uri, settings=self.settings).evaluate()[0]
            for page in pages
        ]

    def _evaluate_one(self, requisite: Location) -> list[Location]:
        destination = self._derive(requisite, self.output_template)
        pages = self._existing_pages(requisite, destination)
        if not pages:
            pages = self._split(requisite, destination)
        return sorted(pages, key=_page_number)

    def _split(self, requisite: Location, destination: Location) -> list[Location]:
        logger.info("%s: splitting %s into %s pages", type(self).__name__, requisite.uri, self.image_extension)
        written: list[Location] = []
        with requisite.stage_for_read() as staged_pdf, tempfile.TemporaryDirectory(prefix="filederive-pages-") as tmp:
            page_paths = self.pdf_splitter.split(staged_pdf, Path(tmp), destination.basename, self.image_extension)
            for page_path in page_paths:
                page = destination.sibling(page_path.name)
                with page.stage_for_write() as staged_page:
                    shutil.copyfile(page_path, staged_page)
                written.append(page)
        return written


__all__ = ["PdfSplitGenerator"]
