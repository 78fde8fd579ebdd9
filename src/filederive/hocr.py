"""Read hOCR markup and re-emit it as plain text, word coordinates JSON or ALTO XML."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from html.parser import HTMLParser
from xml.etree import ElementTree as ET

ALTO_NAMESPACE = "http://www.loc.gov/standards/alto/ns-v2#"
BBOX_PATTERN = re.compile(r"bbox\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)")
LINE_CLASSES = frozenset({"ocr_line", "ocr_caption", "ocr_header", "ocr_textfloat"})


def _bbox(title: str | None) -> tuple[int, int, int, int] | None:
    match = BBOX_PATTERN.search(title or "")
    if match is None:
        return None
    x1, y1, x2, y2 = (int(value) for value in match.groups())
    return x1, y1, x2, y2


@dataclass(frozen=True)
class HocrWord:
    text: str
    hpos: int
    vpos: int
    width: int
    height: int

    @property
    def coordinates(self) -> list[int]:
        return [self.hpos, self.vpos, self.width, self.height]


class _HocrStream(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.words: list[HocrWord] = []
        self.lines: list[list[str]] = []
        self.width: int | None = None
        self.height: int | None = None
        self._spans: list[frozenset[str]] = []
        self._line: list[str] | None = None
        self._word_parts: list[str] | None = None
        self._word_box: tuple[int, int, int, int] | None = None

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        attributes = dict(attrs)
        classes = frozenset((attributes.get("class") or "").split())

        if tag == "div" and "ocr_page" in classes:
            box = _bbox(attributes.get("title"))
            if box is not None:
                self.width, self.height = box[2], box[3]
            return

        if tag != "span":
            return
        self._spans.append(classes)
        if classes & LINE_CLASSES:
            self._line = []
        if "ocrx_word" in classes:
            self._word_parts = []
            self._word_box = _bbox(attributes.get("title"))

    def handle_data(self, data: str) -> None:
        if self._word_parts is not None:
            self._word_parts.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag != "span" or not self._spans:
            return
        classes = self._spans.pop()
        if "ocrx_word" in classes:
            self._end_word()
        if classes & LINE_CLASSES:
            if self._line:
                self.lines.append(self._line)
            self._line = None

    def _end_word(self) -> None:
        text = "".join(self._word_parts or []).strip()
        box = self._word_box
        self._word_parts = None
        self._word_box = None
        if not text:
            return
        if self._line is not None:
            self._line.append(text)
        else:
            self.lines.append([text])
        if box is not None:
            x1, y1, x2, y2 = box
            self.words.append(HocrWord(text=text, hpos=x1, vpos=y1, width=x2 - x1, height=y2 - y1))


class HocrDocument:
    """Words, text and page size of one hOCR page. Build it with :meth:`parse`."""

    def __init__(self, words: list[HocrWord], lines: list[list[str]], width: int | None, height: int | None):
        self.words = words
        self.lines = lines
        self.width = width
        self.height = height

    @classmethod
    def parse(cls, markup: str | bytes) -> HocrDocument:
        if isinstance(markup, bytes):
            markup = markup.decode("utf-8", errors="replace")
        stream = _HocrStream()
        stream.feed(markup)
        stream.close()
        return cls(stream.words, stream.lines, stream.width, stream.height)

    @property
    def text(self) -> str:
        return "\n".join(" ".join(line) for line in self.lines)

    def to_json(self) -> str:
        coords: dict[str, list[list[int]]] = {}
        for word in self.words:
            coords.setdefault(word.text, []).append(word.coordinates)
        return json.dumps({"width": self.width, "height": self.height, "coords": coords})

    def to_alto(self) -> str:
        width = str(self.width or 0)
        height = str(self.height or 0)
        full_box = {"HEIGHT": height, "WIDTH": width, "HPOS": "0", "VPOS": "0"}

        root = ET.Element("alto", {"xmlns": ALTO_NAMESPACE})
        description = ET.SubElement(root, "Description")
        ET.SubElement(description, "MeasurementUnit").text = "pixel"
        layout = ET.SubElement(root, "Layout")
        page = ET.SubElement(
            layout,
            "Page",
            {"ID": "ID1", "PHYSICAL_IMG_NR": "1", "HEIGHT": height, "WIDTH": width},
        )
        print_space = ET.SubElement(page, "PrintSpace", full_box)
        block = ET.SubElement(print_space, "TextBlock", {"ID": "ID1a", **full_box})
        line = ET.SubElement(block, "TextLine", full_box)
        for word in self.words:
            string = ET.SubElement(
                line,
                "String",
                {
                    "CONTENT": word.text,
                    "WIDTH": str(word.width),
                    "HEIGHT": str(word.height),
                    "HPOS": str(word.hpos),
                    "VPOS": str(word.vpos),
                },
            )
            string.text = ""

        ET.indent(root)
        return ET.tostring(root, encoding="utf-8", xml_declaration=True).decode("utf-8")


__all__ = ["ALTO_NAMESPACE", "HocrDocument", "HocrWord"]
