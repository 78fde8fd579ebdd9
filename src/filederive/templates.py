"""URI rewriting for derived file locations.

A template is a URI containing placeholders that are resolved against a source URI:

    {{ scheme }}              the target scheme, or the source scheme when none is given
    {{ basename }}            source filename without its last extension
    {{ extension }}           the output extension (with leading dot)
    {{ filename }}            source filename
    {{ dir_parts[a..b] }}     inclusive slice of the source directory segments

    >>> rewrite("file:///a/b/c/file.pdf", "file:///out/{{dir_parts[-2..-1]}}/{{filename}}")
    'file:///out/b/c/file.pdf'
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum

DEFAULT_SEPARATOR = "/"
# Marks the intermediate monochrome derivative; derivatives chained off "x.mono.tiff"
# must share the identity of derivatives chained off "x.tiff".
MONOCHROME_SUFFIX = ".mono"

DIR_PARTS_PATTERN = re.compile(r"\{\{\s*dir_parts\[(?P<left>-?\d+)\.\.(?P<right>-?\d+)\]\s*\}\}")
FILENAME_PATTERN = re.compile(r"\{\{\s*filename\s*\}\}")
BASENAME_PATTERN = re.compile(r"\{\{\s*basename\s*\}\}")
EXTENSION_PATTERN = re.compile(r"\{\{\s*extension\s*\}\}")
SCHEME_PATTERN = re.compile(r"\{\{\s*scheme\s*\}\}")
PLACEHOLDER_PATTERN = re.compile(r"\{\{.*?\}\}")
SCHEME_PREFIX_PATTERN = re.compile(r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://")


class InheritExtension(Enum):
    SAME = "same"


ExtensionRule = str | InheritExtension | None


@dataclass(frozen=True)
class UriParts:
    scheme: str
    path: str
    dir_parts: tuple[str, ...]
    filename: str
    basename: str
    extension: str


def coerce_extension(value: ExtensionRule) -> ExtensionRule:
    if isinstance(value, str) and value.strip().lower() == InheritExtension.SAME.value:
        return InheritExtension.SAME
    return value


def scheme_of(value: str) -> str | None:
    match = SCHEME_PREFIX_PATTERN.match(value)
    return match.group("scheme") if match else None


def split_uri(uri: str, separator: str = DEFAULT_SEPARATOR) -> UriParts:
    without_query = uri.split("?", 1)[0]
    scheme, found, path = without_query.partition("://")
    if not found:
        scheme, path = "", without_query

    segments = path.split(separator)
    filename = segments[-1]
    basename, extension = os.path.splitext(filename)
    return UriParts(
        scheme=scheme,
        path=path,
        dir_parts=tuple(segments[:-1]),
        filename=filename,
        basename=basename,
        extension=extension,
    )


def strip_intermediate_suffix(basename: str) -> str:
    if basename.endswith(MONOCHROME_SUFFIX):
        return basename[: -len(MONOCHROME_SUFFIX)]
    return basename


def _resolve_extension(source_extension: str, rule: ExtensionRule) -> str:
    rule = coerce_extension(rule)
    if rule is None or rule is InheritExtension.SAME:
        return source_extension
    if not rule:
        return ""
    return rule if rule.startswith(".") else f".{rule}"


def _inclusive_slice(items: tuple[str, ...], left: int, right: int) -> list[str]:
    size = len(items)
    if left < 0:
        left += size
    if right < 0:
        right += size
    if left < 0 or left > size or right < left:
        return []
    return list(items[left : right + 1])


def rewrite(
    source_uri: str,
    template: str,
    *,
    target_scheme: str | None = None,
    extension: ExtensionRule = None,
    separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Rewrite ``source_uri`` into a new URI described by ``template``.

    Placeholders that do not match the grammar are left untouched. A ``?query`` on the
    template is re-appended verbatim; a query on the source URI is ignored.
    """
    parts = split_uri(source_uri, separator)
    basename = strip_intermediate_suffix(parts.basename)
    resolved_extension = _resolve_extension(parts.extension, extension)
    scheme = target_scheme or parts.scheme
    template_without_query, has_query, template_query = template.partition("?")

    def _dir_parts(match: re.Match[str]) -> str:
        selected = _inclusive_slice(parts.dir_parts, int(match.group("left")), int(match.group("right")))
        return separator.join(selected)

    target = DIR_PARTS_PATTERN.sub(_dir_parts, template_without_query)
    target = SCHEME_PATTERN.sub(lambda _m: scheme, target)
    target = EXTENSION_PATTERN.sub(lambda _m: resolved_extension, target)
    target = BASENAME_PATTERN.sub(lambda _m: basename, target)
    target = FILENAME_PATTERN.sub(lambda _m: parts.filename, target)
    if has_query:
        target = f"{target}?{template_query}"
    return target


def coerce_prerequisite_template(template: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Point ``template`` at ``{{ basename }}{{ extension }}`` in the same directory.

    Upstream generators use this so their outputs land next to the outputs of the
    generator that depends on them.
    """
    without_query, has_query, query = template.partition("?")
    head = without_query.rsplit(separator, 1)[0]
    coerced = f"{head}{separator}{{{{ basename }}}}{{{{ extension }}}}"
    return f"{coerced}?{query}" if has_query else coerced


def unresolved_placeholders(uri: str) -> list[str]:
    return PLACEHOLDER_PATTERN.findall(uri.split("?", 1)[0])


__all__ = [
    "DEFAULT_SEPARATOR",
    "ExtensionRule",
    "InheritExtension",
    "MONOCHROME_SUFFIX",
    "UriParts",
    "coerce_extension",
    "coerce_prerequisite_template",
    "rewrite",
    "scheme_of",
    "split_uri",
    "strip_intermediate_suffix",
    "unresolved_placeholders",
]
