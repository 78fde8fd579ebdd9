from __future__ import annotations


def get_documentation_text(section: str | None) -> str:
    if section == "templates":
        return (
            "# Templates\n\n"
            "Output and preprocessed locations are URI templates resolved against each input URI.\n"
            "Placeholders: `{{ scheme }}`, `{{ dir_parts[a..b] }}` (inclusive, negative from the end), "
            "`{{ basename }}`, `{{ extension }}`, `{{ filename }}`.\n"
            "`{{ extension }}` becomes the generator's output extension; a `.mono` basename suffix is "
            "dropped so chained outputs share one name.\n"
            "Example: `file:///a/b/c/file.pdf` with `file:///out/{{dir_parts[-2..-1]}}/{{filename}}` "
            "gives `file:///out/b/c/file.pdf`.\n"
            "Unknown placeholders are kept verbatim and logged as a warning.\n"
        )

    if section == "generators":
        return (
            "# Generators\n\n"
            "Each input is resolved in order: existing output, then the preprocessed template "
            "(copied into the output location unless promotion is off), then a fresh build.\n"
            "- `copy`: same bytes, same extension.\n"
            "- `monochrome` (`.mono.tiff`): reuses inputs that are already bilevel.\n"
            "- `hocr` (`.hocr`): OCR of the monochrome rendition.\n"
            "- `plain_text`, `word_coordinates`, `alto`: renderings of hOCR inputs.\n"
            "- `thumbnail` (`.thumbnail.jpeg`): 338x493 for PDFs, 200x150 otherwise.\n"
            "- `pdf_split` (`.tiff`): one image per page named `<basename>--page-<n>.tiff`.\n"
        )

    if section == "backends":
        return (
            "# Storage Backends\n\n"
            "- `file:///abs/path` local files.\n"
            "- `http://` / `https://` read only.\n"
            "- `s3://<bucket>.s3.<region>.amazonaws.com/<key>` objects in S3.\n"
            "- `sqs://<region>.amazonaws.com/<account>/<queue>/<dir>/<file>?template=...` write only; "
            "each written file becomes a queue message `{\"<target uri>\": [\"<template>\"]}`.\n"
            "AWS settings resolve from explicit values, then `AWS_<S3|SQS>_<NAME>`, `AWS_<NAME>`, "
            "`AWS_DEFAULT_<NAME>`.\n"
        )

    return (
        "filederive documentation sections: `templates`, `generators`, `backends`.\n"
        "Start with `generators` to pick a derivative, then `templates` to place its outputs."
    )


__all__ = ["get_documentation_text"]
