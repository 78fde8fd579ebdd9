from __future__ import annotations

import unittest

from filederive.templates import (
    InheritExtension,
    coerce_extension,
    coerce_prerequisite_template,
    rewrite,
    scheme_of,
    split_uri,
    unresolved_placeholders,
)


class RewriteTests(unittest.TestCase):
    def test_dir_parts_slice_is_inclusive_from_the_end(self) -> None:
        self.assertEqual(
            rewrite("file:///a/b/c/file.pdf", "file:///out/{{dir_parts[-2..-1]}}/{{filename}}"),
            "file:///out/b/c/file.pdf",
        )

    def test_dir_parts_with_positive_bounds(self) -> None:
        self.assertEqual(
            rewrite("file:///a/b/c/file.pdf", "file:///out/{{ dir_parts[1..2] }}/{{ filename }}"),
            "file:///out/a/b/file.pdf",
        )

    def test_dir_parts_out_of_range_joins_to_empty(self) -> None:
        self.assertEqual(
            rewrite("file:///a/file.pdf", "file:///out/{{dir_parts[5..6]}}/{{filename}}"),
            "file:///out//file.pdf",
        )

    def test_scheme_placeholder_uses_source_scheme(self) -> None:
        self.assertEqual(
            rewrite("aws:///x/y/file.pdf", "{{scheme}}:///dest/{{filename}}"),
            "aws:///dest/file.pdf",
        )

    def test_scheme_placeholder_prefers_target_scheme(self) -> None:
        self.assertEqual(
            rewrite("file:///x/file.pdf", "{{ scheme }}://bucket/{{ filename }}", target_scheme="s3"),
            "s3://bucket/file.pdf",
        )

    def test_extension_rule_replaces_extension(self) -> None:
        template = "file:///out/{{ basename }}{{ extension }}"
        self.assertEqual(rewrite("file:///a/file.pdf", template, extension="hocr"), "file:///out/file.hocr")
        self.assertEqual(rewrite("file:///a/file.pdf", template, extension=".hocr"), "file:///out/file.hocr")

    def test_extension_inherit_keeps_source_extension(self) -> None:
        template = "file:///out/{{ basename }}{{ extension }}"
        self.assertEqual(
            rewrite("file:///a/file.pdf", template, extension=InheritExtension.SAME),
            "file:///out/file.pdf",
        )
        self.assertEqual(rewrite("file:///a/file.pdf", template), "file:///out/file.pdf")

    def test_mono_suffix_is_dropped_from_basename(self) -> None:
        self.assertEqual(
            rewrite("file:///a/page.mono.tiff", "file:///out/{{ basename }}{{ extension }}", extension="hocr"),
            "file:///out/page.hocr",
        )

    def test_filename_is_the_source_filename(self) -> None:
        self.assertEqual(
            rewrite("file:///a/page.mono.tiff", "file:///out/{{ filename }}", extension="hocr"),
            "file:///out/page.mono.tiff",
        )

    def test_template_query_is_kept_verbatim_and_source_query_dropped(self) -> None:
        template = "sqs://us-east-1.amazonaws.com/1/q/{{ filename }}?template=file:///x/{{ filename }}"
        self.assertEqual(
            rewrite("file:///a/file.pdf?version=2", template),
            "sqs://us-east-1.amazonaws.com/1/q/file.pdf?template=file:///x/{{ filename }}",
        )

    def test_unknown_placeholders_are_left_in_place(self) -> None:
        target = rewrite("file:///a/file.pdf", "file:///out/{{ nope }}/{{ filename }}")
        self.assertEqual(target, "file:///out/{{ nope }}/file.pdf")
        self.assertEqual(unresolved_placeholders(target), ["{{ nope }}"])
        self.assertEqual(unresolved_placeholders("file:///x?template={{ filename }}"), [])

    def test_rewrite_is_idempotent(self) -> None:
        template = "s3://bucket.s3.us-east-1.amazonaws.com/{{dir_parts[-1..-1]}}/{{basename}}{{extension}}"
        first = rewrite("file:///a/b/file.pdf", template, extension="tiff")
        second = rewrite("file:///a/b/file.pdf", template, extension="tiff")
        self.assertEqual(first, second)
        self.assertEqual(first, "s3://bucket.s3.us-east-1.amazonaws.com/b/file.tiff")


class TemplateHelperTests(unittest.TestCase):
    def test_split_uri(self) -> None:
        parts = split_uri("s3://bucket.s3.eu-west-1.amazonaws.com/dir/file.tar.gz?x=1")
        self.assertEqual(parts.scheme, "s3")
        self.assertEqual(parts.dir_parts, ("bucket.s3.eu-west-1.amazonaws.com", "dir"))
        self.assertEqual(parts.filename, "file.tar.gz")
        self.assertEqual(parts.basename, "file.tar")
        self.assertEqual(parts.extension, ".gz")

    def test_scheme_of(self) -> None:
        self.assertEqual(scheme_of("s3://bucket/key"), "s3")
        self.assertIsNone(scheme_of("{{ scheme }}://bucket/key"))
        self.assertIsNone(scheme_of("/no/scheme"))

    def test_coerce_extension(self) -> None:
        self.assertIs(coerce_extension("same"), InheritExtension.SAME)
        self.assertEqual(coerce_extension("tiff"), "tiff")
        self.assertIsNone(coerce_extension(None))

    def test_prerequisite_template_keeps_directory_and_query(self) -> None:
        self.assertEqual(
            coerce_prerequisite_template("file:///out/{{dir_parts[-1..-1]}}/{{ basename }}.hocr"),
            "file:///out/{{dir_parts[-1..-1]}}/{{ basename }}{{ extension }}",
        )
        self.assertEqual(
            coerce_prerequisite_template("sqs://r.amazonaws.com/1/q/{{ filename }}?template=a/b"),
            "sqs://r.amazonaws.com/1/q/{{ basename }}{{ extension }}?template=a/b",
        )


if __name__ == "__main__":
    unittest.main()
