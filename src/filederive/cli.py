from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Sequence

from dotenv import load_dotenv

from filederive.config import Settings, load_settings
from filederive.docs import get_documentation_text
from filederive.errors import FileDeriveError
from filederive.generators import PdfSplitGenerator, describe_generators, generator_class_for
from filederive.logging_utils import configure_filederive_logging

logger = logging.getLogger(__name__)


def derive_files(
    generator_name: str,
    input_uris: Sequence[str],
    output_template: str,
    *,
    preprocessed_template: str | None = None,
    promote_preprocessed: bool = True,
    image_extension: str | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    generator_cls = generator_class_for(generator_name)
    kwargs: dict[str, Any] = {"settings": settings, "promote_preprocessed": promote_preprocessed}
    if image_extension and issubclass(generator_cls, PdfSplitGenerator):
        kwargs["image_extension"] = image_extension
    generator = generator_cls(list(input_uris), output_template, preprocessed_template, **kwargs)
    return {"generator": generator_name, "outputs": generator.evaluated_uris()}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filederive", description="Derive files across storage backends")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    derive = sub.add_parser("derive", help="Run a generator over input URIs")
    derive.add_argument("generator", help="Generator name, see `filederive generators`")
    derive.add_argument("input_uris", nargs="+", metavar="URI")
    derive.add_argument("--output-template", required=True)
    derive.add_argument("--preprocessed-template")
    derive.add_argument(
        "--no-promote",
        dest="promote_preprocessed",
        action="store_false",
        help="Return preprocessed hits in place instead of copying them to the output location",
    )
    derive.add_argument("--image-extension", choices=["tiff", "png", "jpg"], help="Page format for pdf_split")

    sub.add_parser("generators", help="List available generators")

    docs = sub.add_parser("docs", help="Print documentation")
    docs.add_argument("section", nargs="?", choices=["templates", "generators", "backends"])
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "docs":
        print(get_documentation_text(args.section))
        return

    if args.command == "generators":
        print(json.dumps(describe_generators(), indent=2))
        return

    load_dotenv()
    settings = load_settings()
    configure_filederive_logging(settings.log_path, level=getattr(logging, args.log_level))

    try:
        result = derive_files(
            args.generator,
            args.input_uris,
            args.output_template,
            preprocessed_template=args.preprocessed_template,
            promote_preprocessed=args.promote_preprocessed,
            image_extension=args.image_extension,
            settings=settings,
        )
    except (FileDeriveError, ValueError) as exc:
        logger.error("derive failed: %s", exc)
        parser.exit(1, f"filederive: {exc}\n")
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
