from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar, Iterable

from filederive.config import Settings
from filederive.errors import MissingOutputExtensionError
from filederive.storage import Location, from_uri
from filederive.templates import ExtensionRule, coerce_prerequisite_template, unresolved_placeholders

logger = logging.getLogger(__name__)


class Generator:
    """Derive one output per requisite location, reusing outputs that already exist.

    Lookup order for each requisite: the output template, then the preprocessed template
    (copied into the output location unless ``promote_preprocessed`` is false), then
    :meth:`build`.
    """

    name: ClassVar[str] = "base"
    output_extension: ClassVar[ExtensionRule] = None
    requires: ClassVar[type[Generator] | None] = None

    def __init__(
        self,
        input_uris: Iterable[str],
        output_template: str,
        preprocessed_template: str | None = None,
        *,
        settings: Settings | None = None,
        upstream: Generator | None = None,
        promote_preprocessed: bool = True,
    ):
        if self.output_extension is None:
            raise MissingOutputExtensionError(type(self))

        self.input_uris = list(input_uris)
        self.output_template = output_template
        self.preprocessed_template = preprocessed_template
        self.settings = settings or Settings()
        self.promote_preprocessed = promote_preprocessed

        if upstream is None and self.requires is not None:
            upstream = self.requires(
                self.input_uris,
                coerce_prerequisite_template(output_template),
                coerce_prerequisite_template(preprocessed_template) if preprocessed_template else None,
                settings=self.settings,
                promote_preprocessed=promote_preprocessed,
            )
        self.upstream = upstream

        self._input_locations: list[Location] | None = None
        self._generated: list[Location] | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(inputs={len(self.input_uris)}, output_template={self.output_template!r})"

    @property
    def input_locations(self) -> list[Location]:
        if self._input_locations is None:
            self._input_locations = [from_uri(uri, settings=self.settings) for uri in self.input_uris]
        return self._input_locations

    def requisite_locations(self) -> list[Location]:
        if self.upstream is not None:
            return self.upstream.evaluate()
        return self.input_locations

    def preprocessed_template_for(self, input_location: Location) -> str | None:
        return self.preprocessed_template

    def _derive(self, input_location: Location, template: str) -> Location:
        derived = input_location.derive(template, extension=self.output_extension)
        leftovers = unresolved_placeholders(derived.uri)
        if leftovers:
            logger.warning("%s left unresolved placeholders %s in %s", type(self).__name__, leftovers, derived.uri)
        return derived

    def _locate(self, input_location: Location) -> tuple[Location, bool]:
        destination = self._derive(input_location, self.output_template)
        if destination.exists():
            logger.info("%s: found %s for %s", type(self).__name__, destination.uri, input_location.uri)
            return destination, True

        template = self.preprocessed_template_for(input_location)
        if not template:
            logger.info("%s: nothing at %s; will build", type(self).__name__, destination.uri)
            return destination, False

        preprocessed = self._derive(input_location, template)
        if not preprocessed.exists():
            logger.info(
                "%s: nothing at %s or %s; will build",
                type(self).__name__,
                preprocessed.uri,
                destination.uri,
            )
            return destination, False

        logger.info("%s: found preprocessed %s for %s", type(self).__name__, preprocessed.uri, input_location.uri)
        if not self.promote_preprocessed:
            return preprocessed, True
        return self._promote(preprocessed, destination), True

    def _promote(self, preprocessed: Location, destination: Location) -> Location:
        from filederive.generators.copy import CopyGenerator

        copier = CopyGenerator([preprocessed.uri], destination.uri, settings=self.settings)
        return copier.evaluate()[0]

    def resolve_destination(self, input_location: Location) -> Location:
        return self._locate(input_location)[0]

    def _evaluate_one(self, requisite: Location) -> list[Location]:
        destination, found = self._locate(requisite)
        if found:
            return [destination]
        logger.info("%s: building %s from %s", type(self).__name__, destination.uri, requisite.uri)
        with requisite.stage_for_read() as staged:
            return [self.build(requisite, destination, staged)]

    def evaluate(self) -> list[Location]:
        if self._generated is None:
            logger.info(
                "%s: evaluating %d input(s) to %s (preprocessed: %s)",
                type(self).__name__,
                len(self.input_uris),
                self.output_template,
                self.preprocessed_template,
            )
            generated: list[Location] = []
            for requisite in self.requisite_locations():
                generated.extend(self._evaluate_one(requisite))
            self._generated = generated
        return list(self._generated)

    def evaluated_uris(self) -> list[str]:
        return [location.uri for location in self.evaluate()]

    def build(self, input_location: Location, destination: Location, staged_input: Path) -> Location:
        raise NotImplementedError(f"{type(self).__name__}.build")


__all__ = ["Generator"]
