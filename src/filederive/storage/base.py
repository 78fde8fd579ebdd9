from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filederive.config import Settings
from filederive.errors import MissingSchemeError, MissingSourceError, StagingStateError
from filederive.templates import ExtensionRule, rewrite, scheme_of, split_uri

logger = logging.getLogger(__name__)

_STAGING_PREFIX = "filederive-"


def tail_segments(path: str | Path, parts: int | None) -> str:
    """Keep the last ``parts`` segments of ``path`` (all of them when ``parts`` is None)."""
    segments = [segment for segment in str(path).split("/") if segment]
    if parts is not None:
        segments = segments[-parts:] if parts > 0 else []
    return "/".join(segments)


class Location:
    """A file addressed by URI on some storage backend.

    Subclasses provide ``exists``, ``_download`` and ``_upload``; staging, deriving and
    naming are shared.
    """

    def __init__(self, uri: str, settings: Settings | None = None):
        scheme = scheme_of(uri)
        if scheme is None:
            raise MissingSchemeError(uri)

        self.uri = uri
        self.settings = settings or Settings()
        self.scheme = scheme

        parts = split_uri(uri)
        self.path = parts.path
        self.directory = "/".join(parts.dir_parts)
        self.filename = parts.filename
        self.basename = parts.basename
        self.extension = parts.extension
        _, has_query, query = uri.partition("?")
        self.query = query if has_query else None

        self._staged_path: Path | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return type(self) is type(other) and self.uri == other.uri

    def __hash__(self) -> int:
        return hash((type(self), self.uri))

    @property
    def staged_path(self) -> Path | None:
        return self._staged_path

    def exists(self) -> bool:
        raise NotImplementedError

    def _download(self, target: Path) -> None:
        raise NotImplementedError

    def _upload(self, staged: Path) -> None:
        raise NotImplementedError

    def list_matching(self, pattern: str) -> list[Location]:
        return []

    def _staging_target(self, root: Path) -> Path:
        target = root / self.directory.lstrip("/") / self.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    @contextmanager
    def stage_for_read(self) -> Iterator[Path]:
        if not self.exists():
            raise MissingSourceError(self.uri)

        with tempfile.TemporaryDirectory(prefix=_STAGING_PREFIX) as tmp:
            staged = self._staging_target(Path(tmp))
            self._download(staged)
            self._staged_path = staged
            logger.debug("Staged %s for read at %s", self.uri, staged)
            try:
                yield staged
            finally:
                self._staged_path = None

    @contextmanager
    def stage_for_write(self, auto_commit: bool = True) -> Iterator[Path]:
        with tempfile.TemporaryDirectory(prefix=_STAGING_PREFIX) as tmp:
            staged = self._staging_target(Path(tmp))
            staged.write_bytes(b"")
            self._staged_path = staged
            try:
                yield staged
                if auto_commit:
                    self.commit()
            finally:
                self._staged_path = None

    def commit(self) -> str:
        staged = self._staged_path
        if staged is None:
            raise StagingStateError(f"commit() called outside of a staged write for {self.uri}")
        if not staged.exists():
            raise StagingStateError(f"Staged file for {self.uri} is missing: {staged}")
        self._upload(staged)
        logger.info("Committed %s", self.uri)
        return self.uri

    def derive(
        self,
        template: str,
        *,
        target_scheme: str | None = None,
        extension: ExtensionRule = None,
    ) -> Location:
        from filederive.storage.registry import from_uri

        scheme = scheme_of(template) or target_scheme or self.scheme
        target = rewrite(self.uri, template, target_scheme=scheme, extension=extension)
        return from_uri(target, settings=self.settings)

    def sibling(self, filename: str) -> Location:
        from filederive.storage.registry import from_uri

        head, separator, _ = self.path.rpartition("/")
        uri = f"{self.scheme}://{head}{separator}{filename}"
        if self.query is not None:
            uri = f"{uri}?{self.query}"
        return from_uri(uri, settings=self.settings)

    @classmethod
    def create_uri(cls, path: str | Path, parts: int | None = None, settings: Settings | None = None) -> str:
        raise NotImplementedError


__all__ = ["Location", "tail_segments"]
