from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from filederive.config import Settings
from filederive.errors import ReadOnlyLocationError
from filederive.storage.base import Location, tail_segments

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class HttpLocation(Location):
    """Read-only location for files served over HTTP(S)."""

    def __init__(self, uri: str, settings: Settings | None = None, *, session: Any | None = None):
        super().__init__(uri, settings=settings)
        self._session = session
        self._session_lock = threading.Lock()

    @property
    def session(self) -> Any:
        with self._session_lock:
            if self._session is None:
                import requests

                self._session = requests.Session()
            return self._session

    @property
    def timeout(self) -> int:
        return self.settings.http_timeout_seconds

    def exists(self) -> bool:
        import requests

        try:
            response = self.session.head(self.uri, allow_redirects=True, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("HEAD request failed for %s: %s", self.uri, exc)
            return False
        return response.ok

    def _download(self, target: Path) -> None:
        with self.session.get(self.uri, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            with target.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)

    def _upload(self, staged: Path) -> None:
        raise ReadOnlyLocationError(self.uri)

    def commit(self) -> str:
        raise ReadOnlyLocationError(self.uri)

    @classmethod
    def create_uri(
        cls,
        path: str | Path,
        parts: int | None = None,
        settings: Settings | None = None,
        *,
        ssl: bool = True,
    ) -> str:
        scheme = "https" if ssl else "http"
        return f"{scheme}://{tail_segments(path, parts)}"


__all__ = ["HttpLocation"]
