from __future__ import annotations

import glob
import logging
import re
import threading
from pathlib import Path
from typing import Any, Iterator

from filederive.config import Settings
from filederive.errors import BucketUnresolvableError
from filederive.storage.base import Location, tail_segments

logger = logging.getLogger(__name__)

BUCKET_PATTERN = re.compile(r"^s3://(?P<bucket>.+?)\.s3")
_GLOB_CHARS = "*?["


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a glob into a regex whose wildcards never cross ``/``."""
    out: list[str] = []
    idx = 0
    while idx < len(pattern):
        char = pattern[idx]
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            end = pattern.find("]", idx + 1)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = pattern[idx + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                idx = end
        else:
            out.append(re.escape(char))
        idx += 1
    return re.compile("".join(out) + r"\Z")


def _literal_prefix(pattern: str) -> str:
    for idx, char in enumerate(pattern):
        if char in _GLOB_CHARS:
            return pattern[:idx]
    return pattern


class S3Location(Location):
    """Object in an S3 bucket, addressed as ``s3://<bucket>.s3.<region>.amazonaws.com/<key>``."""

    def __init__(self, uri: str, settings: Settings | None = None, *, client: Any | None = None):
        super().__init__(uri, settings=settings)
        self.host, _, self.key = self.path.partition("/")
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def bucket_name(self) -> str:
        match = BUCKET_PATTERN.match(self.uri)
        if match is None:
            raise BucketUnresolvableError(self.uri)
        return match.group("bucket")

    @property
    def client(self) -> Any:
        with self._client_lock:
            if self._client is None:
                import boto3

                s3 = self.settings.s3
                kwargs: dict[str, Any] = {"region_name": s3.region}
                if s3.access_key_id and s3.secret_access_key:
                    kwargs["aws_access_key_id"] = s3.access_key_id
                    kwargs["aws_secret_access_key"] = s3.secret_access_key
                self._client = boto3.client("s3", **kwargs)
            return self._client

    def _iter_keys(self, prefix: str) -> Iterator[str]:
        request: dict[str, Any] = {"Bucket": self.bucket_name, "Prefix": prefix}
        while True:
            response = self.client.list_objects_v2(**request)
            for item in response.get("Contents", []):
                yield item["Key"]
            token = response.get("NextContinuationToken")
            if not response.get("IsTruncated") or not token:
                return
            request["ContinuationToken"] = token

    def exists(self) -> bool:
        return any(key == self.key for key in self._iter_keys(self.key))

    def _download(self, target: Path) -> None:
        self.client.download_file(self.bucket_name, self.key, str(target))

    def _upload(self, staged: Path) -> None:
        self.client.upload_file(str(staged), self.bucket_name, self.key)

    def list_matching(self, pattern: str) -> list[Location]:
        key_dir = glob.escape(self.key.rpartition("/")[0])
        key_glob = f"{key_dir}/{pattern}" if key_dir else pattern
        regex = glob_to_regex(key_glob)
        keys = sorted(key for key in self._iter_keys(_literal_prefix(key_glob)) if regex.match(key))
        logger.debug("Matched %d keys for %s under %s", len(keys), key_glob, self.host)
        return [
            S3Location(f"s3://{self.host}/{key}", settings=self.settings, client=self._client)
            for key in keys
        ]

    @classmethod
    def create_uri(cls, path: str | Path, parts: int | None = 2, settings: Settings | None = None) -> str:
        s3 = (settings or Settings()).s3
        if not s3.bucket:
            raise BucketUnresolvableError(str(path))
        return f"s3://{s3.bucket}.s3.{s3.region}.amazonaws.com/{tail_segments(path, parts)}"


__all__ = ["S3Location", "glob_to_regex"]
