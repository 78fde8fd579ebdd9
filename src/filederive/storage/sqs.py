from __future__ import annotations

import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

from filederive.config import Settings
from filederive.errors import BatchTooLargeError, QueueUnresolvableError
from filederive.storage.base import Location, tail_segments
from filederive.templates import rewrite

logger = logging.getLogger(__name__)


class SqsLocation(Location):
    """Write-only location: committing enqueues a message per staged file.

    URI layout: ``sqs://<region>.amazonaws.com/<account-id>/<queue>/<dir...>/<file>``,
    optionally with ``?template=<template>`` describing where consumers should derive to.
    Nothing can be read back, so ``exists`` is always false.
    """

    batch_size = 10

    def __init__(
        self,
        uri: str,
        settings: Settings | None = None,
        *,
        client: Any | None = None,
        batch_size: int | None = None,
    ):
        super().__init__(uri, settings=settings)
        self._segments = self.path.split("/")
        if batch_size is not None:
            self.batch_size = batch_size
        self._client = client
        self._client_lock = threading.Lock()
        self._queue_url: str | None = None
        self._queue_url_lock = threading.Lock()

    @property
    def region(self) -> str:
        host = self._segments[0]
        if host.endswith(".amazonaws.com"):
            return host.split(".", 1)[0]
        return self.settings.sqs.region

    @property
    def account_id(self) -> str | None:
        return self._segments[1] if len(self._segments) > 2 else None

    @property
    def queue_name(self) -> str:
        if len(self._segments) < 4 or not self._segments[2]:
            raise QueueUnresolvableError(self.uri)
        return self._segments[2]

    @property
    def template(self) -> str | None:
        if not self.query:
            return None
        values = parse_qs(self.query).get("template")
        return values[0] if values else None

    @property
    def client(self) -> Any:
        with self._client_lock:
            if self._client is None:
                import boto3

                sqs = self.settings.sqs
                kwargs: dict[str, Any] = {"region_name": self.region}
                if sqs.access_key_id and sqs.secret_access_key:
                    kwargs["aws_access_key_id"] = sqs.access_key_id
                    kwargs["aws_secret_access_key"] = sqs.secret_access_key
                self._client = boto3.client("sqs", **kwargs)
            return self._client

    @property
    def queue_url(self) -> str:
        with self._queue_url_lock:
            if self._queue_url is None:
                response = self.client.get_queue_url(QueueName=self.queue_name)
                self._queue_url = response["QueueUrl"]
            return self._queue_url

    def exists(self) -> bool:
        return False

    def message_for(self, staged_file: Path) -> str:
        template = self.template
        if template:
            target = rewrite(f"file://{staged_file}", template, target_scheme=self.scheme)
            return json.dumps({target: [template]})
        return json.dumps({self.uri: []})

    def _upload(self, staged: Path) -> None:
        max_batch_size = self.settings.sqs.max_batch_size
        if self.batch_size > max_batch_size:
            raise BatchTooLargeError(self.batch_size, max_batch_size)

        files = sorted(path for path in staged.parent.rglob("*") if path.is_file())
        entries = [{"Id": uuid.uuid4().hex, "MessageBody": self.message_for(path)} for path in files]
        for start in range(0, len(entries), self.batch_size):
            batch = entries[start : start + self.batch_size]
            self.client.send_message_batch(QueueUrl=self.queue_url, Entries=batch)
            logger.info("Enqueued %d message(s) on %s", len(batch), self.queue_name)

    def enqueue(self, body: str) -> Any:
        return self.client.send_message(QueueUrl=self.queue_url, MessageBody=body)

    @classmethod
    def create_uri(cls, path: str | Path, parts: int | None = 1, settings: Settings | None = None) -> str:
        sqs = (settings or Settings()).sqs
        if not sqs.queue:
            raise QueueUnresolvableError(str(path))
        prefix = f"sqs://{sqs.region}.amazonaws.com/{sqs.account_id or ''}/{sqs.queue}"
        return f"{prefix}/{tail_segments(path, parts)}"


__all__ = ["SqsLocation"]
