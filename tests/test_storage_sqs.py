from __future__ import annotations

import json
import threading
import time
import unittest
from urllib.parse import quote

from filederive.config import Settings, SqsSettings
from filederive.errors import BatchTooLargeError, MissingSourceError, QueueUnresolvableError
from filederive.storage import SqsLocation, from_uri
from tests.fixtures.aws_faux import FauxSqsClient

QUEUE_ROOT = "sqs://us-west-2.amazonaws.com/123456789012/jobs"
TEMPLATE = "file:///out/{{ basename }}.hocr"


class SlowQueueLookupClient(FauxSqsClient):
    def get_queue_url(self, QueueName: str, **kwargs) -> dict:
        time.sleep(0.05)
        return super().get_queue_url(QueueName, **kwargs)


class SqsLocationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FauxSqsClient()

    def _location(self, suffix: str = "work/file.tiff", **kwargs) -> SqsLocation:
        uri = f"{QUEUE_ROOT}/{suffix}?template={quote(TEMPLATE)}"
        return SqsLocation(uri, client=self.client, **kwargs)

    def test_uri_parts(self) -> None:
        location = self._location()
        self.assertEqual(location.region, "us-west-2")
        self.assertEqual(location.account_id, "123456789012")
        self.assertEqual(location.queue_name, "jobs")
        self.assertEqual(location.template, TEMPLATE)
        self.assertEqual(location.filename, "file.tiff")

    def test_never_exists_and_cannot_be_read(self) -> None:
        location = self._location()
        self.assertFalse(location.exists())
        self.assertEqual(location.list_matching("*"), [])
        with self.assertRaises(MissingSourceError):
            with location.stage_for_read():
                pass

    def test_write_enqueues_one_message_per_staged_file(self) -> None:
        location = self._location()
        with location.stage_for_write() as staged:
            staged.write_bytes(b"image")
            (staged.parent / "extra.tiff").write_bytes(b"image")

        self.assertEqual(self.client.queue_lookups, ["jobs"])
        self.assertEqual(len(self.client.batches), 1)
        bodies = [json.loads(entry["MessageBody"]) for entry in self.client.batches[0]["Entries"]]
        self.assertEqual(
            bodies,
            [
                {"file:///out/extra.hocr": [TEMPLATE]},
                {"file:///out/file.hocr": [TEMPLATE]},
            ],
        )
        self.assertTrue(self.client.batches[0]["QueueUrl"].endswith("/jobs"))

    def test_write_batches_messages(self) -> None:
        location = self._location(batch_size=2)
        with location.stage_for_write() as staged:
            for index in range(4):
                (staged.parent / f"page-{index}.tiff").write_bytes(b"x")
        self.assertEqual([len(batch["Entries"]) for batch in self.client.batches], [2, 2, 1])

    def test_batch_size_above_queue_limit(self) -> None:
        settings = Settings(sqs=SqsSettings(max_batch_size=10))
        location = SqsLocation(f"{QUEUE_ROOT}/file.tiff", settings=settings, client=self.client, batch_size=11)
        with self.assertRaises(BatchTooLargeError) as caught:
            with location.stage_for_write() as staged:
                staged.write_bytes(b"x")
        self.assertEqual(caught.exception.batch_size, 11)
        self.assertEqual(self.client.batches, [])

    def test_message_without_template_points_at_location(self) -> None:
        location = SqsLocation(f"{QUEUE_ROOT}/file.tiff", client=self.client)
        with location.stage_for_write() as staged:
            staged.write_bytes(b"x")
        body = json.loads(self.client.batches[0]["Entries"][0]["MessageBody"])
        self.assertEqual(body, {f"{QUEUE_ROOT}/file.tiff": []})

    def test_scheme_placeholder_resolves_to_queue_scheme(self) -> None:
        template = "{{ scheme }}:///out/{{ basename }}.hocr"
        location = SqsLocation(f"{QUEUE_ROOT}/work/file.tiff?template={quote(template)}", client=self.client)
        with location.stage_for_write() as staged:
            staged.write_bytes(b"x")
        body = json.loads(self.client.batches[0]["Entries"][0]["MessageBody"])
        self.assertEqual(body, {"sqs:///out/file.hocr": [template]})

    def test_queue_url_looked_up_once_across_threads(self) -> None:
        client = SlowQueueLookupClient()
        location = SqsLocation(f"{QUEUE_ROOT}/file.tiff", client=client)
        threads = [threading.Thread(target=lambda: location.queue_url) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(client.queue_lookups, ["jobs"])

    def test_enqueue_sends_single_message(self) -> None:
        self._location().enqueue('{"hello": "world"}')
        self.assertEqual(self.client.messages[0]["MessageBody"], '{"hello": "world"}')

    def test_missing_queue_name(self) -> None:
        location = from_uri("sqs://us-west-2.amazonaws.com/123456789012/file.tiff")
        with self.assertRaises(QueueUnresolvableError):
            location.queue_name

    def test_create_uri(self) -> None:
        settings = Settings(sqs=SqsSettings(region="eu-west-1", account_id="42", queue="derive"))
        self.assertEqual(
            SqsLocation.create_uri("/tmp/a/file.tiff", settings=settings),
            "sqs://eu-west-1.amazonaws.com/42/derive/file.tiff",
        )
        with self.assertRaises(QueueUnresolvableError):
            SqsLocation.create_uri("/tmp/a/file.tiff")


if __name__ == "__main__":
    unittest.main()
