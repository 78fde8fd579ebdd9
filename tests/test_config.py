from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from filederive.config import Settings, aws_value, load_settings


class LoadSettingsTests(unittest.TestCase):
    def test_defaults_without_environment(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.s3.region, "us-east-1")
        self.assertIsNone(settings.s3.bucket)
        self.assertEqual(settings.sqs.region, "us-east-1")
        self.assertEqual(settings.sqs.max_batch_size, 10)
        self.assertEqual(settings.http_timeout_seconds, 60)
        self.assertIsNone(settings.log_path)

    def test_aws_precedence(self) -> None:
        env = {
            "AWS_DEFAULT_REGION": "ap-south-1",
            "AWS_REGION": "eu-west-1",
            "AWS_S3_REGION": "us-west-2",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
            self.assertEqual(settings.s3.region, "us-west-2")
            self.assertEqual(settings.sqs.region, "eu-west-1")
            self.assertEqual(load_settings(s3_region="ca-central-1").s3.region, "ca-central-1")

        with patch.dict(os.environ, {"AWS_DEFAULT_REGION": "ap-south-1"}, clear=True):
            self.assertEqual(aws_value("sqs", "region"), "ap-south-1")

    def test_placeholder_and_blank_values_are_ignored(self) -> None:
        env = {"AWS_S3_BUCKET": "${BUCKET}", "AWS_BUCKET": "  ", "AWS_DEFAULT_BUCKET": "fallback"}
        with patch.dict(os.environ, env, clear=True):
            self.assertEqual(load_settings().s3.bucket, "fallback")

    def test_numeric_settings(self) -> None:
        env = {"AWS_SQS_MAX_BATCH_SIZE": "5", "FILEDERIVE_HTTP_TIMEOUT_SECONDS": "15"}
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.sqs.max_batch_size, 5)
        self.assertEqual(settings.http_timeout_seconds, 15)

        with patch.dict(os.environ, {"AWS_SQS_MAX_BATCH_SIZE": "many"}, clear=True):
            self.assertEqual(load_settings().sqs.max_batch_size, 10)

    def test_settings_default_does_not_read_environment(self) -> None:
        with patch.dict(os.environ, {"AWS_S3_BUCKET": "from-env"}, clear=True):
            self.assertIsNone(Settings().s3.bucket)


if __name__ == "__main__":
    unittest.main()
