from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _clean_env(value: str | None) -> str | None:
    if value is None:
        return None
    if "${" in value:
        return None
    value = value.strip()
    return value or None


def _to_int(value: str | int | None, default: int, minimum: int | None = None) -> int:
    if value is None:
        out = default
    else:
        try:
            out = int(value)
        except ValueError:
            out = default
    if minimum is not None:
        out = max(minimum, out)
    return out


def _env_int(name: str, default: int, minimum: int | None = None) -> int:
    return _to_int(_clean_env(os.getenv(name)), default, minimum)


def aws_value(prefix: str, name: str, *, explicit: str | None = None, default: str | None = None) -> str | None:
    """Resolve one AWS setting.

    Order: explicit value, ``AWS_<PREFIX>_<NAME>``, ``AWS_<NAME>``, ``AWS_DEFAULT_<NAME>``,
    then ``default``.
    """
    if explicit is not None:
        return explicit
    for env_name in (
        f"AWS_{prefix.upper()}_{name.upper()}",
        f"AWS_{name.upper()}",
        f"AWS_DEFAULT_{name.upper()}",
    ):
        value = _clean_env(os.getenv(env_name))
        if value is not None:
            return value
    return default


@dataclass(frozen=True)
class S3Settings:
    region: str = "us-east-1"
    bucket: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None


@dataclass(frozen=True)
class SqsSettings:
    region: str = "us-east-1"
    queue: str | None = None
    account_id: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    max_batch_size: int = 10


@dataclass(frozen=True)
class Settings:
    s3: S3Settings = field(default_factory=S3Settings)
    sqs: SqsSettings = field(default_factory=SqsSettings)
    http_timeout_seconds: int = 60
    log_path: Path | None = None


def load_settings(**explicit: str | None) -> Settings:
    """Build :class:`Settings` from the environment.

    Keyword arguments named ``s3_<name>`` / ``sqs_<name>`` take precedence over any
    environment variable. Intended for entry points; library code receives a ``Settings``
    value instead of reading the environment.
    """

    def _value(prefix: str, name: str, default: str | None = None) -> str | None:
        return aws_value(prefix, name, explicit=explicit.get(f"{prefix}_{name}"), default=default)

    s3 = S3Settings(
        region=_value("s3", "region", "us-east-1") or "us-east-1",
        bucket=_value("s3", "bucket"),
        access_key_id=_value("s3", "access_key_id"),
        secret_access_key=_value("s3", "secret_access_key"),
    )
    sqs = SqsSettings(
        region=_value("sqs", "region", "us-east-1") or "us-east-1",
        queue=_value("sqs", "queue"),
        account_id=_value("sqs", "account_id"),
        access_key_id=_value("sqs", "access_key_id"),
        secret_access_key=_value("sqs", "secret_access_key"),
        max_batch_size=_to_int(_value("sqs", "max_batch_size"), default=10, minimum=1),
    )

    raw_log_path = _clean_env(os.getenv("FILEDERIVE_LOG_PATH"))
    log_path = Path(raw_log_path).expanduser().resolve() if raw_log_path else None

    return Settings(
        s3=s3,
        sqs=sqs,
        http_timeout_seconds=_env_int("FILEDERIVE_HTTP_TIMEOUT_SECONDS", default=60, minimum=1),
        log_path=log_path,
    )


__all__ = ["S3Settings", "Settings", "SqsSettings", "aws_value", "load_settings"]
