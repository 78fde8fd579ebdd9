from __future__ import annotations


class FileDeriveError(Exception):
    pass


class MissingSchemeError(FileDeriveError):
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(
            f"{uri!r} does not contain a storage scheme. Expected something like "
            "file:///my_dir/my_file or s3://bucket.s3.region.amazonaws.com/key; the part "
            "before :// selects the storage backend."
        )


class UnknownBackendError(FileDeriveError):
    def __init__(self, scheme: str):
        self.scheme = scheme
        super().__init__(f"No storage backend registered for scheme {scheme!r}")


class MissingSourceError(FileDeriveError):
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Source does not exist: {uri}")


class BucketUnresolvableError(FileDeriveError):
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Bucket part missing from {uri}")


class QueueUnresolvableError(FileDeriveError):
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Queue name missing from {uri}")


class MissingOutputExtensionError(FileDeriveError):
    def __init__(self, generator: type):
        self.generator = generator
        super().__init__(f"output_extension must be declared on generator {generator.__name__}")


class BatchTooLargeError(FileDeriveError):
    def __init__(self, batch_size: int, max_batch_size: int):
        self.batch_size = batch_size
        self.max_batch_size = max_batch_size
        super().__init__(
            f"Batch size {batch_size} is larger than the max queue batch size {max_batch_size}"
        )


class ReadOnlyLocationError(FileDeriveError):
    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Location is read-only and cannot be written: {uri}")


class StagingStateError(FileDeriveError, RuntimeError):
    """Raised when a location is written outside of a staged write scope."""


__all__ = [
    "BatchTooLargeError",
    "BucketUnresolvableError",
    "FileDeriveError",
    "MissingOutputExtensionError",
    "MissingSchemeError",
    "MissingSourceError",
    "QueueUnresolvableError",
    "ReadOnlyLocationError",
    "StagingStateError",
    "UnknownBackendError",
]
