from __future__ import annotations


class StorageConfigurationError(ValueError):
    """A backend cannot be constructed (missing resource, bad kind). Not retryable."""


class UnsupportedStorageTypeError(StorageConfigurationError):
    def __init__(self, kind: object):
        super().__init__(f"Unsupported storage type: {kind}")
        self.kind = kind
