"""Object store interface consumed by the notebook repository."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import BinaryIO, Protocol, runtime_checkable

from pydantic import BaseModel

DEFAULT_BUFFER_SIZE = 2 * 1024 * 1024


class RetryPolicy(BaseModel):
    """Retry settings handed to store clients that retry on their own."""

    initial_delay_ms: int = 10
    max_attempts: int = 10
    total_period_ms: int = 15_000


class WriteOptions(BaseModel):
    content_type: str = "application/json"
    content_encoding: str | None = None


@runtime_checkable
class ObjectStore(Protocol):
    """Bucket/key blob storage.

    Implementations raise ObjectNotFoundError for missing keys and StoreIOError
    for transport failures. Stream context managers release their resource on
    every exit path; a write is committed only when its block exits cleanly.
    """

    def list(self, bucket: str, prefix: str) -> Iterator[str]: ...

    def open_read(
        self, bucket: str, key: str, offset: int = 0, buffer_size: int = DEFAULT_BUFFER_SIZE
    ) -> AbstractContextManager[BinaryIO]: ...

    def open_write(
        self, bucket: str, key: str, options: WriteOptions | None = None
    ) -> AbstractContextManager[BinaryIO]: ...

    def delete(self, bucket: str, key: str) -> bool: ...

    def close(self) -> None: ...
