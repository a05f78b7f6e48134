"""Google Cloud Storage object store."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

from google.api_core import exceptions as gexc
from google.api_core.retry import Retry
from google.cloud import storage

from notestash.core import ObjectNotFoundError, StoreIOError
from notestash.storage.base import DEFAULT_BUFFER_SIZE, RetryPolicy, WriteOptions

logger = logging.getLogger("notestash.storage")


def build_retry(policy: RetryPolicy) -> Retry:
    """Map a RetryPolicy onto google-api-core's exponential backoff.

    google-api-core bounds retries by total time only, so max_attempts caps
    the backoff ceiling instead: the delay stops growing after that many
    doublings.
    """
    initial = policy.initial_delay_ms / 1000
    maximum = initial * (2 ** max(policy.max_attempts - 1, 0))
    return Retry(
        initial=initial,
        maximum=min(maximum, policy.total_period_ms / 1000),
        multiplier=2.0,
        timeout=policy.total_period_ms / 1000,
    )


class GcsObjectStore:
    """ObjectStore backed by an injected google.cloud.storage.Client."""

    def __init__(self, client: storage.Client, retry_policy: RetryPolicy | None = None) -> None:
        self._client = client
        self._retry = build_retry(retry_policy or RetryPolicy())

    def list(self, bucket: str, prefix: str) -> Iterator[str]:
        try:
            names = [blob.name for blob in self._client.list_blobs(bucket, prefix=prefix, retry=self._retry)]
        except gexc.GoogleAPIError as e:
            raise StoreIOError(f"Failed to list gs://{bucket}/{prefix}: {e}") from e
        return iter(names)

    @contextmanager
    def open_read(
        self, bucket: str, key: str, offset: int = 0, buffer_size: int = DEFAULT_BUFFER_SIZE
    ) -> Iterator[BinaryIO]:
        blob = self._client.bucket(bucket).blob(key)
        try:
            reader = blob.open("rb", chunk_size=buffer_size, retry=self._retry)
            with reader:
                if offset:
                    reader.seek(offset)
                yield reader
        except gexc.NotFound as e:
            raise ObjectNotFoundError(f"Object gs://{bucket}/{key} not found", {"bucket": bucket, "key": key}) from e
        except gexc.GoogleAPIError as e:
            raise StoreIOError(f"Failed to read gs://{bucket}/{key}: {e}") from e

    @contextmanager
    def open_write(self, bucket: str, key: str, options: WriteOptions | None = None) -> Iterator[BinaryIO]:
        options = options or WriteOptions()
        blob = self._client.bucket(bucket).blob(key)
        blob.content_type = options.content_type
        if options.content_encoding:
            blob.content_encoding = options.content_encoding
        try:
            writer = blob.open("wb", retry=self._retry)
            with writer:
                yield writer
        except gexc.GoogleAPIError as e:
            raise StoreIOError(f"Failed to write gs://{bucket}/{key}: {e}") from e
        logger.debug("Wrote gs://%s/%s", bucket, key)

    def delete(self, bucket: str, key: str) -> bool:
        try:
            self._client.bucket(bucket).blob(key).delete(retry=self._retry)
        except gexc.NotFound:
            return False
        except gexc.GoogleAPIError as e:
            raise StoreIOError(f"Failed to delete gs://{bucket}/{key}: {e}") from e
        return True

    def close(self) -> None:
        self._client.close()
