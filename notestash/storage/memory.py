"""In-process object store. Backs tests and the `memory` backend."""

from __future__ import annotations

import io
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

from notestash.core import ObjectNotFoundError
from notestash.storage.base import DEFAULT_BUFFER_SIZE, WriteOptions

logger = logging.getLogger("notestash.storage")


class InMemoryObjectStore:
    """Thread-safe dict of (bucket, key) -> bytes."""

    def __init__(self) -> None:
        self._objects: dict[tuple[str, str], bytes] = {}
        self._lock = threading.Lock()

    def list(self, bucket: str, prefix: str) -> Iterator[str]:
        with self._lock:
            keys = sorted(key for b, key in self._objects if b == bucket and key.startswith(prefix))
        return iter(keys)

    @contextmanager
    def open_read(
        self, bucket: str, key: str, offset: int = 0, buffer_size: int = DEFAULT_BUFFER_SIZE
    ) -> Iterator[BinaryIO]:
        with self._lock:
            data = self._objects.get((bucket, key))
        if data is None:
            raise ObjectNotFoundError(f"Object {bucket}/{key} not found", {"bucket": bucket, "key": key})
        stream = io.BytesIO(data[offset:])
        try:
            yield stream
        finally:
            stream.close()

    @contextmanager
    def open_write(self, bucket: str, key: str, options: WriteOptions | None = None) -> Iterator[BinaryIO]:
        buffer = io.BytesIO()
        try:
            yield buffer
            with self._lock:
                self._objects[(bucket, key)] = buffer.getvalue()
        finally:
            buffer.close()

    def delete(self, bucket: str, key: str) -> bool:
        with self._lock:
            return self._objects.pop((bucket, key), None) is not None

    def close(self) -> None:
        with self._lock:
            count = len(self._objects)
        logger.debug("Closed in-memory store (%d objects)", count)
