"""Filesystem object store. Saves to {root}/{bucket}/{key}."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from notestash.core import InvalidIdentifierError, ObjectNotFoundError, StoreIOError
from notestash.storage.base import DEFAULT_BUFFER_SIZE, WriteOptions

logger = logging.getLogger("notestash.storage")

_TMP_SUFFIX = ".tmp"


class LocalObjectStore:
    """Stores each object as a file; writes are atomic (write to .tmp, then rename)."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    def _path(self, bucket: str, key: str) -> Path:
        base = (self._root / bucket).resolve()
        path = (base / key).resolve()
        if not path.is_relative_to(base) or path == base:
            raise InvalidIdentifierError(f"Key {key!r} escapes bucket {bucket!r}", {"bucket": bucket, "key": key})
        return path

    def list(self, bucket: str, prefix: str) -> Iterator[str]:
        base = self._root / bucket
        if not base.exists():
            return iter([])
        try:
            keys = [
                p.relative_to(base).as_posix()
                for p in base.rglob("*")
                if p.is_file() and not p.name.endswith(_TMP_SUFFIX)
            ]
        except OSError as e:
            raise StoreIOError(f"Failed to list {bucket}/{prefix}: {e}") from e
        return iter(sorted(k for k in keys if k.startswith(prefix)))

    @contextmanager
    def open_read(
        self, bucket: str, key: str, offset: int = 0, buffer_size: int = DEFAULT_BUFFER_SIZE
    ) -> Iterator[BinaryIO]:
        path = self._path(bucket, key)
        try:
            stream = path.open("rb", buffering=buffer_size)
        except FileNotFoundError as e:
            raise ObjectNotFoundError(f"Object {bucket}/{key} not found", {"bucket": bucket, "key": key}) from e
        except OSError as e:
            raise StoreIOError(f"Failed to open {bucket}/{key}: {e}") from e
        with stream:
            if offset:
                stream.seek(offset)
            yield stream

    @contextmanager
    def open_write(self, bucket: str, key: str, options: WriteOptions | None = None) -> Iterator[BinaryIO]:
        path = self._path(bucket, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=_TMP_SUFFIX, dir=path.parent)
        except OSError as e:
            raise StoreIOError(f"Failed to stage {bucket}/{key}: {e}") from e
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as sink:
                yield sink
            tmp_path.replace(path)
        except OSError as e:
            raise StoreIOError(f"Failed to write {bucket}/{key}: {e}") from e
        finally:
            tmp_path.unlink(missing_ok=True)
        logger.debug("Wrote %s/%s", bucket, key)

    def delete(self, bucket: str, key: str) -> bool:
        path = self._path(bucket, key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StoreIOError(f"Failed to delete {bucket}/{key}: {e}") from e
        return True

    def close(self) -> None:
        pass
