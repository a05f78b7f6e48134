"""Notebook repository over an object store.

One object per note at <namespace>/notebook/<noteId>/note.json. Every read
reconciles paragraph status before the note is handed back.
"""

from __future__ import annotations

import codecs
import json
import logging
from abc import ABC, abstractmethod

from pydantic import BaseModel, ValidationError

from notestash.config import NotestashConfig
from notestash.core import (
    ConfigError,
    NoteDecodeError,
    NoteNotFoundError,
    Result,
    StoreIOError,
    UnsupportedOperationError,
)
from notestash.notebook.address import note_id_from_key, notebook_directory, object_name
from notestash.notebook.note import Note, NoteInfo, abort_interrupted
from notestash.storage.base import DEFAULT_BUFFER_SIZE, ObjectStore, WriteOptions
from notestash.storage.factory import create_store

logger = logging.getLogger("notestash.repo")


class Revision(BaseModel):
    id: str
    message: str = ""
    time: int = 0


class NotebookRepo(ABC):
    """Storage seam used by the notebook management layer.

    Versioning and settings are optional capabilities; repositories that do
    not back them inherit implementations that raise UnsupportedOperationError.
    """

    @abstractmethod
    def list(self, namespace: str) -> list[NoteInfo]: ...

    @abstractmethod
    def get(self, namespace: str, note_id: str) -> Note: ...

    @abstractmethod
    def save(self, note: Note, namespace: str) -> None: ...

    @abstractmethod
    def remove(self, namespace: str, note_id: str) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    def checkpoint(self, namespace: str, note_id: str, message: str) -> Revision:
        raise UnsupportedOperationError("checkpoint")

    def get_revision(self, namespace: str, note_id: str, revision_id: str) -> Note:
        raise UnsupportedOperationError("get_revision")

    def revision_history(self, namespace: str, note_id: str) -> list[Revision]:
        raise UnsupportedOperationError("revision_history")

    def set_note_revision(self, namespace: str, note_id: str, revision_id: str) -> Note:
        raise UnsupportedOperationError("set_note_revision")

    def get_settings(self) -> dict[str, str]:
        raise UnsupportedOperationError("get_settings")

    def update_settings(self, settings: dict[str, str]) -> None:
        raise UnsupportedOperationError("update_settings")


class ObjectStoreNotebookRepo(NotebookRepo):
    """Stateless between calls apart from its fixed bucket, encoding and store."""

    def __init__(
        self,
        store: ObjectStore,
        bucket: str,
        *,
        encoding: str = "utf-8",
        read_buffer_size: int = DEFAULT_BUFFER_SIZE,
        owns_store: bool = False,
    ) -> None:
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            raise ConfigError(f"Unknown text encoding {encoding!r}", {"encoding": encoding}) from e
        self._store = store
        self._bucket = bucket
        self._encoding = encoding
        self._read_buffer_size = read_buffer_size
        self._owns_store = owns_store
        self._closed = False

    @property
    def bucket(self) -> str:
        return self._bucket

    def _note_keys(self, namespace: str) -> list[tuple[str, str]]:
        """Return (key, note id) for every note object under *namespace*."""
        prefix = notebook_directory(namespace) + "/"
        keys: list[tuple[str, str]] = []
        for key in self._store.list(self._bucket, prefix):
            note_id = note_id_from_key(namespace, key)
            if note_id is None:
                logger.debug("Skipping non-note object %s", key)
                continue
            keys.append((key, note_id))
        return keys

    def list(self, namespace: str) -> list[NoteInfo]:
        """Fetch every note in *namespace*. Any per-note failure fails the listing."""
        return [NoteInfo.from_note(self._read(key, note_id)) for key, note_id in self._note_keys(namespace)]

    def scan(self, namespace: str) -> Result[list[NoteInfo]]:
        """Like list, but unreadable notes become diagnostics instead of failures."""
        result: Result[list[NoteInfo]] = Result(data=[])
        infos: list[NoteInfo] = []
        for key, note_id in self._note_keys(namespace):
            try:
                infos.append(NoteInfo.from_note(self._read(key, note_id)))
            except (NoteNotFoundError, NoteDecodeError) as e:
                logger.warning("Skipping unreadable note %s: %s", key, e)
                result.error(e.code, f"{key}: {e.message}")
        result.data = infos
        return result

    def get(self, namespace: str, note_id: str) -> Note:
        return self._read(object_name(namespace, note_id), note_id)

    def _read(self, key: str, note_id: str) -> Note:
        with self._store.open_read(self._bucket, key, 0, self._read_buffer_size) as stream:
            try:
                raw = stream.read()
            except OSError as e:
                raise StoreIOError(f"Failed to read {key}: {e}", {"key": key}) from e
        try:
            doc = json.loads(raw.decode(self._encoding))
            if isinstance(doc, dict) and "id" not in doc:
                # Documents stored without an id take it from their key.
                doc["id"] = note_id
            note = Note.model_validate(doc)
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError, ValidationError) as e:
            raise NoteDecodeError(f"Object {key} is not a valid note: {e}", {"key": key}) from e
        aborted = abort_interrupted(note)
        if aborted:
            logger.info("Aborted %d interrupted paragraph(s) in note %s", len(aborted), note.id)
        return note

    def save(self, note: Note, namespace: str) -> None:
        key = object_name(namespace, note.id)
        payload = (json.dumps(note.model_dump(mode="json", exclude_none=True), indent=2) + "\n").encode(self._encoding)
        options = WriteOptions(content_type=f"application/json; charset={self._encoding}")
        with self._store.open_write(self._bucket, key, options) as sink:
            try:
                sink.write(payload)
            except OSError as e:
                raise StoreIOError(f"Failed to write {key}: {e}", {"key": key}) from e
        logger.info("Saved note %s (%d paragraphs) to %s", note.id, len(note.paragraphs), key)

    def remove(self, namespace: str, note_id: str) -> None:
        key = object_name(namespace, note_id)
        if self._store.delete(self._bucket, key):
            logger.info("Removed note %s", key)
        else:
            logger.info("Note %s already absent", key)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._owns_store:
            self._store.close()


def open_repo(config: NotestashConfig) -> ObjectStoreNotebookRepo:
    """Build a repository that owns a store created from *config*."""
    return ObjectStoreNotebookRepo(
        create_store(config),
        config.bucket,
        encoding=config.encoding,
        read_buffer_size=config.read_buffer_size,
        owns_store=True,
    )

