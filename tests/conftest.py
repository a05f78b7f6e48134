"""Shared test fixtures for notestash tests."""

from __future__ import annotations

import pytest

from notestash.notebook.note import Note, Paragraph, Status
from notestash.notebook.repo import ObjectStoreNotebookRepo
from notestash.storage.memory import InMemoryObjectStore

BUCKET = "test-bucket"


class PeekableObjectStore(InMemoryObjectStore):
    """In-memory store that lets tests plant and inspect raw object bytes."""

    def get_bytes(self, bucket: str, key: str) -> bytes | None:
        with self._lock:
            return self._objects.get((bucket, key))

    def put_bytes(self, bucket: str, key: str, data: bytes) -> None:
        with self._lock:
            self._objects[(bucket, key)] = data


def make_note(
    note_id: str = "n1",
    name: str = "Demo",
    statuses: tuple[Status, ...] = (Status.FINISHED,),
) -> Note:
    return Note(
        id=note_id,
        name=name,
        paragraphs=[Paragraph(id=f"p{i}", text=f"%sql SELECT {i}", status=s) for i, s in enumerate(statuses)],
    )


@pytest.fixture
def store() -> PeekableObjectStore:
    return PeekableObjectStore()


@pytest.fixture
def repo(store: PeekableObjectStore) -> ObjectStoreNotebookRepo:
    return ObjectStoreNotebookRepo(store, BUCKET)
