"""Tests for the object key layout."""

import pytest

from notestash.core import InvalidIdentifierError
from notestash.notebook.address import note_id_from_key, notebook_directory, object_name


def test_notebook_directory() -> None:
    assert notebook_directory("alice") == "alice/notebook"


def test_object_name() -> None:
    assert object_name("alice", "n1") == "alice/notebook/n1/note.json"


def test_note_id_from_key() -> None:
    assert note_id_from_key("alice", "alice/notebook/n1/note.json") == "n1"


@pytest.mark.parametrize(
    "key",
    [
        "alice/notebook/n1/other.json",
        "alice/notebook/note.json",
        "alice/notebook/a/b/note.json",
        "bob/notebook/n1/note.json",
        "alice/notebook2/n1/note.json",
    ],
)
def test_note_id_from_key_rejects_non_notes(key: str) -> None:
    assert note_id_from_key("alice", key) is None


@pytest.mark.parametrize("note_id", ["", ".", "..", "a/b", "../bob", "a\\b", "n1\n"])
def test_object_name_rejects_unsafe_note_ids(note_id: str) -> None:
    with pytest.raises(InvalidIdentifierError):
        object_name("alice", note_id)


@pytest.mark.parametrize("namespace", ["", "..", "alice/bob"])
def test_rejects_unsafe_namespace(namespace: str) -> None:
    with pytest.raises(InvalidIdentifierError):
        notebook_directory(namespace)


def test_allows_ordinary_ids() -> None:
    assert object_name("alice@example.com", "2A94M5J1Z") == "alice@example.com/notebook/2A94M5J1Z/note.json"
