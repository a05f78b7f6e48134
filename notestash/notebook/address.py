"""Object key layout: <namespace>/notebook/<noteId>/note.json."""

from __future__ import annotations

from notestash.core import InvalidIdentifierError

NOTEBOOK_DIR = "notebook"
NOTE_FILE = "note.json"

_FORBIDDEN_CHARS = frozenset("/\\")


def validate_identifier(value: str, kind: str = "note id") -> str:
    """Reject identifiers that could escape their key segment."""
    if not value:
        raise InvalidIdentifierError(f"Empty {kind}")
    if value in (".", ".."):
        raise InvalidIdentifierError(f"Invalid {kind}: {value!r}")
    for ch in value:
        if ch in _FORBIDDEN_CHARS or not ch.isprintable():
            raise InvalidIdentifierError(f"Invalid character {ch!r} in {kind} {value!r}", {kind: value})
    return value


def notebook_directory(namespace: str) -> str:
    return f"{validate_identifier(namespace, 'namespace')}/{NOTEBOOK_DIR}"


def object_name(namespace: str, note_id: str) -> str:
    return f"{notebook_directory(namespace)}/{validate_identifier(note_id)}/{NOTE_FILE}"


def note_id_from_key(namespace: str, key: str) -> str | None:
    """Return the note id encoded in *key*, or None if *key* is not a note object."""
    prefix = notebook_directory(namespace) + "/"
    suffix = "/" + NOTE_FILE
    if not key.startswith(prefix) or not key.endswith(suffix):
        return None
    note_id = key[len(prefix) : -len(suffix)]
    if not note_id or "/" in note_id:
        return None
    return note_id
