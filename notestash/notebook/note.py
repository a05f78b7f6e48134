"""Note and paragraph models, plus the read-time status reconciliation."""

from __future__ import annotations

import secrets
import string
import uuid
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_note_id() -> str:
    """Generate a note ID: 9 uppercase alphanumerics."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


def generate_paragraph_id() -> str:
    """Generate a paragraph ID: 'paragraph_' + 12 hex chars from uuid4."""
    return "paragraph_" + uuid.uuid4().hex[:12]


class Status(StrEnum):
    READY = "READY"
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    FINISHED = "FINISHED"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"
    ABORT = "ABORT"


INTERRUPTED_STATUSES = frozenset({Status.PENDING, Status.RUNNING})


class Paragraph(BaseModel):
    """One executable unit. Fields absent from a stored document stay None."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    title: str | None = None
    text: str | None = None
    status: Status | None = None


def new_paragraph(text: str = "", title: str | None = None) -> Paragraph:
    """Create a fresh READY paragraph with a generated ID."""
    return Paragraph(id=generate_paragraph_id(), title=title, text=text, status=Status.READY)


class Note(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=generate_note_id)
    name: str | None = None
    paragraphs: list[Paragraph] = Field(default_factory=list)


class NoteInfo(BaseModel):
    id: str
    name: str = ""

    @classmethod
    def from_note(cls, note: Note) -> NoteInfo:
        return cls(id=note.id, name=note.name or "")


def abort_interrupted(note: Note) -> list[str | None]:
    """Rewrite PENDING/RUNNING paragraphs to ABORT in place.

    A persisted PENDING or RUNNING status can only come from an execution that
    never finished (the process died mid-run), so it is never shown as live.
    Returns the IDs of the paragraphs that were changed (None for paragraphs
    stored without an ID).
    """
    aborted: list[str | None] = []
    for paragraph in note.paragraphs:
        if paragraph.status in INTERRUPTED_STATUSES:
            paragraph.status = Status.ABORT
            aborted.append(paragraph.id)
    return aborted
