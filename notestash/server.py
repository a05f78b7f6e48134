"""FastAPI server exposing a notebook repository over HTTP."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from notestash.config import load_config
from notestash.core import (
    InvalidIdentifierError,
    NoteDecodeError,
    NoteNotFoundError,
    NotestashError,
    StoreIOError,
    UnsupportedOperationError,
)
from notestash.notebook.note import Note, NoteInfo
from notestash.notebook.repo import NotebookRepo, open_repo

logger = logging.getLogger("notestash.server")

app = FastAPI(title="notestash", version="0.1.0")

_repo: NotebookRepo | None = None

_STATUS_CODES: dict[type[NotestashError], int] = {
    InvalidIdentifierError: 400,
    NoteNotFoundError: 404,
    NoteDecodeError: 422,
    UnsupportedOperationError: 501,
    StoreIOError: 503,
}


def get_repo() -> NotebookRepo:
    """Repository dependency, built from config on first use."""
    global _repo  # noqa: PLW0603
    if _repo is None:
        _repo = open_repo(load_config())
    return _repo


@app.on_event("shutdown")
async def _shutdown() -> None:
    global _repo  # noqa: PLW0603
    if _repo is not None:
        _repo.close()
        _repo = None


@app.exception_handler(NotestashError)
async def _notestash_error(request: Request, exc: NotestashError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": exc.message, "code": exc.code})


@app.get("/api/health")
async def health() -> dict[str, Any]:
    return {"ok": True}


@app.get("/api/namespaces/{namespace}/notes")
def list_notes(namespace: str, repo: NotebookRepo = Depends(get_repo)) -> list[NoteInfo]:
    return repo.list(namespace)


@app.get("/api/namespaces/{namespace}/notes/{note_id}")
def get_note(namespace: str, note_id: str, repo: NotebookRepo = Depends(get_repo)) -> dict[str, Any]:
    return repo.get(namespace, note_id).model_dump(mode="json", exclude_none=True)


@app.put("/api/namespaces/{namespace}/notes/{note_id}")
def put_note(namespace: str, note_id: str, note: Note, repo: NotebookRepo = Depends(get_repo)) -> Any:
    if note.id != note_id:
        return JSONResponse(status_code=400, content={"error": f"Body id {note.id} does not match {note_id}"})
    repo.save(note, namespace)
    return {"ok": True}


@app.delete("/api/namespaces/{namespace}/notes/{note_id}")
def delete_note(namespace: str, note_id: str, repo: NotebookRepo = Depends(get_repo)) -> dict[str, Any]:
    repo.remove(namespace, note_id)
    return {"ok": True}


class CheckpointRequest(BaseModel):
    message: str = ""


@app.post("/api/namespaces/{namespace}/notes/{note_id}/checkpoint")
def checkpoint(
    namespace: str, note_id: str, request: CheckpointRequest, repo: NotebookRepo = Depends(get_repo)
) -> dict[str, Any]:
    return repo.checkpoint(namespace, note_id, request.message).model_dump()


@app.get("/api/namespaces/{namespace}/notes/{note_id}/revisions")
def revisions(namespace: str, note_id: str, repo: NotebookRepo = Depends(get_repo)) -> list[dict[str, Any]]:
    return [rev.model_dump() for rev in repo.revision_history(namespace, note_id)]
