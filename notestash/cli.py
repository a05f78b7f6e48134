"""CLI entry points: `notestash configure`, `ls`, `show`, `put`, `rm` and `serve`."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from notestash.config import Backend, NotestashConfig, load_config, save_config
from notestash.core import NotestashError
from notestash.notebook.note import Note
from notestash.notebook.repo import ObjectStoreNotebookRepo, open_repo

app = typer.Typer(name="notestash", help="Notebook storage on an object store.")
console = Console()

_NAMESPACE_OPTION = typer.Option(None, "--namespace", "-n", help="Namespace (defaults to config)")


def _open() -> ObjectStoreNotebookRepo:
    try:
        return open_repo(load_config())
    except NotestashError as e:
        raise _fail(e) from e


def _fail(exc: NotestashError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {exc.message}")
    return typer.Exit(1)


@app.command()
def configure(
    namespace: str = typer.Option(None, "--namespace", "-n", help="Namespace notes are stored under"),
    bucket: str = typer.Option(None, "--bucket", "-b", help="Bucket name"),
    backend: Backend = typer.Option(None, "--backend", help="Storage backend"),
    encoding: str = typer.Option(None, "--encoding", help="Text encoding for stored notes"),
) -> None:
    """Update ~/.notestash/config.json."""
    config = load_config()
    updates = {"namespace": namespace, "bucket": bucket, "backend": backend, "encoding": encoding}
    changes = {k: v for k, v in updates.items() if v is not None}
    try:
        config = NotestashConfig.model_validate({**config.model_dump(), **changes})
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {'; '.join(err['msg'] for err in e.errors())}")
        raise typer.Exit(1) from e
    save_config(config)
    console.print(
        f"[green]Saved.[/green] namespace={config.namespace} bucket={config.bucket} backend={config.backend}"
    )


@app.command("ls")
def list_notes(
    namespace: str = _NAMESPACE_OPTION,
    lenient: bool = typer.Option(False, "--lenient", help="Skip unreadable notes instead of failing"),
) -> None:
    """List notes in a namespace."""
    ns = namespace or load_config().namespace
    repo = _open()
    try:
        if lenient:
            result = repo.scan(ns)
            infos = result.data or []
            for d in result.diagnostics:
                console.print(f"[yellow]Skipped:[/yellow] {d.message}")
        else:
            infos = repo.list(ns)
    except NotestashError as e:
        raise _fail(e) from e
    finally:
        repo.close()

    t = Table(title=f"{ns} ({len(infos)} notes)")
    t.add_column("ID", style="cyan")
    t.add_column("Name")
    for info in infos:
        t.add_row(info.id, info.name)
    console.print(t)


@app.command()
def show(note_id: str = typer.Argument(help="Note ID"), namespace: str = _NAMESPACE_OPTION) -> None:
    """Print a note with its paragraph statuses."""
    ns = namespace or load_config().namespace
    repo = _open()
    try:
        note = repo.get(ns, note_id)
    except NotestashError as e:
        raise _fail(e) from e
    finally:
        repo.close()

    t = Table(title=f"{note.name or '(untitled)'} [{note.id}]")
    t.add_column("#", justify="right")
    t.add_column("Paragraph", style="cyan")
    t.add_column("Status", style="green")
    t.add_column("Text")
    for i, p in enumerate(note.paragraphs, start=1):
        first_line = p.text.splitlines()[0] if p.text else ""
        t.add_row(str(i), p.title or p.id or "", p.status or "", first_line)
    console.print(t)


@app.command()
def put(path: Path = typer.Argument(help="Note JSON file"), namespace: str = _NAMESPACE_OPTION) -> None:
    """Save a note from a JSON file, replacing any existing note with the same ID."""
    config = load_config()
    ns = namespace or config.namespace
    try:
        note = Note.model_validate(json.loads(path.read_text(encoding=config.encoding)))
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] cannot read {path}: {e}")
        raise typer.Exit(1) from e

    repo = _open()
    try:
        repo.save(note, ns)
    except NotestashError as e:
        raise _fail(e) from e
    finally:
        repo.close()
    console.print(f"[green]Saved[/green] {note.id} ({len(note.paragraphs)} paragraphs)")


@app.command("rm")
def remove(note_id: str = typer.Argument(help="Note ID"), namespace: str = _NAMESPACE_OPTION) -> None:
    """Delete a note."""
    ns = namespace or load_config().namespace
    repo = _open()
    try:
        repo.remove(ns, note_id)
    except NotestashError as e:
        raise _fail(e) from e
    finally:
        repo.close()
    console.print(f"[green]Removed[/green] {note_id}")


@app.command()
def serve(port: int = typer.Option(8000, "--port", "-p", help="Port to serve on")) -> None:
    """Start the HTTP server."""
    import logging

    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    console.print(f"[bold]Starting notestash on port {port}...[/bold]")
    uvicorn.run("notestash.server:app", host="0.0.0.0", port=port, reload=False)


def main() -> None:
    app()
