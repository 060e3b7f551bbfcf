"""filestore CLI — a thin Typer shell over the store operations."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console

from filestore import __version__

app = typer.Typer(
    name="filestore",
    help="A versioned store of named text resources.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)
out = Console()


@dataclass
class _State:
    store_dir: Optional[str] = None
    config_path: Optional[str] = None


def _load(ctx: typer.Context):
    """Resolve config and build the store, exit 2 on config errors."""
    from filestore.backends import build_store
    from filestore.config.loader import ConfigError, load_config

    state: _State = ctx.obj or _State()
    cwd = Path.cwd()
    try:
        cfg = load_config(cwd, state.config_path)
        if state.store_dir:
            cfg.store.path = state.store_dir
        store = build_store(cfg, cwd)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    return cfg, store


def _author(cfg, name: Optional[str], email: Optional[str]):
    from filestore.config.defaults import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME
    from filestore.models import Author

    return Author(
        name=name or cfg.author.name or DEFAULT_AUTHOR_NAME,
        email=email or cfg.author.email or DEFAULT_AUTHOR_EMAIL,
    )


@contextmanager
def _store_errors() -> Iterator[None]:
    """Turn store failures into a red message and exit code 2."""
    from filestore.errors import FileStoreError, UnknownError

    try:
        yield
    except UnknownError as exc:
        console.print(f"[bold red]Backend error:[/bold red] {exc.detail}")
        raise typer.Exit(code=2) from exc
    except FileStoreError as exc:
        kind = type(exc).__name__
        console.print(f"[bold red]{kind}:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _check_format(fmt: str) -> None:
    if fmt not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {fmt}")
        raise typer.Exit(code=2)


_MESSAGE = typer.Option("", "--message", "-m", help="Change description")
_AUTHOR = typer.Option(None, "--author", help="Author name")
_EMAIL = typer.Option(None, "--email", help="Author email")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    ctx: typer.Context,
    write_config: bool = typer.Option(
        False, "--write-config", help="Also write a starter .filestore.toml in the working directory"
    ),
) -> None:
    """Create a new empty store."""
    from filestore.config.defaults import CONFIG_FILENAME, render_config

    cfg, store = _load(ctx)
    with _store_errors():
        store.initialize()
    console.print(f"[green]✓[/green] Initialized store at {store.root}")

    if write_config:
        cwd = Path.cwd()
        # Would sit untracked inside the store's working tree
        if store.root == cwd.resolve():
            console.print(
                f"[yellow]⚠[/yellow]  Not writing {CONFIG_FILENAME}: the store root is the "
                "working directory. Use --store to keep the store in a subdirectory."
            )
            return
        config_path = cwd / CONFIG_FILENAME
        if config_path.exists():
            console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
            raise typer.Exit(code=1)
        config_path.write_text(render_config(cfg.store.path), encoding="utf-8")
        console.print(f"[green]✓[/green] Created {config_path}")


# ── writes ────────────────────────────────────────────────────────────────────


@app.command()
def save(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Resource path"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read contents from file (default: stdin)"),
    expect: Optional[str] = typer.Option(None, "--expect", help="Revision the edit is based on"),
    create: bool = typer.Option(False, "--create", help="Fail if the resource already exists"),
    message: str = _MESSAGE,
    author: Optional[str] = _AUTHOR,
    email: Optional[str] = _EMAIL,
) -> None:
    """Save a resource, optionally guarded by its expected base revision."""
    from filestore import generic

    cfg, store = _load(ctx)
    who = _author(cfg, author, email)
    if file is not None:
        contents = file.read_bytes()
    else:
        contents = typer.get_binary_stream("stdin").read()
    description = message or f"Update {path}"

    with _store_errors():
        if create:
            generic.create(store, path, who, description, contents)
        elif expect:
            merge = generic.modify(store, path, expect, who, description, contents)
            if merge is not None:
                typer.echo(merge.merged_text, nl=False)
                state = "with conflicts" if merge.has_conflicts else "cleanly"
                console.print(
                    f"[bold yellow]⚠[/bold yellow]  {path} changed since {expect}; "
                    f"merged {state} against {merge.base_revision.id}. Nothing saved."
                )
                raise typer.Exit(code=1)
        else:
            store.save(path, who, description, contents)
    console.print(f"[green]✓[/green] Saved {path}")


@app.command()
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Resource path"),
    message: str = _MESSAGE,
    author: Optional[str] = _AUTHOR,
    email: Optional[str] = _EMAIL,
) -> None:
    """Delete a resource."""
    cfg, store = _load(ctx)
    with _store_errors():
        store.delete(path, _author(cfg, author, email), message or f"Delete {path}")
    console.print(f"[green]✓[/green] Deleted {path}")


@app.command()
def mv(
    ctx: typer.Context,
    old: str = typer.Argument(..., help="Current resource path"),
    new: str = typer.Argument(..., help="New resource path"),
    message: str = _MESSAGE,
    author: Optional[str] = _AUTHOR,
    email: Optional[str] = _EMAIL,
) -> None:
    """Rename a resource."""
    cfg, store = _load(ctx)
    with _store_errors():
        store.rename(old, new, _author(cfg, author, email), message or f"Rename {old} to {new}")
    console.print(f"[green]✓[/green] Renamed {old} → {new}")


# ── reads ─────────────────────────────────────────────────────────────────────


@app.command()
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Resource path"),
    revision: Optional[str] = typer.Option(None, "--revision", "-r", help="Revision id (default: latest)"),
) -> None:
    """Print a resource's contents."""
    _, store = _load(ctx)
    with _store_errors():
        typer.echo(store.retrieve(path, revision), nl=False)


@app.command()
def latest(ctx: typer.Context, path: str = typer.Argument(..., help="Resource path")) -> None:
    """Print the latest revision id of a resource."""
    _, store = _load(ctx)
    with _store_errors():
        typer.echo(store.latest_revision_id(path))


@app.command()
def show(
    ctx: typer.Context,
    revision: str = typer.Argument(..., help="Revision id"),
    format: str = typer.Option("terminal", "--format", help="Output format: terminal | json"),
) -> None:
    """Show one revision."""
    from filestore.output import json_report, terminal

    _check_format(format)
    _, store = _load(ctx)
    with _store_errors():
        rev = store.get_revision(revision)
    if format == "json":
        print(json_report.render_revisions([rev]))
    else:
        terminal.render_revision(out, rev)


@app.command()
def log(
    ctx: typer.Context,
    paths: Optional[List[str]] = typer.Argument(None, help="Limit to these resources"),
    since: Optional[datetime] = typer.Option(None, "--since", help="Only revisions at or after this time"),
    until: Optional[datetime] = typer.Option(None, "--until", help="Only revisions at or before this time"),
    format: str = typer.Option("terminal", "--format", help="Output format: terminal | json"),
) -> None:
    """Show history, most recent first."""
    from filestore.models import TimeRange
    from filestore.output import json_report, terminal

    _check_format(format)
    _, store = _load(ctx)
    with _store_errors():
        revisions = store.history(paths or [], TimeRange(since=since, until=until))
    if format == "json":
        print(json_report.render_revisions(revisions))
    else:
        terminal.render_revisions(out, revisions)


@app.command()
def index(ctx: typer.Context) -> None:
    """List every resource in the store."""
    _, store = _load(ctx)
    with _store_errors():
        for name in store.list_index():
            typer.echo(name)


@app.command()
def ls(ctx: typer.Context, directory: str = typer.Argument("", help="Directory (default: root)")) -> None:
    """List the entries of one directory."""
    from filestore.output import terminal

    _, store = _load(ctx)
    with _store_errors():
        entries = store.list_directory(directory)
    terminal.render_directory(out, entries)


@app.command()
def search(
    ctx: typer.Context,
    patterns: List[str] = typer.Argument(..., help="Strings to search for"),
    whole_words: bool = typer.Option(False, "--whole-words", "-w", help="Match whole words only"),
    match_all: bool = typer.Option(False, "--all", help="Files must match every pattern"),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Case-insensitive search"),
    format: str = typer.Option("terminal", "--format", help="Output format: terminal | json"),
) -> None:
    """Search resource contents in the current snapshot."""
    from filestore.models import SearchQuery
    from filestore.output import json_report, terminal

    _check_format(format)
    _, store = _load(ctx)
    query = SearchQuery(
        patterns=list(patterns),
        whole_words=whole_words,
        match_all=match_all,
        ignore_case=ignore_case,
    )
    with _store_errors():
        matches = store.search(query)
    if format == "json":
        print(json_report.render_matches(matches))
    else:
        terminal.render_matches(out, matches)


@app.command()
def diff(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Resource path"),
    from_rev: Optional[str] = typer.Option(None, "--from", help="Old revision (default: empty document)"),
    to_rev: Optional[str] = typer.Option(None, "--to", help="New revision (default: latest)"),
    format: str = typer.Option("terminal", "--format", help="Output format: terminal | json"),
) -> None:
    """Line diff of a resource between two revisions."""
    from filestore import generic
    from filestore.output import json_report, terminal

    _check_format(format)
    _, store = _load(ctx)
    with _store_errors():
        lines = generic.diff(store, path, from_rev, to_rev)
    if format == "json":
        print(json_report.render_diff(lines))
    else:
        terminal.render_diff(out, lines)


# ── version / global options ──────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"filestore {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    store: Optional[str] = typer.Option(None, "--store", "-s", help="Store directory (overrides config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .filestore.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log git invocations"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """filestore — a versioned store of named text resources."""
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    ctx.obj = _State(store_dir=store, config_path=config)
