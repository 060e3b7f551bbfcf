"""Rich terminal rendering of revision tables, search hits and diffs."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from filestore.models import ChangeType, DiffLine, DirectoryEntry, LineType, Revision, SearchMatch

_CHANGE_STYLE = {
    ChangeType.ADDED: "green",
    ChangeType.MODIFIED: "yellow",
    ChangeType.DELETED: "red",
}

_CHANGE_ICON = {
    ChangeType.ADDED: "A",
    ChangeType.MODIFIED: "M",
    ChangeType.DELETED: "D",
}

_LINE_STYLE = {
    LineType.ADDED: ("+", "green"),
    LineType.REMOVED: ("-", "red"),
    LineType.UNCHANGED: (" ", "dim"),
}


def _changes_text(rev: Revision) -> Text:
    text = Text()
    for i, change in enumerate(rev.changes):
        if i:
            text.append("\n")
        text.append(f"{_CHANGE_ICON[change.type]} ", style=f"bold {_CHANGE_STYLE[change.type]}")
        text.append(change.path)
    return text


def render_revisions(console: Console, revisions: Sequence[Revision]) -> None:
    """Print revisions as a table, most recent first."""
    if not revisions:
        console.print("[dim]No revisions found.[/dim]")
        return

    table = Table(show_lines=True, title_style="bold", border_style="dim")
    table.add_column("Revision", style="cyan", no_wrap=True)
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Author", style="magenta")
    table.add_column("Description")
    table.add_column("Changes")

    for rev in revisions:
        table.add_row(
            rev.id[:10],
            rev.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            str(rev.author),
            rev.description,
            _changes_text(rev),
        )
    console.print(table)


def render_revision(console: Console, rev: Revision) -> None:
    console.print(f"[bold cyan]revision {rev.id}[/bold cyan]")
    console.print(f"Author: {rev.author}")
    console.print(f"Date:   {rev.timestamp.isoformat()}")
    console.print()
    console.print(Text(rev.description))
    console.print()
    console.print(_changes_text(rev))


def render_matches(console: Console, matches: Sequence[SearchMatch]) -> None:
    if not matches:
        console.print("[dim]No matches.[/dim]")
        return
    for m in matches:
        line = Text()
        line.append(m.resource_name, style="magenta")
        line.append(":")
        line.append(str(m.line_number), style="green")
        line.append(": ")
        line.append(m.line_content)
        console.print(line)
    console.print()
    console.print(f"[dim]{len(matches)} match(es)[/dim]")


def render_diff(console: Console, lines: Sequence[DiffLine]) -> None:
    for d in lines:
        prefix, style = _LINE_STYLE[d.line_type]
        console.print(Text(f"{prefix}{d.content}", style=style))


def render_directory(console: Console, entries: Sequence[DirectoryEntry]) -> None:
    for entry in entries:
        if entry.is_directory:
            console.print(Text(f"{entry.name}/", style="bold blue"))
        else:
            console.print(Text(entry.name))
