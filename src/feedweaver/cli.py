"""CLI entrypoints for Feedweaver.

Each mutating command is one load -> mutate -> save cycle over an OPML file.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from feedweaver.config import load_settings
from feedweaver.errors import FeedweaverError
from feedweaver.logging import configure_logging, get_logger
from feedweaver.models.outline import Feed, Folder, NodeEdit, OutlineDocument, OutlineNode
from feedweaver.session.editor import OutlineEditor
from feedweaver.tree.paths import NodePath, path_to_key

app = typer.Typer(add_completion=False, help="Feedweaver OPML outline editor")
logger = get_logger(__name__)
console = Console()


class KindChoice(str, Enum):
    folder = "folder"
    feed = "feed"


def _open(file: Path) -> OutlineEditor:
    settings = load_settings()
    configure_logging(settings.log_level)
    editor = OutlineEditor(settings=settings)
    try:
        editor.import_file(file)
    except FeedweaverError as e:
        raise typer.BadParameter(str(e), param_hint="FILE") from e
    return editor


def _save(editor: OutlineEditor, file: Path, output: Path | None) -> None:
    target = editor.export_file(output or file)
    typer.echo(str(target))


def _fail(e: FeedweaverError) -> typer.Exit:
    typer.echo(f"error: {e}", err=True)
    return typer.Exit(code=1)


def _describe(node: OutlineNode, key: str) -> str:
    label = escape(node.label or "")
    if isinstance(node, Feed):
        url = f" [dim]<{escape(node.feed_url)}>[/dim]" if node.feed_url else ""
        return f"[cyan]{key}[/cyan] {label}{url}"
    return f"[yellow]{key}[/yellow] [bold]{label}[/bold]/"


def _attach(branch: Tree, nodes: tuple[OutlineNode, ...], prefix: NodePath) -> None:
    for i, node in enumerate(nodes):
        path = prefix + (i,)
        sub = branch.add(_describe(node, path_to_key(path)))
        if isinstance(node, Folder) and node.children:
            _attach(sub, node.children, path)


def render_tree(document: OutlineDocument, title: str) -> Tree:
    """Build a rich tree of the outline, labelling each node with its path key."""

    tree = Tree(f"[bold]{escape(title)}[/bold]")
    _attach(tree, document.nodes, ())
    return tree


@app.command()
def show(file: Path = typer.Argument(..., exists=True, dir_okay=False, help="OPML file")) -> None:
    """Print the outline with the path key of every node."""

    editor = _open(file)
    console.print(render_tree(editor.document, file.name))


@app.command()
def normalize(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="OPML file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
) -> None:
    """Parse and re-serialize a file in canonical form."""

    editor = _open(file)
    if output is None:
        typer.echo(editor.export_text(), nl=False)
        return
    _save(editor, file, output)


@app.command()
def add(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="OPML file"),
    kind: KindChoice = typer.Option(KindChoice.feed, "--kind", "-k", help="Node kind to add"),
    at: str | None = typer.Option(None, "--at", help="Path key of the folder to add into (default: root)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file (default: FILE)"),
) -> None:
    """Add a default folder or feed."""

    editor = _open(file)
    try:
        editor.add(kind.value, at)
    except FeedweaverError as e:
        raise _fail(e) from e
    _save(editor, file, output)


@app.command()
def edit(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="OPML file"),
    key: str = typer.Argument(..., help="Path key of the node to edit"),
    label: str | None = typer.Option(None, "--label", help="New label"),
    feed_url: str | None = typer.Option(None, "--feed-url", help="New feed URL (feeds only)"),
    site_url: str | None = typer.Option(None, "--site-url", help="New site URL (feeds only)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file (default: FILE)"),
) -> None:
    """Edit a node's label and, for feeds, its URLs. Omitted options keep their value."""

    editor = _open(file)
    try:
        given = {"label": label, "feed_url": feed_url, "site_url": site_url}
        editor.edit(NodeEdit(**{name: value for name, value in given.items() if value is not None}), key, merge=True)
    except FeedweaverError as e:
        raise _fail(e) from e
    _save(editor, file, output)


@app.command()
def delete(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="OPML file"),
    key: str = typer.Argument(..., help="Path key of the node to delete"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file (default: FILE)"),
) -> None:
    """Delete a node and its whole subtree."""

    editor = _open(file)
    try:
        editor.delete(key)
    except FeedweaverError as e:
        raise _fail(e) from e
    _save(editor, file, output)


@app.command()
def move(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="OPML file"),
    source: str = typer.Argument(..., help="Path key of the node to move"),
    dest: str = typer.Argument(..., help="Destination gap, or a folder to drop into"),
    gap: bool = typer.Option(False, "--gap", help="Treat DEST as a gap even if it is a folder"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file (default: FILE)"),
) -> None:
    """Move a node; folders stay ahead of feeds in the receiving list."""

    editor = _open(file)
    try:
        result = editor.move(source, dest, into_folder=not gap)
    except FeedweaverError as e:
        raise _fail(e) from e
    logger.info("Moved %s to %s", source, path_to_key(result.path))
    _save(editor, file, output)


if __name__ == "__main__":
    app()
