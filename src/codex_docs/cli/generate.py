import json
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from codex_docs.core.ingest import run_ingest
from codex_docs.db import DocIdCounter, InMemoryDocDatabase
from codex_docs.models import DocCategory, DocObject

console = Console()

_TABLE_COLUMNS = ("id", "category", "name", "longname", "export", "import_style")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _render_table(docs: list[DocObject]) -> None:
    table = Table(show_lines=False)
    for column in _TABLE_COLUMNS:
        table.add_column(column)
    for doc in docs:
        table.add_row(
            str(doc.doc_id),
            doc.category.value,
            doc.name or "",
            doc.longname or "",
            str(doc.export),
            doc.import_style or "",
        )
    console.print(table)
    console.print(f"({len(docs)} docs)")


def generate(
    path: Annotated[str | None, typer.Argument(help="Path to a JavaScript file.")] = None,
    code: Annotated[str | None, typer.Option(help="Source code string to document instead of a file path.")] = None,
    language: Annotated[str | None, typer.Option(help="Language name or code (e.g. js, javascript, mjs).")] = None,
    test: Annotated[bool, typer.Option("--test", help="Treat the source as a mocha test file.")] = False,
    handle_error: Annotated[
        str | None, typer.Option(help="Per-node fault policy: 'log' or 'throw' (default from CODEX_DOCS_HANDLE_ERROR).")
    ] = None,
    root: Annotated[str | None, typer.Option(help="Project root for file paths (default from CODEX_DOCS_ROOT).")] = None,
    name: Annotated[str | None, typer.Option(help="File path recorded for a --code snippet.")] = None,
    category: Annotated[str | None, typer.Option(help="Only show docs of this category (e.g. ModuleClass).")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the docs as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Generate doc objects for a JavaScript file or code snippet."""
    _configure_logging(verbose)

    if path is None and code is None:
        console.print("[red]Provide a PATH or --code.[/red]")
        raise typer.Exit(2)
    if handle_error is not None and handle_error not in ("log", "throw"):
        console.print(f"[red]Unknown --handle-error '{handle_error}'. Expected 'log' or 'throw'.[/red]")
        raise typer.Exit(2)

    selected_category = None
    if category is not None:
        try:
            selected_category = DocCategory(category)
        except ValueError:
            console.print(f"[red]Unknown category '{category}'.[/red]")
            raise typer.Exit(2) from None

    database = InMemoryDocDatabase(DocIdCounter())
    try:
        result = run_ingest(
            database,
            path=path if code is None else None,
            code=code,
            language=language,
            test=test,
            handle_error=handle_error,  # type: ignore[arg-type]
            root=root,
            name=name,
        )
    except (FileNotFoundError, ValueError, TypeError) as error:
        console.print(f"[red]{error}[/red]")
        raise typer.Exit(1) from None

    docs = database.find(category=selected_category)

    if as_json:
        payload = [doc.model_dump(mode="json", by_alias=True, exclude_none=True) for doc in docs]
        typer.echo(json.dumps(payload, indent=2))
    else:
        console.print(f"[green]Generated[/green] docs for {result.file_path} (language: {result.language})")
        _render_table(docs)

    for entry in result.invalid_code.entries:
        console.print(f"[yellow]Skipped[/yellow] {entry.node_type} at line {entry.line_number}: {entry.message}")
