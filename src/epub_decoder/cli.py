"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from epub_decoder.commands.extract import execute_extract
from epub_decoder.commands.inspect import (
    execute_info,
    execute_items,
    execute_metadata,
    execute_spine,
    execute_toc,
)

app = typer.Typer(
    name="epub-decoder",
    help="Inspect EPUB files: metadata, manifest, spine and table of contents.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log skipped entries and resolution steps",
        ),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Fail on table-of-contents links missing from the manifest",
        ),
    ] = False,
) -> None:
    """Inspect EPUB files: metadata, manifest, spine and table of contents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    ctx.obj = {"strict": strict}


def _run(ctx: typer.Context, command, book_path: Path) -> None:
    try:
        command(book_path=book_path, strict=ctx.obj["strict"], console=console)
    except Exception as e:
        console.print(f"[red]Error reading file: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def info(ctx: typer.Context, book_path: BookPath) -> None:
    """Display book metadata and resource counts."""
    _run(ctx, execute_info, book_path)


@app.command()
def toc(ctx: typer.Context, book_path: BookPath) -> None:
    """Display the resolved table of contents."""
    _run(ctx, execute_toc, book_path)


@app.command()
def spine(ctx: typer.Context, book_path: BookPath) -> None:
    """Display the spine in reading order."""
    _run(ctx, execute_spine, book_path)


@app.command()
def items(ctx: typer.Context, book_path: BookPath) -> None:
    """Display manifest resources."""
    _run(ctx, execute_items, book_path)


@app.command()
def metadata(ctx: typer.Context, book_path: BookPath) -> None:
    """Display metadata records with their refinements."""
    _run(ctx, execute_metadata, book_path)


@app.command()
def extract(
    ctx: typer.Context,
    book_path: BookPath,
    reading_order: Annotated[
        int,
        typer.Argument(
            help="Table of contents entry to extract (see 'epub-decoder toc')",
            min=1,
        ),
    ],
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format: markdown, text, or html",
        ),
    ] = "markdown",
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write to this file instead of the terminal",
        ),
    ] = None,
) -> None:
    """Print the content of one table-of-contents entry."""
    if output_format not in ("markdown", "text", "html"):
        console.print(
            f"[red]Invalid format: {output_format}. Use markdown, text, or html.[/]"
        )
        raise typer.Exit(1)

    try:
        execute_extract(
            book_path=book_path,
            reading_order=reading_order,
            output_format=output_format,  # type: ignore
            output_file=output,
            strict=ctx.obj["strict"],
            console=console,
        )
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
