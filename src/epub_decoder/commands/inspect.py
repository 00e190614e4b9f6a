"""Inspection commands: info, toc, spine, items, metadata."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from epub_decoder.config import DecoderConfig
from epub_decoder.core.content_processor import ContentProcessor
from epub_decoder.document import Epub
from epub_decoder.errors import ResourceNotFoundError
from epub_decoder.models.metadata import DocumentMetadata, DublinCoreMetadata, Metadata
from epub_decoder.models.section import Section


def load_epub(book_path: Path, strict: bool = False) -> Epub:
    """Open an EPUB with the CLI's configuration."""
    return Epub.from_file(book_path, DecoderConfig(strict_navigation=strict))


def _word_count(processor: ContentProcessor, section: Section) -> str:
    try:
        return f"{processor.count_words(section.content.file_content):,}"
    except ResourceNotFoundError:
        return "missing"


def _section_title(processor: ContentProcessor, section: Section) -> str:
    if section.title:
        return section.title
    try:
        return processor.extract_title(section.content.file_content) or section.content.file_name
    except ResourceNotFoundError:
        return section.content.file_name


def display_sections(
    sections: list[Section],
    console: Console,
    title: str,
    show_linear: bool = False,
) -> None:
    """Display sections as a table with word counts."""
    processor = ContentProcessor()
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Href", style="dim")
    if show_linear:
        table.add_column("Linear", justify="center")
    table.add_column("Words", justify="right", style="green")

    for section in sections:
        display_title = _section_title(processor, section)
        if section.sub_section:
            display_title = f"  {display_title}"

        row = [str(section.reading_order), escape(display_title), escape(section.content.href)]
        if show_linear:
            row.append("yes" if section.linear else "no")
        row.append(_word_count(processor, section))
        table.add_row(*row)

    console.print(table)


def execute_info(book_path: Path, strict: bool, console: Console) -> None:
    """Execute the info command."""
    epub = load_epub(book_path, strict)
    cover = epub.cover

    info_lines = [
        f"[bold]{escape(epub.title) or 'Unknown Title'}[/]",
        "",
        f"[dim]Author(s):[/] {escape(', '.join(epub.authors)) or 'Unknown'}",
        f"[dim]Language:[/] {epub.language or 'Unknown'}",
        f"[dim]Identifier:[/] {epub.identifier or 'Unknown'}",
        f"[dim]Package document:[/] {epub.root_file_path}",
        f"[dim]Cover:[/] {cover.href if cover else 'None'}",
        "",
        f"[dim]Resources:[/] {len(epub.items)}",
        f"[dim]Spine sections:[/] {len(epub.sections)}",
        f"[dim]Table of contents entries:[/] {len(epub.navigation)}",
    ]

    console.print()
    console.print(Panel("\n".join(info_lines), title="Book Information", border_style="green"))
    console.print()


def execute_toc(book_path: Path, strict: bool, console: Console) -> None:
    """Execute the toc command."""
    epub = load_epub(book_path, strict)
    if not epub.navigation:
        console.print("[yellow]No table of contents found.[/]")
        return
    display_sections(epub.navigation, console, title="Table of Contents")


def execute_spine(book_path: Path, strict: bool, console: Console) -> None:
    """Execute the spine command."""
    epub = load_epub(book_path, strict)
    display_sections(epub.sections, console, title="Spine", show_linear=True)


def execute_items(book_path: Path, strict: bool, console: Console) -> None:
    """Execute the items command."""
    epub = load_epub(book_path, strict)

    table = Table(title="Manifest", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="white")
    table.add_column("Href", style="dim")
    table.add_column("Media Type")
    table.add_column("Properties", style="cyan")
    table.add_column("Overlay", style="dim")

    for item in epub.items:
        table.add_row(
            item.id,
            item.href,
            item.media_type.value,
            ", ".join(p.value for p in item.properties),
            item.media_overlay.id if item.media_overlay else "",
        )

    console.print(table)


def _metadata_label(record: Metadata) -> str:
    if isinstance(record, DublinCoreMetadata):
        label = f"[bold]dc:{record.key}[/] {escape(record.value or '')}"
    else:
        key = record.property or record.name or "meta"
        label = f"[cyan]{escape(key)}[/] {escape(record.value or '')}"
    if record.id:
        label += f" [dim]#{record.id}[/]"
    return label


def _add_refinements(node: Tree, refinements: list[DocumentMetadata]) -> None:
    for refinement in refinements:
        child = node.add(_metadata_label(refinement))
        _add_refinements(child, refinement.refinements)


def execute_metadata(book_path: Path, strict: bool, console: Console) -> None:
    """Execute the metadata command."""
    epub = load_epub(book_path, strict)

    tree = Tree("[bold green]Metadata[/]")
    for record in epub.metadata:
        node = tree.add(_metadata_label(record))
        _add_refinements(node, record.refinements)

    console.print(tree)
