"""Extract command implementation."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from epub_decoder.commands.inspect import load_epub
from epub_decoder.core.content_processor import ContentProcessor, OutputFormat


def execute_extract(
    book_path: Path,
    reading_order: int,
    output_format: OutputFormat,
    output_file: Path | None,
    strict: bool,
    console: Console,
) -> None:
    """Print or write the content of one table-of-contents entry."""
    epub = load_epub(book_path, strict)

    section = next(
        (s for s in epub.navigation if s.reading_order == reading_order), None
    )
    if section is None:
        raise ValueError(
            f"No table of contents entry {reading_order} "
            f"(book has {len(epub.navigation)})"
        )

    processor = ContentProcessor(encoding=epub.config.encoding)
    content = processor.process_section(section, output_format)

    if output_file is not None:
        output_file.write_text(content)
        console.print(f"[green]Wrote {section.content.href} to {output_file}[/]")
        return

    console.print(
        Panel(
            Text(content),
            title=section.title or section.content.href,
            border_style="blue",
        )
    )
