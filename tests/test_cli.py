"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from conftest import build_nav, make_epub, sample_files
from epub_decoder import cli
from epub_decoder.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    # Keep table cells on one line
    monkeypatch.setattr(cli.console, "width", 200)


def test_info(sample_epub_path):
    result = runner.invoke(app, ["info", str(sample_epub_path)])

    assert result.exit_code == 0
    assert "Sample Book" in result.output
    assert "Ada Writer" in result.output
    assert "images/cover.jpg" in result.output


def test_toc(sample_epub_path):
    result = runner.invoke(app, ["toc", str(sample_epub_path)])

    assert result.exit_code == 0
    assert "Chapter One" in result.output
    assert "Part A" in result.output
    assert "NCX One" not in result.output


def test_spine(sample_epub_path):
    result = runner.invoke(app, ["spine", str(sample_epub_path)])

    assert result.exit_code == 0
    assert "ch3.xhtml" in result.output


def test_items(sample_epub_path):
    result = runner.invoke(app, ["items", str(sample_epub_path)])

    assert result.exit_code == 0
    assert "ch1_overlay" in result.output
    assert "cover-image" in result.output


def test_metadata(sample_epub_path):
    result = runner.invoke(app, ["metadata", str(sample_epub_path)])

    assert result.exit_code == 0
    assert "dc:creator" in result.output
    assert "role" in result.output


def test_extract_text(sample_epub_path):
    result = runner.invoke(app, ["extract", str(sample_epub_path), "3", "--format", "text"])

    assert result.exit_code == 0
    assert "Chapter Three" in result.output


def test_extract_to_file(sample_epub_path, tmp_path):
    out = tmp_path / "out.md"
    result = runner.invoke(
        app, ["extract", str(sample_epub_path), "1", "--output", str(out)]
    )

    assert result.exit_code == 0
    assert "# Chapter One" in out.read_text()


def test_extract_unknown_entry(sample_epub_path):
    result = runner.invoke(app, ["extract", str(sample_epub_path), "99"])

    assert result.exit_code == 1
    assert "No table of contents entry 99" in result.output


def test_extract_invalid_format(sample_epub_path):
    result = runner.invoke(app, ["extract", str(sample_epub_path), "1", "--format", "pdf"])

    assert result.exit_code == 1
    assert "Invalid format" in result.output


def test_wrong_extension(tmp_path, sample_epub_bytes):
    path = tmp_path / "book.zip"
    path.write_bytes(sample_epub_bytes)

    result = runner.invoke(app, ["info", str(path)])

    assert result.exit_code == 1
    assert "Unsupported format" in result.output


def test_strict_navigation(tmp_path):
    files = sample_files()
    files["OEBPS/nav.xhtml"] = build_nav([("Ghost", "ghost.xhtml")])
    path = tmp_path / "broken.epub"
    path.write_bytes(make_epub(files))

    lenient = runner.invoke(app, ["toc", str(path)])
    strict = runner.invoke(app, ["--strict", "toc", str(path)])

    assert lenient.exit_code == 0
    assert strict.exit_code == 1
    assert "ghost.xhtml" in strict.output
