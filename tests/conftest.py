"""Pytest fixtures for Redmine Markup tests."""

import pytest
from pathlib import Path

from redmine_markup import config
from redmine_markup.formatting.ir import (
    Block,
    Document,
    Frame,
    Table,
    TableCell,
    TextStyle,
)
from redmine_markup.formatting.markup import RedmineFormatter


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Give every test fresh settings and no stray environment overrides."""
    for name in (
        "REDMINE_MARKUP_MAX_DEPTH",
        "REDMINE_MARKUP_CODE_FONTS",
        "REDMINE_MARKUP_SUFFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    config._settings = None
    yield
    config._settings = None


@pytest.fixture
def formatter() -> RedmineFormatter:
    """Create a formatter with default options."""
    return RedmineFormatter()


def _build_block(*runs) -> Block:
    block = Block()
    for run in runs:
        if isinstance(run, str):
            block.append(run)
        else:
            block.append(*run)
    return block


def _build_table(rows: list[list[str]]) -> Table:
    table = Table()
    for texts in rows:
        row = table.add_row()
        for text in texts:
            cell = TableCell()
            cell.add_block(_build_block(text))
            row.append(cell)
    return table


@pytest.fixture
def make_block():
    """Builder for blocks from (text, style) pairs or bare strings."""
    return _build_block


@pytest.fixture
def make_table():
    """Builder for tables whose cells each hold one plain block."""
    return _build_table


@pytest.fixture
def sample_document(make_block, make_table) -> Document:
    """A document with styled text, a list, a table and a nested frame."""
    document = Document()
    root = document.root_frame

    root.add_block(make_block("Status: ", ("done", TextStyle.BOLD)))
    root.add_block(make_block("· first item"))
    root.add_block(make_block("2. second item"))
    root.add_table(make_table([["A", "B"], ["C", "D"]]))

    quote = root.add_frame(Frame())
    quote.add_block(make_block(("quoted", TextStyle.ITALIC)))

    return document


@pytest.fixture
def tmp_text_file(tmp_path: Path) -> Path:
    """Create a temporary text file for testing."""
    file_path = tmp_path / "notes.txt"
    file_path.write_text("Hello\n· item one\n1. step one", encoding="utf-8")
    return file_path
