"""Microsoft Word (.docx) file handler."""

from pathlib import Path
from typing import Optional, Union

from docx import Document as open_docx
from docx.table import Table as DocxTable
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from redmine_markup.formats.base import FormatHandler
from redmine_markup.formatting.ir import (
    Block,
    Document,
    Frame,
    Table,
    TableCell,
    TextStyle,
)

Container = Union[Frame, TableCell]

BULLET_STYLE_PREFIX = "List Bullet"
NUMBER_STYLE_PREFIX = "List Number"


class DOCXHandler(FormatHandler):
    """Handler for Microsoft Word (.docx) files.

    Uses python-docx to walk the body in document order. Runs keep their
    bold, italic and underline flags and font name; tables keep their grid
    with nested content. Merged cells repeat their content in every grid
    position they cover, as python-docx reports them.
    """

    def __init__(self) -> None:
        # Running counter for consecutive "List Number" paragraphs
        self._list_number = 0

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".docx",)

    def read(self, path: Path) -> Document:
        """Build a document from a DOCX file."""
        docx = open_docx(path)
        document = Document(metadata={"source": "docx"})
        title = docx.core_properties.title
        if title:
            document.metadata["title"] = title

        self._list_number = 0
        self._fill(document.root_frame, docx.iter_inner_content())
        return document

    def _fill(self, container: Container, items) -> None:
        """Append paragraphs and tables to a frame or cell in order."""
        for item in items:
            if isinstance(item, Paragraph):
                container.children.append(self._paragraph_to_block(item))
            elif isinstance(item, DocxTable):
                self._list_number = 0
                container.children.append(self._table(item))

    def _paragraph_to_block(self, paragraph: Paragraph) -> Block:
        block = Block()

        style_name = paragraph.style.name if paragraph.style is not None else ""
        if style_name.startswith(NUMBER_STYLE_PREFIX):
            self._list_number += 1
            block.append(f"{self._list_number}. ")
        else:
            self._list_number = 0
            if style_name.startswith(BULLET_STYLE_PREFIX):
                block.append("· ")

        for run in paragraph.runs:
            style, font = self._run_format(run, paragraph)
            block.append(run.text, style, font)
        return block

    def _run_format(self, run: Run, paragraph: Paragraph) -> tuple[TextStyle, str]:
        """Resolve a run's effective format, falling back to its styles."""
        style = TextStyle.NONE
        if _inherited(run, paragraph, "bold"):
            style |= TextStyle.BOLD
        if _inherited(run, paragraph, "italic"):
            style |= TextStyle.ITALIC
        if _inherited(run, paragraph, "underline"):
            style |= TextStyle.UNDERLINE

        run_style = run.style.name if run.style is not None else ""
        if "code" in run_style.lower():
            style |= TextStyle.FIXED_PITCH

        font = _inherited(run, paragraph, "name") or ""
        return style, font

    def _table(self, docx_table: DocxTable) -> Table:
        table = Table()
        for docx_row in docx_table.rows:
            row = table.add_row()
            for docx_cell in docx_row.cells:
                cell = TableCell()
                self._fill(cell, docx_cell.iter_inner_content())
                row.append(cell)
        self._list_number = 0
        return table


def _inherited(run: Run, paragraph: Paragraph, attribute: str) -> Optional[object]:
    """Read a font attribute from the run, then its style, then the paragraph's.

    Character and paragraph styles are followed through their base styles.
    """
    value = getattr(run.font, attribute)
    if value is not None:
        return value

    for style in (run.style, paragraph.style):
        while style is not None:
            value = getattr(style.font, attribute)
            if value is not None:
                return value
            style = style.base_style
    return None
