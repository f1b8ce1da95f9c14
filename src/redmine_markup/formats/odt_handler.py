"""OpenDocument Text (.odt) file handler."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from odf.namespaces import FONS, STYLENS, TABLENS, TEXTNS
from odf.opendocument import load

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

PARAGRAPH_TAGS = {(TEXTNS, "p"), (TEXTNS, "h")}
ROW_GROUP_TAGS = {
    (TABLENS, "table-header-rows"),
    (TABLENS, "table-rows"),
    (TABLENS, "table-row-group"),
}


@dataclass
class _StyleInfo:
    """Text properties declared by one named ODF style."""

    parent: Optional[str] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    font: Optional[str] = None


class ODTHandler(FormatHandler):
    """Handler for OpenDocument Text (.odt) files.

    Uses odfpy to walk ``office:text``. Paragraph and span styles are
    resolved through their parent chain, fonts declared with a fixed
    pitch set the fixed-pitch flag, sections become nested frames and
    tables keep their grid.
    """

    def __init__(self) -> None:
        self._styles: dict[str, _StyleInfo] = {}
        self._fixed_fonts: set[str] = set()
        self._numbered_lists: set[str] = set()

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".odt",)

    def read(self, path: Path) -> Document:
        """Build a document from an ODT file."""
        odt = load(path)
        self._styles = self._collect_styles(odt)
        self._fixed_fonts = self._collect_fixed_fonts(odt)
        self._numbered_lists = self._collect_numbered_lists(odt)

        document = Document(metadata={"source": "odt"})
        self._fill(document.root_frame, odt.text)
        return document

    # ------------------------------------------------------------------
    # Style tables
    # ------------------------------------------------------------------

    def _collect_styles(self, odt) -> dict[str, _StyleInfo]:
        styles: dict[str, _StyleInfo] = {}
        for root in (odt.styles, odt.automaticstyles):
            for style in _children(root, (STYLENS, "style")):
                name = style.getAttrNS(STYLENS, "name")
                if not name:
                    continue
                info = _StyleInfo(parent=style.getAttrNS(STYLENS, "parent-style-name"))
                for props in _children(style, (STYLENS, "text-properties")):
                    weight = props.getAttrNS(FONS, "font-weight")
                    if weight:
                        info.bold = weight == "bold" or (
                            weight.isdigit() and int(weight) >= 600
                        )
                    font_style = props.getAttrNS(FONS, "font-style")
                    if font_style:
                        info.italic = font_style in ("italic", "oblique")
                    underline = props.getAttrNS(STYLENS, "text-underline-style")
                    if underline:
                        info.underline = underline != "none"
                    font = props.getAttrNS(STYLENS, "font-name") or props.getAttrNS(
                        FONS, "font-family"
                    )
                    if font:
                        info.font = font.strip("'\"")
                styles[name] = info
        return styles

    def _collect_fixed_fonts(self, odt) -> set[str]:
        fonts: set[str] = set()
        for face in _children(odt.fontfacedecls, (STYLENS, "font-face")):
            if face.getAttrNS(STYLENS, "font-pitch") == "fixed":
                fonts.add(face.getAttrNS(STYLENS, "name"))
        return fonts

    def _collect_numbered_lists(self, odt) -> set[str]:
        numbered: set[str] = set()
        for root in (odt.styles, odt.automaticstyles):
            for list_style in _children(root, (TEXTNS, "list-style")):
                levels = [
                    node for node in list_style.childNodes
                    if getattr(node, "qname", None) is not None
                ]
                if levels and levels[0].qname == (TEXTNS, "list-level-style-number"):
                    numbered.add(list_style.getAttrNS(STYLENS, "name"))
        return numbered

    def _resolve(
        self, style_name: Optional[str], style: TextStyle, font: str
    ) -> tuple[TextStyle, str]:
        """Apply a named style (and its ancestors) over an inherited format."""
        chain: list[_StyleInfo] = []
        seen: set[str] = set()
        while style_name and style_name in self._styles and style_name not in seen:
            seen.add(style_name)
            info = self._styles[style_name]
            chain.append(info)
            style_name = info.parent

        # Nearest style wins, so apply from the root of the chain down
        for info in reversed(chain):
            for flag, value in (
                (TextStyle.BOLD, info.bold),
                (TextStyle.ITALIC, info.italic),
                (TextStyle.UNDERLINE, info.underline),
            ):
                if value is True:
                    style |= flag
                elif value is False:
                    style &= ~flag
            if info.font:
                font = info.font
                if font in self._fixed_fonts:
                    style |= TextStyle.FIXED_PITCH
                else:
                    style &= ~TextStyle.FIXED_PITCH
        return style, font

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def _fill(self, container: Container, element, prefix: Optional[str] = None) -> None:
        """Append the block-level children of an ODF element to a container."""
        for node in element.childNodes:
            qname = getattr(node, "qname", None)
            if qname in PARAGRAPH_TAGS:
                self._paragraph(container, node, prefix)
                prefix = None
            elif qname == (TEXTNS, "list"):
                self._list(container, node)
            elif qname == (TEXTNS, "section"):
                frame = Frame()
                container.children.append(frame)
                self._fill(frame, node)
            elif qname == (TABLENS, "table"):
                container.children.append(self._table(node))
        if prefix:
            container.add_block().append(prefix)

    def _paragraph(self, container: Container, paragraph, prefix: Optional[str]) -> None:
        style, font = self._resolve(
            paragraph.getAttrNS(TEXTNS, "style-name"), TextStyle.NONE, ""
        )
        block = container.add_block()
        if prefix:
            block.append(prefix)
        for line in self._inline(paragraph, style, font, block, container):
            block = line

    def _inline(self, element, style: TextStyle, font: str, block: Block, container: Container):
        """Append inline content; yields each new block a line break starts."""
        for node in element.childNodes:
            if node.nodeType == node.TEXT_NODE:
                block.append(str(node), style, font)
                continue
            qname = getattr(node, "qname", None)
            if qname == (TEXTNS, "s"):
                count = node.getAttrNS(TEXTNS, "c")
                block.append(" " * (int(count) if count else 1), style, font)
            elif qname == (TEXTNS, "tab"):
                block.append("\t", style, font)
            elif qname == (TEXTNS, "line-break"):
                block = container.add_block()
                yield block
            elif qname in ((TEXTNS, "note"), (TEXTNS, "bookmark-start")):
                continue
            else:
                span_style, span_font = style, font
                if qname == (TEXTNS, "span"):
                    span_style, span_font = self._resolve(
                        node.getAttrNS(TEXTNS, "style-name"), style, font
                    )
                for line in self._inline(node, span_style, span_font, block, container):
                    block = line
                    yield block

    def _list(self, container: Container, element, numbered: Optional[bool] = None) -> None:
        if numbered is None:
            numbered = element.getAttrNS(TEXTNS, "style-name") in self._numbered_lists
        number = 1
        for item in _children(element, (TEXTNS, "list-item")):
            prefix = f"{number}. " if numbered else "· "
            number += 1
            for node in item.childNodes:
                qname = getattr(node, "qname", None)
                if qname == (TEXTNS, "list"):
                    self._list(container, node, numbered)
                elif qname in PARAGRAPH_TAGS:
                    self._paragraph(container, node, prefix)
                    prefix = None
            if prefix:
                container.add_block().append(prefix)

    def _table(self, element) -> Table:
        table = Table()
        for row_node in _table_rows(element):
            row = table.add_row()
            for cell_node in row_node.childNodes:
                qname = getattr(cell_node, "qname", None)
                if qname == (TABLENS, "table-cell"):
                    cell = TableCell()
                    self._fill(cell, cell_node)
                elif qname == (TABLENS, "covered-table-cell"):
                    cell = TableCell()
                else:
                    continue
                repeated = cell_node.getAttrNS(TABLENS, "number-columns-repeated")
                row.extend([cell] * (int(repeated) if repeated else 1))
        return table


def _children(element, qname: tuple[str, str]) -> list:
    """Direct children of an ODF element with the given qualified name."""
    if element is None:
        return []
    return [
        node for node in element.childNodes
        if getattr(node, "qname", None) == qname
    ]


def _table_rows(table) -> list:
    rows = []
    for node in table.childNodes:
        qname = getattr(node, "qname", None)
        if qname == (TABLENS, "table-row"):
            rows.append(node)
        elif qname in ROW_GROUP_TAGS:
            rows.extend(_table_rows(node))
    return rows
