"""HTML (.html) file handler.

HTML is what rich-text editors and browsers put on the clipboard, so this
is the most faithful source of frames, tables and character formats.
"""

import re
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

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

WHITESPACE = re.compile(r"\s+")

STYLE_TAGS: dict[str, TextStyle] = {
    "b": TextStyle.BOLD,
    "strong": TextStyle.BOLD,
    "th": TextStyle.BOLD,
    "h1": TextStyle.BOLD,
    "h2": TextStyle.BOLD,
    "h3": TextStyle.BOLD,
    "h4": TextStyle.BOLD,
    "h5": TextStyle.BOLD,
    "h6": TextStyle.BOLD,
    "i": TextStyle.ITALIC,
    "em": TextStyle.ITALIC,
    "cite": TextStyle.ITALIC,
    "var": TextStyle.ITALIC,
    "u": TextStyle.UNDERLINE,
    "ins": TextStyle.UNDERLINE,
    "code": TextStyle.FIXED_PITCH,
    "tt": TextStyle.FIXED_PITCH,
    "kbd": TextStyle.FIXED_PITCH,
    "samp": TextStyle.FIXED_PITCH,
    "pre": TextStyle.FIXED_PITCH,
}

BLOCK_TAGS = {
    "p", "h1", "h2", "h3", "h4", "h5", "h6", "pre", "dt", "dd", "address",
}
CONTAINER_TAGS = {
    "div", "section", "article", "header", "footer", "main", "nav",
    "aside", "figure", "form", "center", "dl", "body", "html",
}
FRAME_TAGS = {"blockquote"}
SKIPPED_TAGS = {"head", "script", "style", "title", "template", "caption"}
ROW_GROUP_TAGS = {"thead", "tbody", "tfoot"}


class HTMLHandler(FormatHandler):
    """Handler for HTML (.html, .htm) files.

    Uses BeautifulSoup to walk the markup. Block elements become blocks,
    ``blockquote`` becomes a nested frame, tables keep their grid and list
    items are given a textual ``·`` or ``N.`` prefix.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".html", ".htm")

    def read(self, path: Path) -> Document:
        """Build a document from an HTML file."""
        return self.parse(path.read_text(encoding="utf-8", errors="ignore"))

    def parse(self, html: str) -> Document:
        """Build a document from an HTML string."""
        soup = BeautifulSoup(html, "html.parser")
        document = Document(metadata={"source": "html"})
        if soup.title and soup.title.string:
            document.metadata["title"] = soup.title.string.strip()

        builder = _TreeBuilder()
        builder.walk(soup.body or soup, document.root_frame, TextStyle.NONE, "")
        builder.close()
        return document


class _TreeBuilder:
    """Stateful walk that turns an HTML element tree into IR nodes."""

    def __init__(self) -> None:
        self.current: Optional[Block] = None
        self.pending_prefix: Optional[str] = None

    def walk(
        self,
        element: Tag,
        container: Container,
        style: TextStyle,
        font: str,
        preformatted: bool = False,
    ) -> None:
        for node in element.children:
            self.visit(node, container, style, font, preformatted)

    def visit(
        self,
        node,
        container: Container,
        style: TextStyle,
        font: str,
        preformatted: bool,
    ) -> None:
        if isinstance(node, PreformattedString):
            return
        if isinstance(node, NavigableString):
            self.add_text(str(node), container, style, font, preformatted)
            return
        if not isinstance(node, Tag):
            return

        name = node.name.lower()
        if name in SKIPPED_TAGS:
            return

        style, font = resolve_format(node, style, font)

        if name == "br":
            if self.current is None:
                container.add_block()
            self.close()
        elif name == "table":
            self.close()
            # A list marker cannot lead a table row
            self.pending_prefix = None
            container.children.append(self.build_table(node, style, font))
        elif name in ("ul", "ol"):
            self.close()
            self.walk_list(node, container, style, font, ordered=name == "ol")
        elif name == "li":
            self.walk_list_item(node, container, style, font, "· ")
        elif name in FRAME_TAGS:
            self.close()
            frame = Frame()
            container.children.append(frame)
            self.walk(node, frame, style, font, preformatted)
            self.close()
        elif name in BLOCK_TAGS or name in CONTAINER_TAGS:
            self.close()
            self.walk(node, container, style, font, preformatted or name == "pre")
            self.close()
        else:
            self.walk(node, container, style, font, preformatted)

    def add_text(
        self,
        text: str,
        container: Container,
        style: TextStyle,
        font: str,
        preformatted: bool,
    ) -> None:
        if preformatted:
            lines = text.split("\n")
            if self.current is None and lines and not lines[0]:
                lines = lines[1:]
            for index, line in enumerate(lines):
                if index:
                    self.close()
                if line:
                    self.open_block(container).append(line, style, font)
                elif index:
                    self.open_block(container)
            return

        text = WHITESPACE.sub(" ", text)
        if self.current is None or _ends_with_space(self.current):
            text = text.lstrip()
        if text:
            self.open_block(container).append(text, style, font)

    def open_block(self, container: Container) -> Block:
        """Return the block inline content goes to, starting one if needed."""
        if self.current is None:
            self.current = container.add_block()
            if self.pending_prefix:
                self.current.append(self.pending_prefix)
                self.pending_prefix = None
        return self.current

    def close(self) -> None:
        """Finish the open block, dropping trailing whitespace."""
        block = self.current
        self.current = None
        if block is None or not block.fragments:
            return
        last = block.fragments.pop()
        text = last.text.rstrip(" ")
        if text:
            block.append(text, last.format.style, last.format.font_family)

    def walk_list(
        self,
        node: Tag,
        container: Container,
        style: TextStyle,
        font: str,
        ordered: bool,
    ) -> None:
        number = _int_attribute(node, "start", 1)
        for child in node.children:
            if isinstance(child, Tag) and child.name.lower() == "li":
                prefix = f"{number}. " if ordered else "· "
                number += 1
                self.walk_list_item(child, container, style, font, prefix)
            else:
                self.visit(child, container, style, font, False)

    def walk_list_item(
        self,
        node: Tag,
        container: Container,
        style: TextStyle,
        font: str,
        prefix: str,
    ) -> None:
        self.close()
        self.pending_prefix = prefix
        self.walk(node, container, style, font)
        if self.pending_prefix:
            self.open_block(container)
        self.close()

    def build_table(self, node: Tag, style: TextStyle, font: str) -> Table:
        table = Table()
        for row_node in _table_rows(node):
            row = table.add_row()
            for cell_node in row_node.children:
                if not isinstance(cell_node, Tag):
                    continue
                if cell_node.name.lower() not in ("td", "th"):
                    continue
                cell = TableCell()
                cell_style, cell_font = resolve_format(cell_node, style, font)
                self.walk(cell_node, cell, cell_style, cell_font)
                self.close()
                row.append(cell)
                # Spanned columns stay in the grid as empty cells
                for _ in range(_int_attribute(cell_node, "colspan", 1) - 1):
                    row.append(TableCell())
        return table


def _table_rows(table: Tag) -> list[Tag]:
    """Rows of a table in order, without descending into nested tables."""
    rows: list[Tag] = []
    for child in table.children:
        if not isinstance(child, Tag):
            continue
        name = child.name.lower()
        if name == "tr":
            rows.append(child)
        elif name in ROW_GROUP_TAGS:
            rows.extend(
                row for row in child.children
                if isinstance(row, Tag) and row.name.lower() == "tr"
            )
    return rows


def _ends_with_space(block: Block) -> bool:
    """Collapse whitespace across inline element boundaries."""
    text = block.plain_text
    return not text or text.endswith(" ")


def _int_attribute(node: Tag, name: str, default: int) -> int:
    try:
        return int(node.get(name, default))
    except (TypeError, ValueError):
        return default


def parse_style_attribute(value: str) -> dict[str, str]:
    """Parse an inline ``style`` attribute into lower-cased declarations."""
    declarations: dict[str, str] = {}
    for declaration in value.split(";"):
        if ":" not in declaration:
            continue
        prop, _, prop_value = declaration.partition(":")
        declarations[prop.strip().lower()] = prop_value.strip().lower()
    return declarations


def resolve_format(node: Tag, style: TextStyle, font: str) -> tuple[TextStyle, str]:
    """Apply an element's tag and inline CSS on top of an inherited format."""
    style |= STYLE_TAGS.get(node.name.lower(), TextStyle.NONE)

    face = node.get("face")
    if node.name.lower() == "font" and face:
        font = face.split(",")[0].strip().strip("'\"")

    declarations = parse_style_attribute(node.get("style") or "")

    weight = declarations.get("font-weight")
    if weight:
        if weight in ("bold", "bolder") or (weight.isdigit() and int(weight) >= 600):
            style |= TextStyle.BOLD
        else:
            style &= ~TextStyle.BOLD

    font_style = declarations.get("font-style")
    if font_style:
        if font_style in ("italic", "oblique"):
            style |= TextStyle.ITALIC
        else:
            style &= ~TextStyle.ITALIC

    decoration = declarations.get("text-decoration") or declarations.get(
        "text-decoration-line"
    )
    if decoration:
        if "underline" in decoration:
            style |= TextStyle.UNDERLINE
        elif "none" in decoration:
            style &= ~TextStyle.UNDERLINE

    family = declarations.get("font-family")
    if family:
        families = [name.strip().strip("'\"") for name in family.split(",")]
        font = families[0]
        if "monospace" in families:
            style |= TextStyle.FIXED_PITCH

    return style, font
