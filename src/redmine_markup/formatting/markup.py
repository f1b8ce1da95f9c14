"""Redmine (Textile) markup rendering for the document IR."""

import logging
import re
from typing import Iterable, Optional

from redmine_markup.formatting.errors import StructuralError
from redmine_markup.formatting.ir import (
    Block,
    Document,
    Fragment,
    Frame,
    NodeKind,
    Table,
    TableCell,
)

logger = logging.getLogger(__name__)

DEFAULT_CODE_FONTS = ("Courier", "Courier New")
DEFAULT_MAX_DEPTH = 200
# Each nesting level costs up to two interpreter stack frames
MAX_DEPTH_LIMIT = 400


class RedmineFormatter:
    """Render a document tree as Redmine wiki markup.

    Rendering is a single depth-first walk. Frames emit their blocks one per
    line and end with a blank line; tables emit one pipe-delimited row per
    line; fragments are escaped, list-rewritten and style-wrapped.
    """

    # Characters Redmine would read as markup, escaped in this order
    ESCAPED_CHARACTERS = ("*", "@", "+", "_", "-", "!")
    ESCAPE_TEMPLATE = "<notextile>{}</notextile>"

    # Order matters: the bullet pattern is tried first
    BULLET_PATTERN = re.compile(r"^\s*·\s*")
    NUMBERED_PATTERN = re.compile(r"^\s*\d+\.\s")

    UNORDERED_MARKER = "* "
    ORDERED_MARKER = "# "

    CODE_DELIMITER = "@"
    BOLD_DELIMITER = "*"
    ITALIC_DELIMITER = "_"
    UNDERLINE_DELIMITER = "+"

    def __init__(
        self,
        code_fonts: Optional[Iterable[str]] = None,
        max_depth: Optional[int] = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            code_fonts: Font families rendered as code without the
                fixed-pitch flag (default: Courier, Courier New)
            max_depth: Deepest frame/table nesting accepted before
                raising StructuralError
        """
        if code_fonts is None:
            code_fonts = DEFAULT_CODE_FONTS
        self.code_fonts = frozenset(font.casefold() for font in code_fonts)
        self.max_depth = DEFAULT_MAX_DEPTH if max_depth is None else max_depth

    # ------------------------------------------------------------------
    # Fragments and blocks
    # ------------------------------------------------------------------

    def escape(self, text: str) -> str:
        """Wrap every markup-significant character in a notextile escape."""
        for char in self.ESCAPED_CHARACTERS:
            text = text.replace(char, self.ESCAPE_TEMPLATE.format(char))
        return text

    def rewrite_list_prefix(self, text: str) -> str:
        """Turn a leading bullet or ``N. `` into a Redmine list marker."""
        match = self.BULLET_PATTERN.match(text)
        if match:
            return self.UNORDERED_MARKER + text[match.end():]
        match = self.NUMBERED_PATTERN.match(text)
        if match:
            return self.ORDERED_MARKER + text[match.end():]
        return text

    def is_code(self, fragment: Fragment) -> bool:
        """Check whether a fragment should be wrapped as inline code.

        URLs are often shown in a fixed-pitch font, but Redmine has its
        own link formatting, so text starting with ``http`` never is.
        """
        char_format = fragment.format
        monospace = (
            char_format.fixed_pitch
            or char_format.font_family.casefold() in self.code_fonts
        )
        return monospace and not fragment.text.startswith("http")

    def format_fragment(self, fragment: Fragment) -> str:
        """Render one run of identically styled text."""
        formatted = self.rewrite_list_prefix(self.escape(fragment.text))

        char_format = fragment.format
        if self.is_code(fragment):
            formatted = _wrap(formatted, self.CODE_DELIMITER)
        if char_format.bold:
            formatted = _wrap(formatted, self.BOLD_DELIMITER)
        if char_format.italic:
            formatted = _wrap(formatted, self.ITALIC_DELIMITER)
        if char_format.underline:
            formatted = _wrap(formatted, self.UNDERLINE_DELIMITER)

        return formatted

    def format_block(self, block: Block) -> str:
        """Render a block as the concatenation of its fragments."""
        return "".join(
            self.format_fragment(fragment) for fragment in block.fragments
        )

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def format_cell(self, cell: TableCell, depth: int = 0) -> str:
        """Render the contents of a table cell.

        Blocks inside a cell are concatenated without line breaks so the
        row stays on one line; nested frames keep their own separators.
        """
        self._check_depth(depth)
        parts: list[str] = []
        for child in cell.children:
            if child.kind is NodeKind.BLOCK:
                parts.append(self.format_block(child))
            else:
                parts.append(self._format_nested(child, depth + 1))
        return "".join(parts)

    def format_table(self, table: Table, depth: int = 0) -> str:
        """Render a table as ``| a | b |`` rows, one per line."""
        self._check_depth(depth)
        lines: list[str] = []
        for row in range(table.rows):
            cells = [
                self.format_cell(table.cell_at(row, column), depth + 1)
                for column in range(table.columns)
            ]
            lines.append("| " + " | ".join(cells) + " |\n")
        return "".join(lines)

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def format_frame(self, frame: Frame, depth: int = 0) -> str:
        """Render a frame and everything below it.

        Each block is followed by a newline; the frame itself always ends
        with one more newline, even when it has no children.
        """
        self._check_depth(depth)
        parts: list[str] = []
        for child in frame.children:
            if child.kind is NodeKind.BLOCK:
                parts.append(self.format_block(child))
                parts.append("\n")
            else:
                parts.append(self._format_nested(child, depth + 1))
        parts.append("\n")
        return "".join(parts)

    def format_document(self, document: Document) -> str:
        """Render a whole document starting from its root frame.

        Raises:
            StructuralError: If the tree is nested deeper than max_depth or
                deeper than the interpreter stack allows
        """
        try:
            output = self.format_frame(document.root_frame)
        except RecursionError as e:
            raise StructuralError(
                "Document nesting exceeds the interpreter recursion limit "
                "(the tree may contain a cycle)"
            ) from e
        logger.debug("Rendered document to %d characters", len(output))
        return output

    def _format_nested(self, node: Frame, depth: int) -> str:
        """Dispatch a child frame on its kind tag."""
        if node.kind is NodeKind.TABLE:
            return self.format_table(node, depth)
        if node.kind is NodeKind.FRAME:
            return self.format_frame(node, depth)
        raise StructuralError(
            f"Unexpected node kind inside a frame: {node.kind!r}", depth=depth
        )

    def _check_depth(self, depth: int) -> None:
        if depth > self.max_depth:
            raise StructuralError(
                f"Document nesting exceeds {self.max_depth} levels "
                "(the tree may contain a cycle)",
                depth=depth,
            )


def _wrap(text: str, delimiter: str) -> str:
    """Surround text with a markup delimiter."""
    return f"{delimiter}{text}{delimiter}"


def to_redmine(
    document: Document,
    code_fonts: Optional[Iterable[str]] = None,
    max_depth: Optional[int] = None,
) -> str:
    """Convert a document to Redmine markup with a one-off formatter."""
    formatter = RedmineFormatter(code_fonts=code_fonts, max_depth=max_depth)
    return formatter.format_document(document)
