"""Intermediate Representation for rich-text documents.

This module defines the document tree that format readers build and the
markup formatter walks. A document holds one root frame; frames hold an
ordered mix of nested frames, tables and blocks; blocks hold styled
fragments. Every child node carries an explicit ``kind`` tag so consumers
dispatch on the tag instead of probing types.
"""

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Optional, Union


class NodeKind(Enum):
    """Tag carried by every node that can appear inside a frame."""

    FRAME = "frame"
    TABLE = "table"
    BLOCK = "block"


class TextStyle(Flag):
    """Character styling flags (combinable with |)."""

    NONE = 0
    BOLD = auto()
    ITALIC = auto()
    UNDERLINE = auto()
    FIXED_PITCH = auto()


@dataclass(frozen=True)
class CharFormat:
    """Character format shared by every character of a fragment.

    Attributes:
        style: Combined style flags
        font_family: Font family name as reported by the source document
    """

    style: TextStyle = TextStyle.NONE
    font_family: str = ""

    @property
    def bold(self) -> bool:
        return TextStyle.BOLD in self.style

    @property
    def italic(self) -> bool:
        return TextStyle.ITALIC in self.style

    @property
    def underline(self) -> bool:
        return TextStyle.UNDERLINE in self.style

    @property
    def fixed_pitch(self) -> bool:
        """Check the explicit fixed-pitch flag (font family not considered)."""
        return TextStyle.FIXED_PITCH in self.style


PLAIN = CharFormat()


@dataclass(frozen=True)
class Fragment:
    """A maximal run of text sharing one character format."""

    text: str
    format: CharFormat = PLAIN

    def __str__(self) -> str:
        return self.text


@dataclass(eq=False)
class Block:
    """A paragraph-level node holding an ordered list of fragments.

    Attributes:
        fragments: Fragments in reading order
    """

    fragments: list[Fragment] = field(default_factory=list)

    kind = NodeKind.BLOCK

    @property
    def plain_text(self) -> str:
        """Get the plain text content without styling."""
        return "".join(fragment.text for fragment in self.fragments)

    def append(
        self,
        text: str,
        style: TextStyle = TextStyle.NONE,
        font_family: str = "",
    ) -> None:
        """Append a run of text to this block.

        A run with the same format as the last fragment extends it, so
        fragments always change format at their boundaries.
        """
        if not text:
            return
        char_format = CharFormat(style=style, font_family=font_family)
        if self.fragments and self.fragments[-1].format == char_format:
            last = self.fragments.pop()
            text = last.text + text
        self.fragments.append(Fragment(text=text, format=char_format))

    def is_empty(self) -> bool:
        return not self.fragments

    def __str__(self) -> str:
        return self.plain_text


@dataclass(eq=False)
class Frame:
    """A container holding an ordered list of frames, tables and blocks."""

    children: list["Node"] = field(default_factory=list)

    kind = NodeKind.FRAME

    def add_block(self, block: Optional[Block] = None) -> Block:
        """Append a block (a new empty one if omitted) and return it."""
        if block is None:
            block = Block()
        self.children.append(block)
        return block

    def add_frame(self, frame: Optional["Frame"] = None) -> "Frame":
        """Append a nested frame (a new empty one if omitted) and return it."""
        if frame is None:
            frame = Frame()
        self.children.append(frame)
        return frame

    def add_table(self, table: "Table") -> "Table":
        """Append a table and return it."""
        self.children.append(table)
        return table


@dataclass(eq=False)
class TableCell:
    """Content of one table cell; a frame-like sequence of children."""

    children: list["Node"] = field(default_factory=list)

    def add_block(self, block: Optional[Block] = None) -> Block:
        if block is None:
            block = Block()
        self.children.append(block)
        return block

    @property
    def plain_text(self) -> str:
        return "".join(
            child.plain_text for child in self.children
            if child.kind is NodeKind.BLOCK
        )


@dataclass(eq=False)
class Table(Frame):
    """A frame laid out as a grid of cells.

    Attributes:
        cells: Row-major grid; rows may be ragged
    """

    cells: list[list[TableCell]] = field(default_factory=list)

    kind = NodeKind.TABLE

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def columns(self) -> int:
        """Width of the widest row."""
        return max((len(row) for row in self.cells), default=0)

    def cell_at(self, row: int, column: int) -> TableCell:
        """Return the cell at a position, or an empty cell past a short row."""
        if row < 0 or column < 0:
            raise IndexError(f"Cell position out of range: ({row}, {column})")
        cells = self.cells[row]
        if column < len(cells):
            return cells[column]
        return TableCell()

    def add_row(self, cells: Optional[list[TableCell]] = None) -> list[TableCell]:
        """Append a row of cells and return it."""
        row = list(cells) if cells is not None else []
        self.cells.append(row)
        return row


Node = Union[Frame, Table, Block]


@dataclass(eq=False)
class Document:
    """Complete document as supplied by a reader.

    Attributes:
        root_frame: The single top-level frame
        metadata: Additional metadata from the source file
    """

    root_frame: Frame = field(default_factory=Frame)
    metadata: dict = field(default_factory=dict)

    @property
    def plain_text(self) -> str:
        """Get the text of the top-level blocks without styling."""
        return "\n".join(
            child.plain_text for child in self.root_frame.children
            if child.kind is NodeKind.BLOCK
        )
