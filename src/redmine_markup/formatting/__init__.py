"""Document IR and Redmine markup rendering."""

from redmine_markup.formatting.ir import (
    NodeKind,
    TextStyle,
    CharFormat,
    Fragment,
    Block,
    Frame,
    TableCell,
    Table,
    Document,
)
from redmine_markup.formatting.errors import MarkupError, StructuralError
from redmine_markup.formatting.markup import RedmineFormatter, to_redmine

__all__ = [
    "NodeKind",
    "TextStyle",
    "CharFormat",
    "Fragment",
    "Block",
    "Frame",
    "TableCell",
    "Table",
    "Document",
    "MarkupError",
    "StructuralError",
    "RedmineFormatter",
    "to_redmine",
]
