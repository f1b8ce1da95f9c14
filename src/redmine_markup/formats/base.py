"""Abstract base class for document format handlers."""

from abc import ABC, abstractmethod
from pathlib import Path

from redmine_markup.formatting.ir import Block, Document


class FormatHandler(ABC):
    """Abstract base class for document format handlers.

    Each handler reads one file format into the document IR. Handlers
    never render markup themselves.
    """

    @property
    @abstractmethod
    def supported_extensions(self) -> tuple[str, ...]:
        """Return tuple of supported file extensions (e.g., ('.docx',))."""
        ...

    @abstractmethod
    def read(self, path: Path) -> Document:
        """Build a document tree from a file.

        Args:
            path: Path to the input document

        Returns:
            Document whose root frame mirrors the file's structure
        """
        ...

    def read_text_lines(self, text: str) -> Document:
        """Build a document with one plain block per line of text."""
        document = Document(metadata={"source": "text"})
        for line in text.splitlines():
            block = document.root_frame.add_block(Block())
            block.append(line)
        return document
