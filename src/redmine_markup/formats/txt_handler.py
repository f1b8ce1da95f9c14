"""Plain text file handler."""

from pathlib import Path

from redmine_markup.formats.base import FormatHandler
from redmine_markup.formatting.ir import Document


class TXTHandler(FormatHandler):
    """Handler for plain text (.txt) files.

    Every line becomes an unstyled block, so list markers typed by hand
    (``· item`` or ``1. item``) still turn into Redmine lists.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".txt", ".text")

    def read(self, path: Path) -> Document:
        """Read plain text from file."""
        return self.read_text_lines(path.read_text(encoding="utf-8"))
