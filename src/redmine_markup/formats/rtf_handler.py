"""Rich Text Format (.rtf) file handler."""

from pathlib import Path

from striprtf.striprtf import rtf_to_text

from redmine_markup.formats.base import FormatHandler
from redmine_markup.formatting.ir import Document


class RTFHandler(FormatHandler):
    """Handler for Rich Text Format (.rtf) files.

    Uses striprtf for reading RTF files. Character styling is not
    recovered; each line of text becomes a plain block.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".rtf",)

    def read(self, path: Path) -> Document:
        """Extract text from RTF file."""
        rtf_content = path.read_text(encoding="utf-8", errors="ignore")
        document = self.read_text_lines(rtf_to_text(rtf_content))
        document.metadata["source"] = "rtf"
        return document
