"""Conversion orchestrator: read a document, render it, hand it to a sink."""

import logging
import zipfile
from pathlib import Path
from typing import Iterable, Optional

from docx.opc.exceptions import PackageNotFoundError

from redmine_markup.config import get_settings
from redmine_markup.formats import get_handler, SUPPORTED_EXTENSIONS
from redmine_markup.formatting.ir import Document
from redmine_markup.formatting.markup import RedmineFormatter
from redmine_markup.sinks import OutputSink

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Error reading a document for conversion."""

    pass


class MarkupConverter:
    """Orchestrates the conversion pipeline.

    Pipeline:
    1. Pick a format handler by file extension
    2. Read the file into the document IR
    3. Render the IR as Redmine markup
    4. Optionally hand the markup to an output sink
    """

    def __init__(
        self,
        code_fonts: Optional[Iterable[str]] = None,
        max_depth: Optional[int] = None,
    ) -> None:
        """Initialize the converter.

        Args:
            code_fonts: Font families rendered as inline code
                (default from REDMINE_MARKUP_CODE_FONTS)
            max_depth: Nesting limit (default from REDMINE_MARKUP_MAX_DEPTH)
        """
        settings = get_settings()
        self.code_fonts = list(code_fonts) if code_fonts is not None else settings.code_fonts
        self.max_depth = max_depth if max_depth is not None else settings.max_depth
        self.formatter = RedmineFormatter(
            code_fonts=self.code_fonts,
            max_depth=self.max_depth,
        )

    def convert(self, document: Document) -> str:
        """Render an already-built document.

        Raises:
            StructuralError: If the tree is nested deeper than max_depth
        """
        return self.formatter.format_document(document)

    def read_file(self, input_path: Path) -> Document:
        """Read a file into the document IR.

        Raises:
            ConversionError: If the file is missing, unsupported or unreadable
        """
        if not input_path.exists():
            raise ConversionError(f"Input file not found: {input_path}")

        ext = input_path.suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise ConversionError(
                f"Unsupported format: {ext}. "
                f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
            )

        handler = get_handler(ext)()
        logger.debug("Reading %s with %s", input_path, type(handler).__name__)
        try:
            return handler.read(input_path)
        except (
            OSError,
            ValueError,
            KeyError,
            zipfile.BadZipFile,
            PackageNotFoundError,
        ) as e:
            raise ConversionError(f"Cannot read {input_path.name}: {e}") from e

    def convert_file(self, input_path: Path) -> str:
        """Read a file and return its Redmine markup."""
        return self.convert(self.read_file(input_path))

    def convert_file_to(self, input_path: Path, sink: OutputSink) -> str:
        """Convert a file and deliver the markup to a sink.

        Returns:
            The markup that was delivered
        """
        markup = self.convert_file(input_path)
        sink.emit(markup)
        return markup
