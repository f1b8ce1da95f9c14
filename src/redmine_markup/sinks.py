"""Destinations for finished markup.

A conversion hands its complete output to exactly one sink, once.
"""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO

logger = logging.getLogger(__name__)


class SinkError(Exception):
    """A destination could not accept the markup."""

    pass


class OutputSink(ABC):
    """Abstract destination for converted markup."""

    @abstractmethod
    def emit(self, text: str) -> None:
        """Deliver the complete markup string."""
        ...


class StdoutSink(OutputSink):
    """Write markup to standard output (or any text stream)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream

    def emit(self, text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(text)
        stream.flush()


class FileSink(OutputSink):
    """Write markup to a UTF-8 text file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def emit(self, text: str) -> None:
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise SinkError(f"Cannot write {self.path}: {e}") from e
        logger.debug("Wrote %d characters to %s", len(text), self.path)


class ClipboardSink(OutputSink):
    """Place markup on the system clipboard as plain text.

    Uses a hidden Tk root window. On X11 the text only outlives the
    process when a clipboard manager is running.
    """

    def emit(self, text: str) -> None:
        try:
            import tkinter
        except ImportError as e:
            raise SinkError("Clipboard support needs tkinter") from e

        try:
            window = tkinter.Tk()
        except tkinter.TclError as e:
            raise SinkError(f"No display available for the clipboard: {e}") from e

        try:
            window.withdraw()
            window.clipboard_clear()
            window.clipboard_append(text)
            # Process the clipboard request before the window goes away
            window.update()
        finally:
            window.destroy()
        logger.debug("Copied %d characters to the clipboard", len(text))
