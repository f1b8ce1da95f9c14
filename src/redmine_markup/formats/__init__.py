"""Document format handlers for Redmine Markup."""

from redmine_markup.formats.base import FormatHandler
from redmine_markup.formats.txt_handler import TXTHandler
from redmine_markup.formats.html_handler import HTMLHandler
from redmine_markup.formats.docx_handler import DOCXHandler
from redmine_markup.formats.odt_handler import ODTHandler
from redmine_markup.formats.rtf_handler import RTFHandler

__all__ = [
    "FormatHandler",
    "TXTHandler",
    "HTMLHandler",
    "DOCXHandler",
    "ODTHandler",
    "RTFHandler",
]

# Map file extensions to handlers
HANDLER_MAP: dict[str, type[FormatHandler]] = {
    ".txt": TXTHandler,
    ".text": TXTHandler,
    ".html": HTMLHandler,
    ".htm": HTMLHandler,
    ".docx": DOCXHandler,
    ".odt": ODTHandler,
    ".rtf": RTFHandler,
}

SUPPORTED_EXTENSIONS = tuple(HANDLER_MAP.keys())


def get_handler(extension: str) -> type[FormatHandler]:
    """Get the appropriate handler class for a file extension."""
    ext = extension.lower()
    if ext not in HANDLER_MAP:
        raise ValueError(
            f"Unsupported file format: {ext}. "
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return HANDLER_MAP[ext]
