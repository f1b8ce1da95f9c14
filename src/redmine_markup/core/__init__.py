"""Conversion pipeline for Redmine Markup."""

from redmine_markup.core.converter import ConversionError, MarkupConverter

__all__ = [
    "ConversionError",
    "MarkupConverter",
]
