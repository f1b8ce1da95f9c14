"""Redmine Markup - convert rich-text documents into Redmine wiki markup."""

__version__ = "0.1.0"
