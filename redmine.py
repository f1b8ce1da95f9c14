#!/usr/bin/env python3
"""
Redmine Markup - convert rich-text documents into Redmine wiki markup

Simple usage:
    python redmine.py notes.docx            # Outputs notes-redmine.textile
    python redmine.py page.html --clipboard # Copies the markup to the clipboard
    python redmine.py /folder/path          # Converts all files in folder
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from redmine_markup.cli import app

if __name__ == "__main__":
    app()
