"""Reading messages from Maildir files.

Parses RFC 2822 files with Python's email.parser module, exposes flags
decoded from the filename, and renders one-line display strings from
templates.
"""

from lettre.read.format import (
    DEFAULT_DATE_FORMATS,
    DEFAULT_INDEX_FORMAT,
    DEFAULT_MAILDIR_FORMAT,
    FolderToken,
    Token,
    expand,
    expand_folder,
)
from lettre.read.mime import parse_message
from lettre.read.models import Message

__all__ = [
    "Message",
    "parse_message",
    "expand",
    "expand_folder",
    "Token",
    "FolderToken",
    "DEFAULT_MAILDIR_FORMAT",
    "DEFAULT_INDEX_FORMAT",
    "DEFAULT_DATE_FORMATS",
]
