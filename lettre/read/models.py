"""A single message file in a Maildir."""

import logging
import os
from collections.abc import Sequence
from datetime import datetime
from email.message import Message as MimeMessage

from lettre.errors import MaildirError
from lettre.read.format import DEFAULT_DATE_FORMATS, DEFAULT_INDEX_FORMAT, expand
from lettre.read.mime import body_lines, get_header, parse_message
from lettre.storage import flags as maildir_flags

logger = logging.getLogger(__name__)


class Message:
    """One message file, identified by its current path.

    The path is the only record of the message's flags: every flag query
    decodes it afresh, and every flag change is a rename of the file
    followed by an update of the path. The file is parsed on first header
    or body access and the parse is kept for the life of the object.

    Example:
        msg = Message("/home/me/Maildir/INBOX/new/1700000000.1_1.host")
        if msg.is_new():
            msg.mark_read()
        msg.add_flag("R")
    """

    def __init__(self, path: str | os.PathLike):
        self._path = os.fspath(path)
        self._parsed: MimeMessage | None = None

    def __repr__(self) -> str:
        return f"Message({self._path!r})"

    @property
    def path(self) -> str:
        """Current location of the message file."""
        return self._path

    # --- Flags ---

    @property
    def flags(self) -> str:
        """Effective flags, sorted, e.g. "NR"."""
        return maildir_flags.effective_flags(self._path)

    @property
    def display_flags(self) -> str:
        """Effective flags padded for column display."""
        return maildir_flags.display_flags(self._path)

    def is_new(self) -> bool:
        """True if the message is unread (by location or by flag)."""
        return maildir_flags.NEW_FLAG in self.flags

    def _rename(self, new_path: str) -> bool:
        """Move the file to ``new_path`` and adopt it as the message path.

        Returns:
            False if ``new_path`` is the current path (nothing to do).

        Raises:
            MaildirError: If the target exists or the rename fails. The
                message keeps its old path.
        """
        if new_path == self._path:
            return False

        if os.path.lexists(new_path):
            raise MaildirError(f"Refusing to overwrite existing file {new_path}")

        try:
            os.rename(self._path, new_path)
        except OSError as exc:
            raise MaildirError(
                f"Failed to rename {self._path} to {new_path}: {exc}"
            ) from exc

        logger.info("Renamed %s -> %s", self._path, new_path)
        self._path = new_path
        return True

    def add_flag(self, flag: str) -> bool:
        """Add a flag by renaming the file.

        A flag that is already effectively present is a no-op.

        Returns:
            True if the file was renamed.

        Raises:
            InvalidInputError: If ``flag`` is not a single letter, or the
                result would not fit in the filename suffix.
            MaildirError: If the rename fails.
        """
        return self._rename(maildir_flags.add_flag(self._path, flag))

    def remove_flag(self, flag: str) -> bool:
        """Remove a flag from the filename suffix by renaming the file.

        Returns:
            True if the file was renamed.
        """
        return self._rename(maildir_flags.remove_flag(self._path, flag))

    def mark_read(self) -> bool:
        """Mark as read: new/ -> cur/, or drop a literal N flag."""
        return self._rename(maildir_flags.read_path(self._path))

    def mark_new(self) -> bool:
        """Mark as unread: cur/ -> new/, or add a literal N flag."""
        return self._rename(maildir_flags.unread_path(self._path))

    # --- Content ---

    @property
    def parsed(self) -> MimeMessage:
        """The parsed message, created on first use.

        Raises:
            MaildirError: If the file can't be read.
        """
        if self._parsed is None:
            self._parsed = parse_message(self._path)
        return self._parsed

    def header(self, name: str) -> str:
        """Decoded header value, or "" if the header is missing."""
        return get_header(self.parsed, name)

    @property
    def from_addr(self) -> str:
        return self.header("From")

    @property
    def to(self) -> str:
        return self.header("To")

    @property
    def subject(self) -> str:
        return self.header("Subject")

    @property
    def date_header(self) -> str:
        return self.header("Date")

    def body(self) -> list[str]:
        """Displayable body text as a list of lines."""
        return body_lines(self.parsed)

    def mtime(self) -> datetime | None:
        """Last modification time of the file, None if it has vanished."""
        try:
            return datetime.fromtimestamp(os.stat(self._path).st_mtime)
        except OSError:
            return None

    # --- Display ---

    def format(
        self,
        template: str = DEFAULT_INDEX_FORMAT,
        date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
    ) -> str:
        """Render a display template for this message (see ``lettre.read.format``)."""
        return expand(template, self, date_formats)

    def matches_filter(
        self,
        pattern: str,
        template: str = DEFAULT_INDEX_FORMAT,
        date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
    ) -> bool:
        """Check the message against a display filter.

        ``"all"`` always matches, ``"new"`` matches unread messages, anything
        else is a substring match against the formatted display line.
        """
        if pattern == "all":
            return True

        if pattern == "new":
            return self.is_new()

        return pattern in self.format(template, date_formats)

    def to_dict(self, headers: Sequence[str] = ("Date", "From", "To", "Subject")) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": self._path,
            "flags": self.flags,
            "headers": {name: self.header(name) for name in headers},
            "body": self.body(),
        }
