"""Expansion of display templates against messages and folders.

A template is plain text with bare tokens in it:

    "[FLAGS] DAY/MONTH/YEAR FROM - SUBJECT"

Tokens are expanded one at a time in the fixed order of ``Token``; each
replaces only its first occurrence. Text produced by an expansion is never
scanned again, so a subject containing "DATE" stays as it is. Unknown words
are left verbatim.

Folder lines use the same rules with the ``FolderToken`` set.
"""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lettre.read.models import Message
    from lettre.storage.maildir import MaildirFolder

logger = logging.getLogger(__name__)

DEFAULT_INDEX_FORMAT = "[FLAGS] DAY/MONTH/YEAR FROM - SUBJECT"
DEFAULT_MAILDIR_FORMAT = "[UNREAD/TOTAL] - PATH"

# strptime patterns tried in order against the Date header
DEFAULT_DATE_FORMATS = [
    "%a, %d %b %Y %H:%M:%S %z",
    "%d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M %z",
    "%a, %d %b %Y %H:%M:%S %Z",
    "%a %b %d %H:%M:%S %Y",
]

# Format used for DATE when the message has no Date header
MTIME_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"


class Token(str, Enum):
    """Recognized template tokens, in expansion order."""

    FLAGS = "FLAGS"
    FROM = "FROM"
    TO = "TO"
    SUBJECT = "SUBJECT"
    DATE = "DATE"
    YEAR = "YEAR"
    MONTH = "MONTH"
    DAY = "DAY"


class FolderToken(str, Enum):
    """Tokens recognized in folder line templates."""

    PATH = "PATH"
    NAME = "NAME"
    UNREAD = "UNREAD"
    TOTAL = "TOTAL"


def parse_date(value: str, date_formats: Sequence[str]) -> datetime | None:
    """Parse a Date header against each pattern in turn.

    A trailing comment such as "(UTC)" is ignored.

    Returns:
        The first successful parse, or None if no pattern matches.
    """
    value = re.sub(r"\s*\([^)]*\)\s*$", "", value.strip())
    if not value:
        return None

    for fmt in date_formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    logger.debug("No date format matches %r", value)
    return None


def message_timestamp(
    message: "Message", date_formats: Sequence[str]
) -> datetime | None:
    """When the message was sent, as well as we can tell.

    The Date header wins if one of ``date_formats`` parses it, otherwise
    the file's modification time. None if the file has vanished too.
    """
    header = message.date_header
    if header:
        parsed = parse_date(header, date_formats)
        if parsed is not None:
            return parsed

    return message.mtime()


def _date(message: "Message", date_formats: Sequence[str]) -> str:
    header = message.date_header
    if header:
        return header

    mtime = message.mtime()
    return mtime.strftime(MTIME_DATE_FORMAT) if mtime else ""


def _date_field(fmt: str) -> Callable[["Message", Sequence[str]], str]:
    def expand(message: "Message", date_formats: Sequence[str]) -> str:
        stamp = message_timestamp(message, date_formats)
        return stamp.strftime(fmt) if stamp else ""

    return expand


_EXPANDERS: dict[Token, Callable[["Message", Sequence[str]], str]] = {
    Token.FLAGS: lambda message, _: message.display_flags,
    Token.FROM: lambda message, _: message.from_addr,
    Token.TO: lambda message, _: message.to,
    Token.SUBJECT: lambda message, _: message.subject,
    Token.DATE: _date,
    Token.YEAR: _date_field("%Y"),
    Token.MONTH: _date_field("%m"),
    Token.DAY: _date_field("%d"),
}


def expand_tokens(
    template: str, tokens: Iterable[str], value: Callable[[str], str]
) -> str:
    """Replace the first occurrence of each token in ``template``.

    Tokens are tried in the order given and ``value(token)`` is only called
    for tokens present. Expanded text is not searched again.
    """
    # (text, is_template_text); only template text is searched for tokens
    segments: list[tuple[str, bool]] = [(template, True)]

    for token in tokens:
        for idx, (text, literal) in enumerate(segments):
            if not literal or token not in text:
                continue

            before, _, after = text.partition(token)
            segments[idx : idx + 1] = [(before, True), (value(token), False), (after, True)]
            break

    return "".join(text for text, _ in segments)


def expand(
    template: str,
    message: "Message",
    date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
) -> str:
    """Render ``template`` for ``message``.

    Args:
        template: Text containing bare tokens (see ``Token``).
        message: The message supplying the values.
        date_formats: strptime patterns for the Date header.

    Returns:
        The rendered one-line string.
    """
    return expand_tokens(
        template,
        (token.value for token in Token),
        lambda token: _EXPANDERS[Token(token)](message, date_formats),
    )


def expand_folder(template: str, folder: "MaildirFolder") -> str:
    """Render a folder line; tokens PATH, NAME, UNREAD and TOTAL."""
    values: dict[FolderToken, Callable[[], str]] = {
        FolderToken.PATH: lambda: folder.path,
        FolderToken.NAME: lambda: folder.name,
        FolderToken.UNREAD: lambda: str(folder.unread),
        FolderToken.TOTAL: lambda: str(folder.total),
    }
    return expand_tokens(
        template,
        (token.value for token in FolderToken),
        lambda token: values[FolderToken(token)](),
    )
