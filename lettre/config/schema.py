"""Configuration schema definitions.

Uses TypedDict for type safety without runtime overhead.
These types match the structure of config.toml.
"""

from typing import TypedDict


class MaildirConfig(TypedDict, total=False):
    """Folder list settings.

    Attributes:
        prefix: Directory holding the Maildir folders (e.g., "~/Maildir").
        limit: Folder filter: "all", "new" or a path substring.
        format: Template for folder lines.
    """

    prefix: str
    limit: str
    format: str


class IndexConfig(TypedDict, total=False):
    """Message list settings.

    Attributes:
        limit: Message filter: "all", "new" or a substring of the line.
        format: Template for message lines (FLAGS, FROM, TO, SUBJECT, DATE,
            YEAR, MONTH, DAY).
        date_formats: strptime patterns tried in order on Date headers.
        headers: Headers shown when reading a message.
    """

    limit: str
    format: str
    date_formats: list[str]
    headers: list[str]


# "from" is a keyword, hence the functional syntax
ComposeConfig = TypedDict(
    "ComposeConfig",
    {
        "from": str,
        "editor": str,
        "sendmail_path": str,
        "sent_mail": str,
    },
    total=False,
)


class LettreConfig(TypedDict, total=False):
    """Root configuration structure."""

    maildir: MaildirConfig
    index: IndexConfig
    compose: ComposeConfig
