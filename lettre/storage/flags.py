"""Maildir flag encoding.

Message state lives entirely in the filename. A message in ``cur/`` carries
an info suffix after the ``:2,`` marker:

    cur/<unique>:2,<flags>

Flags are single uppercase letters, sorted and deduplicated:
- D: Draft
- F: Flagged
- R: Replied
- S: Seen
- T: Trashed

A message sitting in ``new/`` is unread by location alone and carries an
implied ``N`` flag whatever its suffix says. ``N`` may also be written
literally into the suffix of a message in ``cur/``.

Everything here is a pure function of the path string. Renaming files is
left to the caller (see ``lettre.read.models.Message``).
"""

import os
from collections.abc import Iterable

from lettre.errors import InvalidInputError

INFO_MARKER = ":2,"

# Suffixes longer than this are treated as garbage and reset to no flags.
MAX_RAW_FLAGS = 3

# Width the formatter pads FLAGS to.
DISPLAY_WIDTH = 4

NEW_FLAG = "N"

NEW_SEGMENT = f"{os.sep}new{os.sep}"
CUR_SEGMENT = f"{os.sep}cur{os.sep}"


def normalize_flags(flags: Iterable[str]) -> str:
    """Uppercase, deduplicate and sort a collection of flag characters."""
    return "".join(sorted({c.upper() for c in flags}))


def normalize_flag(flag: str) -> str:
    """Validate a single flag character and return it uppercased.

    Raises:
        InvalidInputError: If ``flag`` is not exactly one letter.
    """
    if not isinstance(flag, str) or len(flag) != 1 or not flag.isalpha():
        raise InvalidInputError(f"Invalid flag: {flag!r}")
    return flag.upper()


def split(path: str) -> tuple[str, str]:
    """Split a path into its base and its normalized raw flags.

    The raw flags are whatever follows the ``:2,`` marker. A missing marker
    gives empty flags and leaves the whole path as the base. Suffixes longer
    than ``MAX_RAW_FLAGS`` are discarded.
    """
    base, marker, raw = path.partition(INFO_MARKER)
    if not marker:
        return path, ""

    if len(raw) > MAX_RAW_FLAGS:
        raw = ""

    return base, normalize_flags(raw)


def in_new(path: str) -> bool:
    """True if the path lies in a ``new/`` directory."""
    return NEW_SEGMENT in path


def in_cur(path: str) -> bool:
    """True if the path lies in a ``cur/`` directory."""
    return CUR_SEGMENT in path


def effective_flags(path: str) -> str:
    """Raw flags plus location-implied flags, sorted and deduplicated."""
    _, raw = split(path)
    if in_new(path):
        raw += NEW_FLAG
    return normalize_flags(raw)


def decode(path: str) -> tuple[str, str]:
    """Decode a message path into ``(base, effective_flags)``."""
    base, _ = split(path)
    return base, effective_flags(path)


def encode(base: str, flags: Iterable[str]) -> str:
    """Build ``<base>:2,<flags>`` from a base path and a flag collection.

    Raises:
        InvalidInputError: If a flag is not a letter, or if the normalized
            set is longer than ``split`` would accept when reading it back.
    """
    normalized = normalize_flags(flags)

    for c in normalized:
        normalize_flag(c)

    if len(normalized) > MAX_RAW_FLAGS:
        raise InvalidInputError(
            f"Cannot encode more than {MAX_RAW_FLAGS} flags: {normalized!r}"
        )

    return f"{base}{INFO_MARKER}{normalized}"


def display_flags(path: str) -> str:
    """Effective flags padded with spaces for column display."""
    return effective_flags(path).ljust(DISPLAY_WIDTH)


def add_flag(path: str, flag: str) -> str:
    """Return the path the message should have with ``flag`` added.

    Returns ``path`` unchanged when the flag is already effectively present,
    including an ``N`` implied by a ``new/`` location.
    """
    flag = normalize_flag(flag)
    if flag in effective_flags(path):
        return path

    base, raw = split(path)
    return encode(base, raw + flag)


def remove_flag(path: str, flag: str) -> str:
    """Return the path the message should have with ``flag`` removed.

    Only the filename suffix is touched. An ``N`` implied by a ``new/``
    location cannot be removed this way (see ``read_path``).
    """
    flag = normalize_flag(flag)
    base, raw = split(path)
    if flag not in raw:
        return path

    return encode(base, raw.replace(flag, ""))


def read_path(path: str) -> str:
    """Return the path of the message once marked as read.

    Messages in ``new/`` move to the sibling ``cur/`` directory and gain an
    info suffix; anywhere else the literal ``N`` flag is dropped.
    """
    if not in_new(path):
        return remove_flag(path, NEW_FLAG)

    parent, _, filename = path.rpartition(NEW_SEGMENT)
    base, raw = split(filename)
    return parent + CUR_SEGMENT + encode(base, raw.replace(NEW_FLAG, ""))


def unread_path(path: str) -> str:
    """Return the path of the message once marked as new.

    Messages in ``cur/`` move to the sibling ``new/`` directory, keeping any
    remaining flags but dropping an empty suffix. Anywhere else a literal
    ``N`` flag is added.
    """
    if not in_cur(path):
        return add_flag(path, NEW_FLAG)

    parent, _, filename = path.rpartition(CUR_SEGMENT)
    base, raw = split(filename)
    if not raw:
        return parent + NEW_SEGMENT + base

    return parent + NEW_SEGMENT + encode(base, raw)
