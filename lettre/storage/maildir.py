"""Maildir folders on disk.

Implements the parts of the Maildir format lettre reads and writes.
A folder is a directory with three subdirectories:
- tmp/: Messages being delivered (atomic write in progress)
- new/: Newly delivered, unread messages
- cur/: Messages that have been seen

Delivered message filenames follow the format:
<timestamp>.<pid>_<counter>.<hostname>[:2,<flags>]

Folders hold no message objects, only a path and the counts from the
last scan. Every count is a snapshot: other mail tools may rename, add or
remove files at any time, so rescan before acting on one.
"""

import itertools
import logging
import os
import shutil
import socket
import time
from collections.abc import Callable
from pathlib import Path

from lettre.errors import MaildirError
from lettre.storage.flags import NEW_FLAG, effective_flags, encode

logger = logging.getLogger(__name__)

MAILDIR_SUBDIRS = ("cur", "new", "tmp")

# Per-process counter keeping filenames unique within one second.
_delivery_counter = itertools.count(1)


def is_maildir(path: str | Path) -> bool:
    """Check if a directory looks like a Maildir leaf (has new/ and cur/)."""
    path = Path(path)
    return (path / "new").is_dir() and (path / "cur").is_dir()


def ensure_folder(path: str | Path) -> Path:
    """Create a Maildir folder structure.

    Creates the folder with cur/, new/, tmp/ subdirectories. Safe to call
    multiple times.

    Args:
        path: Folder directory (e.g., "~/Maildir/INBOX").

    Returns:
        Path to the folder directory.
    """
    folder_path = Path(path).expanduser()

    for subdir in MAILDIR_SUBDIRS:
        (folder_path / subdir).mkdir(parents=True, exist_ok=True)

    return folder_path


def folder_key(path: str | Path) -> str:
    """Canonical string form of a folder path, used for identity."""
    return os.path.abspath(os.path.expanduser(os.fspath(path)))


def _list_dir(path: Path) -> list[str]:
    """Sorted absolute entries of a directory, empty if it can't be read."""
    try:
        names = sorted(os.listdir(path))
    except OSError as exc:
        logger.warning("Cannot list %s: %s", path, exc)
        return []

    return [str(path / name) for name in names]


class MaildirFolder:
    """One Maildir leaf directory and its message counts.

    Counts are computed lazily by ``scan()`` and cached until the next scan.
    Two folders are equal when their paths are equal.

    Example:
        folder = MaildirFolder("~/Maildir/INBOX")
        if folder.matches_filter("new"):
            print(folder.path, folder.unread, folder.total)
    """

    def __init__(self, path: str | Path):
        self._path = folder_key(path)
        self._total: int | None = None
        self._unread: int | None = None

    @property
    def path(self) -> str:
        """Absolute path of the folder directory."""
        return self._path

    @property
    def name(self) -> str:
        """Last path component, for display."""
        return os.path.basename(self._path.rstrip(os.sep))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MaildirFolder):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __repr__(self) -> str:
        return f"MaildirFolder({self._path!r})"

    def message_paths(self) -> list[str]:
        """Paths of every message, those in new/ first, then cur/."""
        root = Path(self._path)
        return _list_dir(root / "new") + _list_dir(root / "cur")

    def scan(self) -> tuple[int, int]:
        """Recount messages from disk.

        Returns:
            ``(total, unread)`` where unread counts messages whose effective
            flags include ``N``.
        """
        paths = self.message_paths()
        self._total = len(paths)
        self._unread = sum(1 for p in paths if NEW_FLAG in effective_flags(p))
        logger.debug(
            "Scanned %s: %d total, %d unread", self._path, self._total, self._unread
        )
        return self._total, self._unread

    @property
    def total(self) -> int:
        """Message count from the last scan (scans on first access)."""
        if self._total is None:
            self.scan()
        return self._total

    @property
    def unread(self) -> int:
        """Unread count from the last scan (scans on first access)."""
        if self._unread is None:
            self.scan()
        return self._unread

    def matches_filter(self, pattern: str) -> bool:
        """Check the folder against a display filter.

        ``"all"`` always matches, ``"new"`` matches folders with unread
        messages, anything else is a substring match against the path.
        """
        if pattern == "all":
            return True

        if pattern == "new":
            return self.unread > 0

        return pattern in self._path


def scan_folders(prefix: str | Path) -> list[MaildirFolder]:
    """Find every Maildir folder directly below ``prefix``.

    Entries that are not directories with new/ and cur/ are skipped.
    A missing or unreadable prefix yields an empty list.

    Returns:
        Folders sorted by path.
    """
    root = Path(prefix).expanduser()

    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        logger.warning("Cannot scan maildir prefix %s: %s", root, exc)
        return []

    folders = [MaildirFolder(entry) for entry in entries if is_maildir(entry)]
    logger.debug("Found %d folders under %s", len(folders), root)
    return folders


def generate_filename() -> str:
    """Generate a unique Maildir filename (without info suffix).

    Format: <timestamp>.<pid>_<counter>.<hostname>

    The hostname has "/" and ":" escaped since both are meaningful in
    Maildir filenames.
    """
    hostname = socket.gethostname().replace("/", r"\057").replace(":", r"\072")
    timestamp = int(time.time())
    return f"{timestamp}.{os.getpid()}_{next(_delivery_counter)}.{hostname}"


def message_in(folder: str | Path, new: bool, flags: str = "") -> str:
    """Pick a fresh path for a message delivered into ``folder``.

    New messages go to new/ without an info suffix. Read messages go to cur/
    with ``:2,<flags>``. Names are regenerated until none of tmp/, new/ or
    cur/ holds a file with the same unique part (best effort, no locking).

    Args:
        folder: Destination Maildir folder.
        new: True to deliver as unread.
        flags: Raw flags for a cur/ delivery; ``N`` is dropped.

    Returns:
        The destination path as a string.
    """
    folder = Path(folder)

    while True:
        unique = generate_filename()
        taken = any(
            p.name.partition(":")[0] == unique
            for subdir in MAILDIR_SUBDIRS
            if (folder / subdir).is_dir()
            for p in (folder / subdir).iterdir()
        )
        if not taken:
            break

    if new:
        return str(folder / "new" / unique)

    return str(folder / "cur" / encode(unique, flags.replace(NEW_FLAG, "")))


def _deliver(
    folder: str | Path,
    new: bool,
    flags: str,
    write: Callable[[Path], object],
) -> Path:
    """Write a file into tmp/ with ``write`` and rename it into new/ or cur/."""
    if not is_maildir(folder):
        raise MaildirError(f"Not a Maildir folder: {folder}")

    tmp_path = None
    try:
        dest_path = Path(message_in(folder, new, flags))
        tmp_path = Path(folder) / "tmp" / dest_path.name.partition(":")[0]
        tmp_path.parent.mkdir(exist_ok=True)
        write(tmp_path)
        # os.rename is atomic on POSIX when src and dest share a filesystem
        os.rename(tmp_path, dest_path)
    except OSError as exc:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise MaildirError(f"Failed to deliver message to {folder}: {exc}") from exc

    logger.info("Delivered message to %s", dest_path)
    return dest_path


def deliver_message(
    folder: str | Path,
    message_bytes: bytes,
    new: bool = True,
    flags: str = "",
) -> Path:
    """Write a message into a Maildir folder.

    Messages are written atomically: first to tmp/, then renamed into
    either new/ (unread) or cur/ (read). This prevents other readers from
    seeing a partial file.

    Args:
        folder: Target Maildir folder (must already exist).
        message_bytes: Raw RFC 2822 message content.
        new: True to deliver into new/.
        flags: Raw flags for cur/ deliveries.

    Returns:
        Path to the written message file.

    Raises:
        MaildirError: If the folder is not a Maildir or the write fails.
            Nothing is left in tmp/ on failure.
    """
    return _deliver(folder, new, flags, lambda tmp: tmp.write_bytes(message_bytes))


def copy_message(
    source: str | Path,
    folder: str | Path,
    new: bool = True,
    flags: str = "",
) -> Path:
    """Copy an existing message file into a Maildir folder.

    Same atomic tmp/ dance as ``deliver_message``. The file's timestamps
    are copied too, since the modification time stands in for a missing
    Date header. The source is never touched.

    Raises:
        MaildirError: If the source can't be read or the copy fails.
    """
    return _deliver(folder, new, flags, lambda tmp: shutil.copy2(source, tmp))
