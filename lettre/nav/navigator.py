"""Navigation and selection state for the mail reader.

One ``Navigator`` holds everything the display and command layers need:
the folders found under the Maildir prefix, the subset visible under the
folder filter, the folders whose messages are currently listed, the
aggregated message list, and the cursors into both lists.

Invariants kept by every operation:
- the folder cursor indexes the *visible* folder list and is clamped into
  ``[0, count)`` (or 0 when the list is empty);
- the message cursor is clamped the same way into the message list;
- moving the message cursor resets the message body offset to 0.

Everything is synchronous and single-threaded. Other programs may change
the Maildir at any time, so counts and lists are snapshots taken at the
last rescan or rebuild.
"""

import logging
import os
from collections.abc import Callable, Sequence
from enum import Enum

from lettre.errors import InvalidInputError, MaildirError, NoMessageError
from lettre.nav.search import wrap_search
from lettre.read.format import (
    DEFAULT_DATE_FORMATS,
    DEFAULT_INDEX_FORMAT,
    DEFAULT_MAILDIR_FORMAT,
    expand_folder,
)
from lettre.read.models import Message
from lettre.storage.flags import NEW_FLAG, split
from lettre.storage.maildir import (
    MaildirFolder,
    copy_message,
    folder_key,
    is_maildir,
    scan_folders,
)

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Which list or view is active."""

    maildir = "maildir"
    index = "index"
    message = "message"


# Called with the folder path after a selection change ("" after clearing)
FolderSelectionCallback = Callable[[str], None]


def _clamp(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


class Navigator:
    """Folder and message navigation state.

    Example:
        nav = Navigator("~/Maildir", maildir_limit="new")
        nav.toggle_folder()          # select the folder under the cursor
        for msg in nav.messages:
            print(nav.format_message(msg))
        nav.mark_read()              # the message under the cursor
    """

    def __init__(
        self,
        prefix: str | os.PathLike | None = None,
        *,
        maildir_limit: str = "all",
        maildir_format: str = DEFAULT_MAILDIR_FORMAT,
        index_limit: str = "all",
        index_format: str = DEFAULT_INDEX_FORMAT,
        date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
        mode: Mode | str = Mode.maildir,
        on_folder_selection: FolderSelectionCallback | None = None,
    ):
        """Initialize navigation state and scan ``prefix`` for folders.

        Args:
            prefix: Directory holding the Maildir folders. None starts with
                an empty folder list.
            maildir_limit: Folder filter ("all", "new" or a substring).
            maildir_format: Template for folder lines.
            index_limit: Message filter ("all", "new" or a substring of the
                formatted line).
            index_format: Template for message lines.
            date_formats: strptime patterns for Date headers.
            mode: Initial display mode.
            on_folder_selection: Hook run after the selected folders change.
        """
        self._prefix = (
            os.path.expanduser(os.fspath(prefix)) if prefix is not None else None
        )
        self._maildir_limit = maildir_limit
        self._maildir_format = maildir_format
        self._index_limit = index_limit
        self._index_format = index_format
        self._date_formats = list(date_formats)
        self._mode = self._parse_mode(mode)
        self.on_folder_selection = on_folder_selection

        self._folders: list[MaildirFolder] = []
        self._visible: list[MaildirFolder] = []
        self._selected_folders: list[str] = []
        self._messages: list[Message] = []

        self._selected_folder = 0
        self._selected_message = 0
        self._message_offset = 0

        self.rescan()

    @classmethod
    def from_config(cls, config: dict, **kwargs) -> "Navigator":
        """Build a navigator from a loaded configuration (see ``lettre.config``)."""
        maildir = config.get("maildir", {})
        index = config.get("index", {})
        return cls(
            maildir.get("prefix"),
            maildir_limit=maildir.get("limit", "all"),
            maildir_format=maildir.get("format", DEFAULT_MAILDIR_FORMAT),
            index_limit=index.get("limit", "all"),
            index_format=index.get("format", DEFAULT_INDEX_FORMAT),
            date_formats=index.get("date_formats", DEFAULT_DATE_FORMATS),
            **kwargs,
        )

    # --- Settings ---

    @property
    def prefix(self) -> str | None:
        return self._prefix

    def set_prefix(self, prefix: str | os.PathLike) -> None:
        """Point at a new Maildir root and rescan.

        Raises:
            InvalidInputError: If ``prefix`` is not a directory.
        """
        path = os.path.expanduser(os.fspath(prefix))
        if not os.path.isdir(path):
            raise InvalidInputError(f"The specified prefix is not a directory: {prefix}")

        self._prefix = path
        self.rescan()

    @property
    def maildir_limit(self) -> str:
        return self._maildir_limit

    def set_folder_filter(self, pattern: str) -> None:
        """Change the folder filter and rescan, clamping the folder cursor."""
        if not pattern:
            raise InvalidInputError("Missing folder filter")

        self._maildir_limit = pattern
        self.rescan()

    @property
    def maildir_format(self) -> str:
        return self._maildir_format

    def set_maildir_format(self, template: str) -> None:
        self._maildir_format = template

    @property
    def index_limit(self) -> str:
        return self._index_limit

    def set_index_limit(self, pattern: str) -> None:
        """Change the message filter and rebuild the message list."""
        if not pattern:
            raise InvalidInputError("Missing message filter")

        self._index_limit = pattern
        self.rebuild_messages()

    @property
    def index_format(self) -> str:
        return self._index_format

    def set_index_format(self, template: str) -> None:
        """Change the message line template.

        Substring filters match against the formatted line, so the message
        list is rebuilt.
        """
        self._index_format = template
        self.rebuild_messages()

    @property
    def date_formats(self) -> list[str]:
        return list(self._date_formats)

    @property
    def mode(self) -> Mode:
        return self._mode

    def set_mode(self, mode: Mode | str) -> None:
        self._mode = self._parse_mode(mode)

    @staticmethod
    def _parse_mode(mode: Mode | str) -> Mode:
        try:
            return Mode(mode)
        except ValueError:
            raise InvalidInputError(f"Unknown mode: {mode!r}") from None

    # --- Folders ---

    def rescan(self) -> None:
        """Rebuild the folder universe from disk and reapply the folder filter."""
        self._folders = scan_folders(self._prefix) if self._prefix else []
        self._visible = [f for f in self._folders if f.matches_filter(self._maildir_limit)]
        self._selected_folder = _clamp(self._selected_folder, len(self._visible))
        logger.debug(
            "Rescanned %s: %d folders, %d visible",
            self._prefix,
            len(self._folders),
            len(self._visible),
        )

    @property
    def folders(self) -> list[MaildirFolder]:
        """Every folder found under the prefix, ignoring the filter."""
        return list(self._folders)

    @property
    def visible_folders(self) -> list[MaildirFolder]:
        """Folders passing the folder filter; the folder cursor indexes these."""
        return list(self._visible)

    @property
    def folder_count(self) -> int:
        return len(self._visible)

    def format_folder(
        self, folder: MaildirFolder | None = None, template: str | None = None
    ) -> str:
        """Render a folder (default: under the cursor) with the folder template.

        Returns "" when there is no folder to render.
        """
        if folder is None:
            folder = self.current_folder
        if folder is None:
            return ""
        return expand_folder(template or self._maildir_format, folder)

    def folders_matching(self, pattern: str) -> list[MaildirFolder]:
        """Folders from the whole universe matching ``pattern``."""
        return [f for f in self._folders if f.matches_filter(pattern)]

    @property
    def selected_folder_index(self) -> int:
        return self._selected_folder

    def set_selected_folder_index(self, index: int) -> int:
        """Move the folder cursor, clamped into the visible list."""
        self._selected_folder = _clamp(index, len(self._visible))
        return self._selected_folder

    def scroll_folders(self, step: int) -> int:
        """Move the folder cursor by ``step`` (negative moves up)."""
        return self.set_selected_folder_index(self._selected_folder + step)

    @property
    def current_folder(self) -> MaildirFolder | None:
        """The visible folder under the cursor, None if nothing is visible."""
        if not self._visible:
            return None
        return self._visible[self._selected_folder]

    def select_folder_path(self, path: str | os.PathLike) -> bool:
        """Move the folder cursor onto the visible folder at ``path``.

        Returns:
            False if no visible folder has that path.
        """
        key = folder_key(path)
        for index, folder in enumerate(self._visible):
            if folder.path == key:
                self._selected_folder = index
                return True
        return False

    def scroll_maildir_to(self, pattern: str) -> int | None:
        """Move the folder cursor to the next visible folder containing ``pattern``.

        The search wraps around and never re-tests the current folder.

        Returns:
            The new cursor, or None (cursor unchanged) if nothing matched.
        """
        if not pattern:
            raise InvalidInputError("Missing search pattern")

        found = wrap_search(
            len(self._visible),
            self._selected_folder,
            lambda i: pattern in self._visible[i].path,
        )
        if found is not None:
            self._selected_folder = found
        logger.debug("Folder search for %r: %s", pattern, found)
        return found

    # --- Folder selection ---

    @property
    def selected_folders(self) -> list[str]:
        """Paths of the folders whose messages are listed, in selection order."""
        return list(self._selected_folders)

    def _target_folder(self, path: str | os.PathLike | None) -> str | None:
        if path is not None:
            return folder_key(path)

        folder = self.current_folder
        return folder.path if folder is not None else None

    def _selection_changed(self, path: str) -> None:
        self.rebuild_messages()
        self.set_selected_message_index(0)
        if self.on_folder_selection is not None:
            self.on_folder_selection(path)

    def add_folder(self, path: str | os.PathLike | None = None) -> str | None:
        """Add a folder (default: the one under the cursor) to the selection.

        Returns:
            The folder path, or None if there was no folder to add.
        """
        target = self._target_folder(path)
        if target is None:
            return None

        if target not in self._selected_folders:
            self._selected_folders.append(target)
        self._selection_changed(target)
        return target

    def set_folder(self, path: str | os.PathLike | None = None) -> str | None:
        """Replace the selection with a single folder (default: under the cursor)."""
        target = self._target_folder(path)
        if target is None:
            return None

        self._selected_folders = [target]
        self._selection_changed(target)
        return target

    def toggle_folder(self, path: str | os.PathLike | None = None) -> str | None:
        """Add a folder to the selection, or remove it if already selected."""
        target = self._target_folder(path)
        if target is None:
            return None

        if target in self._selected_folders:
            self._selected_folders.remove(target)
        else:
            self._selected_folders.append(target)
        self._selection_changed(target)
        return target

    def clear_folders(self) -> None:
        """Deselect every folder, leaving an empty message list."""
        self._selected_folders = []
        self._selection_changed("")

    # --- Messages ---

    def rebuild_messages(self) -> None:
        """Rebuild the message list from the selected folders.

        Folders contribute in selection order, each with its new/ messages
        before its cur/ ones. Messages failing the index filter are left
        out, as are files that vanish while being read.
        """
        messages = []

        for path in self._selected_folders:
            for message_path in MaildirFolder(path).message_paths():
                msg = Message(message_path)
                try:
                    keep = msg.matches_filter(
                        self._index_limit, self._index_format, self._date_formats
                    )
                except MaildirError as exc:
                    logger.warning("Skipping unreadable message: %s", exc)
                    continue

                if keep:
                    messages.append(msg)

        self._messages = messages

        clamped = _clamp(self._selected_message, len(messages))
        if clamped != self._selected_message:
            self.set_selected_message_index(clamped)

        logger.debug(
            "Rebuilt message list: %d messages from %d folders",
            len(messages),
            len(self._selected_folders),
        )

    @property
    def messages(self) -> list[Message]:
        """The aggregated message list."""
        return list(self._messages)

    @property
    def message_count(self) -> int:
        return len(self._messages)

    @property
    def selected_message_index(self) -> int:
        return self._selected_message

    def set_selected_message_index(self, index: int) -> int:
        """Move the message cursor (clamped) and reset the body offset."""
        self._selected_message = _clamp(index, len(self._messages))
        self._message_offset = 0
        return self._selected_message

    def scroll_messages(self, step: int) -> int:
        """Move the message cursor by ``step`` (negative moves up)."""
        return self.set_selected_message_index(self._selected_message + step)

    @property
    def current_message(self) -> Message | None:
        """The message under the cursor, None if the list is empty."""
        if not self._messages:
            return None
        return self._messages[self._selected_message]

    def message_for(self, path: str | os.PathLike | None = None) -> Message:
        """Resolve the target of a message operation.

        An explicit path (relative paths and ~ are resolved) wins; if it
        names a listed message that instance is reused so its path stays
        current. Otherwise the message under the cursor.

        Raises:
            NoMessageError: If no path is given and no message is listed.
        """
        if path is not None:
            path = os.path.abspath(os.path.expanduser(os.fspath(path)))
            for msg in self._messages:
                if msg.path == path:
                    return msg
            return Message(path)

        msg = self.current_message
        if msg is None:
            raise NoMessageError("No message selected")
        return msg

    def scroll_index_to(self, pattern: str) -> int | None:
        """Move the message cursor to the next message whose line contains ``pattern``.

        The search wraps around and never re-tests the current message.

        Returns:
            The new cursor, or None (cursor unchanged) if nothing matched.
        """
        if not pattern:
            raise InvalidInputError("Missing search pattern")

        def matches(i: int) -> bool:
            try:
                return pattern in self.format_message(self._messages[i])
            except MaildirError:
                return False

        found = wrap_search(len(self._messages), self._selected_message, matches)
        if found is not None:
            self.set_selected_message_index(found)
        logger.debug("Message search for %r: %s", pattern, found)
        return found

    def format_message(
        self, message: Message | None = None, template: str | None = None
    ) -> str:
        """Render a message (default: under the cursor) with ``template``.

        The template defaults to the index format.
        """
        if message is None:
            message = self.message_for()
        return message.format(template or self._index_format, self._date_formats)

    def index_entries(self) -> list[tuple[Message, str]]:
        """Listed messages paired with their index lines.

        A listed file renamed or removed by another program triggers one
        rebuild of the list; messages still unreadable after that are left out.
        """
        try:
            return [(msg, self.format_message(msg)) for msg in self._messages]
        except MaildirError as exc:
            logger.warning("Message list out of date, rebuilding: %s", exc)
            self.rebuild_messages()

        entries = []
        for msg in self._messages:
            try:
                entries.append((msg, self.format_message(msg)))
            except MaildirError as exc:
                logger.warning("Skipping unreadable message: %s", exc)
        return entries

    # --- Message body offset ---

    @property
    def message_offset(self) -> int:
        return self._message_offset

    def set_message_offset(self, offset: int) -> int:
        """Set the body scroll offset, clamped to the current body length."""
        msg = self.current_message
        limit = 0
        if msg is not None:
            try:
                limit = max(len(msg.body()) - 1, 0)
            except MaildirError:
                limit = max(offset, 0)

        self._message_offset = max(0, min(offset, limit))
        return self._message_offset

    def scroll_message(self, step: int) -> int:
        """Move the body offset by ``step`` (negative moves up)."""
        return self.set_message_offset(self._message_offset + step)

    # --- Message mutation ---

    def _in_selected_folder(self, path: str) -> bool:
        folder = os.path.dirname(os.path.dirname(path))
        return folder_key(folder) in self._selected_folders

    def _flag_changed(self, msg: Message, renamed: bool) -> bool:
        if not renamed:
            return renamed

        # A message that no longer passes the filter leaves the list
        if msg in self._messages:
            if not msg.matches_filter(
                self._index_limit, self._index_format, self._date_formats
            ):
                self.rebuild_messages()
        elif self._in_selected_folder(msg.path):
            self.rebuild_messages()
        return renamed

    def mark_read(self, path: str | os.PathLike | None = None) -> bool:
        """Mark a message (default: under the cursor) as read."""
        msg = self.message_for(path)
        return self._flag_changed(msg, msg.mark_read())

    def mark_new(self, path: str | os.PathLike | None = None) -> bool:
        """Mark a message (default: under the cursor) as unread."""
        msg = self.message_for(path)
        return self._flag_changed(msg, msg.mark_new())

    def add_flag(self, flag: str, path: str | os.PathLike | None = None) -> bool:
        """Add a flag to a message (default: under the cursor)."""
        msg = self.message_for(path)
        return self._flag_changed(msg, msg.add_flag(flag))

    def remove_flag(self, flag: str, path: str | os.PathLike | None = None) -> bool:
        """Remove a flag from a message (default: under the cursor)."""
        msg = self.message_for(path)
        return self._flag_changed(msg, msg.remove_flag(flag))

    def delete_selected(self, path: str | os.PathLike | None = None) -> str:
        """Delete a message file (default: under the cursor) and rebuild.

        Deleting a file that is already gone is not an error.

        Returns:
            The path that was deleted.

        Raises:
            MaildirError: If the file exists but can't be removed.
        """
        msg = self.message_for(path)

        try:
            os.unlink(msg.path)
        except FileNotFoundError:
            logger.debug("Message already gone: %s", msg.path)
        except OSError as exc:
            raise MaildirError(f"Failed to delete {msg.path}: {exc}") from exc
        else:
            logger.info("Deleted %s", msg.path)

        self.rebuild_messages()
        return msg.path

    def move_selected(
        self,
        destination: str | os.PathLike,
        path: str | os.PathLike | None = None,
    ) -> str:
        """Move a message (default: under the cursor) into another folder.

        The message is copied under a fresh name into the destination's
        new/ or cur/ (keeping its unread state and other flags) and only
        then removed from its source.

        Returns:
            The new path of the message.

        Raises:
            InvalidInputError: If ``destination`` is not a Maildir folder.
            MaildirError: If the copy fails (the source is kept), or the
                source can't be removed after copying.
        """
        if not destination or not is_maildir(destination):
            raise InvalidInputError(f"The specified destination is not a Maildir: {destination}")

        msg = self.message_for(path)
        _, raw_flags = split(os.path.basename(msg.path))
        new_path = copy_message(
            msg.path,
            folder_key(destination),
            new=msg.is_new(),
            flags=raw_flags.replace(NEW_FLAG, ""),
        )

        try:
            os.unlink(msg.path)
        except FileNotFoundError:
            logger.debug("Source vanished after copy: %s", msg.path)
        except OSError as exc:
            raise MaildirError(
                f"Copied to {new_path} but failed to remove {msg.path}: {exc}"
            ) from exc

        logger.info("Moved %s -> %s", msg.path, new_path)
        self.rebuild_messages()
        return str(new_path)
