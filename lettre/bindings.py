"""Operations exposed to a scripting or UI layer.

``Bindings`` wraps one ``Navigator`` and offers the flat, string-based calls
a scripting layer makes: get-or-set string variables, folder and message
listings, cursor movement, and message mutations. Results are plain
records (``StringList``, ``StringMap``) rather than engine objects.

Operations taking an optional ``path`` work on that message file, or on the
message under the cursor when ``path`` is None.

Example:
    bindings = Bindings.from_config(load_config())
    bindings.variable("maildir_limit", "new")
    bindings.toggle_selected_folder()
    for line in bindings.index_lines():
        print(line)
"""

import logging
import os
from collections.abc import Callable

from lettre.errors import InvalidInputError
from lettre.nav.navigator import Navigator

logger = logging.getLogger(__name__)

StringList = list[str]
StringMap = dict[str, str]

# Variables kept for the compose layer; stored and reported only
COMPOSE_VARIABLES = ("from", "editor", "sendmail_path", "sent_mail")

DEFAULT_EDITOR = "vim"


class Bindings:
    """Scripting-facing facade over a ``Navigator``."""

    def __init__(self, navigator: Navigator, compose: dict | None = None):
        """Initialize bindings.

        Args:
            navigator: Navigation state the calls operate on.
            compose: Initial values for the compose variables.
        """
        self.nav = navigator
        self._compose: StringMap = {name: "" for name in COMPOSE_VARIABLES}
        for name, value in (compose or {}).items():
            if name in self._compose:
                self._compose[name] = str(value)

        nav = self.nav
        self._variables: dict[str, tuple[Callable[[], str], Callable[[str], None]]] = {
            "maildir_prefix": (lambda: nav.prefix or "", nav.set_prefix),
            "maildir_limit": (lambda: nav.maildir_limit, nav.set_folder_filter),
            "maildir_format": (lambda: nav.maildir_format, nav.set_maildir_format),
            "index_limit": (lambda: nav.index_limit, nav.set_index_limit),
            "index_format": (lambda: nav.index_format, nav.set_index_format),
            "global_mode": (lambda: nav.mode.value, nav.set_mode),
        }

    @classmethod
    def from_config(cls, config: dict, **kwargs) -> "Bindings":
        """Build bindings and their navigator from a loaded configuration."""
        return cls(Navigator.from_config(config, **kwargs), config.get("compose", {}))

    # --- Variables ---

    def variable(self, name: str, value: str | None = None) -> str:
        """Get a string variable, setting it first if ``value`` is given.

        Raises:
            InvalidInputError: For unknown names or rejected values (for
                example a prefix that is not a directory).
        """
        if name in self._compose:
            if value is not None:
                self._compose[name] = value
            return self._compose[name]

        if name not in self._variables:
            raise InvalidInputError(f"Unknown variable: {name!r}")

        getter, setter = self._variables[name]
        if value is not None:
            setter(value)
            logger.debug("Set %s = %r", name, value)
        return getter()

    def variables(self) -> StringMap:
        """Every variable and its current value."""
        values = {name: getter() for name, (getter, _) in self._variables.items()}
        values.update(self._compose)
        return values

    def editor(self) -> str:
        """The editor command: the variable, else $EDITOR, else vim."""
        return self._compose["editor"] or os.environ.get("EDITOR") or DEFAULT_EDITOR

    # --- Folders ---

    def current_maildirs(self) -> StringList:
        """Paths of the visible folders."""
        return [f.path for f in self.nav.visible_folders]

    def maildir_lines(self) -> StringList:
        """Visible folders rendered with the folder template."""
        return [self.nav.format_folder(f) for f in self.nav.visible_folders]

    def count_maildirs(self) -> int:
        return self.nav.folder_count

    def count_all_maildirs(self) -> int:
        """Number of folders under the prefix, whatever the folder filter."""
        return len(self.nav.folders)

    def current_maildir(self) -> str:
        """Path of the folder under the cursor, "" if none."""
        folder = self.nav.current_folder
        return folder.path if folder is not None else ""

    def maildirs_matching(self, pattern: str) -> StringList:
        """Paths of all folders, visible or not, matching ``pattern``."""
        if not pattern:
            raise InvalidInputError("Missing argument to maildirs_matching")
        return [f.path for f in self.nav.folders_matching(pattern)]

    def select_maildir(self, path: str) -> bool:
        if not path:
            raise InvalidInputError("Missing argument to select_maildir")
        return self.nav.select_folder_path(path)

    def selected_folders(self) -> StringList:
        return self.nav.selected_folders

    def add_selected_folder(self, path: str | None = None) -> str:
        return self.nav.add_folder(path) or ""

    def set_selected_folder(self, path: str | None = None) -> str:
        return self.nav.set_folder(path) or ""

    def toggle_selected_folder(self, path: str | None = None) -> str:
        return self.nav.toggle_folder(path) or ""

    def clear_selected_folders(self) -> None:
        self.nav.clear_folders()

    def scroll_maildir_to(self, pattern: str) -> int | None:
        return self.nav.scroll_maildir_to(pattern)

    def scroll_maildir_down(self, step: int = 1) -> int:
        return self.nav.scroll_folders(step)

    def scroll_maildir_up(self, step: int = 1) -> int:
        return self.nav.scroll_folders(-step)

    def jump_maildir_to(self, index: int) -> int:
        return self.nav.set_selected_folder_index(index)

    # --- Message list ---

    def count_messages(self) -> int:
        return self.nav.message_count

    def current_message(self) -> str:
        """Path of the message under the cursor, "" if none."""
        msg = self.nav.current_message
        return msg.path if msg is not None else ""

    def index_lines(self) -> StringList:
        """Listed messages rendered with the index template."""
        return [line for _, line in self.nav.index_entries()]

    def scroll_index_to(self, pattern: str) -> int | None:
        return self.nav.scroll_index_to(pattern)

    def scroll_index_down(self, step: int = 1) -> int:
        return self.nav.scroll_messages(step)

    def scroll_index_up(self, step: int = 1) -> int:
        return self.nav.scroll_messages(-step)

    def jump_index_to(self, index: int) -> int:
        return self.nav.set_selected_message_index(index)

    def scroll_message_down(self, step: int = 1) -> int:
        return self.nav.scroll_message(step)

    def scroll_message_up(self, step: int = 1) -> int:
        return self.nav.scroll_message(-step)

    def jump_message_to(self, offset: int) -> int:
        return self.nav.set_message_offset(offset)

    # --- Single messages ---

    def header(self, name: str, path: str | None = None) -> str:
        if not name:
            raise InvalidInputError("Missing header")
        return self.nav.message_for(path).header(name)

    def headers(self, names: StringList, path: str | None = None) -> StringMap:
        msg = self.nav.message_for(path)
        return {name: msg.header(name) for name in names}

    def body(self, path: str | None = None) -> StringList:
        return self.nav.message_for(path).body()

    def flags(self, path: str | None = None) -> str:
        return self.nav.message_for(path).flags

    def is_new(self, path: str | None = None) -> bool:
        return self.nav.message_for(path).is_new()

    def mark_read(self, path: str | None = None) -> bool:
        return self.nav.mark_read(path)

    def mark_new(self, path: str | None = None) -> bool:
        return self.nav.mark_new(path)

    def add_flag(self, flag: str, path: str | None = None) -> bool:
        return self.nav.add_flag(flag, path)

    def remove_flag(self, flag: str, path: str | None = None) -> bool:
        return self.nav.remove_flag(flag, path)

    def delete_message(self, path: str | None = None) -> str:
        return self.nav.delete_selected(path)

    def save_message(self, destination: str, path: str | None = None) -> str:
        """Move a message (default: under the cursor) into ``destination``."""
        if not destination:
            raise InvalidInputError("Missing argument to save")
        return self.nav.move_selected(destination, path)

    def format_message(self, template: str | None = None, path: str | None = None) -> str:
        msg = self.nav.message_for(path)
        return self.nav.format_message(msg, template)

    # --- File utilities ---

    @staticmethod
    def file_exists(path: str) -> bool:
        if not path:
            raise InvalidInputError("Missing argument to file_exists")
        return os.path.exists(path)

    @staticmethod
    def is_directory(path: str) -> bool:
        if not path:
            raise InvalidInputError("Missing argument to is_directory")
        return os.path.isdir(path)

    @staticmethod
    def executable(path: str) -> bool:
        if not path:
            raise InvalidInputError("Missing argument to executable")
        return os.path.isfile(path) and os.access(path, os.X_OK)
